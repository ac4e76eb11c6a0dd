"""
Servo Features

User-extensible visual features for image-based visual servoing (IBVS).

A visual feature is a vector s together with its interaction matrix L, which
maps the 6-DOF camera twist [vx, vy, vz, wx, wy, wz] to ds/dt. GenericFeature
lets you plug in any s and L computed outside this package and use them in the
same control law as the built-in features.
"""

from servo_features.basic_feature import BasicFeature
from servo_features.config import ServoParams, parse_dof_mask
from servo_features.errors import (
    DimensionMismatchError,
    FeatureError,
    NotReadyError,
)
from servo_features.generic_feature import ErrorStatus, GenericFeature
from servo_features.selection import (
    FEATURE_ALL,
    feature_line,
    is_selected,
    selected_indices,
)
from servo_features.servo import ServoTask

__version__ = "0.1.0"

__all__ = [
    "BasicFeature",
    "DimensionMismatchError",
    "ErrorStatus",
    "FEATURE_ALL",
    "FeatureError",
    "GenericFeature",
    "NotReadyError",
    "ServoParams",
    "ServoTask",
    "feature_line",
    "is_selected",
    "parse_dof_mask",
    "selected_indices",
]
