"""
Visual Feature Interface

Every feature handed to ServoTask exposes the same capabilities:

    dim                          number of components of s
    interaction(select)          rows of the interaction matrix L (k x 6)
    error(s_star, select)        s - s* on the selected components
    error(select)                injected error (features that support it)

The solver only relies on this interface, never on the concrete class.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from servo_features.errors import DimensionMismatchError
from servo_features.selection import FEATURE_ALL, Selector, selected_indices

# Number of velocity degrees of freedom [vx, vy, vz, wx, wy, wz]
N_DOF = 6


class BasicFeature(ABC):
    """
    Base class for visual features.

    Holds the feature vector s, whose length is fixed at construction.
    Subclasses provide the interaction matrix and the error computation.
    """

    name = "feature"

    def __init__(self, dim: int):
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise TypeError(f"Feature dimension must be an integer, got {type(dim).__name__}")
        if dim < 1:
            raise DimensionMismatchError(f"Feature dimension must be >= 1, got {dim}")
        self._dim = int(dim)
        self.s = np.zeros(self._dim)

    @property
    def dim(self) -> int:
        return self._dim

    def get_dimension(self, select: Selector = FEATURE_ALL) -> int:
        """Number of components kept by the selection."""
        return len(self._selected(select))

    def get_s(self) -> np.ndarray:
        """Copy of the current feature vector."""
        return self.s.copy()

    def _selected(self, select: Selector) -> List[int]:
        return selected_indices(select, self._dim)

    def _desired_vector(self, s_star) -> np.ndarray:
        """Desired features as an array, from another feature or an array-like."""
        if isinstance(s_star, BasicFeature):
            s_star = s_star.s
        s_star = np.asarray(s_star, dtype=float).reshape(-1)
        if s_star.shape[0] != self._dim:
            raise DimensionMismatchError(
                f"Desired feature has {s_star.shape[0]} components, expected {self._dim}"
            )
        return s_star

    @abstractmethod
    def interaction(self, select: Selector = FEATURE_ALL) -> np.ndarray:
        """Interaction matrix rows for the selected components, shape (k, 6)."""

    @abstractmethod
    def error(self, s_star=None, select: Selector = FEATURE_ALL) -> np.ndarray:
        """Feature error on the selected components, shape (k,)."""

    def injected_error_ready(self) -> bool:
        """Whether error() without s_star would return a fresh injected error."""
        return False

    @abstractmethod
    def print(self, select: Selector = FEATURE_ALL) -> None:
        """Print the selected components."""

    @abstractmethod
    def display(self, cam=None, image: Optional[np.ndarray] = None, color=(0, 255, 0)) -> None:
        """Draw the feature on an image."""

    @abstractmethod
    def duplicate(self) -> "BasicFeature":
        """Independent copy of the feature."""
