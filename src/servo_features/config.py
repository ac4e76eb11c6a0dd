"""
Servo Configuration

Control-law parameters, each overridable through an environment variable:

    SERVO_GAIN=0.8 CONTROL_DOF_MASK=1,1,1,0,0,0 python main_log_depth.py
"""

import os
from dataclasses import dataclass, field

import numpy as np


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def parse_dof_mask(mask_str: str) -> np.ndarray:
    """
    Parse a "vx,vy,vz,wx,wy,wz" mask such as "1,1,1,0,0,0".

    Returns:
        numpy array: (6,) float mask, 1.0 to enable a DOF and 0.0 to disable it
    """
    values = [int(x) for x in mask_str.split(",")]
    if len(values) != 6:
        raise ValueError("CONTROL_DOF_MASK must have 6 comma-separated 0/1 values")
    if any(v not in (0, 1) for v in values):
        raise ValueError(f"CONTROL_DOF_MASK values must be 0 or 1, got {mask_str!r}")
    return np.array(values, dtype=float)


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


@dataclass
class ServoParams:
    """
    Attributes:
        gain: Control gain lambda in v = -lambda * L+ * e
        dls_lambda: Damped least squares regularization (0 gives the plain pseudoinverse)
        dof_mask: 6D array [vx, vy, vz, wx, wy, wz], 1.0 to control the DOF
        error_threshold: RMS error under which a cycle counts as converged
        convergence_window: Consecutive converged cycles needed to report convergence
        use_camera_to_ee_adjoint: Express the command in the end-effector frame
        eih_t: Camera position in the end-effector frame (meters)
        eih_rpy_deg: Camera orientation in the end-effector frame (roll, pitch, yaw in degrees)
        debug: Print the first few control cycles
    """

    gain: float = field(default_factory=lambda: float(_env("SERVO_GAIN", "0.5")))
    dls_lambda: float = field(default_factory=lambda: float(_env("DLS_LAMBDA", "0.01")))
    dof_mask: np.ndarray = field(
        default_factory=lambda: parse_dof_mask(_env("CONTROL_DOF_MASK", "1,1,1,1,1,1"))
    )
    error_threshold: float = field(default_factory=lambda: float(_env("ERROR_THRESHOLD", "1e-3")))
    convergence_window: int = field(default_factory=lambda: int(_env("CONVERGENCE_WINDOW", "5")))

    # Eye-in-hand extrinsics (camera relative to EE)
    use_camera_to_ee_adjoint: bool = field(
        default_factory=lambda: parse_bool(_env("USE_CAMERA_TO_EE_ADJOINT", "false"))
    )
    eih_t: np.ndarray = field(
        default_factory=lambda: np.array([
            float(_env("EIH_TX", "0.0")),
            float(_env("EIH_TY", "0.0")),
            float(_env("EIH_TZ", "0.0")),
        ])
    )
    eih_rpy_deg: np.ndarray = field(
        default_factory=lambda: np.array([
            float(_env("EIH_RX_DEG", "0.0")),
            float(_env("EIH_RY_DEG", "0.0")),
            float(_env("EIH_RZ_DEG", "0.0")),
        ])
    )

    debug: bool = field(default_factory=lambda: parse_bool(_env("DEBUG_SERVO", "false")))

    def __post_init__(self):
        self.dof_mask = np.array(self.dof_mask, dtype=float)
        if self.dof_mask.shape != (6,):
            raise ValueError("dof_mask must be a 6-element array")
        if self.convergence_window < 1:
            raise ValueError(f"convergence_window must be >= 1, got {self.convergence_window}")
        self.eih_t = np.array(self.eih_t, dtype=float)
        self.eih_rpy_deg = np.array(self.eih_rpy_deg, dtype=float)
