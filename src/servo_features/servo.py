"""
Visual Servoing Control Law

Stacks the features of a task and computes the camera twist

    v = -λ · L⁺ · e

where:
    - v: desired spatial velocity (6D twist [vx, vy, vz, wx, wy, wz])
    - λ: gain parameter
    - L: stacked interaction matrices of all features
    - e: stacked feature errors (s - s*)
    - L⁺: damped least squares pseudoinverse of L

Features are only used through the BasicFeature interface, so generic
features and geometric ones can be mixed in the same task.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from servo_features.basic_feature import N_DOF, BasicFeature
from servo_features.config import ServoParams
from servo_features.errors import NotReadyError
from servo_features.geometry import rotation_from_rpy, velocity_twist_matrix
from servo_features.selection import FEATURE_ALL, Selector


@dataclass
class TaskEntry:
    """
    One feature of the task.

    Attributes:
        feature: Current feature
        desired: Desired feature (BasicFeature or array), None for s* = 0
        select: Components of the feature to use
        injected_error: Read the error injected with set_error() instead of s - s*
    """
    feature: BasicFeature
    desired: Optional[object] = None
    select: Selector = FEATURE_ALL
    injected_error: bool = False


class ServoTask:
    """
    Visual servoing task built from any number of features.

    Each cycle, update the features (set_s, set_interaction_matrix, ...) then
    call compute_control_law().
    """

    def __init__(self, params: Optional[ServoParams] = None):
        self.params = ServoParams() if params is None else params
        self.entries: List[TaskEntry] = []

        self.L = None
        self.e = None
        self.v = None

        # Track error history for convergence detection
        self.error_history = []
        self.converged = False
        self._debug_count = 0

        self.eVc = None
        if self.params.use_camera_to_ee_adjoint:
            # Camera pose in the end-effector frame maps camera twists to EE twists
            R_ec = rotation_from_rpy(*np.deg2rad(self.params.eih_rpy_deg))
            self.eVc = velocity_twist_matrix(R_ec, self.params.eih_t)

    def add_feature(
        self,
        feature: BasicFeature,
        desired=None,
        select: Selector = FEATURE_ALL,
        injected_error: bool = False,
    ) -> None:
        """
        Add a feature to the task.

        Args:
            feature: Current feature
            desired: Desired feature, or array of length feature.dim. None
                     means the desired value is zero.
            select: Components of the feature to control
            injected_error: Use the error given to feature.set_error() each
                            cycle (desired must be None)
        """
        if injected_error and desired is not None:
            raise ValueError("desired must be None when injected_error is True")
        self.entries.append(TaskEntry(feature, desired, select, injected_error))

    def clear(self) -> None:
        """Remove all features and reset convergence tracking."""
        self.entries = []
        self.error_history = []
        self.converged = False
        self.L = self.e = self.v = None

    @property
    def dimension(self) -> int:
        """Total number of rows of the stacked error."""
        return sum(entry.feature.get_dimension(entry.select) for entry in self.entries)

    def compute_interaction_matrix(self) -> np.ndarray:
        """Stacked interaction matrix, one block per feature in insertion order."""
        self._check_not_empty()
        blocks = [entry.feature.interaction(entry.select) for entry in self.entries]
        self.L = np.vstack(blocks)
        return self.L

    def compute_error(self) -> np.ndarray:
        """
        Stacked feature error, one block per feature in insertion order.

        Injected errors are only consumed once every one of them is ready, so
        a NotReadyError leaves all features as they were.
        """
        self._check_not_empty()
        for k, entry in enumerate(self.entries):
            if entry.injected_error and not entry.feature.injected_error_ready():
                raise NotReadyError(
                    f"Feature {k} ({entry.feature.name}) has no fresh injected error, "
                    "call set_error() before computing the control law"
                )

        blocks = []
        for entry in self.entries:
            if entry.injected_error:
                blocks.append(entry.feature.error(select=entry.select))
            else:
                desired = entry.desired
                if desired is None:
                    desired = np.zeros(entry.feature.dim)
                blocks.append(entry.feature.error(desired, select=entry.select))
        self.e = np.concatenate(blocks)
        return self.e

    def compute_twist(self, L, error, lam=None, dof_mask=None) -> np.ndarray:
        """
        Compute desired spatial velocity from interaction matrix and error.

        Uses Damped Least Squares (DLS) for robustness:
        v = -λ · L_DLS⁺ · e

        where L_DLS⁺ = L^T (L L^T + μ² I)^(-1)

        Args:
            L: Interaction matrix (k, 6)
            error: Feature error vector (k,)
            lam: Control gain (defaults to params.gain)
            dof_mask: Optional DOF mask (if None, uses params.dof_mask)

        Returns:
            numpy array: (6,) desired spatial velocity, zero on disabled DOFs
        """
        if lam is None:
            lam = self.params.gain
        if dof_mask is None:
            dof_mask = self.params.dof_mask
        dof_mask = np.asarray(dof_mask, dtype=float)

        allowed_idx = np.where(dof_mask > 0.5)[0]
        if allowed_idx.size == 0:
            if not hasattr(self, '_dof_mask_warned'):
                print(f"[SERVO] WARNING: All DOFs disabled (mask={dof_mask}), returning zero velocity")
                self._dof_mask_warned = True
            return np.zeros(N_DOF)
        if L.shape[0] == 0:
            return np.zeros(N_DOF)

        L_red = L[:, allowed_idx]

        mu = self.params.dls_lambda
        if mu > 0.0:
            dls_term = L_red @ L_red.T + (mu ** 2) * np.eye(L_red.shape[0])
            L_pinv = L_red.T @ np.linalg.inv(dls_term)
        else:
            L_pinv = np.linalg.pinv(L_red)

        v = np.zeros(N_DOF, dtype=float)
        v[allowed_idx] = -lam * (L_pinv @ error)
        return v

    def compute_control_law(self, dof_mask=None) -> np.ndarray:
        """
        Run one control cycle.

        Args:
            dof_mask: Optional DOF mask for this cycle (if None, uses params.dof_mask)

        Returns:
            numpy array: (6,) twist, in the camera frame or, when
            params.use_camera_to_ee_adjoint is set, in the end-effector frame
        """
        L = self.compute_interaction_matrix()
        e = self.compute_error()

        error_magnitude = float(np.linalg.norm(e) / np.sqrt(len(e))) if len(e) else 0.0
        self.error_history.append(error_magnitude)
        window = self.params.convergence_window
        if len(self.error_history) > window:
            self.error_history.pop(0)
        self.converged = (
            len(self.error_history) >= window
            and all(err < self.params.error_threshold for err in self.error_history)
        )

        v = self.compute_twist(L, e, dof_mask=dof_mask)
        if self.eVc is not None:
            v = self.eVc @ v
        self.v = v

        if self.params.debug and self._debug_count < 5:
            print(
                f"[SERVO] err={e} | rms={error_magnitude:.4g} | "
                f"dof_mask={self.params.dof_mask} | twist={v}",
                flush=True,
            )
            self._debug_count += 1

        return v

    def print(self) -> None:
        """Print the task features and the last computed quantities."""
        print(f"[SERVO] Task with {len(self.entries)} feature(s), dimension {self.dimension}")
        for k, entry in enumerate(self.entries):
            mode = "injected error" if entry.injected_error else "s - s*"
            print(f"[SERVO] feature {k}: {entry.feature.name} (dim={entry.feature.dim}, {mode})")
        if self.v is not None:
            print(f"[SERVO] last error={self.e} | last twist={self.v} | converged={self.converged}")

    def _check_not_empty(self):
        if not self.entries:
            raise ValueError("Servo task has no features, call add_feature() first")
