"""
Generic Visual Feature

Feature whose vector s and interaction matrix L are computed by the caller.
Use it for features that have no dedicated class, e.g. log(Z) of a point at
depth Z seen at normalized coordinates (x, y):

    s = log(Z)
    L = [ 0  0  -1/Z  -y  x  0 ]

    log_z = GenericFeature(1)
    log_z_des = GenericFeature(1)
    log_z_des.set_s(np.log(Z_des))

    task = ServoTask()
    task.add_feature(log_z, log_z_des)
    while running:
        log_z.set_s(np.log(Z))
        log_z.set_interaction_matrix(np.array([[0, 0, -1 / Z, -y, x, 0]]))
        v = task.compute_control_law()

When the desired value is fixed to zero (e.g. s = log(Z / Z*)) add the
feature alone and either let the task use s as the error, or inject an
error you computed yourself with set_error() every cycle.
"""

import copy
import numbers
from enum import Enum

import numpy as np

from servo_features.basic_feature import N_DOF, BasicFeature
from servo_features.errors import DimensionMismatchError, NotReadyError
from servo_features.selection import FEATURE_ALL, Selector


class ErrorStatus(Enum):
    """Freshness of the injected error."""
    NOT_INITIALIZED = "not_initialized"        # set_error() never called
    INITIALIZED = "initialized"                # injected error ready to be read
    HAS_TO_BE_UPDATED = "has_to_be_updated"    # read once, needs a new set_error()


class GenericFeature(BasicFeature):
    """
    Feature of arbitrary dimension with caller-supplied s, L and error.

    Before any setter is called s is zero and interaction() returns a
    zero-filled (dim, 6) matrix. The injected error is not readable until
    set_error() is called, and each injected error can be read only once.
    """

    name = "generic"

    def __init__(self, dim: int):
        """
        Args:
            dim: Number of components of the feature (>= 1)
        """
        super().__init__(dim)
        self.init()

    def init(self):
        """Reset s, L and the injected error to zero."""
        self.s = np.zeros(self.dim)
        self.L = np.zeros((self.dim, N_DOF))
        self.err = np.zeros(self.dim)
        self.error_status = ErrorStatus.NOT_INITIALIZED

    # ------------------------------------------------------------------
    # Setters (called by the user once per control cycle)
    # ------------------------------------------------------------------

    def set_interaction_matrix(self, L) -> None:
        """
        Set the interaction matrix used by the next interaction() calls.

        Args:
            L: (dim, 6) array-like

        Raises:
            DimensionMismatchError: L is not dim x 6
        """
        L = np.array(L, dtype=float)
        if L.ndim != 2 or L.shape != (self.dim, N_DOF):
            raise DimensionMismatchError(
                f"Interaction matrix must be {self.dim}x{N_DOF}, got shape {L.shape}"
            )
        self.L = L

    def get_interaction_matrix(self) -> np.ndarray:
        """Full interaction matrix, ignoring any selection."""
        return self.L.copy()

    def set_s(self, *values) -> None:
        """
        Set the feature vector.

        Either pass one array-like of length dim, or one, two or three
        scalars for features of that dimension:

            f3.set_s(np.array([1.0, 2.0, 3.0]))
            f3.set_s(1.0, 2.0, 3.0)

        Raises:
            DimensionMismatchError: Wrong number of components
        """
        if len(values) == 1 and np.ndim(values[0]) > 0:
            s = np.array(values[0], dtype=float).reshape(-1)
        elif 1 <= len(values) <= 3 and all(np.ndim(v) == 0 for v in values):
            s = np.array(values, dtype=float)
        else:
            raise DimensionMismatchError(
                "set_s expects one vector or 1 to 3 scalars, "
                f"got {len(values)} argument(s)"
            )

        if s.shape[0] != self.dim:
            raise DimensionMismatchError(
                f"Feature vector has {s.shape[0]} components, expected {self.dim}"
            )
        self.s = s

    def set_error(self, error) -> None:
        """
        Inject a pre-computed error, read back by error() without s_star.

        The length is checked against the full dimension, even if the error
        will later be read through a selection.

        Raises:
            DimensionMismatchError: len(error) != dim
        """
        error = np.array(error, dtype=float).reshape(-1)
        if error.shape[0] != self.dim:
            raise DimensionMismatchError(
                f"Error vector has {error.shape[0]} components, expected {self.dim}"
            )
        self.err = error
        self.error_status = ErrorStatus.INITIALIZED

    # ------------------------------------------------------------------
    # Read by the control law
    # ------------------------------------------------------------------

    def interaction(self, select: Selector = FEATURE_ALL) -> np.ndarray:
        """
        Rows of L for the selected components, in ascending component order.

        L is not tracked for freshness; it is the caller's job to set it
        every cycle.

        Returns:
            numpy array: (k, 6) interaction matrix
        """
        return self.L[self._selected(select), :].copy()

    def error(self, s_star=None, select: Selector = FEATURE_ALL) -> np.ndarray:
        """
        Feature error on the selected components.

        With s_star (another feature or an array of length dim) this returns
        s - s_star and leaves the injected error alone. Without it, the error
        injected by set_error() is returned and marked as consumed.

        An integer first argument is a selector, not a desired value, so both
        error(FEATURE_ALL) and error(select=FEATURE_ALL) read the injected
        error. Give a dim 1 desired value as a float or an array.

        Raises:
            DimensionMismatchError: s_star does not have dim components
            NotReadyError: No fresh injected error to return
        """
        if isinstance(s_star, numbers.Integral):
            if select != FEATURE_ALL:
                raise TypeError("error() got a selector both positionally and as select=")
            s_star, select = None, s_star

        indices = self._selected(select)

        if s_star is not None:
            s_star = self._desired_vector(s_star)
            return self.s[indices] - s_star[indices]

        if self.error_status == ErrorStatus.NOT_INITIALIZED:
            raise NotReadyError(
                "Error has not been initialized, call set_error() before error()"
            )
        if self.error_status == ErrorStatus.HAS_TO_BE_UPDATED:
            raise NotReadyError(
                "Error was already used, call set_error() again before error()"
            )

        self.error_status = ErrorStatus.HAS_TO_BE_UPDATED
        return self.err[indices].copy()

    def injected_error_ready(self) -> bool:
        return self.error_status == ErrorStatus.INITIALIZED

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def print(self, select: Selector = FEATURE_ALL) -> None:
        """Print s, the rows of L and the injected error for the selection."""
        indices = self._selected(select)
        print(f"[GENERIC_FEATURE] dim={self.dim} | error_status={self.error_status.value}")
        for i in indices:
            line = f"[GENERIC_FEATURE]   s[{i}]={self.s[i]:.6g} | L[{i}]={self.L[i]}"
            if self.error_status != ErrorStatus.NOT_INITIALIZED:
                line += f" | err[{i}]={self.err[i]:.6g}"
            print(line)

    def display(self, cam=None, image=None, color=(0, 255, 0)) -> None:
        """
        Not supported: a generic feature has no 2D geometry to draw.

        Wrap or subclass the feature with the geometric knowledge if you need
        to visualize it. This only prints a warning (once per instance).
        """
        if not hasattr(self, '_display_warned'):
            print("[GENERIC_FEATURE] WARNING: display() is not implemented for generic features")
            self._display_warned = True

    def duplicate(self) -> "GenericFeature":
        """Independent copy with the same dim, s, L, error and error status."""
        return copy.deepcopy(self)

    def __repr__(self):
        return (
            f"GenericFeature(dim={self.dim}, s={self.s.tolist()}, "
            f"error_status={self.error_status.name})"
        )
