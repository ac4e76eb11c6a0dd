"""
Drake Wrapper for Generic Features

Exposes a GenericFeature and its ServoTask as a Drake LeafSystem, so an
externally computed feature can drive a diagram the same way the IBVS
controller does. Requires pydrake (pip install servo-features[drake]).
"""

import numpy as np
from pydrake.all import LeafSystem

from servo_features.basic_feature import N_DOF
from servo_features.config import ServoParams
from servo_features.generic_feature import GenericFeature
from servo_features.servo import ServoTask


class GenericFeatureServoSystem(LeafSystem):
    """
    LeafSystem running the control law for one generic feature.

    Inputs:
        - s: Vector of size dim (current feature)
        - s_desired: Vector of size dim (desired feature)
        - interaction_matrix: Vector of size 6*dim (L, row-major)
        - dof_mask: Vector of size 6 (optional, defaults to params.dof_mask)

    Outputs:
        - desired_spatial_velocity: Vector of size 6 (twist: [vx, vy, vz, wx, wy, wz])
        - error: Vector of size dim (s - s_desired)
        - converged: Scalar, 1.0 once the task converged
    """

    def __init__(self, dim, params=None):
        """
        Args:
            dim: Feature dimension
            params: ServoParams (defaults read from the environment)
        """
        LeafSystem.__init__(self)

        self.dim = dim
        self.params = ServoParams() if params is None else params

        self.feature = GenericFeature(dim)
        self.desired = GenericFeature(dim)
        self.task = ServoTask(self.params)
        self.task.add_feature(self.feature, self.desired)

        # Input ports
        self.s_input = self.DeclareVectorInputPort("s", size=dim)
        self.s_desired_input = self.DeclareVectorInputPort("s_desired", size=dim)
        self.interaction_input = self.DeclareVectorInputPort(
            "interaction_matrix",
            size=N_DOF * dim
        )
        # Optional input: dynamic DOF mask (if not connected, uses params.dof_mask)
        self.dof_mask_input = self.DeclareVectorInputPort("dof_mask", size=N_DOF)

        # Output ports
        self.velocity_output = self.DeclareVectorOutputPort(
            "desired_spatial_velocity",
            size=N_DOF,
            calc=self._calc_velocity
        )
        self.error_output = self.DeclareVectorOutputPort(
            "error",
            size=dim,
            calc=self._calc_error
        )
        self.converged_output = self.DeclareVectorOutputPort(
            "converged",
            size=1,
            calc=self._calc_converged
        )

    def _update_features(self, context):
        """Push the input port values into the generic features."""
        self.feature.set_s(self.s_input.Eval(context))
        self.desired.set_s(self.s_desired_input.Eval(context))
        L_flat = self.interaction_input.Eval(context)
        self.feature.set_interaction_matrix(np.asarray(L_flat).reshape(self.dim, N_DOF))

    def _calc_velocity(self, context, output):
        """Compute desired spatial velocity from inputs."""
        self._update_features(context)

        active_dof_mask = None
        if self.dof_mask_input.HasValue(context):
            active_dof_mask = self.dof_mask_input.Eval(context)

        output.SetFromVector(self.task.compute_control_law(dof_mask=active_dof_mask))

    def _calc_error(self, context, output):
        self._update_features(context)
        output.SetFromVector(self.feature.error(self.desired))

    def _calc_converged(self, context, output):
        """Output convergence flag (1.0 if converged, 0.0 otherwise)."""
        output.SetFromVector(np.array([1.0 if self.task.converged else 0.0]))
