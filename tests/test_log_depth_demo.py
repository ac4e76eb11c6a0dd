"""
End-to-end check of the log-depth demo loop.
"""

import numpy as np
import pytest

from main_log_depth import log_depth_interaction_matrix, point_interaction_matrix, run
from servo_features import ServoParams


@pytest.fixture
def params():
    return ServoParams(
        gain=0.5,
        dls_lambda=0.0,
        dof_mask=np.ones(6),
        error_threshold=1e-3,
        convergence_window=5,
        use_camera_to_ee_adjoint=False,
        debug=False,
    )


def test_interaction_matrices_shapes():
    assert point_interaction_matrix(0.1, 0.2, 2.0).shape == (2, 6)
    np.testing.assert_allclose(
        log_depth_interaction_matrix(0.1, 0.2, 2.0),
        [[0.0, 0.0, -0.5, -0.2, 0.1, 0.0]],
    )


def test_reaches_desired_depth(params):
    P, steps, converged = run([0.1, -0.05, 2.0], 1.0, dt=0.05, max_steps=2000, params=params, verbose=False)
    assert converged
    assert steps < 2000
    assert P[2] == pytest.approx(1.0, abs=1e-2)
    assert abs(P[0] / P[2]) < 1e-2
    assert abs(P[1] / P[2]) < 1e-2


def test_rejects_negative_depth(params):
    with pytest.raises(ValueError):
        run([0.0, 0.0, -1.0], 1.0, params=params, verbose=False)
