"""
Tests for ServoParams and the environment parsing helpers.
"""

import numpy as np
import pytest

from servo_features.config import ServoParams, parse_bool, parse_dof_mask


class TestParseDofMask:

    def test_valid(self):
        np.testing.assert_array_equal(parse_dof_mask("1,1,1,0,0,0"), [1, 1, 1, 0, 0, 0])

    @pytest.mark.parametrize("mask", ["1,1,1", "1,1,1,1,1,1,1", "1,2,1,0,0,0"])
    def test_invalid(self, mask):
        with pytest.raises(ValueError):
            parse_dof_mask(mask)


@pytest.mark.parametrize("value,expected", [("1", True), ("TRUE", True), ("yes", True), ("0", False), ("no", False)])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


class TestServoParams:

    def test_defaults(self, monkeypatch):
        for name in ["SERVO_GAIN", "DLS_LAMBDA", "CONTROL_DOF_MASK", "CONVERGENCE_WINDOW", "DEBUG_SERVO"]:
            monkeypatch.delenv(name, raising=False)
        params = ServoParams()
        assert params.gain == 0.5
        assert params.dls_lambda == 0.01
        np.testing.assert_array_equal(params.dof_mask, np.ones(6))
        assert params.convergence_window == 5
        assert params.debug is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SERVO_GAIN", "1.5")
        monkeypatch.setenv("CONTROL_DOF_MASK", "0,0,1,0,0,0")
        monkeypatch.setenv("USE_CAMERA_TO_EE_ADJOINT", "true")
        monkeypatch.setenv("EIH_RZ_DEG", "-90")
        params = ServoParams()
        assert params.gain == 1.5
        np.testing.assert_array_equal(params.dof_mask, [0, 0, 1, 0, 0, 0])
        assert params.use_camera_to_ee_adjoint is True
        np.testing.assert_array_equal(params.eih_rpy_deg, [0.0, 0.0, -90.0])

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("SERVO_GAIN", "3.0")
        assert ServoParams(gain=0.1).gain == 0.1

    def test_bad_dof_mask(self):
        with pytest.raises(ValueError):
            ServoParams(dof_mask=[1, 1, 1])

    def test_bad_window(self):
        with pytest.raises(ValueError):
            ServoParams(convergence_window=0)
