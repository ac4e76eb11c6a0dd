"""
Tests for the twist and pose helpers.
"""

import numpy as np

from servo_features.geometry import (
    integrate_twist,
    rotation_from_rpy,
    skew,
    transform_point,
    velocity_twist_matrix,
)


def test_skew_is_cross_product():
    a = np.array([1.0, -2.0, 0.5])
    b = np.array([0.3, 4.0, -1.0])
    np.testing.assert_allclose(skew(a) @ b, np.cross(a, b))


def test_rotation_from_rpy_yaw():
    R = rotation_from_rpy(0.0, 0.0, np.pi / 2)
    np.testing.assert_allclose(R @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)


def test_velocity_twist_matrix_pure_rotation():
    R = rotation_from_rpy(0.0, 0.0, np.pi / 2)
    V = velocity_twist_matrix(R, np.zeros(3))
    v = np.array([1.0, 0.0, 0.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(V @ v, [0.0, 1.0, 0.0, 0.0, 0.0, 1.0], atol=1e-12)


def test_velocity_twist_matrix_lever_arm():
    # Rotating about z at the origin of a frame offset along x moves it along y
    V = velocity_twist_matrix(np.eye(3), np.array([1.0, 0.0, 0.0]))
    v = V @ np.array([0.0, 0.0, 0.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(v[:3], [0.0, -1.0, 0.0])


def test_integrate_pure_translation():
    T = integrate_twist(np.array([1.0, 2.0, 3.0, 0.0, 0.0, 0.0]), 0.5)
    np.testing.assert_allclose(T[:3, :3], np.eye(3))
    np.testing.assert_allclose(T[:3, 3], [0.5, 1.0, 1.5])


def test_integrate_rotation():
    T = integrate_twist(np.array([0.0, 0.0, 0.0, 0.0, 0.0, np.pi]), 0.5)
    np.testing.assert_allclose(T[:3, :3], rotation_from_rpy(0.0, 0.0, np.pi / 2), atol=1e-12)
    np.testing.assert_allclose(transform_point(T, [1.0, 0.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-12)
