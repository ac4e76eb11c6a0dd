"""
Rigid-Body Helpers for Twists

Twists are ordered [v; w] = [vx, vy, vz, wx, wy, wz], the same column order
as the interaction matrices.
"""

import numpy as np


def skew(v: np.ndarray) -> np.ndarray:
    """
    Cross-product matrix [v]x, so that skew(a) @ b == np.cross(a, b).
    """
    x, y, z = v
    return np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]], dtype=float)


def rotation_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Rotation matrix R = Rz(yaw) @ Ry(pitch) @ Rx(roll), angles in radians."""
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cyw, syw = np.cos(yaw), np.sin(yaw)

    Rz = np.array([[cyw, -syw, 0.0], [syw, cyw, 0.0], [0.0, 0.0, 1.0]], dtype=float)
    Ry = np.array([[cp, 0.0, sp], [0.0, 1.0, 0.0], [-sp, 0.0, cp]], dtype=float)
    Rx = np.array([[1.0, 0.0, 0.0], [0.0, cr, -sr], [0.0, sr, cr]], dtype=float)
    return Rz @ Ry @ Rx


def velocity_twist_matrix(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """
    6x6 matrix changing the frame a twist is expressed in.

    With (R, t) the pose of frame b in frame a, a twist v_b expressed at the
    origin of b becomes v_a = V @ v_b with

        V = [ R   [t]x R ]
            [ 0      R   ]
    """
    R = np.asarray(R, dtype=float)
    t = np.asarray(t, dtype=float)
    upper = np.hstack((R, skew(t) @ R))
    lower = np.hstack((np.zeros((3, 3)), R))
    return np.vstack((upper, lower))


def integrate_twist(twist: np.ndarray, dt: float) -> np.ndarray:
    """
    Pose reached after applying a constant body twist for dt seconds.

    Args:
        twist: (6,) body twist [v; w]
        dt: Duration in seconds

    Returns:
        numpy array: 4x4 homogeneous transform exp([twist] dt)
    """
    v = np.asarray(twist[:3], dtype=float)
    w = np.asarray(twist[3:], dtype=float)
    w_norm = np.linalg.norm(w)
    theta = w_norm * dt

    if theta < 1e-9:
        R = np.eye(3) + skew(w) * dt
        t = v * dt
    else:
        W = skew(w / w_norm)
        R = np.eye(3) + np.sin(theta) * W + (1.0 - np.cos(theta)) * (W @ W)
        # Left Jacobian of SO(3) applied to v
        J = (
            np.eye(3) * dt
            + (1.0 - np.cos(theta)) / w_norm * W
            + (theta - np.sin(theta)) / w_norm * (W @ W)
        )
        t = J @ v

    T = np.eye(4)
    T[:3, :3] = R
    T[:3, 3] = t
    return T


def transform_point(T: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Apply a 4x4 homogeneous transform to a 3D point."""
    return T[:3, :3] @ np.asarray(p, dtype=float) + T[:3, 3]
