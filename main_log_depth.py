"""
Log-depth visual servoing demo.

Servoes a simulated camera on a single 3D point using two generic features:
    - the normalized image coordinates (x, y) of the point, desired at (0, 0)
    - log(Z / Z*), whose desired value is zero, injected with set_error()

No camera model or rendering is involved: the point is moved in the camera
frame by integrating the commanded twist.
"""

import argparse

import numpy as np

from servo_features import GenericFeature, ServoParams, ServoTask
from servo_features.geometry import integrate_twist, transform_point


def point_interaction_matrix(x, y, Z):
    """Interaction matrix of the normalized image point (x, y) at depth Z."""
    return np.array([
        [-1.0 / Z, 0.0, x / Z, x * y, -(1.0 + x * x), y],
        [0.0, -1.0 / Z, y / Z, 1.0 + y * y, -x * y, -x],
    ])


def log_depth_interaction_matrix(x, y, Z):
    """Interaction matrix of log(Z)."""
    return np.array([[0.0, 0.0, -1.0 / Z, -y, x, 0.0]])


def run(point, Z_des, dt=0.05, max_steps=2000, params=None, verbose=True):
    """
    Run the servo loop until convergence.

    Args:
        point: Initial 3D point in the camera frame (meters), Z > 0
        Z_des: Desired depth (meters)
        dt: Control period (seconds)
        max_steps: Maximum number of control cycles
        params: ServoParams

    Returns:
        tuple: (final point in the camera frame, number of cycles, converged flag)
    """
    P = np.asarray(point, dtype=float)
    if P[2] <= 0.0 or Z_des <= 0.0:
        raise ValueError("Point depth and desired depth must be positive")

    xy = GenericFeature(2)
    xy_des = GenericFeature(2)
    xy_des.set_s(0.0, 0.0)
    log_z = GenericFeature(1)

    task = ServoTask(params)
    task.add_feature(xy, xy_des)
    task.add_feature(log_z, injected_error=True)

    step = 0
    for step in range(1, max_steps + 1):
        X, Y, Z = P
        x, y = X / Z, Y / Z

        # Update the current features
        xy.set_s(x, y)
        xy.set_interaction_matrix(point_interaction_matrix(x, y, Z))
        log_z.set_s(np.log(Z))
        log_z.set_interaction_matrix(log_depth_interaction_matrix(x, y, Z))
        log_z.set_error([np.log(Z / Z_des)])

        v = task.compute_control_law()

        if verbose and (step == 1 or step % 20 == 0):
            print(f"[DEMO] step={step:4d} | x={x:+.4f} y={y:+.4f} Z={Z:.4f} | twist={np.round(v, 4)}")

        if task.converged:
            break

        # New camera pose in the old camera frame, point seen from the new pose
        T = integrate_twist(v, dt)
        P = transform_point(np.linalg.inv(T), P)

    if verbose:
        status = "converged" if task.converged else "did not converge"
        print(f"[DEMO] {status} after {step} steps, point in camera frame: {np.round(P, 4)}")
    return P, step, task.converged


def main():
    parser = argparse.ArgumentParser(description="Servo a camera on a point with log(Z) as a generic feature.")
    parser.add_argument("--point", type=float, nargs=3, default=[0.1, -0.05, 2.0], metavar=("X", "Y", "Z"),
                        help="Initial point position in the camera frame (meters)")
    parser.add_argument("--z-des", type=float, default=1.0, help="Desired depth (meters)")
    parser.add_argument("--dt", type=float, default=0.05, help="Control period (seconds)")
    parser.add_argument("--max-steps", type=int, default=2000)
    parser.add_argument("--gain", type=float, default=None, help="Override SERVO_GAIN")
    args = parser.parse_args()

    params = ServoParams()
    if args.gain is not None:
        params.gain = args.gain

    run(args.point, args.z_des, dt=args.dt, max_steps=args.max_steps, params=params)


if __name__ == "__main__":
    main()
