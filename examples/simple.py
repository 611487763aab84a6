#!/usr/bin/env python3
"""Track a turning target with alternating lidar and radar readings.

Optionally generates a matplotlib plot if matplotlib is installed.

Usage:
    python simple.py              # text output only
    python simple.py --plot       # with matplotlib visualization
    python simple.py --verbose    # log every NIS score
"""

import argparse
import logging
import math

import numpy as np

from ctrvukf import (
    LidarMeasurement,
    NisMonitor,
    RadarMeasurement,
    SensorType,
    UnscentedKalmanFilter,
)

# ---------------------------------------------------------------------------
# Ground truth
# ---------------------------------------------------------------------------

SPEED = 5.0      # m/s
YAW_RATE = 0.15  # rad/s


def truth_at(t):
    yaw = 0.3 + YAW_RATE * t
    r = SPEED / YAW_RATE
    px = 25.0 + r * (math.sin(yaw) - math.sin(0.3))
    py = 5.0 + r * (math.cos(0.3) - math.cos(yaw))
    return np.array([px, py, SPEED, yaw, YAW_RATE])


def sense(step, state, rng, dt_us):
    px, py, v, yaw, _ = state
    if step % 2 == 0:
        z = np.array([px, py]) + rng.normal(0, 0.15, size=2)
        return LidarMeasurement(step * dt_us, px=z[0], py=z[1])
    rho = math.hypot(px, py)
    rho_dot = (px * v * math.cos(yaw) + py * v * math.sin(yaw)) / rho
    z = np.array([rho, math.atan2(py, px), rho_dot]) + rng.normal(0, [0.3, 0.03, 0.3])
    return RadarMeasurement(step * dt_us, rho=z[0], phi=z[1], rho_dot=z[2])


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


def run(duration=20.0, rate=20.0, std_a=0.5, std_yawdd=0.5, plot=False):
    rng = np.random.default_rng(42)
    dt_us = int(1e6 / rate)
    n_steps = int(duration * rate)

    monitor = NisMonitor()
    ukf = UnscentedKalmanFilter(std_a=std_a, std_yawdd=std_yawdd, monitor=monitor)

    truth = np.zeros((n_steps, 5))
    estimate = np.zeros((n_steps, 5))

    for step in range(n_steps):
        truth[step] = truth_at(step * dt_us / 1e6)
        ukf.process_measurement(sense(step, truth[step], rng, dt_us))
        estimate[step] = ukf.x

        if step % (n_steps // 10) == 0:
            err = math.hypot(*(estimate[step, :2] - truth[step, :2]))
            print(f"  {step * 100 // n_steps:3d}%  "
                  f"t={step * dt_us / 1e6:5.2f}  "
                  f"px={ukf.x[0]:7.3f}  py={ukf.x[1]:7.3f}  "
                  f"v={ukf.x[2]:5.2f}  pos_err={err:.3f}")

    rmse = np.sqrt(np.mean((estimate[50:] - truth[50:]) ** 2, axis=0))
    print(f"\nResults (after convergence):")
    print(f"  RMSE px, py:  {rmse[0]:.4f}, {rmse[1]:.4f} m")
    print(f"  RMSE v:       {rmse[2]:.4f} m/s")
    for sensor in SensorType:
        print(f"  NIS {sensor.name.lower():5s} above {monitor.threshold(sensor):.3f}: "
              f"{monitor.fraction_above(sensor):.1%} "
              f"({'consistent' if monitor.is_consistent(sensor) else 'inconsistent'})")
    print(f"  Final P trace: {np.trace(ukf.P):.6f}")

    if plot:
        _plot(truth, estimate, monitor)


def _plot(truth, estimate, monitor):
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        print("\nInstall matplotlib for plotting: pip install matplotlib")
        return

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    ax1.plot(truth[:, 0], truth[:, 1], "g-", alpha=0.8, label="Truth")
    ax1.plot(estimate[:, 0], estimate[:, 1], "b-", lw=2, label="UKF estimate")
    ax1.set_xlabel("px (m)")
    ax1.set_ylabel("py (m)")
    ax1.set_title("CTRV Tracking with lidar + radar")
    ax1.axis("equal")
    ax1.legend(loc="upper left")
    ax1.grid(True, alpha=0.3)

    for sensor, color in ((SensorType.LIDAR, "r"), (SensorType.RADAR, "m")):
        ax2.plot(monitor.scores(sensor), f"{color}-", alpha=0.6,
                 label=f"NIS {sensor.name.lower()}")
        ax2.axhline(monitor.threshold(sensor), color=color, ls="--")
    ax2.set_xlabel("Update")
    ax2.set_ylabel("NIS")
    ax2.set_title("Normalized Innovation Squared")
    ax2.legend(loc="upper right")
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("ctrv_tracking.svg", dpi=150)
    print("\nSaved: ctrv_tracking.svg")
    plt.show()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="CTRV tracking with lidar and radar")
    parser.add_argument("--duration", type=float, default=20.0)
    parser.add_argument("--std-a", type=float, default=0.5)
    parser.add_argument("--std-yawdd", type=float, default=0.5)
    parser.add_argument("--plot", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("CTRV Unscented Kalman Filter (lidar + radar)")
    print("=" * 45)
    run(duration=args.duration, std_a=args.std_a, std_yawdd=args.std_yawdd,
        plot=args.plot)
