# --- START OF FILE experiments/dwa_scenarios/run_dwa_scenarios.py ---
"""
Closed-loop evaluation of the DWA planner on a handful of fixed scenarios.

For every scenario the script:
1.  Builds a world of circular obstacles and a goal pose in the world frame.
2.  Simulates a planar range sensor and feeds scans, odometry and the goal
    (through a world-to-robot transform) into a `ControlLoop`.
3.  Integrates the commanded velocities until the planner reports that it has
    finished, the robot collides, or the time limit runs out.
4.  Saves a plot of the driven path next to the last tick's trajectory markers,
    and appends a line per run to the results file.
"""

import logging
import math
import os
import time
from typing import Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from dwa_planner import ControlLoop, DWAConfig, FrameTransformError, LaserScan, Pose2D
from dwa_planner.visualization import plot_footprint, plot_markers

WORLD_FRAME = "map"

SCENARIOS: Dict[str, dict] = {
    "open_field": {
        "obstacles": [],
        "goal": (6.0, 0.0, 0.0),
        "config": {},
    },
    "single_obstacle": {
        "obstacles": [(3.0, 0.1, 0.4)],
        "goal": (6.0, 0.0, 0.0),
        "config": {},
    },
    "slalom_with_footprint": {
        "obstacles": [(2.0, 0.6, 0.35), (4.0, -0.6, 0.35), (6.0, 0.6, 0.35)],
        "goal": (8.0, 0.0, 0.0),
        "config": {"use_footprint": True, "footprint": [(0.2, 0.15), (-0.2, 0.15), (-0.2, -0.15), (0.2, -0.15)]},
    },
    "goal_behind": {
        "obstacles": [(2.0, 1.5, 0.3)],
        "goal": (-4.0, 2.0, 2.5),
        "config": {"angle_to_goal_th": 1.0},
    },
}


class SimulatedRangeSensor:
    """Planar range sensor returning the first circle hit along each beam."""

    def __init__(self, num_beams: int = 360, max_range: float = 10.0):
        self.max_range = max_range
        self.angle_min = -math.pi
        self.angle_increment = 2.0 * math.pi / num_beams
        self.beam_angles = self.angle_min + np.arange(num_beams) * self.angle_increment

    def scan(self, x: float, y: float, yaw: float, obstacles: List[Tuple[float, float, float]]) -> LaserScan:
        ranges = np.full(self.beam_angles.shape[0], np.inf)
        if obstacles:
            world_angles = self.beam_angles + yaw
            ray_dx, ray_dy = np.cos(world_angles)[:, np.newaxis], np.sin(world_angles)[:, np.newaxis]
            obs_arr = np.array(obstacles, dtype=np.float64)
            oc_x, oc_y, obs_r = obs_arr[:, 0] - x, obs_arr[:, 1] - y, obs_arr[:, 2]

            ray_to_center_dot = ray_dx * oc_x + ray_dy * oc_y
            discriminant = ray_to_center_dot**2 - (oc_x**2 + oc_y**2 - obs_r**2)
            t = np.full_like(discriminant, np.inf)
            has_intersection = discriminant >= 0
            sqrt_discriminant = np.sqrt(discriminant[has_intersection])
            t1 = ray_to_center_dot[has_intersection] - sqrt_discriminant
            t2 = ray_to_center_dot[has_intersection] + sqrt_discriminant
            t_sol = np.where(t1 > 1e-6, t1, t2)
            t[has_intersection] = np.where(t_sol > 1e-6, t_sol, np.inf)
            ranges = np.min(t, axis=1)
        ranges[ranges > self.max_range] = np.inf
        return LaserScan(self.angle_min, self.angle_increment, ranges.tolist())


def world_to_robot(pose: Pose2D, robot: np.ndarray) -> Pose2D:
    dx, dy = pose.x - robot[0], pose.y - robot[1]
    cos_yaw, sin_yaw = math.cos(robot[2]), math.sin(robot[2])
    yaw = math.atan2(math.sin(pose.yaw - robot[2]), math.cos(pose.yaw - robot[2]))
    return Pose2D(cos_yaw * dx + sin_yaw * dy, -sin_yaw * dx + cos_yaw * dy, yaw)


def is_colliding(robot: np.ndarray, obstacles: List[Tuple[float, float, float]]) -> bool:
    return any(math.hypot(robot[0] - ox, robot[1] - oy) < r for ox, oy, r in obstacles)


def run_scenario(scenario: dict, max_sim_time: float = 60.0) -> dict:
    config = DWAConfig.from_dict({"use_scan_as_input": True, "filter_invalid_ranges": True,
                                  **scenario["config"]})
    robot = np.zeros(5)  # x, y, yaw, v, w in the world frame

    def transform(goal: Pose2D, frame_id: str) -> Pose2D:
        if frame_id != WORLD_FRAME:
            raise FrameTransformError(f"Unknown frame '{frame_id}'")
        return world_to_robot(goal, robot)

    loop = ControlLoop(config, transform=transform)
    sensor = SimulatedRangeSensor()
    obstacles = scenario["obstacles"]
    goal = Pose2D(*scenario["goal"])
    dt = 1.0 / config.hz

    path = [robot[:2].copy()]
    times_ms = []
    result, last_output = "Timeout", None
    for _ in range(int(max_sim_time / dt)):
        loop.on_goal(goal, WORLD_FRAME)
        loop.on_odometry(robot[3], robot[4])
        loop.on_scan(sensor.scan(robot[0], robot[1], robot[2], obstacles))

        start_time = time.perf_counter()
        output = loop.tick()
        times_ms.append((time.perf_counter() - start_time) * 1000)
        if output.allowed:
            last_output = output

        v, w = output.command
        robot[2] += w * dt
        robot[0] += v * math.cos(robot[2]) * dt
        robot[1] += v * math.sin(robot[2]) * dt
        robot[3], robot[4] = v, w
        path.append(robot[:2].copy())

        if is_colliding(robot, obstacles):
            result = "Collision"
            break
        if output.finished:
            result = "Success"
            break

    return {"result": result, "path": np.array(path), "final_pose": robot[:3].copy(),
            "ticks": len(times_ms), "avg_time_ms": float(np.mean(times_ms)) if times_ms else 0.0,
            "last_output": last_output}


def plot_and_save_results(name: str, scenario: dict, run: dict, save_path: str):
    """World view of the driven path beside the last tick's markers in the robot frame."""
    fig, (ax_world, ax_robot) = plt.subplots(1, 2, figsize=(14, 7))
    ax_world.set_facecolor("#e0e0e0")
    for ox, oy, r in scenario["obstacles"]:
        ax_world.add_patch(plt.Circle((ox, oy), r, color='red', alpha=0.6))
    gx, gy, _ = scenario["goal"]
    ax_world.plot(gx, gy, 'g*', markersize=15, label='Goal')
    path = run["path"]
    ax_world.plot(path[:, 0], path[:, 1], 'b--', linewidth=2, label='DWA Trajectory')
    ax_world.plot(path[0, 0], path[0, 1], 'yo', markersize=10, label='Start')
    ax_world.plot(path[-1, 0], path[-1, 1], 'go', markersize=10, label='End')
    ax_world.set_title(f"{name} | {run['result']}")
    ax_world.set_xlabel("X (m)"), ax_world.set_ylabel("Y (m)")
    ax_world.set_aspect('equal', adjustable='datalim'), ax_world.legend(loc='lower right')
    ax_world.grid(True, linestyle=':', color='white')

    output = run["last_output"]
    if output is not None:
        plot_markers(ax_robot, output.candidate_markers)
        if output.selected_marker is not None:
            plot_markers(ax_robot, [output.selected_marker])
        if output.footprint_polygon is not None:
            plot_footprint(ax_robot, output.footprint_polygon)
    ax_robot.set_title("Last planning step (robot frame)")
    ax_robot.set_xlabel("X (m)"), ax_robot.set_ylabel("Y (m)")
    ax_robot.set_aspect('equal', adjustable='datalim'), ax_robot.grid(True, linestyle=':')

    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)


if __name__ == '__main__':
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    OUTPUT_DIR = "experiments/dwa_scenarios/outputs"
    IMG_DIR = os.path.join(OUTPUT_DIR, "images")
    os.makedirs(IMG_DIR, exist_ok=True)
    RESULTS_FILE = os.path.join(OUTPUT_DIR, "DWA.txt")
    with open(RESULTS_FILE, 'w'): pass

    for name, scenario in tqdm(SCENARIOS.items(), desc="Running Scenarios"):
        run = run_scenario(scenario)
        plot_and_save_results(name, scenario, run, os.path.join(IMG_DIR, f"{name}.png"))
        with open(RESULTS_FILE, 'a') as f:
            x, y, yaw = run["final_pose"]
            f.write(f"{name} {run['result']} {run['ticks']} {x:.3f} {y:.3f} {yaw:.3f} {run['avg_time_ms']:.3f}\n")

    print("\n\n" + "="*45)
    print("All scenarios completed!")
    print(f"Results saved in '{OUTPUT_DIR}' directory.")
    print("="*45)

# --- END OF FILE experiments/dwa_scenarios/run_dwa_scenarios.py ---
