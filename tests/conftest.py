import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from dwa_planner import DWAConfig, Pose2D
from dwa_planner.inputs import FOOTPRINT, GOAL, OBSTACLES, ODOMETRY, InputSnapshot


@pytest.fixture
def config():
    return DWAConfig()


def make_snapshot(goal=(5.0, 0.0, 0.0), velocity=0.0, yawrate=0.0, obstacles=None, footprint=None,
                  target_velocity=0.8, dist_to_goal_th=0.3):
    received = frozenset({GOAL, ODOMETRY, OBSTACLES} | ({FOOTPRINT} if footprint is not None else set()))
    return InputSnapshot(
        goal=Pose2D(*goal),
        velocity=velocity,
        yawrate=yawrate,
        obstacles=np.zeros((0, 2)) if obstacles is None else np.asarray(obstacles, dtype=np.float64),
        footprint=footprint,
        target_velocity=target_velocity,
        dist_to_goal_th=dist_to_goal_th,
        received=received,
        updated=received,
    )
