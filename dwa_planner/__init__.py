# --- START OF FILE dwa_planner/__init__.py ---
"""
DWA Planner: a Dynamic Window Approach local planner for mobile robots.

Given a goal pose in the robot frame, the current velocity and a live obstacle
field, the planner repeatedly chooses a short-horizon velocity command that
moves toward the goal while keeping clear of obstacles.

Key classes are imported to the top level, for example:

from dwa_planner import DWAConfig, ControlLoop
"""

# Import key classes from submodules to make them directly accessible
# from the 'dwa_planner' package.
from .config import DWAConfig
from .exceptions import FootprintError, FrameTransformError, PlannerError
from .models import CostTriple, Pose2D, State, TrajectoryStyle, VelocityCommand, Window
from .dynamic_window import calc_dynamic_window, sample_window
from .trajectory import generate_trajectory
from .cost import CostEvaluator
from .planner import DWAPlanner, Maneuver, PlannerMode
from .inputs import InputState, StalenessWatchdog
from .loop import ControlLoop, TickOutput
from .utils.geometry import Footprint
from .utils.obstacles import LaserScan, OccupancyGrid

# Define the public API of this package.
__all__ = [
    # From config.py / exceptions.py
    "DWAConfig",
    "PlannerError",
    "FootprintError",
    "FrameTransformError",

    # From models.py
    "State",
    "Pose2D",
    "Window",
    "VelocityCommand",
    "CostTriple",
    "TrajectoryStyle",

    # Planning core
    "calc_dynamic_window",
    "sample_window",
    "generate_trajectory",
    "CostEvaluator",
    "DWAPlanner",
    "PlannerMode",
    "Maneuver",

    # Inputs and control loop
    "InputState",
    "StalenessWatchdog",
    "ControlLoop",
    "TickOutput",

    # From utils/
    "Footprint",
    "LaserScan",
    "OccupancyGrid",
]
# --- END OF FILE dwa_planner/__init__.py ---
