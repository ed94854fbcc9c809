# --- START OF FILE dwa_planner/exceptions.py ---
"""
Exception types raised by the DWA planner.
"""


class PlannerError(Exception):
    """Base class for all planner errors."""


class FootprintError(PlannerError, ValueError):
    """The robot footprint is not a polygon the geometry routines can handle."""


class FrameTransformError(PlannerError):
    """A goal could not be expressed in the robot frame."""

# --- END OF FILE dwa_planner/exceptions.py ---
