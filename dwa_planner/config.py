# --- START OF FILE dwa_planner/config.py ---
"""
Configuration parameters for the DWA local planner.

All values are fixed at startup. Two of them (`target_velocity` and
`dist_to_goal_th`) only provide the initial value of a live override that the
control loop may receive later.
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class DWAConfig:
    """
    Configuration parameters for the DWA planner.
    """

    def __init__(self):
        """Initializes the DWA configuration with default values."""
        # Frame and loop
        self.robot_frame: str = "base_link"
        self.hz: float = 20.0  # Hz

        # Vehicle dynamics parameters
        self.target_velocity: float = 0.8  # m/s
        self.max_velocity: float = 1.0  # m/s
        self.min_velocity: float = 0.0  # m/s
        self.max_yawrate: float = 0.8  # rad/s
        self.max_acceleration: float = 1.0  # m/s^2
        self.max_d_yawrate: float = 2.0  # rad/s^2

        # Prediction and simulation parameters
        self.predict_time: float = 3.0  # s
        self.dt: float = 0.1  # s

        # Sampling of the dynamic window
        self.velocity_samples: int = 3
        self.yawrate_samples: int = 20

        # Cost function weights
        self.to_goal_cost_gain: float = 1.0
        self.speed_cost_gain: float = 1.0
        self.obs_cost_gain: float = 1.0

        # Goal handling
        self.dist_to_goal_th: float = 0.3  # m
        self.turn_direction_th: float = 1.0  # rad
        self.angle_to_goal_th: float = math.pi  # rad

        # Obstacle source
        self.use_scan_as_input: bool = False
        self.angle_resolution: float = 0.2  # rad, ray spacing for occupancy grids
        self.filter_invalid_ranges: bool = False

        # Footprint
        self.use_footprint: bool = False
        self.footprint: Optional[Sequence[Tuple[float, float]]] = None

        # Input supervision
        self.subscribe_count_th: int = 3

        # Visualization
        self.trajectory_slots: int = 1000

    @classmethod
    def from_dict(cls, overrides: Optional[Mapping[str, Any]] = None) -> "DWAConfig":
        """Builds a validated configuration, applying `overrides` on top of the defaults."""
        config = cls()
        if overrides:
            for key, value in overrides.items():
                if not hasattr(config, key):
                    raise ValueError(f"Unknown DWA parameter: {key}")
                setattr(config, key, value)
        config.validate()
        return config

    def validate(self) -> None:
        """Raises ValueError if the parameters cannot drive the planner."""
        for name in ("hz", "dt", "predict_time", "max_acceleration", "max_d_yawrate", "angle_resolution"):
            if not getattr(self, name) > 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.max_yawrate < 0.0:
            raise ValueError(f"max_yawrate must not be negative, got {self.max_yawrate!r}")
        if self.min_velocity > self.max_velocity:
            raise ValueError(
                f"min_velocity ({self.min_velocity}) exceeds max_velocity ({self.max_velocity})")
        for name in ("velocity_samples", "yawrate_samples", "trajectory_slots"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)!r}")
        if int(self.subscribe_count_th) < 0:
            raise ValueError(f"subscribe_count_th must not be negative, got {self.subscribe_count_th!r}")

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))

    def log_parameters(self) -> None:
        logger.info("=== DWA Planner ===")
        for key, value in self.as_dict().items():
            logger.info("%s: %s", key.upper(), value)

# --- END OF FILE dwa_planner/config.py ---
