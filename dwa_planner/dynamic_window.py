# --- START OF FILE dwa_planner/dynamic_window.py ---
"""
Dynamic window computation and the velocity sample grid over it.
"""

import math
from typing import List, Tuple

import numpy as np

from .config import DWAConfig
from .models import Window

# Lower bound of a sampling step so that a zero-width window still yields one sample.
SAMPLE_EPSILON: float = float(np.finfo(np.float64).eps)


def _clamp_axis(current: float, reach: float, lower: float, upper: float) -> Tuple[float, float]:
    low = max(current - reach, lower)
    high = min(current + reach, upper)
    if low > high:
        # Current value already outside the limits; collapse onto the nearest limit.
        pinned = min(max(current, lower), upper)
        return pinned, pinned
    return low, high


def calc_dynamic_window(velocity: float, yawrate: float, config: DWAConfig) -> Window:
    """Calculates the dynamic window of velocities reachable within one control period."""
    min_v, max_v = _clamp_axis(velocity, config.max_acceleration * config.dt,
                               config.min_velocity, config.max_velocity)
    min_w, max_w = _clamp_axis(yawrate, config.max_d_yawrate * config.dt,
                               -config.max_yawrate, config.max_yawrate)
    return Window(min_v, max_v, min_w, max_w)


def _axis_samples(low: float, high: float, samples: int) -> List[float]:
    width = high - low
    step = max(width / samples, SAMPLE_EPSILON)
    count = int(math.floor(width / step + 1e-9)) + 1
    return [low + i * step for i in range(count)]


def sample_window(window: Window, velocity_samples: int, yawrate_samples: int) -> List[Tuple[float, float]]:
    """
    Enumerates (velocity, yawrate) pairs over the window.

    Order is ascending velocity, then ascending yawrate. When the yawrate range
    straddles zero, an explicit (v, 0.0) pair closes every velocity row so that
    straight motion is always evaluated.
    """
    velocities = _axis_samples(window.min_velocity, window.max_velocity, int(velocity_samples))
    yawrates = _axis_samples(window.min_yawrate, window.max_yawrate, int(yawrate_samples))
    straddles_zero = window.min_yawrate < 0.0 < window.max_yawrate

    samples = []
    for v in velocities:
        for w in yawrates:
            samples.append((v, w))
        if straddles_zero:
            samples.append((v, 0.0))
    return samples

# --- END OF FILE dwa_planner/dynamic_window.py ---
