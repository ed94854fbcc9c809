# --- START OF FILE dwa_planner/visualization.py ---
"""
Marker payloads describing candidate and selected trajectories, and matplotlib
rendering of those payloads.

A candidate batch always fills a fixed number of slots: unused slot ids are
emitted as DELETE markers so a consumer that keeps markers by id never shows
leftovers from an earlier, larger batch.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Polygon

from .models import TrajectoryStyle, X, Y

CANDIDATE_WIDTH: float = 0.02  # m
SELECTED_WIDTH: float = 0.05  # m


class MarkerAction(Enum):
    ADD = "add"
    DELETE = "delete"


class Marker(NamedTuple):
    id: int
    action: MarkerAction
    style: Optional[TrajectoryStyle]
    color: Optional[Tuple[float, float, float, float]]
    width: float
    points: np.ndarray
    frame_id: str
    namespace: str


_NO_POINTS = np.zeros((0, 2), dtype=np.float64)


def trajectory_to_marker(trajectory: np.ndarray, style: TrajectoryStyle, frame_id: str,
                         namespace: str, marker_id: int = 0, width: float = SELECTED_WIDTH) -> Marker:
    """Line-strip marker through the (x, y) positions of a trajectory."""
    points = np.ascontiguousarray(np.asarray(trajectory, dtype=np.float64)[:, [X, Y]])
    return Marker(marker_id, MarkerAction.ADD, style, style.rgba, width, points, frame_id, namespace)


def trajectories_to_markers(trajectories: Sequence[np.ndarray], style: TrajectoryStyle,
                            frame_id: str, namespace: str, slot_budget: int) -> List[Marker]:
    """
    Builds a complete replacement batch of exactly `slot_budget` markers.

    Trajectories beyond the budget are dropped.
    """
    markers = [trajectory_to_marker(traj, style, frame_id, namespace, marker_id=i, width=CANDIDATE_WIDTH)
               for i, traj in enumerate(trajectories[:slot_budget])]
    for i in range(len(markers), slot_budget):
        markers.append(Marker(i, MarkerAction.DELETE, None, None, 0.0, _NO_POINTS, frame_id, namespace))
    return markers


def plot_markers(ax: Axes, markers: Sequence[Marker]) -> int:
    """Draws every ADD marker on `ax`; returns the number of lines drawn."""
    drawn = 0
    for marker in markers:
        if marker.action is not MarkerAction.ADD or len(marker.points) == 0:
            continue
        # Marker widths are in meters; scale to points for a readable figure.
        ax.plot(marker.points[:, 0], marker.points[:, 1], color=marker.color,
                linewidth=max(marker.width * 40.0, 0.5))
        drawn += 1
    return drawn


def plot_footprint(ax: Axes, polygon: np.ndarray, color: str = 'orange', alpha: float = 0.4):
    """Adds the (already transformed) footprint polygon as a filled patch."""
    patch = Polygon(np.asarray(polygon, dtype=np.float64), closed=True,
                        facecolor=color, edgecolor='black', alpha=alpha)
    ax.add_patch(patch)
    return patch

# --- END OF FILE dwa_planner/visualization.py ---
