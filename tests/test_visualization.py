import subprocess
import sys

import matplotlib.pyplot as plt
import numpy as np
import pytest

from dwa_planner import generate_trajectory
from dwa_planner.models import State, TrajectoryStyle
from dwa_planner.utils.geometry import Footprint
from dwa_planner.visualization import (MarkerAction, plot_footprint, plot_markers, trajectories_to_markers,
                                       trajectory_to_marker)


@pytest.fixture
def trajectories():
    return [generate_trajectory(0.5, w, 3.0, 0.1) for w in (-0.2, 0.0, 0.2)]


def test_batch_fills_every_slot(trajectories):
    markers = trajectories_to_markers(trajectories, TrajectoryStyle.NORMAL, "base_link", "candidates", 5)
    assert [m.id for m in markers] == [0, 1, 2, 3, 4]
    assert [m.action for m in markers] == [MarkerAction.ADD] * 3 + [MarkerAction.DELETE] * 2
    assert markers[0].color == (0.0, 1.0, 0.0, 0.8)
    assert markers[0].points.shape == (31, 2)
    assert all(m.frame_id == "base_link" and m.namespace == "candidates" for m in markers)
    assert markers[4].points.shape == (0, 2)


def test_batch_is_truncated_to_slot_budget(trajectories):
    markers = trajectories_to_markers(trajectories, TrajectoryStyle.NO_SAFE_PLAN, "base_link", "candidates", 2)
    assert len(markers) == 2
    assert all(m.action is MarkerAction.ADD for m in markers)
    assert markers[1].color == (0.5, 0.0, 0.5, 0.8)


def test_styles_have_distinct_colors():
    colors = {style.value for style in TrajectoryStyle}
    assert len(colors) == len(TrajectoryStyle)
    assert TrajectoryStyle.SELECTED.rgba == (1.0, 0.0, 0.0, 0.8)
    assert TrajectoryStyle.SINGLE.rgba == (0.0, 0.0, 1.0, 0.8)


def test_selected_marker(trajectories):
    marker = trajectory_to_marker(trajectories[1], TrajectoryStyle.SELECTED, "base_link", "selected")
    assert marker.action is MarkerAction.ADD
    np.testing.assert_array_equal(marker.points[:, 0], trajectories[1][:, 0])
    assert marker.width > trajectories_to_markers(trajectories, TrajectoryStyle.NORMAL, "base_link", "c", 1)[0].width


def test_plot_markers_skips_deleted_slots(trajectories):
    markers = trajectories_to_markers(trajectories, TrajectoryStyle.NORMAL, "base_link", "candidates", 10)
    fig, ax = plt.subplots()
    try:
        assert plot_markers(ax, markers) == 3
        assert len(ax.lines) == 3
    finally:
        plt.close(fig)


def test_plot_footprint_adds_patch():
    polygon = Footprint.rectangle(0.3, 0.2, 0.15).at(State(1.0, 2.0, 0.3))
    fig, ax = plt.subplots()
    try:
        patch = plot_footprint(ax, polygon)
        assert patch in ax.patches
        np.testing.assert_allclose(patch.get_xy()[:4], polygon)
    finally:
        plt.close(fig)


def test_package_import_does_not_load_pyplot():
    code = "import sys, dwa_planner; sys.exit('matplotlib.pyplot' in sys.modules)"
    assert subprocess.run([sys.executable, "-c", code]).returncode == 0
