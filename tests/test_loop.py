import logging

import pytest

from dwa_planner import (ControlLoop, DWAConfig, FootprintError, FrameTransformError, LaserScan,
                         OccupancyGrid, PlannerMode, Pose2D, VelocityCommand)
from dwa_planner.visualization import MarkerAction, TrajectoryStyle


def free_grid():
    return OccupancyGrid(0.1, -1.0, -1.0, 20, 20, [0] * 400)


def feed(loop, goal=None):
    if goal is not None:
        loop.on_goal(goal)
    loop.on_odometry(0.0, 0.0)
    loop.on_grid(free_grid())


def test_tick_plans_once_inputs_arrive(config):
    loop = ControlLoop(config)
    feed(loop, Pose2D(5.0, 0.0))
    output = loop.tick()
    assert output.allowed
    assert output.command.linear > 0.0
    assert not output.finished
    assert output.mode is PlannerMode.SEEKING
    assert output.footprint_polygon is None


def test_motion_refused_without_inputs(config):
    loop = ControlLoop(config)
    output = loop.tick()
    assert not output.allowed
    assert output.command == VelocityCommand(0.0, 0.0)
    assert not output.finished
    assert output.candidate_markers == []
    assert output.selected_marker is None


def test_reading_for_other_source_is_ignored(config):
    loop = ControlLoop(config)
    loop.on_goal(Pose2D(5.0, 0.0))
    loop.on_odometry(0.0, 0.0)
    assert not loop.on_scan(LaserScan(0.0, 0.1, [1.0]))
    assert not loop.tick().allowed
    assert loop.on_grid(free_grid())
    assert loop.tick().allowed


def test_scan_source():
    loop = ControlLoop(DWAConfig.from_dict({"use_scan_as_input": True}))
    loop.on_goal(Pose2D(5.0, 0.0))
    loop.on_odometry(0.0, 0.0)
    assert not loop.on_grid(free_grid())
    assert loop.on_scan(LaserScan(-0.5, 0.1, [3.0] * 11))
    assert loop.tick().allowed


def test_stale_odometry_stops_the_robot(config):
    loop = ControlLoop(config)
    feed(loop, Pose2D(5.0, 0.0))
    assert loop.tick().allowed
    for _ in range(config.subscribe_count_th):
        loop.on_grid(free_grid())
        assert loop.tick().allowed
    loop.on_grid(free_grid())
    output = loop.tick()
    assert not output.allowed
    assert output.command == VelocityCommand(0.0, 0.0)


def test_finished_while_at_goal(config):
    loop = ControlLoop(config)
    feed(loop, Pose2D(0.1, 0.0, 0.0))
    output = loop.tick()
    assert output.finished
    assert output.command == VelocityCommand(0.0, 0.0)
    assert output.mode is PlannerMode.SETTLED

    feed(loop, Pose2D(3.0, 0.0, 0.0))
    assert not loop.tick().finished


def test_goal_threshold_override(config, caplog):
    loop = ControlLoop(config)
    with caplog.at_level(logging.INFO, logger="dwa_planner.loop"):
        loop.on_goal_threshold(1.0)
    assert "distance to goal threshold was updated" in caplog.text
    feed(loop, Pose2D(0.8, 0.0, 0.0))
    assert loop.tick().finished


def test_target_velocity_override(config, caplog):
    loop = ControlLoop(config)
    with caplog.at_level(logging.INFO, logger="dwa_planner.loop"):
        loop.on_target_velocity(0.3)
        loop.on_target_velocity(0.4)
    assert caplog.text.count("target velocity was updated") == 1
    assert loop.inputs.take_snapshot().target_velocity == 0.4


def test_goal_is_transformed_into_robot_frame(config):
    def transform(goal, frame_id):
        assert frame_id == "map"
        return Pose2D(goal.x - 1.0, goal.y, goal.yaw)

    loop = ControlLoop(config, transform=transform)
    assert loop.on_goal(Pose2D(3.0, 2.0), "map")
    assert loop.inputs.take_snapshot().goal == Pose2D(2.0, 2.0, 0.0)
    assert loop.on_goal((1.0, 1.0, 0.5), "base_link")
    assert loop.inputs.take_snapshot().goal == Pose2D(1.0, 1.0, 0.5)


def test_failed_transform_keeps_previous_goal(config, caplog):
    def transform(goal, frame_id):
        raise FrameTransformError(f"No transform from '{frame_id}'")

    loop = ControlLoop(config, transform=transform)
    loop.on_goal(Pose2D(2.0, 0.0))
    with caplog.at_level(logging.ERROR, logger="dwa_planner.loop"):
        assert not loop.on_goal(Pose2D(9.0, 9.0), "odom")
    assert "No transform from 'odom'" in caplog.text
    assert loop.inputs.take_snapshot().goal == Pose2D(2.0, 0.0)


def test_goal_in_other_frame_without_transform_is_dropped(config):
    loop = ControlLoop(config)
    assert not loop.on_goal(Pose2D(2.0, 0.0), "map")
    assert loop.inputs.take_snapshot().goal is None


def test_malformed_footprint_update_raises(config):
    loop = ControlLoop(config)
    with pytest.raises(FootprintError):
        loop.on_footprint([(0.0, 0.0), (1.0, 0.0)])


def test_malformed_configured_footprint_raises():
    config = DWAConfig.from_dict({"use_footprint": True, "footprint": [(1.0, 1.0), (2.0, 1.0), (2.0, 2.0)]})
    with pytest.raises(FootprintError):
        ControlLoop(config)


def test_configured_footprint_is_used():
    config = DWAConfig.from_dict({"use_footprint": True,
                                  "footprint": [(0.3, 0.2), (-0.3, 0.2), (-0.3, -0.2), (0.3, -0.2)]})
    loop = ControlLoop(config)
    feed(loop, Pose2D(5.0, 0.0))
    output = loop.tick()
    assert output.allowed
    assert output.footprint_polygon.shape == (4, 2)


def test_markers_fill_slot_budget():
    loop = ControlLoop(DWAConfig.from_dict({"trajectory_slots": 100}))
    feed(loop, Pose2D(5.0, 0.0))
    output = loop.tick()
    actions = [m.action for m in output.candidate_markers]
    assert len(actions) == 100
    assert actions.count(MarkerAction.ADD) == 88
    assert all(a is MarkerAction.DELETE for a in actions[88:])
    assert output.candidate_markers[0].style is TrajectoryStyle.NORMAL
    assert output.selected_marker.style is TrajectoryStyle.SELECTED
    assert output.selected_marker.points.shape == (31, 2)


def test_single_style_for_stop(config):
    loop = ControlLoop(config)
    feed(loop, Pose2D(0.0, 0.0))
    output = loop.tick()
    adds = [m for m in output.candidate_markers if m.action is MarkerAction.ADD]
    assert len(adds) == 1
    assert adds[0].style is TrajectoryStyle.SINGLE
    assert len(output.candidate_markers) == config.trajectory_slots


def test_spin_runs_requested_ticks():
    loop = ControlLoop(DWAConfig.from_dict({"hz": 1000.0}))
    feed(loop, Pose2D(5.0, 0.0))
    outputs = []
    assert loop.spin(outputs.append, max_ticks=3) == 3
    assert len(outputs) == 3
    assert outputs[0].allowed


def test_spin_stops_when_asked():
    loop = ControlLoop(DWAConfig.from_dict({"hz": 1000.0}))
    outputs = []
    assert loop.spin(outputs.append, should_continue=lambda: len(outputs) < 2) == 2
