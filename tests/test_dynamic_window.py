import pytest

from dwa_planner import DWAConfig, Window, calc_dynamic_window, sample_window


def test_window_from_rest_uses_acceleration_limits(config):
    window = calc_dynamic_window(0.0, 0.0, config)
    assert window.min_velocity == pytest.approx(0.0)
    assert window.max_velocity == pytest.approx(0.1)
    assert window.min_yawrate == pytest.approx(-0.2)
    assert window.max_yawrate == pytest.approx(0.2)


def test_window_is_clipped_to_configured_limits(config):
    window = calc_dynamic_window(0.95, 0.75, config)
    assert window.max_velocity == pytest.approx(1.0)
    assert window.max_yawrate == pytest.approx(0.8)
    assert window.min_velocity == pytest.approx(0.85)
    assert window.min_yawrate == pytest.approx(0.55)


@pytest.mark.parametrize("velocity", [-3.0, -0.05, 0.0, 0.5, 1.0, 1.05, 7.0])
@pytest.mark.parametrize("yawrate", [-5.0, -0.8, 0.0, 0.3, 0.9, 4.0])
def test_window_bounds_are_ordered(config, velocity, yawrate):
    window = calc_dynamic_window(velocity, yawrate, config)
    assert window.min_velocity <= window.max_velocity
    assert window.min_yawrate <= window.max_yawrate
    assert config.min_velocity <= window.min_velocity <= config.max_velocity
    assert -config.max_yawrate <= window.min_yawrate <= config.max_yawrate


def test_window_collapses_when_current_velocity_is_out_of_range(config):
    window = calc_dynamic_window(5.0, -4.0, config)
    assert window.min_velocity == window.max_velocity == config.max_velocity
    assert window.min_yawrate == window.max_yawrate == -config.max_yawrate


def test_sample_grid_size_and_order(config):
    window = calc_dynamic_window(0.0, 0.0, config)
    samples = sample_window(window, config.velocity_samples, config.yawrate_samples)
    # 4 velocities x (21 yawrates + the explicit straight-line sample)
    assert len(samples) == 4 * 22
    velocities = [v for v, _ in samples]
    assert velocities == sorted(velocities)
    first_row = [w for v, w in samples[:21]]
    assert first_row == sorted(first_row)
    assert samples[21] == (samples[0][0], 0.0)


def test_zero_width_window_yields_single_sample():
    samples = sample_window(Window(0.5, 0.5, 0.1, 0.1), 3, 20)
    assert samples == [(0.5, 0.1)]


def test_zero_yawrate_is_appended_when_window_straddles_zero():
    samples = sample_window(Window(0.0, 0.0, -0.2, 0.2), 1, 2)
    assert len(samples) == 4
    assert samples[-1] == (0.0, 0.0)


def test_no_extra_sample_when_window_does_not_straddle_zero():
    samples = sample_window(Window(0.0, 0.0, 0.0, 0.2), 1, 2)
    assert len(samples) == 3
    assert [w for _, w in samples] == pytest.approx([0.0, 0.1, 0.2])


def test_sampling_uses_integer_indices():
    samples = sample_window(Window(0.0, 1.0, 0.0, 0.0), 10, 1)
    assert len(samples) == 11
    assert samples[7][0] == pytest.approx(0.7, abs=1e-15)
    assert samples[-1][0] == pytest.approx(1.0)


def test_custom_limits_from_overrides():
    config = DWAConfig.from_dict({"max_velocity": 0.5, "max_acceleration": 10.0})
    window = calc_dynamic_window(0.0, 0.0, config)
    assert window.max_velocity == pytest.approx(0.5)
