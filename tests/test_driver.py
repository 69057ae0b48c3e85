import logging
import math

import pytest

from tlfdtd.driver import AnimationDriver
from tlfdtd.parameters import ParameterSet
from tlfdtd.utils import update_parameter


def fake_clock(*times):
    """Returns a clock that yields the given times, one per call."""
    it = iter(times)
    return lambda: next(it)


def test_animation_runs_to_wall_clock_end(small_params, caplog):
    driver = AnimationDriver(small_params, clock=fake_clock(10.0, 11.0, 12.5))

    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        assert driver.start()
        first = driver.tick()
        assert first.steps_done == 0
        assert driver.running

        half = driver.tick()
        assert half.steps_done == math.floor(0.5 * half.no_time_steps)
        assert driver.running

        last = driver.tick()

    assert last.is_complete
    assert not driver.running
    assert driver.frame_count == 2
    assert driver.frame_rate == pytest.approx(2 / 2.5)
    assert "Stopping animation after 2.0 s..." in caplog.text
    assert "Animation stopped" in caplog.text
    assert "Frame rate: 0.8 fps" in caplog.text

    # Further frames are ignored and do not read the clock
    assert driver.tick() is last


def test_stop_request_ends_on_next_tick(small_params, caplog):
    driver = AnimationDriver(small_params, clock=fake_clock(0.0, 0.5, 1.0))
    driver.start()
    driver.tick()
    driver.tick()
    steps = driver.simulation.steps_done

    driver.stop()
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        sim = driver.tick()
    # The stopping frame does not step
    assert sim.steps_done == steps
    assert "Animation stopped" in caplog.text


def test_tick_before_start_raises(small_params):
    with pytest.raises(RuntimeError):
        AnimationDriver(small_params).tick()


def test_start_with_zero_impedance_stops_immediately(caplog):
    driver = AnimationDriver(ParameterSet(z0=0.0), clock=fake_clock(0.0))
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        assert not driver.start()
        sim = driver.tick()
    assert sim.steps_done == 0
    assert "Z0 must be more than 0 Ohm." in caplog.text
    assert "Animation stopped" in caplog.text


def test_parameter_change_stops_animation(small_params, caplog):
    driver = AnimationDriver(small_params, clock=fake_clock(0.0))
    driver.start()
    driver.tick()

    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        derived = driver.update_parameters(update_parameter(small_params, "z0", 75.0))
    assert not driver.running
    assert "Stopping animation because of parameter change..." in caplog.text
    assert derived.rho_load == pytest.approx((1000.0 - 75.0) / (1000.0 + 75.0))


def test_invalid_parameter_change_gives_sentinel(small_params):
    driver = AnimationDriver(small_params)
    derived = driver.update_parameters(update_parameter(small_params, "ndz", 0))
    assert derived.is_broken()
    assert math.isnan(derived.dt)


def test_show_final_computes_whole_horizon(small_params, caplog):
    driver = AnimationDriver(small_params, clock=fake_clock(1.0, 1.0125))
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        sim = driver.show_final()

    assert sim.is_complete
    assert driver.simulation is sim
    assert (
        f"Elapsed time for calculating final results: {sim.no_time_steps} steps in 12.5 ms"
        in caplog.text
    )


def test_show_final_refused_while_animating(small_params, caplog):
    driver = AnimationDriver(small_params, clock=fake_clock(0.0))
    driver.start()
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        assert driver.show_final() is None
    assert "request to show final results while animation is running" in caplog.text
