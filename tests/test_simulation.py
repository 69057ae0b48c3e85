import logging
import math

import jax.numpy as jnp
import numpy as np
import pytest

from tlfdtd.components.generators import generator_voltage
from tlfdtd.errors import InvalidLineImpedance, InvalidParameters
from tlfdtd.parameters import GeneratorKind, LoadKind, ParameterSet
from tlfdtd.sampler import N_TERM
from tlfdtd.simulation import (
    advance,
    advance_steps,
    initialize,
    run_to_completion,
    start_run,
)
from tlfdtd.solvers.leapfrog import steps_limit
from tlfdtd.utils import update_parameters


# --- Initialization ---


def test_initialize_resets_everything(small_params):
    sim = initialize(small_params)

    assert sim.voltages.shape == (small_params.ndz + 1,)
    assert sim.currents.shape == (small_params.ndz,)
    assert not sim.voltages.any()
    assert not sim.currents.any()
    assert sim.steps_done == 0
    assert sim.terminal_steps_done == 0
    assert float(sim.grid.current_load) == 0.0
    assert sim.grid.time_steps.shape == (sim.no_time_steps,)
    assert sim.positions[-1] == small_params.line_length


def test_initialize_sets_previous_generator_voltage():
    params = ParameterSet(generator=GeneratorKind.STEP, t_rise=1e-9, t_period=20e-9)
    sim = initialize(params)
    assert float(sim.grid.v_gen_prev) == float(generator_voltage(GeneratorKind.STEP, 0.0, 1e-9, 20e-9))


@pytest.mark.parametrize("changes", [{"ndz": 0}, {"line_length": 0.0}, {"v": -2e8}])
def test_invalid_parameters_refuse_to_initialize(changes):
    params = update_parameters(ParameterSet(), **changes)
    with pytest.raises(InvalidParameters):
        initialize(params)
    with pytest.raises(InvalidParameters):
        start_run(params)


def test_start_run_logs_success(small_params, caplog):
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        result = start_run(small_params)
    assert result.ok
    assert result.error is None
    assert "Run started" in caplog.text


def test_start_run_rejects_zero_impedance(caplog):
    with caplog.at_level(logging.INFO, logger="tlfdtd"):
        result = start_run(ParameterSet(z0=0.0))
    assert not result.ok
    assert isinstance(result.error, InvalidLineImpedance)
    assert "Z0 must be more than 0 Ohm." in caplog.text
    assert "Run started" not in caplog.text
    # Initialization still completed
    assert math.isnan(result.simulation.rho_gen)
    assert math.isinf(result.simulation.c_unit)


def test_start_run_uses_injected_logger(small_params, caplog):
    log = logging.getLogger("host.ui")
    with caplog.at_level(logging.INFO, logger="host.ui"):
        start_run(small_params, log)
    ours = [r for r in caplog.records if r.name.startswith(("host", "tlfdtd"))]
    assert [(r.name, r.getMessage()) for r in ours] == [("host.ui", "Run started")]


# --- Stepping ---


def test_steps_limit_mapping(small_params):
    sim = initialize(small_params)
    n = sim.no_time_steps
    d = sim.derived
    assert steps_limit(d, 2.0, 0.0) == 0
    assert steps_limit(d, 2.0, 1.0) == math.floor(0.5 * n)
    assert steps_limit(d, 2.0, 100.0) == n
    assert steps_limit(d, 2.0, -1.0) == 0
    # t_stop_wall == 0: anything after the start is the end, 0/0 is the start
    assert steps_limit(d, 0.0, 1.0) == n
    assert steps_limit(d, 0.0, 0.0) == 0


def test_advance_is_idempotent(small_params):
    sim = initialize(small_params)
    once = advance(sim, 1.0)
    assert once.steps_done == math.floor(1.0 / 2.0 * sim.no_time_steps)

    twice = advance(once, 1.0)
    assert twice is once
    assert advance(once, 0.5) is once


def test_advance_leaves_input_untouched(small_params):
    sim = initialize(small_params)
    later = run_to_completion(sim)
    assert sim.steps_done == 0
    assert not sim.voltages.any()
    assert later.steps_done == later.no_time_steps


def test_resuming_matches_single_run(small_params):
    sim = initialize(small_params)
    in_one = advance_steps(sim, sim.no_time_steps)

    in_pieces = sim
    for target in (1, 7, 7, 30, sim.no_time_steps):
        in_pieces = advance_steps(in_pieces, target)

    assert in_pieces.steps_done == in_one.steps_done
    assert np.array_equal(in_pieces.voltages, in_one.voltages)
    assert np.array_equal(in_pieces.currents, in_one.currents)
    assert in_pieces.terminal_steps_done == in_one.terminal_steps_done


def test_monotonic_progress(small_params):
    sim = initialize(small_params)
    steps, samples = [], []
    for wall in np.linspace(0.0, 2.5, 11):
        sim = advance(sim, wall)
        steps.append(sim.steps_done)
        samples.append(sim.terminal_steps_done)

    assert steps == sorted(steps)
    assert samples == sorted(samples)
    assert steps[-1] == sim.no_time_steps
    t, _, _ = sim.terminal_samples()
    assert np.all(np.diff(t) > 0)


def test_time_steps_are_recorded(small_params):
    sim = run_to_completion(initialize(small_params))
    expected = np.arange(sim.no_time_steps) * sim.dt
    assert np.allclose(np.asarray(sim.grid.time_steps), expected, rtol=1e-12, atol=0.0)


# --- Terminal sampler ---


def test_sampler_records_once_per_step_when_coarse(small_params):
    # dt = 0.25 ns is coarser than t_stop_sim / N_TERM = 0.02 ns
    sim = run_to_completion(initialize(small_params))
    assert sim.terminal_steps_done == sim.steps_done
    assert sim.terminal_steps_done < N_TERM


def test_sampler_fills_up_when_fine():
    params = ParameterSet(line_length=1.0, v=2e8, ndz=40, t_stop_sim=1000e-9, t_stop_wall=1.0)
    sim = run_to_completion(initialize(params))

    assert sim.terminal_steps_done == N_TERM
    t, v_gen, v_load = sim.terminal_samples()
    assert len(t) == len(v_gen) == len(v_load) == N_TERM
    assert np.all(np.diff(t) > 0)
    # Each sample lies on or just after its boundary
    boundaries = np.arange(N_TERM) * params.t_stop_sim / N_TERM
    assert np.all(t >= boundaries)
    assert np.all(t - boundaries < sim.dt + 1e-18)


def test_sampler_records_terminal_voltages(matched_params):
    sim = initialize(matched_params)
    sim = advance_steps(sim, 3)
    t, v_gen, v_load = sim.terminal_samples()
    assert len(t) == 3
    assert t[0] == 0.0
    # The generator terminal is recorded after the boundary update of the step
    assert v_gen[0] == 0.0
    assert v_gen[1] > 0.0
    assert not v_load.any()


# --- Physics ---


def test_matched_line_settles_without_reflections(matched_params):
    sim = run_to_completion(initialize(matched_params))
    assert sim.is_complete

    # Rg = Z0: the source sees a divider and launches half of its voltage
    v_source = float(generator_voltage(GeneratorKind.STEP, sim.sim_time, matched_params.t_rise, matched_params.t_period))
    assert v_source == 1.0
    assert jnp.isclose(sim.voltages[0], v_source / 2.0, atol=1e-9)
    # Rl = Z0: nothing comes back, the whole line sits at the launched level
    assert np.allclose(sim.voltages, 0.5, atol=1e-9)
    assert np.allclose(sim.currents, 0.5 / matched_params.z0, atol=1e-9)


def test_wave_reaches_load_after_propagation_delay():
    params = ParameterSet(
        z0=50.0, r_gen=50.0, r_load=50.0, generator=GeneratorKind.STEP,
        t_rise=1e-9, t_period=20e-9, line_length=10.0, v=2e8, ndz=400,
        t_stop_sim=100e-9, t_stop_wall=10.0,
    )
    sim = run_to_completion(initialize(params))
    t, _, v_load = sim.terminal_samples()

    first = np.argmax(np.abs(v_load) > 0.0)
    assert abs(v_load[first]) > 0.0
    # One step of slack, plus rounding of k * dt
    assert abs(t[first] - sim.derived.t_prop) <= sim.dt + 1e-18


def test_open_capacitive_load_doubles_voltage(matched_params):
    params = update_parameters(matched_params, load=LoadKind.CAPACITIVE, c_load=5e-12)
    sim = run_to_completion(initialize(params))
    # The incident 0.5 V is fully reflected once the capacitor has charged
    assert jnp.isclose(sim.voltages[-1], 1.0, atol=1e-3)
    assert np.all(np.isfinite(sim.voltages))


def test_zero_capacitance_approaches_open_resistive_load(matched_params):
    cap = update_parameters(matched_params, load=LoadKind.CAPACITIVE, c_load=0.0)
    res = update_parameters(matched_params, load=LoadKind.RESISTIVE, r_load=1e12)
    sim_cap = run_to_completion(initialize(cap))
    sim_res = run_to_completion(initialize(res))
    # Only close in the limit, not identical
    assert np.allclose(sim_cap.voltages, sim_res.voltages, atol=1e-6)


def test_zero_impedance_run_propagates_nan_silently():
    result = start_run(ParameterSet(z0=0.0, ndz=10, line_length=1.0, t_stop_sim=10e-9))
    sim = advance_steps(result.simulation, 5)
    assert sim.steps_done == 5
    assert np.isnan(sim.voltages).any()


def test_single_segment_line():
    params = ParameterSet(ndz=1, line_length=1.0, t_stop_sim=50e-9, generator=GeneratorKind.STEP)
    sim = run_to_completion(initialize(params))
    assert sim.voltages.shape == (2,)
    assert np.all(np.isfinite(sim.voltages))
