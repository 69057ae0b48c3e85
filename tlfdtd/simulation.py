"""
Run Lifecycle
=============

Construction and advancement of a single transmission line run.

A :class:`LineSimulation` is an immutable value. :func:`initialize` and
:func:`start_run` build a fresh one from a parameter set; :func:`advance`,
:func:`advance_steps` and :func:`run_to_completion` return a new, advanced
simulation and leave their argument untouched. There is no incremental
reconfiguration: after any parameter change the caller builds a new
simulation, which also re-selects the generator and load strategies.

Typical host loop::

    result = start_run(params)
    if result.ok:
        sim = result.simulation
        while running:
            sim = advance(sim, elapsed_wall_time())
            draw(sim.positions, sim.voltages)
"""

import logging
from typing import NamedTuple

import equinox as eqx
import numpy as np

from tlfdtd.components.generators import GeneratorWaveform, make_generator
from tlfdtd.components.loads import LoadModel, make_load
from tlfdtd.derived import DerivedQuantities
from tlfdtd.errors import InvalidLineImpedance
from tlfdtd.grid import GridState
from tlfdtd.parameters import ParameterSet
from tlfdtd.sampler import TerminalSampler
from tlfdtd.solvers.leapfrog import run_steps, steps_limit

logger = logging.getLogger(__name__)


class LineSimulation(eqx.Module):
    """State of one run: inputs, derived coefficients, strategies, grid and samples."""

    params: ParameterSet
    derived: DerivedQuantities
    generator: GeneratorWaveform
    load: LoadModel
    grid: GridState
    sampler: TerminalSampler

    # --- Read accessors for the rendering layer ---

    @property
    def voltages(self) -> np.ndarray:
        return np.asarray(self.grid.voltages)

    @property
    def currents(self) -> np.ndarray:
        return np.asarray(self.grid.currents)

    @property
    def positions(self) -> np.ndarray:
        """Position of every voltage node along the line [m]."""
        return np.linspace(0.0, self.params.line_length, int(self.params.ndz) + 1)

    @property
    def steps_done(self) -> int:
        return int(self.grid.steps_done)

    @property
    def no_time_steps(self) -> int:
        return self.derived.no_time_steps

    @property
    def sim_time(self) -> float:
        """Simulation time reached so far [s]."""
        return self.steps_done * self.derived.dt

    @property
    def terminal_steps_done(self) -> int:
        return int(self.sampler.steps_done)

    def terminal_samples(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Filled ``(time, v_generator, v_load)`` terminal samples."""
        return self.sampler.filled()

    @property
    def l_unit(self) -> float:
        return self.derived.l_unit

    @property
    def c_unit(self) -> float:
        return self.derived.c_unit

    @property
    def dt(self) -> float:
        return self.derived.dt

    @property
    def rho_gen(self) -> float:
        return self.derived.rho_gen

    @property
    def rho_load(self) -> float:
        return self.derived.rho_load

    @property
    def is_complete(self) -> bool:
        return self.steps_done >= self.no_time_steps


class StartResult(NamedTuple):
    """Outcome of :func:`start_run`.

    The simulation is always initialized; ``error`` tells whether it may be
    stepped.
    """

    simulation: LineSimulation
    error: InvalidLineImpedance | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def initialize(params: ParameterSet) -> LineSimulation:
    """Builds a fully reset simulation for ``params``.

    Raises:
        InvalidParameters: if ``params`` breaks the parameter invariants.
    """
    params.check()
    derived = DerivedQuantities.from_params(params)
    generator = make_generator(params)
    load = make_load(params)
    return LineSimulation(
        params=params,
        derived=derived,
        generator=generator,
        load=load,
        grid=GridState.zeros(int(params.ndz), derived.no_time_steps, generator(0.0)),
        sampler=TerminalSampler.empty(),
    )


def start_run(params: ParameterSet, log: logging.Logger | None = None) -> StartResult:
    """Initializes a run and checks that it may be stepped.

    A zero line impedance does not raise: the simulation is still returned
    (with infinite or NaN coefficients) together with an
    :class:`InvalidLineImpedance` error, and must not be advanced.
    """
    log = log or logger
    sim = initialize(params)
    if params.z0 == 0:
        err = InvalidLineImpedance()
        log.error(str(err))
        return StartResult(sim, err)

    log.info("Run started")
    return StartResult(sim)


def advance_steps(sim: LineSimulation, target_step: int) -> LineSimulation:
    """Runs the leapfrog loop up to, but excluding, ``target_step``.

    The target is clamped to ``no_time_steps``. Returns ``sim`` itself when
    there is nothing to do, so repeated calls with the same target are free.
    """
    stop = min(int(target_step), sim.derived.no_time_steps)
    if stop <= sim.steps_done:
        return sim

    grid, sampler = run_steps(
        sim.grid, sim.sampler, sim.params, sim.derived, sim.generator, sim.load, stop
    )
    return eqx.tree_at(lambda s: (s.grid, s.sampler), sim, (grid, sampler))


def advance(sim: LineSimulation, wall_time: float) -> LineSimulation:
    """Advances to the step that ``wall_time`` maps onto.

    ``wall_time`` is the elapsed wall-clock time of an animation;
    ``t_stop_wall`` corresponds to the end of the simulation.
    """
    target = steps_limit(sim.derived, sim.params.t_stop_wall, wall_time)
    return advance_steps(sim, target)


def run_to_completion(sim: LineSimulation) -> LineSimulation:
    """Computes the whole horizon at once."""
    # +1 s so that t_stop_wall == 0 still maps onto the last step
    return advance(sim, sim.params.t_stop_wall + 1.0)
