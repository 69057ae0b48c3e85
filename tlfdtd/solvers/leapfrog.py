"""
Leapfrog FDTD Kernel
====================

Yee-style 1-D update of the lossless telegrapher's equations::

    C dV/dt = -dI/dz
    L dI/dt = -dV/dz

Voltages live on the segment edges, currents in the segment middles, half a
time step ahead. Each step first applies the two boundary conditions, which
solve for the new terminal voltages semi-implicitly, then updates the interior
voltages and all currents explicitly.

The loop runs inside ``jax.lax.fori_loop`` under ``jax.jit``. Only the grid and
the terminal sampler are carried; parameters, derived quantities and the
generator/load strategies are closed over as traced constants. The number of
steps is a traced bound, so a new target does not recompile.
"""

import math

import jax
import jax.numpy as jnp
import numpy as np

from tlfdtd.components.generators import GeneratorWaveform
from tlfdtd.components.loads import LoadModel
from tlfdtd.derived import DerivedQuantities
from tlfdtd.grid import GridState
from tlfdtd.parameters import ParameterSet
from tlfdtd.sampler import TerminalSampler


def steps_limit(derived: DerivedQuantities, t_stop_wall: float, wall_time: float) -> int:
    """Maps elapsed wall-clock time onto a step index in ``[0, no_time_steps]``.

    Runs on the host. ``wall_time == t_stop_wall`` maps onto the last step; an
    undefined ratio (``0 / 0``) maps onto step 0.
    """
    n = derived.no_time_steps
    with np.errstate(divide="ignore", invalid="ignore"):
        target = np.floor(np.float64(wall_time) / np.float64(t_stop_wall) * n)
    if math.isnan(target):
        return 0
    return int(max(min(target, n), 0))


def leapfrog_step(
    k: jax.Array,
    grid: GridState,
    sampler: TerminalSampler,
    params: ParameterSet,
    derived: DerivedQuantities,
    generator: GeneratorWaveform,
    load: LoadModel,
) -> tuple[GridState, TerminalSampler]:
    """Executes step ``k`` and returns the updated grid and sampler."""
    dz, dt = derived.dz, derived.dt
    dtype = grid.voltages.dtype

    t = jnp.asarray(k * dt, dtype=dtype)
    time_steps = grid.time_steps.at[k].set(t)

    # 1. Generator boundary, time-centred source (Paul eq. 8.81a)
    v_gen_now = jnp.asarray(generator(t), dtype=dtype)
    v_sum = grid.v_gen_prev + v_gen_now
    factor = dz / dt * params.r_gen * derived.c_unit
    v0 = ((factor - 1.0) * grid.voltages[0] - 2.0 * params.r_gen * grid.currents[0] + v_sum) / (factor + 1.0)
    grid = GridState(
        voltages=grid.voltages.at[0].set(v0),
        currents=grid.currents,
        current_load=grid.current_load,
        v_gen_prev=grid.v_gen_prev,
        steps_done=grid.steps_done,
        time_steps=time_steps,
    )

    # 2. Load boundary
    grid = load.apply(grid, derived)

    # 3. Terminal sample, after both boundaries and before the interior
    sampler = sampler.record(t, grid.voltages[0], grid.voltages[-1], params.t_stop_sim)

    # 4. Interior voltages, then all currents from the new voltages
    voltages = grid.voltages.at[1:-1].add(dt / (dz * derived.c_unit) * (grid.currents[:-1] - grid.currents[1:]))
    currents = grid.currents + dt / (dz * derived.l_unit) * (voltages[:-1] - voltages[1:])

    grid = GridState(
        voltages=voltages,
        currents=currents,
        current_load=jnp.asarray(grid.current_load, dtype=dtype),
        v_gen_prev=v_gen_now,
        steps_done=jnp.asarray(k + 1, dtype=grid.steps_done.dtype),
        time_steps=grid.time_steps,
    )
    return grid, sampler


@jax.jit
def run_steps(
    grid: GridState,
    sampler: TerminalSampler,
    params: ParameterSet,
    derived: DerivedQuantities,
    generator: GeneratorWaveform,
    load: LoadModel,
    stop: jax.Array,
) -> tuple[GridState, TerminalSampler]:
    """Runs steps ``grid.steps_done .. stop - 1``. Zero steps if ``stop <= steps_done``."""
    start = grid.steps_done
    stop = jnp.asarray(stop, dtype=start.dtype)

    def body(k, carry):
        g, s = carry
        return leapfrog_step(k, g, s, params, derived, generator, load)

    return jax.lax.fori_loop(start, stop, body, (grid, sampler))
