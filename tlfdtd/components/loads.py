"""Load terminations of the line.

Both boundary updates solve directly for the new load-end voltage instead of
stepping it explicitly, which keeps the boundary stable next to the explicit
interior scheme. They follow C. R. Paul, *Analysis of Multiconductor
Transmission Lines*, 2nd ed., eq. 8.81b (resistive) and eq. 9.65
(capacitive).
"""

import jax
import equinox as eqx

from tlfdtd.derived import DerivedQuantities
from tlfdtd.grid import GridState
from tlfdtd.parameters import LoadKind, ParameterSet


class LoadModel(eqx.Module):
    """Base class of the load strategies.

    ``apply`` updates the last node voltage (and, for stateful loads,
    ``current_load``) of a grid and returns the new grid.
    """

    def update(
        self, v_end: jax.Array, i_last: jax.Array, current_load: jax.Array, derived: DerivedQuantities
    ) -> tuple[jax.Array, jax.Array]:
        """Returns the new ``(v_end, current_load)``."""
        raise NotImplementedError

    def apply(self, grid: GridState, derived: DerivedQuantities) -> GridState:
        v_end, current_load = self.update(
            grid.voltages[-1], grid.currents[-1], grid.current_load, derived
        )
        return eqx.tree_at(
            lambda g: (g.voltages, g.current_load),
            grid,
            (grid.voltages.at[-1].set(v_end), current_load),
        )


class ResistiveLoad(LoadModel):
    r_load: float = 1000.0

    def update(self, v_end, i_last, current_load, derived):
        factor = derived.dz / derived.dt * self.r_load * derived.c_unit
        v_new = ((factor - 1.0) * v_end + 2.0 * self.r_load * i_last) / (factor + 1.0)
        return v_new, current_load


class CapacitiveLoad(LoadModel):
    c_load: float = 5e-12

    def update(self, v_end, i_last, current_load, derived):
        factor = derived.dz / derived.dt * derived.c_unit + self.c_load / derived.dt
        delta = (2.0 * i_last - current_load) / factor
        # current_load carries over to the next step
        return v_end + delta, self.c_load / derived.dt * delta


def make_load(params: ParameterSet) -> LoadModel:
    """Selects the load strategy for a parameter set."""
    if params.load == LoadKind.CAPACITIVE:
        return CapacitiveLoad(c_load=params.c_load)
    return ResistiveLoad(r_load=params.r_load)
