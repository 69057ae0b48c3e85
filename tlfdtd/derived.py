"""Quantities derived from a :class:`~tlfdtd.parameters.ParameterSet`.

The time step is always the Courant limit ``dt = dz / v``. With a Courant
number of one the explicit interior update of the lossless line is stable, so
no stability check is needed while stepping.
"""

import math

import equinox as eqx
import numpy as np

from tlfdtd.parameters import ParameterSet


class DerivedQuantities(eqx.Module):
    """Discretisation and line coefficients of one run.

    Attributes:
        l_unit: Inductance per unit length [H/m].
        c_unit: Capacitance per unit length [F/m].
        dz: Segment length [m].
        dt: Time step [s].
        no_time_steps: Number of steps until ``t_stop_sim``.
        rho_gen: Reflection coefficient at the generator, NaN if ``z0 == 0``.
        rho_load: Reflection coefficient of a resistive load, NaN if ``z0 == 0``.
        t_prop: Propagation delay over the whole line [s].
    """

    l_unit: float
    c_unit: float
    dz: float
    dt: float
    no_time_steps: int
    rho_gen: float
    rho_load: float
    t_prop: float

    @classmethod
    def from_params(cls, params: ParameterSet) -> "DerivedQuantities":
        """Computes the derived quantities. Never raises on zero divisors."""
        z0 = np.float64(params.z0)
        v = np.float64(params.v)
        with np.errstate(divide="ignore", invalid="ignore"):
            l_unit = z0 / v
            c_unit = 1.0 / (z0 * v)
            dz = np.float64(params.line_length) / np.float64(params.ndz)
            dt = dz / v
            n = np.floor(np.float64(params.t_stop_sim) / dt)
            if z0 == 0:
                rho_gen = rho_load = math.nan
            else:
                rho_gen = (params.r_gen - z0) / (params.r_gen + z0)
                rho_load = (params.r_load - z0) / (params.r_load + z0)
            t_prop = np.float64(params.line_length) / v

        return cls(
            l_unit=float(l_unit),
            c_unit=float(c_unit),
            dz=float(dz),
            dt=float(dt),
            no_time_steps=int(n) if np.isfinite(n) else 0,
            rho_gen=float(rho_gen),
            rho_load=float(rho_load),
            t_prop=float(t_prop),
        )

    @classmethod
    def broken(cls) -> "DerivedQuantities":
        """Not-a-number sentinel shown when the parameter set is invalid."""
        nan = math.nan
        return cls(
            l_unit=nan, c_unit=nan, dz=nan, dt=nan, no_time_steps=-1,
            rho_gen=nan, rho_load=nan, t_prop=nan,
        )

    def is_broken(self) -> bool:
        return self.no_time_steps < 0

    def display(self) -> dict[str, float]:
        """Read-outs in front-end units: µH/m, nF/m, ns, ps."""
        return {
            "l_unit": self.l_unit * 1e6,
            "c_unit": self.c_unit * 1e9,
            "t_prop": self.t_prop * 1e9,
            "t_step": self.dt * 1e12,
            "n_step": math.nan if self.is_broken() else self.no_time_steps,
            "rho_gen": self.rho_gen,
            "rho_load": self.rho_load,
        }


def derive_or_broken(params: ParameterSet) -> DerivedQuantities:
    """Derived quantities of a valid set, or the NaN sentinel of an invalid one."""
    if not params.is_valid():
        return DerivedQuantities.broken()
    return DerivedQuantities.from_params(params)
