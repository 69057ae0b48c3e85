"""
Parameter Set
=============

The user-facing physical inputs of a transmission line run. A
:class:`ParameterSet` is an immutable Equinox module, so it can be carried
inside the jitted stepping loop alongside the grid arrays; the two kind
selectors are static fields and therefore part of the compiled structure.

All values are SI. :meth:`ParameterSet.from_settings` accepts the units the
interactive front end works in (nanoseconds, picofarads, 1e8 m/s).
"""

import math
import numbers
from enum import StrEnum
from typing import Any, ClassVar

import equinox as eqx

from tlfdtd.errors import InvalidParameters


class GeneratorKind(StrEnum):
    STEP = "step"
    SINE = "sine"


class LoadKind(StrEnum):
    RESISTIVE = "R"
    CAPACITIVE = "C"


class ParameterSet(eqx.Module):
    """Physical inputs of a single run.

    Attributes:
        z0: Characteristic impedance of the line [Ohm].
        r_gen: Generator series resistance [Ohm].
        t_rise: Pulse generator rise (and fall) time [s].
        t_period: Generator period, pulse or sine [s].
        generator: Waveform selector.
        r_load: Load resistance [Ohm], used by the resistive load.
        c_load: Load capacitance [F], used by the capacitive load.
        load: Load selector.
        line_length: Length of the line [m].
        v: Propagation speed [m/s].
        ndz: Number of line segments.
        t_stop_sim: End of the simulation, in simulation time [s].
        t_stop_wall: Wall-clock time mapped onto ``t_stop_sim`` [s].
    """

    z0: float = 50.0
    r_gen: float = 20.0
    t_rise: float = 1e-9
    t_period: float = 20e-9
    generator: GeneratorKind = eqx.field(static=True, default=GeneratorKind.SINE)
    r_load: float = 1000.0
    c_load: float = 5e-12
    load: LoadKind = eqx.field(static=True, default=LoadKind.RESISTIVE)
    line_length: float = 10.0
    v: float = 2e8
    ndz: int = 400
    t_stop_sim: float = 100e-9
    t_stop_wall: float = 15.0

    NUMERIC_FIELDS: ClassVar[tuple[str, ...]] = (
        "z0", "r_gen", "t_rise", "t_period", "r_load", "c_load",
        "line_length", "v", "ndz", "t_stop_sim", "t_stop_wall",
    )

    # settings key -> (field, scale to SI)
    SETTINGS_UNITS: ClassVar[dict[str, tuple[str, float]]] = {
        "Z0": ("z0", 1.0),
        "Rg": ("r_gen", 1.0),
        "tRise": ("t_rise", 1e-9),
        "tPeriod": ("t_period", 1e-9),
        "Rload": ("r_load", 1.0),
        "Cload": ("c_load", 1e-12),
        "length": ("line_length", 1.0),
        "v": ("v", 1e8),
        "ndz": ("ndz", 1.0),
        "tStopSim": ("t_stop_sim", 1e-9),
        "tStopWall": ("t_stop_wall", 1.0),
    }

    def invalid_fields(self) -> list[str]:
        """Returns the names of all fields that break the parameter invariants."""
        bad = []
        for name in self.NUMERIC_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                bad.append(name)
            elif math.isnan(value) or value < 0:
                bad.append(name)
        if "ndz" not in bad and (self.ndz < 1 or int(self.ndz) != self.ndz):
            bad.append("ndz")
        if "line_length" not in bad and self.line_length <= 0.0:
            bad.append("line_length")
        return bad

    def is_valid(self) -> bool:
        return not self.invalid_fields()

    def check(self) -> "ParameterSet":
        """Raises :class:`InvalidParameters` if any invariant is broken, else returns ``self``."""
        bad = self.invalid_fields()
        if bad:
            raise InvalidParameters(bad)
        return self

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "ParameterSet":
        """Builds a parameter set from front-end settings.

        Keys follow the front end (``Z0``, ``Rg``, ``tRise``, ``tPeriod``,
        ``generatorType``, ``loadType``, ``Rload``, ``Cload``, ``length``,
        ``v``, ``ndz``, ``tStopSim``, ``tStopWall``). Times are in ns, the
        load capacitance in pF and the propagation speed in units of 1e8 m/s.
        Missing keys keep their defaults. The result is not validated.

        Raises:
            KeyError: for an unknown setting.
            ValueError: for an unknown generator or load type.
        """
        kwargs: dict[str, Any] = {}
        for key, value in settings.items():
            if key == "generatorType":
                kwargs["generator"] = GeneratorKind(value)
            elif key == "loadType":
                kwargs["load"] = LoadKind(value)
            elif key in cls.SETTINGS_UNITS:
                name, scale = cls.SETTINGS_UNITS[key]
                kwargs[name] = value if name == "ndz" else value * scale
            else:
                raise KeyError(f"Unknown setting '{key}'")
        return cls(**kwargs)
