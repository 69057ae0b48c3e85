"""Generator and load strategies of the line terminations."""

from .generators import (
    GeneratorWaveform,
    SineGenerator,
    StepGenerator,
    generator_voltage,
    make_generator,
)
from .loads import CapacitiveLoad, LoadModel, ResistiveLoad, make_load

__all__ = [
    "CapacitiveLoad",
    "GeneratorWaveform",
    "LoadModel",
    "ResistiveLoad",
    "SineGenerator",
    "StepGenerator",
    "generator_voltage",
    "make_generator",
    "make_load",
]
