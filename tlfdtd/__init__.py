"""tlfdtd: A JAX based FDTD transmission line simulator."""
import jax

# 64-bit precision before any array is created
jax.config.update("jax_enable_x64", True)

from tlfdtd.derived import DerivedQuantities, derive_or_broken
from tlfdtd.errors import InvalidLineImpedance, InvalidParameters, LineParameterError
from tlfdtd.parameters import GeneratorKind, LoadKind, ParameterSet
from tlfdtd.sampler import N_TERM
from tlfdtd.simulation import (
    LineSimulation,
    StartResult,
    advance,
    advance_steps,
    initialize,
    run_to_completion,
    start_run,
)
