import sys
from pathlib import Path
import pytest
import jax

# Ensure project root is on sys.path so tests can import the local package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Shared fixtures for tests
jax.config.update("jax_enable_x64", True)


@pytest.fixture
def matched_params():
    """Matched 10 m line, 50 ns propagation delay, slow step generator."""
    from tlfdtd.parameters import ParameterSet, GeneratorKind, LoadKind

    return ParameterSet(
        z0=50.0,
        r_gen=50.0,
        r_load=50.0,
        generator=GeneratorKind.STEP,
        t_rise=1e-9,
        t_period=1e-6,  # stays high for the whole run
        load=LoadKind.RESISTIVE,
        line_length=10.0,
        v=2e8,
        ndz=400,
        t_stop_sim=100e-9,
        t_stop_wall=10.0,
    )


@pytest.fixture
def small_params():
    """Coarse grid that runs in a handful of steps."""
    from tlfdtd.parameters import ParameterSet, GeneratorKind

    return ParameterSet(
        z0=50.0,
        r_gen=20.0,
        generator=GeneratorKind.SINE,
        t_period=20e-9,
        r_load=1000.0,
        line_length=1.0,
        v=2e8,
        ndz=20,
        t_stop_sim=20e-9,
        t_stop_wall=2.0,
    )
