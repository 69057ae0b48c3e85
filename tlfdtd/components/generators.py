import jax
import jax.numpy as jnp
import equinox as eqx

from tlfdtd.parameters import GeneratorKind, ParameterSet

# ===========================================================================
# Waveforms
# Protocol: waveform(t) -> voltage, with t the absolute simulation time.
# Branches are selected with jnp.where so the waveforms trace under jit and
# broadcast over arrays of time.
# ===========================================================================


def step_waveform(t, t_rise, t_period):
    """Trapezoidal pulse train: ramp up, hold 1, ramp down, hold 0."""
    r = jnp.mod(t, t_period)
    half = t_period / 2.0
    return jnp.where(
        r < t_rise,
        r / t_rise,
        jnp.where(
            r < half,
            1.0,
            jnp.where(r < half + t_rise, (half + t_rise - r) / t_rise, 0.0),
        ),
    )


def sine_waveform(t, t_period):
    return jnp.sin(2.0 * jnp.pi * t / t_period)


def generator_voltage(kind: GeneratorKind, t, t_rise, t_period) -> jax.Array:
    """Open-circuit generator voltage at simulation time ``t``."""
    if kind == GeneratorKind.SINE:
        return sine_waveform(t, t_period)
    return step_waveform(t, t_rise, t_period)


# ===========================================================================
# Strategies
# ===========================================================================


class GeneratorWaveform(eqx.Module):
    """Base class of the generator strategies used by the stepping engine."""

    def __call__(self, t) -> jax.Array:
        raise NotImplementedError


class StepGenerator(GeneratorWaveform):
    t_rise: float = 1e-9
    t_period: float = 20e-9

    def __call__(self, t) -> jax.Array:
        return step_waveform(t, self.t_rise, self.t_period)


class SineGenerator(GeneratorWaveform):
    t_period: float = 20e-9

    def __call__(self, t) -> jax.Array:
        return sine_waveform(t, self.t_period)


def make_generator(params: ParameterSet) -> GeneratorWaveform:
    """Selects the generator strategy for a parameter set."""
    if params.generator == GeneratorKind.SINE:
        return SineGenerator(t_period=params.t_period)
    return StepGenerator(t_rise=params.t_rise, t_period=params.t_period)
