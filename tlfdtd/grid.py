import jax
import jax.numpy as jnp
import equinox as eqx


class GridState(eqx.Module):
    """Voltage and current arrays of the discretised line.

    Voltages sit on the ``ndz + 1`` segment edges, index 0 at the generator and
    index ``ndz`` at the load. Currents sit in the middle of the ``ndz``
    segments and lead the voltages by half a time step.

    Attributes:
        voltages: Node voltages [V], shape ``(ndz + 1,)``.
        currents: Segment currents [A], shape ``(ndz,)``.
        current_load: Current into a capacitive load [A].
        v_gen_prev: Generator voltage of the previous step [V].
        steps_done: Number of completed steps.
        time_steps: Simulation time of every executed step [s], shape
            ``(no_time_steps,)``.
    """

    voltages: jax.Array
    currents: jax.Array
    current_load: jax.Array
    v_gen_prev: jax.Array
    steps_done: jax.Array
    time_steps: jax.Array

    @classmethod
    def zeros(cls, ndz: int, no_time_steps: int, v_gen_start) -> "GridState":
        return cls(
            voltages=jnp.zeros(ndz + 1, dtype=jnp.float64),
            currents=jnp.zeros(ndz, dtype=jnp.float64),
            current_load=jnp.zeros((), dtype=jnp.float64),
            v_gen_prev=jnp.asarray(v_gen_start, dtype=jnp.float64),
            steps_done=jnp.zeros((), dtype=jnp.int64),
            time_steps=jnp.zeros(max(no_time_steps, 0), dtype=jnp.float64),
        )
