"""Fixed-size record of the terminal voltages over the whole horizon.

The stepping engine may take tens of thousands of steps, far more than a chart
needs, so the generator and load terminal voltages are down-sampled onto
``N_TERM`` evenly spaced instants of ``[0, t_stop_sim)``. A step is recorded
when its time reaches the next sample boundary. The check is one-shot: a step
crosses at most one boundary, so with a time step coarser than
``t_stop_sim / N_TERM`` some boundaries are skipped and the buffer is never
completely filled.
"""

import jax
import jax.numpy as jnp
import numpy as np
import equinox as eqx

N_TERM = 1000


class TerminalSampler(eqx.Module):
    """Down-sampled terminal voltages.

    Attributes:
        time_steps: Simulation time of each sample [s].
        voltages_generator: Voltage at the generator terminal (node 0) [V].
        voltages_load: Voltage at the load terminal (node ``ndz``) [V].
        steps_done: Number of filled entries.
    """

    time_steps: jax.Array
    voltages_generator: jax.Array
    voltages_load: jax.Array
    steps_done: jax.Array

    @classmethod
    def empty(cls) -> "TerminalSampler":
        return cls(
            time_steps=jnp.zeros(N_TERM, dtype=jnp.float64),
            voltages_generator=jnp.zeros(N_TERM, dtype=jnp.float64),
            voltages_load=jnp.zeros(N_TERM, dtype=jnp.float64),
            steps_done=jnp.zeros((), dtype=jnp.int64),
        )

    def record(self, t, v_generator, v_load, t_stop_sim) -> "TerminalSampler":
        """Appends a sample if ``t`` reached the next boundary. Traceable."""
        k = self.steps_done
        due = (t >= k * t_stop_sim / N_TERM) & (k < N_TERM)

        def _append(s: "TerminalSampler") -> "TerminalSampler":
            return TerminalSampler(
                time_steps=s.time_steps.at[k].set(t),
                voltages_generator=s.voltages_generator.at[k].set(v_generator),
                voltages_load=s.voltages_load.at[k].set(v_load),
                steps_done=s.steps_done + 1,
            )

        return jax.lax.cond(due, _append, lambda s: s, self)

    def filled(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Returns ``(time, v_generator, v_load)`` for the filled entries only."""
        n = int(self.steps_done)
        return (
            np.asarray(self.time_steps[:n]),
            np.asarray(self.voltages_generator[:n]),
            np.asarray(self.voltages_load[:n]),
        )
