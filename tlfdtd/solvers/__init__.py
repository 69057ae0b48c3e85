"""Leapfrog stepping kernel."""

from .leapfrog import leapfrog_step, run_steps, steps_limit

__all__ = [
    "leapfrog_step",
    "run_steps",
    "steps_limit",
]
