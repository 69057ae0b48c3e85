"""
Host Frame Driver
=================

Headless version of the animation control a front end wraps around the
stepping engine. The engine itself knows nothing about time; this driver owns
the wall clock, maps elapsed time onto simulation steps once per frame and
reports progress through ``logging``.

A front end calls :meth:`AnimationDriver.tick` from its frame callback (for
example a timer or ``requestAnimationFrame`` equivalent) for as long as
:attr:`AnimationDriver.running` is true, and draws the returned simulation.
"""

import logging
import math
import time
from typing import Callable

from tlfdtd.derived import DerivedQuantities, derive_or_broken
from tlfdtd.parameters import ParameterSet
from tlfdtd.simulation import LineSimulation, advance, run_to_completion, start_run

logger = logging.getLogger(__name__)


class AnimationDriver:
    """Drives one animated run at a time.

    Args:
        params: Initial parameter set.
        clock: Monotonic clock in seconds. Injected so tests can control time.
        log: Logger receiving status messages; the module logger by default.
    """

    def __init__(
        self,
        params: ParameterSet,
        clock: Callable[[], float] = time.perf_counter,
        log: logging.Logger | None = None,
    ):
        self.params = params
        self.clock = clock
        self.log = log or logger
        self.simulation: LineSimulation | None = None
        self.running = False
        self.frame_count = 0
        self.elapsed_wall = 0.0
        self._start_time: float | None = None
        self._finished = True

    @property
    def frame_rate(self) -> float:
        """Frames per second of the last animation, NaN before the first frame."""
        if self.elapsed_wall <= 0.0:
            return math.nan
        return self.frame_count / self.elapsed_wall

    def start(self) -> bool:
        """(Re)starts the animation from step 0, even if one is running."""
        result = start_run(self.params, self.log)
        self.simulation = result.simulation
        self.running = result.ok
        self.frame_count = 0
        self.elapsed_wall = 0.0
        self._start_time = None
        self._finished = False
        return result.ok

    def stop(self) -> None:
        """Requests a stop; the next tick is the last one."""
        self.running = False

    def tick(self) -> LineSimulation:
        """Processes one frame and returns the simulation to draw."""
        if self.simulation is None:
            raise RuntimeError("start() must be called before tick()")
        if self._finished:
            return self.simulation

        now = self.clock()
        if self._start_time is None:
            self._start_time = now
            self.elapsed_wall = 0.0
        else:
            self.elapsed_wall = now - self._start_time
            if self.running:
                self.simulation = advance(self.simulation, self.elapsed_wall)
            if self.elapsed_wall > self.params.t_stop_wall:
                self.log.info(f"Stopping animation after {self.params.t_stop_wall} s...")
                self.stop()
            self.frame_count += 1

        if not self.running:
            self._finished = True
            self.log.info("Animation stopped")
            self.log.info(f"Frame rate: {self.frame_rate:.1f} fps")
        return self.simulation

    def update_parameters(self, params: ParameterSet) -> DerivedQuantities:
        """Stores a new parameter set and returns its derived quantities for display.

        A running animation is stopped, since its grid no longer matches the
        parameters. Invalid sets yield the NaN sentinel.
        """
        if self.running:
            self.log.info("Stopping animation because of parameter change...")
            self.stop()
        self.params = params
        return derive_or_broken(params)

    def show_final(self) -> LineSimulation | None:
        """Computes the whole horizon at once. Refused while animating."""
        if self.running:
            self.log.error("Error: request to show final results while animation is running")
            return None

        t0 = self.clock()
        result = start_run(self.params, self.log)
        sim = result.simulation
        if result.ok:
            sim = run_to_completion(sim)
        t1 = self.clock()
        self.simulation = sim

        self.log.info(
            f"Elapsed time for calculating final results: {sim.steps_done} steps in {(t1 - t0) * 1000.0:.1f} ms"
        )
        return sim
