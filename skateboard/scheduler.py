"""
Fixed-timestep scheduler

Turns variable frame intervals into a whole number of fixed physics steps per
frame. Elapsed time is accumulated (scaled by the time scale and capped so a
long frame cannot trigger unbounded catch-up work) and consumed in multiples
of the state's dt.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from skateboard.dynamics import step as default_step
from skateboard.state import SimulationState, Stop

logger = logging.getLogger(__name__)

MAX_ACCUMULATOR = 0.1  # s

StepFn = Callable[[SimulationState], Optional[Stop]]
StepObserver = Callable[[SimulationState], None]
EndObserver = Callable[[Stop], None]
FrameObserver = Callable[[], None]


class FixedStepScheduler:
    """Drives an integrator step function once per fixed dt"""

    def __init__(
        self,
        state: SimulationState,
        step: StepFn = default_step,
        on_step: Optional[StepObserver] = None,
        on_end: Optional[EndObserver] = None,
        on_frame: Optional[FrameObserver] = None,
        time_scale: float = 1.0,
        max_accumulator: float = MAX_ACCUMULATOR,
        frame_interval: float = 0.0,
    ) -> None:
        """
        Initialize scheduler

        Args:
            state: Simulation state stepped in place
            step: Integrator step, returns a terminal outcome or None
            on_step: Called with the state after every step
            on_end: Called once with the terminal outcome
            on_frame: Refresh callback, invoked at the end of a frame
            time_scale: Simulated seconds per elapsed second
            max_accumulator: Cap on carried-over time (s)
            frame_interval: Minimum wall time between on_frame calls (s)
        """
        self.state = state
        self.step = step
        self.on_step = on_step
        self.on_end = on_end
        self.on_frame = on_frame
        self.time_scale = time_scale
        self.max_accumulator = max_accumulator
        self.frame_interval = frame_interval

        self.accumulator = 0.0
        self.last_frame_steps = 0
        self.last_frame_budget = 0.0
        self.outcome: Optional[Stop] = None
        self._running = False
        self._since_refresh = 0.0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Resume scheduling frames (no effect once the run has ended)"""
        if self.outcome is not None:
            logger.debug("Run already ended with %s, reset required", self.outcome.reason.value)
            return
        self._running = True

    def pause(self) -> None:
        """Stop scheduling further frames; an in-flight step always completes"""
        self._running = False

    def frame(self, elapsed: float) -> bool:
        """
        Process one frame

        Args:
            elapsed: Wall clock time since the previous frame (s)

        Returns:
            True when another frame should be scheduled
        """
        if not self._running:
            return False

        self.accumulator += max(0.0, elapsed) * self.time_scale
        if self.accumulator > self.max_accumulator:
            self.accumulator = self.max_accumulator
        self.last_frame_budget = self.accumulator

        dt = self.state.dt
        steps = 0
        while self.accumulator >= dt:
            outcome = self.step(self.state)
            self.accumulator -= dt
            steps += 1
            if outcome is not None:
                self.last_frame_steps = steps
                self._finish(outcome)
                return False
            if self.on_step is not None:
                self.on_step(self.state)
        self.last_frame_steps = steps

        self._since_refresh += elapsed
        if self.on_frame is not None and self._since_refresh >= self.frame_interval:
            self._since_refresh = 0.0
            self.on_frame()
        return True

    def _finish(self, outcome: Stop) -> None:
        self._running = False
        self.outcome = outcome
        if self.on_step is not None:
            self.on_step(self.state)
        logger.info(
            "Run ended: %s at t=%.3f s, x=%.3f m",
            outcome.reason.value,
            self.state.t,
            self.state.x,
        )
        if self.on_end is not None:
            self.on_end(outcome)

    def run(self, intervals: Iterable[float]) -> Optional[Stop]:
        """
        Feed a sequence of frame intervals until the run ends or is paused

        Returns:
            Terminal outcome, or None if the intervals ran out first
        """
        self.start()
        for elapsed in intervals:
            if not self.frame(elapsed):
                break
        return self.outcome

    def run_realtime(
        self,
        frame_rate: float = 60.0,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        max_frames: Optional[int] = None,
    ) -> Optional[Stop]:
        """
        Drive frames from a wall clock at roughly frame_rate frames per second

        Returns:
            Terminal outcome, or None if paused or max_frames was reached
        """
        self.start()
        period = 1.0 / frame_rate
        last = clock()
        frames = 0
        while self._running and (max_frames is None or frames < max_frames):
            sleep(period)
            now = clock()
            self.frame(now - last)
            last = now
            frames += 1
        return self.outcome
