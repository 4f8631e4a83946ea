"""
Unit tests for the fixed-step scheduler.

Tests accumulation, the catch-up cap, observer ordering and between-frame
cancellation, using stub step functions so the scheduler is exercised on its own.
"""

import math
from typing import List, Optional

import numpy as np
import pytest

from skateboard.params import SkateboardParams
from skateboard.scheduler import MAX_ACCUMULATOR, FixedStepScheduler
from skateboard.state import Obstacle, Rest, SimulationState, Stop, create_state

DT = 1.0 / 64.0  # exactly representable, keeps accumulator arithmetic exact


class CountingStep:
    """Step function that advances time and ends the run after a set number of calls"""

    def __init__(self, stop_after: Optional[int] = None, outcome: Stop = Rest()) -> None:
        self.calls = 0
        self.stop_after = stop_after
        self.outcome = outcome

    def __call__(self, state: SimulationState) -> Optional[Stop]:
        self.calls += 1
        state.t += state.dt
        if self.stop_after is not None and self.calls >= self.stop_after:
            return self.outcome
        return None


class TestFixedStepScheduler:
    """Test suite for FixedStepScheduler"""

    @pytest.fixture
    def state(self) -> SimulationState:
        """Create a state with an exactly representable dt"""
        return create_state(SkateboardParams(dt=DT))

    def test_whole_steps_per_frame(self, state: SimulationState) -> None:
        """Test that a frame of four dt runs exactly four steps"""
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step)
        scheduler.start()

        assert scheduler.frame(4 * DT)
        assert step.calls == 4
        assert scheduler.last_frame_steps == 4
        assert scheduler.accumulator == 0.0

    def test_remainder_carried_over(self, state: SimulationState) -> None:
        """Test that partial steps are carried to the next frame"""
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step)
        scheduler.start()

        scheduler.frame(1.5 * DT)
        assert step.calls == 1
        scheduler.frame(0.5 * DT)
        assert step.calls == 2

    def test_time_scale_multiplies_elapsed(self, state: SimulationState) -> None:
        """Test that the time scale speeds up simulated time"""
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step, time_scale=2.0)
        scheduler.start()

        scheduler.frame(2 * DT)
        assert step.calls == 4

    def test_long_frame_capped(self, state: SimulationState) -> None:
        """Test that a long stall only runs the capped number of steps"""
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step)
        scheduler.start()

        scheduler.frame(5.0)

        assert scheduler.last_frame_budget == MAX_ACCUMULATOR
        assert step.calls == math.floor(MAX_ACCUMULATOR / DT)

    def test_steps_match_floor_of_budget(self, state: SimulationState) -> None:
        """Test steps per frame = floor(budget / dt) with budget never above the cap"""
        rng = np.random.default_rng(1234)
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step)
        scheduler.start()

        for k in rng.integers(0, 48, size=200):
            before = step.calls
            scheduler.frame(float(k) / 256.0)
            budget = scheduler.last_frame_budget

            assert budget <= MAX_ACCUMULATOR
            assert step.calls - before == math.floor(budget / DT)
            assert scheduler.last_frame_steps == math.floor(budget / DT)

    def test_observer_called_after_each_step(self, state: SimulationState) -> None:
        """Test that the step observer sees every step"""
        seen: List[float] = []
        scheduler = FixedStepScheduler(state, step=CountingStep(), on_step=lambda s: seen.append(s.t))
        scheduler.start()

        scheduler.frame(3 * DT)

        assert seen == [DT, 2 * DT, 3 * DT]

    def test_terminal_outcome_ends_run(self, state: SimulationState) -> None:
        """Test the final observer call, single end notification and halt"""
        events: List[str] = []
        outcome = Obstacle()
        scheduler = FixedStepScheduler(
            state,
            step=CountingStep(stop_after=2, outcome=outcome),
            on_step=lambda s: events.append("step"),
            on_end=lambda o: events.append(f"end:{o.reason.value}"),
            on_frame=lambda: events.append("frame"),
        )
        scheduler.start()

        assert not scheduler.frame(10 * DT)
        assert events == ["step", "step", "end:obstacle"]
        assert not scheduler.running
        assert scheduler.outcome is outcome
        assert scheduler.last_frame_steps == 2

        # Further frames do nothing, and the end observer is not called again
        assert not scheduler.frame(10 * DT)
        scheduler.start()
        assert not scheduler.running
        assert events.count("end:obstacle") == 1

    def test_pause_prevents_further_steps(self, state: SimulationState) -> None:
        """Test that pausing stops stepping between frames"""
        step = CountingStep()
        scheduler = FixedStepScheduler(state, step=step)
        scheduler.start()
        scheduler.frame(DT)
        scheduler.pause()

        assert not scheduler.frame(DT)
        assert step.calls == 1

    def test_frame_callback_throttled(self, state: SimulationState) -> None:
        """Test that on_frame is invoked at most once per frame_interval"""
        frames: List[int] = []
        scheduler = FixedStepScheduler(
            state,
            step=CountingStep(),
            on_frame=lambda: frames.append(1),
            frame_interval=4 * DT,
        )
        scheduler.start()

        for _ in range(8):
            scheduler.frame(DT)

        assert len(frames) == 2

    def test_run_with_intervals(self, state: SimulationState) -> None:
        """Test driving the scheduler from a list of frame intervals"""
        scheduler = FixedStepScheduler(state, step=CountingStep(stop_after=5))

        outcome = scheduler.run([DT] * 10)

        assert isinstance(outcome, Rest)

    def test_run_realtime_with_fake_clock(self, state: SimulationState) -> None:
        """Test the wall clock driver with an injected clock"""
        now = [0.0]

        def clock() -> float:
            return now[0]

        def sleep(seconds: float) -> None:
            now[0] += seconds

        step = CountingStep(stop_after=6)
        scheduler = FixedStepScheduler(state, step=step)

        outcome = scheduler.run_realtime(frame_rate=32.0, clock=clock, sleep=sleep, max_frames=100)

        assert isinstance(outcome, Rest)
        assert step.calls == 6
