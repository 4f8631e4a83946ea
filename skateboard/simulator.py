"""
Braking session: wires the fuzzy controller, integrator and scheduler together
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from skateboard.dynamics import Dynamics
from skateboard.fuzzy import FuzzyBrakeController
from skateboard.params import SkateboardParams
from skateboard.sample_log import Sample, SampleLog
from skateboard.scheduler import FixedStepScheduler
from skateboard.state import SimulationState, Stop, create_state

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Recorded history of a finished (or truncated) run"""

    time: np.ndarray  # s
    samples: np.ndarray  # N x 6: t, x, v, a, brake, distance
    stop: Optional[Stop]
    state: SimulationState
    initial_brake: float = 0.0  # brake primed by start(), in effect for the first step


class BrakingSimulator:
    """Simulates a skateboard braking toward an obstacle under fuzzy control"""

    def __init__(
        self,
        params: SkateboardParams,
        controller: Optional[FuzzyBrakeController] = None,
        dynamics: Optional[Dynamics] = None,
        log_capacity: int = 10000,
    ) -> None:
        """
        Initialize simulator

        Args:
            params: Scenario parameters
            controller: Fuzzy brake controller (reference configuration when None)
            dynamics: Integrator (default force model when None)
            log_capacity: Number of samples kept in the log
        """
        self.params = params
        self.controller = controller or FuzzyBrakeController()
        self.dynamics = dynamics or Dynamics()
        self.log = SampleLog(log_capacity)
        self.stop: Optional[Stop] = None
        self.initial_brake = 0.0
        self.state = create_state(params)
        self.scheduler = self._make_scheduler()
        self.reset()

    def _make_scheduler(self) -> FixedStepScheduler:
        return FixedStepScheduler(
            self.state,
            step=self.dynamics.step,
            on_step=self.on_step,
            on_end=self.on_end,
            time_scale=self.params.time_scale,
        )

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def reset(self) -> SimulationState:
        """Discard the current run and start over from the parameters"""
        self.scheduler.pause()
        self.state = create_state(self.params)
        self.scheduler = self._make_scheduler()
        self.stop = None
        self.initial_brake = 0.0
        self.log.clear()
        self._record(brake=0.0)
        logger.info(
            "Reset: v0=%.2f m/s, obstacle at %.2f m, incline %.2f deg",
            self.params.initial_speed,
            self.params.obstacle_position,
            self.params.incline_deg,
        )
        return self.state

    def start(self) -> None:
        """Apply the controller's first decision and begin scheduling frames"""
        if self.stop is not None:
            logger.info("Run already ended (%s), reset first", self.stop.reason.value)
            return
        if self.state.t == 0.0:
            self.initial_brake = self._brake_for(self.state)
            self.state.brake_intensity = self.initial_brake
        self.scheduler.start()

    def pause(self) -> None:
        self.scheduler.pause()

    def advance(self, elapsed: float) -> bool:
        """Run one frame; returns True while more frames should follow"""
        return self.scheduler.frame(elapsed)

    def _brake_for(self, state: SimulationState) -> float:
        return self.controller.infer(max(0.0, state.v), state.distance_to_obstacle)

    def _record(self, brake: float) -> None:
        s = self.state
        self.log.push(Sample(s.t, s.x, s.v, s.a, brake, s.distance_to_obstacle))

    def on_step(self, state: SimulationState) -> None:
        """Step observer: decide the next brake intensity and record the step"""
        brake = self._brake_for(state)
        state.brake_intensity = brake
        self._record(brake)

    def on_end(self, stop: Stop) -> None:
        self.stop = stop

    def simulate(self, duration: float = 30.0, frame_interval: float = 1.0 / 60.0) -> RunResult:
        """
        Run headlessly from a fresh state

        Args:
            duration: Maximum simulated time (s)
            frame_interval: Wall clock interval fed to the scheduler per frame (s)

        Returns:
            RunResult with the recorded samples and terminal outcome
        """
        self.reset()
        self.start()
        max_frames = int(math.ceil(duration / (frame_interval * self.params.time_scale))) + 1
        frames = 0
        while self.running and frames < max_frames:
            self.advance(frame_interval)
            frames += 1

        if self.stop is None:
            self.pause()
            logger.info("Run truncated at t=%.3f s without a terminal outcome", self.state.t)

        samples = self.log.as_array()
        return RunResult(
            time=samples[:, 0].copy(),
            samples=samples,
            stop=self.stop,
            state=self.state,
            initial_brake=self.initial_brake,
        )
