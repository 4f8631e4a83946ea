"""
Fixed-step motion integrator and stop classifier
"""

import logging
from typing import Optional

import numpy as np

from skateboard.forces import ForceModel
from skateboard.params import MIN_MASS
from skateboard.state import (
    Eject,
    Obstacle,
    Rest,
    SimulationState,
    Stop,
    StopDetails,
)

logger = logging.getLogger(__name__)

VELOCITY_TOLERANCE = 1e-3  # m/s


class Dynamics:
    """Semi-implicit Euler integration of the board along the slope"""

    def __init__(
        self,
        force_model: Optional[ForceModel] = None,
        velocity_tolerance: float = VELOCITY_TOLERANCE,
    ) -> None:
        """
        Initialize integrator

        Args:
            force_model: Force model (standard gravity when None)
            velocity_tolerance: Speed below which the board is treated as stopped (m/s)
        """
        self.force_model = force_model or ForceModel()
        self.velocity_tolerance = velocity_tolerance

    def net_force(self, state: SimulationState) -> Optional[float]:
        """
        Signed net force along the slope

        Returns:
            Net force in Newtons, or None when a stopped board is held in place
        """
        forces = self.force_model.resolve(state)
        resistance = forces.resistance

        if abs(state.v) <= self.velocity_tolerance:
            # Static regime: gravity has to overcome rolling + brake to start motion
            if forces.gravity > resistance:
                return forces.gravity - resistance
            if forces.gravity < -resistance:
                return forces.gravity + resistance
            return None

        return forces.gravity - np.sign(state.v) * resistance

    def step(self, state: SimulationState) -> Optional[Stop]:
        """
        Advance the state by one fixed step

        Args:
            state: Simulation state, mutated in place

        Returns:
            Rest, Obstacle or Eject when the run ends, None while it continues
        """
        dt = state.dt
        net = self.net_force(state)
        if net is None:
            state.v = 0.0
            state.a = 0.0
            state.t += dt
            logger.debug("Held at rest at t=%.3f s, x=%.3f m", state.t, state.x)
            return Rest()

        a = float(net) / max(MIN_MASS, state.mass)

        # Skip the very first step so the initial brake transient cannot eject
        if state.t > 0:
            decel = -a if state.v > 0 and a < 0 else 0.0
            if decel >= state.eject_decel_threshold:
                details = StopDetails(
                    cause="decel",
                    decel=decel,
                    decel_threshold=state.eject_decel_threshold,
                )
                state.stop_details = details
                state.v = 0.0
                state.a = 0.0
                state.t += dt
                logger.debug("Ejection at t=%.3f s: decel %.3f >= %.3f", state.t, decel, details.decel_threshold)
                return Eject(details)

        v_prev = state.v
        v_new = v_prev + a * dt
        crossed = v_prev != 0.0 and np.sign(v_new) != np.sign(v_prev)
        slowed_to_stop = abs(v_new) <= self.velocity_tolerance and abs(v_new) < abs(v_prev)
        if crossed or slowed_to_stop:
            # Reverse travel past a rest point is not simulated; x keeps its pre-step value
            state.v = 0.0
            state.a = 0.0
            state.t += dt
            logger.debug("Came to rest at t=%.3f s, x=%.3f m", state.t, state.x)
            return Rest()

        state.v = v_new
        state.a = a
        state.x += state.v * dt
        state.t += dt

        if state.x >= state.obstacle_position:
            state.x = state.obstacle_position
            state.v = 0.0
            state.a = 0.0
            logger.debug("Reached obstacle at t=%.3f s", state.t)
            return Obstacle()

        if state.x < 0.0:
            # Rolled back uphill past the start
            state.x = 0.0
            state.v = 0.0
            state.a = 0.0
            return Rest()

        return None


_default_dynamics = Dynamics()


def step(state: SimulationState) -> Optional[Stop]:
    """Advance state by one step with the default integrator"""
    return _default_dynamics.step(state)
