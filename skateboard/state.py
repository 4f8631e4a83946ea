"""
Simulation state and terminal outcomes
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from skateboard.params import MIN_MASS, SkateboardParams


class StopReason(Enum):
    """Why a run ended"""

    REST = "rest"
    OBSTACLE = "obstacle"
    EJECT = "eject"


@dataclass(frozen=True)
class StopDetails:
    """Measurement behind an ejection"""

    cause: str  # "decel"
    decel: float  # m/s², deceleration that triggered the ejection
    decel_threshold: float  # m/s²


@dataclass(frozen=True)
class Rest:
    """Board came to rest before reaching the obstacle"""

    reason = StopReason.REST


@dataclass(frozen=True)
class Obstacle:
    """Board reached the obstacle"""

    reason = StopReason.OBSTACLE


@dataclass(frozen=True)
class Eject:
    """Rider thrown off by excessive deceleration"""

    details: StopDetails
    reason = StopReason.EJECT


Stop = Union[Rest, Obstacle, Eject]


@dataclass
class SimulationState:
    """Mutable state of one braking run"""

    t: float  # Elapsed simulated time (s)
    dt: float  # Fixed physics step (s)
    x: float  # Position along the slope (m)
    v: float  # Velocity (m/s), positive toward the obstacle
    a: float  # Acceleration (m/s²)
    mass: float  # kg
    mu: float  # Brake friction coefficient
    theta: float  # Incline (rad)
    rolling_resistance: float  # Rolling resistance coefficient
    obstacle_position: float  # m
    brake_intensity: float  # 0..1, written by the controller between steps
    eject_decel_threshold: float  # m/s²
    stop_details: Optional[StopDetails] = None

    @property
    def distance_to_obstacle(self) -> float:
        return max(0.0, self.obstacle_position - self.x)


def create_state(params: SkateboardParams) -> SimulationState:
    """
    Fresh state for a new run

    Args:
        params: Operator-chosen parameters

    Returns:
        State at t = 0, x = 0, moving at the initial speed with no brake applied
    """
    return SimulationState(
        t=0.0,
        dt=params.dt,
        x=0.0,
        v=params.initial_speed,
        a=0.0,
        mass=max(MIN_MASS, params.mass),
        mu=params.mu,
        theta=params.incline,
        rolling_resistance=params.rolling_resistance,
        obstacle_position=params.obstacle_position,
        brake_intensity=0.0,
        eject_decel_threshold=params.eject_decel_threshold,
    )
