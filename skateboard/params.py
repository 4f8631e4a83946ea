"""
Skateboard and scenario parameters
"""

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_MASS = 0.1  # kg


@dataclass
class SkateboardParams:
    """Operator-chosen parameters of a braking run"""

    mass: float = 70.0  # kg (board + rider)
    initial_speed: float = 6.0  # m/s
    obstacle_position: float = 20.0  # m from the start
    mu: float = 0.7  # brake friction coefficient
    incline: float = 0.0  # rad, positive slopes down toward the obstacle
    rolling_resistance: float = 0.01  # rolling resistance coefficient
    eject_decel_threshold: float = 8.0  # m/s², rider thrown off above this
    time_scale: float = 1.0  # simulated seconds per wall clock second
    dt: float = 1.0 / 120.0  # s, fixed physics step (120 Hz)

    def __post_init__(self) -> None:
        """Clamp parameters into their physical ranges"""
        self.mass = self._at_least("mass", self.mass, MIN_MASS)
        self.initial_speed = self._at_least("initial_speed", self.initial_speed, 0.0)
        self.obstacle_position = self._at_least("obstacle_position", self.obstacle_position, 0.0)
        self.mu = self._at_least("mu", self.mu, 0.0)
        self.rolling_resistance = self._at_least("rolling_resistance", self.rolling_resistance, 0.0)
        self.eject_decel_threshold = self._at_least("eject_decel_threshold", self.eject_decel_threshold, 0.0)
        if self.time_scale <= 0:
            logger.warning("time_scale %.4g is not positive, using 1.0", self.time_scale)
            self.time_scale = 1.0
        if self.dt <= 0:
            logger.warning("dt %.4g is not positive, using 1/120 s", self.dt)
            self.dt = 1.0 / 120.0

    @staticmethod
    def _at_least(field_name: str, value: float, floor: float) -> float:
        if value < floor:
            logger.warning("%s %.4g below %.4g, clamped", field_name, value, floor)
            return floor
        return value

    @classmethod
    def from_degrees(cls, incline_deg: float = 0.0, **kwargs: float) -> "SkateboardParams":
        """Build parameters with the incline given in degrees"""
        return cls(incline=math.radians(incline_deg), **kwargs)

    @property
    def incline_deg(self) -> float:
        return math.degrees(self.incline)
