"""
Force model for a braking skateboard on an incline
"""

from dataclasses import dataclass
import numpy as np

from skateboard.params import MIN_MASS
from skateboard.state import SimulationState

GRAVITY = 9.81  # m/s²


@dataclass(frozen=True)
class Forces:
    """Forces along the slope for one step, in Newtons"""

    normal: float
    gravity: float  # signed, positive toward the obstacle
    rolling: float  # magnitude
    brake_max: float  # magnitude
    brake: float  # magnitude

    @property
    def resistance(self) -> float:
        """Total force opposing motion"""
        return self.rolling + self.brake


class ForceModel:
    """Resolves gravity, rolling resistance and brake force along the slope"""

    def __init__(self, gravity: float = GRAVITY) -> None:
        self.gravity = gravity

    def resolve(self, state: SimulationState) -> Forces:
        """
        Calculate forces acting on the board

        Args:
            state: Current simulation state (brake intensity is read, not modified)

        Returns:
            Forces with the brake clamped to what friction can deliver
        """
        mass = max(MIN_MASS, state.mass)
        normal = mass * self.gravity * np.cos(state.theta)
        # Downhill component pushes toward +x when theta > 0
        gravity_along = mass * self.gravity * np.sin(state.theta)
        rolling = state.rolling_resistance * normal
        brake_max = state.mu * normal

        intensity = min(1.0, max(0.0, state.brake_intensity))
        brake = min(brake_max, intensity * brake_max)

        return Forces(
            normal=float(normal),
            gravity=float(gravity_along),
            rolling=float(rolling),
            brake_max=float(brake_max),
            brake=float(brake),
        )
