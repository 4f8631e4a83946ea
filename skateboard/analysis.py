"""
Run analysis and continuous-time reference solution
"""

from typing import Any, Dict

import numpy as np
from scipy.integrate import solve_ivp, trapezoid

from skateboard.forces import GRAVITY
from skateboard.params import MIN_MASS, SkateboardParams
from skateboard.simulator import RunResult
from skateboard.state import Eject


class RunAnalyzer:
    """Summarises a recorded braking run"""

    def __init__(self, params: SkateboardParams) -> None:
        self.params = params

    def analyze(self, result: RunResult) -> Dict[str, Any]:
        """
        Analyze a run for stopping performance and rider load

        Args:
            result: Recorded run

        Returns:
            Dictionary with analysis results
        """
        t = result.samples[:, 0]
        x = result.samples[:, 1]
        v = result.samples[:, 2]
        a = result.samples[:, 3]
        brake = result.samples[:, 4]
        distance = result.samples[:, 5]

        # Deceleration only counts while moving toward the obstacle
        decel = np.where((v > 0) & (a < 0), -a, 0.0)
        peak_decel = float(np.max(decel)) if len(decel) else 0.0
        if isinstance(result.stop, Eject):
            peak_decel = max(peak_decel, result.stop.details.decel)

        mass = max(MIN_MASS, self.params.mass)
        normal = mass * GRAVITY * np.cos(self.params.incline)
        # Each sample's brake is the decision for the following step; the
        # reset sample records 0 while the primed brake drives the first step
        applied = np.empty_like(brake)
        if len(t) and t[0] == 0.0:
            applied[:2] = result.initial_brake
            applied[2:] = brake[1:-1]
        elif len(t):
            applied[0] = brake[0]
            applied[1:] = brake[:-1]
        brake_force = np.clip(applied, 0.0, 1.0) * self.params.mu * normal
        # Brake power is F_b * v; integrate over the run for dissipated work
        braking_work = float(trapezoid(brake_force * np.abs(v), t)) if len(t) > 1 else 0.0

        return {
            "stop_reason": result.stop.reason.value if result.stop is not None else None,
            "stop_time": float(t[-1]) if len(t) else 0.0,
            "stopping_distance": float(x[-1]) if len(x) else 0.0,
            "final_distance": float(distance[-1]) if len(distance) else self.params.obstacle_position,
            "peak_decel": peak_decel,
            "peak_decel_g": peak_decel / GRAVITY,
            "mean_brake": float(np.mean(brake)) if len(brake) else 0.0,
            "peak_brake": float(np.max(brake)) if len(brake) else 0.0,
            "braking_work": braking_work,
            "exceeded_threshold": peak_decel >= self.params.eject_decel_threshold,
            "steps": int(len(t)),
        }


def constant_brake_reference(
    params: SkateboardParams,
    brake_intensity: float,
    t_max: float = 60.0,
) -> Dict[str, Any]:
    """
    Continuous solution for a constant brake intensity, for checking the integrator

    Integrates dx/dt = v, dv/dt = g sin(theta) - sign(v) g cos(theta) (c_r + b mu)
    until the board stops or reaches the obstacle.

    Args:
        params: Scenario parameters
        brake_intensity: Brake intensity held for the whole run (0..1)
        t_max: Integration horizon (s)

    Returns:
        Dictionary with stop reason, time, position and the dense trajectory
    """
    b = min(1.0, max(0.0, brake_intensity))
    g_along = GRAVITY * np.sin(params.incline)
    resist = GRAVITY * np.cos(params.incline) * (params.rolling_resistance + b * params.mu)

    def rhs(t: float, y: np.ndarray) -> np.ndarray:
        return np.array([y[1], g_along - np.sign(y[1]) * resist])

    def stopped(t: float, y: np.ndarray) -> float:
        return y[1]

    stopped.terminal = True  # type: ignore[attr-defined]
    stopped.direction = -1  # type: ignore[attr-defined]

    def at_obstacle(t: float, y: np.ndarray) -> float:
        return y[0] - params.obstacle_position

    at_obstacle.terminal = True  # type: ignore[attr-defined]
    at_obstacle.direction = 1  # type: ignore[attr-defined]

    solution = solve_ivp(
        rhs,
        (0.0, t_max),
        [0.0, params.initial_speed],
        events=[stopped, at_obstacle],
        max_step=0.05,
        rtol=1e-8,
        atol=1e-10,
    )

    if len(solution.t_events[1]):
        reason, t_end, y_end = "obstacle", solution.t_events[1][0], solution.y_events[1][0]
    elif len(solution.t_events[0]):
        reason, t_end, y_end = "rest", solution.t_events[0][0], solution.y_events[0][0]
    else:
        reason, t_end, y_end = None, solution.t[-1], solution.y[:, -1]

    return {
        "stop_reason": reason,
        "stop_time": float(t_end),
        "position": float(y_end[0]),
        "time": solution.t,
        "trajectory": solution.y,
    }
