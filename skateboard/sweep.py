"""
Parameter sweeps and controller surface
"""

from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

import numpy as np

from skateboard.analysis import RunAnalyzer
from skateboard.fuzzy import FuzzyBrakeController
from skateboard.params import SkateboardParams
from skateboard.simulator import BrakingSimulator


def run_speed_sweep(
    speeds: Sequence[float],
    params: Optional[SkateboardParams] = None,
    controller: Optional[FuzzyBrakeController] = None,
    duration: float = 30.0,
) -> Dict[float, Dict[str, Any]]:
    """
    Run one simulation per initial speed

    Args:
        speeds: Initial speeds in m/s
        params: Base parameters, initial_speed is overridden per run
        controller: Shared fuzzy controller
        duration: Maximum simulated time per run (s)

    Returns:
        Dictionary with results for each speed
    """
    base = params or SkateboardParams()
    controller = controller or FuzzyBrakeController()
    results: Dict[float, Dict[str, Any]] = {}

    for speed in speeds:
        run_params = replace(base, initial_speed=speed)
        simulator = BrakingSimulator(run_params, controller=controller)
        result = simulator.simulate(duration=duration)
        analysis = RunAnalyzer(run_params).analyze(result)

        results[speed] = {
            "time": result.time,
            "samples": result.samples,
            "stop": result.stop,
            "analysis": analysis,
            "simulator": simulator,
        }

    return results


def control_surface(
    controller: FuzzyBrakeController,
    speeds: np.ndarray,
    distances: np.ndarray,
) -> np.ndarray:
    """
    Brake intensity over a speed x distance grid

    Returns:
        Array of shape (len(distances), len(speeds))
    """
    surface = np.zeros((len(distances), len(speeds)))
    for i, distance in enumerate(distances):
        for j, speed in enumerate(speeds):
            surface[i, j] = controller.infer(float(speed), float(distance))
    return surface
