"""
Fuzzy Skateboard Braking Simulation

This package simulates a skateboard and rider braking toward an obstacle on an
incline, with the brake intensity chosen every physics step by a Mamdani fuzzy
controller, and classifies how each run ends (rest, obstacle or ejection).
"""

from skateboard.params import SkateboardParams
from skateboard.state import (
    Eject,
    Obstacle,
    Rest,
    SimulationState,
    StopDetails,
    StopReason,
    create_state,
)
from skateboard.fuzzy import (
    ControllerConfig,
    FuzzyBrakeController,
    LinguisticVariable,
    Rule,
    default_config,
    infer,
)
from skateboard.dynamics import Dynamics, step
from skateboard.scheduler import FixedStepScheduler
from skateboard.simulator import BrakingSimulator, RunResult
from skateboard.sweep import run_speed_sweep

__all__ = [
    "SkateboardParams",
    "SimulationState",
    "StopReason",
    "StopDetails",
    "Rest",
    "Obstacle",
    "Eject",
    "create_state",
    "ControllerConfig",
    "LinguisticVariable",
    "Rule",
    "FuzzyBrakeController",
    "default_config",
    "infer",
    "Dynamics",
    "step",
    "FixedStepScheduler",
    "BrakingSimulator",
    "RunResult",
    "run_speed_sweep",
]
