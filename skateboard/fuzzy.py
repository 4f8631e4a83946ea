"""
Mamdani fuzzy inference: (speed, distance to obstacle) -> brake intensity

The controller fuzzifies both inputs, combines rule antecedents with min,
aggregates rules sharing a brake label with max, clips each brake membership
function by its label's activation and defuzzifies the union with a discrete
centroid over the Brake universe.
"""

import copy
import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from skateboard.membership import (
    MembershipFunction,
    Triangular,
    membership_from_dict,
)

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 200


@dataclass(frozen=True)
class LinguisticVariable:
    """A named group of membership functions over the universe [low, high]"""

    name: str
    low: float
    high: float
    functions: Tuple[MembershipFunction, ...]

    def __post_init__(self) -> None:
        # Variables key the sampled-curve cache, so the collection must be hashable
        object.__setattr__(self, "functions", tuple(self.functions))

    def fuzzify(self, x: float) -> Dict[str, float]:
        """Membership degree of x for every function, keyed by function name"""
        return {mf.name: mf.degree(x) for mf in self.functions}

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(mf.name for mf in self.functions)


@dataclass(frozen=True)
class Rule:
    """IF distance is <distance> AND speed is <speed> THEN brake is <brake>"""

    distance: str
    speed: str
    brake: str


@dataclass(frozen=True)
class ControllerConfig:
    """Linguistic variables and rule base in effect for inference"""

    speed: LinguisticVariable
    distance: LinguisticVariable
    brake: LinguisticVariable
    rules: Tuple[Rule, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))


DEFAULT_RULES: Tuple[Rule, ...] = (
    Rule("Close", "High", "Hard"),
    Rule("Close", "Medium", "Hard"),
    Rule("Close", "Low", "Moderate"),
    Rule("Medium", "High", "Moderate"),
    Rule("Medium", "Medium", "Moderate"),
    Rule("Medium", "Low", "Soft"),
    Rule("Far", "High", "Moderate"),
    Rule("Far", "Medium", "Soft"),
    Rule("Far", "Low", "Soft"),
)


def default_config() -> ControllerConfig:
    """
    Reference configuration: speed 0-10 m/s, distance 0-20 m, brake 0-1
    """
    speed = LinguisticVariable("Speed", 0.0, 10.0, (
        Triangular("Low", 0.0, 0.0, 4.0),
        Triangular("Medium", 2.0, 5.0, 8.0),
        Triangular("High", 6.0, 10.0, 10.0),
    ))
    distance = LinguisticVariable("Distance", 0.0, 20.0, (
        Triangular("Close", 0.0, 0.0, 5.0),
        Triangular("Medium", 3.0, 9.0, 15.0),
        Triangular("Far", 12.0, 20.0, 20.0),
    ))
    brake = LinguisticVariable("Brake", 0.0, 1.0, (
        Triangular("Soft", 0.0, 0.0, 0.4),
        Triangular("Moderate", 0.2, 0.5, 0.8),
        Triangular("Hard", 0.6, 1.0, 1.0),
    ))
    return ControllerConfig(speed, distance, brake, DEFAULT_RULES)


@lru_cache(maxsize=32)
def _sample_output(brake: LinguisticVariable, samples: int) -> Tuple[np.ndarray, np.ndarray]:
    """Discretised Brake universe and the raw membership curve of each function"""
    universe = np.linspace(brake.low, brake.high, samples + 1)
    curves = np.array([[mf.degree(float(x)) for x in universe] for mf in brake.functions])
    universe.setflags(write=False)
    curves.setflags(write=False)
    return universe, curves


def rule_activations(speed: float, distance: float, config: ControllerConfig) -> Dict[str, float]:
    """
    Aggregated activation of each brake label

    Args:
        speed: Crisp speed (m/s)
        distance: Crisp distance to obstacle (m)
        config: Controller configuration

    Returns:
        Mapping brake label -> max over rules of min(distance degree, speed degree)
    """
    speed_degrees = config.speed.fuzzify(speed)
    distance_degrees = config.distance.fuzzify(distance)

    activations: Dict[str, float] = {}
    for rule in config.rules:
        degree = min(distance_degrees.get(rule.distance, 0.0), speed_degrees.get(rule.speed, 0.0))
        activations[rule.brake] = max(activations.get(rule.brake, 0.0), degree)
    return activations


def infer(
    speed: float,
    distance: float,
    config: ControllerConfig,
    samples: int = DEFAULT_SAMPLES,
) -> float:
    """
    Brake intensity for the given speed and distance

    Args:
        speed: Crisp speed (m/s)
        distance: Crisp distance to obstacle (m)
        config: Controller configuration
        samples: Number of intervals the Brake universe is divided into

    Returns:
        Brake intensity in [0, 1]; exactly 0 when no rule fires
    """
    activations = rule_activations(speed, distance, config)
    universe, curves = _sample_output(config.brake, samples)

    levels = np.array([activations.get(mf.name, 0.0) for mf in config.brake.functions])
    clipped = np.fmin(curves, levels[:, np.newaxis])
    aggregated = np.max(clipped, axis=0) if len(clipped) else np.zeros_like(universe)

    denominator = float(np.sum(aggregated))
    if denominator == 0.0:
        return 0.0
    centroid = float(np.sum(universe * aggregated)) / denominator
    return min(1.0, max(0.0, centroid))


def validate_config(config: ControllerConfig) -> List[str]:
    """
    Check a configuration for malformed membership functions and dangling rules

    Returns:
        List of human readable problems, empty when the configuration is sound
    """
    problems: List[str] = []
    for variable in (config.speed, config.distance, config.brake):
        if variable.low > variable.high:
            problems.append(f"{variable.name}: universe low {variable.low} exceeds high {variable.high}")
        seen = set()
        for mf in variable.functions:
            if mf.name in seen:
                problems.append(f"{variable.name}: duplicate function name '{mf.name}'")
            seen.add(mf.name)
            if not mf.is_monotonic():
                problems.append(f"{variable.name}.{mf.name}: breakpoints are not non-decreasing")

    for rule in config.rules:
        for variable, label in (
            (config.distance, rule.distance),
            (config.speed, rule.speed),
            (config.brake, rule.brake),
        ):
            if label not in variable.labels:
                problems.append(f"rule {rule}: '{label}' is not a {variable.name} function")
    return problems


def _variable_from_list(
    name: str, entries: List[Dict[str, Any]], base: LinguisticVariable
) -> LinguisticVariable:
    functions = tuple(membership_from_dict(entry) for entry in entries)
    return LinguisticVariable(name, base.low, base.high, functions)


def config_to_dict(config: ControllerConfig) -> Dict[str, List[Dict[str, Any]]]:
    """Membership functions of each variable in JSON friendly form"""
    return {
        "Speed": [mf.to_dict() for mf in config.speed.functions],
        "Distance": [mf.to_dict() for mf in config.distance.functions],
        "Brake": [mf.to_dict() for mf in config.brake.functions],
    }


def config_from_dict(
    data: Mapping[str, List[Dict[str, Any]]],
    base: Optional[ControllerConfig] = None,
) -> ControllerConfig:
    """
    Build a configuration from the dictionary form produced by config_to_dict

    Variables missing from data are taken from base (the default configuration
    when not given). Universes and rules always come from base.
    """
    base = base or default_config()
    speed = _variable_from_list("Speed", data["Speed"], base.speed) if "Speed" in data else base.speed
    distance = (
        _variable_from_list("Distance", data["Distance"], base.distance)
        if "Distance" in data
        else base.distance
    )
    brake = _variable_from_list("Brake", data["Brake"], base.brake) if "Brake" in data else base.brake
    return ControllerConfig(speed, distance, brake, base.rules)


class FuzzyBrakeController:
    """Owns the controller configuration and answers brake requests"""

    def __init__(self, config: Optional[ControllerConfig] = None, samples: int = DEFAULT_SAMPLES) -> None:
        """
        Initialize controller

        Args:
            config: Initial configuration (reference configuration when None)
            samples: Defuzzification resolution
        """
        self._lock = threading.Lock()
        self._config = config or default_config()
        self.samples = samples

    def set_config(self, config: ControllerConfig) -> None:
        """
        Replace the whole configuration

        Raises:
            ValueError: If the configuration has malformed functions or rules
        """
        problems = validate_config(config)
        if problems:
            raise ValueError("Invalid controller configuration: " + "; ".join(problems))
        with self._lock:
            self._config = config
        logger.info(
            "Controller configuration replaced (%d/%d/%d functions, %d rules)",
            len(config.speed.functions),
            len(config.distance.functions),
            len(config.brake.functions),
            len(config.rules),
        )

    def get_config(self) -> ControllerConfig:
        """Deep copy of the configuration in effect"""
        with self._lock:
            return copy.deepcopy(self._config)

    def infer(self, speed: float, distance: float) -> float:
        """Brake intensity in [0, 1] against a single configuration snapshot"""
        with self._lock:
            config = self._config
        return infer(speed, distance, config, self.samples)
