"""
Unit tests for controller configuration ownership.

Tests FuzzyBrakeController replacement/read-back, validation and the
dictionary exchange format.
"""

import pytest

from skateboard.fuzzy import (
    ControllerConfig,
    FuzzyBrakeController,
    LinguisticVariable,
    config_from_dict,
    config_to_dict,
    default_config,
    infer,
    validate_config,
)
from skateboard.membership import Triangular


class TestFuzzyBrakeController:
    """Test suite for FuzzyBrakeController"""

    @pytest.fixture
    def controller(self) -> FuzzyBrakeController:
        """Create a controller with the reference configuration"""
        return FuzzyBrakeController()

    def test_infer_matches_pure_function(self, controller: FuzzyBrakeController) -> None:
        """Test that the controller evaluates its own configuration"""
        assert controller.infer(4.0, 6.0) == infer(4.0, 6.0, default_config())

    def test_get_config_returns_equal_copy(self, controller: FuzzyBrakeController) -> None:
        """Test that the read-back configuration is equal but not the same object"""
        copy_a = controller.get_config()
        copy_b = controller.get_config()

        assert copy_a == default_config()
        assert copy_a is not copy_b
        assert copy_a is not controller._config
        assert copy_a.brake is not controller._config.brake

    def test_set_config_replaces_whole_configuration(self, controller: FuzzyBrakeController) -> None:
        """Test that replacing the Brake variable changes the output"""
        base = controller.get_config()
        always_hard = LinguisticVariable("Brake", 0.0, 1.0, (
            Triangular("Soft", 0.6, 1.0, 1.0),
            Triangular("Moderate", 0.6, 1.0, 1.0),
            Triangular("Hard", 0.6, 1.0, 1.0),
        ))
        controller.set_config(ControllerConfig(base.speed, base.distance, always_hard, base.rules))

        assert controller.infer(0.0, 0.0) > 0.8
        assert controller.get_config().brake == always_hard

    def test_invalid_config_rejected(self, controller: FuzzyBrakeController) -> None:
        """Test that non-monotonic breakpoints are refused and the old config kept"""
        base = controller.get_config()
        broken = LinguisticVariable("Brake", 0.0, 1.0, (
            Triangular("Soft", 0.4, 0.0, 0.2),
            Triangular("Moderate", 0.2, 0.5, 0.8),
            Triangular("Hard", 0.6, 1.0, 1.0),
        ))

        with pytest.raises(ValueError):
            controller.set_config(ControllerConfig(base.speed, base.distance, broken, base.rules))

        assert controller.get_config() == base

    def test_list_of_functions_accepted(self, controller: FuzzyBrakeController) -> None:
        """Test that a variable built from a list infers like the tuple form"""
        base = controller.get_config()
        brake = LinguisticVariable("Brake", 0.0, 1.0, list(base.brake.functions))
        controller.set_config(ControllerConfig(base.speed, base.distance, brake, list(base.rules)))

        assert isinstance(controller.get_config().brake.functions, tuple)
        assert controller.infer(0.0, 0.0) == infer(0.0, 0.0, default_config())


class TestValidateConfig:
    """Test suite for configuration validation"""

    def test_default_config_is_valid(self) -> None:
        """Test that the reference configuration has no problems"""
        assert validate_config(default_config()) == []

    def test_duplicate_names_reported(self) -> None:
        """Test detection of duplicate function names within a variable"""
        base = default_config()
        speed = LinguisticVariable("Speed", 0.0, 10.0, (
            Triangular("Low", 0.0, 0.0, 4.0),
            Triangular("Low", 2.0, 5.0, 8.0),
            Triangular("High", 6.0, 10.0, 10.0),
        ))
        problems = validate_config(ControllerConfig(speed, base.distance, base.brake, base.rules))

        assert any("duplicate" in p for p in problems)
        assert any("'Medium'" in p for p in problems)  # rules now reference a missing label


class TestConfigDict:
    """Test suite for the dictionary exchange format"""

    def test_round_trip(self) -> None:
        """Test that to_dict/from_dict reproduces the configuration"""
        config = default_config()

        assert config_from_dict(config_to_dict(config)) == config

    def test_dict_shape(self) -> None:
        """Test that the exchange format lists typed functions per variable"""
        data = config_to_dict(default_config())

        assert set(data) == {"Speed", "Distance", "Brake"}
        assert data["Speed"][0] == {"name": "Low", "type": "tri", "params": [0.0, 0.0, 4.0]}

    def test_partial_update_keeps_other_variables(self) -> None:
        """Test that a mapping with only Brake keeps Speed and Distance"""
        base = default_config()
        updated = config_from_dict(
            {"Brake": [{"name": "Hard", "type": "trap", "params": [0.5, 0.8, 1.0, 1.0]}]},
            base,
        )

        assert updated.speed == base.speed
        assert updated.distance == base.distance
        assert [mf.name for mf in updated.brake.functions] == ["Hard"]
