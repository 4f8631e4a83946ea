"""
Unit tests for SkateboardParams and state creation.

Tests default values, clamping of out-of-range inputs and reset behaviour.
"""

import math

import pytest

from skateboard.params import MIN_MASS, SkateboardParams
from skateboard.state import create_state


class TestSkateboardParams:
    """Test suite for SkateboardParams dataclass"""

    def test_default_initialization(self) -> None:
        """Test that SkateboardParams initializes with default values"""
        params = SkateboardParams()

        assert params.mass == 70.0
        assert params.initial_speed == 6.0
        assert params.obstacle_position == 20.0
        assert params.mu == 0.7
        assert params.incline == 0.0
        assert params.rolling_resistance == 0.01
        assert abs(params.dt - 1.0 / 120.0) < 1e-12

    def test_custom_initialization(self) -> None:
        """Test that SkateboardParams can be initialized with custom values"""
        params = SkateboardParams(mass=90.0, initial_speed=4.0, mu=0.5)

        assert params.mass == 90.0
        assert params.initial_speed == 4.0
        assert params.mu == 0.5

    def test_mass_clamped_to_floor(self) -> None:
        """Test that non-positive mass is raised to the floor"""
        assert SkateboardParams(mass=0.0).mass == MIN_MASS
        assert SkateboardParams(mass=-5.0).mass == MIN_MASS

    def test_negative_coefficients_clamped(self) -> None:
        """Test that friction and rolling coefficients cannot go negative"""
        params = SkateboardParams(mu=-0.2, rolling_resistance=-0.01)

        assert params.mu == 0.0
        assert params.rolling_resistance == 0.0

    def test_invalid_time_settings_replaced(self) -> None:
        """Test that non-positive dt and time scale fall back to defaults"""
        params = SkateboardParams(dt=0.0, time_scale=-1.0)

        assert params.dt > 0
        assert params.time_scale == 1.0

    def test_from_degrees(self) -> None:
        """Test construction with the incline in degrees"""
        params = SkateboardParams.from_degrees(10.0, mass=80.0)

        assert abs(params.incline - math.radians(10.0)) < 1e-12
        assert abs(params.incline_deg - 10.0) < 1e-9
        assert params.mass == 80.0


class TestCreateState:
    """Test suite for fresh state creation"""

    @pytest.fixture
    def params(self) -> SkateboardParams:
        """Create default parameters for testing"""
        return SkateboardParams()

    def test_dynamic_fields_zeroed(self, params: SkateboardParams) -> None:
        """Test that a fresh state starts at the origin with the initial speed"""
        state = create_state(params)

        assert state.t == 0.0
        assert state.x == 0.0
        assert state.a == 0.0
        assert state.v == params.initial_speed
        assert state.brake_intensity == 0.0
        assert state.stop_details is None

    def test_reset_is_idempotent(self, params: SkateboardParams) -> None:
        """Test that two fresh states from the same parameters are identical"""
        assert create_state(params) == create_state(params)

    def test_distance_to_obstacle(self, params: SkateboardParams) -> None:
        """Test the distance helper never goes negative"""
        state = create_state(params)
        state.x = 25.0

        assert state.distance_to_obstacle == 0.0
