"""
Unit tests for calibration settings.
"""

import pytest

from multicurve.settings import CalibrationSettings


class TestCalibrationSettings:
    """Tests for CalibrationSettings."""

    def test_defaults(self):
        """Test default tolerances and scheme."""
        settings = CalibrationSettings.default()
        assert settings.absolute_tolerance == 1e-10
        assert settings.max_iterations == 100
        assert settings.finite_difference_method == "central"

    def test_strict(self):
        """Test strict settings tighten tolerances."""
        settings = CalibrationSettings.strict()
        assert settings.absolute_tolerance < CalibrationSettings.default().absolute_tolerance
        assert settings.max_iterations == 200

    def test_dict_round_trip(self):
        """Test conversion to and from a dictionary."""
        settings = CalibrationSettings(max_iterations=20, initial_rate=0.02)
        assert CalibrationSettings.from_dict(settings.to_dict()) == settings

    def test_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ValueError):
            CalibrationSettings.from_dict({"tolerance": 1e-8})

    @pytest.mark.parametrize("kwargs", [
        {"absolute_tolerance": 0.0},
        {"relative_tolerance": -1e-10},
        {"max_iterations": 0},
        {"finite_difference_method": "backward"},
    ])
    def test_invalid(self, kwargs):
        """Test invalid values are rejected."""
        with pytest.raises(ValueError):
            CalibrationSettings(**kwargs)

    def test_frozen(self):
        """Test settings cannot be modified."""
        with pytest.raises(AttributeError):
            CalibrationSettings().max_iterations = 5
