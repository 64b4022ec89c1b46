"""Test module for CurveSettings

The tests are run using pytest.
"""

import pytest

from bezkit import consts
from bezkit.bezier import BezierCurve
from bezkit.common import DEFAULT_SETTINGS, CurveSettings, InvalidCurveError


class TestCurveSettings:
    """Test defaults, validation and serialization of settings."""

    def test_defaults(self):
        """Test that defaults come from the constants module."""
        settings = CurveSettings()
        assert settings.lut_steps == consts.LUT_STEPS
        assert settings.project_lut_steps == consts.PROJECT_LUT_STEPS
        assert settings.reduce_step == consts.REDUCE_STEP
        assert settings.simple_max_angle == consts.SIMPLE_MAX_ANGLE
        assert settings.intersection_threshold == consts.INTERSECTION_THRESHOLD
        assert settings.intersection_max_depth == consts.INTERSECTION_MAX_DEPTH
        assert settings.arc_tolerance == consts.ARC_TOLERANCE
        assert settings.arc_max_iterations == consts.ARC_MAX_ITERATIONS
        assert settings == DEFAULT_SETTINGS

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"lut_steps": 0},
            {"project_lut_steps": 0},
            {"reduce_step": 0.0},
            {"reduce_step": 1.0},
            {"intersection_max_depth": 0},
            {"arc_max_iterations": 0},
            {"intersection_threshold": 0.0},
            {"arc_tolerance": -1.0},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test that invalid values are rejected."""
        with pytest.raises(InvalidCurveError):
            CurveSettings(**kwargs)

    def test_invalid_values_are_value_errors(self):
        """Test that callers may catch ValueError."""
        with pytest.raises(ValueError):
            CurveSettings(lut_steps=-5)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries."""
        settings = CurveSettings(lut_steps=20, arc_tolerance=0.1)
        assert CurveSettings.from_dict(settings.to_dict()) == settings

    def test_partial_dict(self):
        """Test that missing keys use defaults."""
        settings = CurveSettings.from_dict({"lut_steps": 20})
        assert settings.lut_steps == 20
        assert settings.reduce_step == DEFAULT_SETTINGS.reduce_step

    def test_curve_uses_settings(self):
        """Test that curves use their settings for defaults."""
        curve = BezierCurve([(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)], settings=CurveSettings(lut_steps=20))
        assert len(curve.lut()) == 21

    def test_split_inherits_settings(self):
        """Test that sub-curves share the settings of their parent."""
        settings = CurveSettings(lut_steps=20)
        curve = BezierCurve([(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)], settings=settings)
        left, right = curve.split(0.5)
        assert left.settings is settings
        assert right.settings is settings
        assert all(segment.settings is settings for segment in curve.reduce())
