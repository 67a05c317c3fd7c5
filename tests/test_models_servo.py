"""Tests for servo models."""

import pydantic
import pytest

from servopilot.exceptions import CalibrationConfigError, ConfigurationError
from servopilot.models.servo import (
    DEFAULT_CALIBRATION_POINTS,
    CalibrationPoint,
    CalibrationTable,
    PwmRange,
    ServoSettings,
)


def test_default_table_is_the_measured_sg90_table() -> None:
    table = CalibrationTable()
    assert table.pairs() == DEFAULT_CALIBRATION_POINTS
    assert table.max_corrected_value == 168


def test_table_accepts_yaml_style_pairs() -> None:
    table = CalibrationTable(points=[[0, 0], [90, 85], [180, 170]])
    assert table.points[1] == CalibrationPoint(input_angle=90, corrected_value=85)


def test_table_accepts_point_mappings() -> None:
    table = CalibrationTable(
        points=[
            {"input_angle": 0, "corrected_value": 0},
            {"input_angle": 180, "corrected_value": 160},
        ]
    )
    assert table.pairs() == ((0, 0), (180, 160))


def test_duplicate_breakpoint_is_rejected_at_construction() -> None:
    with pytest.raises(CalibrationConfigError):
        CalibrationTable.from_pairs([(0, 0), (90, 80), (90, 90), (180, 168)])


def test_table_is_immutable() -> None:
    table = CalibrationTable()
    with pytest.raises(pydantic.ValidationError):
        table.points = ()  # type: ignore[misc]


def test_pwm_range_order_is_enforced() -> None:
    with pytest.raises(ConfigurationError):
        PwmRange(min_pwm=250, max_pwm=50)


def test_servo_settings_defaults() -> None:
    settings = ServoSettings()
    assert settings.pin == 18
    assert settings.pwm_range == PwmRange(min_pwm=50, max_pwm=250)
    assert (settings.min_angle, settings.max_angle) == (0, 180)
