"""Data models for servopilot."""

from servopilot.models.config import AppConfig
from servopilot.models.servo import (
    AngleRecord,
    CalibrationPoint,
    CalibrationTable,
    InvalidAngle,
    PwmRange,
    ServoCommand,
    ServoSettings,
)

__all__ = [
    "AppConfig",
    "AngleRecord",
    "CalibrationPoint",
    "CalibrationTable",
    "InvalidAngle",
    "PwmRange",
    "ServoCommand",
    "ServoSettings",
]
