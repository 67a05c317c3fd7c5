"""Servo calibration and command models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from servopilot.exceptions import ConfigurationError
from servopilot.services.servo.calibration import MAX_ANGLE, MIN_ANGLE, validate_calibration_points

# Measured on an SG90: nominal angle -> value the servo needs to actually reach it
DEFAULT_CALIBRATION_POINTS: tuple[tuple[int, int], ...] = (
    (0, 0),
    (45, 30),
    (90, 80),
    (135, 120),
    (180, 168),
)


class CalibrationPoint(BaseModel):
    """A measured (nominal angle, corrected value) breakpoint."""

    model_config = ConfigDict(frozen=True)

    input_angle: int = Field(..., description="Nominal angle requested by the operator (deg)")
    corrected_value: int = Field(..., description="Value the servo needs to actually reach input_angle")


class CalibrationTable(BaseModel):
    """Ordered breakpoints covering the full [0, 180] travel. Validated once on construction."""

    model_config = ConfigDict(frozen=True)

    points: tuple[CalibrationPoint, ...] = Field(
        default_factory=lambda: tuple(
            CalibrationPoint(input_angle=x, corrected_value=y) for x, y in DEFAULT_CALIBRATION_POINTS
        )
    )

    @field_validator("points", mode="before")
    @classmethod
    def coerce_pairs(cls, v: Any) -> Any:  # noqa: ANN401
        """Accept [[angle, value], ...] as written in YAML config files."""
        if isinstance(v, (list, tuple)):
            return tuple(
                {"input_angle": p[0], "corrected_value": p[1]} if isinstance(p, (list, tuple)) else p for p in v
            )
        return v

    @model_validator(mode="after")
    def check_invariants(self) -> "CalibrationTable":
        validate_calibration_points(self.pairs())
        return self

    @classmethod
    def from_pairs(cls, pairs: list[tuple[int, int]] | tuple[tuple[int, int], ...]) -> "CalibrationTable":
        return cls(points=tuple(pairs))

    def pairs(self) -> tuple[tuple[int, int], ...]:
        """Breakpoints as plain (input_angle, corrected_value) tuples."""
        return tuple((p.input_angle, p.corrected_value) for p in self.points)

    @property
    def max_corrected_value(self) -> int:
        return max(p.corrected_value for p in self.points)


class PwmRange(BaseModel):
    """Duty-cycle register bounds for calibrated angle 0 and the top of travel."""

    model_config = ConfigDict(frozen=True)

    min_pwm: int = Field(50, ge=0, description="Register value at calibrated angle 0 (1 ms pulse)")
    max_pwm: int = Field(250, ge=0, description="Register value at the top of travel (2 ms pulse)")

    @model_validator(mode="after")
    def check_order(self) -> "PwmRange":
        if self.min_pwm > self.max_pwm:
            raise ConfigurationError("servo.pwm.bad_range", min_pwm=self.min_pwm, max_pwm=self.max_pwm)
        return self


class ServoSettings(BaseModel):
    """Everything the mapper needs, fixed at construction."""

    model_config = ConfigDict(frozen=True)

    pin: int = Field(18, description="BCM GPIO number of the PWM output (GPIO18 = PWM0)")
    pwm_range: PwmRange = Field(default_factory=PwmRange)
    calibration: CalibrationTable = Field(default_factory=CalibrationTable)
    min_angle: int = MIN_ANGLE
    max_angle: int = MAX_ANGLE


class ServoCommand(BaseModel):
    """Result of a successful angle mapping."""

    model_config = ConfigDict(frozen=True)

    angle: int
    calibrated_angle: int
    pwm_value: int


class InvalidAngle(BaseModel):
    """Result of a rejected angle mapping. Nothing was written to hardware."""

    model_config = ConfigDict(frozen=True)

    angle: int
    message: str


class AngleRecord(BaseModel):
    """A row of the angle log store."""

    id: int
    angle: int
    timestamp: str
