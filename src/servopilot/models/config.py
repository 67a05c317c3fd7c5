"""Configuration data models for servopilot."""

from pathlib import Path
from typing import Literal

import pydantic
from pydantic import BaseModel, Field, field_validator

from servopilot.exceptions import ConfigurationError
from servopilot.models.servo import CalibrationTable, PwmRange, ServoSettings


class ServoConfig(BaseModel):
    """Servo wiring and calibration."""

    # BCM numbering; wiringPi pin 1 is the same physical pin
    gpio_pin: int = 18
    min_pwm: int = 50
    max_pwm: int = 250
    calibration: CalibrationTable = Field(default_factory=CalibrationTable)

    def to_settings(self) -> ServoSettings:
        """Build the immutable settings the mapper is constructed with.

        Raises:
            ConfigurationError: if the PWM bounds are negative or inverted
        """
        try:
            return ServoSettings(
                pin=self.gpio_pin,
                pwm_range=PwmRange(min_pwm=self.min_pwm, max_pwm=self.max_pwm),
                calibration=self.calibration,
            )
        except pydantic.ValidationError as e:
            raise ConfigurationError("config.invalid", path="servo", reason=e) from e


class PwmConfig(BaseModel):
    """Hardware PWM timing.

    With a 19.2 MHz base clock, divisor 192 and range 2000 the period is 20 ms
    (50 Hz) and one register step is 10 us, so 50..250 spans 0.5..2.5 ms.
    """

    base_clock_hz: int = 19_200_000
    clock_divisor: int = Field(192, gt=0)
    range: int = Field(2000, gt=0)

    @property
    def frequency_hz(self) -> int:
        return self.base_clock_hz // (self.clock_divisor * self.range)


class LoopConfig(BaseModel):
    """Command loop behaviour."""

    delay_ms: int = Field(500, ge=0)  # Pause after each command so the servo can settle


class LogStoreConfig(BaseModel):
    """Angle log store configuration."""

    enabled: bool = True
    db_path: Path | None = None

    @field_validator("db_path", mode="before")
    @classmethod
    def expand_db_path(cls, v: str | Path | None) -> Path | None:
        """Expand user path for db_path."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class PathsConfig(BaseModel):
    """Paths configuration."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".servopilot")

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: str | Path) -> Path:
        """Expand user path for data_dir."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class AdvancedConfig(BaseModel):
    """Advanced configuration."""

    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class AppConfig(BaseModel):
    """Application configuration."""

    servo: ServoConfig = Field(default_factory=ServoConfig)
    pwm: PwmConfig = Field(default_factory=PwmConfig)
    loop: LoopConfig = Field(default_factory=LoopConfig)
    log_store: LogStoreConfig = Field(default_factory=LogStoreConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    @property
    def angle_log_path(self) -> Path:
        """Resolved location of the angle log database."""
        return self.log_store.db_path or self.paths.data_dir / "angles.db"
