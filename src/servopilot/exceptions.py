"""Centralized exception hierarchy for servopilot.

Every error carries a dot-path message key plus formatting params, so the
same error can be logged in a structured way and rendered for the operator.
"""

MESSAGES: dict[str, str] = {
    "servo.angle.out_of_range": "Invalid angle {angle}: expected a value between {min_angle} and {max_angle}",
    "servo.calibration.too_few_points": "Calibration table needs at least 2 points, got {count}",
    "servo.calibration.bad_start": "Calibration table must start at input angle {expected}, got {actual}",
    "servo.calibration.bad_end": "Calibration table must end at input angle {expected}, got {actual}",
    "servo.calibration.not_increasing": (
        "Calibration input angles must be strictly increasing: {previous} followed by {current}"
    ),
    "servo.pwm.bad_range": "PWM range is invalid: min_pwm={min_pwm} max_pwm={max_pwm}",
    "config.invalid": "Configuration file {path} is invalid: {reason}",
    "hardware.pwm.setup_failed": "PWM setup failed on GPIO {pin}: {reason}",
    "hardware.pwm.not_open": "PWM sink is not open",
    "angle_log.failed": "Angle log store at {path} failed: {reason}",
}


class AppBaseError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message_key: str, retriable: bool = False, **params: object) -> None:
        """
        Initialize the error.

        Args:
            message_key: Dot-path into MESSAGES (e.g., 'servo.angle.out_of_range')
            retriable: Whether the operation can be retried
            **params: Parameters for string formatting of the message
        """
        super().__init__(message_key)
        self.message_key = message_key
        self.retriable = retriable
        self.params = params

    def __str__(self) -> str:
        """Returns the English version of the error message."""
        template = MESSAGES.get(self.message_key)
        if template is not None:
            try:
                return template.format(**self.params)
            except (KeyError, IndexError):
                pass
        params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"[{self.message_key}] {params_str} (retriable: {self.retriable})"


class ValidationError(AppBaseError):
    """Raised when input validation fails."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, **params)


class InvalidAngleError(ValidationError):
    """Raised when a requested angle lies outside the servo's travel."""

    def __init__(self, angle: int, min_angle: int = 0, max_angle: int = 180) -> None:
        super().__init__("servo.angle.out_of_range", angle=angle, min_angle=min_angle, max_angle=max_angle)
        self.angle = angle


class ConfigurationError(AppBaseError):
    """Raised when configuration data violates an invariant. Fatal at startup."""

    def __init__(self, message_key: str, **params: object) -> None:
        super().__init__(message_key, **params)


class CalibrationConfigError(ConfigurationError):
    """Raised when a calibration table is malformed (unsorted, duplicated or partial)."""


class OperationalError(AppBaseError):
    """Raised when an operational failure occurs (PWM hardware, log store, etc.)."""

    def __init__(self, message_key: str, retriable: bool = False, **params: object) -> None:
        super().__init__(message_key, retriable=retriable, **params)


class PwmSetupError(OperationalError):
    """Raised when the PWM hardware cannot be initialized or driven."""

    def __init__(self, message_key: str = "hardware.pwm.setup_failed", **params: object) -> None:
        super().__init__(message_key, retriable=True, **params)


class AngleLogError(OperationalError):
    """Raised when the angle log store cannot be opened or written."""

    def __init__(self, path: object, reason: object) -> None:
        super().__init__("angle_log.failed", path=path, reason=reason)
