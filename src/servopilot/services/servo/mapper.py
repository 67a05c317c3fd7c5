"""Angle-to-PWM mapping."""

import logging

from servopilot.exceptions import InvalidAngleError
from servopilot.models.servo import InvalidAngle, ServoCommand, ServoSettings
from servopilot.services.servo.calibration import interpolate, trunc_div
from servopilot.services.servo.pwm_sinks import PwmSink

logger = logging.getLogger(__name__)

INVALID_ANGLE_MESSAGE = "Invalid angle! Please enter a value between {min_angle} and {max_angle}."


class AnglePwmMapper:
    """Validates an angle, calibrates it and scales it into the PWM duty range.

    Stateless apart from its fixed settings: the same angle always produces
    the same command and the same sink write.
    """

    def __init__(self, settings: ServoSettings, sink: PwmSink) -> None:
        self.settings = settings
        self.sink = sink
        self._points = settings.calibration.pairs()

    def compute(self, angle: int) -> ServoCommand:
        """
        Map an angle to its calibrated value and PWM duty without touching hardware.

        Raises:
            InvalidAngleError: if angle is outside [min_angle, max_angle]
        """
        s = self.settings
        if angle < s.min_angle or angle > s.max_angle:
            raise InvalidAngleError(angle, s.min_angle, s.max_angle)

        calibrated = interpolate(angle, self._points)
        span = s.pwm_range.max_pwm - s.pwm_range.min_pwm
        pwm_value = s.pwm_range.min_pwm + trunc_div(calibrated * span, s.max_angle - s.min_angle)
        return ServoCommand(angle=angle, calibrated_angle=calibrated, pwm_value=pwm_value)

    def set_angle(self, angle: int) -> ServoCommand | InvalidAngle:
        """
        Map an angle and drive the sink with the result.

        Out-of-range angles are reported, not raised: the sink is left alone and
        an InvalidAngle is returned so the caller's loop can carry on.
        """
        try:
            command = self.compute(angle)
        except InvalidAngleError as e:
            logger.warning(str(e))
            return InvalidAngle(
                angle=angle,
                message=INVALID_ANGLE_MESSAGE.format(
                    min_angle=self.settings.min_angle, max_angle=self.settings.max_angle
                ),
            )

        self.sink.set_duty(self.settings.pin, command.pwm_value)
        logger.info(
            f"Servo on GPIO {self.settings.pin} -> {angle} deg "
            f"(calibrated {command.calibrated_angle}, pwm {command.pwm_value})"
        )
        return command
