"""
PWM output backends.

The mapper only knows about PwmSink.set_duty(); the concrete sink decides how a
duty-cycle register value reaches the pin.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any

from typing_extensions import Self

from servopilot.exceptions import PwmSetupError

logger = logging.getLogger(__name__)

# pigpio expresses hardware PWM duty as parts per million
PIGPIO_DUTY_SCALE = 1_000_000


class PwmSink(ABC):
    """Abstract base class for a single-owner PWM output."""

    def __init__(self) -> None:
        self.is_open = False

    def open(self) -> None:
        """Acquire the underlying output. Default: nothing to acquire."""
        self.is_open = True

    @abstractmethod
    def set_duty(self, pin: int, value: int) -> None:
        """
        Apply a duty-cycle register value to a pin.

        Args:
            pin: BCM GPIO number
            value: Duty-cycle register value (0..pwm range)
        """
        pass

    def close(self) -> None:
        """Release the underlying output."""
        self.is_open = False

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class RecordingPwmSink(PwmSink):
    """Keeps every write in memory. Used for dry runs and tests."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[tuple[int, int]] = []

    def set_duty(self, pin: int, value: int) -> None:
        self.writes.append((pin, value))
        logger.debug(f"[dry-run] GPIO {pin} duty={value}")

    @property
    def last_write(self) -> tuple[int, int] | None:
        return self.writes[-1] if self.writes else None


class PigpioPwmSink(PwmSink):
    """Hardware PWM through the pigpio daemon.

    Duty values are register counts out of `pwm_range`, the same units a
    wiringPi pwmWrite() takes with pwmSetRange(pwm_range). They are rescaled to
    pigpio's parts-per-million duty before being written.
    """

    def __init__(self, pin: int, frequency_hz: int = 50, pwm_range: int = 2000, host: str | None = None) -> None:
        super().__init__()
        self.pin = pin
        self.frequency_hz = frequency_hz
        self.pwm_range = pwm_range
        self.host = host
        self._pi: Any = None
        self._pigpio: Any = None

    def to_pigpio_duty(self, value: int) -> int:
        """Convert a register value (0..pwm_range) to pigpio's 0..1_000_000 duty."""
        value = max(0, min(self.pwm_range, value))
        return value * PIGPIO_DUTY_SCALE // self.pwm_range

    def open(self) -> None:
        try:
            import pigpio
        except ImportError as e:
            raise PwmSetupError(pin=self.pin, reason=f"pigpio is not installed ({e})") from e

        pi = pigpio.pi(self.host) if self.host else pigpio.pi()
        if not pi.connected:
            raise PwmSetupError(pin=self.pin, reason="pigpio daemon not running (sudo systemctl start pigpiod)")

        # hardware_PWM() switches the pin to its PWM alt function itself
        self._pigpio = pigpio
        self._pi = pi
        self.is_open = True
        logger.info(f"Hardware PWM ready on GPIO {self.pin} at {self.frequency_hz} Hz (range {self.pwm_range})")

    def set_duty(self, pin: int, value: int) -> None:
        if self._pi is None:
            raise PwmSetupError("hardware.pwm.not_open")
        try:
            self._pi.hardware_PWM(pin, self.frequency_hz, self.to_pigpio_duty(value))
        except self._pigpio.error as e:
            raise PwmSetupError(pin=pin, reason=e) from e

    def close(self) -> None:
        if self._pi is not None:
            try:
                # Stop pulses so the servo is not left holding position
                self._pi.hardware_PWM(self.pin, 0, 0)
            finally:
                self._pi.stop()
                self._pi = None
        super().close()
