"""The read -> map -> apply -> log loop."""

import logging
import time
from collections.abc import Callable

from pydantic import BaseModel

from servopilot.models.servo import InvalidAngle
from servopilot.services.angle_log.store import AngleLogStore
from servopilot.services.servo.command_sources import CommandSource, MalformedCommand
from servopilot.services.servo.mapper import AnglePwmMapper

logger = logging.getLogger(__name__)


class ControllerSummary(BaseModel):
    """Counts of what happened during a run."""

    applied: int = 0
    invalid: int = 0
    malformed: int = 0


class ServoController:
    """Feeds angles from a command source through the mapper, one at a time."""

    def __init__(
        self,
        mapper: AnglePwmMapper,
        source: CommandSource,
        log_store: AngleLogStore | None = None,
        delay_s: float = 0.5,
        echo: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            mapper: Mapper wired to the PWM sink
            source: Where angles come from
            log_store: Optional store; only successfully applied angles are logged
            delay_s: Pause after each command so the servo can settle
            echo: Operator-facing output
            sleep: Injected for tests
        """
        self.mapper = mapper
        self.source = source
        self.log_store = log_store
        self.delay_s = delay_s
        self.echo = echo
        self.sleep = sleep

    def run(self) -> ControllerSummary:
        """Process every command the source yields. Returns when the source is exhausted."""
        summary = ControllerSummary()

        for command in self.source:
            if isinstance(command, MalformedCommand):
                summary.malformed += 1
                where = f" (line {command.line})" if command.line is not None else ""
                self.echo(f"Not an angle: {command.raw!r}{where}")
                logger.warning(f"Ignoring malformed command {command.raw!r}{where}")
            else:
                result = self.mapper.set_angle(command)
                if isinstance(result, InvalidAngle):
                    summary.invalid += 1
                    self.echo(result.message)
                else:
                    summary.applied += 1
                    self.echo(
                        f"Servo angle set to {result.angle} degrees "
                        f"(Calibrated: {result.calibrated_angle}, PWM: {result.pwm_value})"
                    )
                    if self.log_store is not None:
                        self.log_store.append(result.angle)

            if self.delay_s > 0:
                self.sleep(self.delay_s)

        logger.info(
            f"Command source exhausted: {summary.applied} applied, "
            f"{summary.invalid} invalid, {summary.malformed} malformed"
        )
        return summary
