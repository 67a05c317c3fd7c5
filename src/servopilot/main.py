import logging
import sys
from pathlib import Path

from servopilot import __version__
from servopilot.exceptions import ConfigurationError, OperationalError
from servopilot.logger import get_logger
from servopilot.models.config import AppConfig
from servopilot.services.angle_log import AngleLogStore
from servopilot.services.servo.command_sources import (
    CommandSource,
    FileCommandSource,
    InteractiveCommandSource,
    ScriptedCommandSource,
)
from servopilot.services.servo.controller import ControllerSummary, ServoController
from servopilot.services.servo.mapper import AnglePwmMapper
from servopilot.services.servo.pwm_sinks import PigpioPwmSink, PwmSink, RecordingPwmSink

BANNER = "SG90 Servo Motor Angle Control with Hardware PWM (Non-linear Calibration)"

EXIT_OK = 0
EXIT_HARDWARE = 1
EXIT_CONFIG = 2

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_sink(config: AppConfig, dry_run: bool) -> PwmSink:
    """Pick the PWM backend for this run."""
    if dry_run:
        return RecordingPwmSink()
    return PigpioPwmSink(
        pin=config.servo.gpio_pin,
        frequency_hz=config.pwm.frequency_hz,
        pwm_range=config.pwm.range,
    )


def build_source(angles: list[str] | None, file: Path | None) -> CommandSource:
    """Pick the command source: scripted angles, a file, or the interactive prompt."""
    if angles:
        return ScriptedCommandSource(angles)
    if file is not None:
        return FileCommandSource(file)
    return InteractiveCommandSource()


def run_servo(
    config: AppConfig,
    source: CommandSource,
    sink: PwmSink,
    log_angles: bool = True,
) -> ControllerSummary:
    """Run the control loop against an already-built source and sink.

    Args:
        config: Loaded configuration
        source: Command source to drain
        sink: PWM sink; opened here and always closed on exit
        log_angles: Whether to append applied angles to the angle log store

    Returns:
        Summary of the run
    """
    logger = get_logger(__name__)
    settings = config.servo.to_settings()
    mapper = AnglePwmMapper(settings, sink)

    store = AngleLogStore(config.angle_log_path) if log_angles and config.log_store.enabled else None

    with sink:
        logger.info("PWM sink ready", sink=type(sink).__name__, pin=settings.pin)
        controller = ServoController(
            mapper,
            source,
            log_store=store,
            delay_s=config.loop.delay_ms / 1000,
        )
        try:
            return controller.run()
        finally:
            if store is not None:
                store.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI argument parsing."""
    import argparse

    parser = argparse.ArgumentParser(
        description="servopilot - calibrated SG90 servo control over hardware PWM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  servopilot                       # Prompt for angles on GPIO18
  servopilot --angles 0 90 180     # Play a fixed sequence
  servopilot --file moves.txt      # One angle per line
  servopilot --dry-run --no-log    # No hardware, no angle log
        """,
    )

    parser.add_argument("--config", type=Path, metavar="PATH", help="Path to config.yaml")
    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument("--angles", nargs="+", metavar="ANGLE", help="Angles to apply instead of prompting")
    source_group.add_argument("--file", type=Path, metavar="PATH", help="Read angles from a file, one per line")
    parser.add_argument("--pin", type=int, metavar="BCM", help="Override the GPIO pin (BCM numbering)")
    parser.add_argument("--delay", type=float, metavar="SECONDS", help="Pause after each command")
    parser.add_argument("--dry-run", action="store_true", help="Do not touch hardware; record PWM writes in memory")
    parser.add_argument("--no-log", action="store_true", help="Do not write applied angles to the angle log")
    parser.add_argument("--version", action="version", version=f"servopilot {__version__}")

    args = parser.parse_args(argv)

    from servopilot.config import get_config, set_config_path

    print(BANNER)

    try:
        config = set_config_path(args.config) if args.config is not None else get_config()
        if args.pin is not None:
            config.servo.gpio_pin = args.pin
        if args.delay is not None:
            config.loop.delay_ms = int(args.delay * 1000)
        # Validate servo settings before any angle is processed
        config.servo.to_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    logger = get_logger(__name__)
    sink = build_sink(config, args.dry_run)
    source = build_source(args.angles, args.file)

    try:
        summary = run_servo(config, source, sink, log_angles=not args.no_log)
    except OperationalError as e:
        logger.error("Servo run aborted", error=str(e))
        print(f"{e}", file=sys.stderr)
        return EXIT_HARDWARE
    except OSError as e:
        # Unreadable --file
        print(f"{e}", file=sys.stderr)
        return EXIT_CONFIG

    logger.info("Servo run finished", **summary.model_dump())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
