#!/usr/bin/env python
"""
Example: Calibration Table

Print the calibrated value and PWM register value for a range of angles,
without touching hardware. Handy when tuning calibration points in config.yaml.

Usage:
    python -m examples.servo.calibration_table [step]

Example:
    python -m examples.servo.calibration_table 15
"""

import logging
import sys

from servopilot.config import get_config
from servopilot.services.servo.mapper import AnglePwmMapper
from servopilot.services.servo.pwm_sinks import RecordingPwmSink

logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def main() -> None:
    """Print angle -> calibrated -> PWM for the configured servo"""
    step = int(sys.argv[1]) if len(sys.argv) > 1 else 5
    if step <= 0:
        print("Usage: python calibration_table.py [step > 0]")
        sys.exit(1)

    config = get_config()
    settings = config.servo.to_settings()
    mapper = AnglePwmMapper(settings, RecordingPwmSink())

    print("\n" + "=" * 40)
    print("CALIBRATION TABLE")
    print(f"GPIO: {settings.pin}")
    print(f"PWM range: {settings.pwm_range.min_pwm}..{settings.pwm_range.max_pwm} of {config.pwm.range}")
    print(f"Breakpoints: {list(settings.calibration.pairs())}")
    print("=" * 40)
    print(f"{'angle':>6} {'calibrated':>11} {'pwm':>6} {'pulse_us':>9}")

    us_per_step = 1_000_000 / (config.pwm.frequency_hz * config.pwm.range)
    for angle in range(settings.min_angle, settings.max_angle + 1, step):
        command = mapper.compute(angle)
        print(f"{angle:>6} {command.calibrated_angle:>11} {command.pwm_value:>6} {command.pwm_value * us_per_step:>9.0f}")


if __name__ == "__main__":
    main()
