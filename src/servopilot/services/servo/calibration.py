"""
Non-linear servo calibration.

SG90-class servos do not travel linearly with pulse width. A handful of
measured breakpoints (nominal angle -> value the servo actually needs) is
enough to correct that by piecewise-linear interpolation.

All arithmetic is integer and truncates toward zero at each step, matching
the granularity of the PWM register the result ends up in.
"""

import logging
from collections.abc import Sequence

from servopilot.exceptions import CalibrationConfigError

logger = logging.getLogger(__name__)

MIN_ANGLE = 0
MAX_ANGLE = 180

CalibrationPairs = Sequence[tuple[int, int]]


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero (C semantics), unlike Python's floor division."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def interpolate(angle: int, points: CalibrationPairs) -> int:
    """
    Map a requested angle to its calibrated value.

    The first consecutive pair (x1, y1), (x2, y2) with x1 <= angle <= x2 wins,
    so an angle sitting exactly on an inner breakpoint is resolved by the
    segment that ends there.

    Args:
        angle: Requested angle. Range is not enforced here.
        points: Breakpoints sorted by strictly increasing input angle

    Returns:
        Calibrated value, or the angle unchanged if no segment brackets it
    """
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        if x1 <= angle <= x2:
            return y1 + trunc_div((angle - x1) * (y2 - y1), x2 - x1)

    logger.debug(f"Angle {angle} outside calibration breakpoints, passing through unchanged")
    return angle


def validate_calibration_points(
    points: CalibrationPairs,
    min_angle: int = MIN_ANGLE,
    max_angle: int = MAX_ANGLE,
) -> None:
    """
    Check the invariants interpolate() relies on.

    Raises:
        CalibrationConfigError: if the table has fewer than two points, does not
            span [min_angle, max_angle], or repeats / reorders an input angle
            (which would divide by zero during interpolation).
    """
    if len(points) < 2:
        raise CalibrationConfigError("servo.calibration.too_few_points", count=len(points))

    first, last = points[0][0], points[-1][0]
    if first != min_angle:
        raise CalibrationConfigError("servo.calibration.bad_start", expected=min_angle, actual=first)
    if last != max_angle:
        raise CalibrationConfigError("servo.calibration.bad_end", expected=max_angle, actual=last)

    for (previous, _), (current, _) in zip(points, points[1:]):
        if current <= previous:
            raise CalibrationConfigError("servo.calibration.not_increasing", previous=previous, current=current)
