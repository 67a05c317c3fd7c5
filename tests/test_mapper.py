"""Tests for AnglePwmMapper."""

import pytest

from servopilot.exceptions import InvalidAngleError
from servopilot.models.servo import CalibrationTable, InvalidAngle, PwmRange, ServoCommand, ServoSettings
from servopilot.services.servo.mapper import AnglePwmMapper
from servopilot.services.servo.pwm_sinks import RecordingPwmSink


@pytest.fixture
def sink() -> RecordingPwmSink:
    return RecordingPwmSink()


@pytest.fixture
def mapper(sink: RecordingPwmSink) -> AnglePwmMapper:
    return AnglePwmMapper(ServoSettings(), sink)


@pytest.mark.parametrize(
    "angle,calibrated,pwm",
    [
        (0, 0, 50),
        (45, 30, 83),
        (90, 80, 138),
        (180, 168, 236),
    ],
)
def test_reference_scenarios(
    mapper: AnglePwmMapper, sink: RecordingPwmSink, angle: int, calibrated: int, pwm: int
) -> None:
    result = mapper.set_angle(angle)

    assert result == ServoCommand(angle=angle, calibrated_angle=calibrated, pwm_value=pwm)
    assert sink.writes == [(18, pwm)]


@pytest.mark.parametrize("angle", [-1, 181, 200, -1000])
def test_out_of_range_angle_is_reported_without_hardware_write(
    mapper: AnglePwmMapper, sink: RecordingPwmSink, angle: int
) -> None:
    result = mapper.set_angle(angle)

    assert isinstance(result, InvalidAngle)
    assert result.angle == angle
    assert "between 0 and 180" in result.message
    assert sink.writes == []


def test_compute_raises_for_out_of_range_angle(mapper: AnglePwmMapper) -> None:
    with pytest.raises(InvalidAngleError) as exc_info:
        mapper.compute(200)
    assert exc_info.value.angle == 200
    assert "200" in str(exc_info.value)


def test_compute_does_not_touch_sink(mapper: AnglePwmMapper, sink: RecordingPwmSink) -> None:
    mapper.compute(90)
    assert sink.writes == []


def test_angle_zero_maps_to_min_pwm(sink: RecordingPwmSink) -> None:
    settings = ServoSettings(pwm_range=PwmRange(min_pwm=100, max_pwm=500))
    assert AnglePwmMapper(settings, sink).compute(0).pwm_value == 100


def test_mapping_is_monotonic(mapper: AnglePwmMapper) -> None:
    values = [mapper.compute(angle).pwm_value for angle in range(0, 181)]
    assert values == sorted(values)
    assert all(50 <= v <= 250 for v in values)


def test_mapping_is_idempotent(mapper: AnglePwmMapper, sink: RecordingPwmSink) -> None:
    first = mapper.set_angle(123)
    second = mapper.set_angle(123)

    assert first == second
    assert sink.writes[0] == sink.writes[1]


def test_custom_pin_and_table(sink: RecordingPwmSink) -> None:
    settings = ServoSettings(
        pin=12,
        calibration=CalibrationTable.from_pairs([(0, 0), (180, 180)]),
    )
    mapper = AnglePwmMapper(settings, sink)

    result = mapper.set_angle(90)

    assert isinstance(result, ServoCommand)
    assert result.calibrated_angle == 90
    assert result.pwm_value == 150
    assert sink.last_write == (12, 150)
