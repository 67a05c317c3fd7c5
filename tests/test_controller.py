"""Tests for the servo control loop."""

from pathlib import Path

import pytest

from servopilot.models.servo import ServoSettings
from servopilot.services.angle_log import AngleLogStore
from servopilot.services.servo.command_sources import ScriptedCommandSource
from servopilot.services.servo.controller import ControllerSummary, ServoController
from servopilot.services.servo.mapper import AnglePwmMapper
from servopilot.services.servo.pwm_sinks import RecordingPwmSink


@pytest.fixture
def sink() -> RecordingPwmSink:
    return RecordingPwmSink()


def _controller(
    sink: RecordingPwmSink,
    angles: list[int | str],
    store: AngleLogStore | None = None,
) -> tuple[ServoController, list[str], list[float]]:
    echoed: list[str] = []
    slept: list[float] = []
    controller = ServoController(
        AnglePwmMapper(ServoSettings(), sink),
        ScriptedCommandSource(angles),
        log_store=store,
        delay_s=0.5,
        echo=echoed.append,
        sleep=slept.append,
    )
    return controller, echoed, slept


def test_valid_angles_drive_sink_and_report(sink: RecordingPwmSink) -> None:
    controller, echoed, slept = _controller(sink, [0, 90])

    summary = controller.run()

    assert summary == ControllerSummary(applied=2)
    assert sink.writes == [(18, 50), (18, 138)]
    assert echoed == [
        "Servo angle set to 0 degrees (Calibrated: 0, PWM: 50)",
        "Servo angle set to 90 degrees (Calibrated: 80, PWM: 138)",
    ]
    assert slept == [0.5, 0.5]


def test_invalid_and_malformed_commands_do_not_stop_the_loop(sink: RecordingPwmSink) -> None:
    controller, echoed, slept = _controller(sink, [-1, "oops", 200, 45])

    summary = controller.run()

    assert summary == ControllerSummary(applied=1, invalid=2, malformed=1)
    assert sink.writes == [(18, 83)]
    assert echoed[0] == "Invalid angle! Please enter a value between 0 and 180."
    assert echoed[1] == "Not an angle: 'oops'"
    assert len(slept) == 4


def test_only_applied_angles_are_logged(sink: RecordingPwmSink, tmp_path: Path) -> None:
    with AngleLogStore(tmp_path / "angles.db") as store:
        controller, _, _ = _controller(sink, [180, 999, 45], store=store)
        controller.run()

        assert [r.angle for r in store.recent()] == [45, 180]


def test_zero_delay_skips_sleep(sink: RecordingPwmSink) -> None:
    slept: list[float] = []
    controller = ServoController(
        AnglePwmMapper(ServoSettings(), sink),
        ScriptedCommandSource([10]),
        delay_s=0,
        echo=lambda _: None,
        sleep=slept.append,
    )

    controller.run()

    assert slept == []
