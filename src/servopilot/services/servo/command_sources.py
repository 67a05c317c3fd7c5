"""
Command sources: where the control loop gets its angles from.

Each source yields either an int angle or a MalformedCommand for input that
could not be read as an integer. Range checking is left to the mapper.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Enter the servo angle (0-180): "


class MalformedCommand(BaseModel):
    """Input that is not an integer angle."""

    model_config = ConfigDict(frozen=True)

    raw: str
    line: int | None = None


CommandResult = int | MalformedCommand


def parse_angle(text: str, line: int | None = None) -> CommandResult:
    """Parse one angle; anything that is not an integer becomes a MalformedCommand."""
    try:
        return int(text.strip())
    except ValueError:
        return MalformedCommand(raw=text.strip(), line=line)


class CommandSource(ABC):
    """Abstract source of angle commands."""

    @abstractmethod
    def __iter__(self) -> Iterator[CommandResult]:
        pass


class InteractiveCommandSource(CommandSource):
    """Prompts the operator for one angle at a time until EOF or Ctrl-C."""

    def __init__(self, prompt: str = DEFAULT_PROMPT, input_func: Callable[[str], str] | None = None) -> None:
        self.prompt = prompt
        self.input_func = input_func or input

    def __iter__(self) -> Iterator[CommandResult]:
        while True:
            try:
                text = self.input_func(self.prompt)
            except (EOFError, KeyboardInterrupt):
                logger.debug("Interactive input closed")
                return
            if not text.strip():
                continue
            yield parse_angle(text)


class ScriptedCommandSource(CommandSource):
    """Replays a fixed sequence of angles (CLI --angles, test fixtures)."""

    def __init__(self, angles: Iterable[int | str]) -> None:
        self.angles = list(angles)

    def __iter__(self) -> Iterator[CommandResult]:
        for angle in self.angles:
            yield angle if isinstance(angle, int) else parse_angle(angle)


class FileCommandSource(CommandSource):
    """Reads one angle per line from a text file. '#' starts a comment."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[CommandResult]:
        with open(self.path, encoding="utf-8") as f:
            for lineno, raw in enumerate(f, start=1):
                text = raw.split("#", 1)[0].strip()
                if text:
                    yield parse_angle(text, line=lineno)
