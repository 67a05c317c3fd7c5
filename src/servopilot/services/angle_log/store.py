"""
SQLite-backed angle log.

One row per successfully applied angle:

    angle_log(id INTEGER PRIMARY KEY AUTOINCREMENT, angle INTEGER, timestamp TEXT)
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from types import TracebackType

from typing_extensions import Self

from servopilot.exceptions import AngleLogError
from servopilot.models.servo import AngleRecord

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS angle_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    angle INTEGER NOT NULL,
    timestamp TEXT NOT NULL
)
"""


class AngleLogStore:
    """Appends commanded angles with a timestamp to a local SQLite database."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        """Open the database, creating the file and schema if needed."""
        if self._conn is not None:
            return
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
            conn.execute(_SCHEMA)
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise AngleLogError(self.db_path, e) from e
        self._conn = conn
        logger.info(f"Angle log opened at {self.db_path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

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

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.open()
        assert self._conn is not None
        return self._conn

    def append(self, angle: int, timestamp: str | None = None) -> AngleRecord:
        """
        Record a commanded angle.

        Args:
            angle: Angle that was applied
            timestamp: Defaults to the current local time, 'YYYY-MM-DD HH:MM:SS'

        Returns:
            The stored record, including its assigned id
        """
        if timestamp is None:
            timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        conn = self._connection()
        try:
            cursor = conn.execute("INSERT INTO angle_log (angle, timestamp) VALUES (?, ?)", (angle, timestamp))
            conn.commit()
        except sqlite3.Error as e:
            raise AngleLogError(self.db_path, e) from e

        record = AngleRecord(id=cursor.lastrowid or 0, angle=angle, timestamp=timestamp)
        logger.debug(f"Logged angle {angle} as row {record.id}")
        return record

    def recent(self, limit: int = 10) -> list[AngleRecord]:
        """Most recent records first."""
        rows = self._connection().execute(
            "SELECT id, angle, timestamp FROM angle_log ORDER BY id DESC LIMIT ?", (limit,)
        ).fetchall()
        return [AngleRecord(id=row[0], angle=row[1], timestamp=row[2]) for row in rows]

    def count(self) -> int:
        return self._connection().execute("SELECT COUNT(*) FROM angle_log").fetchone()[0]
