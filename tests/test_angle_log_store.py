"""Tests for the SQLite angle log store."""

import re
import sqlite3
from pathlib import Path

import pytest

from servopilot.exceptions import AngleLogError
from servopilot.services.angle_log import AngleLogStore


def test_append_assigns_incrementing_ids(tmp_path: Path) -> None:
    with AngleLogStore(tmp_path / "logs" / "angles.db") as store:
        first = store.append(90, timestamp="2024-05-01 10:00:00")
        second = store.append(45, timestamp="2024-05-01 10:00:01")

        assert (first.id, second.id) == (1, 2)
        assert store.count() == 2


def test_default_timestamp_format(tmp_path: Path) -> None:
    with AngleLogStore(tmp_path / "angles.db") as store:
        record = store.append(10)

    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", record.timestamp)


def test_recent_returns_newest_first(tmp_path: Path) -> None:
    with AngleLogStore(tmp_path / "angles.db") as store:
        for angle in (0, 90, 180):
            store.append(angle, timestamp="2024-05-01 10:00:00")

        assert [r.angle for r in store.recent(limit=2)] == [180, 90]


def test_schema_matches_documented_layout(tmp_path: Path) -> None:
    db = tmp_path / "angles.db"
    with AngleLogStore(db) as store:
        store.append(30, timestamp="2024-05-01 10:00:00")

    conn = sqlite3.connect(db)
    try:
        columns = [row[1] for row in conn.execute("PRAGMA table_info(angle_log)")]
        rows = conn.execute("SELECT id, angle, timestamp FROM angle_log").fetchall()
    finally:
        conn.close()

    assert columns == ["id", "angle", "timestamp"]
    assert rows == [(1, 30, "2024-05-01 10:00:00")]


def test_records_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "angles.db"
    with AngleLogStore(db) as store:
        store.append(1)
    with AngleLogStore(db) as store:
        store.append(2)
        assert store.count() == 2


def test_unwritable_location_raises_angle_log_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(AngleLogError):
        AngleLogStore(blocker / "angles.db").open()
