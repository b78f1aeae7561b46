# python
"""
tests/test_session_history.py
Unit tests covering Session history tracking and JSONL event logging.
"""
from pathlib import Path
import asyncio
import datetime
import json

from zipvfs.session import EventLog, Session, timestamp


def _create_session(tmp_path: Path) -> Session:
    return Session(
        session_id="test-session",
        peer=("127.0.0.1", 12345),
        archive_name="fixture.zip",
        events=EventLog(str(tmp_path / "logs" / "events.jsonl")),
    )


def test_history_starts_empty(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    assert session.history == []


def test_recording_commands_appends_history(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    session.record_command("ls -la")
    session.record_command("pwd")
    assert session.history == ["ls -la", "pwd"]


def test_empty_input_is_ignored(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    session.record_command("")
    session.record_command("cat foo")
    assert session.history == ["cat foo"]


def test_cwd_defaults_to_root(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    assert session.cwd == "/"
    assert session.peer_label == "127.0.0.1:12345"


def test_log_records_location_and_data(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    asyncio.run(session.log("command.input", "shell", raw="ls"))
    session.cwd = "/bar"
    asyncio.run(session.log("session.close", "close"))
    lines = (tmp_path / "logs" / "events.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["event"] for r in records] == ["command.input", "session.close"]
    assert records[0]["data"] == {"raw": "ls"}
    assert records[0]["archive"] == "fixture.zip"
    assert records[0]["peer"] == "127.0.0.1:12345"
    assert [r["cwd"] for r in records] == ["/", "/bar"]
    assert records[0]["time"].endswith("Z")


def test_log_disabled_without_events_path(tmp_path: Path) -> None:
    session = _create_session(tmp_path)
    session.events = EventLog(None)
    asyncio.run(session.log("session.connect", "connect"))
    assert not (tmp_path / "logs").exists()


def test_timestamp_format_and_elapsed(tmp_path: Path) -> None:
    when = datetime.datetime(2015, 3, 4, 5, 6, 8, 999, tzinfo=datetime.timezone.utc)
    assert timestamp(when) == "2015-03-04T05:06:08Z"
    session = _create_session(tmp_path)
    assert session.elapsed_ms() >= 0
