# python
"""
zipvfs/session.py
Per-connection browsing state and the JSON-lines event log it reports to.
"""
from dataclasses import dataclass, field
import datetime
import json
import pathlib
from typing import Any, Dict, List, Optional, Tuple


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def timestamp(when: Optional[datetime.datetime] = None) -> str:
    """UTC timestamp with second precision and a Z suffix, e.g. 2015-03-04T05:06:08Z."""
    when = (when or utc_now()).astimezone(datetime.timezone.utc)
    return when.strftime("%Y-%m-%dT%H:%M:%SZ")


class EventLog:
    """
    Append-only events.jsonl file shared by every session of a server.
    Each record is written with one synchronous append, so records from
    sessions on the same event loop never interleave.
    """

    def __init__(self, path: Optional[str]):
        self.path = pathlib.Path(path) if path else None

    def __repr__(self) -> str:
        return f"EventLog({str(self.path) if self.path else None!r})"

    def append(self, record: Dict[str, Any]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")


@dataclass
class Session:
    session_id: str
    peer: Tuple[str, int]
    archive_name: str = ""
    events: Optional[EventLog] = field(default=None, repr=False)
    cwd: str = "/"
    started: datetime.datetime = field(default_factory=utc_now)
    bytes_out: int = 0
    history: List[str] = field(default_factory=list, repr=False)

    @property
    def peer_label(self) -> str:
        host, port = self.peer
        return f"{host}:{port}"

    def elapsed_ms(self) -> int:
        return int((utc_now() - self.started).total_seconds() * 1000)

    async def log(self, event: str, phase: str, **data: Any) -> None:
        """Record ``event`` with the session's current location in the archive."""
        if self.events is None:
            return
        self.events.append(
            {
                "time": timestamp(),
                "session": self.session_id,
                "peer": self.peer_label,
                "archive": self.archive_name,
                "cwd": self.cwd,
                "event": event,
                "phase": phase,
                "data": data,
            }
        )

    def record_command(self, command: str) -> None:
        """
        Track the raw command line for the history command.
        """
        if command:
            self.history.append(command)
