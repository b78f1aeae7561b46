# python
"""
tests/test_server.py
Starts `python -m zipvfs.server` on a fixture archive as a subprocess,
connects with a raw TCP client and checks the JSONL events it records.

Run with:
    pytest -q
"""
import asyncio
import json
import re
import socket
import sys
import time
from pathlib import Path

import pytest

PY = sys.executable
REPO_ROOT = Path(__file__).resolve().parents[1]


async def start_server_proc(archive: Path, logs_dir: Path):
    proc = await asyncio.create_subprocess_exec(
        PY, "-u", "-m", "zipvfs.server", str(archive),
        "--host", "127.0.0.1", "--port", "0", "--logs-dir", str(logs_dir),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(REPO_ROOT),
    )
    port = None
    host = None
    deadline = time.time() + 10
    while time.time() < deadline:
        try:
            line = await asyncio.wait_for(proc.stdout.readline(), timeout=1.0)
        except asyncio.TimeoutError:
            continue
        if not line:
            break
        m = re.search(r"Listening on ([0-9\.]+):([0-9]+)", line.decode("utf-8", errors="replace"))
        if m:
            host = m.group(1)
            port = int(m.group(2))
            break
    if port is None:
        proc.kill()
        err = await proc.stderr.read()
        raise RuntimeError(
            "Failed to start server; stderr=" + err.decode("utf-8", errors="replace")
        )
    return proc, host, port


def _read_events(events_file: Path):
    if not events_file.exists():
        return []
    lines = events_file.read_text(encoding="utf-8").strip().splitlines()
    return [json.loads(line) for line in lines if line.strip()]


async def _wait_for_event(events_file: Path, event: str, timeout: float = 10.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        records = _read_events(events_file)
        if any(r["event"] == event for r in records):
            return records
        await asyncio.sleep(0.1)
    return _read_events(events_file)


@pytest.mark.asyncio
async def test_session_events_are_logged(tmp_path, fixture_zip_path):
    logs_dir = tmp_path / "logs"
    events_file = logs_dir / "events.jsonl"
    proc, host, port = await start_server_proc(fixture_zip_path, logs_dir)
    try:
        sock = socket.create_connection((host, port), timeout=5)
        try:
            records = await _wait_for_event(events_file, "session.connect")
            assert any(r["event"] == "session.connect" for r in records), "session.connect missing"
            sock.sendall(b"exit\r\n")
            records = await _wait_for_event(events_file, "session.close")
        finally:
            sock.close()
        records = await _wait_for_event(events_file, "session.close")
        assert any(r["event"] == "session.close" for r in records), "session.close missing"
        assert all(r["archive"] == str(fixture_zip_path) for r in records)
    finally:
        proc.terminate()
        try:
            await asyncio.wait_for(proc.wait(), timeout=3.0)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()


def test_missing_archive_exits_with_error(tmp_path):
    import subprocess

    result = subprocess.run(
        [PY, "-m", "zipvfs.server", str(tmp_path / "missing.zip"), "--port", "0"],
        cwd=str(REPO_ROOT),
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 1
    assert "zipvfs:" in result.stderr
