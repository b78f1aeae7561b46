# python
"""
zipvfs/server.py
Asyncio telnet server using telnetlib3 to browse a zip archive read-only.
"""
import asyncio
import uuid
import pathlib
from typing import Optional
import telnetlib3
import logging
from .session import EventLog, Session
from .router import Router
from .env import load_env, apply_env_overrides
from .fs import ZipFS
from .errors import ZipFSError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "server": {"host": "0.0.0.0", "port": 2323, "banner": "zipvfs: read-only archive browser"},
    "paths": {
        "logs_dir": "logs",
        "events_file": "logs/events.jsonl",
    },
    "limits": {"max_output_bytes": 16384, "skip_chunk_bytes": 65536},
    "archive": {"path": "", "strict": False},
    "hostname": "zipvfs",
}

CONFIG = DEFAULT_CONFIG

FS: Optional[ZipFS] = None

EVENTS = EventLog(None)


def _ensure_dirs():
    pathlib.Path(CONFIG["paths"]["logs_dir"]).mkdir(parents=True, exist_ok=True)
    pathlib.Path(CONFIG["paths"]["events_file"]).parent.mkdir(parents=True, exist_ok=True)


def _normalize_for_terminal(text: str) -> str:
    """
    Convert newline usage to CRLF sequences that telnet clients expect.
    """
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return normalized.replace("\n", "\r\n")


def load_config(overrides: Optional[dict] = None) -> dict:
    """
    Build the effective configuration: defaults, then ZIPVFS_* variables
    (including those from .env), then explicit ``overrides`` per section.
    """
    load_env()
    config = apply_env_overrides(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value
    return config


def open_archive(config: dict) -> ZipFS:
    path = config["archive"]["path"]
    if not path:
        raise ValueError("no archive configured (pass ARCHIVE or set ZIPVFS_ARCHIVE)")
    fs = ZipFS.from_path(
        path,
        strict=config["archive"]["strict"],
        skip_chunk=config["limits"]["skip_chunk_bytes"],
    )
    logger.info("Serving %s", fs)
    return fs


async def shell(reader, writer) -> None:
    peer = writer.get_extra_info("peername") or ("0.0.0.0", 0)
    session_id = str(uuid.uuid4())
    session = Session(
        session_id=session_id,
        peer=(peer[0], peer[1]),
        archive_name=FS.name if FS else "",
        events=EVENTS,
    )
    await session.log("session.connect", "connect", banner=CONFIG["server"]["banner"])
    try:
        writer.write(CONFIG["server"]["banner"] + "\r\n")
        await writer.drain()

        router = Router(FS, max_output=CONFIG["limits"]["max_output_bytes"])

        prompt = lambda: f"{CONFIG['hostname']}:{session.cwd}$ "

        while True:
            writer.write(prompt())
            await writer.drain()
            line = await reader.readline()
            if not line:
                break
            line = line.rstrip("\r\n")
            if not line:
                continue
            session.record_command(line)
            argv = line.split()
            await session.log("command.input", "shell", raw=line, argv=argv)
            cmd = argv[0] if argv else ""
            exit_cmd = cmd in ("exit", "logout", "quit")
            if exit_cmd:
                out = ""
                truncated = False
            else:
                out, truncated = await router.dispatch(session, line)
            session.bytes_out += len(out.encode())
            await session.log(
                "command.output", "shell", bytes=len(out.encode()), truncated=truncated
            )
            normalized = _normalize_for_terminal(out)
            if normalized:
                writer.write(normalized + "\r\n")
            await writer.drain()
            if exit_cmd:
                break
    except (ConnectionError, asyncio.IncompleteReadError) as exc:
        logger.debug("Session %s disconnected: %s", session_id, exc)
    except Exception:
        # never surface exceptions to clients; log and close
        logger.exception("Session %s failed", session_id)
    finally:
        await session.log(
            "session.close",
            "close",
            duration_ms=session.elapsed_ms(),
            commands=len(session.history),
            bytes_out=session.bytes_out,
        )
        writer.close()


async def start_server(config: Optional[dict] = None, fs: Optional[ZipFS] = None):
    global CONFIG, FS, EVENTS
    CONFIG = load_config(config)
    EVENTS = EventLog(CONFIG["paths"]["events_file"])
    FS = fs or open_archive(CONFIG)
    _ensure_dirs()
    host = CONFIG["server"]["host"]
    port = CONFIG["server"]["port"]
    server = await telnetlib3.create_server(shell=shell, host=host, port=port)

    # Derive the actual bound address/port from the server sockets so callers
    # (and tests) can connect when port=0 (ephemeral).
    actual_host = host
    actual_port = port
    socks = getattr(server, "sockets", None)
    if socks:
        sockname = socks[0].getsockname()
        # sockname can be (host, port) or (host, port, flowinfo, scopeid)
        actual_host = sockname[0]
        actual_port = sockname[1]
        if actual_host in ("0.0.0.0", "", None, "::"):
            actual_host = "127.0.0.1"

    print(f"Listening on {actual_host}:{actual_port}", flush=True)
    logger.info("Listening on %s:%s", actual_host, actual_port)
    try:
        # block forever until cancelled (e.g., Ctrl+C)
        await asyncio.Event().wait()
    finally:
        server.close()
        await server.wait_closed()
        if fs is None:
            FS.close()
    return server


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(prog="zipvfs", description="Browse a zip archive over telnet.")
    parser.add_argument("archive", nargs="?", help="zip archive to serve (default: $ZIPVFS_ARCHIVE)")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--logs-dir", help="directory for events.jsonl")
    parser.add_argument("--strict", action="store_true", help="reject archives with file/directory collisions")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict = {}
    if args.archive:
        overrides.setdefault("archive", {})["path"] = args.archive
    if args.strict:
        overrides.setdefault("archive", {})["strict"] = True
    if args.host:
        overrides.setdefault("server", {})["host"] = args.host
    if args.port is not None:
        overrides.setdefault("server", {})["port"] = args.port
    if args.logs_dir:
        logs_dir = pathlib.Path(args.logs_dir)
        overrides["paths"] = {"logs_dir": str(logs_dir), "events_file": str(logs_dir / "events.jsonl")}
    try:
        asyncio.run(start_server(overrides))
    except (ZipFSError, ValueError) as exc:
        parser.exit(1, f"zipvfs: {exc}\n")
    except KeyboardInterrupt:
        print("shutting down")


if __name__ == "__main__":
    main()
