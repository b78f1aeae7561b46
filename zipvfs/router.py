# python
"""
zipvfs/router.py
Command router that answers shell-style commands from a ZipFS.
"""
import logging
import shlex
from typing import Tuple, List, Optional

from . import paths
from .errors import ZipFSError, NotFound, NotADirectory, IsADirectory, StreamError
from .fs import ZipFS, FileInfo
from .session import Session

logger = logging.getLogger(__name__)

DEFAULT_DIR_PERMS = "dr-xr-xr-x"
DEFAULT_FILE_PERMS = "-r--r--r--"
DEFAULT_OWNER = "zip"
DEFAULT_GROUP = "zip"
DEFAULT_TIMESTAMP = "Jan 01 00:00"


def format_ls_entry(info: FileInfo, name: str) -> str:
    perms = DEFAULT_DIR_PERMS if info.is_dir else DEFAULT_FILE_PERMS
    links = 2 if info.is_dir else 1
    stamp = info.mod_time.strftime("%b %d %H:%M") if info.mod_time else DEFAULT_TIMESTAMP
    return f"{perms} {links:>3} {DEFAULT_OWNER} {DEFAULT_GROUP} {info.size:>8} {stamp} {name}"


def error_message(cmd: str, display: str, exc: ZipFSError) -> str:
    if isinstance(exc, NotFound):
        if cmd == "ls":
            return f"ls: cannot access '{display}': No such file or directory"
        return f"{cmd}: {display}: No such file or directory"
    if isinstance(exc, NotADirectory):
        return f"{cmd}: {display}: Not a directory"
    if isinstance(exc, IsADirectory):
        return f"{cmd}: {display}: Is a directory"
    if isinstance(exc, StreamError):
        return f"{cmd}: {display}: Input/output error"
    return f"{cmd}: {display}: {exc}"


class Router:
    def __init__(self, fs: ZipFS, max_output: int = 16_384):
        self.fs = fs
        self.max_output = int(max_output)

    async def dispatch(self, session: Session, line: str) -> Tuple[str, bool]:
        """
        Dispatch a single input line and return (output, truncated_flag).
        Nothing is executed; every answer comes from the archive.
        """
        line = (line or "").strip()

        if not line:
            return ("", False)

        try:
            argv: List[str] = shlex.split(line)
        except ValueError:
            # unbalanced quotes: fall back to a naive split
            argv = line.split()

        cmd = argv[0] if argv else ""
        if cmd == "history":
            from .handlers.history import run as history_run

            return self._truncate(await history_run(session, self.fs, argv))
        if cmd == "cat":
            from .handlers.cat import run as cat_run

            return self._truncate(await cat_run(session, self.fs, argv))
        if cmd == "stat":
            from .handlers.stat import run as stat_run

            return self._truncate(await stat_run(session, self.fs, argv))
        if cmd == "tree":
            from .handlers.tree import run as tree_run

            return self._truncate(await tree_run(session, self.fs, argv))

        builtin = self._handle_builtin(session, argv)
        if builtin is not None:
            return self._truncate(builtin)

        return (f"sh: {cmd}: command not found", False)

    def _truncate(self, out: str) -> Tuple[str, bool]:
        encoded = out.encode("utf-8", errors="replace")
        truncated = len(encoded) > self.max_output
        if truncated:
            out = encoded[: self.max_output].decode("utf-8", errors="ignore")
        return (out, truncated)

    def _handle_builtin(self, session: Session, argv: List[str]) -> Optional[str]:
        if not argv:
            return None
        cmd = argv[0]
        if cmd == "pwd":
            return session.cwd
        if cmd == "cd":
            return self._handle_cd(session, argv)
        if cmd == "ls":
            return self._handle_ls(session, argv)
        return None

    def _handle_cd(self, session: Session, argv: List[str]) -> str:
        dest = argv[1] if len(argv) > 1 else "/"
        target = resolve_target(session, dest)
        try:
            info = self.fs.stat(target)
        except NotFound:
            return f"sh: cd: {dest}: No such file or directory"
        if not info.is_dir:
            return f"sh: cd: {dest}: Not a directory"
        session.cwd = paths.display(target)
        return ""

    def _handle_ls(self, session: Session, argv: List[str]) -> str:
        args = [arg for arg in argv[1:] if arg and not arg.startswith("-")]
        target = args[0] if args else ""
        display = target or "."
        path = resolve_target(session, target)
        try:
            info = self.fs.stat(path)
        except NotFound as e:
            return error_message("ls", display, e)
        if not info.is_dir:
            return format_ls_entry(info, info.name or target)

        lines: List[str] = [format_ls_entry(info, ".")]
        parent = self.fs.stat(paths.join(path, ".."))
        lines.append(format_ls_entry(parent, ".."))
        for child in self.fs.read_dir(path):
            lines.append(format_ls_entry(child, child.name))
        return "\n".join(lines)


def resolve_target(session: Session, target: str) -> str:
    """Resolve ``target`` against the session cwd into a canonical path."""
    target = (target or "").strip()
    if target.startswith("/"):
        return paths.normalize(target)
    return paths.join(session.cwd, target)
