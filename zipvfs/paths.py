# python
"""
zipvfs/paths.py
Canonical path handling. Every lookup key inside the adapter is the
normalized form produced here: slash separated, no leading, trailing or
repeated slashes, "." and ".." resolved lexically. The root is "".
"""
from typing import List, Tuple

SEP = "/"


def _clean_parts(path: str) -> List[str]:
    parts: List[str] = []
    for entry in (path or "").split(SEP):
        if not entry or entry == ".":
            continue
        if entry == "..":
            # ".." above the root stays at the root
            if parts:
                parts.pop()
            continue
        parts.append(entry)
    return parts


def normalize(path: str) -> str:
    """
    Return the canonical form of ``path``. Never fails.

    >>> normalize("//bar//baz/")
    'bar/baz'
    >>> normalize("/")
    ''
    """
    return SEP.join(_clean_parts(path))


def split(path: str) -> Tuple[str, ...]:
    """Segments of the normalized path; the root is the empty tuple."""
    return tuple(_clean_parts(path))


def join(*paths: str) -> str:
    """
    Join path pieces and normalize the result. An absolute piece restarts
    the join, as ``os.path.join`` does.
    """
    joined = ""
    for piece in paths:
        if not piece:
            continue
        if piece.startswith(SEP) or not joined:
            joined = piece
        else:
            joined = joined + SEP + piece
    return normalize(joined)


def display(path: str) -> str:
    """Absolute, human-facing form of a path ("/" for the root)."""
    return SEP + normalize(path)


def basename(path: str) -> str:
    parts = split(path)
    return parts[-1] if parts else ""
