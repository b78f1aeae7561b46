# python
"""
zipvfs/tree.py
Builds the in-memory directory tree of an archive from its flat entry list.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from . import paths
from .errors import MalformedArchive

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """
    A directory or a file of the archive namespace. Directories carry
    ``children``; files carry ``size`` and the archive ``entry``.
    """

    name: str
    is_dir: bool
    size: int = 0
    entry: Optional[Any] = field(default=None, repr=False)
    children: Optional[Dict[str, "Node"]] = field(default=None, repr=False)
    mod_time: Optional[datetime.datetime] = None

    @classmethod
    def directory(cls, name: str, mod_time: Optional[datetime.datetime] = None) -> "Node":
        return cls(name=name, is_dir=True, children={}, mod_time=mod_time)

    @classmethod
    def file(cls, name: str, entry: Any) -> "Node":
        return cls(
            name=name,
            is_dir=False,
            size=int(entry.size),
            entry=entry,
            mod_time=_entry_mod_time(entry),
        )


def _entry_mod_time(entry: Any) -> Optional[datetime.datetime]:
    value = getattr(entry, "mod_time", None)
    return value if isinstance(value, datetime.datetime) else None


def _is_dir_entry(entry: Any) -> bool:
    is_dir = getattr(entry, "is_dir", None)
    if callable(is_dir):
        return bool(is_dir())
    return entry.name.endswith("/")


class TreeBuilder:
    """
    Single pass construction of the namespace.

    A file and a directory sharing a canonical path is a degenerate archive.
    The directory always wins and the file is dropped, whatever the entry
    order. With ``strict=True`` the collision raises ``MalformedArchive``
    instead.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.root = Node.directory("")
        self.dropped: list = []

    def add(self, entry: Any) -> None:
        parts = paths.split(entry.name)
        if not parts:
            # the root is always a directory
            if not _is_dir_entry(entry):
                self._collision(entry.name, "entry names the archive root")
            return
        if _is_dir_entry(entry):
            self._ensure_dir(parts, entry.name, _entry_mod_time(entry))
            return
        parent = self._ensure_dir(parts[:-1], entry.name)
        name = parts[-1]
        existing = parent.children.get(name)
        if existing is not None and existing.is_dir:
            self._collision(entry.name, "file shadows a directory")
            return
        # last entry with a given path wins
        parent.children[name] = Node.file(name, entry)

    def _ensure_dir(self, parts: Tuple[str, ...], source: str, mod_time: Optional[datetime.datetime] = None) -> Node:
        node = self.root
        for part in parts:
            child = node.children.get(part)
            if child is None:
                child = Node.directory(part)
                node.children[part] = child
            elif not child.is_dir:
                self._collision(child.entry.name, "directory needed by %s" % source)
                child = Node.directory(part)
                node.children[part] = child
            node = child
        if mod_time is not None:
            node.mod_time = mod_time
        return node

    def _collision(self, name: str, reason: str) -> None:
        if self.strict:
            raise MalformedArchive(f"path collision for {name!r}: {reason}")
        logger.warning("Dropping archive entry %r: %s", name, reason)
        self.dropped.append(name)


def build_tree(entries: Iterable[Any], strict: bool = False) -> Node:
    """
    Build the directory tree for ``entries``. Every proper prefix of an
    entry path becomes a directory node even without an explicit entry.
    """
    builder = TreeBuilder(strict=strict)
    try:
        for entry in entries:
            builder.add(entry)
    except MalformedArchive:
        raise
    except Exception as e:
        raise MalformedArchive(f"cannot enumerate archive entries: {e}") from e
    return builder.root


def index_tree(root: Node) -> Dict[Tuple[str, ...], Node]:
    """Map every canonical path (as a segment tuple) to its node."""
    index: Dict[Tuple[str, ...], Node] = {}
    _index_node(index, root, ())
    return index


def _index_node(index: Dict[Tuple[str, ...], Node], node: Node, rel_path: Tuple[str, ...]) -> None:
    index[rel_path] = node
    if node.is_dir:
        for name, child in node.children.items():
            _index_node(index, child, rel_path + (name,))
