# python
"""
zipvfs/fs.py
ZipFS: a read-only filesystem view of a zip archive.

Every operation normalizes its path, resolves it against the tree built at
construction and, for files, hands out an independent EntryReader. The tree
is never mutated after construction, so concurrent stat/read_dir/open calls
need no locking.
"""
from __future__ import annotations

import datetime
import logging
import stat as stat_mod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from . import paths
from .archive import ZipArchive
from .errors import IsADirectory, MalformedArchive, NotADirectory, NotFound, ZipFSError
from .reader import DEFAULT_SKIP_CHUNK, EntryReader
from .schema import validate_tree
from .tree import Node, build_tree, index_tree

logger = logging.getLogger(__name__)

DIR_MODE = stat_mod.S_IFDIR | 0o555
FILE_MODE = stat_mod.S_IFREG | 0o444


@dataclass(frozen=True)
class FileInfo:
    """Metadata for one node, as returned by stat/lstat/read_dir."""

    name: str
    is_dir: bool
    size: int = 0
    mod_time: Optional[datetime.datetime] = None

    @property
    def is_regular(self) -> bool:
        return not self.is_dir

    @property
    def mode(self) -> int:
        return DIR_MODE if self.is_dir else FILE_MODE

    @classmethod
    def from_node(cls, node: Node) -> "FileInfo":
        return cls(
            name=node.name,
            is_dir=node.is_dir,
            size=0 if node.is_dir else node.size,
            mod_time=node.mod_time,
        )


class ZipFS:
    """
    Read-only filesystem over the entries of an archive.

    ``archive`` is any object with an ``entries()`` method returning archive
    entries (see ``zipvfs.archive.ArchiveEntry``), usually a ``ZipArchive``.
    """

    def __init__(self, archive: Any, name: str = "", strict: bool = False, skip_chunk: int = DEFAULT_SKIP_CHUNK):
        self.archive = archive
        self.name = name or getattr(archive, "name", "") or ""
        self.skip_chunk = skip_chunk
        self.root = build_tree(_list_entries(archive), strict=strict)
        self._index: Dict[Tuple[str, ...], Node] = index_tree(self.root)
        logger.debug("Built namespace for %s: %d nodes", self, len(self._index))

    @classmethod
    def from_path(cls, source: Any, name: Optional[str] = None, strict: bool = False, **kwargs: Any) -> "ZipFS":
        """Open ``source`` as a zip archive and build the filesystem over it."""
        archive = ZipArchive(source, name=name)
        try:
            return cls(archive, name=archive.name, strict=strict, **kwargs)
        except BaseException:
            archive.close()
            raise

    def __str__(self) -> str:
        return f"zip({self.name})"

    def __repr__(self) -> str:
        return f"<ZipFS {self.name!r} nodes={len(self._index)}>"

    def close(self) -> None:
        close = getattr(self.archive, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "ZipFS":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # -- resolution ----------------------------------------------------------

    def resolve(self, path: str) -> Node:
        """
        Return the node named by ``path``. A path that descends through a file
        does not exist, so it raises ``NotFound`` like any missing segment.
        """
        node = self._index.get(paths.split(path))
        if node is None:
            raise NotFound(f"{paths.display(path)}: no such file or directory in {self}")
        return node

    def stat(self, path: str) -> FileInfo:
        return FileInfo.from_node(self.resolve(path))

    def lstat(self, path: str) -> FileInfo:
        # archives carry no links, lstat and stat are the same lookup
        return self.stat(path)

    def read_dir(self, path: str) -> List[FileInfo]:
        node = self._dir_node(path)
        return [FileInfo.from_node(node.children[name]) for name in sorted(node.children)]

    def list_dir(self, path: str) -> List[str]:
        return sorted(self._dir_node(path).children)

    def open(self, path: str) -> EntryReader:
        node = self.resolve(path)
        if node.is_dir:
            raise IsADirectory(f"{paths.display(path)}: is a directory")
        return EntryReader(node.entry, name=paths.normalize(path), size=node.size, skip_chunk=self.skip_chunk)

    def _dir_node(self, path: str) -> Node:
        node = self.resolve(path)
        if not node.is_dir:
            raise NotADirectory(f"{paths.display(path)}: not a directory")
        return node

    # -- conveniences --------------------------------------------------------

    def exists(self, path: str) -> bool:
        return paths.split(path) in self._index

    def is_dir(self, path: str) -> bool:
        node = self._index.get(paths.split(path))
        return node is not None and node.is_dir

    def is_file(self, path: str) -> bool:
        node = self._index.get(paths.split(path))
        return node is not None and not node.is_dir

    def read_file(self, path: str) -> bytes:
        with self.open(path) as f:
            return f.read()

    def walk(self, path: str = "/") -> Iterator[Tuple[str, List[str], List[str]]]:
        """
        Top-down traversal yielding ``(dirpath, dirnames, filenames)`` like
        ``os.walk``; ``dirpath`` is in display form ("/bar").
        """
        top = self._dir_node(path)
        stack = [(paths.normalize(path), top)]
        while stack:
            rel, node = stack.pop()
            dirnames = sorted(n for n, c in node.children.items() if c.is_dir)
            filenames = sorted(n for n, c in node.children.items() if not c.is_dir)
            yield paths.display(rel), dirnames, filenames
            for name in reversed(dirnames):
                stack.append((paths.join(rel, name), node.children[name]))

    def snapshot(self, path: str = "/") -> Dict[str, Any]:
        """
        Export the subtree at ``path`` as a JSON-ready dict in the filesystem
        tree format (``type``/``name``/``children``/``size``), validated
        against ``zipvfs.schema.FS_SCHEMA``.
        """
        return validate_tree(_snapshot_node(self.resolve(path)))


def _list_entries(archive: Any) -> Any:
    try:
        return archive.entries()
    except ZipFSError:
        raise
    except Exception as e:
        raise MalformedArchive(f"cannot enumerate archive entries: {e}") from e


def _snapshot_node(node: Node) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": "dir" if node.is_dir else "file", "name": node.name}
    if node.mod_time is not None:
        out["modified"] = node.mod_time.isoformat()
    if node.is_dir:
        out["children"] = [_snapshot_node(node.children[name]) for name in sorted(node.children)]
    else:
        out["size"] = node.size
    return out
