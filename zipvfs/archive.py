# python
"""
zipvfs/archive.py
Archive reader collaborators: the entry protocol the tree builder consumes and
a concrete reader over the standard zipfile module.
"""
from __future__ import annotations

import datetime
import logging
import os
import zipfile
from typing import IO, Any, List, Optional, Protocol, Union

from .errors import MalformedArchive

logger = logging.getLogger(__name__)


class ArchiveEntry(Protocol):
    """
    One stored record of an archive.

    ``name`` is the slash separated path as stored, ``size`` the uncompressed
    size and ``open()`` returns a forward-only decompressing stream. The
    adapter never seeks that stream.
    """

    name: str
    size: int

    def open(self) -> IO[bytes]: ...


class ZipEntry:
    """ArchiveEntry backed by a ``zipfile.ZipInfo``."""

    def __init__(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo):
        self._archive = archive
        self.info = info
        self.name = info.filename
        self.size = int(info.file_size)

    def __repr__(self) -> str:
        return f"ZipEntry({self.name!r}, size={self.size})"

    def is_dir(self) -> bool:
        return self.info.is_dir()

    @property
    def mod_time(self) -> Optional[datetime.datetime]:
        try:
            return datetime.datetime(*self.info.date_time)
        except (TypeError, ValueError):
            return None

    def open(self) -> IO[bytes]:
        return self._archive.open(self.info, "r")


class ZipArchive:
    """
    Read-only zip archive reader.

    ``source`` may be a filesystem path, a binary file object or an already
    open ``zipfile.ZipFile``. The central directory is read once here; any
    failure aborts construction with ``MalformedArchive``.
    """

    def __init__(self, source: Union[str, os.PathLike, IO[bytes], zipfile.ZipFile], name: Optional[str] = None):
        self._owns_file = not isinstance(source, zipfile.ZipFile)
        if isinstance(source, zipfile.ZipFile):
            self._zf = source
        else:
            try:
                self._zf = zipfile.ZipFile(source, "r")
            except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError, ValueError) as e:
                raise MalformedArchive(f"cannot read zip archive {source!r}: {e}") from e
        if name is None:
            name = getattr(self._zf, "filename", None) or ""
        self.name = str(name)
        self._entries: List[ZipEntry] = [ZipEntry(self._zf, info) for info in self._zf.infolist()]
        logger.debug("Loaded %d entries from %s", len(self._entries), self.name or "<zip>")

    def entries(self) -> List[ZipEntry]:
        return list(self._entries)

    def close(self) -> None:
        if self._owns_file:
            self._zf.close()

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
