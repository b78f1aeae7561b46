# python
"""zipvfs package: read-only filesystem view of zip archives"""
__version__ = "0.1"

from zipvfs.env import load_env
from zipvfs.errors import (
    ZipFSError,
    NotFound,
    NotADirectory,
    IsADirectory,
    MalformedArchive,
    StreamError,
)
from zipvfs.archive import ZipArchive, ZipEntry
from zipvfs.fs import ZipFS, FileInfo
from zipvfs.reader import EntryReader
from zipvfs.paths import normalize

# Load .env values at import time so ZIPVFS_* settings come from python-dotenv.
load_env()

__all__ = [
    "ZipFS",
    "FileInfo",
    "EntryReader",
    "ZipArchive",
    "ZipEntry",
    "normalize",
    "ZipFSError",
    "NotFound",
    "NotADirectory",
    "IsADirectory",
    "MalformedArchive",
    "StreamError",
]
