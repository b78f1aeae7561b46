# python
"""
zipvfs/errors.py
Error kinds raised by the zip filesystem adapter.
"""


class ZipFSError(Exception):
    """Base class for every error raised by zipvfs."""
    pass


class NotFound(ZipFSError, FileNotFoundError):
    """Path does not resolve to any node."""
    pass


class NotADirectory(ZipFSError, NotADirectoryError):
    """Directory operation attempted on a file."""
    pass


class IsADirectory(ZipFSError, IsADirectoryError):
    """File operation attempted on a directory."""
    pass


class MalformedArchive(ZipFSError):
    """The archive could not be enumerated or has an inconsistent layout."""
    pass


class StreamError(ZipFSError, OSError):
    """Decompression failed while reading an entry."""
    pass
