# python
"""
zipvfs/reader.py
Random-access reads over an archive entry whose decoder only streams forward.

Seeking only moves the cursor. The next read brings the decompression stream
to the cursor: forward by consuming and discarding bytes, backward by closing
the stream, reopening it from the start of the entry and skipping ahead.
"""
import logging
import os
import zipfile
import zlib
from typing import IO, Any, Optional

from .errors import StreamError

logger = logging.getLogger(__name__)

DEFAULT_SKIP_CHUNK = 64 * 1024

# what a failing decoder raises mid-stream: CRC mismatch is BadZipFile,
# truncated deflate/bz2/lzma data is EOFError or zlib.error
_STREAM_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError, ValueError)
# NotImplementedError: unsupported compression method, RuntimeError: encrypted entry
_OPEN_ERRORS = _STREAM_ERRORS + (NotImplementedError, RuntimeError)


class EntryReader:
    """
    Seekable, read-only file handle for one archive entry.

    Not safe for concurrent use: the cursor and the stream are private to the
    handle.
    """

    def __init__(self, entry: Any, name: str = "", size: Optional[int] = None, skip_chunk: int = DEFAULT_SKIP_CHUNK):
        self.entry = entry
        self.name = name or entry.name
        self.size = int(entry.size if size is None else size)
        self.skip_chunk = int(skip_chunk)
        self._pos = 0
        self._stream: Optional[IO[bytes]] = None
        self._stream_pos = 0
        self._closed = False
        self.reopen_count = 0

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"pos={self._pos}"
        return f"<EntryReader {self.name!r} size={self.size} {state}>"

    # -- file object protocol -------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def tell(self) -> int:
        self._check_open()
        return self._pos

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._check_open()
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self._pos + offset
        elif whence == os.SEEK_END:
            target = self.size + offset
        else:
            raise ValueError(f"invalid whence ({whence!r}, should be 0, 1 or 2)")
        if target < 0:
            raise ValueError(f"negative seek position {target}")
        self._pos = target
        return self._pos

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes from the cursor (all remaining bytes when
        ``size`` is negative). Returns ``b""`` at end of data.
        """
        self._check_open()
        if size is None or size < 0:
            return self._read_rest()
        if size == 0:
            return b""
        stream = self._stream_at_cursor()
        chunks = []
        remaining = size
        while remaining > 0:
            data = self._stream_read(stream, remaining)
            if not data:
                break
            chunks.append(data)
            remaining -= len(data)
        out = b"".join(chunks)
        self._stream_pos += len(out)
        self._pos += len(out)
        return out

    def readall(self) -> bytes:
        return self._read_rest()

    def readinto(self, buffer: Any) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[: len(data)] = data
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._close_stream()

    def __enter__(self) -> "EntryReader":
        self._check_open()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __iter__(self):
        """Yield the remaining data in ``skip_chunk`` sized binary chunks, not lines."""
        self._check_open()
        while True:
            chunk = self.read(self.skip_chunk)
            if not chunk:
                return
            yield chunk

    # -- internals -----------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed file.")

    def _read_rest(self) -> bytes:
        stream = self._stream_at_cursor()
        chunks = []
        while True:
            data = self._stream_read(stream, self.skip_chunk)
            if not data:
                break
            chunks.append(data)
        out = b"".join(chunks)
        self._stream_pos += len(out)
        self._pos += len(out)
        return out

    def _stream_at_cursor(self) -> IO[bytes]:
        if self._stream is None or self._pos < self._stream_pos:
            self._reopen()
        stream = self._stream
        while self._stream_pos < self._pos:
            want = min(self.skip_chunk, self._pos - self._stream_pos)
            data = self._stream_read(stream, want)
            if not data:
                # cursor is past the end of data; reads return b""
                break
            self._stream_pos += len(data)
        return stream

    def _reopen(self) -> None:
        if self._stream is not None:
            logger.debug("Reopening %s to seek back to offset %d", self.name, self._pos)
        self._close_stream()
        try:
            self._stream = self.entry.open()
        except _OPEN_ERRORS as e:
            raise StreamError(f"cannot open {self.name}: {e}") from e
        self._stream_pos = 0
        self.reopen_count += 1

    def _stream_read(self, stream: IO[bytes], size: int) -> bytes:
        try:
            return stream.read(size)
        except _STREAM_ERRORS as e:
            # a failed decoder is unusable; the next read starts from a fresh stream
            self._close_stream()
            raise StreamError(f"error decompressing {self.name}: {e}") from e

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        self._stream_pos = 0
        if stream is not None:
            try:
                stream.close()
            except _STREAM_ERRORS:
                logger.debug("Ignoring error closing stream for %s", self.name, exc_info=True)

