# Add project root to sys.path so pytest can import the zipvfs package
import io
import sys
import zipfile
from pathlib import Path

import pytest

# Insert project root (parent of this tests/ directory) at front of sys.path
# This makes `import zipvfs` work when running `pytest` from the repo root.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from zipvfs.fs import ZipFS  # noqa: E402

# archive contents shared by most tests; maps path : contents
FIXTURE_FILES = {"foo": "foo", "bar/baz": "baz"}


def build_zip(files, compression=zipfile.ZIP_DEFLATED) -> bytes:
    """Return the bytes of a zip archive holding ``files`` (path -> str/bytes)."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=compression) as zw:
        for name, contents in files.items():
            if isinstance(contents, str):
                contents = contents.encode("utf-8")
            zw.writestr(name, contents)
    return buf.getvalue()


@pytest.fixture
def fixture_fs():
    fs = ZipFS.from_path(io.BytesIO(build_zip(FIXTURE_FILES)), name="fixture")
    yield fs
    fs.close()


@pytest.fixture
def fixture_zip_path(tmp_path: Path) -> Path:
    path = tmp_path / "fixture.zip"
    path.write_bytes(build_zip(FIXTURE_FILES))
    return path
