"""
Utilities for loading environment variables from the project .env file and
reading ZIPVFS_* overrides for the server configuration.
"""
import copy
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

ENV_PREFIX = "ZIPVFS_"

# (section, key, env var suffix, type)
ENV_OVERRIDES = (
    ("server", "host", "HOST", str),
    ("server", "port", "PORT", int),
    ("server", "banner", "BANNER", str),
    ("paths", "logs_dir", "LOGS_DIR", str),
    ("paths", "events_file", "EVENTS_FILE", str),
    ("limits", "max_output_bytes", "MAX_OUTPUT_BYTES", int),
    ("limits", "skip_chunk_bytes", "SKIP_CHUNK_BYTES", int),
    ("archive", "path", "ARCHIVE", str),
    ("archive", "strict", "STRICT", lambda v: v.strip().lower() in ("1", "true", "yes", "on")),
)


@lru_cache(maxsize=1)
def load_env() -> Path:
    """
    Load environment variables from the repository-level .env file once.
    Returns the path to the .env that was attempted.
    """
    root = Path(__file__).resolve().parents[1]
    dotenv_path = root / ".env"
    # existing environment wins so tests and shells can override the file
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return dotenv_path


def apply_env_overrides(config: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Return a deep copy of ``config`` with ZIPVFS_* variables applied.
    Unparseable values raise ValueError naming the variable.
    """
    environ = os.environ if environ is None else environ
    merged = copy.deepcopy(dict(config))
    for section, key, suffix, cast in ENV_OVERRIDES:
        var = ENV_PREFIX + suffix
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = cast(raw)
        except ValueError as e:
            raise ValueError(f"invalid value for {var}: {raw!r}") from e
        merged.setdefault(section, {})[key] = value
    return merged
