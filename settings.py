from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Backing file for the whole database image
    docstore_path: Path

    # Write strategy
    atomic_writes: bool
    create_if_missing: bool

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    from docstore.paths import default_database_path

    raw_path = os.getenv("DOCSTORE_PATH", "").strip()
    docstore_path = Path(raw_path) if raw_path else default_database_path()

    # Direct overwrite unless explicitly enabled; a crash mid-write may truncate the file.
    atomic_writes = _env_bool("DOCSTORE_ATOMIC_WRITES", False)
    create_if_missing = _env_bool("DOCSTORE_CREATE_IF_MISSING", True)

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        docstore_path=docstore_path,
        atomic_writes=atomic_writes,
        create_if_missing=create_if_missing,
        debug_log_requests=debug_log_requests,
    )
