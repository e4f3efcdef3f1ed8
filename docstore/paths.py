from __future__ import annotations

from pathlib import Path

DATABASE_FILENAME = "database.json"


def project_root() -> Path:
    # docstore/paths.py -> docstore -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    path = project_root() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_database_path() -> Path:
    """Where the database image lives when DOCSTORE_PATH is not set."""
    return data_dir() / DATABASE_FILENAME
