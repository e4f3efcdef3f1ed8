from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Raises OSError if the file cannot be opened (missing, permission denied).
    Returns None for empty files, bytes that are not UTF-8, or invalid JSON
    (including nesting too deep to decode).
    """
    data = path.read_bytes()
    try:
        raw = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None


def dump_json(payload: Any, *, indent: int = 2, sort_keys: bool = True) -> str:
    """Encode a payload the way it is written to disk (trailing newline included)."""
    return json.dumps(payload, indent=indent, sort_keys=sort_keys) + "\n"


def write_json_text(path: Path, text: str) -> None:
    """
    Overwrite the file in place with already-encoded JSON text.

    Not atomic: a crash mid-write can leave a truncated file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(text)


def atomic_write_json_text(path: Path, text: str) -> None:
    """
    Atomically write JSON text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
    tmp_path.replace(path)
