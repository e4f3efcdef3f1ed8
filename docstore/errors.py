"""Document store exception hierarchy.

Every failure the store surfaces derives from DocumentStoreError so the
calling layer can translate them with a single handler. A corrupt image is
not represented here: it is healed on load.
"""

from __future__ import annotations

from pathlib import Path


class DocumentStoreError(Exception):
    """Base exception for all document store failures."""


class ImageOpenError(DocumentStoreError):
    """Raised when the backing file cannot be opened at all."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot open database image {path}: {reason}")
        self.path = path


class ImageSerializationError(DocumentStoreError):
    """Raised when the in-memory image cannot be encoded; nothing is written."""


class ImageWriteError(DocumentStoreError):
    """Raised when the encoded image cannot be written to the backing file.

    The file may be left partially written unless atomic writes are enabled.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot write database image {path}: {reason}")
        self.path = path


class ConcurrentUpdateError(DocumentStoreError):
    """Raised when a replace was computed against a stale collection counter."""

    def __init__(self, collection: str, expected: int, actual: int) -> None:
        super().__init__(
            f"collection {collection!r} changed concurrently: "
            f"expected counter {expected}, found {actual}"
        )
        self.collection = collection
        self.expected = expected
        self.actual = actual


class DuplicateRecordError(DocumentStoreError):
    """Raised by a unique create when the collection already holds the value."""

    def __init__(self, collection: str, field: str, value: object) -> None:
        super().__init__(f"collection {collection!r} already has a record with {field}={value!r}")
        self.collection = collection
        self.field = field
        self.value = value
