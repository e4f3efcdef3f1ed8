from __future__ import annotations

from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any, ClassVar

from pydantic import BaseModel

from .interfaces import Record


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoredRecord(BaseModel):
    """
    Common metadata every stored record carries:
      { "id": "1", "created_at": ..., "updated_at": ..., "deleted_at": null, "deleted": false }

    Subclasses add application fields and may pin their collection with
    `__collection__`.
    """

    __collection__: ClassVar[str | None] = None

    id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    deleted: bool = False

    def stamp_created(self, identity: str, now: datetime) -> None:
        self.id = identity
        self.created_at = now
        self.updated_at = now

    def stamp_updated(self, now: datetime) -> None:
        self.updated_at = now

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# Plain mappings are accepted too; they are stamped by key with ISO-8601 strings.

def stamp_created(record: Any, identity: str, now: datetime) -> None:
    if isinstance(record, MutableMapping):
        stamp = now.isoformat()
        record["id"] = identity
        record["created_at"] = stamp
        record["updated_at"] = stamp
        return
    _as_record(record).stamp_created(identity, now)


def stamp_updated(record: Any, now: datetime) -> None:
    if isinstance(record, MutableMapping):
        record["updated_at"] = now.isoformat()
        return
    _as_record(record).stamp_updated(now)


def to_document(record: Any) -> dict[str, Any]:
    if isinstance(record, MutableMapping):
        return dict(record)
    return _as_record(record).to_document()


def _as_record(record: Any) -> Record:
    if not isinstance(record, Record):
        raise TypeError(
            f"{type(record).__name__} is neither a mapping nor a record "
            "(needs stamp_created, stamp_updated and to_document)"
        )
    return record
