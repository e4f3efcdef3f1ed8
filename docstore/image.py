from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator


class ImageMeta(BaseModel):
    total: int = 0


class Image(BaseModel):
    """
    Mirrors the on-disk database image exactly:
      {
        "items": { "<collection>": [ {...}, ... ] },
        "meta": { "total": <records across all collections> },
        "data_indexes": { "<collection>": <last minted id> }
      }
    """

    items: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    meta: ImageMeta = Field(default_factory=ImageMeta)
    data_indexes: dict[str, int] = Field(default_factory=dict)

    @field_validator("items", "data_indexes", "meta", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # Older images were written with null maps before any collection existed.
        return {} if value is None else value

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "Image":
        return cls.model_validate(doc)

    def to_disk_doc(self) -> dict[str, Any]:
        self.meta.total = self.record_count()
        return self.model_dump(mode="json")

    def ensure_collection(self, name: str) -> "Image":
        if name not in self.items:
            self.items[name] = []
        if name not in self.data_indexes:
            self.data_indexes[name] = 0
        return self

    def counter(self, name: str) -> int:
        return self.data_indexes.get(name, 0)

    def record_count(self) -> int:
        return sum(len(records) for records in self.items.values())
