from __future__ import annotations

from .disk_store import DiskImageStore
from .errors import (
    ConcurrentUpdateError,
    DocumentStoreError,
    DuplicateRecordError,
    ImageOpenError,
    ImageSerializationError,
    ImageWriteError,
)
from .image import Image
from .naming import collection_name
from .query import all_records, filter_by, filter_equals
from .records import StoredRecord
from .repositories import AsyncDiskToyRepository, AsyncToyRepository
from .store import CollectionSnapshot, DocumentStore, TypedCollection
from .toys import DiskToyRepository, DuplicateToyError, ToyRecord, ToyRepository

__all__ = [
    "DocumentStore",
    "TypedCollection",
    "CollectionSnapshot",
    "DiskImageStore",
    "Image",
    "StoredRecord",
    "collection_name",
    "filter_equals",
    "filter_by",
    "all_records",
    "DocumentStoreError",
    "ImageOpenError",
    "ImageSerializationError",
    "ImageWriteError",
    "ConcurrentUpdateError",
    "DuplicateRecordError",
    "ToyRecord",
    "ToyRepository",
    "DiskToyRepository",
    "DuplicateToyError",
    "AsyncToyRepository",
    "AsyncDiskToyRepository",
]
