from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, TypeVar

from .disk_store import DiskImageStore
from .errors import ConcurrentUpdateError, DuplicateRecordError
from .image import Image
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry
from .naming import collection_name
from .query import all_records, filter_by, filter_equals
from .records import StoredRecord, stamp_created, stamp_updated, to_document, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
S = TypeVar("S", bound=StoredRecord)


@dataclass(frozen=True)
class CollectionSnapshot(Generic[T]):
    records: list[T]
    counter: int


class DocumentStore:
    """
    Embedded document store backed by one JSON image file.

    Every public operation loads the image fresh, runs under the path's
    readers-writer lock from load to persist, and rewrites the whole file
    when it mutates anything.

    `collection` arguments accept an explicit name or a record kind
    (class or instance), resolved by `collection_name`.
    """

    def __init__(
        self,
        path: Path,
        *,
        atomic_writes: bool = False,
        create_if_missing: bool = True,
        locks: PathLockRegistry = GLOBAL_PATH_LOCKS,
    ):
        self._disk = DiskImageStore(path, atomic_writes=atomic_writes)
        self._lock = locks.lock_for(path)
        if create_if_missing:
            with self._lock.write_locked():
                self._disk.ensure_exists()

    @classmethod
    def from_settings(cls, settings: Any) -> "DocumentStore":
        return cls(
            settings.docstore_path,
            atomic_writes=settings.atomic_writes,
            create_if_missing=settings.create_if_missing,
        )

    @property
    def path(self) -> Path:
        return self._disk.path

    def create(self, collection: Any, record: R, *, unique_field: str | None = None) -> R:
        """
        Mint the next identity, stamp the record in place, append it, persist.

        The caller's record keeps its stamps even if persisting fails; the
        image on disk does not change in that case.

        With `unique_field`, a stored record already holding the same value
        raises DuplicateRecordError; the check and the insert share one
        write lock, and the record is left unstamped.
        """
        name = collection_name(collection)
        with self._lock.write_locked():
            image = self._load(name)
            if unique_field is not None:
                value = to_document(record).get(unique_field)
                if filter_equals(image.items[name], unique_field, value):
                    raise DuplicateRecordError(name, unique_field, value)
            next_id = image.counter(name) + 1
            stamp_created(record, str(next_id), utc_now())
            image.items[name].append(to_document(record))
            image.data_indexes[name] = next_id
            self._disk.persist_image(image)
        logger.debug("DOCSTORE: created %s/%d", name, next_id)
        return record

    def fetch_collection(self, collection: Any) -> list[dict[str, Any]]:
        """Records of the collection in insertion order; empty if it was never written."""
        return self.snapshot(collection).records

    def snapshot(self, collection: Any) -> CollectionSnapshot[dict[str, Any]]:
        """Records plus the identity counter, read under one lock."""
        name = collection_name(collection)
        with self._lock.read_locked():
            image = self._load(name)
        return CollectionSnapshot(records=list(image.items[name]), counter=image.counter(name))

    def replace_collection(
        self,
        collection: Any,
        records: Iterable[Any],
        *,
        expected_counter: int | None = None,
    ) -> None:
        """
        Substitute the collection's whole record list and persist.

        Every record gets a fresh last-update stamp; identities and creation
        stamps are kept as the caller supplies them. With `expected_counter`,
        a create that slipped in since the caller's snapshot raises
        ConcurrentUpdateError instead of being overwritten.
        """
        name = collection_name(collection)
        records = list(records)
        with self._lock.write_locked():
            image = self._load(name)
            actual = image.counter(name)
            if expected_counter is not None and expected_counter != actual:
                raise ConcurrentUpdateError(name, expected_counter, actual)
            now = utc_now()
            for rec in records:
                stamp_updated(rec, now)
            image.items[name] = [to_document(rec) for rec in records]
            self._disk.persist_image(image)
        logger.debug("DOCSTORE: replaced %s with %d record(s)", name, len(records))

    def collection(self, kind: type[S], name: str | None = None) -> "TypedCollection[S]":
        return TypedCollection(self, kind, name or collection_name(kind))

    def _load(self, name: str) -> Image:
        return self._disk.load_image().ensure_collection(name)


class TypedCollection(Generic[S]):
    """
    A collection bound to one StoredRecord subclass.

    Documents are decoded into `kind` only here, on the way out of the store.
    """

    def __init__(self, store: DocumentStore, kind: type[S], name: str):
        self._store = store
        self._kind = kind
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def create(self, record: S, *, unique_field: str | None = None) -> S:
        return self._store.create(self._name, record, unique_field=unique_field)

    def all(self) -> list[S]:
        return self._decode(all_records(self._store.fetch_collection(self._name)))

    def where(self, field: str, value: Any) -> list[S]:
        return self._decode(filter_equals(self._store.fetch_collection(self._name), field, value))

    def find(self, accessor: Callable[[S], Any], value: Any) -> list[S]:
        return filter_by(self.all(), accessor, value)

    def snapshot(self) -> CollectionSnapshot[S]:
        snap = self._store.snapshot(self._name)
        return CollectionSnapshot(records=self._decode(snap.records), counter=snap.counter)

    def replace(self, records: Iterable[S], *, expected_counter: int | None = None) -> None:
        self._store.replace_collection(self._name, records, expected_counter=expected_counter)

    def _decode(self, docs: list[dict[str, Any]]) -> list[S]:
        return [self._kind.model_validate(doc) for doc in docs]
