from __future__ import annotations

from typing import Protocol

from .errors import DuplicateRecordError
from .store import DocumentStore
from .records import StoredRecord


class DuplicateToyError(DuplicateRecordError):
    def __init__(self, iid: str) -> None:
        super().__init__(ToyRecord.__collection__, "iid", iid)
        self.iid = iid


class ToyRecord(StoredRecord):
    __collection__ = "toys"

    iid: str
    name: str = ""
    brand: str = ""
    company: str = ""


class ToyRepository(Protocol):
    def create_toy(self, iid: str, *, name: str = "", brand: str = "", company: str = "") -> ToyRecord:
        ...

    def get_toy(self, iid: str) -> ToyRecord | None:
        ...

    def list_toys(self) -> list[ToyRecord]:
        ...

    def update_toy(
        self,
        iid: str,
        *,
        name: str | None = None,
        brand: str | None = None,
        company: str | None = None,
    ) -> ToyRecord | None:
        ...

    def delete_toy(self, iid: str) -> bool:
        ...


class DiskToyRepository(ToyRepository):
    """
    Toys keyed by their caller-chosen `iid`; the store-minted `id` stays internal.

    Update and delete fetch the whole collection, rebuild the list and replace
    it, passing the counter they read so a concurrent create is detected
    rather than lost.
    """

    def __init__(self, store: DocumentStore):
        self._toys = store.collection(ToyRecord)

    def create_toy(self, iid: str, *, name: str = "", brand: str = "", company: str = "") -> ToyRecord:
        toy = ToyRecord(iid=iid, name=name, brand=brand, company=company)
        try:
            return self._toys.create(toy, unique_field="iid")
        except DuplicateRecordError as e:
            raise DuplicateToyError(iid) from e

    def get_toy(self, iid: str) -> ToyRecord | None:
        found = self._toys.where("iid", iid)
        return found[0] if found else None

    def list_toys(self) -> list[ToyRecord]:
        return self._toys.all()

    def update_toy(
        self,
        iid: str,
        *,
        name: str | None = None,
        brand: str | None = None,
        company: str | None = None,
    ) -> ToyRecord | None:
        snap = self._toys.snapshot()
        updated: ToyRecord | None = None
        for toy in snap.records:
            if toy.iid != iid:
                continue
            if name is not None:
                toy.name = name
            if brand is not None:
                toy.brand = brand
            if company is not None:
                toy.company = company
            updated = toy
        if updated is None:
            return None
        self._toys.replace(snap.records, expected_counter=snap.counter)
        return updated

    def delete_toy(self, iid: str) -> bool:
        snap = self._toys.snapshot()
        kept = [toy for toy in snap.records if toy.iid != iid]
        if len(kept) == len(snap.records):
            return False
        self._toys.replace(kept, expected_counter=snap.counter)
        return True
