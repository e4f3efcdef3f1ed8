from __future__ import annotations

import asyncio
from typing import Protocol

from .store import DocumentStore
from .toys import DiskToyRepository, ToyRecord


class AsyncToyRepository(Protocol):
    """
    Toy persistence interface used by the HTTP layer.
    Mirrors the sync repository one call for one call.
    """

    async def create_toy(self, iid: str, *, name: str = "", brand: str = "", company: str = "") -> ToyRecord: ...

    async def get_toy(self, iid: str) -> ToyRecord | None: ...

    async def list_toys(self) -> list[ToyRecord]: ...

    async def update_toy(
        self,
        iid: str,
        *,
        name: str | None = None,
        brand: str | None = None,
        company: str | None = None,
    ) -> ToyRecord | None: ...

    async def delete_toy(self, iid: str) -> bool: ...


class AsyncDiskToyRepository(AsyncToyRepository):
    """
    Async wrapper around the disk-backed toy repository.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O and lock waits.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._repo = DiskToyRepository(store)

    async def create_toy(self, iid: str, *, name: str = "", brand: str = "", company: str = "") -> ToyRecord:
        return await asyncio.to_thread(self._repo.create_toy, iid, name=name, brand=brand, company=company)

    async def get_toy(self, iid: str) -> ToyRecord | None:
        return await asyncio.to_thread(self._repo.get_toy, iid)

    async def list_toys(self) -> list[ToyRecord]:
        return await asyncio.to_thread(self._repo.list_toys)

    async def update_toy(
        self,
        iid: str,
        *,
        name: str | None = None,
        brand: str | None = None,
        company: str | None = None,
    ) -> ToyRecord | None:
        return await asyncio.to_thread(self._repo.update_toy, iid, name=name, brand=brand, company=company)

    async def delete_toy(self, iid: str) -> bool:
        return await asyncio.to_thread(self._repo.delete_toy, iid)
