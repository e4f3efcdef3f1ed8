from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from .image import Image


@runtime_checkable
class Record(Protocol):
    """
    Capability a stored value declares so the store never reaches into its fields by name.
    """

    def stamp_created(self, identity: str, now: datetime) -> None:
        """Assign identity plus creation and last-update timestamps."""
        ...

    def stamp_updated(self, now: datetime) -> None:
        """Refresh the last-update timestamp only."""
        ...

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document stored in the image."""
        ...


class ImageStore(Protocol):
    """
    Minimal persistence interface: the whole database image under one key.
    """

    def load_image(self) -> Image:
        """Load and return the full image (never None)."""
        ...

    def persist_image(self, image: Image) -> None:
        """Overwrite the stored image with the given one."""
        ...
