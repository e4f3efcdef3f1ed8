from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from json_store import atomic_write_json_text, dump_json, read_json, write_json_text

from .errors import ImageOpenError, ImageSerializationError, ImageWriteError
from .image import Image
from .interfaces import ImageStore

logger = logging.getLogger(__name__)


class DiskImageStore(ImageStore):
    """
    Stores the whole database image as a single JSON document at a fixed path.

    - Missing/unreadable file: ImageOpenError.
    - Unparsable content: healed to an empty image, logged, not raised.
    - Writes overwrite in place unless `atomic_writes` is set.
    """

    def __init__(self, path: Path, *, atomic_writes: bool = False):
        self._path = path
        self._atomic_writes = atomic_writes

    @property
    def path(self) -> Path:
        return self._path

    def ensure_exists(self) -> bool:
        """Write an empty image if the backing file is absent. Returns True if one was created."""
        if self._path.exists():
            return False
        self.persist_image(Image())
        logger.info("DOCSTORE: created empty image at %s", self._path)
        return True

    def load_image(self) -> Image:
        try:
            raw = read_json(self._path)
        except OSError as e:
            raise ImageOpenError(self._path, e.strerror or str(e)) from e
        if not isinstance(raw, dict):
            return self._healed("content is not a JSON object")
        try:
            return Image.from_disk_doc(raw)
        except ValidationError as e:
            return self._healed(f"{e.error_count()} validation error(s)")

    def persist_image(self, image: Image) -> None:
        try:
            text = dump_json(image.to_disk_doc())
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise ImageSerializationError(f"cannot encode database image: {e}") from e

        write = atomic_write_json_text if self._atomic_writes else write_json_text
        try:
            write(self._path, text)
        except OSError as e:
            raise ImageWriteError(self._path, e.strerror or str(e)) from e
        logger.debug("DOCSTORE: wrote %d bytes to %s", len(text), self._path)

    def _healed(self, reason: str) -> Image:
        logger.warning("DOCSTORE: corrupt image at %s (%s); starting from an empty image", self._path, reason)
        return Image()
