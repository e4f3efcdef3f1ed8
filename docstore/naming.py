from __future__ import annotations

from typing import Any


def collection_name(kind: Any) -> str:
    """
    Resolve the collection a record kind lives in.

    - a string is an explicit name and passes through;
    - an instance resolves through its class, so instances and the class itself agree;
    - a class attribute `__collection__` wins; otherwise "<module>.<qualname>",
      which is unique per class.
    """
    if isinstance(kind, str):
        name = kind
    else:
        cls = kind if isinstance(kind, type) else type(kind)
        explicit = getattr(cls, "__collection__", None)
        name = explicit if isinstance(explicit, str) else f"{cls.__module__}.{cls.__qualname__}"
    if not name.strip():
        raise ValueError("collection name must not be empty")
    return name
