"""Typed entity-id comparison.

References arrive as model instances, raw primary keys, or strings from URLs
and JSON bodies. Ownership checks go through :func:`same_entity` so a populated
reference and its bare id always compare equal.
"""

from __future__ import annotations

from typing import Any


def entity_id(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("A boolean is not an entity id.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        return int(text) if text.isdigit() else None
    pk = getattr(value, "pk", None)
    if pk is not None:
        return entity_id(pk)
    return None


def same_entity(left: Any, right: Any) -> bool:
    left_id = entity_id(left)
    return left_id is not None and left_id == entity_id(right)
