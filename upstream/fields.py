"""Optional-field helpers for decoding partial upstream JSON."""
from __future__ import annotations

from typing import Any


def dig(value: Any, *path: str | int, default: Any = None) -> Any:
    """Return the value found by walking ``path`` into ``value``.

    Parameters
    ----------
    value:
        Decoded JSON (dicts, lists and scalars).
    path:
        Keys for dict levels and integer indexes for list levels, e.g.
        ``dig(event, "_embedded", "venues", 0, "name")``.
    default:
        Returned when any step is missing, out of range, of the wrong type,
        or when the final value is ``None`` or an empty string.
    """
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return default
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return default
            current = current[step]
    if current is None or current == "":
        return default
    return current


def first_match(items: Any, predicate) -> Any:
    """Return the first element of ``items`` satisfying ``predicate``, else ``None``."""
    if not isinstance(items, list):
        return None
    for item in items:
        if predicate(item):
            return item
    return None
