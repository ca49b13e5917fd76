"""Flat store normalization.

Persistence layers hand metadata back as ``key -> [value]`` lists with
serialized strings inside. Normalization collapses the single-element
wrappers and decodes serialized values, so the reconstructor only sees
plain scalars, lists and dicts.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from meta_map.tree.serialization import maybe_unserialize


def _unwrap(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return value[0]
    return value


def normalize(raw: Mapping[str, Any] | None, *, decode: bool = True) -> dict[str, Any]:
    """Normalize a raw flat store.

    Args:
        raw: Mapping of meta key to stored value. ``None`` is treated as empty.
        decode: Decode serialized strings into native values.

    Returns:
        A new dict in the same key order. The input is never modified.
    """
    if not raw:
        return {}

    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        value = _unwrap(value)
        if decode:
            value = maybe_unserialize(value)
        normalized[str(key)] = value
    return normalized
