"""Repeater and flexible-content reconstruction.

Rebuilds nested rows from a flat metadata store:

    blocks          = "2"              blocks = [
    blocks_0_title  = "A"       ->         {"title": "A"},
    blocks_1_title  = "B"                  {"title": "B"},
                                       ]

    sections          = ["hero", "text"]
    sections_0___type = "hero"      ->  sections = [
    sections_0_title  = "Hi"                {"__type": "hero", "title": "Hi"},
    sections_1_body   = "Lorem"             {"__type": "text", "body": "Lorem"},
                                        ]

Flexible content is detected first, repeaters second, and every produced
row is reconstructed again. Keys are evaluated shortest-first so an outer
group claims its rows before a nested group is considered.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from meta_map.core.config import DEFAULT_CONFIG, EngineConfig
from meta_map.core.exceptions import RecursionLimitExceeded
from meta_map.tree.normalizer import normalize

# Every "<prefix>_<n>_" boundary inside a key, overlapping ones included
_ROW_BOUNDARY = re.compile(r"_(?=(0|[1-9]\d*)_)")

_SCALAR_TAG_TYPES = (str, int, float)


def _row_index(key: str, root: str) -> tuple[int, str] | None:
    """Split ``root_<n>_<rest>`` into ``(n, rest)``, or None if *key* is not a row key."""
    if not key.startswith(root + "_"):
        return None
    index, sep, rest = key[len(root) + 1:].partition("_")
    if not sep or not rest or not index.isdigit() or str(int(index)) != index:
        return None
    return int(index), rest


def _repeater_count(value: Any) -> int:
    """Return the row count *value* could stand for, or 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return 0


def _is_type_list(value: Any) -> bool:
    """A flexible-content root holds a non-empty list of truthy scalar type tags."""
    if not isinstance(value, list) or not value:
        return False
    return all(
        item and isinstance(item, _SCALAR_TAG_TYPES) and not isinstance(item, bool)
        for item in value
    )


def _row_prefixes(keys: list[str]) -> set[str]:
    """Collect every ``<prefix>_<n>_`` string that starts some key."""
    prefixes: set[str] = set()
    for key in keys:
        for match in _ROW_BOUNDARY.finditer(key):
            prefixes.add(key[: match.end() + len(match.group(1)) + 1])
    return prefixes


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


class Reconstructor:
    """Turns a normalized flat store into a nested tree.

    Args:
        config: Engine configuration (type key, shadow prefix, depth limit).
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def reconstruct(self, flat: Mapping[str, Any]) -> dict[str, Any]:
        """Reconstruct *flat* into nested rows.

        The input is not modified. Reconstructing an already reconstructed
        tree returns an equal tree.

        Raises:
            RecursionLimitExceeded: If rows nest deeper than ``max_depth``.
        """
        return self._reconstruct(dict(flat), 0, "")

    def _reconstruct(self, meta: dict[str, Any], depth: int, path: str) -> dict[str, Any]:
        if depth > self._config.max_depth:
            logger.warning(f"Reconstruction depth limit {self._config.max_depth} hit at {path!r}")
            raise RecursionLimitExceeded(self._config.max_depth, path or "<root>")

        meta = self._parse_flexible_content(meta, depth, path)
        meta = self._parse_repeaters(meta, depth, path)
        return meta

    # ------------------------------------------------------------------
    # Flexible content
    # ------------------------------------------------------------------

    def _detect_flexible_roots(self, meta: dict[str, Any]) -> dict[str, list[Any]]:
        roots: dict[str, list[Any]] = {}
        keys = sorted(meta)

        for key in keys:
            value = meta[key]
            if not _is_type_list(value):
                continue

            # Rows of an outer group are not roots of their own
            nested = False
            for root, types in roots.items():
                found = _row_index(key, root)
                if found is not None and found[0] < len(types):
                    nested = True
                    break
            if nested:
                continue

            prefix = key + "_"
            if any(other != key and other.startswith(prefix) for other in keys):
                roots[key] = value

        return roots

    def _parse_flexible_content(
        self, meta: dict[str, Any], depth: int, path: str
    ) -> dict[str, Any]:
        roots = self._detect_flexible_roots(meta)
        if not roots:
            return meta

        type_key = self._config.type_key
        shadow = self._config.shadow_prefix

        rows: dict[str, list[dict[str, Any]]] = {
            root: [{type_key: type_tag} for type_tag in types] for root, types in roots.items()
        }
        consumed: set[str] = set()
        ignored: set[str] = {shadow + root for root in roots}

        for key, value in meta.items():
            for root, types in roots.items():
                found = _row_index(key, root)
                if found is None or found[0] >= len(types):
                    continue
                index, field = found
                rows[root][index][field] = value
                consumed.add(key)
                ignored.add(shadow + key)
                break

        logger.debug(
            f"Flexible content at {path or '<root>'!r}: "
            + ", ".join(f"{root}[{len(types)}]" for root, types in roots.items())
        )
        return self._assemble(meta, rows, consumed | ignored, depth, path)

    # ------------------------------------------------------------------
    # Repeaters
    # ------------------------------------------------------------------

    def _detect_repeaters(self, meta: dict[str, Any], path: str) -> dict[str, int]:
        keys = sorted(meta)
        prefixes = _row_prefixes(keys)
        roots: dict[str, int] = {}

        for key in keys:
            count = _repeater_count(meta[key])
            if not count:
                continue

            nested = False
            for root, root_count in roots.items():
                found = _row_index(key, root)
                if found is not None and found[0] < root_count:
                    nested = True
                    break
            if nested:
                continue

            # Rows must be contiguous from 0; stop at the first gap
            complete = True
            for index in range(count):
                if f"{key}_{index}_" not in prefixes:
                    complete = False
                    break

            if complete:
                roots[key] = count
            else:
                logger.debug(
                    f"Not a repeater: {_join(path, key)!r}={meta[key]!r} "
                    f"(row {index} missing)"
                )

        return roots

    def _parse_repeaters(self, meta: dict[str, Any], depth: int, path: str) -> dict[str, Any]:
        roots = self._detect_repeaters(meta, path)
        if not roots:
            return meta

        shadow = self._config.shadow_prefix
        rows: dict[str, list[dict[str, Any]]] = {
            root: [{} for _ in range(count)] for root, count in roots.items()
        }
        consumed: set[str] = set()
        ignored: set[str] = {shadow + root for root in roots}

        for key, value in meta.items():
            for root, count in roots.items():
                found = _row_index(key, root)
                if found is None or found[0] >= count:
                    continue
                index, field = found
                rows[root][index][field] = value
                consumed.add(key)
                ignored.add(shadow + key)
                break

        logger.debug(
            f"Repeaters at {path or '<root>'!r}: "
            + ", ".join(f"{root}[{count}]" for root, count in roots.items())
        )
        return self._assemble(meta, rows, consumed | ignored, depth, path)

    # ------------------------------------------------------------------

    def _assemble(
        self,
        meta: dict[str, Any],
        rows: dict[str, list[dict[str, Any]]],
        skipped: set[str],
        depth: int,
        path: str,
    ) -> dict[str, Any]:
        """Rebuild *meta* in its original order with groups replaced by row lists."""
        result: dict[str, Any] = {}
        for key, value in meta.items():
            if key in rows:
                root_path = _join(path, key)
                result[key] = [
                    self._reconstruct(row, depth + 1, f"{root_path}[{index}]")
                    for index, row in enumerate(rows[key])
                ]
            elif key not in skipped:
                result[key] = value
        return result


def reconstruct(flat: Mapping[str, Any], config: EngineConfig | None = None) -> dict[str, Any]:
    """Reconstruct a normalized flat store. See :class:`Reconstructor`."""
    return Reconstructor(config).reconstruct(flat)


def load_meta(raw: Mapping[str, Any] | None, config: EngineConfig | None = None) -> dict[str, Any]:
    """Normalize and reconstruct a raw flat store in one step."""
    config = config or DEFAULT_CONFIG
    return Reconstructor(config).reconstruct(normalize(raw, decode=config.decode_serialized))
