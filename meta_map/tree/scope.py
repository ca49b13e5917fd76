"""Scoped views over the site option table.

Site-wide fields live in the option table under ``options_``; fields of
terms and widgets live there too, under ``<taxonomy>_<term_id>_`` and
``widget_<widget_id>_``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from meta_map.core.config import DEFAULT_CONFIG, EngineConfig
from meta_map.tree.reconstructor import load_meta


def scoped(options: Mapping[str, Any], prefix: str) -> dict[str, Any]:
    """Return the entries of *options* under *prefix*, with the prefix stripped."""
    if not prefix:
        return dict(options)
    return {
        key.removeprefix(prefix): value
        for key, value in options.items()
        if key.startswith(prefix) and key != prefix
    }


def site_options(
    raw: Mapping[str, Any] | None,
    config: EngineConfig | None = None,
    prefix: str | None = None,
) -> dict[str, Any]:
    """Load the whole option table, lifting prefixed fields to the top level.

    Prefixed entries override unprefixed options with the same name.
    """
    config = config or DEFAULT_CONFIG
    prefix = config.options_prefix if prefix is None else prefix

    options = load_meta(raw, config)
    ready: dict[str, Any] = {}
    fields: dict[str, Any] = {}
    for key, value in options.items():
        if prefix and key.startswith(prefix) and key != prefix:
            fields[key.removeprefix(prefix)] = value
        else:
            ready[key] = value

    ready.update(fields)
    return ready


def term_prefix(taxonomy: str, term_id: int | str) -> str:
    return f"{taxonomy}_{term_id}_"


def widget_prefix(widget_id: str) -> str:
    return f"widget_{widget_id}_"
