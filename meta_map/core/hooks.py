"""Named filter hooks.

Filters are externally registered transforms looked up by name. The value
mapper reaches them through ``filter:name`` targets, and host items run
``property.raw`` / ``property.mapped`` through them.

Callbacks run in ascending priority, then in registration order.
"""

from __future__ import annotations

from collections.abc import Callable
from itertools import count
from typing import Any

from loguru import logger

PROPERTY_RAW = "property.raw"
PROPERTY_MAPPED = "property.mapped"
ITEM_EXTEND = "item.extend"


class FilterRegistry:
    """Holds named filter callbacks for one engine context."""

    def __init__(self) -> None:
        # name -> list of (priority, sequence, callback)
        self._filters: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._sequence = count()

    def add_filter(self, name: str, func: Callable[..., Any], priority: int = 10) -> None:
        """Register *func* under *name*."""
        callbacks = self._filters.setdefault(name, [])
        callbacks.append((priority, next(self._sequence), func))
        callbacks.sort(key=lambda entry: (entry[0], entry[1]))

    def remove_filter(self, name: str, func: Callable[..., Any]) -> bool:
        """Remove every registration of *func* under *name*.

        Returns:
            True if anything was removed.
        """
        callbacks = self._filters.get(name)
        if not callbacks:
            return False
        kept = [entry for entry in callbacks if entry[2] is not func]
        self._filters[name] = kept
        return len(kept) != len(callbacks)

    def has_filter(self, name: str) -> bool:
        """Check if any callback is registered under *name*."""
        return bool(self._filters.get(name))

    def apply(self, name: str, value: Any, *args: Any) -> Any:
        """Thread *value* through every callback registered under *name*.

        Extra positional arguments are passed to each callback unchanged.
        With no callbacks registered the value is returned as-is.
        """
        callbacks = self._filters.get(name)
        if not callbacks:
            return value
        logger.debug(f"Applying filter {name!r} ({len(callbacks)} callbacks)")
        for _, _, func in list(callbacks):
            value = func(value, *args)
        return value

    def do_action(self, name: str, *args: Any) -> None:
        """Run callbacks under *name* for their side effects only."""
        for _, _, func in list(self._filters.get(name, [])):
            func(*args)
