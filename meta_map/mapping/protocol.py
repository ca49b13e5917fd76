"""Mapping collaborator protocols.

EntityFactory is what a registered type name resolves to when a mapping
target constructs related entities. RecordLoader is the host platform's
side: it hands back stored records and their raw metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EntityFactory(Protocol):
    """Builds one kind of entity from a raw reference (usually an ID)."""

    def create(self, value: Any) -> Any:
        """Build the entity for *value*.

        Raises:
            MissingObjectError: If the referenced entity does not exist.
        """
        ...


@runtime_checkable
class RecordLoader(Protocol):
    """Loads host records with their raw metadata."""

    def load(self, kind: str, ref: Any) -> tuple[Mapping[str, Any], Mapping[str, Any]] | None:
        """Return ``(record, raw_meta)`` for *ref*, or None if it does not exist.

        *kind* is one of ``post``, ``term``, ``user``, ``comment``.
        """
        ...
