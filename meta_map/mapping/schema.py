"""Mapping schema builder and compiled schema.

Host items declare mappings during setup:

    schema = (
        MappingSchema()
        .map("post_author", "user")
        .map({"gallery": "image[]", "blocks.title": "filter:the_title"})
        .map("blocks.text.body", "filter:the_content")
    )

Dotted paths address fields inside repeater rows (``group.field``) and
inside flexible-content rows of one type (``group.type.field``). They are
expanded one segment at a time into nested schemas when compiled:

    {"blocks": {"title": ..., "text": {"body": ...}}}

Entries merge by exact key, later entries winning. There is no deep merge
within a single key's value.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from meta_map.core.config import DEFAULT_CONFIG, EngineConfig
from meta_map.core.exceptions import SchemaError
from meta_map.mapping.target import MappingTarget, NestedSchemaTarget, parse_target


def dot_to_tree(entries: Mapping[str, Any]) -> dict[str, Any]:
    """Expand dotted keys into nested dicts.

    ``{"a.b": x, "a.c.d": y, "e": z}`` becomes ``{"a": {"b": x, "c": {"d": y}}, "e": z}``.
    A later plain entry replaces an earlier group of the same name and the
    other way around.
    """
    processed: dict[str, Any] = {}
    go_deep: set[str] = set()

    for key, value in entries.items():
        group, dot, rest = key.partition(".")
        if not dot:
            processed[key] = value
            go_deep.discard(key)
            continue

        if not group or not rest:
            raise SchemaError(key, "dotted paths need a name on both sides of '.'")

        existing = processed.get(group)
        if not isinstance(existing, Mapping):
            existing = {}
        else:
            existing = dict(existing)
        existing[rest] = value
        processed[group] = existing
        go_deep.add(group)

    for group in go_deep:
        processed[group] = dot_to_tree(processed[group])

    return processed


@dataclass(frozen=True)
class CompiledSchema:
    """A compiled, read-only mapping schema."""

    entries: Mapping[str, MappingTarget] = field(default_factory=lambda: MappingProxyType({}))

    def resolve(self, key: str) -> MappingTarget | None:
        """Return the target declared for *key*, or None."""
        return self.entries.get(key)

    def for_type(self, type_tag: Any) -> CompiledSchema | None:
        """Return the nested schema declared for rows of *type_tag*."""
        if type_tag is None:
            return None
        target = self.entries.get(str(type_tag))
        if isinstance(target, NestedSchemaTarget):
            return target.schema
        return None

    def keys(self) -> list[str]:
        return list(self.entries.keys())

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


EMPTY_SCHEMA = CompiledSchema()


class MappingSchema:
    """Mergeable mapping declarations.

    Every declaration is validated when added. The compiled form is cached
    until the next modification.

    Args:
        entries: Initial ``path -> target`` declarations.
        config: Engine configuration used to parse target strings.
    """

    def __init__(
        self,
        entries: Mapping[str, Any] | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._entries: dict[str, Any] = {}
        self._compiled: CompiledSchema | None = None
        if entries:
            self.map(entries)

    def map(self, path: str | Mapping[str, Any], target: Any = None) -> MappingSchema:
        """Declare one ``path, target`` pair or a dict of them."""
        if isinstance(path, Mapping):
            if target is not None:
                raise SchemaError("<schema>", "pass either a dict of entries or a path and a target")
            values = dict(path)
        else:
            if target is None:
                raise SchemaError(str(path), "missing target")
            values = {path: target}

        for key, value in values.items():
            if not isinstance(key, str) or not key:
                raise SchemaError(str(key), "paths must be non-empty strings")
            # Fail fast on unsupported declarations
            parse_target(value, key, self._config)
            # Re-inserting moves the key last so it wins during expansion
            self._entries.pop(key, None)
            self._entries[key] = value

        self._compiled = None
        return self

    def merge(self, other: MappingSchema | CompiledSchema | Mapping[str, Any]) -> MappingSchema:
        """Merge another schema in; its entries win on equal keys."""
        if isinstance(other, MappingSchema):
            return self.map(other.entries) if len(other) else self
        if isinstance(other, CompiledSchema):
            return self.map(dict(other.entries)) if len(other) else self
        return self.map(other) if other else self

    def compile(self) -> CompiledSchema:
        """Return the compiled schema, building it on first use."""
        if self._compiled is None:
            self._compiled = self._build(dot_to_tree(self._entries))
        return self._compiled

    def _build(self, tree: Mapping[str, Any]) -> CompiledSchema:
        entries: dict[str, MappingTarget] = {}
        for key, value in tree.items():
            if isinstance(value, Mapping) and not isinstance(value, CompiledSchema):
                entries[key] = NestedSchemaTarget(self._build(dot_to_tree(value)))
            else:
                entries[key] = parse_target(value, key, self._config)
        return CompiledSchema(MappingProxyType(entries))

    @property
    def entries(self) -> dict[str, Any]:
        """Copy of the raw declarations, in registration order."""
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries


def merge_schemas(*schemas: MappingSchema | CompiledSchema | Mapping[str, Any]) -> CompiledSchema:
    """Merge schemas left to right and compile the result."""
    merged = MappingSchema()
    for schema in schemas:
        merged.merge(schema)
    return merged.compile()
