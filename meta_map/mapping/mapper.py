"""Value mapper.

Applies the target declared for a key to a raw value. Resolution order for
a leaf target, first match wins:

1. No entry for the key -> value unchanged
2. Nested schema + list value -> LazyMappedSequence (rows mapped on access)
3. Element-wise (``[]``) -> steps 4-9 per element
4. Callable -> func(value)
5. Shortcut alias -> substitute the aliased target and continue
6. Registered type -> Type(value) / factory.create(value)
7. ``Type::method`` -> Type.method(value)
8. ``filter:name`` -> filters.apply(name, value)
9. Registered or importable function -> func(value)
10. Nothing matched -> value unchanged

A MissingObjectError raised by any invoked target maps the value to False.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from meta_map.core.config import DEFAULT_CONFIG, EngineConfig
from meta_map.core.exceptions import MissingObjectError
from meta_map.core.hooks import FilterRegistry
from meta_map.core.registry import TypeRegistry
from meta_map.mapping.protocol import EntityFactory
from meta_map.mapping.schema import EMPTY_SCHEMA, CompiledSchema, MappingSchema
from meta_map.mapping.sequence import LazyMappedSequence
from meta_map.mapping.target import (
    CallableTarget,
    ChainTarget,
    FilterTarget,
    MappingTarget,
    NameTarget,
    NestedSchemaTarget,
    StaticMethodTarget,
    parse_target,
)

# Alias chains longer than this are treated as cycles
_MAX_ALIAS_HOPS = 8


def _as_schema(schema: CompiledSchema | MappingSchema | Mapping[str, Any] | None) -> CompiledSchema:
    if schema is None:
        return EMPTY_SCHEMA
    if isinstance(schema, CompiledSchema):
        return schema
    if isinstance(schema, MappingSchema):
        return schema.compile()
    return MappingSchema(schema).compile()


def _is_list_shaped(value: Any) -> bool:
    return isinstance(value, (list, tuple, LazyMappedSequence))


class ValueMapper:
    """Maps raw values through compiled schemas.

    Args:
        types: Registry of types, aliases and functions.
        filters: Named filter hooks for ``filter:`` targets.
        config: Engine configuration.
    """

    def __init__(
        self,
        types: TypeRegistry | None = None,
        filters: FilterRegistry | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._types = types or TypeRegistry(allow_imports=self._config.allow_imports)
        self._filters = filters or FilterRegistry()

    @property
    def types(self) -> TypeRegistry:
        return self._types

    @property
    def filters(self) -> FilterRegistry:
        return self._filters

    def map(
        self,
        value: Any,
        key: str,
        schema: CompiledSchema | MappingSchema | Mapping[str, Any] | None,
    ) -> Any:
        """Map *value* through the target declared for *key* in *schema*."""
        target = _as_schema(schema).resolve(key)
        if target is None:
            return value
        return self.apply(target, value, key)

    def apply(self, target: MappingTarget, value: Any, key: str = "<value>") -> Any:
        """Apply an already resolved target to *value*."""
        try:
            return self._apply(target, value)
        except MissingObjectError as e:
            logger.debug(f"Missing related object for {key!r}: {e}")
            return False

    def map_row(self, row: Any, schema: CompiledSchema) -> Any:
        """Map every field of one reconstructed row.

        A row's type tag selects the per-type schema when one is declared.
        Fields without an entry are copied unchanged.
        """
        if not isinstance(row, Mapping):
            return row

        type_schema = schema.for_type(row.get(self._config.type_key))
        if type_schema is not None:
            schema = type_schema

        mapped: dict[str, Any] = {}
        for field, value in row.items():
            target = schema.resolve(field)
            mapped[field] = value if target is None else self.apply(target, value, field)
        return mapped

    # ------------------------------------------------------------------

    def _apply(self, target: MappingTarget, value: Any) -> Any:
        if isinstance(target, ChainTarget):
            for step in target.targets:
                value = self._apply(step, value)
            return value

        if isinstance(target, NestedSchemaTarget):
            if _is_list_shaped(value):
                return LazyMappedSequence(value, target.schema, self)
            return value

        if getattr(target, "element_wise", False):
            if isinstance(value, Mapping):
                return {k: self._apply_leaf(target, item) for k, item in value.items()}
            if _is_list_shaped(value):
                return [self._apply_leaf(target, item) for item in value]

        return self._apply_leaf(target, value)

    def _apply_leaf(self, target: MappingTarget, value: Any) -> Any:
        hops = 0
        while True:
            if isinstance(target, CallableTarget):
                return target.func(value)

            if isinstance(target, FilterTarget):
                return self._filters.apply(target.name, value)

            if isinstance(target, StaticMethodTarget):
                return self._call_static(target, value)

            if isinstance(target, NameTarget):
                alias = self._types.resolve_alias(target.name)
                if alias is not None and hops < _MAX_ALIAS_HOPS:
                    hops += 1
                    aliased = parse_target(alias, target.name, self._config)
                    if getattr(aliased, "element_wise", False) and not target.element_wise:
                        return self._apply(aliased, value)
                    target = aliased
                    continue
                return self._call_name(target, value)

            # Nested schemas and chains reached through an alias
            return self._apply(target, value)

    def _call_name(self, target: NameTarget, value: Any) -> Any:
        factory = self._types.resolve_type(target.name)
        if factory is not None:
            return self._construct(factory, value)

        func = self._types.resolve_function(target.name)
        if func is not None:
            return func(value)

        logger.debug(f"Unresolved mapping target {target.name!r}, value passed through")
        return value

    def _call_static(self, target: StaticMethodTarget, value: Any) -> Any:
        owner = self._types.resolve_type(target.type_name)
        method = getattr(owner, target.method, None) if owner is not None else None
        if not callable(method):
            logger.debug(
                f"Unresolved mapping target {target.type_name}::{target.method}, "
                "value passed through"
            )
            return value
        return method(value)

    @staticmethod
    def _construct(factory: Any, value: Any) -> Any:
        if not isinstance(factory, type) and isinstance(factory, EntityFactory):
            return factory.create(value)
        return factory(value)
