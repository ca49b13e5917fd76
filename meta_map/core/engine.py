"""Engine context.

The EngineContext owns everything the reconstructor and the value mapper
share: configuration, the type/alias/function registry and the filter
hooks. Each context is independent; there is no process-wide state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from meta_map.core.config import EngineConfig
from meta_map.core.hooks import FilterRegistry
from meta_map.core.registry import TypeRegistry
from meta_map.mapping.mapper import ValueMapper
from meta_map.mapping.schema import CompiledSchema, MappingSchema
from meta_map.tree.normalizer import normalize
from meta_map.tree.reconstructor import Reconstructor
from meta_map.tree.scope import site_options

# Built-in shortcut aliases: short name -> logical type name
SHORTCUTS: dict[str, str] = {
    "date": "Date",
    "post": "Post",
    "term": "Term",
    "file": "File",
    "image": "Image",
    "user": "User",
    "comment": "Comment",
}


class EngineContext:
    """Holds the registries and mapper for one engine.

    Args:
        config: Engine configuration. Defaults to ``EngineConfig()``.
        types: Type registry. A new one with the built-in shortcuts is
            created when omitted.
        filters: Filter hooks. A new, empty registry is created when omitted.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        types: TypeRegistry | None = None,
        filters: FilterRegistry | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        if types is None:
            types = TypeRegistry(allow_imports=self.config.allow_imports)
            for alias, target in SHORTCUTS.items():
                types.register_alias(alias, target)
        self.types = types
        self.filters = filters or FilterRegistry()
        self.mapper = ValueMapper(self.types, self.filters, self.config)
        self._reconstructor = Reconstructor(self.config)

    @classmethod
    def from_config(cls, config: EngineConfig | Mapping[str, Any]) -> EngineContext:
        """Create a context from an EngineConfig or a plain dict of settings."""
        if not isinstance(config, EngineConfig):
            config = EngineConfig.model_validate(dict(config))
        return cls(config)

    def load_meta(self, raw: Mapping[str, Any] | None) -> dict[str, Any]:
        """Normalize and reconstruct a raw flat store."""
        flat = normalize(raw, decode=self.config.decode_serialized)
        return self._reconstructor.reconstruct(flat)

    def load_options(self, raw: Mapping[str, Any] | None) -> dict[str, Any]:
        """Load the site option table with prefixed fields lifted."""
        return site_options(raw, self.config)

    def schema(self, entries: Mapping[str, Any] | None = None) -> MappingSchema:
        """Start a mapping schema using this context's configuration."""
        return MappingSchema(entries, config=self.config)

    def map(
        self,
        value: Any,
        key: str,
        schema: CompiledSchema | MappingSchema | Mapping[str, Any] | None,
    ) -> Any:
        """Map a value through *schema*. See :class:`ValueMapper`."""
        if isinstance(schema, Mapping):
            schema = self.schema(schema)
        return self.mapper.map(value, key, schema)
