"""MetaMap - flat metadata reconstruction and declarative value mapping."""

from __future__ import annotations

from meta_map.core.config import EngineConfig
from meta_map.core.engine import SHORTCUTS, EngineContext
from meta_map.core.exceptions import (
    ItemError,
    MappingError,
    MetaMapError,
    MissingObjectError,
    ReconstructionError,
    RecursionLimitExceeded,
    RegistryError,
    SchemaError,
    SerializationError,
    UndefinedPropertyError,
)
from meta_map.core.hooks import FilterRegistry
from meta_map.core.registry import TypeRegistry
from meta_map.items import (
    Comment,
    Date,
    File,
    Image,
    Item,
    Post,
    Site,
    Term,
    User,
    Widget,
    build_context,
    item_property,
)
from meta_map.mapping import (
    CompiledSchema,
    LazyMappedSequence,
    MappingSchema,
    ValueMapper,
    each,
    merge_schemas,
)
from meta_map.tree import Reconstructor, load_meta, normalize, reconstruct, site_options

__all__ = [
    # Engine
    "EngineConfig",
    "EngineContext",
    "SHORTCUTS",
    "TypeRegistry",
    "FilterRegistry",
    # Tree
    "normalize",
    "reconstruct",
    "load_meta",
    "site_options",
    "Reconstructor",
    # Mapping
    "MappingSchema",
    "CompiledSchema",
    "merge_schemas",
    "ValueMapper",
    "LazyMappedSequence",
    "each",
    # Items
    "Item",
    "item_property",
    "Post",
    "File",
    "Image",
    "Term",
    "User",
    "Comment",
    "Site",
    "Widget",
    "Date",
    "build_context",
    # Exceptions
    "MetaMapError",
    "ReconstructionError",
    "RecursionLimitExceeded",
    "SerializationError",
    "MappingError",
    "SchemaError",
    "MissingObjectError",
    "RegistryError",
    "ItemError",
    "UndefinedPropertyError",
]
