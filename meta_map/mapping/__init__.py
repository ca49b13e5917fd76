"""Mapping layer - turn raw values into typed values through declared schemas."""

from __future__ import annotations

from meta_map.mapping.mapper import ValueMapper
from meta_map.mapping.protocol import EntityFactory, RecordLoader
from meta_map.mapping.schema import CompiledSchema, MappingSchema, dot_to_tree, merge_schemas
from meta_map.mapping.sequence import LazyMappedSequence
from meta_map.mapping.target import (
    CallableTarget,
    ChainTarget,
    FilterTarget,
    MappingTarget,
    NameTarget,
    NestedSchemaTarget,
    StaticMethodTarget,
    each,
    parse_target,
)

__all__ = [
    "ValueMapper",
    "LazyMappedSequence",
    "MappingSchema",
    "CompiledSchema",
    "dot_to_tree",
    "merge_schemas",
    "EntityFactory",
    "RecordLoader",
    "MappingTarget",
    "NameTarget",
    "StaticMethodTarget",
    "FilterTarget",
    "CallableTarget",
    "NestedSchemaTarget",
    "ChainTarget",
    "each",
    "parse_target",
]
