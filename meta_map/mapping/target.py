"""Mapping targets.

A schema entry declares what a raw value turns into. Declarations are
parsed once into one of these frozen dataclasses:

    "image"                 -> NameTarget("image")
    "image[]"               -> NameTarget("image", element_wise=True)
    "User::create"          -> StaticMethodTarget("User", "create")
    "filter:the_title"      -> FilterTarget("the_title")
    str.upper               -> CallableTarget(str.upper)
    {"title": "upper"}      -> NestedSchemaTarget(<compiled schema>)
    ["date", "filter:x"]    -> ChainTarget((NameTarget("date"), FilterTarget("x")))

Bare names stay unresolved until mapping time, because the same schema is
shared by differently configured engines.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from meta_map.core.config import DEFAULT_CONFIG, EngineConfig
from meta_map.core.exceptions import SchemaError

if TYPE_CHECKING:
    from meta_map.mapping.schema import CompiledSchema


@dataclass(frozen=True)
class NameTarget:
    """An alias, registered type or function name."""

    name: str
    element_wise: bool = False


@dataclass(frozen=True)
class StaticMethodTarget:
    """``Type::method`` - a method looked up on a registered type."""

    type_name: str
    method: str
    element_wise: bool = False


@dataclass(frozen=True)
class FilterTarget:
    """``filter:name`` - a named filter hook."""

    name: str
    element_wise: bool = False


@dataclass(frozen=True)
class CallableTarget:
    """A directly callable target."""

    func: Callable[[Any], Any]
    element_wise: bool = False


@dataclass(frozen=True)
class NestedSchemaTarget:
    """A sub-schema applied to every row of a repeater or flexible content."""

    schema: CompiledSchema


@dataclass(frozen=True)
class ChainTarget:
    """Targets applied in sequence, threading the value through each."""

    targets: tuple[MappingTarget, ...]


MappingTarget = Union[
    NameTarget,
    StaticMethodTarget,
    FilterTarget,
    CallableTarget,
    NestedSchemaTarget,
    ChainTarget,
]

_TARGET_TYPES = (
    NameTarget,
    StaticMethodTarget,
    FilterTarget,
    CallableTarget,
    NestedSchemaTarget,
    ChainTarget,
)


def each(func: Callable[[Any], Any]) -> CallableTarget:
    """Mark a callable as applying to every element of an array value."""
    if not callable(func):
        raise TypeError("each() needs a callable")
    return CallableTarget(func, element_wise=True)


def is_target(value: Any) -> bool:
    return isinstance(value, _TARGET_TYPES)


def _parse_string(declaration: str, path: str, config: EngineConfig) -> MappingTarget:
    text = declaration.strip()
    if not text:
        raise SchemaError(path, "empty target")

    element_wise = False
    suffix = config.element_wise_suffix
    if suffix and text.endswith(suffix):
        element_wise = True
        text = text[: -len(suffix)].strip()
        if not text:
            raise SchemaError(path, f"'{declaration}' has nothing before '{suffix}'")

    if text.startswith(config.filter_prefix):
        name = text[len(config.filter_prefix):].strip()
        if not name:
            raise SchemaError(path, f"'{declaration}' is missing a filter name")
        return FilterTarget(name, element_wise=element_wise)

    separator = config.method_separator
    if separator in text:
        type_name, _, method = text.partition(separator)
        type_name, method = type_name.strip(), method.strip()
        if not type_name or not method:
            raise SchemaError(path, f"'{declaration}' must look like Type{separator}method")
        if not method.isidentifier():
            raise SchemaError(path, f"'{method}' is not a valid method name")
        return StaticMethodTarget(type_name, method, element_wise=element_wise)

    return NameTarget(text, element_wise=element_wise)


def parse_target(
    declaration: Any,
    path: str = "<target>",
    config: EngineConfig | None = None,
) -> MappingTarget:
    """Parse a declaration into a :data:`MappingTarget`.

    Raises:
        SchemaError: If the declaration has an unsupported shape.
    """
    config = config or DEFAULT_CONFIG

    if is_target(declaration):
        return declaration  # type: ignore[no-any-return]

    if isinstance(declaration, str):
        return _parse_string(declaration, path, config)

    # Imported here: schema.py builds on this module
    from meta_map.mapping.schema import CompiledSchema, MappingSchema

    if isinstance(declaration, CompiledSchema):
        return NestedSchemaTarget(declaration)

    if isinstance(declaration, MappingSchema):
        return NestedSchemaTarget(declaration.compile())

    if isinstance(declaration, Mapping):
        return NestedSchemaTarget(MappingSchema(declaration, config=config).compile())

    if isinstance(declaration, (list, tuple)):
        if not declaration:
            raise SchemaError(path, "empty target list")
        targets = tuple(
            parse_target(item, f"{path}[{index}]", config) for index, item in enumerate(declaration)
        )
        if len(targets) == 1:
            return targets[0]
        return ChainTarget(targets)

    if callable(declaration):
        return CallableTarget(declaration)

    raise SchemaError(path, f"unsupported target type {type(declaration).__name__}")
