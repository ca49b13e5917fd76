"""Host item base class.

Wraps a stored record and its metadata. Property reads go through an
explicit, ordered list of resolvers:

1. external zero-argument extensions (``add_external_method``)
2. methods marked with ``@item_property``
3. metadata, under the translated key
4. the type-specific ``lookup()`` hook
5. the underlying record

The first resolver yielding a non-None value wins. The value then runs
through the ``property.raw`` filter, the item's mapping schema and the
``property.mapped`` filter, and is cached under the requested name.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from meta_map.core.exceptions import UndefinedPropertyError
from meta_map.core.hooks import ITEM_EXTEND, PROPERTY_MAPPED, PROPERTY_RAW
from meta_map.mapping.schema import CompiledSchema, MappingSchema

if TYPE_CHECKING:
    from meta_map.core.engine import EngineContext

_MISSING = object()


def item_property(func: Callable[..., Any]) -> Callable[..., Any]:
    """Expose a zero-argument method as a resolvable item property."""
    func.__item_property__ = True  # type: ignore[attr-defined]
    return func


class Item:
    """Base class for posts, terms, users, comments, sites and widgets.

    Args:
        record: The stored record (post row, term row, ...).
        meta: Raw flat metadata for the record. It is normalized and
            reconstructed once, here.
        context: Engine context providing the mapper and filters.
    """

    kind: ClassVar[str] = "item"

    RESOLVERS: ClassVar[tuple[str, ...]] = (
        "_resolve_external",
        "_resolve_method",
        "_resolve_meta",
        "_resolve_lookup",
        "_resolve_record",
    )

    def __init__(
        self,
        record: Mapping[str, Any],
        meta: Mapping[str, Any] | None,
        context: EngineContext,
    ) -> None:
        self.record: dict[str, Any] = dict(record)
        self.context = context
        self.meta: dict[str, Any] = self.setup_meta(meta)
        self._dictionary: dict[str, str] = {}
        self._schema = context.schema()
        self._cache: dict[str, Any] = {}
        self._external: dict[str, tuple[Callable[..., Any], int]] = {}

        self.setup()
        context.filters.do_action(ITEM_EXTEND, self)

    def setup_meta(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        """Turn raw metadata into the reconstructed tree."""
        return self.context.load_meta(meta)

    def setup(self) -> None:
        """Register translations and mappings. Overridden per entity."""

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def translate(self, translations: Mapping[str, str]) -> Item:
        """Add property-name shortcuts, e.g. ``{"title": "post_title"}``."""
        self._dictionary.update(translations)
        return self

    def map(self, values: str | Mapping[str, Any], to: Any = None) -> Item:
        """Declare mappings for this item. See :class:`MappingSchema`."""
        self._schema.map(values, to)
        return self

    def add_external_method(self, name: str, func: Callable[..., Any], args: int = 0) -> Item:
        """Attach an external callable as a method of this item.

        Callables with ``args == 0`` are also readable as properties. The
        item is always passed as the first argument.
        """
        self._external[name] = (func, args)
        self._cache.pop(name, None)
        return self

    @property
    def schema(self) -> CompiledSchema:
        return self._schema.compile()

    def translate_property(self, name: str) -> str:
        return self._dictionary.get(name, name)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Resolve, map and cache a property. Unknown properties give False."""
        if name in self._cache:
            return self._cache[name]

        key = self.translate_property(name)
        value = self._resolve(name, key)
        if value is _MISSING:
            return False

        filters = self.context.filters
        value = filters.apply(PROPERTY_RAW, value, key, self)
        if value:
            value = self.context.mapper.map(value, key, self.schema)
        value = filters.apply(PROPERTY_MAPPED, value, key, self)

        self._cache[name] = value
        return value

    def has(self, name: str) -> bool:
        """Check if *name* resolves to a value.

        A property whose mapped value is False (a missing related object)
        still counts, cached or not.
        """
        # Only resolved properties are ever cached
        if name in self._cache:
            return True
        return self._resolve(name, self.translate_property(name)) is not _MISSING

    def _resolve(self, name: str, key: str) -> Any:
        for resolver in self.RESOLVERS:
            value = getattr(self, resolver)(name, key)
            if value is not _MISSING and value is not None:
                return value
        return _MISSING

    def _resolve_external(self, name: str, key: str) -> Any:
        external = self._external.get(name)
        if external is None or external[1] != 0:
            return _MISSING
        return external[0](self)

    def _resolve_method(self, name: str, key: str) -> Any:
        method = getattr(type(self), name, None)
        if not callable(method) or not getattr(method, "__item_property__", False):
            return _MISSING
        return method(self)

    def _resolve_meta(self, name: str, key: str) -> Any:
        return self.meta.get(key, _MISSING)

    def _resolve_lookup(self, name: str, key: str) -> Any:
        found = self.lookup(key)
        return _MISSING if found is None else found

    def _resolve_record(self, name: str, key: str) -> Any:
        return self.record.get(key, _MISSING)

    def lookup(self, key: str) -> Any:
        """Type-specific getter, consulted after metadata. None means not found."""
        return None

    def call(self, name: str, *args: Any) -> Any:
        """Call an external method registered with ``add_external_method``."""
        external = self._external.get(name)
        if external is not None and len(args) >= external[1]:
            return external[0](self, *args)
        raise UndefinedPropertyError(type(self).__name__, name)

    def order(self) -> Any:
        """Sort key for lists of items."""
        return self.get("title")

    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not real attributes
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return type(self) is type(other) and self.identity == other.identity

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.identity))

    @property
    def identity(self) -> Any:
        """The record's primary key."""
        return self.record.get("ID", self.record.get("id"))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.identity!r})"
