"""Lazily mapped rows of a repeater or flexible-content group."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from meta_map.mapping.mapper import ValueMapper
    from meta_map.mapping.schema import CompiledSchema


class LazyMappedSequence(Sequence[Any]):
    """Read-only sequence that maps each row on first access.

    Mapped rows are cached per index for the lifetime of the sequence, so
    iterating again (or indexing the same row twice) never re-invokes the
    mapping targets. ``len()`` is the row count and does not map anything;
    the inherited ``count(value)`` and ``index(value)`` compare mapped rows,
    so they map every row they pass. The underlying rows are never modified.

    Args:
        rows: Reconstructed rows (usually dicts, optionally type-tagged).
        schema: Compiled schema applied to every row.
        mapper: The value mapper doing the per-field work.
    """

    def __init__(self, rows: Sequence[Any], schema: CompiledSchema, mapper: ValueMapper) -> None:
        self._rows = rows
        self._schema = schema
        self._mapper = mapper
        self._cache: dict[int, Any] = {}

    def __len__(self) -> int:
        return len(self._rows)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> list[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]

        size = len(self._rows)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("LazyMappedSequence index out of range")

        if index not in self._cache:
            self._cache[index] = self._mapper.map_row(self._rows[index], self._schema)
        return self._cache[index]

    def __iter__(self) -> Iterator[Any]:
        # Restartable: every iteration starts at 0 and reuses cached rows
        for index in range(len(self._rows)):
            yield self[index]

    def is_cached(self, index: int) -> bool:
        """Check if row *index* has been mapped already."""
        if index < 0:
            index += len(self._rows)
        return index in self._cache

    @property
    def schema(self) -> CompiledSchema:
        return self._schema

    @property
    def raw(self) -> tuple[Any, ...]:
        """The unmapped rows."""
        return tuple(self._rows)

    def __repr__(self) -> str:
        return f"LazyMappedSequence(rows={len(self._rows)}, cached={len(self._cache)})"
