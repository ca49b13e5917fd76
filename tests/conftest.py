"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from meta_map.core.config import EngineConfig
from meta_map.core.engine import EngineContext
from meta_map.items.entities import build_context
from meta_map.mapping.mapper import ValueMapper


class InMemoryLoader:
    """RecordLoader over a dict of ``(kind, id) -> (record, raw_meta)``."""

    def __init__(self) -> None:
        self.records: dict[tuple[str, Any], tuple[dict[str, Any], dict[str, Any]]] = {}
        self.calls: list[tuple[str, Any]] = []

    def add(
        self,
        kind: str,
        ref: Any,
        record: Mapping[str, Any],
        meta: Mapping[str, Any] | None = None,
    ) -> InMemoryLoader:
        self.records[(kind, ref)] = (dict(record), dict(meta or {}))
        return self

    def load(self, kind: str, ref: Any) -> tuple[dict[str, Any], dict[str, Any]] | None:
        self.calls.append((kind, ref))
        return self.records.get((kind, ref))


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def context() -> EngineContext:
    """Engine context with the built-in shortcuts and no entity types."""
    return EngineContext()


@pytest.fixture
def mapper(context: EngineContext) -> ValueMapper:
    return context.mapper


@pytest.fixture
def loader() -> InMemoryLoader:
    return InMemoryLoader()


@pytest.fixture
def site_context(loader: InMemoryLoader) -> EngineContext:
    """Engine context with every entity type backed by the in-memory loader."""
    return build_context(loader)
