"""Contract tests for factory and loader protocol compliance."""

from __future__ import annotations

import pytest

from meta_map.core.engine import EngineContext
from meta_map.mapping.protocol import EntityFactory, RecordLoader


class TestEntityFactoryProtocol:
    @pytest.mark.parametrize("name", ["Post", "File", "Image", "Term", "User", "Comment"])
    def test_registered_factories_implement_protocol(
        self, site_context: EngineContext, name: str
    ) -> None:
        factory = site_context.types.resolve_type(name)
        assert isinstance(factory, EntityFactory)
        assert not isinstance(factory, type)

    def test_shortcuts_point_at_registered_types(self, site_context: EngineContext) -> None:
        for alias, type_name in site_context.types.aliases.items():
            assert site_context.types.resolve_type(type_name) is not None, alias


class TestRecordLoaderProtocol:
    def test_fixture_loader_implements_protocol(self, loader) -> None:
        assert isinstance(loader, RecordLoader)

    def test_unknown_record_is_none(self, loader) -> None:
        assert loader.load("post", 1) is None
