"""Unit tests for TypeRegistry."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from meta_map.core.exceptions import RegistryError
from meta_map.core.registry import TypeRegistry


class TestTypeRegistry:
    def test_register_and_resolve(self) -> None:
        registry = (
            TypeRegistry()
            .register_type("Money", Decimal)
            .register_alias("money", "Money")
            .register_function("upper", str.upper)
        )
        assert registry.resolve_type("Money") is Decimal
        assert registry.resolve_alias("money") == "Money"
        assert registry.resolve_function("upper") is str.upper

    def test_unknown_names(self) -> None:
        registry = TypeRegistry()
        assert registry.resolve_type("Money") is None
        assert registry.resolve_alias("money") is None
        assert registry.resolve_function("upper") is None

    def test_dotted_import(self) -> None:
        registry = TypeRegistry()
        assert registry.resolve_type("decimal.Decimal") is Decimal
        assert registry.resolve_function("json.loads") is json.loads

    def test_import_kind_must_match(self) -> None:
        registry = TypeRegistry()
        assert registry.resolve_type("json.loads") is None
        assert registry.resolve_function("decimal.Decimal") is None

    def test_failed_import_is_none(self) -> None:
        registry = TypeRegistry()
        assert registry.resolve_function("no_such_module.func") is None
        assert registry.resolve_function("json.no_such_func") is None
        assert registry.resolve_function(".relative") is None

    def test_imports_disabled(self) -> None:
        assert TypeRegistry(allow_imports=False).resolve_type("decimal.Decimal") is None

    def test_registration_replaces(self) -> None:
        registry = TypeRegistry().register_function("f", str.upper).register_function("f", str.lower)
        assert registry.resolve_function("f") is str.lower

    def test_invalid_registrations(self) -> None:
        registry = TypeRegistry()
        with pytest.raises(RegistryError):
            registry.register_type("", Decimal)
        with pytest.raises(RegistryError):
            registry.register_type("Money", None)
        with pytest.raises(RegistryError):
            registry.register_alias("money", "")
        with pytest.raises(RegistryError, match="not callable"):
            registry.register_function("f", 5)  # type: ignore[arg-type]

    def test_contains(self) -> None:
        registry = TypeRegistry().register_type("Money", Decimal).register_alias("cash", "Money")
        assert "Money" in registry
        assert "cash" in registry
        assert "upper" not in registry

    def test_type_names_sorted(self) -> None:
        registry = TypeRegistry().register_type("User", dict).register_type("Post", dict)
        assert registry.type_names == ["Post", "User"]

    def test_aliases_copy(self) -> None:
        registry = TypeRegistry().register_alias("cash", "Money")
        registry.aliases["other"] = "X"
        assert registry.aliases == {"cash": "Money"}
