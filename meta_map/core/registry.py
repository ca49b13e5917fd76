"""Type registry - logical names for mapping targets.

Replaces string-to-class reflection with explicit tables:

    types:     "User"  -> UserFactory() or any single-argument class
    aliases:   "user"  -> "User::create"
    functions: "upper" -> str.upper

The registry is owned by one engine context. Nothing is process-global.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

from loguru import logger

from meta_map.core.exceptions import RegistryError


class TypeRegistry:
    """Holds constructible types, shortcut aliases and free functions.

    Args:
        allow_imports: When true, names that are not registered but look like
            dotted import paths (``package.module.attr``) are imported on demand.
    """

    def __init__(self, allow_imports: bool = True) -> None:
        self._types: dict[str, Any] = {}
        self._aliases: dict[str, str] = {}
        self._functions: dict[str, Callable[..., Any]] = {}
        self._allow_imports = allow_imports

    @staticmethod
    def _check_name(kind: str, name: str) -> None:
        if not name or not isinstance(name, str):
            raise RegistryError(f"{kind} name must be a non-empty string")

    def register_type(self, name: str, factory: Any) -> TypeRegistry:
        """Register a class or EntityFactory under a logical type name."""
        self._check_name("Type", name)
        if factory is None:
            raise RegistryError(f"Type '{name}' needs a class or factory")
        self._types[name] = factory
        return self

    def register_alias(self, name: str, target: str) -> TypeRegistry:
        """Register a shortcut alias such as ``image`` -> ``Image::create``."""
        self._check_name("Alias", name)
        if not target or not isinstance(target, str):
            raise RegistryError(f"Alias '{name}' must point at a non-empty target string")
        self._aliases[name] = target
        return self

    def register_function(self, name: str, func: Callable[..., Any]) -> TypeRegistry:
        """Register a free function under a name."""
        self._check_name("Function", name)
        if not callable(func):
            raise RegistryError(f"Function '{name}' is not callable")
        self._functions[name] = func
        return self

    def resolve_type(self, name: str) -> Any | None:
        """Look up a registered type, falling back to a dotted import."""
        if name in self._types:
            return self._types[name]
        found = self._import(name)
        if isinstance(found, type):
            return found
        return None

    def resolve_alias(self, name: str) -> str | None:
        return self._aliases.get(name)

    def resolve_function(self, name: str) -> Callable[..., Any] | None:
        """Look up a registered function, falling back to a dotted import."""
        if name in self._functions:
            return self._functions[name]
        found = self._import(name)
        if callable(found) and not isinstance(found, type):
            return found
        return None

    def _import(self, name: str) -> Any | None:
        """Resolve ``package.module.attr`` without raising."""
        if not self._allow_imports or "." not in name:
            return None
        module_path, _, attr = name.rpartition(".")
        try:
            module = importlib.import_module(module_path)
            return getattr(module, attr)
        except (ImportError, AttributeError, ValueError) as e:
            logger.debug(f"Cannot import mapping target {name!r}: {e}")
            return None

    @property
    def aliases(self) -> dict[str, str]:
        """Copy of the alias table."""
        return dict(self._aliases)

    @property
    def type_names(self) -> list[str]:
        """Registered type names, sorted alphabetically."""
        return sorted(self._types.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._types or name in self._aliases or name in self._functions
