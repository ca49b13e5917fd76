"""MetaMap exception hierarchy.

Messy input (incomplete repeaters, unknown mapping targets) is handled by
policy and never raises. These exceptions cover genuine encoding bugs,
invalid declarations and missing related entities.
"""

from __future__ import annotations


class MetaMapError(Exception):
    """Base exception for all MetaMap errors."""


# --- Reconstruction ---


class ReconstructionError(MetaMapError):
    """Base for flat-store reconstruction errors."""


class RecursionLimitExceeded(ReconstructionError):
    """Raised when nested groups go deeper than the configured limit."""

    def __init__(self, depth: int, path: str) -> None:
        self.depth = depth
        self.path = path
        super().__init__(
            f"Reconstruction exceeded max depth {depth} at '{path}'"
        )


class SerializationError(MetaMapError):
    """Raised when a serialized value cannot be decoded."""

    def __init__(self, detail: str, offset: int) -> None:
        self.offset = offset
        super().__init__(f"Cannot decode serialized value at offset {offset}: {detail}")


# --- Mapping ---


class MappingError(MetaMapError):
    """Base for mapping errors."""


class SchemaError(MappingError):
    """Raised when a mapping declaration has an unsupported shape."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Invalid mapping for '{path}': {detail}")


class MissingObjectError(MappingError):
    """Raised by factories when a referenced entity does not exist.

    The value mapper converts this into ``False`` for the mapped value.
    """


# --- Registry ---


class RegistryError(MetaMapError):
    """Raised on invalid type, alias or function registrations."""


# --- Items ---


class ItemError(MetaMapError):
    """Base for host item errors."""


class UndefinedPropertyError(ItemError):
    """Raised when an item method or property cannot be resolved."""

    def __init__(self, item_class: str, name: str) -> None:
        self.item_class = item_class
        self.name = name
        super().__init__(f"Call to undefined method {item_class}.{name}()")
