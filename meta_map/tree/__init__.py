"""Tree layer - rebuild nested rows from flat metadata stores."""

from __future__ import annotations

from meta_map.tree.normalizer import normalize
from meta_map.tree.reconstructor import Reconstructor, load_meta, reconstruct
from meta_map.tree.scope import scoped, site_options, term_prefix, widget_prefix
from meta_map.tree.serialization import is_serialized, maybe_unserialize, unserialize

__all__ = [
    "normalize",
    "Reconstructor",
    "reconstruct",
    "load_meta",
    "scoped",
    "site_options",
    "term_prefix",
    "widget_prefix",
    "unserialize",
    "maybe_unserialize",
    "is_serialized",
]
