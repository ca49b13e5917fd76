"""Items layer - posts, terms, users and friends over reconstructed metadata."""

from __future__ import annotations

from meta_map.items.base import Item, item_property
from meta_map.items.date import Date
from meta_map.items.entities import (
    AttachmentFactory,
    Comment,
    CommentFactory,
    File,
    Image,
    ItemFactory,
    Post,
    PostFactory,
    Site,
    Term,
    TermFactory,
    User,
    UserFactory,
    Widget,
    build_context,
)

__all__ = [
    "Item",
    "item_property",
    "Date",
    "Post",
    "File",
    "Image",
    "Term",
    "User",
    "Comment",
    "Site",
    "Widget",
    "ItemFactory",
    "PostFactory",
    "AttachmentFactory",
    "TermFactory",
    "UserFactory",
    "CommentFactory",
    "build_context",
]
