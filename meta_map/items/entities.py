"""Content entities and their factories.

Each entity declares its property shortcuts and default mappings in
``setup()``. Factories implement the EntityFactory protocol and are what
the logical type names (``Post``, ``User``, ...) resolve to, so mapping a
stored ID to ``"user"`` goes through UserFactory.create().
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from meta_map.core.config import EngineConfig
from meta_map.core.engine import EngineContext
from meta_map.core.exceptions import MissingObjectError
from meta_map.items.base import Item, item_property
from meta_map.items.date import Date
from meta_map.mapping.protocol import RecordLoader
from meta_map.tree.scope import scoped, term_prefix, widget_prefix


class Post(Item):
    """A post of any post type."""

    kind = "post"

    def setup(self) -> None:
        self.translate({
            "id": "ID",
            "title": "post_title",
            "content": "post_content",
            "date": "post_date",
            "image": "_thumbnail_id",
            "thumbnail": "_thumbnail_id",
            "status": "post_status",
            "parent": "post_parent",
            "template": "_wp_page_template",
            "author": "post_author",
            "user": "post_author",
            "type": "post_type",
        })
        self.map({
            "_thumbnail_id": "image",
            "post_date": "date",
            "post_date_gmt": "date",
            "post_parent": "post",
            "post_author": "user",
            "post_title": "filter:the_title",
            "post_content": "filter:the_content",
        })


class File(Post):
    """An attachment that is not an image."""

    kind = "file"

    def setup(self) -> None:
        super().setup()
        self.translate({"post": "post_parent", "url": "guid", "mime_type": "post_mime_type"})


class Image(File):
    """An image attachment."""

    kind = "image"

    def lookup(self, key: str) -> Any:
        # Image sizes are stored as attachment metadata
        sizes = self.meta.get("_wp_attachment_metadata")
        if isinstance(sizes, Mapping):
            if key in ("width", "height"):
                return sizes.get(key)
            found = (sizes.get("sizes") or {}).get(key)
            if isinstance(found, Mapping):
                return dict(found)
        return None


class Term(Item):
    """A taxonomy term."""

    kind = "term"

    def setup(self) -> None:
        self.translate({
            "id": "term_id",
            "title": "name",
        })
        self.map({"parent": "term"})

    @property
    def identity(self) -> Any:
        return self.record.get("term_id")


class User(Item):
    """A registered user."""

    kind = "user"

    def setup(self) -> None:
        self.translate({
            "id": "ID",
            "name": "display_name",
            "title": "display_name",
            "email": "user_email",
            "login": "user_login",
            "url": "user_url",
        })
        self.map({"user_registered": "date"})


class Comment(Item):
    """A comment on a post."""

    kind = "comment"

    def setup(self) -> None:
        self.translate({
            "id": "comment_ID",
            "ID": "comment_ID",
            "post": "comment_post_ID",
            "date": "comment_date",
            "text": "comment_content",
            "content": "comment_content",
            "user": "user_id",
            "author": "user_id",
            "approved": "comment_approved",
            "parent": "comment_parent",
        })
        self.map({
            "comment_post_ID": "post",
            "user_id": "user",
            "comment_parent": "comment",
            "comment_date": "date",
        })

    @property
    def identity(self) -> Any:
        return self.record.get("comment_ID")


class Site(Item):
    """The site, backed by the option table.

    Fields stored under the ``options_`` prefix are lifted to the top level.
    """

    kind = "site"

    def setup_meta(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        return self.context.load_options(meta)

    def setup(self) -> None:
        self.translate({
            "name": "blogname",
            "title": "blogname",
            "description": "blogdescription",
            "url": "home",
        })

    @property
    def identity(self) -> Any:
        return self.record.get("blog_id", 1)

    def term_fields(self, taxonomy: str, term_id: int | str) -> dict[str, Any]:
        """Fields stored in the option table for one term."""
        return scoped(self.meta, term_prefix(taxonomy, term_id))

    def widget_fields(self, widget_id: str) -> dict[str, Any]:
        """Fields stored in the option table for one widget."""
        return scoped(self.meta, widget_prefix(widget_id))


class Widget(Item):
    """A widget instance; its fields come from the site's option table.

    Args:
        record: Widget record, at least ``{"id": ...}``.
        site: The loaded site whose options hold the widget fields.
    """

    kind = "widget"

    def __init__(self, record: Mapping[str, Any], site: Site) -> None:
        self._site = site
        super().__init__(record, None, site.context)

    def setup_meta(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        return self._site.widget_fields(str(self.record["id"]))

    @item_property
    def widget_id(self) -> Any:
        return self.record["id"]


# ----------------------------------------------------------------------
# Factories
# ----------------------------------------------------------------------


class ItemFactory:
    """Builds items of one kind from IDs through a RecordLoader.

    Args:
        kind: The record kind passed to the loader.
        item_class: Item class to build.
        loader: Host-provided record loader.
        context: Engine context given to every built item.
    """

    def __init__(
        self,
        kind: str,
        item_class: type[Item],
        loader: RecordLoader,
        context: EngineContext,
    ) -> None:
        self.kind = kind
        self.item_class = item_class
        self._loader = loader
        self._context = context

    def create(self, value: Any) -> Item:
        """Build the item for *value*, or pass an already built item through.

        Raises:
            MissingObjectError: If the loader has no record for *value*.
        """
        if isinstance(value, self.item_class):
            return value

        ref = self._reference(value)
        loaded = self._loader.load(self.kind, ref) if ref is not None else None
        if loaded is None:
            raise MissingObjectError(f"No {self.kind} found for {value!r}")

        record, meta = loaded
        return self.item_class_for(record)(record, meta, self._context)

    def item_class_for(self, record: Mapping[str, Any]) -> type[Item]:
        return self.item_class

    @staticmethod
    def _reference(value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value if value > 0 else None
        if isinstance(value, str) and value.strip().isdigit():
            return int(value) or None
        return value or None


class PostFactory(ItemFactory):
    """Builds posts; attachments become File or Image by mime type."""

    def __init__(self, loader: RecordLoader, context: EngineContext) -> None:
        super().__init__("post", Post, loader, context)
        # post_type -> item class, for host-specific post type classes
        self.classes: dict[str, type[Item]] = {}

    def register(self, post_type: str, item_class: type[Post]) -> PostFactory:
        """Build records of *post_type* as *item_class*."""
        self.classes[post_type] = item_class
        return self

    def item_class_for(self, record: Mapping[str, Any]) -> type[Item]:
        post_type = record.get("post_type")
        if post_type == "attachment":
            mime = str(record.get("post_mime_type") or "")
            return Image if mime.startswith("image/") else File
        return self.classes.get(str(post_type), Post)


class AttachmentFactory(PostFactory):
    """Builds attachments only. Used behind the ``file`` and ``image`` aliases."""

    def create(self, value: Any) -> Item:
        item = super().create(value)
        if not isinstance(item, File):
            raise MissingObjectError(f"Post {value!r} is not an attachment")
        return item


class TermFactory(ItemFactory):
    def __init__(self, loader: RecordLoader, context: EngineContext) -> None:
        super().__init__("term", Term, loader, context)


class UserFactory(ItemFactory):
    def __init__(self, loader: RecordLoader, context: EngineContext) -> None:
        super().__init__("user", User, loader, context)


class CommentFactory(ItemFactory):
    def __init__(self, loader: RecordLoader, context: EngineContext) -> None:
        super().__init__("comment", Comment, loader, context)


def build_context(
    loader: RecordLoader,
    config: EngineConfig | Mapping[str, Any] | None = None,
) -> EngineContext:
    """Create an engine context with every entity type registered.

    ``Post``, ``File``, ``Image``, ``Term``, ``User`` and ``Comment`` resolve
    to factories backed by *loader*; ``Date`` resolves to :class:`Date`. The
    built-in shortcuts (``post``, ``user``, ``date``, ...) point at them.
    """
    context = EngineContext.from_config(config) if config is not None else EngineContext()
    attachments = AttachmentFactory(loader, context)

    context.types.register_type("Post", PostFactory(loader, context))
    context.types.register_type("File", attachments)
    context.types.register_type("Image", attachments)
    context.types.register_type("Term", TermFactory(loader, context))
    context.types.register_type("User", UserFactory(loader, context))
    context.types.register_type("Comment", CommentFactory(loader, context))
    context.types.register_type("Date", Date)
    return context
