"""Unit tests for MappingSchema and dotted path expansion."""

from __future__ import annotations

import pytest

from meta_map.core.exceptions import SchemaError
from meta_map.mapping.schema import CompiledSchema, MappingSchema, dot_to_tree, merge_schemas
from meta_map.mapping.target import FilterTarget, NameTarget, NestedSchemaTarget


class TestDotToTree:
    def test_expands_paths(self) -> None:
        assert dot_to_tree({"a.b": 1, "a.c.d": 2, "e": 3}) == {
            "a": {"b": 1, "c": {"d": 2}},
            "e": 3,
        }

    def test_plain_entry_replaces_group(self) -> None:
        assert dot_to_tree({"a.b": 1, "a": 2}) == {"a": 2}

    def test_group_replaces_plain_entry(self) -> None:
        assert dot_to_tree({"a": 2, "a.b": 1}) == {"a": {"b": 1}}

    def test_dotted_entry_extends_declared_group(self) -> None:
        assert dot_to_tree({"a": {"b": 1}, "a.c": 2}) == {"a": {"b": 1, "c": 2}}

    @pytest.mark.parametrize("key", [".a", "a.", "a..b"])
    def test_empty_segment_raises(self, key: str) -> None:
        with pytest.raises(SchemaError):
            dot_to_tree({key: "x"})


class TestMappingSchema:
    def test_map_pair_and_dict(self) -> None:
        schema = MappingSchema().map("post_author", "user").map({"gallery": "image[]"})
        compiled = schema.compile()
        assert compiled.resolve("post_author") == NameTarget("user")
        assert compiled.resolve("gallery") == NameTarget("image", element_wise=True)
        assert compiled.resolve("missing") is None

    def test_dotted_paths_compile_to_nested_schemas(self) -> None:
        compiled = MappingSchema({
            "blocks.title": "filter:the_title",
            "blocks.text.body": "filter:the_content",
        }).compile()
        blocks = compiled.resolve("blocks")
        assert isinstance(blocks, NestedSchemaTarget)
        assert blocks.schema.resolve("title") == FilterTarget("the_title")
        text = blocks.schema.for_type("text")
        assert text is not None
        assert text.resolve("body") == FilterTarget("the_content")

    def test_for_type_ignores_plain_entries(self) -> None:
        compiled = MappingSchema({"hero": "image"}).compile()
        assert compiled.for_type("hero") is None
        assert compiled.for_type(None) is None

    def test_later_entry_wins(self) -> None:
        schema = MappingSchema({"x": "upper"}).map("x", "lower")
        assert schema.compile().resolve("x") == NameTarget("lower")

    def test_invalid_target_fails_on_declaration(self) -> None:
        with pytest.raises(SchemaError):
            MappingSchema().map("x", 42)

    def test_missing_target_raises(self) -> None:
        with pytest.raises(SchemaError, match="missing target"):
            MappingSchema().map("x")

    def test_dict_with_target_raises(self) -> None:
        with pytest.raises(SchemaError):
            MappingSchema().map({"x": "y"}, "z")

    def test_empty_path_raises(self) -> None:
        with pytest.raises(SchemaError):
            MappingSchema().map("", "user")

    def test_compile_is_cached_until_modified(self) -> None:
        schema = MappingSchema({"a": "user"})
        first = schema.compile()
        assert schema.compile() is first
        schema.map("b", "post")
        assert schema.compile() is not first
        assert "b" in schema.compile()

    def test_entries_copy(self) -> None:
        schema = MappingSchema({"a": "user"})
        schema.entries["b"] = "post"
        assert "b" not in schema
        assert len(schema) == 1

    def test_compiled_schema_is_read_only(self) -> None:
        compiled = MappingSchema({"a": "user"}).compile()
        with pytest.raises(TypeError):
            compiled.entries["b"] = NameTarget("post")  # type: ignore[index]


class TestMerge:
    def test_other_wins(self) -> None:
        base = MappingSchema({"x": "upper", "y": "post"})
        base.merge(MappingSchema({"x": "lower"}))
        compiled = base.compile()
        assert compiled.resolve("x") == NameTarget("lower")
        assert compiled.resolve("y") == NameTarget("post")

    def test_merge_dict(self) -> None:
        schema = MappingSchema().merge({"a": "user"})
        assert schema.compile().resolve("a") == NameTarget("user")

    def test_merge_compiled(self) -> None:
        compiled = MappingSchema({"a": "user"}).compile()
        assert MappingSchema().merge(compiled).compile().resolve("a") == NameTarget("user")

    def test_merge_schemas(self) -> None:
        compiled = merge_schemas({"a": "user"}, MappingSchema({"a": "post", "b": "term"}))
        assert isinstance(compiled, CompiledSchema)
        assert compiled.resolve("a") == NameTarget("post")
        assert sorted(compiled.keys()) == ["a", "b"]
