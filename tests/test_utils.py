"""Tests for locale detection, context loading and schema generation."""

import json

import pytest

from json_locale_translate.errors import ConfigError
from json_locale_translate.utils import detect_target_locales, generate_schema_from_value, load_context


class TestDetectTargetLocales:
    def test_dir_layout(self, tmp_path):
        for code in ("en", "de", "fr"):
            (tmp_path / code).mkdir()
            (tmp_path / code / "common.json").write_text("{}", encoding="utf-8")
        (tmp_path / "es").mkdir()  # no bundle yet

        assert detect_target_locales(tmp_path, "en") == ["de", "fr"]

    def test_flat_layout(self, tmp_path):
        for name in ("en.json", "ja.json", "de.json", "translation-context.json"):
            (tmp_path / name).write_text("{}", encoding="utf-8")

        assert detect_target_locales(tmp_path, "en", layout="flat") == ["de", "ja"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            detect_target_locales(tmp_path / "missing", "en")


class TestLoadContext:
    def test_none(self):
        assert load_context(None) == ""

    def test_instructions_and_glossary(self, tmp_path):
        path = tmp_path / "translation-context.json"
        path.write_text(
            json.dumps(
                {
                    "instructions": "This is a B2B SaaS dashboard.",
                    "glossary": {"workspace": "a customer's account"},
                }
            ),
            encoding="utf-8",
        )

        context = load_context(path)

        assert context.startswith("**Contextual Information**:\nThis is a B2B SaaS dashboard.")
        assert '- "workspace" refers to a customer\'s account' in context

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_context(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "ctx.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_context(path)

    @pytest.mark.parametrize("root", ["42", "[\"be formal\"]", "\"be formal\""])
    def test_root_must_be_object(self, tmp_path, root):
        path = tmp_path / "ctx.json"
        path.write_text(root, encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON object"):
            load_context(path)

    def test_directory_is_config_error(self, tmp_path):
        with pytest.raises(ConfigError, match="Error reading context file"):
            load_context(tmp_path)

    def test_glossary_must_be_object(self, tmp_path):
        path = tmp_path / "ctx.json"
        path.write_text(json.dumps({"glossary": ["workspace"]}), encoding="utf-8")
        with pytest.raises(ConfigError, match="glossary"):
            load_context(path)

    def test_glossary_only(self, tmp_path):
        path = tmp_path / "ctx.json"
        path.write_text(json.dumps({"glossary": {"seat": "a paid user licence"}}), encoding="utf-8")

        assert load_context(path) == '\n**Glossary**:\n- "seat" refers to a paid user licence'


class TestGenerateSchema:
    def test_nested_document(self):
        schema = generate_schema_from_value({"title": "Hi", "nav": {"home": "Home"}, "steps": ["a"], "count": 2})

        assert schema["required"] == ["title", "nav", "steps", "count"]
        assert schema["additionalProperties"] is False
        assert schema["properties"]["nav"]["properties"]["home"] == {"type": "string"}
        assert schema["properties"]["steps"] == {"type": "array", "items": {"type": "string"}}
        assert schema["properties"]["count"] == {"type": "integer"}

    def test_bool_is_not_integer(self):
        assert generate_schema_from_value(True) == {"type": "boolean"}

    def test_uniform_list_uses_single_item_schema(self):
        schema = generate_schema_from_value([{"q": "Why?", "a": "Because"}, {"q": "How?", "a": "Like so"}])

        assert schema["items"]["type"] == "object"
        assert schema["items"]["required"] == ["q", "a"]

    def test_mixed_list_uses_any_of(self):
        schema = generate_schema_from_value(["Step one", {"label": "Step two"}, "Step three"])

        assert schema["type"] == "array"
        assert schema["items"]["anyOf"] == [
            {"type": "string"},
            {
                "type": "object",
                "properties": {"label": {"type": "string"}},
                "required": ["label"],
                "additionalProperties": False,
            },
        ]

    def test_empty_list_and_null(self):
        assert generate_schema_from_value([]) == {"type": "array", "items": {"type": "string"}}
        assert generate_schema_from_value(None) == {"type": ["string", "null"]}
