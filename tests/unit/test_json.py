"""Tests for JSON helpers and type id naming."""

import pytest

from uiforge.core import (
    JSONParseError,
    extract_json,
    extract_json_array,
    is_component_name,
    safe_json_dumps,
    strip_markdown_fence,
    strip_outer_fence,
    to_kebab_case,
    to_pascal_case,
    type_id_forms,
    validate_json_depth,
)


class TestExtraction:
    """Test JSON extraction from model output."""

    def test_extract_embedded_object(self):
        """Objects are found inside surrounding prose."""
        assert extract_json('Sure! {"a": [1, 2]} Hope that helps.') == {"a": [1, 2]}

    def test_extract_fenced(self):
        """Fenced blocks are unwrapped first."""
        assert strip_markdown_fence("```json\n{}\n```") == "{}"
        assert strip_markdown_fence("no fence") == "no fence"
        assert extract_json('```json\n{"ok": true}\n```') == {"ok": True}

    def test_inner_fences_kept(self):
        """Only a fence around the whole text is peeled."""
        inner = '{"code": "```js\\nx\\n```"}'
        assert strip_outer_fence("```json\n" + inner + "\n```") == inner
        assert strip_outer_fence(inner) == inner
        assert extract_json(inner) == {"code": "```js\nx\n```"}

    def test_repair(self):
        """Malformed JSON is repaired unless disabled."""
        assert extract_json('{"a": 1,}') == {"a": 1}
        with pytest.raises(JSONParseError):
            extract_json('{"a": 1,}', repair=False)

    def test_extract_array(self):
        """Arrays are extracted the same way."""
        assert extract_json_array('result: ["Card", "Hero"]') == ["Card", "Hero"]
        with pytest.raises(JSONParseError):
            extract_json_array("nothing here")

    def test_missing_object(self):
        """Text without an object is an error."""
        with pytest.raises(JSONParseError):
            extract_json("plain text")


class TestEncoding:
    """Test JSON encoding."""

    def test_compact_and_indented(self):
        """Compact output uses no whitespace; indent is honored."""
        assert safe_json_dumps({"a": 1}) == '{"a":1}'
        assert safe_json_dumps({"a": 1}, indent=2) == '{\n  "a": 1\n}'

    def test_depth_limit(self):
        """Deeply nested values are rejected."""
        nested = current = {}
        for _ in range(5):
            current["x"] = {}
            current = current["x"]

        validate_json_depth(nested, max_depth=5)
        with pytest.raises(JSONParseError):
            validate_json_depth(nested, max_depth=4)


class TestNaming:
    """Test type id textual forms."""

    @pytest.mark.parametrize(
        "type_id,pascal",
        [("login-form", "LoginForm"), ("LoginForm", "LoginForm"), ("ao-chat-bot", "AoChatBot")],
    )
    def test_to_pascal_case(self, type_id, pascal):
        assert to_pascal_case(type_id) == pascal

    def test_to_kebab_case(self):
        assert to_kebab_case("LoginForm") == "login-form"
        assert to_kebab_case("AOChatBot") == "ao-chat-bot"
        assert to_kebab_case("login-form") == "login-form"

    def test_type_id_forms(self):
        assert type_id_forms("login-form") == ("login-form", "LoginForm")
        assert type_id_forms("Card") == ("Card",)

    def test_is_component_name(self):
        assert is_component_name("Card")
        assert not is_component_name("card")
        assert not is_component_name("Login Form")
