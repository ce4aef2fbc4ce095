"""Tests for property value serialization."""

import math

import pytest
from hypothesis import given, strategies as st

from uiforge.export import (
    SerializationError,
    emit_markup,
    parse_property_value,
    quote_string,
    serialize_attribute,
    serialize_property_value,
)
from uiforge.export.serializer import MAX_SAFE_INTEGER

scalars = (
    st.text()
    | st.booleans()
    | st.integers(min_value=-MAX_SAFE_INTEGER, max_value=MAX_SAFE_INTEGER)
    | st.floats(allow_nan=False, allow_infinity=False)
)
keys = st.text().filter(lambda k: k != "__proto__")
values = st.recursive(
    scalars,
    lambda children: st.lists(children, max_size=4) | st.dictionaries(keys, children, max_size=4),
    max_leaves=20,
)


@given(values)
def test_round_trip(value):
    """Property test: evaluating the emitted text gives back an equal value."""
    text = serialize_property_value(value)
    assert parse_property_value(text) == value
    assert serialize_property_value(parse_property_value(text)) == text


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("plain", '"plain"'),
        ('Hello "World"', '"Hello \\"World\\""'),
        ("back\\slash", '"back\\\\slash"'),
        ("line\nbreak\ttab", '"line\\nbreak\\ttab"'),
        ("\u2028", '"\\u2028"'),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (-1.5, "-1.5"),
        ([1, "a", [True]], '[1, "a", [true]]'),
        ({"a": 1, "b c": {"d": []}}, '{"a": 1, "b c": {"d": []}}'),
        ({}, "{}"),
    ],
)
def test_serialize_literals(value, expected):
    """Literal forms are deterministic."""
    assert serialize_property_value(value) == expected


@pytest.mark.unit
def test_quote_string_escapes_controls():
    """Control characters never appear raw inside a literal."""
    quoted = quote_string("a\x00b\x1fc\x7f")
    assert quoted == '"a\\u0000b\\u001fc\\u007f"'
    assert parse_property_value(quoted) == "a\x00b\x1fc\x7f"


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,path",
    [
        ({"items": [{"label": None}]}, "props.items[0].label"),
        ({"items": [1, 2, {"x": math.inf}]}, "props.items[2].x"),
        ({"meta": {"odd key": object()}}, 'props.meta["odd key"]'),
        ({"n": 2**60}, "props.n"),
        ({"m": {1: "a"}}, "props.m"),
        ({"m": {"__proto__": {}}}, "props.m"),
    ],
)
def test_serialization_error_names_key_path(value, path):
    """Values outside the domain fail loudly with their key path."""
    with pytest.raises(SerializationError) as excinfo:
        serialize_property_value(value, "props")

    assert excinfo.value.key_path == path
    assert path in str(excinfo.value)


@pytest.mark.unit
def test_cycles_rejected():
    """Cyclic structures cannot be serialized."""
    cyclic = {"a": []}
    cyclic["a"].append(cyclic)

    with pytest.raises(SerializationError, match="Cyclic"):
        serialize_property_value(cyclic)


@pytest.mark.unit
def test_shared_values_are_not_cycles():
    """The same list twice is fine."""
    shared = [1, 2]
    assert serialize_property_value({"a": shared, "b": shared}) == '{"a": [1, 2], "b": [1, 2]}'


@pytest.mark.unit
def test_serialize_attribute_forms():
    """Plain strings use attribute text; everything else an expression."""
    assert serialize_attribute("title", "Hello") == 'title="Hello"'
    assert serialize_attribute("title", 'Say "hi"') == 'title={"Say \\"hi\\""}'
    assert serialize_attribute("title", "a & b") == 'title={"a & b"}'
    assert serialize_attribute("count", 3) == "count={3}"
    assert serialize_attribute("enabled", False) == "enabled={false}"
    assert serialize_attribute("links", ["Home"]) == 'links={["Home"]}'
    assert serialize_attribute("aria-label", "x") == 'aria-label="x"'

    with pytest.raises(SerializationError):
        serialize_attribute("bad name", "x")
    with pytest.raises(SerializationError):
        serialize_attribute("1st", "x")


@pytest.mark.unit
def test_emit_markup():
    """One self-closing element, attributes in bag order."""
    assert emit_markup("Card", {}) == "<Card />"
    assert (
        emit_markup("Card", {"title": 'Hello "World"', "count": 2})
        == '<Card title={"Hello \\"World\\""} count={2} />'
    )
