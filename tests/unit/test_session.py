"""Tests for builder sessions and payload parsing."""

import json

import pytest

from uiforge.builder import BuilderSession, parse_generation_payload
from uiforge.core import JSONParseError, create_container
from uiforge.core.id import extract_prefix

WIDGET_SOURCE = "function Widget({ text = 'hi' }) { return <p>{text}</p> }"


def payload(components=(), generated=()):
    return json.dumps({"components": list(components), "generatedComponents": list(generated)})


# ============================================================================
# parse_generation_payload
# ============================================================================

@pytest.mark.unit
def test_parse_payload_object():
    """Plain payload objects validate into picks and definitions."""
    parsed = parse_generation_payload(
        payload([{"type": "Card", "props": {"title": "x"}}], [{"type": "Widget", "code": WIDGET_SOURCE}])
    )

    assert [p.type_id for p in parsed.components] == ["Card"]
    assert parsed.components[0].properties == {"title": "x"}
    assert parsed.generated_components[0].source_text == WIDGET_SOURCE


@pytest.mark.unit
def test_parse_payload_wrapped_and_fenced():
    """Result wrappers and markdown fences are peeled off."""
    wrapped = "```json\n" + json.dumps({"result": {"components": [{"type": "Card"}]}}) + "\n```"
    assert [p.type_id for p in parse_generation_payload(wrapped).components] == ["Card"]


@pytest.mark.unit
def test_parse_payload_keeps_fenced_code():
    """Fences inside a code value survive, with or without an outer fence."""
    code = "```jsx\nfunction Hero() { return <h1>Hi</h1> }\n```"
    text = payload(generated=[{"type": "Hero", "code": code}])

    for response in (text, "```json\n" + text + "\n```", "Here it is:\n" + text):
        parsed = parse_generation_payload(response)
        assert [d.source_text for d in parsed.generated_components] == [code]


@pytest.mark.unit
def test_fenced_code_compiles(session):
    """A fenced code value registers like an unfenced one."""
    code = "```jsx\nfunction Hero() { return <h1>Hi</h1> }\n```"
    request_id = session.begin_generation()

    report = session.ingest_response(request_id, payload(generated=[{"type": "Hero", "code": code}]))

    assert report.added
    assert session.is_component_available("Hero")
    assert session.registrar.get_source_text("Hero").startswith("function Hero(")


@pytest.mark.unit
def test_parse_payload_repairs_json():
    """Trailing commas and single quotes are repaired."""
    broken = "{'components': [{'type': 'Card',},],}"
    assert [p.type_id for p in parse_generation_payload(broken).components] == ["Card"]


@pytest.mark.unit
def test_parse_payload_list_fallback():
    """A bare list is read as catalog picks; strings name types."""
    parsed = parse_generation_payload('Here you go: ["Card", {"type": "BetaHero"}]')

    assert [p.type_id for p in parsed.components] == ["Card", "BetaHero"]
    assert parsed.generated_components == []


@pytest.mark.unit
def test_parse_payload_salvages_valid_items():
    """Invalid items are dropped, valid ones kept."""
    text = payload([{"type": "Card"}, {"props": {}}], [{"type": "Widget"}, {"type": "W2", "code": WIDGET_SOURCE}])
    parsed = parse_generation_payload(text)

    assert [p.type_id for p in parsed.components] == ["Card"]
    assert [d.type_id for d in parsed.generated_components] == ["W2"]


@pytest.mark.unit
def test_parse_payload_unreadable():
    """Text with no JSON at all is an error."""
    with pytest.raises(JSONParseError):
        parse_generation_payload("I could not build that, sorry.")


# ============================================================================
# BuilderSession
# ============================================================================

@pytest.mark.unit
def test_ingest_response(session):
    """The current request's response is ingested."""
    request_id = session.begin_generation()
    assert extract_prefix(request_id) == "req"

    report = session.ingest_response(
        request_id, payload([{"type": "card"}], [{"type": "Widget", "code": WIDGET_SOURCE}])
    )

    assert len(report.added) == 2
    assert session.is_component_available("Widget")
    assert session.is_component_available("Card")
    assert not session.is_component_available("Ghost")
    assert session.pending_request is None


@pytest.mark.unit
def test_stale_response_dropped(session):
    """A response to a superseded request never reaches the canvas."""
    old = session.begin_generation()
    new = session.begin_generation()

    assert session.ingest_response(old, payload([{"type": "Card"}])) is None
    assert len(session.document) == 0

    assert session.ingest_response(new, payload([{"type": "BetaHero"}])) is not None
    assert [i.type_id for i in session.document] == ["BetaHero"]

    # answered requests are no longer pending
    assert session.ingest_response(new, payload([{"type": "Card"}])) is None


@pytest.mark.unit
def test_malformed_request_id_dropped(session):
    """Ids that are not request ULIDs are refused without touching the pending request."""
    pending = session.begin_generation()

    for bogus in ("", "req_short", session.id, pending.replace("req_", "inst_")):
        assert session.ingest_response(bogus, payload([{"type": "Card"}])) is None

    assert session.pending_request == pending
    assert len(session.document) == 0
    assert session.ingest_response(pending, payload([{"type": "Card"}])) is not None


@pytest.mark.unit
def test_sessions_are_isolated(small_catalog, settings):
    """Each session owns its registrar and document."""
    first = BuilderSession(catalog=small_catalog, settings=settings)
    second = BuilderSession(catalog=small_catalog, settings=settings)
    first.ingest_batch(generated_picks=[{"type": "Widget", "code": WIDGET_SOURCE}])

    assert first.is_component_available("Widget")
    assert not second.is_component_available("Widget")
    assert first.id != second.id
    assert first.catalog is second.catalog


@pytest.mark.unit
def test_container_provides_fresh_sessions(settings):
    """Sessions from the container share the catalog, not registrars."""
    container = create_container(settings)
    first = container.get(BuilderSession)
    second = container.get(BuilderSession)

    assert first is not second
    assert first.catalog is second.catalog
    assert first.registrar is not second.registrar
    assert first.settings is settings
