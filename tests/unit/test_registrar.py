"""Tests for the component registrar."""

import pytest
from hypothesis import HealthCheck, given, settings as hypothesis_settings, strategies as st

from uiforge.compiler import ComponentRegistrar
from uiforge.core import GeneratedComponentDefinition
from uiforge.core.config import Settings


def definition(type_id: str, source: str) -> GeneratedComponentDefinition:
    return GeneratedComponentDefinition(type_id=type_id, source_text=source)


@pytest.mark.unit
def test_compile_and_register(registrar, login_form):
    """Registered units are found under both textual forms."""
    assert registrar.compile_and_register(login_form) is True

    assert registrar.is_known_generated("login-form")
    assert registrar.is_known_generated("LoginForm")
    assert not registrar.is_known_generated("signup-form")
    assert registrar.component_name_for("login-form") == "LoginForm"
    assert registrar.get_source_text("LoginForm").startswith("function LoginForm(")
    assert registrar.type_ids() == ["login-form"]
    assert "login-form" in registrar
    assert len(registrar) == 1


@pytest.mark.unit
def test_recompile_identical_source_is_idempotent(registrar, login_form):
    """Same type and same text: same unit, True both times."""
    assert registrar.compile_and_register(login_form)
    first = registrar.get_unit("login-form")

    assert registrar.compile_and_register(login_form)
    assert registrar.get_unit("login-form") is first


@pytest.mark.unit
def test_fenced_source_stored_clean(registrar, product_card_source):
    """Source text is kept without fences."""
    assert registrar.compile_and_register(definition("product-card", product_card_source))

    text = registrar.get_source_text("product-card")
    assert "```" not in text
    assert text.startswith("const formatPrice")


@pytest.mark.unit
def test_failed_compile_returns_false(registrar):
    """Invalid source is reported, never raised."""
    assert registrar.compile_and_register(definition("broken", "function Broken( {")) is False

    assert not registrar.is_known_generated("broken")
    assert registrar.get_source_text("broken") is None
    assert registrar.last_error("broken")


@pytest.mark.unit
def test_failed_recompile_keeps_previous_unit(registrar, login_form):
    """A bad revision does not replace a working unit."""
    assert registrar.compile_and_register(login_form)
    previous = registrar.get_unit("login-form")

    bad = definition("login-form", "function LoginForm() { return <Mystery /> }")
    assert registrar.compile_and_register(bad) is False

    assert registrar.get_unit("login-form") is previous
    assert "Mystery" in registrar.last_error("login-form")


@pytest.mark.unit
def test_recompile_changed_source_replaces_unit(registrar, login_form):
    """New text for a known type replaces the unit."""
    registrar.compile_and_register(login_form)
    updated = definition("login-form", "function LoginForm() { return <form>New</form> }")

    assert registrar.compile_and_register(updated)
    assert registrar.get_unit("LoginForm").render({}).text() == "New"
    assert registrar.last_error("login-form") is None


@pytest.mark.unit
def test_source_length_limit():
    """Oversized source is rejected before parsing."""
    registrar = ComponentRegistrar(settings=Settings(_env_file=None, max_source_length=20))
    source = "function Big() { return <div>" + "x" * 50 + "</div> }"

    assert registrar.compile_and_register(definition("Big", source)) is False
    assert "limit 20" in registrar.last_error("Big")


@pytest.mark.unit
def test_compile_many(registrar, login_form):
    """Batch compilation reports successes and failures."""
    report = registrar.compile_many([login_form, definition("bad", "const x = 1")])

    assert report.succeeded == ("login-form",)
    assert set(report.failed) == {"bad"}
    assert not report.ok

    registrar.clear()
    assert len(registrar) == 0


@pytest.mark.unit
@hypothesis_settings(deadline=None, suppress_health_check=[HealthCheck.too_slow])
@given(st.text(alphabet="(){}[]<>;=/'\"`abc \n", max_size=60))
def test_compile_and_register_always_answers(body):
    """Arbitrary bracket-heavy text yields True or False, never a hang or raise."""
    registrar = ComponentRegistrar(settings=Settings(_env_file=None))
    source = f"function Widget() {{\n{body}\n  return <div>ok</div>;\n}}"

    result = registrar.compile_and_register(definition("Widget", source))

    assert isinstance(result, bool)
    assert result is registrar.is_known_generated("Widget")
