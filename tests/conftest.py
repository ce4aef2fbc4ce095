"""Pytest configuration and fixtures."""

import os

import pytest

from uiforge.builder import BuilderSession
from uiforge.catalog import CatalogEntry, CatalogIndex, load_catalog
from uiforge.compiler import ComponentRegistrar
from uiforge.core import GeneratedComponentDefinition
from uiforge.core.config import Settings


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["UIFORGE_LOG_LEVEL"] = "DEBUG"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings, isolated from any local .env file."""
    return Settings(_env_file=None, project_name="test-project")


@pytest.fixture
def catalog():
    """Packaged catalog."""
    return load_catalog()


def make_entry(**overrides) -> CatalogEntry:
    data = {
        "id": "card",
        "name": "Card",
        "category": "ui",
        "type": "Card",
        "description": "A simple card",
        "defaultProps": {"title": "Default"},
        "dependencies": ["pkg-a"],
        "importPath": "@/components/custom/card",
    }
    data.update(overrides)
    return CatalogEntry.model_validate(data)


@pytest.fixture
def entry_factory():
    """Builds catalog entries from a Card template with overrides."""
    return make_entry


@pytest.fixture
def small_catalog():
    """Three-entry catalog with known packages and one shipped template."""
    entries = [
        make_entry(),
        make_entry(
            id="alpha-panel",
            name="Alpha Panel",
            type="AlphaPanel",
            defaultProps={"v": 0},
            dependencies=["pkg-a", "pkg-b"],
            importPath="@/components/custom/alpha-panel",
        ),
        make_entry(
            id="beta-hero",
            name="Beta Hero",
            category="header",
            type="BetaHero",
            defaultProps={},
            dependencies=["pkg-c", "next/font/google"],
            importPath="@/components/headers/beta-hero",
            tags=["hero"],
        ),
    ]
    templates = {"alpha-panel": "export function AlphaPanel() {\n  return <div />\n}\n"}
    return CatalogIndex(entries, templates=templates, version="test")


@pytest.fixture
def registrar(settings):
    """Registrar with default capabilities."""
    return ComponentRegistrar(settings=settings)


@pytest.fixture
def session(small_catalog, settings):
    """Builder session over the small catalog."""
    return BuilderSession(catalog=small_catalog, settings=settings)


# ============================================================================
# Data Fixtures
# ============================================================================

LOGIN_FORM = """
function LoginForm({ title = "Sign in", fields = ["Email", "Password"] }) {
  const [email, setEmail] = useState("");
  return (
    <Card className="w-full max-w-sm">
      <CardHeader>
        <CardTitle>{title}</CardTitle>
      </CardHeader>
      <CardContent>
        {fields.map((field) => (
          <div key={field} className="space-y-2">
            <Label>{field}</Label>
            <Input placeholder={field.toLowerCase()} />
          </div>
        ))}
        <Button onClick={() => setEmail("")}>Log in</Button>
      </CardContent>
    </Card>
  );
}
"""

PRODUCT_CARD = """```tsx
"use client"

const formatPrice = (price) => `$${price.toFixed(2)}`;

function ProductCard({ name = "Product", price = 0, tags = [] }) {
  const onSale = price < 20;
  return (
    <div className="rounded border p-4">
      <h3>{name}</h3>
      <p className="price">{formatPrice(price)}</p>
      {onSale && <Badge>Sale</Badge>}
      <ul>
        {tags.map((tag, i) => <li key={i}>{tag}</li>)}
      </ul>
    </div>
  );
}
```"""


@pytest.fixture
def login_form_source():
    return LOGIN_FORM


@pytest.fixture
def product_card_source():
    return PRODUCT_CARD


@pytest.fixture
def login_form(login_form_source):
    """Generated definition for a login form."""
    return GeneratedComponentDefinition(
        type_id="login-form",
        category="forms",
        default_properties={"title": "Welcome back"},
        source_text=login_form_source,
    )
