"""Fixed project scaffold and the generated layout, entry page and README."""

from collections.abc import Iterable, Sequence
from functools import lru_cache
from importlib import resources

from ..catalog.models import import_path_to_file
from ..compiler import Capabilities
from ..core import Settings
from .serializer import quote_string

DATA_PACKAGE = "uiforge.export"

# Output path -> packaged resource under project_files/
STATIC_FILES = {
    "next.config.mjs": "next.config.mjs",
    "tailwind.config.ts": "tailwind.config.ts",
    "tsconfig.json": "tsconfig.json",
    "postcss.config.cjs": "postcss.config.cjs",
    "app/globals.css": "globals.css",
    "lib/utils.ts": "utils.ts",
    "types/ao.d.ts": "ao.d.ts",
    ".env.example": "env.example",
}

ENTRY_POINT = "app/page.tsx"
LAYOUT = "app/layout.tsx"
README = "README.md"
MANIFEST = "package.json"

MARKUP_INDENT = " " * 6


@lru_cache(maxsize=None)
def _resource(*parts: str) -> str:
    resource = resources.files(DATA_PACKAGE).joinpath("project_files", *parts)
    return resource.read_text(encoding="utf-8")


def static_files(capabilities: Capabilities) -> dict[str, str]:
    """
    Scaffold files included in every export.

    The UI atom sources shipped are the ones exposed to generated
    components as capabilities; atom modules without a packaged source
    are left for the caller to supply.
    """
    files = {path: _resource(name) for path, name in STATIC_FILES.items()}
    for module in sorted({atom.module for atom in capabilities.atoms.values()}):
        path = import_path_to_file(module)
        name = path.rsplit("/", 1)[-1]
        if resources.files(DATA_PACKAGE).joinpath("project_files", "ui", name).is_file():
            files[path] = _resource("ui", name)
    return files


def render_layout(settings: Settings) -> str:
    return f"""import type {{ Metadata }} from 'next'
import {{ Inter }} from 'next/font/google'
import './globals.css'

const inter = Inter({{ subsets: ['latin'] }})

export const metadata: Metadata = {{
  title: {quote_string(settings.project_name)},
  description: 'Built with uiforge',
}}

export default function RootLayout({{
  children,
}}: {{
  children: React.ReactNode
}}) {{
  return (
    <html lang="en">
      <body className={{inter.className}}>{{children}}</body>
    </html>
  )
}}
"""


def render_page(imports: Iterable[str], markup: Sequence[str]) -> str:
    """Entry point: one markup line per instance, in document order."""
    import_block = "\n".join(imports)
    body = "\n".join(MARKUP_INDENT + line for line in markup)
    return f""""use client"

{import_block}

export default function Home() {{
  return (
    <main className="min-h-screen">
{body}
    </main>
  )
}}
"""


def render_readme(settings: Settings, components: Iterable[str]) -> str:
    component_list = "\n".join(f"- {name}" for name in components) or "- (none)"
    return f"""# {settings.project_name}

This project was generated by uiforge from a component canvas.

## Components Used

{component_list}

## Getting Started

First, install the dependencies:

```bash
npm install
```

Then, run the development server:

```bash
npm run dev
```

Open [http://localhost:3000](http://localhost:3000) with your browser to see the result.

## Environment Variables

Copy `.env.example` to `.env.local` and fill in your environment variables:

```bash
cp .env.example .env.local
```
"""


__all__ = [
    "STATIC_FILES",
    "ENTRY_POINT",
    "LAYOUT",
    "README",
    "MANIFEST",
    "static_files",
    "render_layout",
    "render_page",
    "render_readme",
]
