"""External package aggregation and manifest rendering."""

from collections.abc import Callable, Iterable
from typing import Any

from ..catalog import CatalogEntry
from ..core import Settings, get_logger, safe_json_dumps

logger = get_logger(__name__)

# Always present in an exported project
BASELINE_PACKAGES = frozenset({
    "next",
    "react",
    "react-dom",
    "tailwindcss",
    "class-variance-authority",
    "clsx",
    "tailwind-merge",
    "lucide-react",
    "@radix-ui/react-dialog",
    "@radix-ui/react-dropdown-menu",
    "@radix-ui/react-label",
    "@radix-ui/react-scroll-area",
    "@radix-ui/react-select",
    "@radix-ui/react-slot",
})

# Import specifiers that catalog metadata lists but npm cannot install
DENYLIST = frozenset({"next/font/google"})

PACKAGE_VERSIONS = {
    "next": "^14.0.0",
    "react": "^18",
    "react-dom": "^18",
    "tailwindcss": "^3.3.0",
    "framer-motion": "^10.16.0",
    "next-themes": "^0.2.1",
    "react-icons": "^4.12.0",
    "@permaweb/aoconnect": "^0.0.85",
    "@ar-dacity/ardacity-wallet-btn": "^0.1.0",
    "class-variance-authority": "^0.7.0",
    "clsx": "^2.0.0",
    "tailwind-merge": "^2.0.0",
    "warp-arbundles": "^1.0.4",
    "lucide-react": "^0.294.0",
    "@radix-ui/react-dialog": "^1.0.5",
    "@radix-ui/react-dropdown-menu": "^2.0.6",
    "@radix-ui/react-label": "^2.0.2",
    "@radix-ui/react-scroll-area": "^1.0.5",
    "@radix-ui/react-select": "^2.0.0",
    "@radix-ui/react-slot": "^1.0.2",
    "jszip": "^3.10.1",
}
DEFAULT_VERSION = "^1.0.0"

DEV_DEPENDENCIES = {
    "typescript": "^5",
    "@types/node": "^20",
    "@types/react": "^18",
    "@types/react-dom": "^18",
    "autoprefixer": "^10.0.1",
    "postcss": "^8",
    "eslint": "^8",
    "eslint-config-next": "14.0.0",
}

SCRIPTS = {
    "dev": "next dev",
    "build": "next build",
    "start": "next start",
    "lint": "next lint",
}


def compute_required_packages(
    type_ids: Iterable[str],
    resolve: Callable[[str], Any],
) -> frozenset[str]:
    """
    Union of the external packages needed by a set of component types.

    Only catalog entries declare packages; generated units run on the
    baseline alone. Denylisted names are dropped wherever they appear.

    Args:
        type_ids: Type ids referenced by the document (duplicates allowed)
        resolve: Maps a type id to its CatalogEntry, compiled unit, or None

    Returns:
        Package names, without baseline packages added
    """
    required: set[str] = set()
    for type_id in set(type_ids):
        resolved = resolve(type_id)
        if isinstance(resolved, CatalogEntry):
            required.update(resolved.required_packages)
    dropped = required & DENYLIST
    if dropped:
        logger.debug("denylisted_packages_dropped", packages=sorted(dropped))
    return frozenset(required - DENYLIST)


def dependency_table(packages: Iterable[str]) -> dict[str, str]:
    """Sorted ``name -> version`` table for the given packages plus the baseline."""
    names = (set(packages) | BASELINE_PACKAGES) - DENYLIST
    return {name: PACKAGE_VERSIONS.get(name, DEFAULT_VERSION) for name in sorted(names)}


def render_manifest(packages: Iterable[str], settings: Settings) -> str:
    """``package.json`` text for an exported project."""
    manifest = {
        "name": settings.project_name,
        "version": settings.project_version,
        "private": True,
        "scripts": SCRIPTS,
        "dependencies": dependency_table(packages),
        "devDependencies": DEV_DEPENDENCIES,
    }
    return safe_json_dumps(manifest, indent=2) + "\n"


__all__ = [
    "BASELINE_PACKAGES",
    "DENYLIST",
    "PACKAGE_VERSIONS",
    "DEFAULT_VERSION",
    "compute_required_packages",
    "dependency_table",
    "render_manifest",
]
