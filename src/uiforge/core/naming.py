"""Type id textual forms.

A component type id is entered either hyphenated (``login-form``) or in its
canonical capitalized form (``LoginForm``).
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def to_pascal_case(type_id: str) -> str:
    """Transliterate a hyphenated type id to its capitalized form.

    >>> to_pascal_case("login-form")
    'LoginForm'
    >>> to_pascal_case("ArDacityClassicNavbar")
    'ArDacityClassicNavbar'
    """
    return "".join(part[:1].upper() + part[1:] for part in type_id.strip().split("-") if part)


def to_kebab_case(name: str) -> str:
    """Hyphenate a capitalized name for file paths.

    >>> to_kebab_case("AOChatBot")
    'ao-chat-bot'
    """
    if "-" in name:
        return name.strip().lower()
    return _CAMEL_BOUNDARY.sub("-", name.strip()).lower()


def type_id_forms(type_id: str) -> tuple[str, ...]:
    """All textual forms of a type id, exact form first."""
    pascal = to_pascal_case(type_id)
    return (type_id,) if pascal == type_id else (type_id, pascal)


def is_component_name(name: str) -> bool:
    """True if ``name`` can name a markup component (identifier, capitalized)."""
    return bool(_IDENTIFIER.match(name)) and name[0].isupper()


__all__ = ["to_pascal_case", "to_kebab_case", "type_id_forms", "is_component_name"]
