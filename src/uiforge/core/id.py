"""ID Generation System.

ULID-based ids for the builder.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrappers for different ID categories
- Prefixed: Type-specific prefixes for debugging (inst_*, req_*, ...)
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

InstanceID = NewType("InstanceID", str)
"""Placed component instance identifier"""

RequestID = NewType("RequestID", str)
"""Generative-service request identifier"""

SessionID = NewType("SessionID", str)
"""Editing session identifier"""

# ============================================================================
# ID Prefixes (for debugging and type identification)
# ============================================================================


class Prefix:
    """ID prefix constants."""

    INSTANCE = "inst"
    REQUEST = "req"
    SESSION = "sess"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator; ids sort by creation time."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Stateless; safe to share between sessions
_generator = Generator()

# ============================================================================
# Typed ID Generators
# ============================================================================


def new_instance_id() -> InstanceID:
    """Generate new instance ID."""
    return InstanceID(_generator.generate_with_prefix(Prefix.INSTANCE))


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(_generator.generate_with_prefix(Prefix.REQUEST))


def new_session_id() -> SessionID:
    """Generate new session ID."""
    return SessionID(_generator.generate_with_prefix(Prefix.SESSION))


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID."""
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str
        if len(ulid_part) != 26:
            return False
        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_prefix(id_str: str) -> str | None:
    """Extract prefix from prefixed ID, or None if unprefixed."""
    parts = id_str.split("_")
    return parts[0] if len(parts) == 2 else None


__all__ = [
    "InstanceID",
    "RequestID",
    "SessionID",
    "Prefix",
    "new_instance_id",
    "new_request_id",
    "new_session_id",
    "is_valid",
    "extract_prefix",
]
