"""Tests for ID generation system."""

from uiforge.core.id import (
    Prefix,
    extract_prefix,
    is_valid,
    new_instance_id,
    new_request_id,
    new_session_id,
)


class TestTypedGeneration:
    """Test typed ID generation."""

    def test_instance_id_format(self):
        """Instance IDs should have correct prefix."""
        id_str = new_instance_id()
        assert id_str.startswith("inst_")
        assert extract_prefix(id_str) == Prefix.INSTANCE
        assert is_valid(id_str)

    def test_request_id_format(self):
        """Request IDs should have correct prefix."""
        id_str = new_request_id()
        assert extract_prefix(id_str) == Prefix.REQUEST
        assert is_valid(id_str)

    def test_session_id_format(self):
        """Session IDs should have correct prefix."""
        assert extract_prefix(new_session_id()) == Prefix.SESSION

    def test_ids_unique(self):
        """Generated IDs never repeat."""
        ids = {new_instance_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestParsing:
    """Test validation and parsing."""

    def test_invalid_ids(self):
        """Malformed IDs are rejected."""
        assert not is_valid("")
        assert not is_valid("inst_short")
        assert not is_valid("not-a-ulid-at-all-0000000000")

    def test_unprefixed(self):
        """Raw ULIDs have no prefix."""
        raw = new_instance_id().split("_")[1]
        assert is_valid(raw)
        assert extract_prefix(raw) is None

    def test_prefix_mismatch(self):
        """A valid id of another kind keeps its own prefix."""
        session_id = new_session_id()
        assert is_valid(session_id)
        assert extract_prefix(session_id) != Prefix.REQUEST
