"""Tests for log context binding."""

import structlog

from uiforge.core import LogContext


class TestLogContext:
    """Test contextvar binding around session work."""

    def setup_method(self):
        structlog.contextvars.clear_contextvars()

    def test_binds_and_clears(self):
        """Fields are visible inside the block only."""
        with LogContext(session_id="sess_a"):
            assert structlog.contextvars.get_contextvars() == {"session_id": "sess_a"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_nested_restores_outer(self):
        """Leaving an inner block restores the outer binding of the same key."""
        with LogContext(session_id="sess_outer"):
            with LogContext(session_id="sess_inner", request_id="req_1"):
                assert structlog.contextvars.get_contextvars() == {
                    "session_id": "sess_inner",
                    "request_id": "req_1",
                }
            assert structlog.contextvars.get_contextvars() == {"session_id": "sess_outer"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_restores_after_error(self):
        """An exception inside the block still restores the context."""
        try:
            with LogContext(session_id="sess_outer"):
                with LogContext(session_id="sess_inner"):
                    raise ValueError("boom")
        except ValueError:
            pass
        assert structlog.contextvars.get_contextvars() == {}
