"""
Tests for request-scoped logging context.
"""

from estudio.logging import (
    add_request_context,
    caller_id_from_headers,
    clear_request_context,
    drop_credentials,
    get_request_id,
    new_request_id,
    set_request_context,
)


class TestRequestContext:
    """Tests for context variables and the structlog processors."""

    def teardown_method(self):
        clear_request_context()

    def test_context_added_to_events(self):
        """Test request and caller ids are attached to log events."""
        set_request_context(request_id="req-1", caller_id="caller-1")

        event = add_request_context(None, "info", {"event": "hello"})

        assert event == {"event": "hello", "request_id": "req-1", "caller_id": "caller-1"}
        assert get_request_id() == "req-1"

    def test_cleared_context(self):
        """Test nothing is attached once the context is cleared."""
        set_request_context(request_id="req-1", caller_id="caller-1")
        clear_request_context()

        assert add_request_context(None, "info", {"event": "x"}) == {"event": "x"}

    def test_generated_request_id(self):
        """Test a request id is generated and returned when none is supplied."""
        request_id = set_request_context()

        assert request_id == get_request_id()
        assert len(request_id) == 16
        assert new_request_id() != new_request_id()

    def test_credentials_redacted(self):
        """Test credential fields never reach the renderer."""
        event = drop_credentials(
            None, "info", {"event": "submit", "credential": "sk-1", "model_id": "sora-2"}
        )

        assert event == {"event": "submit", "credential": "[REDACTED]", "model_id": "sora-2"}


class TestCallerHeader:
    """Tests for caller_id_from_headers."""

    def test_reads_forwarded_header(self):
        """Test the forwarded caller header is read and stripped."""
        assert caller_id_from_headers({"x-caller-id": "  caller-9 "}) == "caller-9"

    def test_blank_or_missing(self):
        """Test blank and missing headers yield None."""
        assert caller_id_from_headers({"x-caller-id": "   "}) is None
        assert caller_id_from_headers({}) is None
