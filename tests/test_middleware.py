"""
Tests for request logging middleware.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from estudio.logging import get_request_id
from estudio.middleware import LoggingContextMiddleware, sanitize_query_params


class TestSanitizeQueryParams:
    """Tests for sanitize_query_params."""

    def test_redacts_sensitive_keys(self):
        """Test secrets are redacted while ordinary params are kept."""
        params = {
            "task_id": "t1",
            "provider": "kie",
            "api_key": "sk-123",
            "x-goog-api-key": "g-1",
            "X-Amz-Signature": "abc",
            "Authorization": "Bearer x",
        }

        sanitized = sanitize_query_params(params)

        assert sanitized["task_id"] == "t1"
        assert sanitized["provider"] == "kie"
        assert sanitized["api_key"] == "[REDACTED]"
        assert sanitized["x-goog-api-key"] == "[REDACTED]"
        assert sanitized["X-Amz-Signature"] == "[REDACTED]"
        assert sanitized["Authorization"] == "[REDACTED]"


class TestLoggingContextMiddleware:
    """Tests for request id handling."""

    def setup_method(self):
        app = FastAPI()
        app.add_middleware(LoggingContextMiddleware)

        @app.get("/echo")
        async def echo() -> dict:
            return {"request_id": get_request_id()}

        self.client = TestClient(app)

    def test_forwarded_request_id_is_echoed(self):
        """Test an incoming request id is bound for the handler and returned."""
        response = self.client.get("/echo", headers={"X-Request-ID": "req-42"})

        assert response.json() == {"request_id": "req-42"}
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated(self):
        """Test requests without an id receive a generated one."""
        response = self.client.get("/echo")

        assert response.headers["X-Request-ID"] == response.json()["request_id"]
        assert len(response.headers["X-Request-ID"]) == 16
