"""
Per-request logging for the Estudio API.
"""

import time
from collections.abc import Callable, Mapping

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import caller_id_from_headers, clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Substrings of query parameter names whose values are never logged
SENSITIVE_PARAMS = ("key", "token", "secret", "signature", "credential", "authorization")


def sanitize_query_params(params: Mapping[str, str]) -> dict[str, str]:
    """Copy of ``params`` with provider keys and signed-URL parts redacted."""
    return {
        name: "[REDACTED]" if any(part in name.lower() for part in SENSITIVE_PARAMS) else value
        for name, value in params.items()
    }


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Binds request and caller ids, then logs each request with its latency.

    The request id is taken from ``X-Request-ID`` when the proxy sends one and
    is echoed back so callers can quote it when reporting a failed generation.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            caller_id=caller_id_from_headers(request.headers),
        )
        started = time.perf_counter()
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=sanitize_query_params(request.query_params) or None,
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - started) * 1000),
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000),
            )
            return response
        finally:
            clear_request_context()
