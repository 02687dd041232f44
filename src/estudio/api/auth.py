"""Caller identity and shared dependencies for API endpoints."""

from fastapi import HTTPException, Request

from ..generation.orchestrator import GenerationOrchestrator
from ..logging import caller_id_from_headers


async def get_caller_id(request: Request) -> str:
    """
    Identity of the caller, as forwarded by the authenticating proxy.

    Raises:
        HTTPException: If no caller identity was forwarded
    """
    caller_id = caller_id_from_headers(request.headers)
    if not caller_id:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller_id


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    """The orchestrator built at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Generation service is not ready")
    return orchestrator
