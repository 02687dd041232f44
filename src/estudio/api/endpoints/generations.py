"""Generation endpoints: blocking generate, single-shot status check, model catalog."""

import asyncio
import base64
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...generation.models import (
    ErrorKind,
    Failure,
    GenerationRequest,
    GenerationResult,
    MediaType,
    ModelDescriptor,
    Pending,
    ProviderKind,
)
from ...generation.orchestrator import GenerationOrchestrator
from ...logging import get_logger
from ..auth import get_caller_id, get_orchestrator

logger = get_logger(__name__)

router = APIRouter()

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.MISSING_CREDENTIAL: 400,
    ErrorKind.PROVIDER_ERROR: 502,
    ErrorKind.UNEXPECTED_PROVIDER_STATE: 502,
    ErrorKind.TIMED_OUT: 504,
    ErrorKind.CANCELLED: 499,
}

DISCONNECT_CHECK_INTERVAL = 1.0


class GenerateBody(GenerationRequest):
    wait: bool = Field(
        default=True,
        description="Poll asynchronous providers to completion; False returns the task id at once",
    )


class GenerationResponse(BaseModel):
    status: Literal["success", "failure", "pending"]
    provider_kind: ProviderKind | None = None
    artifact: str | None = Field(None, description="Base64 artifact for inline results")
    artifact_url: str | None = None
    mime_type: str | None = None
    task_id: str | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class StatusResponse(BaseModel):
    status: Literal["processing", "completed", "failed"]
    task_id: str
    artifact: str | None = None
    artifact_url: str | None = None
    mime_type: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModelInfo(BaseModel):
    model_id: str
    display_name: str
    description: str
    provider_kind: ProviderKind
    media_type: MediaType
    is_asynchronous: bool
    supports_reference_assets: bool
    supports_audio_track: bool
    supports_start_frame: bool
    max_characters: int | None
    default_duration_seconds: int | None
    min_duration_seconds: int | None
    max_duration_seconds: int | None
    default_resolution: str | None
    resolutions: list[str]
    price_hint: str | None

    @classmethod
    def from_descriptor(cls, descriptor: ModelDescriptor) -> "ModelInfo":
        return cls(
            **descriptor.model_dump(
                include=set(cls.model_fields) - {"resolutions"},
            ),
            resolutions=list(descriptor.resolutions),
        )


def _encode(data: bytes | None) -> str | None:
    return base64.b64encode(data).decode("ascii") if data is not None else None


def to_generation_response(result: GenerationResult) -> GenerationResponse:
    if isinstance(result, Pending):
        return GenerationResponse(
            status="pending", provider_kind=result.provider_kind, task_id=result.task_id
        )
    if isinstance(result, Failure):
        return GenerationResponse(
            status="failure",
            provider_kind=result.provider_kind,
            task_id=result.task_id,
            error_kind=result.error_kind,
            message=result.message,
        )
    return GenerationResponse(
        status="success",
        provider_kind=result.provider_kind,
        artifact=_encode(result.artifact_bytes),
        artifact_url=result.artifact_url,
        mime_type=result.mime_type,
        metadata=result.metadata,
    )


def to_status_response(task_id: str, result: GenerationResult) -> StatusResponse:
    if isinstance(result, Pending):
        return StatusResponse(status="processing", task_id=task_id)
    if isinstance(result, Failure):
        return StatusResponse(
            status="failed",
            task_id=task_id,
            error=result.message,
            error_kind=result.error_kind,
        )
    return StatusResponse(
        status="completed",
        task_id=task_id,
        artifact=_encode(result.artifact_bytes),
        artifact_url=result.artifact_url,
        mime_type=result.mime_type,
        metadata=result.metadata,
    )


async def _watch_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected during generation")
            cancel_event.set()
            return
        await asyncio.sleep(DISCONNECT_CHECK_INTERVAL)


@router.post("/generations", response_model=GenerationResponse)
async def generate(
    body: GenerateBody,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Generate an image, video or audio clip.

    Blocks until the artifact is ready unless ``wait`` is false. Failures are
    reported in the body with a stable ``error_kind``.
    """
    generation_request = GenerationRequest.model_validate(body.model_dump(exclude={"wait"}))

    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel_event))
    try:
        result = await orchestrator.generate(
            generation_request, caller_id, wait=body.wait, cancel_event=cancel_event
        )
    finally:
        watcher.cancel()

    response = to_generation_response(result)
    if isinstance(result, Failure):
        status_code = ERROR_STATUS_CODES[result.error_kind]
    elif isinstance(result, Pending):
        status_code = 202
    else:
        status_code = 200
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


@router.get("/generations/status", response_model=StatusResponse)
async def check_status(
    task_id: str = Query(..., min_length=1),
    provider: ProviderKind = Query(...),
    media_type: MediaType = Query(MediaType.IMAGE),
    caller_id: str = Depends(get_caller_id),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> StatusResponse:
    """Check a previously submitted task once, without waiting."""
    result = await orchestrator.check_status(task_id, provider, media_type, caller_id)
    return to_status_response(task_id, result)


@router.get("/models", response_model=list[ModelInfo])
async def list_models(
    media_type: MediaType | None = Query(None),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> list[ModelInfo]:
    """List the generation models in the catalog."""
    if media_type is None:
        descriptors = orchestrator.registry.list_all()
    else:
        descriptors = orchestrator.registry.list_by_media_type(media_type)
    return [ModelInfo.from_descriptor(d) for d in descriptors]
