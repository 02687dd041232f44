"""Voice listing for audio providers."""

from fastapi import APIRouter, Depends, HTTPException, Query

from ...adapters.base import ProviderRequestError
from ...generation.credentials import missing_credential_message
from ...generation.models import MediaType, ProviderKind, VoiceInfo
from ...generation.orchestrator import GenerationOrchestrator
from ...logging import get_logger
from ..auth import get_caller_id, get_orchestrator

logger = get_logger(__name__)

router = APIRouter()


@router.get("/voices", response_model=list[VoiceInfo])
async def list_voices(
    provider: ProviderKind = Query(ProviderKind.ELEVENLABS),
    search: str | None = Query(None),
    category: str | None = Query(None),
    caller_id: str = Depends(get_caller_id),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> list[VoiceInfo]:
    """List the voices a text-to-speech provider offers to this caller."""
    adapter = orchestrator.adapters.get(provider, MediaType.AUDIO)
    if adapter is None:
        raise HTTPException(status_code=404, detail=f"{provider.display_name} offers no voices")

    credential = await orchestrator.credentials.resolve(provider, caller_id)
    if not credential:
        raise HTTPException(status_code=400, detail=missing_credential_message(provider))

    try:
        return await adapter.list_voices(credential, search=search, category=category)
    except ProviderRequestError as e:
        logger.warning("Voice listing failed", provider=provider.value, error=e.message)
        raise HTTPException(status_code=502, detail=e.message) from e
