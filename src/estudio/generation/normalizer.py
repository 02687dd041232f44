"""
Maps adapter outcomes onto the canonical ``GenerationResult`` variants.
"""

from ..logging import get_logger
from .models import (
    DEFAULT_MIME_TYPES,
    ErrorKind,
    Failure,
    GenerationResult,
    MediaType,
    Pending,
    ProviderKind,
    Success,
)
from .outcomes import (
    AdapterOutcome,
    ArtifactOutcome,
    FailureOutcome,
    StateClass,
    StatusOutcome,
    TaskHandleOutcome,
)

logger = get_logger(__name__)


def normalize(
    outcome: AdapterOutcome,
    provider_kind: ProviderKind,
    media_type: MediaType,
) -> GenerationResult:
    """Convert one adapter outcome into a ``Success``, ``Pending`` or ``Failure``.

    Args:
        outcome: What the adapter returned from ``submit`` or ``poll``
        provider_kind: Provider that produced the outcome
        media_type: Media type requested, used for the default MIME type

    Returns:
        The normalized result; never raises for provider-originated data
    """
    if isinstance(outcome, ArtifactOutcome):
        return _success(
            provider_kind,
            media_type,
            data=outcome.data,
            url=outcome.url,
            mime_type=outcome.mime_type,
            metadata=outcome.metadata,
            task_id=None,
        )

    if isinstance(outcome, TaskHandleOutcome):
        return Pending(task_id=outcome.task_id, provider_kind=provider_kind)

    if isinstance(outcome, FailureOutcome):
        return Failure(
            error_kind=outcome.error_kind,
            message=outcome.message,
            provider_kind=provider_kind,
        )

    if isinstance(outcome, StatusOutcome):
        return _normalize_status(outcome, provider_kind, media_type)

    logger.error("Adapter returned an unknown outcome type", type=type(outcome).__name__)
    return Failure(
        error_kind=ErrorKind.UNEXPECTED_PROVIDER_STATE,
        message=f"Unrecognized adapter outcome {type(outcome).__name__}",
        provider_kind=provider_kind,
    )


def _normalize_status(
    outcome: StatusOutcome,
    provider_kind: ProviderKind,
    media_type: MediaType,
) -> GenerationResult:
    state_class = outcome.vocabulary.classify(outcome.state)

    if state_class is StateClass.PENDING:
        return Pending(task_id=outcome.task_id, provider_kind=provider_kind)

    if state_class is StateClass.FAILED:
        return Failure(
            error_kind=ErrorKind.PROVIDER_ERROR,
            message=outcome.error_message or f"Generation failed ({outcome.state})",
            provider_kind=provider_kind,
            task_id=outcome.task_id,
        )

    if state_class is StateClass.READY:
        return _success(
            provider_kind,
            media_type,
            data=outcome.artifact_data,
            url=outcome.artifact_url,
            mime_type=outcome.mime_type,
            metadata=outcome.metadata,
            task_id=outcome.task_id,
        )

    logger.warning(
        "Unexpected provider state",
        provider=provider_kind.value,
        task_id=outcome.task_id,
        state=outcome.state,
    )
    return Failure(
        error_kind=ErrorKind.UNEXPECTED_PROVIDER_STATE,
        message=f"Unrecognized status '{outcome.state}' from {provider_kind.display_name}",
        provider_kind=provider_kind,
        task_id=outcome.task_id,
    )


def _success(
    provider_kind: ProviderKind,
    media_type: MediaType,
    *,
    data: bytes | None,
    url: str | None,
    mime_type: str | None,
    metadata: dict,
    task_id: str | None,
) -> GenerationResult:
    if data is None and not url:
        logger.warning(
            "Provider reported completion without an artifact",
            provider=provider_kind.value,
            task_id=task_id,
        )
        return Failure(
            error_kind=ErrorKind.UNEXPECTED_PROVIDER_STATE,
            message=f"{provider_kind.display_name} reported completion without an artifact",
            provider_kind=provider_kind,
            task_id=task_id,
        )

    result_metadata = dict(metadata)
    if task_id:
        result_metadata.setdefault("task_id", task_id)

    return Success(
        artifact_bytes=data,
        artifact_url=url,
        mime_type=mime_type or DEFAULT_MIME_TYPES[media_type],
        provider_kind=provider_kind,
        metadata=result_metadata,
    )
