"""
Generation orchestrator.

Runs one request through validation, credential lookup and submission and,
for providers that answer with a task handle, owns the polling loop until the
task completes, fails, exhausts its budget or the caller gives up.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager

import httpx

from ..adapters.base import ProviderAdapter
from ..adapters.registry import AdapterRegistry, create_adapter_registry
from ..config import Settings
from ..logging import get_logger
from .credentials import (
    CredentialResolver,
    StaticCredentialResolver,
    missing_credential_message,
)
from .models import (
    ErrorKind,
    Failure,
    GenerationJob,
    GenerationRequest,
    GenerationResult,
    JobStatus,
    MediaType,
    ModelDescriptor,
    Pending,
    PollingPolicy,
    ProviderKind,
    Success,
)
from .normalizer import normalize
from .outcomes import AdapterOutcome, FailureOutcome
from .prompts import dimensions_for
from .registry import ModelNotFoundError, ModelRegistry, model_registry
from .validation import validate_request

logger = get_logger(__name__)


class GenerationOrchestrator:
    """
    Entry point for generating images, video and audio.

    All collaborators are passed in at construction so tests can supply stub
    adapters, credentials and clocks without touching the environment.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        adapters: AdapterRegistry,
        credentials: CredentialResolver,
        polling: Mapping[MediaType, PollingPolicy] | None = None,
        max_concurrent_polls: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry
        self.adapters = adapters
        self.credentials = credentials
        self.polling = dict(polling or {})
        self._clock = clock
        self._poll_slots = asyncio.Semaphore(max_concurrent_polls) if max_concurrent_polls else None

    def policy_for(self, media_type: MediaType) -> PollingPolicy:
        return self.polling.get(media_type) or PollingPolicy()

    async def generate(
        self,
        request: GenerationRequest,
        caller_id: str | None = None,
        *,
        wait: bool = True,
        cancel_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        """
        Generate one artifact.

        Args:
            request: What to generate and with which model
            caller_id: Identity whose provider credentials are used
            wait: When False, return ``Pending`` as soon as an asynchronous
                provider accepts the job instead of polling it
            cancel_event: Set by the caller to abandon polling

        Returns:
            ``Success`` or ``Failure``; ``Pending`` only when ``wait`` is False
        """
        log = logger.bind(model_id=request.model_id, media_type=request.media_type.value)

        try:
            descriptor = self.registry.resolve(request.model_id)
        except ModelNotFoundError as e:
            log.info("Rejected request for unknown model")
            return Failure(error_kind=ErrorKind.INVALID_REQUEST, message=str(e))

        provider_kind = descriptor.provider_kind
        problem = validate_request(request, descriptor)
        if problem:
            log.info("Rejected invalid request", reason=problem)
            return Failure(
                error_kind=ErrorKind.INVALID_REQUEST, message=problem, provider_kind=provider_kind
            )

        adapter = self.adapters.for_descriptor(descriptor)
        if adapter is None:
            log.error("No adapter registered for model", provider=provider_kind.value)
            return Failure(
                error_kind=ErrorKind.INVALID_REQUEST,
                message=f"Model '{descriptor.model_id}' is not served by any configured provider",
                provider_kind=provider_kind,
            )

        credential_kind = self.registry.required_credential_kind(descriptor.model_id)
        credential = await self.credentials.resolve(credential_kind, caller_id)
        if not credential:
            log.info("No credential configured", provider=credential_kind.value)
            return Failure(
                error_kind=ErrorKind.MISSING_CREDENTIAL,
                message=missing_credential_message(credential_kind),
                provider_kind=provider_kind,
            )

        outcome = await self._call_adapter(adapter, "submit", request, descriptor, credential)
        result = normalize(outcome, provider_kind, descriptor.media_type)

        if not isinstance(result, Pending):
            if isinstance(result, Failure):
                log.warning("Generation failed", error_kind=result.error_kind.value, error=result.message)
            else:
                log.info("Generation completed synchronously")
            return self._decorate(result, request, descriptor)

        if not descriptor.is_asynchronous or not adapter.supports_polling:
            log.warning("Synchronous provider returned a task handle", task_id=result.task_id)
            return Failure(
                error_kind=ErrorKind.UNEXPECTED_PROVIDER_STATE,
                message=f"{provider_kind.display_name} returned a task for a synchronous model",
                provider_kind=provider_kind,
                task_id=result.task_id,
            )

        log.info("Task submitted", task_id=result.task_id)
        if not wait:
            return result

        job = GenerationJob(task_id=result.task_id, provider_kind=provider_kind)
        final = await self._poll_until_done(
            adapter, job, credential, self.policy_for(descriptor.media_type), cancel_event
        )
        return self._decorate(final, request, descriptor)

    async def check_status(
        self,
        task_id: str,
        provider_kind: ProviderKind,
        media_type: MediaType,
        caller_id: str | None = None,
    ) -> GenerationResult:
        """
        Poll a previously submitted task exactly once.

        Returns:
            ``Pending`` while the provider is still working, otherwise the
            terminal ``Success`` or ``Failure``
        """
        task_id = task_id.strip()
        if not task_id:
            return Failure(
                error_kind=ErrorKind.INVALID_REQUEST,
                message="A task id is required",
                provider_kind=provider_kind,
            )

        adapter = self.adapters.get(provider_kind, media_type)
        if adapter is None or not adapter.supports_polling:
            return Failure(
                error_kind=ErrorKind.INVALID_REQUEST,
                message=(
                    f"{provider_kind.display_name} has no status checks for "
                    f"{media_type.value} generation"
                ),
                provider_kind=provider_kind,
            )

        credential = await self.credentials.resolve(provider_kind, caller_id)
        if not credential:
            return Failure(
                error_kind=ErrorKind.MISSING_CREDENTIAL,
                message=missing_credential_message(provider_kind),
                provider_kind=provider_kind,
            )

        outcome = await self._call_adapter(adapter, "poll", task_id, credential)
        result = normalize(outcome, provider_kind, media_type)
        if isinstance(result, Failure) and result.task_id is None:
            result = result.model_copy(update={"task_id": task_id})
        return result

    async def _poll_until_done(
        self,
        adapter: ProviderAdapter,
        job: GenerationJob,
        credential: str,
        policy: PollingPolicy,
        cancel_event: asyncio.Event | None,
    ) -> GenerationResult:
        log = logger.bind(task_id=job.task_id, provider=job.provider_kind.value)

        async with self._poll_slot():
            started = self._clock()
            job.status = JobStatus.POLLING
            try:
                while True:
                    if job.attempts_made >= policy.max_attempts:
                        return self._timed_out(job, self._clock() - started, log)

                    if await self._pause(policy.interval_seconds, cancel_event):
                        job.status = JobStatus.FAILED
                        log.info("Polling cancelled by caller", attempts=job.attempts_made)
                        return Failure(
                            error_kind=ErrorKind.CANCELLED,
                            message="Generation abandoned before completion",
                            provider_kind=job.provider_kind,
                            task_id=job.task_id,
                        )

                    # The pause may have consumed the rest of the budget
                    elapsed = self._clock() - started
                    if elapsed >= policy.max_duration_seconds:
                        return self._timed_out(job, elapsed, log)

                    outcome = await self._call_adapter(adapter, "poll", job.task_id, credential)
                    job.attempts_made += 1
                    result = normalize(outcome, job.provider_kind, adapter.media_type)

                    if isinstance(result, Pending):
                        log.debug("Task still processing", attempt=job.attempts_made)
                        continue

                    if isinstance(result, Success):
                        job.status = JobStatus.COMPLETED
                        log.info("Task completed", attempts=job.attempts_made)
                        return result

                    job.status = JobStatus.FAILED
                    log.warning(
                        "Task failed",
                        attempts=job.attempts_made,
                        error_kind=result.error_kind.value,
                        error=result.message,
                    )
                    if result.task_id is None:
                        result = result.model_copy(update={"task_id": job.task_id})
                    return result
            except asyncio.CancelledError:
                log.info("Polling task cancelled", attempts=job.attempts_made)
                raise

    def _timed_out(self, job: GenerationJob, elapsed: float, log) -> Failure:
        job.status = JobStatus.TIMED_OUT
        log.warning("Polling budget exhausted", attempts=job.attempts_made, elapsed=elapsed)
        return Failure(
            error_kind=ErrorKind.TIMED_OUT,
            message=(
                f"Task still processing after {job.attempts_made} checks "
                f"over {elapsed:.0f}s; check its status later"
            ),
            provider_kind=job.provider_kind,
            task_id=job.task_id,
        )

    async def _pause(self, seconds: float, cancel_event: asyncio.Event | None) -> bool:
        """Sleep between polls. Returns True when the caller cancelled."""
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True

    @asynccontextmanager
    async def _poll_slot(self) -> AsyncIterator[None]:
        if self._poll_slots is None:
            yield
        else:
            async with self._poll_slots:
                yield

    async def _call_adapter(self, adapter: ProviderAdapter, operation: str, *args) -> AdapterOutcome:
        """Invoke ``submit`` or ``poll`` so that adapter bugs become typed failures."""
        try:
            return await getattr(adapter, operation)(*args)
        except Exception as e:
            logger.exception("Adapter raised unexpectedly", adapter=adapter.name, operation=operation)
            return FailureOutcome(
                error_kind=ErrorKind.UNEXPECTED_PROVIDER_STATE,
                message=f"{adapter.name} {operation} failed: {e}",
            )

    def _decorate(
        self,
        result: GenerationResult,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
    ) -> GenerationResult:
        """Attach model details to successful results."""
        if not isinstance(result, Success):
            return result

        metadata = {"model_id": descriptor.model_id, **result.metadata}
        if descriptor.media_type == MediaType.IMAGE:
            dimensions = dimensions_for(request.aspect_ratio)
            if dimensions:
                metadata.setdefault("width", dimensions[0])
                metadata.setdefault("height", dimensions[1])
        return result.model_copy(update={"metadata": metadata})


def create_orchestrator(
    settings: Settings,
    credentials: CredentialResolver | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> GenerationOrchestrator:
    """Wire the default catalog and built-in adapters from settings.

    Args:
        settings: Application settings (endpoints, polling budgets, keys)
        credentials: Resolver for per-caller keys; defaults to the keys in settings
        http_client: Shared HTTP client for all adapters
    """
    return GenerationOrchestrator(
        registry=model_registry,
        adapters=create_adapter_registry(settings, http_client),
        credentials=credentials or StaticCredentialResolver(settings.provider_api_keys),
        polling=settings.polling_policies(),
        max_concurrent_polls=settings.max_concurrent_polls,
    )
