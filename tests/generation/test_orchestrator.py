"""
Tests for GenerationOrchestrator.
"""

import asyncio
import itertools
from unittest.mock import AsyncMock, patch

import pytest

from estudio.generation.models import (
    CreativeControls,
    ErrorKind,
    Failure,
    GenerationJob,
    MediaType,
    Pending,
    PollingPolicy,
    ProviderKind,
    Success,
)
from estudio.generation.outcomes import ArtifactOutcome, FailureOutcome, TaskHandleOutcome
from tests.stubs import (
    VIDEO_URL,
    StubAsyncVideoAdapter,
    StubSyncImageAdapter,
    build_orchestrator,
    image_request,
    video_request,
)


class TestValidation:
    """Requests rejected before any credential lookup or network call."""

    @pytest.mark.asyncio
    async def test_unknown_model_is_invalid_without_network(
        self, stub_registry, sync_adapter, async_adapter
    ):
        """Test unknown model ids never reach an adapter."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter, async_adapter)
        orchestrator.credentials = AsyncMock()

        result = await orchestrator.generate(image_request(model_id="does-not-exist"))

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert "does-not-exist" in result.message
        assert sync_adapter.submit_calls == 0
        assert async_adapter.submit_calls == 0
        orchestrator.credentials.resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_prompt_over_character_limit(self, stub_registry, sync_adapter):
        """Test prompt longer than max_characters is rejected."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        result = await orchestrator.generate(image_request(prompt="a" * 201))

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert "200" in result.message
        assert sync_adapter.submit_calls == 0

    @pytest.mark.asyncio
    async def test_oversized_brief_never_submitted(self, stub_registry, sync_adapter):
        """Test a prompt built from creative controls is held to the character limit."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)
        request = image_request(
            prompt="", creative_controls=CreativeControls(product_details="x" * 1000)
        )

        result = await orchestrator.generate(request)

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert sync_adapter.submit_calls == 0

    @pytest.mark.asyncio
    async def test_media_type_mismatch(self, stub_registry, sync_adapter):
        """Test requesting video from an image model is rejected."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        result = await orchestrator.generate(image_request(media_type=MediaType.VIDEO))

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert result.provider_kind == ProviderKind.GOOGLE

    @pytest.mark.asyncio
    async def test_duration_outside_model_range(self, stub_registry, async_adapter):
        """Test durations outside the descriptor range are rejected."""
        orchestrator = build_orchestrator(stub_registry, async_adapter)

        result = await orchestrator.generate(video_request(duration_seconds=30))

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert async_adapter.submit_calls == 0

    @pytest.mark.asyncio
    async def test_model_without_adapter(self, stub_registry, async_adapter):
        """Test a catalog model whose provider has no adapter is rejected."""
        orchestrator = build_orchestrator(stub_registry, async_adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST


class TestCredentials:
    """Credential resolution before submission."""

    @pytest.mark.asyncio
    async def test_missing_credential_never_submits(self, stub_registry, sync_adapter):
        """Test a provider without a key fails fast with an actionable message."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter, keys={})

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.MISSING_CREDENTIAL
        assert "Configure your Google AI key" in result.message
        assert result.provider_kind == ProviderKind.GOOGLE
        assert sync_adapter.submit_calls == 0

    @pytest.mark.asyncio
    async def test_credential_resolved_per_caller(self, stub_registry, sync_adapter):
        """Test the resolver receives the provider kind and caller id."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)
        orchestrator.credentials = AsyncMock()
        orchestrator.credentials.resolve.return_value = "caller-key"

        await orchestrator.generate(image_request(), caller_id="user-42")

        orchestrator.credentials.resolve.assert_awaited_once_with(ProviderKind.GOOGLE, "user-42")
        assert sync_adapter.credentials_seen == ["caller-key"]

    @pytest.mark.asyncio
    async def test_credential_kind_comes_from_registry(self, stub_registry, sync_adapter):
        """Test the registry decides which provider key a model needs."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        with patch.object(
            stub_registry, "required_credential_kind", wraps=stub_registry.required_credential_kind
        ) as required_kind:
            await orchestrator.generate(image_request())

        required_kind.assert_called_once_with("image-sync-a")


class TestSynchronousProviders:
    """Providers that answer with the artifact directly."""

    @pytest.mark.asyncio
    async def test_image_sync_scenario(self, stub_registry, sync_adapter):
        """Test the sync image scenario returns bytes with the image MIME type."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Success)
        assert result.artifact_bytes == b"\x89PNG-stub"
        assert result.mime_type == "image/png"
        assert result.provider_kind == ProviderKind.GOOGLE
        assert "task_id" not in result.metadata
        assert result.metadata["model_id"] == "image-sync-a"
        assert (result.metadata["width"], result.metadata["height"]) == (1024, 1024)

    @pytest.mark.asyncio
    async def test_exactly_one_adapter_call(self, stub_registry, sync_adapter):
        """Test synchronous generation never polls."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        await orchestrator.generate(image_request())

        assert sync_adapter.submit_calls == 1
        assert sync_adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_provider_failure_is_reported(self, stub_registry):
        """Test a submission failure carries the provider message."""
        adapter = StubSyncImageAdapter(outcome=FailureOutcome(message="quota exceeded"))
        orchestrator = build_orchestrator(stub_registry, adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.PROVIDER_ERROR
        assert result.message == "quota exceeded"
        assert adapter.submit_calls == 1

    @pytest.mark.asyncio
    async def test_empty_artifact_is_unexpected(self, stub_registry):
        """Test an answer without any artifact is not treated as success."""
        adapter = StubSyncImageAdapter(outcome=ArtifactOutcome())
        orchestrator = build_orchestrator(stub_registry, adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.UNEXPECTED_PROVIDER_STATE

    @pytest.mark.asyncio
    async def test_sync_model_returning_task_is_unexpected(self, stub_registry):
        """Test a synchronous model that hands back a task id fails cleanly."""
        adapter = StubSyncImageAdapter(outcome=TaskHandleOutcome(task_id="odd"))
        orchestrator = build_orchestrator(stub_registry, adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.UNEXPECTED_PROVIDER_STATE
        assert result.task_id == "odd"
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_adapter_exception_becomes_failure(self, stub_registry, sync_adapter):
        """Test an adapter bug is reported as a typed failure, not raised."""
        sync_adapter._submit = AsyncMock(side_effect=KeyError("candidates"))
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        result = await orchestrator.generate(image_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.UNEXPECTED_PROVIDER_STATE


class TestPolling:
    """Providers that answer with a task handle."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("processing_polls", [0, 1, 4])
    async def test_n_processing_then_completed(self, stub_registry, fast_polling, processing_polls):
        """Test N processing answers lead to exactly N+1 polls."""
        adapter = StubAsyncVideoAdapter(
            script=["processing"] * processing_polls + [("completed", VIDEO_URL)]
        )
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Success)
        assert adapter.poll_calls == processing_polls + 1
        assert adapter.submit_calls == 1

    @pytest.mark.asyncio
    async def test_video_async_scenario(self, stub_registry, fast_polling):
        """Test the async video scenario finishes after exactly three polls."""
        adapter = StubAsyncVideoAdapter(
            script=["processing", "processing", ("completed", VIDEO_URL)], task_id="t1"
        )
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Success)
        assert result.artifact_url == VIDEO_URL
        assert result.artifact_bytes is None
        assert result.mime_type == "video/mp4"
        assert result.metadata["task_id"] == "t1"
        assert adapter.poll_calls == 3
        assert adapter.polled_task_ids == ["t1", "t1", "t1"]

    @pytest.mark.asyncio
    async def test_times_out_on_attempt_budget(self, stub_registry):
        """Test endless processing stops at max_attempts with the task id."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        policy = PollingPolicy(interval_seconds=0, max_attempts=5, max_duration_seconds=3600)
        orchestrator = build_orchestrator(
            stub_registry, adapter, polling={MediaType.VIDEO: policy}
        )

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.TIMED_OUT
        assert result.task_id == "t1"
        assert adapter.poll_calls == 5

    @pytest.mark.asyncio
    async def test_times_out_on_wall_clock_budget(self, stub_registry):
        """Test endless processing stops once elapsed time reaches the budget."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        policy = PollingPolicy(interval_seconds=0, max_attempts=1000, max_duration_seconds=3)
        ticks = itertools.count(0.0, 1.0)
        orchestrator = build_orchestrator(
            stub_registry,
            adapter,
            polling={MediaType.VIDEO: policy},
            clock=lambda: next(ticks),
        )

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.TIMED_OUT
        assert result.task_id == "t1"
        assert adapter.poll_calls == 2

    @pytest.mark.asyncio
    async def test_no_poll_after_budget_spent_waiting(self, stub_registry):
        """Test a pause that outlasts the budget ends polling without another check."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        policy = PollingPolicy(interval_seconds=0.05, max_attempts=100, max_duration_seconds=0.01)
        orchestrator = build_orchestrator(stub_registry, adapter, polling={MediaType.VIDEO: policy})

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.TIMED_OUT
        assert result.task_id == "t1"
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_unrecognized_status(self, stub_registry, fast_polling):
        """Test an unknown status string is neither success nor pending."""
        adapter = StubAsyncVideoAdapter(script=["exploded"])
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.UNEXPECTED_PROVIDER_STATE
        assert "exploded" in result.message
        assert adapter.poll_calls == 1

    @pytest.mark.asyncio
    async def test_failed_status_stops_immediately(self, stub_registry, fast_polling):
        """Test a provider-reported failure ends the loop without retrying."""
        adapter = StubAsyncVideoAdapter(script=["processing", "failed", ("completed", VIDEO_URL)])
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.PROVIDER_ERROR
        assert result.message == "stub failure"
        assert result.task_id == "t1"
        assert adapter.poll_calls == 2

    @pytest.mark.asyncio
    async def test_poll_transport_failure_stops_immediately(self, stub_registry, fast_polling):
        """Test a failed status request ends the loop."""
        adapter = StubAsyncVideoAdapter(
            script=[FailureOutcome(message="HTTP 503", status_code=503), "processing"]
        )
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.PROVIDER_ERROR
        assert result.task_id == "t1"
        assert adapter.poll_calls == 1

    @pytest.mark.asyncio
    async def test_submit_failure_is_not_retried(self, stub_registry, fast_polling):
        """Test a rejected submission is reported at once and never repeated."""
        adapter = StubAsyncVideoAdapter(submit_outcome=FailureOutcome(message="insufficient credits"))
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request())

        assert isinstance(result, Failure)
        assert result.message == "insufficient credits"
        assert adapter.submit_calls == 1
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_fire_and_forget_returns_pending(self, stub_registry, fast_polling):
        """Test wait=False hands back the task id without polling."""
        adapter = StubAsyncVideoAdapter()
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)

        result = await orchestrator.generate(video_request(), wait=False)

        assert isinstance(result, Pending)
        assert result.task_id == "t1"
        assert result.provider_kind == ProviderKind.KIE
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_bounded_concurrent_polls(self, stub_registry, fast_polling):
        """Test loops beyond the concurrency bound wait their turn and still finish."""
        adapter = StubAsyncVideoAdapter(script=["processing", ("completed", VIDEO_URL)])
        orchestrator = build_orchestrator(
            stub_registry, adapter, polling=fast_polling, max_concurrent_polls=1
        )

        results = await asyncio.gather(
            orchestrator.generate(video_request()),
            orchestrator.generate(video_request()),
        )

        assert all(isinstance(r, Success) for r in results)


class TestCancellation:
    """Caller-initiated abandonment of polling."""

    @pytest.mark.asyncio
    async def test_cancel_event_already_set(self, stub_registry, fast_polling):
        """Test a cancelled caller gets Cancelled, not TimedOut, and no polls run."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        orchestrator = build_orchestrator(stub_registry, adapter, polling=fast_polling)
        cancel_event = asyncio.Event()
        cancel_event.set()

        result = await orchestrator.generate(video_request(), cancel_event=cancel_event)

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.CANCELLED
        assert result.task_id == "t1"
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_cancel_during_polling_stops_promptly(self, stub_registry):
        """Test setting the event mid-wait stops the loop before the next poll."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        policy = PollingPolicy(interval_seconds=30, max_attempts=100, max_duration_seconds=600)
        orchestrator = build_orchestrator(
            stub_registry, adapter, polling={MediaType.VIDEO: policy}
        )
        cancel_event = asyncio.Event()

        task = asyncio.create_task(
            orchestrator.generate(video_request(), cancel_event=cancel_event)
        )
        await asyncio.sleep(0.05)
        cancel_event.set()
        result = await asyncio.wait_for(task, timeout=5)

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.CANCELLED
        assert adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_task_cancellation_propagates(self, stub_registry):
        """Test cancelling the awaiting task raises CancelledError as asyncio expects."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        policy = PollingPolicy(interval_seconds=30, max_attempts=100, max_duration_seconds=600)
        orchestrator = build_orchestrator(
            stub_registry, adapter, polling={MediaType.VIDEO: policy}
        )

        task = asyncio.create_task(orchestrator.generate(video_request()))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert adapter.poll_calls == 0


class TestStatusCheck:
    """Single-shot status checks for persisted task ids."""

    @pytest.mark.asyncio
    async def test_completed_task_is_idempotent(self, stub_registry):
        """Test checking a finished task twice returns the identical payload."""
        adapter = StubAsyncVideoAdapter(script=[("completed", VIDEO_URL)])
        orchestrator = build_orchestrator(stub_registry, adapter)

        first = await orchestrator.check_status("t1", ProviderKind.KIE, MediaType.VIDEO)
        second = await orchestrator.check_status("t1", ProviderKind.KIE, MediaType.VIDEO)

        assert isinstance(first, Success)
        assert first == second
        assert first.artifact_url == VIDEO_URL
        assert adapter.poll_calls == 2
        assert adapter.submit_calls == 0

    @pytest.mark.asyncio
    async def test_processing_task_is_pending(self, stub_registry):
        """Test a task still running reports Pending after one poll."""
        adapter = StubAsyncVideoAdapter(script=["processing"])
        orchestrator = build_orchestrator(stub_registry, adapter)

        result = await orchestrator.check_status("t9", ProviderKind.KIE, MediaType.VIDEO)

        assert isinstance(result, Pending)
        assert result.task_id == "t9"
        assert adapter.poll_calls == 1

    @pytest.mark.asyncio
    async def test_resume_after_timeout(self, stub_registry):
        """Test a timed-out task id can be resumed through the status check."""
        adapter = StubAsyncVideoAdapter(script=["processing", "processing", ("completed", VIDEO_URL)])
        policy = PollingPolicy(interval_seconds=0, max_attempts=2, max_duration_seconds=60)
        orchestrator = build_orchestrator(
            stub_registry, adapter, polling={MediaType.VIDEO: policy}
        )

        timed_out = await orchestrator.generate(video_request())
        assert isinstance(timed_out, Failure)
        assert timed_out.error_kind == ErrorKind.TIMED_OUT

        resumed = await orchestrator.check_status(
            timed_out.task_id, ProviderKind.KIE, MediaType.VIDEO
        )
        assert isinstance(resumed, Success)
        assert resumed.artifact_url == VIDEO_URL

    @pytest.mark.asyncio
    async def test_missing_credential(self, stub_registry, async_adapter):
        """Test a status check without a key fails before polling."""
        orchestrator = build_orchestrator(stub_registry, async_adapter, keys={})

        result = await orchestrator.check_status("t1", ProviderKind.KIE, MediaType.VIDEO)

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.MISSING_CREDENTIAL
        assert async_adapter.poll_calls == 0

    @pytest.mark.asyncio
    async def test_synchronous_provider_has_no_status(self, stub_registry, sync_adapter):
        """Test status checks against a synchronous provider are invalid."""
        orchestrator = build_orchestrator(stub_registry, sync_adapter)

        result = await orchestrator.check_status("t1", ProviderKind.GOOGLE, MediaType.IMAGE)

        assert isinstance(result, Failure)
        assert result.error_kind == ErrorKind.INVALID_REQUEST
        assert sync_adapter.poll_calls == 0


def test_job_defaults():
    """Test a new job starts submitted with no attempts."""
    job = GenerationJob(task_id="t1", provider_kind=ProviderKind.KIE)

    assert job.attempts_made == 0
    assert job.status.value == "submitted"
    assert job.created_at.tzinfo is not None
