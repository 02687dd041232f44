"""Base adapter for Kie.ai.

Kie.ai exposes two API patterns:
- Market API: unified endpoint for many models using /api/v1/jobs endpoints
- Dedicated API: model-specific endpoints with custom paths (Veo)
"""

from abc import abstractmethod
from typing import Any, ClassVar

from ...generation.json_extract import extract_json_object, first_string
from ...generation.models import ProviderKind
from ...generation.outcomes import StatusOutcome, StatusVocabulary, TaskHandleOutcome
from ..base import ProviderAdapter, ProviderRequestError

# Market API "state" field
MARKET_STATUS_VOCABULARY = StatusVocabulary(
    ready=frozenset({"success"}),
    pending=frozenset({"waiting", "queuing", "generating", "pending", "processing"}),
    failed=frozenset({"fail", "failed"}),
)

# Dedicated API "successFlag" field: 0 processing, 1 success, 2/3 failed
DEDICATED_STATUS_VOCABULARY = StatusVocabulary(
    ready=frozenset({"1"}),
    pending=frozenset({"0"}),
    failed=frozenset({"2", "3"}),
)


class KieAdapter(ProviderAdapter):
    """Common Kie.ai plumbing: envelope validation, task creation and Market API polling.

    Every Kie.ai response is wrapped as ``{code, msg, data}`` where code 200 means
    the call itself succeeded.
    """

    provider_kind: ClassVar[ProviderKind] = ProviderKind.KIE
    status_vocabulary: ClassVar[StatusVocabulary | None] = MARKET_STATUS_VOCABULARY
    default_base_url: ClassVar[str] = "https://api.kie.ai/api/v1"

    def build_headers(self, credential: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }

    def _validate_response(self, body: dict[str, Any]) -> None:
        """Raise when the Kie.ai envelope reports an error.

        Raises:
            ProviderRequestError: If the envelope code is not 200
        """
        code = body.get("code")
        if code not in (200, 0):
            error_msg = body.get("msg") or body.get("message") or "Unknown error"
            raise ProviderRequestError(
                f"Kie.ai API error: {error_msg}",
                code if isinstance(code, int) else None,
            )

    async def _create_task(
        self, model: str, task_input: dict[str, Any], credential: str
    ) -> TaskHandleOutcome:
        """Submit a Market API task and return its handle."""
        body = await self._request_json(
            "POST",
            f"{self.base_url}/jobs/createTask",
            credential,
            json={"model": model, "input": task_input},
        )
        self._validate_response(body)
        return self._task_handle(body)

    def _task_handle(self, body: dict[str, Any]) -> TaskHandleOutcome:
        task_id = first_string(body, "data.taskId", "taskId", "data.task_id")
        if not task_id:
            raise ProviderRequestError("Kie.ai did not return a task id")
        return TaskHandleOutcome(task_id=task_id)

    async def _record_info(self, task_id: str, credential: str) -> StatusOutcome:
        """Query the Market API once for a task's state."""
        body = await self._request_json(
            "GET",
            f"{self.base_url}/jobs/recordInfo",
            credential,
            params={"taskId": task_id},
        )
        self._validate_response(body)

        task_data = body.get("data") or {}
        state = task_data.get("state")
        result = extract_json_object(task_data.get("resultJson"), source="kie.resultJson")
        error = task_data.get("failMsg") or task_data.get("failCode")

        metadata: dict[str, Any] = {}
        if task_data.get("costTime") is not None:
            metadata["cost_time_ms"] = task_data["costTime"]

        return StatusOutcome(
            task_id=task_id,
            state=str(state) if state is not None else None,
            vocabulary=MARKET_STATUS_VOCABULARY,
            artifact_url=self._artifact_url(result, task_data),
            error_message=str(error) if error else None,
            metadata=metadata,
        )

    async def _poll(self, task_id: str, credential: str) -> StatusOutcome:
        return await self._record_info(task_id, credential)

    @abstractmethod
    def _artifact_url(
        self, result: dict[str, Any] | None, task_data: dict[str, Any]
    ) -> str | None:
        """Locate the artifact URL in a finished task's parsed ``resultJson``."""
        pass
