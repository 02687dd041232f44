"""
Black Forest Labs FLUX image generation.

Submission returns an id and a ``polling_url``; the polling URL is used as
the task handle when present so status checks hit the right region.
"""

from typing import Any, ClassVar

import httpx

from ..generation.json_extract import first_string
from ..generation.models import GenerationRequest, MediaType, ModelDescriptor, ProviderKind
from ..generation.outcomes import StatusOutcome, StatusVocabulary, TaskHandleOutcome
from .base import (
    AdapterInputError,
    ProviderAdapter,
    ProviderRequestError,
    forwarded_references,
)

BFL_STATUS_VOCABULARY = StatusVocabulary(
    ready=frozenset({"Ready"}),
    pending=frozenset({"Pending", "Processing"}),
    failed=frozenset(
        {"Error", "Failed", "Request Moderated", "Content Moderated", "Task not found"}
    ),
)


class BflImageAdapter(ProviderAdapter):
    """FLUX.1 / FLUX.1 Kontext / FLUX.2 text-to-image and image editing."""

    provider_kind: ClassVar[ProviderKind] = ProviderKind.BFL
    media_type: ClassVar[MediaType] = MediaType.IMAGE
    name: ClassVar[str] = "bfl-flux"
    description: ClassVar[str] = "Black Forest Labs: FLUX image generation"
    status_vocabulary: ClassVar[StatusVocabulary | None] = BFL_STATUS_VOCABULARY
    default_base_url: ClassVar[str] = "https://api.bfl.ai/v1"

    def build_headers(self, credential: str) -> dict[str, str]:
        return {
            "x-key": credential,
            "accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> TaskHandleOutcome:
        body: dict[str, Any] = {
            "prompt": self.resolve_prompt(request),
            "aspect_ratio": request.aspect_ratio or "1:1",
        }
        references = forwarded_references(request, descriptor)
        if references:
            body["input_image"] = references[0].data

        response = await self._request_json(
            "POST", f"{self.base_url}/{descriptor.api_model_id}", credential, json=body
        )
        task_id = first_string(response, "polling_url", "id")
        if not task_id:
            raise ProviderRequestError("Black Forest Labs did not return a task id")
        return TaskHandleOutcome(task_id=task_id)

    async def _poll(self, task_id: str, credential: str) -> StatusOutcome:
        if task_id.startswith(("https://", "http://")):
            # The key is sent along, so only BFL hosts are followed
            host = httpx.URL(task_id).host
            if host != "bfl.ai" and not host.endswith(".bfl.ai"):
                raise AdapterInputError(f"Refusing to poll non-BFL URL host '{host}'")
            body = await self._request_json("GET", task_id, credential)
        else:
            body = await self._request_json(
                "GET", f"{self.base_url}/get_result", credential, params={"id": task_id}
            )

        status = body.get("status")
        result = body.get("result") if isinstance(body.get("result"), dict) else None
        details = body.get("details") if isinstance(body.get("details"), dict) else None
        error = body.get("error") or first_string(details, "message") or status

        metadata: dict[str, Any] = {}
        if result and result.get("seed") is not None:
            metadata["seed"] = result["seed"]

        return StatusOutcome(
            task_id=task_id,
            state=status if isinstance(status, str) else None,
            vocabulary=BFL_STATUS_VOCABULARY,
            artifact_url=first_string(result, "sample"),
            error_message=f"FLUX generation failed: {error}" if error else None,
            metadata=metadata,
        )
