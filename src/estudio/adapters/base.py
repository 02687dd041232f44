"""
Base class for provider adapters.

Every adapter exposes the same two operations, ``submit`` and ``poll``, and
always answers with an ``AdapterOutcome``. Subclasses implement ``_submit``
and ``_poll``; provider HTTP failures surface there as ``ProviderRequestError``
and are converted to ``FailureOutcome`` here, at the adapter boundary.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, ClassVar, Literal

import httpx

from ..generation.json_extract import extract_json_object
from ..generation.models import (
    ErrorKind,
    GenerationRequest,
    MediaType,
    ModelDescriptor,
    ProviderKind,
    VoiceInfo,
)
from ..generation.outcomes import AdapterOutcome, FailureOutcome, StatusVocabulary
from ..generation.prompts import build_prompt
from ..logging import get_logger

logger = get_logger(__name__)


class ProviderRequestError(Exception):
    """A provider call failed; carries the provider's message when it sent one."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AdapterInputError(ValueError):
    """The request cannot be expressed in this provider's payload."""


def provider_error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response.

    Falls back to ``HTTP {status}`` when the body carries nothing usable.
    """
    body = extract_json_object(response.text, source="error_body") if response.content else None
    if body:
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str) and error:
            return error

        detail = body.get("detail")
        if isinstance(detail, dict) and isinstance(detail.get("message"), str):
            return detail["message"]
        if isinstance(detail, str) and detail:
            return detail

        for key in ("message", "msg", "errorMessage", "failMsg"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

    return f"HTTP {response.status_code}"


class ProviderAdapter(ABC):
    """
    Uniform submit/poll contract against one external generation API.

    Subclasses define the class attributes below. Asynchronous adapters also set
    ``status_vocabulary`` and implement ``_poll``.
    """

    provider_kind: ClassVar[ProviderKind]
    media_type: ClassVar[MediaType]
    name: ClassVar[str]
    description: ClassVar[str]
    status_vocabulary: ClassVar[StatusVocabulary | None] = None

    # Base URL used when none is passed to the constructor
    default_base_url: ClassVar[str] = ""

    def __init__(
        self,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ):
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self._http_client = http_client
        self.timeout = timeout

    @property
    def supports_polling(self) -> bool:
        return self.status_vocabulary is not None

    async def submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> AdapterOutcome:
        """Submit a generation job.

        Returns:
            An artifact for synchronous providers, a task handle for
            asynchronous ones, or a failure
        """
        logger.info(
            "Submitting generation",
            adapter=self.name,
            model_id=descriptor.model_id,
            api_model_id=descriptor.api_model_id,
        )
        try:
            return await self._submit(request, descriptor, credential)
        except AdapterInputError as e:
            return FailureOutcome(error_kind=ErrorKind.INVALID_REQUEST, message=str(e))
        except ProviderRequestError as e:
            logger.warning(
                "Provider rejected submission",
                adapter=self.name,
                model_id=descriptor.model_id,
                status_code=e.status_code,
                error=e.message,
            )
            return FailureOutcome(message=e.message, status_code=e.status_code)

    async def poll(self, task_id: str, credential: str) -> AdapterOutcome:
        """Query the status of a submitted task once. Safe to repeat."""
        if not self.supports_polling:
            return FailureOutcome(
                error_kind=ErrorKind.INVALID_REQUEST,
                message=f"{self.name} does not support status checks",
            )
        try:
            return await self._poll(task_id, credential)
        except AdapterInputError as e:
            return FailureOutcome(error_kind=ErrorKind.INVALID_REQUEST, message=str(e))
        except ProviderRequestError as e:
            logger.warning(
                "Provider status check failed",
                adapter=self.name,
                task_id=task_id,
                status_code=e.status_code,
                error=e.message,
            )
            return FailureOutcome(message=e.message, status_code=e.status_code)

    @abstractmethod
    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> AdapterOutcome:
        pass

    async def _poll(self, task_id: str, credential: str) -> AdapterOutcome:
        raise NotImplementedError(f"{self.name} is synchronous")

    async def list_voices(
        self,
        credential: str,
        search: str | None = None,
        category: str | None = None,
    ) -> list[VoiceInfo]:
        """List voices offered by an audio provider. Non-audio adapters have none."""
        _ = credential, search, category
        return []

    def build_headers(self, credential: str) -> dict[str, str]:
        """Default auth headers; override as needed."""
        return {"Authorization": f"Bearer {credential}"}

    def resolve_prompt(self, request: GenerationRequest) -> str:
        """Return the request prompt, building one from creative controls when empty."""
        prompt = request.prompt.strip()
        if prompt:
            return prompt
        if request.creative_controls is not None and not request.creative_controls.is_empty():
            return build_prompt(request.creative_controls, request.aspect_ratio)
        raise AdapterInputError("A prompt or creative controls are required")

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    async def _request(
        self,
        method: Literal["GET", "POST"],
        url: str,
        credential: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request with auth headers; non-2xx answers raise.

        Raises:
            ProviderRequestError: On transport failure or a non-2xx response
        """
        request_headers = self.build_headers(credential)
        if headers:
            request_headers.update(headers)

        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=request_headers,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            raise ProviderRequestError(f"{self.name} request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderRequestError(f"{self.name} request failed: {e}") from e

        if not response.is_success:
            raise ProviderRequestError(provider_error_message(response), response.status_code)

        return response

    async def _request_json(
        self,
        method: Literal["GET", "POST"],
        url: str,
        credential: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        response = await self._request(method, url, credential, **kwargs)
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderRequestError(
                f"{self.name} returned a non-JSON response", response.status_code
            ) from e
        if not isinstance(body, dict):
            raise ProviderRequestError(
                f"{self.name} returned an unexpected response body", response.status_code
            )
        return body


def forwarded_references(request: GenerationRequest, descriptor: ModelDescriptor) -> list:
    """Reference assets this model accepts, capped at its declared maximum."""
    if not descriptor.supports_reference_assets or not request.reference_assets:
        return []
    limit = descriptor.max_reference_assets or len(request.reference_assets)
    if len(request.reference_assets) > limit:
        logger.info(
            "Dropping reference assets over model limit",
            model_id=descriptor.model_id,
            supplied=len(request.reference_assets),
            forwarded=limit,
        )
    return request.reference_assets[:limit]
