"""
OpenAI image generation through the official SDK.

Text-only requests use ``images.generate``; requests carrying reference
images use ``images.edit`` with the references uploaded as files.
"""

import base64
import binascii
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, ClassVar

import openai
from openai import AsyncOpenAI

from ..generation.models import (
    GenerationRequest,
    MediaType,
    ModelDescriptor,
    ProviderKind,
    QualityTier,
)
from ..generation.outcomes import ArtifactOutcome
from .base import AdapterInputError, ProviderAdapter, ProviderRequestError, forwarded_references

SIZES: dict[str, str] = {
    "1:1": "1024x1024",
    "16:9": "1536x1024",
    "4:3": "1536x1024",
    "3:2": "1536x1024",
    "9:16": "1024x1536",
    "3:4": "1024x1536",
    "4:5": "1024x1536",
    "2:3": "1024x1536",
}

QUALITIES: dict[QualityTier, str] = {
    QualityTier.STANDARD: "medium",
    QualityTier.HD: "high",
    QualityTier.UHD_4K: "high",
}


class OpenAIImageAdapter(ProviderAdapter):
    """GPT Image models."""

    provider_kind: ClassVar[ProviderKind] = ProviderKind.OPENAI
    media_type: ClassVar[MediaType] = MediaType.IMAGE
    name: ClassVar[str] = "openai-image"
    description: ClassVar[str] = "OpenAI: GPT Image generation and editing"

    @asynccontextmanager
    async def _sdk_client(self, credential: str) -> AsyncIterator[AsyncOpenAI]:
        # Submissions are billed, so the SDK must not retry them on its own
        client = AsyncOpenAI(
            api_key=credential,
            base_url=self.base_url or None,
            http_client=self._http_client,
            timeout=self.timeout,
            max_retries=0,
        )
        if self._http_client is not None:
            yield client
        else:
            async with client:
                yield client

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> ArtifactOutcome:
        prompt = self.resolve_prompt(request)
        size = SIZES.get(request.aspect_ratio or "1:1", "1024x1024")
        params: dict[str, Any] = {
            "model": descriptor.api_model_id,
            "prompt": prompt,
            "n": 1,
            "size": size,
            "quality": QUALITIES.get(request.quality_tier, "auto"),
        }

        files = []
        for index, asset in enumerate(forwarded_references(request, descriptor)):
            try:
                files.append((f"reference-{index}", asset.decode(), asset.mime_type))
            except ValueError as e:
                raise AdapterInputError(str(e)) from e

        try:
            async with self._sdk_client(credential) as client:
                if files:
                    response = await client.images.edit(image=files, **params)
                else:
                    response = await client.images.generate(**params)
        except openai.APIStatusError as e:
            body = e.body if isinstance(e.body, dict) else {}
            message = body.get("message") or e.message or f"HTTP {e.status_code}"
            raise ProviderRequestError(message, e.status_code) from e
        except openai.APIError as e:
            raise ProviderRequestError(f"OpenAI request failed: {e.message}") from e

        if not response.data or not response.data[0].b64_json:
            return ArtifactOutcome()

        try:
            data = base64.b64decode(response.data[0].b64_json)
        except (binascii.Error, ValueError) as e:
            raise ProviderRequestError(f"OpenAI returned undecodable image data: {e}") from e

        metadata: dict[str, Any] = {"size": size}
        revised_prompt = response.data[0].revised_prompt
        if revised_prompt:
            metadata["revised_prompt"] = revised_prompt

        return ArtifactOutcome(data=data, mime_type="image/png", metadata=metadata)
