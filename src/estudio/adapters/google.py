"""
Google Gemini adapters: native image generation and text-to-speech.

Both call ``models/{model}:generateContent`` and answer synchronously with the
artifact inlined as base64 in ``candidates[].content.parts[].inlineData``.
"""

import base64
import binascii
from typing import Any, ClassVar

from ..generation.models import (
    GenerationRequest,
    MediaType,
    ModelDescriptor,
    ProviderKind,
    VoiceInfo,
)
from ..generation.outcomes import ArtifactOutcome
from ..logging import get_logger
from .base import AdapterInputError, ProviderAdapter, ProviderRequestError, forwarded_references

logger = get_logger(__name__)

# Prebuilt Gemini voices and their published character
GEMINI_VOICES: dict[str, str] = {
    "Puck": "Upbeat",
    "Charon": "Informative",
    "Kore": "Firm",
    "Fenrir": "Excitable",
    "Aoede": "Breezy",
}


class GeminiAdapter(ProviderAdapter):
    """Shared request and response handling for generateContent calls."""

    provider_kind: ClassVar[ProviderKind] = ProviderKind.GOOGLE
    default_base_url: ClassVar[str] = "https://generativelanguage.googleapis.com/v1beta"

    def build_headers(self, credential: str) -> dict[str, str]:
        return {"x-goog-api-key": credential, "Content-Type": "application/json"}

    async def _generate_content(
        self, api_model_id: str, body: dict[str, Any], credential: str
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            f"{self.base_url}/models/{api_model_id}:generateContent",
            credential,
            json=body,
        )

    def _first_inline_data(self, response: dict[str, Any]) -> tuple[bytes, str | None] | None:
        """Return the first inline artifact and its MIME type, or None."""
        for candidate in response.get("candidates") or []:
            parts = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                inline = part.get("inlineData") or part.get("inline_data")
                if not inline or not inline.get("data"):
                    continue
                try:
                    data = base64.b64decode(inline["data"])
                except (binascii.Error, ValueError) as e:
                    raise ProviderRequestError(f"Gemini returned undecodable data: {e}") from e
                return data, inline.get("mimeType") or inline.get("mime_type")
        return None

    def _refusal_reason(self, response: dict[str, Any]) -> str | None:
        """Explain why no artifact came back, when Gemini says so."""
        block_reason = (response.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            return f"Gemini blocked the prompt ({block_reason})"

        for candidate in response.get("candidates") or []:
            finish_reason = candidate.get("finishReason")
            texts = [
                part["text"]
                for part in (candidate.get("content") or {}).get("parts") or []
                if isinstance(part.get("text"), str)
            ]
            if texts:
                return " ".join(texts).strip()
            if finish_reason and finish_reason != "STOP":
                return f"Gemini stopped generating ({finish_reason})"
        return None


class GeminiImageAdapter(GeminiAdapter):
    """Gemini 2.5 Flash Image and Gemini 3 Pro Image."""

    media_type: ClassVar[MediaType] = MediaType.IMAGE
    name: ClassVar[str] = "google-gemini-image"
    description: ClassVar[str] = "Google: Gemini native image generation"

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> ArtifactOutcome:
        prompt = self.resolve_prompt(request)
        parts: list[dict[str, Any]] = [
            {"inline_data": {"mime_type": asset.mime_type, "data": asset.data}}
            for asset in forwarded_references(request, descriptor)
        ]
        parts.append({"text": prompt})

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": request.aspect_ratio or "1:1"},
            },
        }

        response = await self._generate_content(descriptor.api_model_id, body, credential)
        inline = self._first_inline_data(response)
        if inline is None:
            reason = self._refusal_reason(response)
            if reason:
                raise ProviderRequestError(reason)
            logger.warning("Gemini response carried no image", model_id=descriptor.model_id)
            return ArtifactOutcome()

        data, mime_type = inline
        return ArtifactOutcome(data=data, mime_type=mime_type or "image/png")


class GeminiSpeechAdapter(GeminiAdapter):
    """Gemini speech generation with prebuilt voices."""

    media_type: ClassVar[MediaType] = MediaType.AUDIO
    name: ClassVar[str] = "google-gemini-tts"
    description: ClassVar[str] = "Google: Gemini text-to-speech"

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> ArtifactOutcome:
        text = request.prompt.strip()
        if not text:
            raise AdapterInputError("Text to synthesize is required")

        voice = request.voice_id or descriptor.default_voice_id or "Kore"
        if voice not in GEMINI_VOICES:
            raise AdapterInputError(
                f"Unknown Gemini voice '{voice}'. Available: {', '.join(GEMINI_VOICES)}"
            )

        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
                    "languageCode": request.language_code
                    or descriptor.default_params.get("default_language_code", "es-MX"),
                },
            },
        }

        response = await self._generate_content(descriptor.api_model_id, body, credential)
        inline = self._first_inline_data(response)
        if inline is None:
            reason = self._refusal_reason(response)
            if reason:
                raise ProviderRequestError(reason)
            return ArtifactOutcome()

        data, mime_type = inline
        return ArtifactOutcome(
            data=data,
            mime_type=mime_type or "audio/wav",
            metadata={"voice_id": voice, "characters": len(text)},
        )

    async def list_voices(
        self,
        credential: str,
        search: str | None = None,
        category: str | None = None,
    ) -> list[VoiceInfo]:
        _ = credential, category
        voices = [
            VoiceInfo(
                voice_id=name,
                name=name,
                provider_kind=self.provider_kind,
                category="premade",
                description=character,
            )
            for name, character in GEMINI_VOICES.items()
        ]
        if search:
            needle = search.lower()
            voices = [v for v in voices if needle in v.name.lower()]
        return voices
