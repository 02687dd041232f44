"""
ElevenLabs text-to-speech.

The synthesis endpoint answers with raw audio bytes; the character count
billed for the request comes back in a response header.
"""

from typing import Any, ClassVar

from ..generation.models import (
    GenerationRequest,
    MediaType,
    ModelDescriptor,
    ProviderKind,
    VoiceInfo,
)
from ..generation.outcomes import ArtifactOutcome
from .base import AdapterInputError, ProviderAdapter

OUTPUT_FORMAT = "mp3_44100_128"


class ElevenLabsAudioAdapter(ProviderAdapter):
    """Multilingual v2, Flash v2.5 and Turbo v2.5 voices."""

    provider_kind: ClassVar[ProviderKind] = ProviderKind.ELEVENLABS
    media_type: ClassVar[MediaType] = MediaType.AUDIO
    name: ClassVar[str] = "elevenlabs-tts"
    description: ClassVar[str] = "ElevenLabs: text-to-speech"
    default_base_url: ClassVar[str] = "https://api.elevenlabs.io/v1"

    def build_headers(self, credential: str) -> dict[str, str]:
        return {"xi-api-key": credential}

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> ArtifactOutcome:
        text = request.prompt.strip()
        if not text:
            raise AdapterInputError("Text to synthesize is required")
        if not request.voice_id:
            raise AdapterInputError("A voice id is required for ElevenLabs")

        body: dict[str, Any] = {
            "text": text,
            "model_id": descriptor.api_model_id,
            "voice_settings": {
                "stability": request.stability,
                "similarity_boost": request.similarity_boost,
                "style": 0,
                "use_speaker_boost": True,
                "speed": request.speed,
            },
        }
        if request.language_code:
            body["language_code"] = request.language_code

        response = await self._request(
            "POST",
            f"{self.base_url}/text-to-speech/{request.voice_id}",
            credential,
            json=body,
            params={"output_format": OUTPUT_FORMAT},
            headers={"Accept": "audio/mpeg", "Content-Type": "application/json"},
        )

        metadata: dict[str, Any] = {"voice_id": request.voice_id}
        character_count = response.headers.get("character-count")
        if character_count and character_count.isdigit():
            metadata["character_count"] = int(character_count)

        content_type = response.headers.get("content-type", "audio/mpeg").split(";")[0]
        return ArtifactOutcome(
            data=response.content,
            mime_type=content_type or "audio/mpeg",
            metadata=metadata,
        )

    async def list_voices(
        self,
        credential: str,
        search: str | None = None,
        category: str | None = None,
    ) -> list[VoiceInfo]:
        """Fetch the account's voices.

        Raises:
            ProviderRequestError: If ElevenLabs rejects the request
        """
        params: dict[str, Any] = {"page_size": 100}
        if search:
            params["search"] = search
        if category:
            params["category"] = category

        body = await self._request_json(
            "GET", f"{self.base_url}/voices", credential, params=params
        )
        voices = []
        for voice in body.get("voices") or []:
            if not voice.get("voice_id"):
                continue
            labels = voice.get("labels") or {}
            voices.append(
                VoiceInfo(
                    voice_id=voice["voice_id"],
                    name=voice.get("name") or voice["voice_id"],
                    provider_kind=self.provider_kind,
                    category=voice.get("category"),
                    description=voice.get("description"),
                    preview_url=voice.get("preview_url"),
                    labels={str(k): str(v) for k, v in labels.items() if v is not None},
                )
            )
        return voices
