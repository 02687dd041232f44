"""
Data model shared by the registry, adapters, normalizer and orchestrator.
"""

import base64
import binascii
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class ProviderKind(str, Enum):
    """Backend providers. Each one is also the kind of credential it needs."""

    GOOGLE = "google"
    OPENAI = "openai"
    KIE = "kie"
    BFL = "bfl"
    ELEVENLABS = "elevenlabs"

    @property
    def credential_kind(self) -> str:
        return f"{self.value}_api_key"

    @property
    def display_name(self) -> str:
        return _PROVIDER_DISPLAY_NAMES[self]


_PROVIDER_DISPLAY_NAMES = {
    ProviderKind.GOOGLE: "Google AI",
    ProviderKind.OPENAI: "OpenAI",
    ProviderKind.KIE: "Kie.ai",
    ProviderKind.BFL: "Black Forest Labs",
    ProviderKind.ELEVENLABS: "ElevenLabs",
}


class ErrorKind(str, Enum):
    """Stable error kinds surfaced to callers."""

    INVALID_REQUEST = "invalid_request"
    MISSING_CREDENTIAL = "missing_credential"
    PROVIDER_ERROR = "provider_error"
    UNEXPECTED_PROVIDER_STATE = "unexpected_provider_state"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class JobStatus(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class QualityTier(str, Enum):
    STANDARD = "standard"
    HD = "hd"
    UHD_4K = "4k"


DEFAULT_MIME_TYPES: dict[MediaType, str] = {
    MediaType.IMAGE: "image/png",
    MediaType.VIDEO: "video/mp4",
    MediaType.AUDIO: "audio/mpeg",
}


class ModelDescriptor(BaseModel):
    """Catalog entry describing one generation model and what it accepts."""

    model_config = ConfigDict(frozen=True)

    model_id: str
    provider_kind: ProviderKind
    media_type: MediaType
    api_model_id: str
    display_name: str
    description: str = ""

    supports_reference_assets: bool = False
    is_asynchronous: bool = False
    supports_audio_track: bool = False
    supports_start_frame: bool = False

    max_characters: int | None = None
    max_reference_assets: int = 0
    default_duration_seconds: int | None = None
    min_duration_seconds: int | None = None
    max_duration_seconds: int | None = None
    default_resolution: str | None = None
    resolutions: tuple[str, ...] = ()
    default_voice_id: str | None = None
    price_hint: str | None = None

    default_params: dict[str, Any] = Field(default_factory=dict)


class ReferenceAsset(BaseModel):
    """Inline reference asset supplied by the caller as base64 plus MIME type."""

    data: str
    mime_type: str = "image/png"

    @field_validator("data")
    @classmethod
    def strip_data_url_prefix(cls, value: str) -> str:
        # Accept "data:image/png;base64,...." as well as the bare payload
        if value.startswith("data:") and "," in value:
            return value.split(",", 1)[1]
        return value

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def decode(self) -> bytes:
        """Decode the base64 payload.

        Raises:
            ValueError: If the payload is not valid base64
        """
        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Reference asset is not valid base64: {e}") from e


class CreativeControls(BaseModel):
    """Structured creative brief used to build a prompt when none is given."""

    product_name: str | None = None
    product_details: str | None = None
    sales_angle: str | None = None
    target_avatar: str | None = None
    additional_instructions: str | None = None
    price_after: str | None = None
    price_before: str | None = None
    price_combo_2: str | None = None
    price_combo_3: str | None = None
    currency_symbol: str = "$"
    target_country: str | None = None

    def is_empty(self) -> bool:
        return not any(
            (
                self.product_name,
                self.product_details,
                self.sales_angle,
                self.target_avatar,
                self.additional_instructions,
            )
        )


class GenerationRequest(BaseModel):
    """A single image, video or audio generation request."""

    model_id: str
    media_type: MediaType
    prompt: str = ""
    creative_controls: CreativeControls | None = None
    aspect_ratio: str | None = None
    quality_tier: QualityTier | None = None
    reference_assets: list[ReferenceAsset] = Field(default_factory=list)

    # Video
    duration_seconds: int | None = Field(None, gt=0)
    resolution: str | None = None
    enable_audio_track: bool | None = None
    start_frame: ReferenceAsset | None = None
    end_frame: ReferenceAsset | None = None

    # Audio
    voice_id: str | None = None
    language_code: str | None = None
    stability: float = Field(0.5, ge=0.0, le=1.0)
    similarity_boost: float = Field(0.75, ge=0.0, le=1.0)
    speed: float = Field(1.0, ge=0.7, le=1.2)


class PollingPolicy(BaseModel):
    """Budget for one polling loop."""

    model_config = ConfigDict(frozen=True)

    interval_seconds: float = Field(2.0, ge=0.0)
    max_attempts: int = Field(60, ge=1)
    max_duration_seconds: float = Field(120.0, gt=0.0)


class GenerationJob(BaseModel):
    """In-flight deferred task owned by one orchestration call."""

    task_id: str
    provider_kind: ProviderKind
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    attempts_made: int = 0
    status: JobStatus = JobStatus.SUBMITTED


class Success(BaseModel):
    status: Literal["success"] = "success"
    artifact_bytes: bytes | None = None
    artifact_url: str | None = None
    mime_type: str
    provider_kind: ProviderKind
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_artifact(self) -> "Success":
        if self.artifact_bytes is None and not self.artifact_url:
            raise ValueError("Success requires artifact bytes or an artifact URL")
        return self


class Pending(BaseModel):
    status: Literal["pending"] = "pending"
    task_id: str
    provider_kind: ProviderKind


class Failure(BaseModel):
    status: Literal["failure"] = "failure"
    error_kind: ErrorKind
    message: str
    provider_kind: ProviderKind | None = None
    task_id: str | None = None


GenerationResult = Annotated[Success | Pending | Failure, Field(discriminator="status")]


class VoiceInfo(BaseModel):
    """A voice offered by an audio provider."""

    voice_id: str
    name: str
    provider_kind: ProviderKind
    category: str | None = None
    description: str | None = None
    preview_url: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
