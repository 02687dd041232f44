"""
Configuration management for the Estudio generation backend
"""

from pydantic_settings import BaseSettings

from .generation.models import MediaType, PollingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:5173"]

    # Provider credentials keyed by credential kind, e.g. {"kie_api_key": "..."}
    provider_api_keys: dict[str, str] = {}

    # Provider endpoints
    google_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_base_url: str | None = None
    kie_api_base_url: str = "https://api.kie.ai/api/v1"
    bfl_api_base_url: str = "https://api.bfl.ai/v1"
    elevenlabs_api_base_url: str = "https://api.elevenlabs.io/v1"
    http_timeout_seconds: float = 60.0

    # Polling policies
    image_poll_interval_seconds: float = 2.0
    image_poll_max_attempts: int = 60
    image_poll_timeout_seconds: float = 120.0
    video_poll_interval_seconds: float = 5.0
    video_poll_max_attempts: int = 120
    video_poll_timeout_seconds: float = 600.0

    # Upper bound on simultaneous polling loops; None disables the bound
    max_concurrent_polls: int | None = 32

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "ESTUDIO_"
        case_sensitive = False
        extra = "ignore"

    def polling_policies(self) -> dict[MediaType, PollingPolicy]:
        """Build the per-media-type polling policy map handed to the orchestrator."""
        image_policy = PollingPolicy(
            interval_seconds=self.image_poll_interval_seconds,
            max_attempts=self.image_poll_max_attempts,
            max_duration_seconds=self.image_poll_timeout_seconds,
        )
        video_policy = PollingPolicy(
            interval_seconds=self.video_poll_interval_seconds,
            max_attempts=self.video_poll_max_attempts,
            max_duration_seconds=self.video_poll_timeout_seconds,
        )
        return {
            MediaType.IMAGE: image_policy,
            MediaType.VIDEO: video_policy,
            # Audio providers answer synchronously; the image budget covers any future async one
            MediaType.AUDIO: image_policy,
        }


# Global settings instance
settings = Settings()
