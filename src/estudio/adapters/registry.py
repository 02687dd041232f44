"""
Adapter registry: which adapter serves a provider for a media type.
"""

import httpx

from ..config import Settings
from ..generation.models import MediaType, ModelDescriptor, ProviderKind
from ..logging import get_logger
from .base import ProviderAdapter
from .bfl import BflImageAdapter
from .elevenlabs import ElevenLabsAudioAdapter
from .google import GeminiImageAdapter, GeminiSpeechAdapter
from .kie import KieVideoAdapter, SeedreamImageAdapter
from .openai_image import OpenAIImageAdapter

logger = get_logger(__name__)


class AdapterRegistry:
    """
    Registry of provider adapters keyed by (provider kind, media type).

    Kie.ai and Google each serve more than one media type through different
    adapters, so the provider alone is not enough to pick one.
    """

    def __init__(self):
        self._adapters: dict[tuple[ProviderKind, MediaType], ProviderAdapter] = {}

    def register(self, adapter: ProviderAdapter) -> None:
        """
        Register an adapter instance.

        Raises:
            ValueError: If an adapter is already registered for the same key
        """
        key = (adapter.provider_kind, adapter.media_type)
        if key in self._adapters:
            raise ValueError(
                f"An adapter for {adapter.provider_kind.value}/{adapter.media_type.value} "
                "is already registered"
            )
        logger.debug("Registering adapter", name=adapter.name)
        self._adapters[key] = adapter

    def get(self, provider_kind: ProviderKind, media_type: MediaType) -> ProviderAdapter | None:
        return self._adapters.get((provider_kind, media_type))

    def for_descriptor(self, descriptor: ModelDescriptor) -> ProviderAdapter | None:
        return self.get(descriptor.provider_kind, descriptor.media_type)

    def list_all(self) -> list[ProviderAdapter]:
        return list(self._adapters.values())

    def __len__(self) -> int:
        return len(self._adapters)

    def __contains__(self, key: tuple[ProviderKind, MediaType]) -> bool:
        return key in self._adapters


def create_adapter_registry(
    settings: Settings, http_client: httpx.AsyncClient | None = None
) -> AdapterRegistry:
    """Build the registry of every built-in adapter from settings.

    Args:
        settings: Application settings providing base URLs and timeouts
        http_client: Shared client for all adapters; each call opens its own when None
    """
    timeout = settings.http_timeout_seconds
    registry = AdapterRegistry()
    for adapter in (
        GeminiImageAdapter(settings.google_api_base_url, http_client, timeout),
        OpenAIImageAdapter(settings.openai_api_base_url, http_client, timeout),
        SeedreamImageAdapter(settings.kie_api_base_url, http_client, timeout),
        BflImageAdapter(settings.bfl_api_base_url, http_client, timeout),
        KieVideoAdapter(settings.kie_api_base_url, http_client, timeout),
        ElevenLabsAudioAdapter(settings.elevenlabs_api_base_url, http_client, timeout),
        GeminiSpeechAdapter(settings.google_api_base_url, http_client, timeout),
    ):
        registry.register(adapter)
    return registry
