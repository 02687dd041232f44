"""Provider adapters translating each generation API into adapter outcomes."""

from .base import ProviderAdapter, ProviderRequestError
from .bfl import BflImageAdapter
from .elevenlabs import ElevenLabsAudioAdapter
from .google import GeminiImageAdapter, GeminiSpeechAdapter
from .kie import KieVideoAdapter, SeedreamImageAdapter
from .openai_image import OpenAIImageAdapter
from .registry import AdapterRegistry, create_adapter_registry

__all__ = [
    "AdapterRegistry",
    "BflImageAdapter",
    "ElevenLabsAudioAdapter",
    "GeminiImageAdapter",
    "GeminiSpeechAdapter",
    "KieVideoAdapter",
    "OpenAIImageAdapter",
    "ProviderAdapter",
    "ProviderRequestError",
    "SeedreamImageAdapter",
    "create_adapter_registry",
]
