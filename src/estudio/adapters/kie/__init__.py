"""Kie.ai adapters (Seedream images, market and Veo videos)."""

from .seedream import SeedreamImageAdapter
from .video import KieVideoAdapter

__all__ = ["KieVideoAdapter", "SeedreamImageAdapter"]
