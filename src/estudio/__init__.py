"""
Estudio generation backend
Image, video and voice generation across third-party AI providers
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
