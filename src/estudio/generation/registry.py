"""
Model registry: read-only lookup from model id to its descriptor.
"""

from collections.abc import Iterable
from types import MappingProxyType

from ..logging import get_logger
from .catalog import DEFAULT_CATALOG
from .models import MediaType, ModelDescriptor, ProviderKind

logger = get_logger(__name__)


class ModelNotFoundError(LookupError):
    """Raised when a model id is not present in the registry."""

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"Unknown model '{model_id}'")


class ModelRegistry:
    """
    Catalog of generation models keyed by model id.

    The registry is populated once at construction and never mutated afterwards,
    so concurrent reads need no synchronization.
    """

    def __init__(self, descriptors: Iterable[ModelDescriptor]):
        models: dict[str, ModelDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.model_id in models:
                raise ValueError(f"Model '{descriptor.model_id}' is already registered")
            models[descriptor.model_id] = descriptor

        self._models = MappingProxyType(models)
        logger.debug("Model registry loaded", count=len(models))

    def resolve(self, model_id: str) -> ModelDescriptor:
        """
        Resolve a model id to its descriptor.

        Args:
            model_id: Catalog identifier of the model

        Returns:
            The model descriptor

        Raises:
            ModelNotFoundError: If the model id is unknown
        """
        descriptor = self._models.get(model_id)
        if descriptor is None:
            raise ModelNotFoundError(model_id)
        return descriptor

    def required_credential_kind(self, model_id: str) -> ProviderKind:
        """
        Return the provider whose credential a model needs.

        Raises:
            ModelNotFoundError: If the model id is unknown
        """
        return self.resolve(model_id).provider_kind

    def get(self, model_id: str) -> ModelDescriptor | None:
        return self._models.get(model_id)

    def list_all(self) -> list[ModelDescriptor]:
        return list(self._models.values())

    def list_by_media_type(self, media_type: MediaType) -> list[ModelDescriptor]:
        """List models that produce a given media type, in catalog order."""
        return [d for d in self._models.values() if d.media_type == media_type]

    def list_by_provider(self, provider_kind: ProviderKind) -> list[ModelDescriptor]:
        return [d for d in self._models.values() if d.provider_kind == provider_kind]

    def list_model_ids(self) -> list[str]:
        return list(self._models.keys())

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, model_id: str) -> bool:
        return model_id in self._models


# Global registry instance built from the default catalog
model_registry = ModelRegistry(DEFAULT_CATALOG)
