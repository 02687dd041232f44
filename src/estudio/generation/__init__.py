"""
Generation core: data model, model registry, result normalization and orchestration.
"""

from .models import (
    ErrorKind,
    Failure,
    GenerationRequest,
    GenerationResult,
    MediaType,
    ModelDescriptor,
    Pending,
    PollingPolicy,
    ProviderKind,
    Success,
)
from .registry import ModelNotFoundError, ModelRegistry, model_registry

__all__ = [
    "ErrorKind",
    "Failure",
    "GenerationRequest",
    "GenerationResult",
    "MediaType",
    "ModelDescriptor",
    "ModelNotFoundError",
    "ModelRegistry",
    "Pending",
    "PollingPolicy",
    "ProviderKind",
    "Success",
    "model_registry",
]
