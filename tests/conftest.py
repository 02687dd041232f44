"""
Shared fixtures for generation tests.
"""

import pytest

from estudio.generation.models import MediaType, PollingPolicy
from estudio.generation.registry import ModelRegistry

from .stubs import IMAGE_SYNC_A, VIDEO_ASYNC_A, StubAsyncVideoAdapter, StubSyncImageAdapter


@pytest.fixture
def stub_registry() -> ModelRegistry:
    return ModelRegistry([IMAGE_SYNC_A, VIDEO_ASYNC_A])


@pytest.fixture
def sync_adapter() -> StubSyncImageAdapter:
    return StubSyncImageAdapter()


@pytest.fixture
def async_adapter() -> StubAsyncVideoAdapter:
    return StubAsyncVideoAdapter()


@pytest.fixture
def fast_polling() -> dict[MediaType, PollingPolicy]:
    policy = PollingPolicy(interval_seconds=0, max_attempts=10, max_duration_seconds=60)
    return {MediaType.IMAGE: policy, MediaType.VIDEO: policy}
