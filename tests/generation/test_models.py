"""
Tests for the shared data model.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from estudio.generation.models import (
    CreativeControls,
    GenerationResult,
    Pending,
    ProviderKind,
    ReferenceAsset,
    Success,
)
from tests.stubs import PNG_BASE64


class TestReferenceAsset:
    """Tests for ReferenceAsset."""

    def test_strips_data_url_prefix(self):
        """Test data URLs are reduced to their base64 payload."""
        asset = ReferenceAsset(data=f"data:image/jpeg;base64,{PNG_BASE64}", mime_type="image/jpeg")

        assert asset.data == PNG_BASE64
        assert asset.as_data_url() == f"data:image/jpeg;base64,{PNG_BASE64}"

    def test_decode(self):
        """Test valid payloads decode and invalid ones raise ValueError."""
        assert ReferenceAsset(data=PNG_BASE64).decode().startswith(b"\x89PNG")
        with pytest.raises(ValueError, match="not valid base64"):
            ReferenceAsset(data="%%%").decode()


class TestResults:
    """Tests for the GenerationResult union."""

    def test_success_requires_artifact(self):
        """Test Success must carry bytes or a URL."""
        with pytest.raises(ValidationError):
            Success(mime_type="image/png", provider_kind=ProviderKind.OPENAI)

    def test_discriminated_by_status(self):
        """Test serialized results round-trip to the right variant."""
        adapter = TypeAdapter(GenerationResult)

        result = adapter.validate_python({"status": "pending", "task_id": "t1", "provider_kind": "kie"})

        assert result == Pending(task_id="t1", provider_kind=ProviderKind.KIE)


def test_creative_controls_is_empty():
    """Test prices alone do not make a usable brief."""
    assert CreativeControls(price_after="10").is_empty()
    assert not CreativeControls(product_name="Serum").is_empty()
