"""
ByteDance Seedream image generation through the Kie.ai Market API.

Three model families share the endpoint but take different input fields:
4.5 uses aspect ratio and quality, 4.0 uses named image sizes and a
resolution, 3.0 uses named image sizes and a guidance scale. When
reference images are supplied the edit variant of the model is used.
"""

from typing import Any, ClassVar

from ...generation.json_extract import first_string
from ...generation.models import (
    GenerationRequest,
    MediaType,
    ModelDescriptor,
    QualityTier,
    ReferenceAsset,
)
from ...generation.outcomes import TaskHandleOutcome
from ..base import forwarded_references
from .base import KieAdapter

V4_IMAGE_SIZES: dict[str, str] = {
    "1:1": "square_hd",
    "4:3": "landscape_4_3",
    "3:4": "portrait_4_3",
    "16:9": "landscape_16_9",
    "9:16": "portrait_16_9",
    "3:2": "landscape_3_2",
    "2:3": "portrait_3_2",
}

V3_IMAGE_SIZES: dict[str, str] = {**V4_IMAGE_SIZES, "1:1": "square"}

DEFAULT_ASPECT_RATIO = "9:16"


class SeedreamImageAdapter(KieAdapter):
    """Seedream 3.0 / 4.0 / 4.5 text-to-image and image editing."""

    media_type: ClassVar[MediaType] = MediaType.IMAGE
    name: ClassVar[str] = "kie-seedream"
    description: ClassVar[str] = "Kie.ai: ByteDance Seedream image generation"

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> TaskHandleOutcome:
        prompt = self.resolve_prompt(request)
        references = forwarded_references(request, descriptor)

        model = descriptor.api_model_id
        edit_model = descriptor.default_params.get("edit_model")
        if references and edit_model:
            model = edit_model

        task_input = self.build_input(request, descriptor, prompt, references)
        return await self._create_task(model, task_input, credential)

    def build_input(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        prompt: str,
        references: list[ReferenceAsset],
    ) -> dict[str, Any]:
        """Build the ``input`` object for this model family."""
        family = descriptor.default_params.get("family", "4")
        aspect_ratio = request.aspect_ratio or DEFAULT_ASPECT_RATIO
        image_urls = [asset.as_data_url() for asset in references]

        if family == "4.5":
            task_input: dict[str, Any] = {
                "prompt": prompt,
                "aspect_ratio": aspect_ratio,
                "quality": "high" if request.quality_tier == QualityTier.UHD_4K else "basic",
            }
            if image_urls:
                task_input["image_urls"] = image_urls
            return task_input

        if family == "3":
            return {
                "prompt": prompt,
                "image_size": V3_IMAGE_SIZES.get(aspect_ratio, "portrait_16_9"),
                "guidance_scale": 2.5,
            }

        task_input = {
            "prompt": prompt,
            "image_size": V4_IMAGE_SIZES.get(aspect_ratio, "portrait_16_9"),
            "image_resolution": descriptor.default_params.get("image_resolution")
            or _resolution_for(request.quality_tier),
            "max_images": 1,
        }
        if image_urls:
            task_input["image_urls"] = image_urls
        return task_input

    def _artifact_url(
        self, result: dict[str, Any] | None, task_data: dict[str, Any]
    ) -> str | None:
        return first_string(result, "resultUrls.0", "images.0.url", "images.0", "url") or (
            first_string(task_data, "resultUrl", "imageUrl")
        )


def _resolution_for(quality_tier: QualityTier | None) -> str:
    if quality_tier == QualityTier.UHD_4K:
        return "4K"
    if quality_tier == QualityTier.HD:
        return "2K"
    return "1K"
