"""
Video generation through Kie.ai.

Veo models go through the dedicated Veo API (``/veo/generate`` and
``/veo/record-info`` with a ``successFlag``); every other video model goes
through the Market API (``/jobs/createTask`` and ``/jobs/recordInfo``).
"""

from typing import Any, ClassVar

from ...generation.json_extract import first_string
from ...generation.models import GenerationRequest, MediaType, ModelDescriptor
from ...generation.outcomes import StatusOutcome, TaskHandleOutcome
from ...logging import get_logger
from ..base import ProviderRequestError, forwarded_references
from .base import DEDICATED_STATUS_VOCABULARY, KieAdapter

logger = get_logger(__name__)

VEO_ASPECT_RATIOS = ("16:9", "9:16")


class KieVideoAdapter(KieAdapter):
    """Veo, Kling, Sora, Hailuo and Runway video models hosted on Kie.ai."""

    media_type: ClassVar[MediaType] = MediaType.VIDEO
    name: ClassVar[str] = "kie-video"
    description: ClassVar[str] = "Kie.ai: text and image to video"

    async def _submit(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        credential: str,
    ) -> TaskHandleOutcome:
        prompt = self.resolve_prompt(request)
        if descriptor.default_params.get("endpoint") == "veo":
            return await self._submit_veo(request, descriptor, prompt, credential)
        return await self._create_task(
            descriptor.api_model_id,
            self.build_market_input(request, descriptor, prompt),
            credential,
        )

    def build_market_input(
        self, request: GenerationRequest, descriptor: ModelDescriptor, prompt: str
    ) -> dict[str, Any]:
        """Build the Market API ``input`` object, forwarding only supported fields."""
        task_input: dict[str, Any] = {
            "prompt": prompt,
            "duration": request.duration_seconds or descriptor.default_duration_seconds,
            "resolution": request.resolution or descriptor.default_resolution,
            "aspect_ratio": request.aspect_ratio or "16:9",
        }

        if descriptor.supports_start_frame:
            if request.start_frame is not None:
                task_input["start_image"] = request.start_frame.as_data_url()
            if request.end_frame is not None:
                task_input["end_image"] = request.end_frame.as_data_url()

        references = forwarded_references(request, descriptor)
        if references:
            task_input["reference_image"] = references[0].as_data_url()

        if descriptor.supports_audio_track:
            enable_audio = request.enable_audio_track
            task_input["enable_audio"] = True if enable_audio is None else enable_audio

        return {key: value for key, value in task_input.items() if value is not None}

    async def _submit_veo(
        self,
        request: GenerationRequest,
        descriptor: ModelDescriptor,
        prompt: str,
        credential: str,
    ) -> TaskHandleOutcome:
        aspect_ratio = request.aspect_ratio or "16:9"
        body: dict[str, Any] = {
            "prompt": prompt,
            "model": descriptor.default_params.get("veo_model", "veo3"),
            "aspectRatio": aspect_ratio if aspect_ratio in VEO_ASPECT_RATIOS else "Auto",
        }

        frames = [f for f in (request.start_frame, request.end_frame) if f is not None]
        references = forwarded_references(request, descriptor)
        if frames and descriptor.supports_start_frame:
            body["imageUrls"] = [frame.as_data_url() for frame in frames]
            body["generationType"] = "FIRST_AND_LAST_FRAMES_2_VIDEO"
        elif references:
            body["imageUrls"] = [asset.as_data_url() for asset in references]
            body["generationType"] = "REFERENCE_2_VIDEO"

        response = await self._request_json(
            "POST", f"{self.base_url}/veo/generate", credential, json=body
        )
        self._validate_response(response)
        return self._task_handle(response)

    async def _poll(self, task_id: str, credential: str) -> StatusOutcome:
        # Task ids do not say which API issued them; Veo is tried first
        veo_status = await self._veo_record_info(task_id, credential)
        if veo_status is not None:
            return veo_status
        return await self._record_info(task_id, credential)

    async def _veo_record_info(self, task_id: str, credential: str) -> StatusOutcome | None:
        """Query the Veo API; None means the task is not a Veo task."""
        try:
            body = await self._request_json(
                "GET",
                f"{self.base_url}/veo/record-info",
                credential,
                params={"taskId": task_id},
            )
        except ProviderRequestError as e:
            logger.debug("Veo status lookup missed", task_id=task_id, error=e.message)
            return None

        task_data = body.get("data")
        if body.get("code") != 200 or not isinstance(task_data, dict):
            return None

        success_flag = task_data.get("successFlag")
        error = task_data.get("errorMessage") or task_data.get("errorMsg") or task_data.get("errorCode")
        return StatusOutcome(
            task_id=task_id,
            state=str(success_flag) if success_flag is not None else None,
            vocabulary=DEDICATED_STATUS_VOCABULARY,
            artifact_url=first_string(task_data, "response.resultUrls.0", "resultUrls.0"),
            mime_type="video/mp4",
            error_message=str(error) if error else None,
        )

    def _artifact_url(
        self, result: dict[str, Any] | None, task_data: dict[str, Any]
    ) -> str | None:
        return first_string(
            result,
            "videoUrl",
            "video_url",
            "resultUrls.0",
            "videos.0",
            "url",
            "output.url",
        ) or first_string(task_data, "videoUrl", "video_url", "resultUrl")
