"""
Request validation against a model's declared capabilities and limits.
"""

from .models import GenerationRequest, MediaType, ModelDescriptor
from .prompts import build_prompt


def validate_request(request: GenerationRequest, descriptor: ModelDescriptor) -> str | None:
    """Check a request against its model descriptor.

    Returns:
        A message describing the first violation, or None when the request is valid
    """
    model_id = descriptor.model_id

    if request.media_type != descriptor.media_type:
        return (
            f"Model '{model_id}' generates {descriptor.media_type.value}, "
            f"not {request.media_type.value}"
        )

    prompt = request.prompt.strip()
    has_controls = request.creative_controls is not None and not request.creative_controls.is_empty()
    if not prompt:
        if descriptor.media_type == MediaType.AUDIO:
            return "Text to synthesize is required"
        if not has_controls:
            return "A prompt or creative controls are required"
        # Adapters send the prompt built from the brief
        prompt = build_prompt(request.creative_controls, request.aspect_ratio)

    if descriptor.max_characters is not None and len(prompt) > descriptor.max_characters:
        return (
            f"Prompt is {len(prompt)} characters; model '{model_id}' accepts at most "
            f"{descriptor.max_characters}"
        )

    if request.reference_assets and not descriptor.supports_reference_assets:
        return f"Model '{model_id}' does not accept reference assets"

    if descriptor.media_type == MediaType.VIDEO:
        problem = _validate_video(request, descriptor)
        if problem:
            return problem

    if descriptor.media_type == MediaType.AUDIO and not (
        request.voice_id or descriptor.default_voice_id
    ):
        return f"A voice id is required for model '{model_id}'"

    return None


def _validate_video(request: GenerationRequest, descriptor: ModelDescriptor) -> str | None:
    model_id = descriptor.model_id
    duration = request.duration_seconds

    if duration is not None:
        low = descriptor.min_duration_seconds
        high = descriptor.max_duration_seconds
        if (low is not None and duration < low) or (high is not None and duration > high):
            return f"Duration {duration}s is outside {low}-{high}s for model '{model_id}'"

    if request.resolution and descriptor.resolutions and request.resolution not in descriptor.resolutions:
        return (
            f"Resolution '{request.resolution}' is not offered by model '{model_id}' "
            f"({', '.join(descriptor.resolutions)})"
        )

    if (request.start_frame or request.end_frame) and not descriptor.supports_start_frame:
        return f"Model '{model_id}' does not accept start or end frames"

    if request.enable_audio_track and not descriptor.supports_audio_track:
        return f"Model '{model_id}' cannot generate an audio track"

    return None
