"""
Static catalog of the generation models offered by the studio.
"""

from .models import MediaType, ModelDescriptor, ProviderKind

_IMAGE_PROMPT_LIMIT = 4000
_VIDEO_PROMPT_LIMIT = 2500
_TTS_CHARACTER_LIMIT = 5000


def _flux(
    model_id: str,
    api_model_id: str,
    display_name: str,
    description: str,
    price_hint: str,
    supports_reference_assets: bool,
) -> ModelDescriptor:
    return ModelDescriptor(
        model_id=model_id,
        provider_kind=ProviderKind.BFL,
        media_type=MediaType.IMAGE,
        api_model_id=api_model_id,
        display_name=display_name,
        description=description,
        supports_reference_assets=supports_reference_assets,
        is_asynchronous=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=1 if supports_reference_assets else 0,
        price_hint=price_hint,
    )


IMAGE_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        model_id="gemini-3-pro-image",
        provider_kind=ProviderKind.GOOGLE,
        media_type=MediaType.IMAGE,
        api_model_id="gemini-3-pro-image-preview",
        display_name="Gemini 3 Pro Image",
        description="Highest quality Gemini image model with 4K output",
        supports_reference_assets=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=14,
        price_hint="~$0.13/image",
    ),
    ModelDescriptor(
        model_id="gemini-2.5-flash",
        provider_kind=ProviderKind.GOOGLE,
        media_type=MediaType.IMAGE,
        api_model_id="gemini-2.5-flash-image",
        display_name="Gemini 2.5 Flash Image",
        description="Fast Gemini image model with reference support",
        supports_reference_assets=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=3,
        price_hint="~$0.04/image",
    ),
    ModelDescriptor(
        model_id="gpt-image-1.5",
        provider_kind=ProviderKind.OPENAI,
        media_type=MediaType.IMAGE,
        api_model_id="gpt-image-1.5",
        display_name="GPT Image 1.5",
        description="OpenAI image model with strong text rendering",
        supports_reference_assets=True,
        max_characters=32000,
        max_reference_assets=4,
        price_hint="~$0.04-0.17/image",
    ),
    ModelDescriptor(
        model_id="seedream-4.5",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.IMAGE,
        api_model_id="seedream/4.5-text-to-image",
        display_name="Seedream 4.5",
        description="ByteDance Seedream 4.5 with 4K output",
        supports_reference_assets=True,
        is_asynchronous=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=6,
        price_hint="~$0.03/image",
        default_params={"family": "4.5", "edit_model": "seedream/4.5-edit"},
    ),
    ModelDescriptor(
        model_id="seedream-4",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.IMAGE,
        api_model_id="bytedance/seedream-v4-text-to-image",
        display_name="Seedream 4.0",
        description="ByteDance Seedream 4.0",
        supports_reference_assets=True,
        is_asynchronous=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=6,
        price_hint="~$0.03/image",
        default_params={"family": "4", "edit_model": "bytedance/seedream-v4-edit"},
    ),
    ModelDescriptor(
        model_id="seedream-4-4k",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.IMAGE,
        api_model_id="bytedance/seedream-v4-text-to-image",
        display_name="Seedream 4.0 (4K)",
        description="ByteDance Seedream 4.0 at 4K resolution",
        supports_reference_assets=True,
        is_asynchronous=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        max_reference_assets=4,
        price_hint="~$0.06/image",
        default_params={
            "family": "4",
            "edit_model": "bytedance/seedream-v4-edit",
            "image_resolution": "4K",
        },
    ),
    ModelDescriptor(
        model_id="seedream-3",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.IMAGE,
        api_model_id="bytedance/seedream-3.0",
        display_name="Seedream 3.0",
        description="ByteDance Seedream 3.0, text to image only",
        is_asynchronous=True,
        max_characters=_IMAGE_PROMPT_LIMIT,
        price_hint="~$0.02/image",
        default_params={"family": "3"},
    ),
    _flux("flux-2-max", "flux-2-max", "FLUX.2 Max", "Top quality FLUX.2", "~$0.08/image", True),
    _flux("flux-2-klein", "flux-2-klein", "FLUX.2 Klein", "Compact FLUX.2", "~$0.01/image", False),
    _flux("flux-2-pro", "flux-2-pro", "FLUX.2 Pro", "Professional FLUX.2", "~$0.05/image", True),
    _flux("flux-2-flex", "flux-2-flex", "FLUX.2 Flex", "Configurable FLUX.2", "~$0.05/image", True),
    _flux(
        "flux-1-kontext-max",
        "flux-kontext-max",
        "FLUX.1 Kontext Max",
        "Context-aware image editing, max quality",
        "~$0.08/image",
        True,
    ),
    _flux(
        "flux-1-kontext-pro",
        "flux-kontext-pro",
        "FLUX.1 Kontext Pro",
        "Context-aware image editing",
        "~$0.04/image",
        True,
    ),
    _flux("flux-1", "flux-dev", "FLUX.1 Dev", "FLUX.1 development model", "~$0.025/image", False),
    _flux("flux-1-fast", "flux-schnell", "FLUX.1 Schnell", "Fastest FLUX.1", "~$0.003/image", False),
    _flux("flux-1-realism", "flux-realism", "FLUX.1 Realism", "Photorealistic", "~$0.03/image", False),
    _flux("flux-1.1", "flux-pro-1.1", "FLUX 1.1 Pro", "FLUX 1.1 Pro", "~$0.04/image", False),
)


VIDEO_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        model_id="veo-3.1",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="google/veo-3.1",
        display_name="Veo 3.1",
        description="Google Veo 3.1 with native audio",
        supports_reference_assets=True,
        is_asynchronous=True,
        supports_audio_track=True,
        supports_start_frame=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        max_reference_assets=3,
        default_duration_seconds=8,
        min_duration_seconds=4,
        max_duration_seconds=8,
        default_resolution="1080p",
        resolutions=("720p", "1080p", "4K"),
        price_hint="~$0.50/video",
        default_params={"endpoint": "veo", "veo_model": "veo3"},
    ),
    ModelDescriptor(
        model_id="veo-3-fast",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="google/veo-3-fast",
        display_name="Veo 3 Fast",
        description="Faster Veo 3 generation",
        is_asynchronous=True,
        supports_audio_track=True,
        supports_start_frame=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        default_duration_seconds=8,
        min_duration_seconds=4,
        max_duration_seconds=8,
        default_resolution="720p",
        resolutions=("720p", "1080p"),
        price_hint="~$0.30/video",
        default_params={"endpoint": "veo", "veo_model": "veo3_fast"},
    ),
    ModelDescriptor(
        model_id="kling-2.6",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="kling/2.6",
        display_name="Kling 2.6",
        description="Kling 2.6 with audio",
        is_asynchronous=True,
        supports_audio_track=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        default_duration_seconds=5,
        min_duration_seconds=5,
        max_duration_seconds=10,
        default_resolution="1080p",
        resolutions=("1080p",),
        price_hint="~$0.35/video",
    ),
    ModelDescriptor(
        model_id="kling-o1",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="kling/o1",
        display_name="Kling O1",
        description="Kling O1 with reference images",
        supports_reference_assets=True,
        is_asynchronous=True,
        supports_start_frame=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        max_reference_assets=1,
        default_duration_seconds=5,
        min_duration_seconds=3,
        max_duration_seconds=10,
        default_resolution="1080p",
        resolutions=("720p", "1080p"),
        price_hint="~$0.40/video",
    ),
    ModelDescriptor(
        model_id="sora-2",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="openai/sora-2",
        display_name="Sora 2",
        description="OpenAI Sora 2 with audio",
        is_asynchronous=True,
        supports_audio_track=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        default_duration_seconds=8,
        min_duration_seconds=4,
        max_duration_seconds=12,
        default_resolution="720p",
        resolutions=("720p",),
        price_hint="~$0.30/video",
    ),
    ModelDescriptor(
        model_id="hailuo-2.3",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="minimax/hailuo-2.3",
        display_name="Hailuo 2.3",
        description="MiniMax Hailuo 2.3",
        is_asynchronous=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        default_duration_seconds=6,
        min_duration_seconds=6,
        max_duration_seconds=10,
        default_resolution="1080p",
        resolutions=("768p", "1080p"),
        price_hint="~$0.28/video",
    ),
    ModelDescriptor(
        model_id="hailuo-2.3-fast",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="minimax/hailuo-2.3-fast",
        display_name="Hailuo 2.3 Fast",
        description="Faster MiniMax Hailuo 2.3",
        is_asynchronous=True,
        max_characters=_VIDEO_PROMPT_LIMIT,
        default_duration_seconds=6,
        min_duration_seconds=6,
        max_duration_seconds=10,
        default_resolution="768p",
        resolutions=("768p", "1080p"),
        price_hint="~$0.19/video",
    ),
    ModelDescriptor(
        model_id="runway-gen4",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="runway/gen-4",
        display_name="Runway Gen-4",
        description="Runway Gen-4 text to video",
        is_asynchronous=True,
        max_characters=1000,
        default_duration_seconds=5,
        min_duration_seconds=5,
        max_duration_seconds=10,
        default_resolution="720p",
        resolutions=("720p",),
        price_hint="~$0.25/video",
    ),
    ModelDescriptor(
        model_id="runway-act-two",
        provider_kind=ProviderKind.KIE,
        media_type=MediaType.VIDEO,
        api_model_id="runway/act-two",
        display_name="Runway Act-Two",
        description="Motion control from a driving performance",
        is_asynchronous=True,
        max_characters=1000,
        default_duration_seconds=10,
        min_duration_seconds=3,
        max_duration_seconds=30,
        default_resolution="720p",
        resolutions=("720p",),
        price_hint="~$0.05/second",
    ),
)


AUDIO_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        model_id="eleven_multilingual_v2",
        provider_kind=ProviderKind.ELEVENLABS,
        media_type=MediaType.AUDIO,
        api_model_id="eleven_multilingual_v2",
        display_name="Multilingual v2",
        description="Most natural ElevenLabs voice model, 29 languages",
        max_characters=_TTS_CHARACTER_LIMIT,
        price_hint="1 credit/character",
    ),
    ModelDescriptor(
        model_id="eleven_flash_v2_5",
        provider_kind=ProviderKind.ELEVENLABS,
        media_type=MediaType.AUDIO,
        api_model_id="eleven_flash_v2_5",
        display_name="Flash v2.5",
        description="Lowest latency ElevenLabs model",
        max_characters=_TTS_CHARACTER_LIMIT,
        price_hint="0.5 credit/character",
    ),
    ModelDescriptor(
        model_id="eleven_turbo_v2_5",
        provider_kind=ProviderKind.ELEVENLABS,
        media_type=MediaType.AUDIO,
        api_model_id="eleven_turbo_v2_5",
        display_name="Turbo v2.5",
        description="Balanced quality and latency",
        max_characters=_TTS_CHARACTER_LIMIT,
        price_hint="0.5 credit/character",
    ),
    ModelDescriptor(
        model_id="gemini-tts",
        provider_kind=ProviderKind.GOOGLE,
        media_type=MediaType.AUDIO,
        api_model_id="gemini-2.0-flash-exp",
        display_name="Gemini TTS",
        description="Gemini native speech generation with prebuilt voices",
        max_characters=_TTS_CHARACTER_LIMIT,
        default_voice_id="Kore",
        price_hint="Included in Gemini usage",
        default_params={"default_language_code": "es-MX"},
    ),
)


DEFAULT_CATALOG: tuple[ModelDescriptor, ...] = IMAGE_MODELS + VIDEO_MODELS + AUDIO_MODELS
