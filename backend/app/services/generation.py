"""
AI derivative generation (placeholder).

No model is called: a style is looked up in STYLES, a placeholder image URL
is templated from the style's colors, and a random delay stands in for
inference time. Swap generate() for a real provider (DALL-E, Replicate,
Stability) without changing the API schema.
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Union

from app.core.config import settings
from app.core.errors import InvalidInputError
from app.schemas.generation import GeneratedImage, GenerationProgress, GenerationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Style:
    value: str
    label: str
    prompt: str
    colors: str  # placeholder background/foreground


STYLES: list[Style] = [
    Style("ghibli", "Studio Ghibli", "Transform into Studio Ghibli anime art style with soft colors and magical atmosphere", "90EE90/228B22"),
    Style("pixel", "Pixel Art", "Convert to 8-bit pixel art style with retro gaming aesthetics", "FF00FF/800080"),
    Style("3d", "3D Render", "Create a modern 3D rendered version with realistic lighting and materials", "87CEEB/4682B4"),
    Style("cartoon", "Cartoon", "Transform into vibrant cartoon style with bold outlines and bright colors", "FFD700/FF8C00"),
    Style("cyberpunk", "Cyberpunk", "Reimagine in cyberpunk style with neon lights and futuristic elements", "00FFFF/FF00FF"),
    Style("watercolor", "Watercolor", "Convert to watercolor painting style with flowing colors and artistic brushstrokes", "DDA0DD/9370DB"),
    Style("sketch", "Pencil Sketch", "Transform into detailed pencil sketch with artistic shading", "D3D3D3/696969"),
    Style("oil", "Oil Painting", "Recreate as classical oil painting with rich textures and deep colors", "F5DEB3/CD853F"),
]

_STYLES_BY_VALUE = {s.value: s for s in STYLES}

NAME_TEMPLATES = [
    "{base} - {style} Edition",
    "{style} {base}",
    "{base} in {style} Style",
    "{style} Variant of {base}",
    "{base}: {style} Remix",
]

# (stage, progress, message, seconds spent before the next event)
PROGRESS_STEPS = [
    ("preparing", 10, "Preparing AI model...", 0.2),
    ("generating", 30, "Generating image...", 0.4),
    ("processing", 80, "Processing result...", 0.2),
]


def get_style(value: str) -> Style:
    style = _STYLES_BY_VALUE.get(value)
    if style is None:
        raise InvalidInputError(f"Unknown AI style: {value}")
    return style


def mock_image_url(style: Style) -> str:
    timestamp = int(time.time() * 1000)
    return (
        f"https://via.placeholder.com/512x512/{style.colors}"
        f"?text={style.value.upper()}+Style&t={timestamp}"
    )


def derivative_name(base_name: Optional[str], style_label: str) -> str:
    template = random.choice(NAME_TEMPLATES)
    return template.format(base=base_name or "Untitled NFT", style=style_label)


def derivative_description(base_description: Optional[str], style: Style) -> str:
    base = base_description or "An NFT"
    return (
        f"{base} reimagined through AI transformation in {style.label} style. "
        f"{style.prompt}. This derivative maintains the essence of the original "
        "while exploring new artistic possibilities through artificial intelligence."
    )


def _delay() -> float:
    low = settings.GENERATION_MIN_DELAY_SEC
    high = max(low, settings.GENERATION_MAX_DELAY_SEC)
    return random.uniform(low, high)


async def generate(request: GenerationRequest) -> GeneratedImage:
    style = get_style(request.style)

    await asyncio.sleep(_delay())

    result = GeneratedImage(
        image_url=mock_image_url(style),
        prompt=style.prompt,
        style=style.value,
        name=derivative_name(request.base_nft_name, style.label),
        description=derivative_description(request.base_nft_description, style),
    )
    logger.info("Generated %s derivative '%s' (placeholder)", style.value, result.name)
    return result


async def generate_with_progress(
    request: GenerationRequest,
) -> AsyncIterator[Union[GenerationProgress, GeneratedImage]]:
    """
    Yield progress events, then the GeneratedImage.

    An unknown style raises on the first iteration, before any event.
    """
    get_style(request.style)
    scale = settings.GENERATION_MAX_DELAY_SEC / 5.0

    for stage, progress, message, pause in PROGRESS_STEPS:
        yield GenerationProgress(stage=stage, progress=progress, message=message)
        await asyncio.sleep(pause * scale)

    result = await generate(request)
    yield GenerationProgress(stage="complete", progress=100, message="Generation complete!")
    yield result
