"""Accent color extraction from poster and cover images.

The dominant color is found by palette quantization: pixels are sampled,
reduced to a small median-cut palette, and the most populated palette
entry wins. Given identical bytes the result is always the same.
"""

import asyncio
import io
from typing import Optional

import httpx
from PIL import Image, ImageChops, UnidentifiedImageError

from kinobot.exceptions import ColorExtractionError, DecodeError, FetchError, NoPaletteError
from kinobot.models.summary import RGB
from kinobot.utils.logger import get_logger

logger = get_logger(__name__)

PALETTE_SIZE = 10
SAMPLE_STEP = 2  # Every 2nd pixel
MIN_ALPHA = 125
WHITE_THRESHOLD = 250


def _sample(rgba: Image.Image, step: int) -> Image.Image:
    """Keep every ``step``-th pixel of each row."""
    if step <= 1:
        return rgba
    width, height = rgba.size
    return rgba.resize((max(1, width // step), height), Image.Resampling.NEAREST)


def _counted_mask(rgba: Image.Image) -> Image.Image:
    """Mask (mode L) of opaque pixels that are not near-white.

    Args:
        rgba: Image in RGBA mode

    Returns:
        255 where a pixel counts toward the palette ranking, 0 elsewhere
    """
    r, g, b, a = rgba.split()
    opaque = a.point(lambda v: 255 if v >= MIN_ALPHA else 0)
    bright = [band.point(lambda v: 255 if v > WHITE_THRESHOLD else 0) for band in (r, g, b)]
    white = ImageChops.multiply(ImageChops.multiply(bright[0], bright[1]), bright[2])
    return ImageChops.multiply(opaque, ImageChops.invert(white))


def extract_accent_color(
    image_bytes: bytes,
    palette_size: int = PALETTE_SIZE,
    step: int = SAMPLE_STEP,
) -> RGB:
    """Return the most dominant color of an encoded image.

    CPU bound; async callers should run it in an executor.

    Args:
        image_bytes: Encoded image (PNG, JPEG, WebP, ...)
        palette_size: Maximum number of palette candidates
        step: Pixel sampling step

    Returns:
        (r, g, b) of the first palette entry

    Raises:
        DecodeError: If the bytes are not a readable image
        NoPaletteError: If no pixel survives sampling
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e

    sampled = _sample(rgba, step)
    mask = _counted_mask(sampled)
    quantized = sampled.convert("RGB").quantize(
        colors=palette_size, method=Image.Quantize.MEDIANCUT
    )

    # Only opaque, non-white pixels are counted per palette index
    counts = quantized.histogram(mask=mask)
    palette = quantized.getpalette()
    if not palette:
        raise NoPaletteError("Quantization produced an empty palette")

    # Most populated entry first, lowest index breaks ties
    index = max(range(len(counts)), key=lambda i: (counts[i], -i))
    if counts[index] == 0:
        raise NoPaletteError("Image has no opaque non-white pixels")

    r, g, b = palette[index * 3 : index * 3 + 3]
    return (r, g, b)


async def fetch_accent_color(client: httpx.AsyncClient, url: str) -> RGB:
    """Download an image and extract its accent color.

    Decoding and quantization run in the default executor so the event
    loop keeps serving other commands.

    Args:
        client: HTTP client used for the download
        url: Image URL

    Returns:
        Dominant (r, g, b)

    Raises:
        FetchError: If the download fails
        DecodeError: If the bytes are not an image
        NoPaletteError: If quantization yields nothing
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Could not fetch image {url}: {e}") from e

    return await asyncio.get_running_loop().run_in_executor(
        None, extract_accent_color, response.content
    )


async def resolve_accent_color(
    client: httpx.AsyncClient,
    url: Optional[str],
) -> Optional[RGB]:
    """Best-effort accent color for a summary card.

    Returns None when there is no image URL or extraction fails for any reason.
    """
    if not url:
        return None

    try:
        color = await fetch_accent_color(client, url)
    except ColorExtractionError as e:
        logger.warning(
            "Accent color extraction failed",
            url=url,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None

    logger.debug("Extracted accent color", url=url, color=color)
    return color
