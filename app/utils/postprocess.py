"""
Logo post-processing: quantize to the team palette, auto-crop, export.

Pipeline: fetch -> decode -> quantize(primary, secondary) -> auto-crop ->
export PNG (and optionally SVG). Stages run strictly in order; each one
returns a new PixelBuffer.
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Sequence, Tuple

import httpx
import numpy as np
import vtracer

from app.core.config import settings
from app.core.exceptions import ImageFetchError
from app.core.logging import logger
from app.utils.colors import BLACK, WHITE, Color, parse_color
from app.utils.pixels import PixelBuffer
from app.utils.resources import ResourceHandle, ResourceStore

# Pixels below this alpha count as fully transparent
ALPHA_THRESHOLD = 10
# Channels above this on all of r, g, b count as background white
NEAR_WHITE = 245
# Crop padding as a fraction of the longer side
CROP_PADDING_RATIO = 0.02

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class BoundingBox:
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


@dataclass(frozen=True)
class CropResult:
    buffer: PixelBuffer
    box: Optional[BoundingBox]

    @property
    def offset(self) -> Tuple[int, int]:
        if self.box is None:
            return 0, 0
        return self.box.min_x, self.box.min_y


@dataclass(frozen=True)
class ProcessedLogo:
    png: ResourceHandle
    svg: Optional[ResourceHandle]
    width: int
    height: int
    crop_box: Optional[BoundingBox]


def build_palette(primary: Color, secondary: Color) -> Sequence[Color]:
    """Palette order doubles as the tie-break order."""
    return (primary, secondary, WHITE, BLACK)


def quantize_to_palette(buffer: PixelBuffer, primary: Color, secondary: Color) -> PixelBuffer:
    """
    Map every pixel to the nearest of [primary, secondary, white, black].

    Distance is squared Euclidean in RGB. On a tie the earlier palette entry
    wins. Pixels with alpha below ALPHA_THRESHOLD become (0, 0, 0, 0); all
    others come out fully opaque.
    """
    palette = np.array(build_palette(primary, secondary), dtype=np.int64)
    rgb = buffer.pixels[..., :3].astype(np.int64)

    best_dist = np.full(rgb.shape[:2], np.iinfo(np.int64).max, dtype=np.int64)
    best_idx = np.zeros(rgb.shape[:2], dtype=np.intp)
    for idx, color in enumerate(palette):
        dist = ((rgb - color) ** 2).sum(axis=-1)
        closer = dist < best_dist
        best_dist[closer] = dist[closer]
        best_idx[closer] = idx

    out = np.empty_like(buffer.pixels)
    out[..., :3] = palette[best_idx]
    out[..., 3] = 255
    out[buffer.pixels[..., 3] < ALPHA_THRESHOLD] = 0
    return PixelBuffer(out)


def foreground_mask(buffer: PixelBuffer) -> np.ndarray:
    """True where a pixel is neither transparent nor near-white."""
    px = buffer.pixels
    near_white = (px[..., :3] > NEAR_WHITE).all(axis=-1)
    return (px[..., 3] >= ALPHA_THRESHOLD) & ~near_white


def find_bounding_box(buffer: PixelBuffer) -> Optional[BoundingBox]:
    """Padded, clamped bounding box of all foreground pixels, or None."""
    ys, xs = np.nonzero(foreground_mask(buffer))
    if xs.size == 0:
        return None

    w, h = buffer.width, buffer.height
    pad = int(max(w, h) * CROP_PADDING_RATIO)
    return BoundingBox(
        min_x=max(0, int(xs.min()) - pad),
        min_y=max(0, int(ys.min()) - pad),
        max_x=min(w - 1, int(xs.max()) + pad),
        max_y=min(h - 1, int(ys.max()) + pad),
    )


def auto_crop(buffer: PixelBuffer) -> CropResult:
    """
    Trim the buffer to its foreground content.

    A buffer with no foreground at all comes back unchanged.
    """
    box = find_bounding_box(buffer)
    if box is None:
        return CropResult(buffer=buffer, box=None)
    return CropResult(buffer=buffer.region(box.min_x, box.min_y, box.max_x, box.max_y), box=box)


def export_png(buffer: PixelBuffer) -> bytes:
    """Lossless PNG encoding of the buffer."""
    out = BytesIO()
    buffer.to_image().save(out, format="PNG", optimize=True)
    return out.getvalue()


def vectorize_to_svg(png_bytes: bytes) -> Optional[str]:
    """
    Trace a quantized PNG into SVG paths.

    Best-effort: returns None instead of raising when tracing fails.
    """
    try:
        svg = vtracer.convert_raw_image_to_svg(
            png_bytes,
            img_format="png",
            colormode="color",
            hierarchical="stacked",
            mode="polygon",
            filter_speckle=1,
            color_precision=8,
            layer_difference=1,
            corner_threshold=60,
            length_threshold=4.0,
            max_iterations=10,
            splice_threshold=45,
            path_precision=1,
        )
    except Exception as e:
        logger.warning(f"SVG tracing failed, continuing with PNG only: {str(e)}")
        return None

    if not svg or "<svg" not in svg:
        logger.warning("SVG tracing produced no output, continuing with PNG only")
        return None
    return svg


async def fetch_image(image_url: str, client: httpx.AsyncClient = None) -> bytes:
    """
    Download image bytes, bypassing caches.

    The generation endpoint can return different bytes for the same URL,
    so a cached copy is never acceptable here.

    Raises:
        ImageFetchError: on network errors or a non-success status
    """
    logger.info(f"Fetching image from {image_url}")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.IMAGE_FETCH_TIMEOUT, follow_redirects=True) as own_client:
                response = await own_client.get(image_url, headers=NO_CACHE_HEADERS)
        else:
            response = await client.get(image_url, headers=NO_CACHE_HEADERS)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ImageFetchError(f"Image request returned HTTP {e.response.status_code}: {image_url}") from e
    except httpx.HTTPError as e:
        raise ImageFetchError(f"Could not download image {image_url}: {str(e)}") from e

    if not response.content:
        raise ImageFetchError(f"Image response was empty: {image_url}")
    return response.content


async def post_process_logo(
    image_url: str,
    primary: str,
    secondary: str,
    store: ResourceStore,
    vectorize: bool = True,
    filename_stem: str = "logo",
    client: httpx.AsyncClient = None,
) -> ProcessedLogo:
    """
    Fetch a generated logo and turn it into palette-locked, cropped files.

    Args:
        image_url: Locator returned by the generation endpoint
        primary: Team primary color (hex or name; invalid input becomes white)
        secondary: Team secondary color
        store: Where exported files are kept
        vectorize: Also attempt an SVG trace
        filename_stem: Base name for the exported files
        client: Optional HTTP client to reuse

    Returns:
        ProcessedLogo with a PNG handle and, when tracing succeeded, an SVG handle

    Raises:
        ImageFetchError: the image could not be downloaded
        ImageDecodeError: the downloaded bytes are not an image
    """
    data = await fetch_image(image_url, client=client)
    raw = PixelBuffer.decode(data)
    logger.debug(f"Decoded {raw.width}x{raw.height} image from {image_url}")

    quantized = quantize_to_palette(raw, parse_color(primary), parse_color(secondary))
    crop = auto_crop(quantized)
    cropped = crop.buffer

    png_bytes = export_png(cropped)
    png = store.put(png_bytes, "image/png", f"{filename_stem}.png")

    svg = None
    if vectorize:
        svg_text = vectorize_to_svg(png_bytes)
        if svg_text is not None:
            svg = store.put(svg_text.encode("utf-8"), "image/svg+xml", f"{filename_stem}.svg")

    logger.info(
        f"Post-processed {image_url}: {raw.width}x{raw.height} -> {cropped.width}x{cropped.height}"
        f"{' (+svg)' if svg else ''}"
    )
    return ProcessedLogo(
        png=png,
        svg=svg,
        width=cropped.width,
        height=cropped.height,
        crop_box=crop.box,
    )
