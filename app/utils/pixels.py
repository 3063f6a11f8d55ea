"""
Immutable RGBA pixel buffer used by the post-processing pipeline.
"""
from dataclasses import dataclass
from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from app.core.exceptions import ImageDecodeError


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    A height x width x 4 uint8 array of RGBA pixels.

    The array is copied on construction and marked read-only, so a buffer
    never changes after it is created; each stage returns a new one.
    """
    pixels: np.ndarray

    def __post_init__(self):
        arr = np.array(self.pixels, dtype=np.uint8, copy=True)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {arr.shape}")
        arr.setflags(write=False)
        object.__setattr__(self, "pixels", arr)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        return cls(np.asarray(image.convert("RGBA")))

    @classmethod
    def decode(cls, data: bytes) -> "PixelBuffer":
        """Decode encoded image bytes (PNG, JPEG, WebP...) into a buffer."""
        try:
            with Image.open(BytesIO(data)) as image:
                image.load()
                return cls.from_image(image)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Could not decode image: {e}") from e

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def region(self, min_x: int, min_y: int, max_x: int, max_y: int) -> "PixelBuffer":
        """Sub-buffer covering the inclusive rectangle."""
        return PixelBuffer(self.pixels[min_y:max_y + 1, min_x:max_x + 1])
