"""Width/height-tagged RGBA pixel buffers passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from PIL import Image

from .errors import InvalidGeometryError

ColorValue = Tuple[int, int, int, int]


@dataclass(eq=False, slots=True)
class RasterSurface:
    """
    An 8-bit RGBA raster backed by a ``(height, width, 4)`` array.

    RGB input is widened to RGBA with opaque alpha. A surface is owned by one
    caller at a time; every operation in this package returns a new surface
    and never writes into its input.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise InvalidGeometryError(
                f"Expected a (height, width, 3|4) buffer, got shape {pixels.shape}"
            )
        if pixels.dtype != np.uint8:
            raise TypeError(f"Expected uint8 pixels, got {pixels.dtype}")
        if pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            pixels = np.concatenate([pixels, alpha], axis=2)
        self.pixels = pixels

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @classmethod
    def blank(cls, width: int, height: int, color: Sequence[int] = (0, 0, 0, 255)) -> "RasterSurface":
        """Allocate a surface filled with ``color``."""
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(f"Surface must have positive dimensions, got {width}x{height}")
        rgba = tuple(color) + (255,) * (4 - len(color))
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = rgba
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterSurface":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def copy(self) -> "RasterSurface":
        return RasterSurface(self.pixels.copy())

    def crop(self, x: int, y: int, width: int, height: int) -> "RasterSurface":
        """Copy the ``width`` x ``height`` region at ``(x, y)`` into a new surface."""
        if x < 0 or y < 0 or x + width > self.width or y + height > self.height:
            raise InvalidGeometryError(
                f"Region {width}x{height}+{x}+{y} outside {self.width}x{self.height} surface"
            )
        return RasterSurface(self.pixels[y:y + height, x:x + width].copy())

    def mirrored(self) -> "RasterSurface":
        """Return a horizontally flipped copy (front camera frames)."""
        return RasterSurface(np.flip(self.pixels, axis=1).copy())
