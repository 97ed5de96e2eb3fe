"""Branded label drawn onto finished collages after cropping."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from . import config
from .raster import RasterSurface

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WatermarkGeometry:
    """Placement of the watermark box in output coordinates."""

    x: int
    y: int
    width: int
    height: int
    radius: int
    font_size: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.x + self.width, self.y + self.height


@lru_cache(maxsize=32)
def load_font(size: int, font_files: Tuple[str, ...] = tuple(config.WATERMARK_FONT_FILES)) -> ImageFont.FreeTypeFont:
    """Load the first available font file at ``size``, else Pillow's bundled font."""
    for name in font_files:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _gradient_strip(width: int, height: int, stops: Sequence[str]) -> Image.Image:
    """Horizontal linear gradient through evenly spaced color ``stops``."""
    colors = np.array([ImageColor.getrgb(stop)[:3] for stop in stops], dtype=np.float64)
    positions = np.linspace(0.0, 1.0, len(colors))
    t = np.linspace(0.0, 1.0, max(width, 1))
    row = np.stack([np.interp(t, positions, colors[:, channel]) for channel in range(3)], axis=-1)
    rgb = np.repeat(np.rint(row)[np.newaxis, :, :], max(height, 1), axis=0).astype(np.uint8)
    return Image.fromarray(rgb).convert("RGBA")


class Watermark:
    """Rounded label box with gradient text and a soft drop shadow.

    Geometry scales with the output: the margin is a fraction of the shorter
    side and the font size a fraction of the width. The box is shrunk until
    it fits inside the output.
    """

    def __init__(
        self,
        text: str = config.WATERMARK_TEXT,
        *,
        margin_ratio: float = config.WATERMARK_MARGIN_RATIO,
        font_ratio: float = config.WATERMARK_FONT_RATIO,
        min_font_size: int = config.WATERMARK_MIN_FONT_SIZE,
        gradient: Sequence[str] = config.WATERMARK_GRADIENT,
        font_files: Sequence[str] = config.WATERMARK_FONT_FILES,
    ) -> None:
        if not text:
            raise ValueError("Watermark text must not be empty")
        self.text = text
        self.margin_ratio = margin_ratio
        self.font_ratio = font_ratio
        self.min_font_size = min_font_size
        self.gradient = tuple(gradient)
        self.font_files = tuple(font_files)

    def _box_for(self, font_size: int, margin: int) -> WatermarkGeometry:
        font = load_font(font_size, self.font_files)
        pad_x = round(font_size * config.WATERMARK_PAD_X_RATIO)
        pad_y = round(font_size * config.WATERMARK_PAD_Y_RATIO)
        width = int(np.ceil(font.getlength(self.text) + pad_x * 2))
        height = int(np.ceil(font_size + pad_y * 1.2))
        radius = min(config.WATERMARK_MAX_RADIUS, height // 2)
        return WatermarkGeometry(margin, margin, width, height, radius, font_size)

    def geometry(self, width: int, height: int) -> Optional[WatermarkGeometry]:
        """Return the box placement for a ``width`` x ``height`` output.

        ``None`` means the output is too small to hold even a 1px label.
        """
        margin = round(min(width, height) * self.margin_ratio)
        font_size = max(self.min_font_size, round(width * self.font_ratio))
        while font_size >= 1:
            geom = self._box_for(font_size, margin)
            if geom.x + geom.width <= width and geom.y + geom.height <= height:
                return geom
            font_size = min(font_size - 1, int(font_size * 0.9))
        LOGGER.debug("Output %sx%s too small for watermark", width, height)
        return None

    def render(self, surface: RasterSurface) -> RasterSurface:
        """Return a copy of ``surface`` with the watermark composited on top."""
        geom = self.geometry(surface.width, surface.height)
        if geom is None:
            return surface.copy()

        base = surface.to_image()
        font = load_font(geom.font_size, self.font_files)

        box_layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        ImageDraw.Draw(box_layer).rounded_rectangle(
            geom.box,
            radius=geom.radius,
            fill=(0, 0, 0, round(255 * config.WATERMARK_BOX_ALPHA)),
        )

        center = (geom.x + geom.width / 2, geom.y + geom.height / 2)
        text_mask = Image.new("L", base.size, 0)
        ImageDraw.Draw(text_mask).text(center, self.text, fill=255, font=font, anchor="mm")

        shadow_layer = Image.new("RGBA", base.size, config.WATERMARK_SHADOW_COLOR[:3] + (0,))
        shadow_alpha = text_mask.point(lambda v: v * config.WATERMARK_SHADOW_COLOR[3] // 255)
        blur_radius = geom.font_size * config.WATERMARK_SHADOW_BLUR_RATIO / 2
        shadow_layer.putalpha(shadow_alpha.filter(ImageFilter.GaussianBlur(blur_radius)))

        text_layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        text_layer.paste(
            _gradient_strip(geom.width, base.height, self.gradient),
            (geom.x, 0),
        )
        text_layer.putalpha(text_mask)

        out = Image.alpha_composite(base, box_layer)
        out = Image.alpha_composite(out, shadow_layer)
        out = Image.alpha_composite(out, text_layer)
        return RasterSurface.from_image(out)
