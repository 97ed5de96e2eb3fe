"""Per-pixel color transforms applied by collage filters.

Each stage is a small pure function over a float ``(..., 3)`` RGB array.
It returns a new array clamped to ``[0, 255]``, so stages can be
tested in isolation and chained in any order. :func:`apply_adjustments` runs
them in the fixed filter order:

1. color temperature
2. channel shift
3. brightness
4. contrast
5. saturation
6. hue rotation
7. grayscale
8. sepia

Blur is spatial rather than per-pixel and runs once after the color stages.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Tuple

import numpy as np
from PIL import Image, ImageFilter

from .filters import Adjustments, Filter
from .raster import RasterSurface

LOGGER = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])
SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)
NEUTRAL = 128.0


def clamp(rgb: np.ndarray) -> np.ndarray:
    """Clamp channel values to ``[0, 255]``."""
    return np.clip(rgb, 0.0, 255.0)


def luma(rgb: np.ndarray) -> np.ndarray:
    """Rec. 601 luma with a trailing axis for broadcasting."""
    return (rgb @ LUMA_WEIGHTS)[..., np.newaxis]


def adjust_color_temperature(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Cool (positive) lowers red and raises blue; warm (negative) the reverse."""
    out = np.array(rgb, dtype=np.float64)
    out[..., 0] *= 1.0 - amount * 0.5
    out[..., 2] *= 1.0 + amount * 0.5
    return clamp(out)


def shift_channels(rgb: np.ndarray, red: float, green: float, blue: float) -> np.ndarray:
    return clamp(np.asarray(rgb, dtype=np.float64) * np.array([red, green, blue]))


def adjust_brightness(rgb: np.ndarray, factor: float) -> np.ndarray:
    return clamp(np.asarray(rgb, dtype=np.float64) * factor)


def adjust_contrast(rgb: np.ndarray, factor: float) -> np.ndarray:
    return clamp((np.asarray(rgb, dtype=np.float64) - NEUTRAL) * factor + NEUTRAL)


def adjust_saturation(rgb: np.ndarray, factor: float) -> np.ndarray:
    """Blend each channel away from (factor > 1) or toward (factor < 1) luma."""
    rgb = np.asarray(rgb, dtype=np.float64)
    gray = luma(rgb)
    return clamp(gray + factor * (rgb - gray))


def rotate_hue(rgb: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate the (red, green) pair by ``degrees``; blue is untouched.

    This is a cheap 2D approximation of a hue shift and intentionally not an
    HSL rotation.
    """
    out = np.array(rgb, dtype=np.float64)
    theta = math.radians(degrees)
    cos, sin = math.cos(theta), math.sin(theta)
    red, green = out[..., 0].copy(), out[..., 1].copy()
    out[..., 0] = red * cos - green * sin
    out[..., 1] = red * sin + green * cos
    return clamp(out)


def blend_grayscale(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend toward luma; ``amount`` is a percentage (100 = fully gray)."""
    rgb = np.asarray(rgb, dtype=np.float64)
    t = amount / 100.0
    return clamp(rgb * (1.0 - t) + luma(rgb) * t)


def blend_sepia(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend toward the sepia matrix output.

    ``amount`` is a fraction in ``[0, 1]``; values above 1 are read as a
    percentage.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    strength = amount / 100.0 if amount > 1 else amount
    target = rgb @ SEPIA_MATRIX.T
    return clamp(rgb + (target - rgb) * strength)


Stage = Tuple[str, Callable[[np.ndarray, Adjustments], np.ndarray], Callable[[Adjustments], bool]]

_STAGES: Tuple[Stage, ...] = (
    (
        "color_temperature",
        lambda rgb, a: adjust_color_temperature(rgb, a.color_temp),
        lambda a: a.color_temp == 0,
    ),
    (
        "channel_shift",
        lambda rgb, a: shift_channels(rgb, a.red_shift, a.green_shift, a.blue_shift),
        lambda a: a.red_shift == 1 and a.green_shift == 1 and a.blue_shift == 1,
    ),
    ("brightness", lambda rgb, a: adjust_brightness(rgb, a.brightness), lambda a: a.brightness == 1),
    ("contrast", lambda rgb, a: adjust_contrast(rgb, a.contrast), lambda a: a.contrast == 1),
    ("saturation", lambda rgb, a: adjust_saturation(rgb, a.saturate), lambda a: a.saturate == 1),
    ("hue", lambda rgb, a: rotate_hue(rgb, a.hue), lambda a: a.hue == 0),
    ("grayscale", lambda rgb, a: blend_grayscale(rgb, a.grayscale), lambda a: a.grayscale == 0),
    ("sepia", lambda rgb, a: blend_sepia(rgb, a.sepia), lambda a: a.sepia == 0),
)

STAGE_NAMES = tuple(name for name, _, _ in _STAGES)


def transform_rgb(rgb: np.ndarray, adjustments: Adjustments) -> np.ndarray:
    """Run every color stage over a float RGB array.

    Stages whose parameter sits at its identity value are skipped; the
    result is the same either way.
    """
    result = clamp(np.asarray(rgb, dtype=np.float64))
    for name, stage, is_identity in _STAGES:
        if is_identity(adjustments):
            continue
        LOGGER.debug("Applying stage %s", name)
        result = stage(result, adjustments)
    return result


def gaussian_blur(surface: RasterSurface, radius: float) -> RasterSurface:
    """Blur the RGB channels with a Gaussian of ``radius`` pixels.

    Radius 0 returns an unchanged copy. Alpha is preserved.
    """
    if radius < 0:
        raise ValueError(f"Blur radius must be non-negative, got {radius}")
    if radius == 0 or surface.is_empty:
        return surface.copy()
    rgb = Image.fromarray(np.ascontiguousarray(surface.pixels[..., :3]))
    blurred = np.asarray(rgb.filter(ImageFilter.GaussianBlur(radius)), dtype=np.uint8)
    pixels = surface.pixels.copy()
    pixels[..., :3] = blurred
    return RasterSurface(pixels)


def apply_adjustments(surface: RasterSurface, adjustments: Adjustments) -> RasterSurface:
    """
    Return a new surface with ``adjustments`` applied.

    Args:
        surface: Source raster; left untouched
        adjustments: Parameters for the stage pipeline

    Returns:
        RasterSurface: Filtered copy with the source alpha channel
    """
    if adjustments.is_identity or surface.is_empty:
        return surface.copy()

    pixels = surface.pixels.copy()
    rgb = transform_rgb(pixels[..., :3], adjustments)
    pixels[..., :3] = np.rint(rgb).astype(np.uint8)
    result = RasterSurface(pixels)

    if adjustments.blur > 0:
        result = gaussian_blur(result, adjustments.blur)
    return result


def apply_filter(surface: RasterSurface, filter_: Filter) -> RasterSurface:
    """Apply a catalog filter to ``surface``."""
    LOGGER.debug("Applying filter '%s' to %sx%s surface", filter_.id, surface.width, surface.height)
    return apply_adjustments(surface, filter_.adjustments)


__all__ = [
    "clamp",
    "luma",
    "adjust_color_temperature",
    "shift_channels",
    "adjust_brightness",
    "adjust_contrast",
    "adjust_saturation",
    "rotate_hue",
    "blend_grayscale",
    "blend_sepia",
    "transform_rgb",
    "gaussian_blur",
    "apply_adjustments",
    "apply_filter",
    "STAGE_NAMES",
]
