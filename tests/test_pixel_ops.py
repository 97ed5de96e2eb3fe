import numpy as np
import pytest

from stripcollage.filters import Adjustments, default_catalog
from stripcollage.pixel_ops import (
    adjust_brightness,
    adjust_color_temperature,
    adjust_contrast,
    adjust_saturation,
    apply_adjustments,
    apply_filter,
    blend_grayscale,
    blend_sepia,
    gaussian_blur,
    rotate_hue,
    shift_channels,
    transform_rgb,
)
from stripcollage.raster import RasterSurface

EXTREME = Adjustments(
    brightness=3.0,
    contrast=4.0,
    saturate=5.0,
    hue=73.0,
    grayscale=40,
    sepia=0.8,
    color_temp=-1.5,
    red_shift=2.0,
    green_shift=0.1,
    blue_shift=3.0,
)


def random_surface(width=32, height=24, seed=0):
    rng = np.random.default_rng(seed)
    return RasterSurface(rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8))


def pixel_surface(r, g, b):
    return RasterSurface(np.array([[[r, g, b, 255]]], dtype=np.uint8))


def test_identity_filter_is_byte_exact():
    surface = random_surface()
    result = apply_filter(surface, default_catalog().lookup("none"))
    assert result is not surface
    assert np.array_equal(result.pixels, surface.pixels)


def test_identity_stages_are_neutral_when_run_unconditionally():
    rgb = random_surface().pixels[..., :3].astype(np.float64)
    out = adjust_contrast(adjust_brightness(shift_channels(rgb, 1, 1, 1), 1.0), 1.0)
    out = blend_sepia(blend_grayscale(rotate_hue(adjust_saturation(out, 1.0), 0), 0), 0)
    assert np.allclose(out, rgb, rtol=0, atol=1e-9)


def test_grayscale_scenario():
    result = apply_adjustments(pixel_surface(200, 100, 50), Adjustments(grayscale=100))
    assert tuple(result.pixels[0, 0]) == (124, 124, 124, 255)


def test_every_filter_output_within_range():
    surface = random_surface(seed=3)
    for filter_ in default_catalog():
        out = apply_filter(surface, filter_)
        assert out.pixels.dtype == np.uint8
        assert out.size == surface.size


def test_clamp_after_every_stage():
    rgb = random_surface(seed=7).pixels[..., :3].astype(np.float64)
    stages = [
        lambda x: adjust_color_temperature(x, -1.5),
        lambda x: shift_channels(x, 2.0, 0.1, 3.0),
        lambda x: adjust_brightness(x, 3.0),
        lambda x: adjust_contrast(x, 4.0),
        lambda x: adjust_saturation(x, 5.0),
        lambda x: rotate_hue(x, 200.0),
        lambda x: blend_grayscale(x, 150),
        lambda x: blend_sepia(x, 1.0),
    ]
    for stage in stages:
        rgb = stage(rgb)
        assert rgb.min() >= 0.0 and rgb.max() <= 255.0


def test_extreme_adjustments_stay_in_range():
    rgb = transform_rgb(random_surface(seed=11).pixels[..., :3], EXTREME)
    assert rgb.min() >= 0.0 and rgb.max() <= 255.0


def test_color_temperature_cools_and_warms():
    rgb = np.array([[100.0, 100.0, 100.0]])
    cool = adjust_color_temperature(rgb, 0.2)
    warm = adjust_color_temperature(rgb, -0.2)
    assert cool[0].tolist() == pytest.approx([90.0, 100.0, 110.0])
    assert warm[0].tolist() == pytest.approx([110.0, 100.0, 90.0])


def test_contrast_pivots_on_neutral():
    rgb = np.array([[128.0, 100.0, 200.0]])
    assert adjust_contrast(rgb, 2.0)[0].tolist() == pytest.approx([128.0, 72.0, 255.0])


def test_zero_saturation_is_gray():
    out = adjust_saturation(np.array([[200.0, 100.0, 50.0]]), 0.0)
    assert out[0].tolist() == pytest.approx([124.2, 124.2, 124.2])


def test_hue_rotation_keeps_blue():
    rgb = np.array([[100.0, 0.0, 42.0]])
    out = rotate_hue(rgb, 90)
    assert out[0].tolist() == pytest.approx([0.0, 100.0, 42.0], abs=1e-9)


def test_sepia_accepts_fraction_or_percentage():
    rgb = np.array([[200.0, 100.0, 50.0]])
    assert np.allclose(blend_sepia(rgb, 0.5), blend_sepia(rgb, 50))
    full = blend_sepia(rgb, 1.0)[0]
    assert full.tolist() == pytest.approx([164.95, 146.8, 114.35])


def test_filter_does_not_touch_input_or_alpha():
    surface = random_surface(seed=5)
    before = surface.pixels.copy()
    out = apply_filter(surface, default_catalog().lookup("vintage"))
    assert np.array_equal(surface.pixels, before)
    assert np.array_equal(out.pixels[..., 3], before[..., 3])
    assert not np.array_equal(out.pixels, before)


def test_blur_noop_at_zero_and_monotonic():
    surface = random_surface(64, 64, seed=1)

    assert np.array_equal(gaussian_blur(surface, 0).pixels, surface.pixels)
    spreads = [gaussian_blur(surface, radius).pixels[..., 0].std() for radius in (0, 1, 2, 4)]
    assert all(a > b for a, b in zip(spreads, spreads[1:]))
    with pytest.raises(ValueError):
        gaussian_blur(surface, -1)


def test_blur_filter_keeps_colors_of_flat_image():
    surface = RasterSurface.blank(16, 16, (10, 120, 240, 255))
    out = apply_filter(surface, default_catalog().lookup("blur"))
    diff = np.abs(out.pixels.astype(int) - surface.pixels.astype(int))
    assert diff.max() <= 1
