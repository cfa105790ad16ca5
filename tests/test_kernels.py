import math

import numpy as np
import pytest

from conftest import uniform
from image_upscaling.core.image import Image, Pixel
from image_upscaling.core.upsampling import (
    Bicubic,
    Bilinear,
    CostTier,
    Lanczos,
    NearestNeighbor,
    cubic_kernel,
    get_upscaler,
    lanczos_kernel,
    list_upscalers,
    output_size,
)

KERNEL_RESAMPLERS = ['nearest', 'bilinear', 'bicubic', 'lanczos2', 'lanczos3', 'lanczos4']


# =============================================================================
# Kernel functions
# =============================================================================

@pytest.mark.parametrize("lobes", [2, 3, 4])
def test_lanczos_kernel_center_and_support(lobes):
    assert lanczos_kernel(0.0, lobes) == 1.0
    assert lanczos_kernel(float(lobes), lobes) == 0.0
    assert lanczos_kernel(lobes + 0.5, lobes) == 0.0


@pytest.mark.parametrize("lobes", [2, 3, 4])
def test_lanczos_kernel_zero_at_integers(lobes):
    for t in range(1, lobes):
        assert abs(lanczos_kernel(float(t), lobes)) < 1e-12


def test_lanczos_kernel_is_symmetric():
    t = np.linspace(-2.9, 2.9, 31)
    np.testing.assert_allclose(lanczos_kernel(t, 3), lanczos_kernel(-t, 3))


def test_cubic_kernel_values():
    assert cubic_kernel(0.0) == 1.0
    assert cubic_kernel(1.0) == 0.0
    assert cubic_kernel(2.0) == 0.0
    assert cubic_kernel(-2.5) == 0.0
    assert cubic_kernel(0.5) == pytest.approx(0.5625)
    assert cubic_kernel(1.5) == pytest.approx(-0.0625)


def test_lanczos_rejects_unsupported_lobes():
    with pytest.raises(ValueError):
        Lanczos(lobes=5)


def test_lanczos_presets():
    assert Lanczos.fast().lobes == 2
    assert Lanczos.high_quality().lobes == 4
    assert Lanczos().name == "Lanczos3"


# =============================================================================
# Output geometry
# =============================================================================

@pytest.mark.parametrize("length,scale,expected", [
    (7, 2.0, 14),
    (7, 1.5, 11),
    (5, 1.5, 8),
    (5, 0.5, 3),
    (10, 0.25, 3),
    (3, 3.3, 10),
    (1, 0.1, 1),
])
def test_output_size_rounds_half_up(length, scale, expected):
    assert output_size(length, scale) == expected


@pytest.mark.parametrize("name", list_upscalers())
@pytest.mark.parametrize("scale", [0.5, 1.5, 2.0, 3.0])
def test_every_upscaler_produces_rounded_size(random_image, name, scale):
    result = get_upscaler(name).upscale(random_image, scale)
    assert result.width == max(1, math.floor(random_image.width * scale + 0.5))
    assert result.height == max(1, math.floor(random_image.height * scale + 0.5))


@pytest.mark.parametrize("scale", [0.0, -1.0, float('nan'), float('inf')])
def test_invalid_scale_rejected(random_image, scale):
    with pytest.raises(ValueError):
        Bilinear().upscale(random_image, scale)


# =============================================================================
# Resampler behaviour
# =============================================================================

def test_nearest_identity_at_scale_one(random_image):
    assert NearestNeighbor().upscale(random_image, 1.0) == random_image


def test_nearest_replicates_blocks():
    img = Image.from_pixels(2, 1, [(10, 10, 10), (200, 200, 200)])
    out = NearestNeighbor().upscale(img, 2.0)
    assert [p.r for p in out.pixels[:4]] == [10, 10, 200, 200]


@pytest.mark.parametrize("name", KERNEL_RESAMPLERS)
def test_black_stays_black(black_image, name):
    out = get_upscaler(name).upscale(black_image, 2.0)
    assert out.size == (16, 16)
    assert not out.array.any()


@pytest.mark.parametrize("name", KERNEL_RESAMPLERS)
def test_uniform_stays_uniform(name):
    img = uniform(5, 4)
    out = get_upscaler(name).upscale(img, 1.7)
    assert all(p == Pixel(90, 140, 200) for p in out.pixels)


def quadrant_image():
    """4x4 image of four 2x2 solid quadrants."""
    colors = {(0, 0): (255, 0, 0), (1, 0): (0, 255, 0),
              (0, 1): (0, 0, 255), (1, 1): (250, 250, 10)}
    return Image.from_pixels(4, 4, [colors[(x // 2, y // 2)] for y in range(4) for x in range(4)])


@pytest.mark.parametrize("upscaler", [Bilinear(), Bicubic()])
def test_corners_match_source(upscaler):
    img = quadrant_image()
    out = upscaler.upscale(img, 2.0)
    n = out.width - 1
    assert out.get(0, 0) == img.get(0, 0)
    assert out.get(n, 0) == img.get(3, 0)
    assert out.get(0, n) == img.get(0, 3)
    assert out.get(n, n) == img.get(3, 3)


def test_bilinear_corners_exact_on_any_image(random_image):
    out = Bilinear().upscale(random_image, 2.0)
    w, h = random_image.size
    assert out.get(0, 0) == random_image.get(0, 0)
    assert out.get(2 * w - 1, 2 * h - 1) == random_image.get(w - 1, h - 1)


def test_bilinear_midpoint_blend():
    img = Image.from_pixels(2, 1, [(0, 0, 0), (100, 100, 100)])
    out = Bilinear().upscale(img, 2.0)
    # Output x = 1 samples source x = 0.25
    assert out.get(1, 0) == Pixel(25, 25, 25)


def test_kernel_tiers():
    assert NearestNeighbor().tier == CostTier.INSTANT
    assert Bilinear().tier == CostTier.INSTANT
    assert Bicubic().tier == CostTier.FAST
    assert Lanczos().tier == CostTier.FAST


def test_upscale_does_not_modify_source(random_image):
    before = random_image.to_array()
    Bicubic().upscale(random_image, 2.0)
    np.testing.assert_array_equal(random_image.to_array(), before)
