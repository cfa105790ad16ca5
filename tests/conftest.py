"""Shared image fixtures for the test suite."""

import numpy as np
import pytest

from image_upscaling.core.image import Image

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def checker(size=16, block=4, colors=(RED, BLUE)):
    """Square image of ``block``-sized tiles alternating between two colors."""
    yy, xx = np.mgrid[0:size, 0:size]
    pick = ((xx // block) + (yy // block)) % 2
    data = np.where(pick[..., None] == 0, np.array(colors[0]), np.array(colors[1]))
    return Image.from_array(data.astype(np.uint8))


def ramp(size=100):
    """Diagonal gray ramp ``(x + y) * 255 / 200``."""
    yy, xx = np.mgrid[0:size, 0:size]
    val = ((xx + yy) * 255) // 200
    return Image.from_array(np.repeat(val[..., None], 3, axis=2).astype(np.uint8))


def uniform(width, height, color=(90, 140, 200)):
    return Image.new(width, height, color)


@pytest.fixture
def checker_image():
    return checker()


@pytest.fixture(scope="module")
def ramp_image():
    return ramp()


@pytest.fixture
def black_image():
    return Image.new(8, 8)


@pytest.fixture
def random_image():
    rng = np.random.default_rng(1234)
    return Image.from_array(rng.integers(0, 256, size=(9, 7, 3), dtype=np.uint8))
