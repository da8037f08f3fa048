"""Pytest configuration and fixtures."""
import numpy as np
import pytest

from quixelart.types import RasterImage


def solid_image(width: int, height: int, color) -> RasterImage:
    """Image filled with a single color (RGB or RGBA)."""
    return RasterImage(np.full((height, width, len(color)), color, dtype=np.uint8))


@pytest.fixture
def gray_image():
    """4x4 solid mid-gray image."""
    return solid_image(4, 4, (128, 128, 128))


@pytest.fixture
def quadrants_image():
    """64x64 image with four flat color quadrants."""
    image = np.zeros((64, 64, 3), dtype=np.uint8)
    image[:32, :32] = [255, 0, 0]  # Red
    image[:32, 32:] = [0, 255, 0]  # Green
    image[32:, :32] = [0, 0, 255]  # Blue
    image[32:, 32:] = [255, 255, 0]  # Yellow
    return RasterImage(image)


@pytest.fixture
def noise_image():
    """Reproducible 37x23 RGB noise."""
    rng = np.random.default_rng(1234)
    return RasterImage(rng.integers(0, 256, (23, 37, 3), dtype=np.uint8))


@pytest.fixture
def gradient_image():
    """48x32 smooth red-to-blue gradient."""
    h, w = 32, 48
    image = np.zeros((h, w, 3), dtype=np.uint8)
    for i in range(h):
        image[i, :] = [int(255 * (1 - i / h)), 64, int(255 * (i / h))]
    return RasterImage(image)
