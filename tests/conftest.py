"""
Pytest fixtures for pixelnodes tests
"""

import numpy as np
import pytest

from pixelnodes import Image


@pytest.fixture
def solid_red_image() -> Image:
    """Create a solid red 2x2 image."""
    return Image(size=(2, 2), bg_color=(255, 0, 0))


@pytest.fixture
def gray_ramp_image() -> Image:
    """Create a 2x2 gray image with the values 50, 100, 150 and 200."""
    pixels = np.array([[50, 100], [150, 200]], dtype=np.uint8)
    return Image(pixels)


@pytest.fixture
def coordinate_image() -> Image:
    """Create a 6x4 image whose pixels encode their coordinate.

    Pixel (x, y) is (x * 10, y * 10, x + y, 255).
    """
    pixels = np.zeros((4, 6, 4), dtype=np.uint8)
    for y in range(4):
        for x in range(6):
            pixels[y, x] = [x * 10, y * 10, x + y, 255]
    return Image(pixels)


@pytest.fixture
def white_image() -> Image:
    """Create a white 5x5 image."""
    return Image(size=(5, 5), bg_color=(255, 255, 255))


@pytest.fixture
def mid_gray_image() -> Image:
    """Create a 32x32 image filled with (100, 100, 100)."""
    return Image(size=(32, 32), bg_color=(100, 100, 100))
