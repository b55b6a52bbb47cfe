# pixelnodes Nodes - Color and tone
"""
Parameterless per-pixel tone nodes: GreyScale, Normalise and Vignette.

All nodes work on the RGB channels of the RGBA pixel array and pass the
alpha channel through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TYPE_CHECKING

import numpy as np

from .base import Node, register_node

if TYPE_CHECKING:
    from pixelnodes.image import Image


@register_node
@dataclass(frozen=True)
class GreyScale(Node):
    """Convert the image to grayscale.

    Uses the image's luminosity conversion, so R=G=B at every pixel.

    Example:
        'node=greyscale'
    """

    _keyword: ClassVar[str] = 'greyscale'
    _display_name: ClassVar[str] = 'GreyScale'

    def process(self, image: Image) -> Image:
        return image.to_grayscale()


@register_node
@dataclass(frozen=True)
class Normalise(Node):
    """Stretch the contrast of the grayscale image to the full 0-255 range.

    The image is converted to grayscale, then every value v is mapped to
    round(255 * (v - min) / (max - min)). A uniform image (max == min) has
    no range to stretch and is returned as its grayscale conversion.

    Example:
        'node=normalise'
    """

    _keyword: ClassVar[str] = 'normalise'
    _display_name: ClassVar[str] = 'Normalise'

    def process(self, image: Image) -> Image:
        from pixelnodes.image import Image as Img

        gray = image.to_grayscale()
        pixels = gray.get_pixels()
        values = pixels[:, :, 0]
        old_min = int(values.min())
        old_max = int(values.max())
        if old_max == old_min:
            return gray

        scaled = 255.0 * (values.astype(np.float64) - old_min) / (old_max - old_min)
        stretched = np.clip(np.rint(scaled), 0, 255).astype(np.uint8)
        result = pixels.copy()
        result[:, :, 0:3] = stretched[:, :, np.newaxis]
        return Img(result)


@register_node
@dataclass(frozen=True)
class Vignette(Node):
    """Darken the image towards its periphery.

    With center (width // 2, height // 2) and the integer distance d of a
    pixel to it, every channel is multiplied by ((max_d - d) / max_d) ** 2
    where max_d is the integer distance of the origin to the center. Images
    without any distance (1x1) are returned unchanged.

    Example:
        'node=vignette'
    """

    _keyword: ClassVar[str] = 'vignette'
    _display_name: ClassVar[str] = 'Vignette'

    @staticmethod
    def brightness_map(width: int, height: int) -> np.ndarray:
        """Compute the per-pixel brightness factors.

        :param width: The image width
        :param height: The image height
        :returns: Float array of shape (height, width) with values in [0, 1]
        """
        center_x = width // 2
        center_y = height // 2
        max_distance = np.floor(np.sqrt(center_x * center_x + center_y * center_y))
        if max_distance == 0:
            return np.ones((height, width), dtype=np.float64)
        ys, xs = np.mgrid[0:height, 0:width]
        distance = np.floor(np.sqrt((center_x - xs) ** 2 + (center_y - ys) ** 2))
        brightness = np.clip((max_distance - distance) / max_distance, 0.0, 1.0)
        return brightness * brightness

    def process(self, image: Image) -> Image:
        from pixelnodes.image import Image as Img

        pixels = image.get_pixels()
        brightness = self.brightness_map(image.width, image.height)
        rgb = pixels[:, :, 0:3].astype(np.float64) * brightness[:, :, np.newaxis]
        result = pixels.copy()
        result[:, :, 0:3] = np.clip(np.trunc(rgb), 0, 255).astype(np.uint8)
        return Img(result)


__all__ = ['GreyScale', 'Normalise', 'Vignette']
