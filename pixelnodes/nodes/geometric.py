# pixelnodes Nodes - Geometric
"""Geometric nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TYPE_CHECKING

from pixelnodes.errors import NodeBoundsError
from .base import Node, register_node, parse_pair

if TYPE_CHECKING:
    from pixelnodes.image import Image


@register_node
@dataclass(frozen=True)
class Crop(Node):
    """Crop image region.

    x, y: Top-left corner in the source image
    width, height: Size of the crop region, the output size

    The region has to lie completely inside the source image, otherwise a
    NodeBoundsError is raised before anything is copied.

    Example:
        'node=crop origin=10x20 size=30x40'
    """

    x: int = 0
    y: int = 0
    width: int = 1
    height: int = 1

    _keyword: ClassVar[str] = 'crop'
    _display_name: ClassVar[str] = 'Crop'
    _labels: ClassVar[tuple[str, ...]] = ('origin', 'size')

    @property
    def other_info(self) -> str:
        return f'(origin=({self.x},{self.y}), size=({self.width},{self.height}))'

    @classmethod
    def from_values(cls, values: dict[str, str]) -> 'Crop':
        x, y = parse_pair(values['origin'])
        width, height = parse_pair(values['size'])
        return cls(x=x, y=y, width=width, height=height)

    def to_values(self) -> dict[str, str]:
        return {
            'origin': f'{self.x}x{self.y}',
            'size': f'{self.width}x{self.height}',
        }

    def check_bounds(self, image: Image) -> None:
        """Raise a NodeBoundsError if the region does not fit into the image."""
        if self.width <= 0 or self.height <= 0:
            raise NodeBoundsError(f"Crop size must be positive, got {self.width}x{self.height}")
        if (
            self.x < 0
            or self.y < 0
            or self.x + self.width > image.width
            or self.y + self.height > image.height
        ):
            raise NodeBoundsError(
                f"Crop region origin=({self.x},{self.y}) size=({self.width},{self.height}) "
                f"exceeds image of size {image.width}x{image.height}"
            )

    def process(self, image: Image) -> Image:
        from pixelnodes.image import Image as Img

        self.check_bounds(image)
        pixels = image.get_pixels()
        region = pixels[self.y:self.y + self.height, self.x:self.x + self.width]
        return Img(region.copy())


__all__ = ['Crop']
