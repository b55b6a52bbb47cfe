# pixelnodes Nodes - Noise
"""Uniform brightness noise.

Every pixel receives one random integer offset which is added to its R, G
and B channel alike, so the noise is monochrome. The offsets are drawn from
[-255 * amount, 255 * amount) with the bounds truncated towards zero
and clamped to NOISE_BAND_LIMIT for huge amounts.

The random source can be injected for reproducible results::

    noise = Noise(0.2, rng=np.random.default_rng(42))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, TYPE_CHECKING

import numpy as np

from .base import Node, register_node

if TYPE_CHECKING:
    from pixelnodes.image import Image


NOISE_BAND_LIMIT = 2 ** 62
"Largest offset magnitude drawn, keeps the band inside int64"


def noise_band(amount: float) -> tuple[int, int]:
    """Get the half-open range [low, high) offsets are drawn from.

    Negative amounts are accepted and simply swap the bounds. Bands wider
    than ``NOISE_BAND_LIMIT`` are clamped to it. Offsets beyond 255 saturate
    a channel anyway, so such bands produce black or white pixels either way.
    """
    scaled = max(-NOISE_BAND_LIMIT, min(NOISE_BAND_LIMIT, 255.0 * amount))
    low, high = int(-scaled), int(scaled)
    return min(low, high), max(low, high)


@register_node
@dataclass(frozen=True)
class Noise(Node):
    """Add or reduce the brightness of each pixel randomly.

    noise_amount: Noise intensity, 0.0-1.0 expected but not enforced
    rng: Random generator, a fresh unseeded one per call if None

    Example:
        'node=noise noise_amount=0.25'
    """

    noise_amount: float = 0.0
    rng: np.random.Generator | None = field(default=None, repr=False, compare=False)

    _keyword: ClassVar[str] = 'noise'
    _display_name: ClassVar[str] = 'Noise'
    _labels: ClassVar[tuple[str, ...]] = ('noise_amount',)

    @property
    def other_info(self) -> str:
        return f'(noise_amount={self.noise_amount})'

    @classmethod
    def from_values(cls, values: dict[str, str]) -> 'Noise':
        amount = float(values['noise_amount'])
        if not math.isfinite(amount):
            raise ValueError(f"noise_amount must be finite, got {amount}")
        return cls(noise_amount=amount)

    def to_values(self) -> dict[str, str]:
        return {'noise_amount': repr(float(self.noise_amount))}

    def process(self, image: Image) -> Image:
        from pixelnodes.image import Image as Img

        rng = self.rng if self.rng is not None else np.random.default_rng()
        pixels = image.get_pixels()
        low, high = noise_band(self.noise_amount)
        shape = (image.height, image.width)
        if low == high:
            offsets = np.full(shape, low, dtype=np.int64)
        else:
            offsets = rng.integers(low, high, size=shape)

        rgb = pixels[:, :, 0:3].astype(np.int64) + offsets[:, :, np.newaxis]
        result = pixels.copy()
        result[:, :, 0:3] = np.clip(rgb, 0, 255).astype(np.uint8)
        return Img(result)


__all__ = ['NOISE_BAND_LIMIT', 'Noise', 'noise_band']
