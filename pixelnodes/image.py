"""
Implements the class :class:`.Image` which is pixelnodes' container for loading,
storing and keeping image data in memory while it flows through a pipeline.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Union

import PIL.Image
import numpy as np

from .config import SUPPORTED_IMAGE_FILETYPES, settings

SUPPORTED_IMAGE_FILETYPE_SET = set(SUPPORTED_IMAGE_FILETYPES)
"Set of image file types which can be read and written"

ImageSourceTypes = Union[str, os.PathLike, np.ndarray, PIL.Image.Image]
"The valid source type for loading an image"

ColorTypes = Union[tuple[int, int, int], tuple[int, int, int, int]]
"An RGB or RGBA color given as integer tuple"

BT709_WEIGHTS = (0.2126, 0.7152, 0.0722)
"ITU-R BT.709 luminosity coefficients for R, G and B"


class Image:
    """
    pixelnodes' class for storing image data.

    The pixels are always kept as a numpy array of shape (height, width, 4)
    with dtype uint8 in RGBA order. Images loaded from RGB sources receive an
    opaque alpha channel. File decoding and encoding is done via PILLOW.
    """

    def __init__(
        self,
        source: ImageSourceTypes | None = None,
        size: tuple[int, int] | None = None,
        bg_color: ColorTypes | None = None,
    ):
        """
        :param source: The image source. Either a file name, a numpy array or a
            PIL image. Arrays may be gray (H, W), RGB (H, W, 3) or RGBA (H, W, 4).
            RGBA uint8 arrays are referenced directly, not copied.
        :param size: The size (width, height) of a new blank image - if no
            source is passed.
        :param bg_color: The background color of the new blank image. Opaque
            black by default.

        Raises a FileNotFoundError if a file could not be loaded and a
        ValueError if the source is not supported.
        """
        if source is None:
            if size is None:
                raise ValueError("Either a source or a size has to be provided")
            self._pixel_data = self._blank(size, bg_color)
        elif isinstance(source, (str, os.PathLike)):
            self._pixel_data = self._load(source)
        elif isinstance(source, PIL.Image.Image):
            self._pixel_data = np.array(source.convert("RGBA"))
        elif isinstance(source, np.ndarray):
            self._pixel_data = self._normalize_to_rgba(source)
        else:
            raise ValueError(f"Unsupported image source: {type(source).__name__}")
        self.source: Path | None = (
            Path(source) if isinstance(source, (str, os.PathLike)) else None
        )
        "The file the image was loaded from (if any)"

    @staticmethod
    def _blank(size: tuple[int, int], bg_color: ColorTypes | None) -> np.ndarray:
        width, height = int(size[0]), int(size[1])
        if width < 1 or height < 1:
            raise ValueError(f"Invalid image size {width}x{height}")
        color = tuple(bg_color) if bg_color is not None else (0, 0, 0)
        if len(color) == 3:
            color = color + (255,)
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return pixels

    @staticmethod
    def _load(path: str | os.PathLike) -> np.ndarray:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Could not read image: {path}")
        with PIL.Image.open(path) as pil_image:
            return np.array(pil_image.convert("RGBA"))

    @staticmethod
    def _normalize_to_rgba(pixels: np.ndarray) -> np.ndarray:
        if pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 dtype, got {pixels.dtype}")
        if pixels.ndim == 2:
            pixels = np.stack([pixels, pixels, pixels], axis=2)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError(f"Expected image (H, W), (H, W, 3) or (H, W, 4), got shape {pixels.shape}")
        if pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[0:2], 255, dtype=np.uint8)
            pixels = np.dstack((pixels, alpha))
        return pixels

    @property
    def width(self) -> int:
        """The image's width in pixels"""
        return self._pixel_data.shape[1]

    @property
    def height(self) -> int:
        """The image's height in pixels"""
        return self._pixel_data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """
        Returns the image's size in pixels

        :return: The size as tuple (width, height)
        """
        return self.width, self.height

    def _check_coordinate(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x},{y}) out of bounds for image of size {self.width}x{self.height}"
            )

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """
        Returns the pixel at the given coordinate

        :param x: The column
        :param y: The row
        :return: The pixel as (r, g, b, a) tuple
        """
        self._check_coordinate(x, y)
        r, g, b, a = self._pixel_data[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, color: ColorTypes) -> None:
        """
        Sets the pixel at the given coordinate

        :param x: The column
        :param y: The row
        :param color: The RGB or RGBA color. RGB colors are stored opaque.
        """
        self._check_coordinate(x, y)
        if len(color) == 3:
            color = tuple(color) + (255,)
        self._pixel_data[y, x] = color

    @property
    def pixels(self) -> np.ndarray:
        """
        Returns the image's pixel data
        """
        return self.get_pixels()

    def get_pixels(self) -> np.ndarray:
        """
        Returns the image's pixel data as :class:`np.ndarray` of shape
        (height, width, 4). The array is the image's backing store.

        :return: The numpy array containing the pixels
        """
        return self._pixel_data

    def copy(self) -> Image:
        """
        Creates a deep copy of this image

        :return: The copy of this image
        """
        return Image(self._pixel_data.copy())

    def to_grayscale(self) -> Image:
        """
        Converts the image to grayscale using ITU-R BT.709 luminosity coefficients:
        Y = 0.2126*R + 0.7152*G + 0.0722*B

        :return: A new image with R=G=B=luminosity, alpha preserved
        """
        pixels = self._pixel_data
        r = pixels[:, :, 0].astype(np.float64)
        g = pixels[:, :, 1].astype(np.float64)
        b = pixels[:, :, 2].astype(np.float64)
        wr, wg, wb = BT709_WEIGHTS
        gray = np.clip(np.rint(wr * r + wg * g + wb * b), 0, 255).astype(np.uint8)
        return Image(np.stack([gray, gray, gray, pixels[:, :, 3]], axis=2))

    def to_pil(self) -> PIL.Image.Image:
        """
        Converts the image to a PIL image object

        :return: The PIL image
        """
        return PIL.Image.fromarray(self._pixel_data)

    def save(self, target: str | os.PathLike) -> Path:
        """
        Saves the image to disk, the file type is derived from the extension

        :param target: The target file name
        :return: The path written
        """
        target = Path(target)
        filetype = target.suffix.lstrip(".").lower()
        if filetype == "jpg":
            filetype = "jpeg"
        if filetype not in SUPPORTED_IMAGE_FILETYPE_SET:
            raise ValueError(f"Unsupported image file type: {target.suffix!r}")
        pil_image = self.to_pil()
        if filetype in {"jpeg", "bmp"}:
            pil_image = pil_image.convert("RGB")
        pil_image.save(target, format=filetype)
        return target

    def write(self, stem: str | os.PathLike, extension: str | None = None) -> Path:
        """
        Saves the image under the given name with the configured image extension
        appended, e.g. ``results/output1`` becomes ``results/output1.png``.

        :param stem: The file name without extension
        :param extension: Overrides the configured extension
        :return: The path written
        """
        extension = (extension or settings.IMAGE_EXTENSION).lstrip(".")
        return self.save(f"{os.fspath(stem)}.{extension}")

    def __eq__(self, other: object):
        if not isinstance(other, Image):
            return NotImplemented
        return bool(np.array_equal(self._pixel_data, other._pixel_data))

    def __str__(self):
        return f"Image (RGBA {self.width}x{self.height})"

    __repr__ = __str__


__all__ = ["Image", "ImageSourceTypes", "ColorTypes", "SUPPORTED_IMAGE_FILETYPES"]
