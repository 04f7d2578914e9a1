"""Host-side RGB image container fed from a rendered pixel buffer."""

import logging
from pathlib import Path
from typing import Sequence, Union

import numpy as np
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


class Image:
    """Row-major 8-bit RGB image, 3 bytes per pixel."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.data = np.zeros(width * height * 3, dtype=np.uint8)

    @classmethod
    def from_buffer(cls, width: int, height: int, buffer) -> "Image":
        data = np.asarray(buffer, dtype=np.uint8).reshape(-1)
        if data.size != width * height * 3:
            raise ValueError(
                f"Buffer holds {data.size} bytes, expected {width * height * 3} for {width}x{height} RGB"
            )
        image = cls(width, height)
        image.data[:] = data
        return image

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * 3
        self.data[offset:offset + 3] = color[:3]

    def get_pixel(self, x: int, y: int) -> tuple:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = (y * self.width + x) * 3
        return tuple(int(c) for c in self.data[offset:offset + 3])

    def to_array(self) -> np.ndarray:
        return self.data.reshape(self.height, self.width, 3)

    def save(self, path: Union[str, Path]) -> Path:
        """Write the image as an RGB PNG."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(self.to_array()).save(path, format="PNG")
        logger.debug("Saved %dx%d image to %s", self.width, self.height, path)
        return path
