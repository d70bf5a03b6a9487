"""TextureData - raw image data container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np


@dataclass(eq=False)
class TextureData:
    """
    Raw image data container, CPU side only.

    Attributes:
        data: Numpy array of shape (height, width, channels) with uint8 values,
            first row is the top of the image.
        width: Texture width in pixels.
        height: Texture height in pixels.
        channels: Number of color channels (4 for RGBA).
        flip_y: Flip vertically when uploading so that texture coordinate
            v=0 addresses the bottom row (OpenGL convention).
        source_path: File the data was loaded from, if any.
    """

    data: np.ndarray
    width: int
    height: int
    channels: int = 4
    flip_y: bool = True
    source_path: str | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> "TextureData":
        """
        Load texture data from an image file through Pillow.

        Raises whatever Pillow raises for unreadable or undecodable files
        (``OSError`` / ``PIL.UnidentifiedImageError``).
        """
        from PIL import Image

        with Image.open(path) as image:
            image = image.convert("RGBA")
            data = np.array(image, dtype=np.uint8)
            width, height = image.size

        return cls(
            data=data,
            width=width,
            height=height,
            channels=4,
            source_path=str(path),
        )

    @classmethod
    def from_array(cls, data: np.ndarray, flip_y: bool = True) -> "TextureData":
        """
        Create texture data from a numpy array.

        Args:
            data: Array of shape (height, width) or (height, width, channels).
            flip_y: Flip vertically on upload.
        """
        if data.ndim == 2:
            data = data[:, :, np.newaxis]
        if data.ndim != 3:
            raise ValueError(f"Expected 2D or 3D array, got shape {data.shape}")

        height, width, channels = data.shape
        return cls(
            data=np.asarray(data, dtype=np.uint8),
            width=width,
            height=height,
            channels=channels,
            flip_y=flip_y,
        )

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def get_upload_data(self) -> tuple[np.ndarray, tuple[int, int]]:
        """
        Get data ready for GPU upload (with flips applied).

        Returns:
            Tuple of (transformed_data, (width, height)).
        """
        data = self.data
        if self.flip_y:
            data = data[::-1, :, :].copy()
        return data, self.size
