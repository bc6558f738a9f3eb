"""Spherical environment map sampled by rays that leave the scene.

A ray direction is converted to spherical texture coordinates

    u = 0.5 + atan2(d.x, d.z) / (2 pi)
    v = 0.5 - asin(d.y) / pi

and the map is indexed at texel (floor(u * width), floor(v * height)), where
row 0 is the top row of the source image. Indices are clamped into the map
so the seam at u == 1 stays in bounds.

The map is read-only once built. Kernels sample it through
Environment.sample(); Environment.lookup() does the same lookup on the
Python side.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyraytracer.scene.environment import Environment
    >>> env = Environment.from_file("envmap.jpg")
    >>> env.lookup((0.0, 0.0, -1.0))
"""

import math
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm
from PIL import Image as PILImage

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.data_oriented
class Environment:
    """An environment map stored in a Taichi field.

    Attributes:
        width: Map width in texels.
        height: Map height in texels.
    """

    def __init__(self, pixels: npt.ArrayLike) -> None:
        """Build an environment map from an RGB array.

        Args:
            pixels: Array of shape (height, width, 3) with reflectances in
                [0, 1]. Row 0 is the top of the image.

        Raises:
            ValueError: If the array is not (H, W, 3) or is empty.
        """
        data = np.asarray(pixels, dtype=np.float32)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError(
                f"Environment map must have shape (height, width, 3), got {data.shape}"
            )
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"Environment map dimensions must be positive, got {data.shape}")

        self.height = int(data.shape[0])
        self.width = int(data.shape[1])
        self._pixels = data.copy()
        self._pixels.setflags(write=False)

        self._texels = ti.Vector.field(3, dtype=ti.f32, shape=(self.height, self.width))
        self._texels.from_numpy(data)

    @classmethod
    def from_file(cls, filepath: str | Path) -> "Environment":
        """Decode an image file into an environment map.

        Args:
            filepath: Path to an 8-bit RGB image (JPEG, PNG, ...).

        Returns:
            The environment map, texel values scaled to [0, 1].

        Raises:
            FileNotFoundError: If the file does not exist.
            PIL.UnidentifiedImageError: If the file cannot be decoded.
            ValueError: If the image does not have exactly 3 channels.
        """
        with PILImage.open(filepath) as image:
            if image.mode != "RGB":
                raise ValueError(
                    f"Environment map {filepath} must be a 3-channel RGB image, "
                    f"got mode {image.mode!r}"
                )
            pixels = np.asarray(image, dtype=np.uint8)
        return cls(pixels.astype(np.float32) * (1.0 / 255.0))

    @classmethod
    def from_color(
        cls,
        color: Sequence[float],
        width: int = 1,
        height: int = 1,
    ) -> "Environment":
        """Create a uniform environment map.

        Args:
            color: RGB value of every texel.
            width: Map width in texels.
            height: Map height in texels.
        """
        pixels = np.empty((height, width, 3), dtype=np.float32)
        pixels[:, :] = np.asarray(color, dtype=np.float32)
        return cls(pixels)

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Get the (read-only) texel array of shape (height, width, 3)."""
        return self._pixels

    def texel_index(self, direction: Sequence[float]) -> tuple[int, int]:
        """Get the (column, row) texel hit by a unit direction."""
        x, y, z = (float(c) for c in direction)
        u = 0.5 + math.atan2(x, z) / (2.0 * math.pi)
        v = 0.5 - math.asin(max(-1.0, min(1.0, y))) / math.pi
        column = min(max(int(u * self.width), 0), self.width - 1)
        row = min(max(int(v * self.height), 0), self.height - 1)
        return column, row

    def lookup(self, direction: Sequence[float]) -> tuple[float, float, float]:
        """Sample the map for a unit direction on the Python side."""
        column, row = self.texel_index(direction)
        texel = self._pixels[row, column]
        return float(texel[0]), float(texel[1]), float(texel[2])

    @ti.func
    def sample(self, direction: vec3) -> vec3:
        """Sample the map for a unit direction (Taichi side).

        Args:
            direction: The ray direction, unit length.

        Returns:
            The RGB texel seen in that direction.
        """
        u = 0.5 + ti.atan2(direction.x, direction.z) / (2.0 * tm.pi)
        v = 0.5 - ti.asin(ti.max(-1.0, ti.min(1.0, direction.y))) / tm.pi
        column = ti.min(ti.max(ti.cast(u * self.width, ti.i32), 0), self.width - 1)
        row = ti.min(ti.max(ti.cast(v * self.height, ti.i32), 0), self.height - 1)
        return self._texels[row, column]
