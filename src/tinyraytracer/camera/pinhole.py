"""Pinhole camera model for primary ray generation.

The camera sits at a fixed position looking down -z with +y up. For pixel
(i, j) of a width x height image, with j = 0 the top row, the primary ray
direction is

    x = (i + 0.5) - width / 2
    y = -(j + 0.5) + height / 2
    z = -height / (2 tan(fov / 2))

normalized. The field of view spans the image height, as the z term shows;
the default of 90 degrees puts the image plane at half the image height.

Example:
    >>> from tinyraytracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(position=(0.0, 0.0, 0.0), fov=90.0)
    >>> round(camera.image_plane_distance(768), 6)
    384.0
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinyraytracer.core.ray import normalize

vec3 = tm.vec3


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        fov: Field of view in degrees, in (0, 180).

    Raises:
        ValueError: If the field of view is out of range.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = 90.0

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view = {self.fov} must be in (0, 180) degrees.")

    def image_plane_distance(self, height: int) -> float:
        """Distance from the camera to the image plane, in pixel units."""
        return height / (2.0 * math.tan(math.radians(self.fov) / 2.0))


@ti.func
def primary_direction(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    plane_distance: ti.f32,
) -> vec3:
    """Unit direction of the primary ray through the center of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        plane_distance: Result of PinholeCamera.image_plane_distance(height).

    Returns:
        The normalized ray direction.
    """
    dir_x = (ti.cast(pixel_i, ti.f32) + 0.5) - ti.cast(width, ti.f32) / 2.0
    dir_y = -(ti.cast(pixel_j, ti.f32) + 0.5) + ti.cast(height, ti.f32) / 2.0
    return normalize(vec3(dir_x, dir_y, -plane_distance))


def pixel_direction(
    camera: PinholeCamera,
    pixel_i: int,
    pixel_j: int,
    width: int,
    height: int,
) -> tuple[float, float, float]:
    """Python-side counterpart of primary_direction()."""
    dir_x = (pixel_i + 0.5) - width / 2.0
    dir_y = -(pixel_j + 0.5) + height / 2.0
    dir_z = -camera.image_plane_distance(height)
    norm = math.sqrt(dir_x * dir_x + dir_y * dir_y + dir_z * dir_z)
    return dir_x / norm, dir_y / norm, dir_z / norm
