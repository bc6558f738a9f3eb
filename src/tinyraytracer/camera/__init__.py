"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera at a fixed position looking down -z
"""

from .pinhole import PinholeCamera, pixel_direction, primary_direction

__all__ = [
    "PinholeCamera",
    "primary_direction",
    "pixel_direction",
]
