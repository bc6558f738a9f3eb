"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection

The checkerboard floor is not a primitive; it is a fixed rule inside the
scene intersector (see tinyraytracer.scene.scene).
"""

from .sphere import HitRecord, Sphere, SphereInfo, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "SphereInfo",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
