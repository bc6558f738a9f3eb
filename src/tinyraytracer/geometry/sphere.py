"""Sphere primitive with geometric ray-sphere intersection.

The intersection uses the geometric (projection) formulation rather than the
quadratic formula: project the center onto the ray, compare the squared
distance of closest approach against the squared radius, and step back by
the half-chord length.

The test tolerates ray origins inside the sphere, in which case the far
intersection is returned. Refracted rays travelling through a glass sphere
depend on this.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyraytracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -16), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinyraytracer.core.ray import dot, length_squared, make_ray, ray_at
from tinyraytracer.materials.phong import MaterialInfo

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Outward unit normal at the intersection point. It always
            points away from the center, also for rays leaving the sphere;
            refraction uses its orientation to tell entering from exiting.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Find the nearest non-negative intersection of a ray with a sphere.

    With L = center - origin and tca = L . D:
        - tca < 0 with the origin outside the sphere: the sphere is behind.
        - d^2 = L . L - tca^2 > r^2: the ray misses.
        - otherwise thc = sqrt(r^2 - d^2), t0 = tca - thc, t1 = tca + thc;
          t0 is used unless negative (origin inside), then t1; if t1 is
          negative as well the sphere lies entirely behind the origin.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A HitRecord. Check the hit field before reading the others.
    """
    L = sphere.center - ray_origin
    tca = dot(L, ray_direction)
    l2 = length_squared(L)
    r2 = sphere.radius * sphere.radius
    d2 = l2 - tca * tca

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    outside_and_behind = tca < 0.0 and l2 > r2
    if not outside_and_behind and d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 < 0.0:
            t0 = t1
        if t0 >= 0.0:
            did_hit = 1
            hit_t = t0
            hit_point = ray_at(make_ray(ray_origin, ray_direction), t0)
            hit_normal = tm.normalize(hit_point - sphere.center)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)


@dataclass(frozen=True)
class SphereInfo:
    """Python-side description of a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere, must be positive.
        material: The surface material.

    Raises:
        ValueError: If the radius is not positive.
    """

    center: tuple[float, float, float]
    radius: float
    material: MaterialInfo

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius = {self.radius} must be positive.")
