"""Ray data structure and vector utilities for the Whitted ray tracer.

This module provides the Ray dataclass and the small set of vector helpers the
shader is built on: dot products, normalization, mirror reflection, Snell
refraction and the shadow-bias origin offset. All functions are Taichi
functions and can be called from any kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Vector types (2, 3 and 4 float components)
vec2 = tm.vec2
vec3 = tm.vec3
vec4 = tm.vec4

# Distance secondary ray origins are pushed off a surface (shadow bias)
RAY_EPSILON = 1e-3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Callers keep it unit
            length; the environment lookup relies on that.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector. Must be non-zero; a zero vector yields NaNs.

    Returns:
        A unit vector in the same direction as v.
    """
    return v * (1.0 / tm.length(v))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        I - 2 N (I . N). Not normalized.
    """
    return incident - normal * 2.0 * tm.dot(incident, normal)


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is the geometric (outward) normal of the surface. When the ray
    travels against the normal's side (it is leaving the medium) the normal is
    flipped and the two refractive indices are swapped.

    On total internal reflection the fixed direction (1, 0, 0) is returned
    instead of a mirrored ray.

    Args:
        incident: The incoming direction vector (unit length).
        normal: The outward surface normal (unit length).
        eta_t: Refractive index of the medium on the inside of the surface.
        eta_i: Refractive index of the medium on the outside (1.0 for air).

    Returns:
        The refracted direction (not normalized), or (1, 0, 0).
    """
    cosi = -ti.max(-1.0, ti.min(1.0, tm.dot(incident, normal)))
    n = normal
    eta_from = eta_i
    eta_to = eta_t
    if cosi < 0.0:
        # Ray is inside the object: swap the media
        cosi = -cosi
        n = -normal
        eta_from = eta_t
        eta_to = eta_i

    eta = eta_from / eta_to
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)

    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cosi - ti.sqrt(k))
    return result


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to avoid re-hitting its own surface.

    Pushes the point RAY_EPSILON along the normal, onto the side the new ray
    travels toward.

    Args:
        point: The intersection point.
        normal: The surface normal at the point.
        direction: The direction of the secondary ray.

    Returns:
        The offset origin point.
    """
    offset = normal * RAY_EPSILON
    result = point + offset
    if tm.dot(direction, normal) < 0.0:
        result = point - offset
    return result
