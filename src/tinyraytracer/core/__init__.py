"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities (reflect, refract, offsets)
    shading: Recursive ray caster and frame renderer

The shading core is deterministic and never raises: degenerate cases such as
total internal reflection are absorbed by fixed policies, and colours are
left unclamped for the export stage to handle.
"""

from .ray import (
    RAY_EPSILON,
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    vec2,
    vec3,
    vec4,
)

# Note: shading is NOT imported here to avoid circular imports.
# Import directly from tinyraytracer.core.shading when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "vec4",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "offset_origin",
    "RAY_EPSILON",
]
