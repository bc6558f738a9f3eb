"""Whitted-style ray tracer for spheres under point lights, built on Taichi.

This package renders a static scene of spheres above a checkerboard floor
with recursive ray tracing, supporting:
- Diffuse and specular (Phong) shading from point lights with hard shadows
- Recursive mirror reflection and refraction, bounded in depth
- Spherical environment map lookups for rays that leave the scene
- PPM and PNG export with hue-preserving tone mapping

Subpackages:
    core: Vector utilities, the recursive ray caster and the frame renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Phong material with reflection/refraction weights
    scene: Scene container, scene intersection, environment map, default scene
    camera: Pinhole camera and primary ray directions
    preview: Tone mapping, image export and preview display
"""

__version__ = "0.1.0"
