"""Scene container and ray-scene queries.

A Scene is an explicitly constructed, read-only value holding:

- an ordered list of spheres, each with its own material
- an unordered list of point lights
- the environment map sampled by escaping rays
- an implicit checkerboard floor at y = -4, bounded to |x| < 10 and
  -30 < z < -10 (not stored, it is a fixed geometric rule)

Spheres, materials and lights are copied into Taichi fields on construction.
The intersector walks all spheres keeping the closest hit, then tests the
floor, and reports a miss beyond MAX_DISTANCE (a render distance cutoff).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyraytracer.geometry.sphere import SphereInfo
    >>> from tinyraytracer.materials.phong import IVORY
    >>> from tinyraytracer.scene.environment import Environment
    >>> from tinyraytracer.scene.scene import LightInfo, Scene
    >>> scene = Scene(
    ...     spheres=[SphereInfo((-3.0, 0.0, -16.0), 2.0, IVORY)],
    ...     lights=[LightInfo((-20.0, 20.0, 20.0), 1.5)],
    ...     environment=Environment.from_color((0.2, 0.7, 0.8)),
    ... )
    >>> hit = scene.query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
"""

from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinyraytracer.core.ray import dot, length, make_ray, offset_origin, ray_at, reflect
from tinyraytracer.geometry.sphere import SphereInfo, hit_sphere, make_sphere
from tinyraytracer.materials.phong import Material, default_material
from tinyraytracer.scene.environment import Environment

# Type aliases for vectors
vec2 = tm.vec2
vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Scene Constants
# =============================================================================

# Hits farther than this are reported as misses
MAX_DISTANCE = 1000.0

# Largest finite 32-bit float, used as "no hit yet"
FLOAT_MAX = 3.4028234e38

# Checkerboard floor: plane height and visible rectangle
FLOOR_HEIGHT = -4.0
FLOOR_HALF_WIDTH = 10.0
FLOOR_Z_NEAR = -10.0
FLOOR_Z_FAR = -30.0

# Rays closer to parallel than this never hit the floor
FLOOR_PARALLEL_EPSILON = 1e-3

# Floor tile colours, dimmed relative to lit objects
FLOOR_DIM = 0.3
FLOOR_EVEN_COLOR = vec3(1.0, 1.0, 1.0)
FLOOR_ODD_COLOR = vec3(1.0, 0.7, 0.3)


@dataclass(frozen=True)
class LightInfo:
    """A point light.

    Attributes:
        position: Light position in world space.
        intensity: Scalar intensity, must be non-negative.

    Raises:
        ValueError: If the intensity is negative.
    """

    position: tuple[float, float, float]
    intensity: float

    def __post_init__(self) -> None:
        if self.intensity < 0.0:
            raise ValueError(f"Light intensity = {self.intensity} is negative.")


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: 1 if something was hit within MAX_DISTANCE, 0 otherwise.
        t: Distance along the ray to the hit.
        point: The hit point.
        normal: Unit surface normal (outward for spheres, +y for the floor).
        material: Material at the hit point.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


@dataclass(frozen=True)
class SceneHit:
    """Python-side copy of a SceneHitRecord returned by Scene.query()."""

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    refractive_index: float
    specular_exponent: float


@ti.func
def checkerboard_color(point: vec3) -> vec3:
    """Colour of the floor tile containing a point.

    Tiles are 2x2 units; the parity of floor(x/2) + floor(z/2) picks the
    colour (even: near-white, odd: warm tan), dimmed by FLOOR_DIM.
    """
    tile = ti.cast(ti.floor(0.5 * point.x), ti.i32) + ti.cast(ti.floor(0.5 * point.z), ti.i32)
    color = vec3(0.0, 0.0, 0.0)
    if (tile & 1) == 0:
        color = FLOOR_EVEN_COLOR * FLOOR_DIM
    else:
        color = FLOOR_ODD_COLOR * FLOOR_DIM
    return color


@ti.data_oriented
class Scene:
    """Spheres, lights and environment map, stored for kernel access.

    Attributes:
        spheres: The spheres in scene order.
        lights: The point lights.
        environment: The environment map.
    """

    def __init__(
        self,
        spheres: Sequence[SphereInfo],
        lights: Sequence[LightInfo],
        environment: Environment,
    ) -> None:
        self.spheres = tuple(spheres)
        self.lights = tuple(lights)
        self.environment = environment

        self.num_spheres = len(self.spheres)
        self.num_lights = len(self.lights)

        # Fields need at least one element; the counts bound every loop
        n_spheres = max(self.num_spheres, 1)
        n_lights = max(self.num_lights, 1)

        self._sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=n_spheres)
        self._sphere_radii = ti.field(dtype=ti.f32, shape=n_spheres)
        self._refractive_indices = ti.field(dtype=ti.f32, shape=n_spheres)
        self._albedos = ti.Vector.field(4, dtype=ti.f32, shape=n_spheres)
        self._diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=n_spheres)
        self._specular_exponents = ti.field(dtype=ti.f32, shape=n_spheres)

        self._light_positions = ti.Vector.field(3, dtype=ti.f32, shape=n_lights)
        self._light_intensities = ti.field(dtype=ti.f32, shape=n_lights)

        for idx, sphere in enumerate(self.spheres):
            material = sphere.material
            self._sphere_centers[idx] = sphere.center
            self._sphere_radii[idx] = sphere.radius
            self._refractive_indices[idx] = material.refractive_index
            self._albedos[idx] = material.albedo
            self._diffuse_colors[idx] = material.diffuse_color
            self._specular_exponents[idx] = material.specular_exponent

        for idx, light in enumerate(self.lights):
            self._light_positions[idx] = light.position
            self._light_intensities[idx] = light.intensity

        # Scratch storage for the Python-side query wrappers
        self._query_hit = SceneHitRecord.field(shape=())
        self._query_light = ti.Vector.field(2, dtype=ti.f32, shape=())

    # =========================================================================
    # Taichi-side queries
    # =========================================================================

    @ti.func
    def sphere_material(self, idx: ti.i32) -> Material:
        """Material of the sphere at the given index."""
        return Material(
            refractive_index=self._refractive_indices[idx],
            albedo=self._albedos[idx],
            diffuse_color=self._diffuse_colors[idx],
            specular_exponent=self._specular_exponents[idx],
        )

    @ti.func
    def intersect(self, origin: vec3, direction: vec3) -> SceneHitRecord:
        """Find the nearest hit among all spheres and the checkerboard floor.

        A later object replaces the current nearest hit only when strictly
        closer, so the first of several equally distant spheres wins.

        Args:
            origin: The ray origin.
            direction: The unit ray direction.

        Returns:
            The nearest hit, with hit == 0 when nothing lies within
            MAX_DISTANCE.
        """
        spheres_dist = FLOAT_MAX
        checkerboard_dist = FLOAT_MAX
        hit_point = vec3(0.0, 0.0, 0.0)
        hit_normal = vec3(0.0, 0.0, 0.0)
        material = default_material()

        for i in range(self.num_spheres):
            sphere = make_sphere(self._sphere_centers[i], self._sphere_radii[i])
            rec = hit_sphere(origin, direction, sphere)
            if rec.hit == 1 and rec.t < spheres_dist:
                spheres_dist = rec.t
                hit_point = rec.point
                hit_normal = rec.normal
                material = self.sphere_material(i)

        if ti.abs(direction.y) > FLOOR_PARALLEL_EPSILON:
            d = -(origin.y - FLOOR_HEIGHT) / direction.y
            pt = ray_at(make_ray(origin, direction), d)
            in_bounds = (
                ti.abs(pt.x) < FLOOR_HALF_WIDTH and pt.z < FLOOR_Z_NEAR and pt.z > FLOOR_Z_FAR
            )
            if d > 0.0 and in_bounds and d < spheres_dist:
                checkerboard_dist = d
                hit_point = pt
                hit_normal = vec3(0.0, 1.0, 0.0)
                # Floor material starts from the default, not the nearest sphere
                material = default_material()
                material.diffuse_color = checkerboard_color(pt)

        nearest = ti.min(spheres_dist, checkerboard_dist)
        did_hit = 0
        if nearest < MAX_DISTANCE:
            did_hit = 1

        return SceneHitRecord(
            hit=did_hit,
            t=nearest,
            point=hit_point,
            normal=hit_normal,
            material=material,
        )

    @ti.func
    def illuminate(
        self,
        point: vec3,
        normal: vec3,
        direction: vec3,
        specular_exponent: ti.f32,
    ) -> vec2:
        """Accumulate diffuse and specular light intensity at a surface point.

        Each light is tested with a shadow ray from the biased hit point. A
        light blocked by anything closer than the light itself contributes
        nothing (hard shadows).

        Args:
            point: The surface point.
            normal: Unit surface normal at the point.
            direction: Direction of the ray that hit the point.
            specular_exponent: Phong exponent of the surface.

        Returns:
            vec2(diffuse_intensity, specular_intensity).
        """
        diffuse = 0.0
        specular = 0.0
        for i in range(self.num_lights):
            to_light = self._light_positions[i] - point
            light_dir = tm.normalize(to_light)
            light_distance = length(to_light)
            intensity = self._light_intensities[i]

            shadow_orig = offset_origin(point, normal, light_dir)
            shadow = self.intersect(shadow_orig, light_dir)
            in_shadow = shadow.hit == 1 and length(shadow.point - shadow_orig) < light_distance

            if not in_shadow:
                diffuse += intensity * ti.max(0.0, dot(light_dir, normal))
                specular += (
                    ti.max(0.0, dot(reflect(light_dir, normal), direction)) ** specular_exponent
                    * intensity
                )
        return vec2(diffuse, specular)

    @ti.func
    def sample_environment(self, direction: vec3) -> vec3:
        """Radiance of a ray that leaves the scene."""
        return self.environment.sample(direction)

    # =========================================================================
    # Python-side wrappers
    # =========================================================================

    @ti.kernel
    def _query_kernel(self, ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
        self._query_hit[None] = self.intersect(vec3(ox, oy, oz), vec3(dx, dy, dz))

    @ti.kernel
    def _illumination_kernel(
        self,
        px: ti.f32,
        py: ti.f32,
        pz: ti.f32,
        nx: ti.f32,
        ny: ti.f32,
        nz: ti.f32,
        dx: ti.f32,
        dy: ti.f32,
        dz: ti.f32,
        specular_exponent: ti.f32,
    ):
        self._query_light[None] = self.illuminate(
            vec3(px, py, pz), vec3(nx, ny, nz), vec3(dx, dy, dz), specular_exponent
        )

    def query(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
    ) -> "SceneHit | None":
        """Intersect a single ray with the scene.

        Args:
            origin: The ray origin.
            direction: The unit ray direction.

        Returns:
            The nearest hit, or None on a miss.
        """
        self._query_kernel(*origin, *direction)
        rec = self._query_hit[None]
        if rec.hit == 0:
            return None
        material = rec.material
        return SceneHit(
            t=float(rec.t),
            point=_to_tuple(rec.point),
            normal=_to_tuple(rec.normal),
            diffuse_color=_to_tuple(material.diffuse_color),
            albedo=_to_tuple(material.albedo),
            refractive_index=float(material.refractive_index),
            specular_exponent=float(material.specular_exponent),
        )

    def illumination_at(
        self,
        point: Sequence[float],
        normal: Sequence[float],
        direction: Sequence[float],
        specular_exponent: float = 0.0,
    ) -> tuple[float, float]:
        """Compute (diffuse, specular) light intensity at a surface point.

        Args:
            point: The surface point.
            normal: Unit surface normal.
            direction: Direction of the viewing ray.
            specular_exponent: Phong exponent.

        Returns:
            Tuple of (diffuse_intensity, specular_intensity).
        """
        self._illumination_kernel(*point, *normal, *direction, specular_exponent)
        result = self._query_light[None]
        return float(result[0]), float(result[1])


def _to_tuple(v) -> tuple[float, ...]:
    return tuple(float(c) for c in v.to_list())
