"""Recursive Whitted-style ray caster and frame renderer.

Shading a ray at depth d:

1. If d > MAX_DEPTH, or the ray hits nothing, return the environment map
   sample for the ray direction.
2. Otherwise, at the hit point:
   - accumulate diffuse and specular intensity from every unshadowed light
   - shade the reflected ray at depth d + 1
   - shade the refracted ray at depth d + 1 (total internal reflection sends
     it along the fixed direction (1, 0, 0))
   - combine
        diffuse_color * diffuse * albedo[0]
        + white * specular * albedo[1]
        + reflect_color * albedo[2]
        + refract_color * albedo[3]

Taichi functions cannot call themselves, so the recursion runs on an explicit
per-thread stack of frames held in Taichi fields, one frame per depth. A
frame moves through three stages: on entry it shades the hit locally and
pushes the reflected ray; when that returns it stores the colour and pushes
the refracted ray; when that returns it combines the terms and pops. The
combination is evaluated in the same order as the formula above.

The image is rendered in bands of pixels, one kernel launch per band; each
thread of a band owns one stack slot. The result is fully deterministic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyraytracer.core.shading import Renderer
    >>> from tinyraytracer.scene.default_scene import create_default_scene
    >>> from tinyraytracer.scene.environment import Environment
    >>>
    >>> scene = create_default_scene(Environment.from_file("envmap.jpg"))
    >>> renderer = Renderer(scene, 1064, 768)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from tinyraytracer.camera.pinhole import PinholeCamera, primary_direction
from tinyraytracer.core.ray import normalize, offset_origin, reflect, refract
from tinyraytracer.scene.scene import Scene

# Type aliases for vectors
vec2 = tm.vec2
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest shaded recursion level; rays at MAX_DEPTH + 1 sample the environment
MAX_DEPTH = 4

# Frames per stack slot (depths 0..MAX_DEPTH + 1)
STACK_DEPTH = MAX_DEPTH + 2

# Pixels traced per kernel launch
DEFAULT_BAND_SIZE = 65536

# Frame stages
STAGE_ENTER = 0
STAGE_REFLECTED = 1
STAGE_REFRACTED = 2

# Refractive index of the medium outside every object
AIR_REFRACTIVE_INDEX = 1.0

WHITE = vec3(1.0, 1.0, 1.0)

# Callback receives (pixels_done, total_pixels)
ProgressCallback = Callable[[int, int], None]


@ti.data_oriented
class Renderer:
    """Renders a Scene through a pinhole camera into a framebuffer.

    The framebuffer holds one RGB value per pixel, indexed i + j * width with
    row j = 0 at the top. Values are unclamped and may exceed 1.0.

    Attributes:
        scene: The scene being rendered.
        camera: The camera configuration.
    """

    def __init__(
        self,
        scene: Scene,
        width: int,
        height: int,
        camera: PinholeCamera | None = None,
        *,
        band_size: int = DEFAULT_BAND_SIZE,
    ) -> None:
        """Initialize the renderer and allocate its buffers.

        Args:
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.
            camera: Camera configuration (default: 90 degrees at the origin).
            band_size: Number of pixels traced per kernel launch.

        Raises:
            ValueError: If a dimension or the band size is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
        if band_size <= 0:
            raise ValueError(f"Band size = {band_size} must be positive")

        self.scene = scene
        self.camera = camera if camera is not None else PinholeCamera()
        self._width = width
        self._height = height
        self._band_size = min(band_size, width * height)
        self._rendered = False

        self._framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=width * height)

        # Per-thread frame stacks, one frame per recursion depth
        stack_shape = (self._band_size, STACK_DEPTH)
        self._stage = ti.field(dtype=ti.i32, shape=stack_shape)
        self._ray_orig = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._ray_dir = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._refract_orig = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._refract_dir = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._local_color = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._reflect_color = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._weights = ti.Vector.field(2, dtype=ti.f32, shape=stack_shape)

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return self._height

    # =========================================================================
    # Ray Casting (Taichi side)
    # =========================================================================

    @ti.func
    def _push(self, slot: ti.i32, depth: ti.i32, origin: vec3, direction: vec3):
        self._ray_orig[slot, depth] = origin
        self._ray_dir[slot, depth] = direction
        self._stage[slot, depth] = STAGE_ENTER

    @ti.func
    def _enter(self, slot: ti.i32, depth: ti.i32, origin: vec3, direction: vec3) -> ti.i32:
        """Shade the local terms of a frame and set up its secondary rays.

        Returns:
            1 if the frame was set up, 0 if the ray escaped (nothing stored).
        """
        rec = self.scene.intersect(origin, direction)
        if rec.hit == 1:
            material = rec.material
            point = rec.point
            normal = rec.normal

            reflect_dir = normalize(reflect(direction, normal))
            reflect_orig = offset_origin(point, normal, reflect_dir)

            refract_dir = normalize(
                refract(direction, normal, material.refractive_index, AIR_REFRACTIVE_INDEX)
            )
            refract_orig = offset_origin(point, normal, refract_dir)

            light = self.scene.illuminate(point, normal, direction, material.specular_exponent)
            albedo = material.albedo

            self._local_color[slot, depth] = (
                material.diffuse_color * light[0] * albedo[0] + WHITE * light[1] * albedo[1]
            )
            self._weights[slot, depth] = vec2(albedo[2], albedo[3])
            self._refract_orig[slot, depth] = refract_orig
            self._refract_dir[slot, depth] = refract_dir
            self._stage[slot, depth] = STAGE_REFLECTED
            self._push(slot, depth + 1, reflect_orig, reflect_dir)
        return rec.hit

    @ti.func
    def trace(self, slot: ti.i32, origin: vec3, direction: vec3) -> vec3:
        """Shade a ray starting at depth 0.

        Args:
            slot: Stack slot owned by the calling thread.
            origin: The ray origin.
            direction: The unit ray direction.

        Returns:
            The RGB radiance along the ray (unclamped).
        """
        self._push(slot, 0, origin, direction)
        depth = 0
        color = vec3(0.0, 0.0, 0.0)

        while depth >= 0:
            stage = self._stage[slot, depth]
            if stage == STAGE_ENTER:
                ray_dir = self._ray_dir[slot, depth]
                entered = 0
                if depth <= MAX_DEPTH:
                    entered = self._enter(slot, depth, self._ray_orig[slot, depth], ray_dir)
                if entered == 1:
                    depth += 1
                else:
                    color = self.scene.sample_environment(ray_dir)
                    depth -= 1
            elif stage == STAGE_REFLECTED:
                self._reflect_color[slot, depth] = color
                self._stage[slot, depth] = STAGE_REFRACTED
                self._push(
                    slot,
                    depth + 1,
                    self._refract_orig[slot, depth],
                    self._refract_dir[slot, depth],
                )
                depth += 1
            else:
                weights = self._weights[slot, depth]
                color = (
                    self._local_color[slot, depth]
                    + self._reflect_color[slot, depth] * weights[0]
                    + color * weights[1]
                )
                depth -= 1

        return color

    # =========================================================================
    # Rendering Kernels
    # =========================================================================

    @ti.kernel
    def _render_band(
        self,
        start: ti.i32,
        count: ti.i32,
        plane_distance: ti.f32,
        ox: ti.f32,
        oy: ti.f32,
        oz: ti.f32,
    ):
        """Trace the pixels start .. start + count - 1 into the framebuffer."""
        for slot in range(count):
            pixel = start + slot
            i = pixel % self._width
            j = pixel // self._width
            direction = primary_direction(i, j, self._width, self._height, plane_distance)
            self._framebuffer[pixel] = self.trace(slot, vec3(ox, oy, oz), direction)

    @ti.kernel
    def _cast_single(
        self,
        ox: ti.f32,
        oy: ti.f32,
        oz: ti.f32,
        dx: ti.f32,
        dy: ti.f32,
        dz: ti.f32,
    ) -> vec3:
        return self.trace(0, vec3(ox, oy, oz), vec3(dx, dy, dz))

    # =========================================================================
    # Public Rendering API
    # =========================================================================

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the full image in a single pass.

        Args:
            callback: Optional function called after each band with
                (pixels_done, total_pixels).
        """
        total = self._width * self._height
        plane_distance = self.camera.image_plane_distance(self._height)
        ox, oy, oz = self.camera.position

        for start in range(0, total, self._band_size):
            count = min(self._band_size, total - start)
            self._render_band(start, count, plane_distance, ox, oy, oz)
            if callback is not None:
                callback(start + count, total)

        self._rendered = True

    def cast_ray(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
    ) -> tuple[float, float, float]:
        """Shade a single ray at depth 0.

        Args:
            origin: The ray origin.
            direction: The ray direction, unit length.

        Returns:
            Tuple of (R, G, B), unclamped.
        """
        color = self._cast_single(*origin, *direction)
        return float(color[0]), float(color[1]), float(color[2])

    def _check_rendered(self) -> None:
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

    def get_framebuffer(self) -> npt.NDArray[np.float32]:
        """Get the framebuffer as an array of shape (width * height, 3).

        Raises:
            RuntimeError: If render() has not been called.
        """
        self._check_rendered()
        return self._framebuffer.to_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as an array of shape (height, width, 3).

        Row 0 is the top of the image. Values are unclamped.

        Raises:
            RuntimeError: If render() has not been called.
        """
        return self.get_framebuffer().reshape(self._height, self._width, 3)
