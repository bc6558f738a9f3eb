"""The default sphere scene.

Four spheres above the checkerboard floor, lit by three point lights:

- ivory sphere on the left
- glass sphere in front, refracting the scene behind it
- red rubber sphere in the back
- large mirror sphere up and to the right

Rendered at 1064x768 through a 90 degree camera at the origin.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinyraytracer.scene.default_scene import (
    ...     create_default_camera, create_default_scene,
    ... )
    >>> from tinyraytracer.scene.environment import Environment
    >>> scene = create_default_scene(Environment.from_file("envmap.jpg"))
    >>> camera = create_default_camera()
"""

from tinyraytracer.camera.pinhole import PinholeCamera
from tinyraytracer.geometry.sphere import SphereInfo
from tinyraytracer.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER
from tinyraytracer.scene.environment import Environment
from tinyraytracer.scene.scene import LightInfo, Scene

# =============================================================================
# Default Scene Constants
# =============================================================================

DEFAULT_WIDTH = 1064
DEFAULT_HEIGHT = 768
DEFAULT_FOV = 90.0

DEFAULT_SPHERES = (
    SphereInfo(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),
    SphereInfo(center=(-1.0, -1.5, -12.0), radius=2.0, material=GLASS),
    SphereInfo(center=(1.5, -0.5, -18.0), radius=3.0, material=RED_RUBBER),
    SphereInfo(center=(7.0, 5.0, -18.0), radius=4.0, material=MIRROR),
)

DEFAULT_LIGHTS = (
    LightInfo(position=(-20.0, 20.0, 20.0), intensity=1.5),
    LightInfo(position=(30.0, 50.0, -25.0), intensity=1.8),
    LightInfo(position=(30.0, 20.0, 30.0), intensity=1.7),
)


def create_default_scene(environment: Environment) -> Scene:
    """Create the default four-sphere scene.

    Args:
        environment: The environment map for escaping rays.

    Returns:
        The scene.
    """
    return Scene(spheres=DEFAULT_SPHERES, lights=DEFAULT_LIGHTS, environment=environment)


def create_default_camera(fov: float = DEFAULT_FOV) -> PinholeCamera:
    """Create the default camera at the origin looking down -z."""
    return PinholeCamera(position=(0.0, 0.0, 0.0), fov=fov)
