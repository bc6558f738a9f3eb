"""Scene module for scene description and ray-scene queries.

Components:
    environment: Spherical environment map for escaping rays
    scene: Scene container, nearest-hit intersection, light visibility
    default_scene: The documented four-sphere scene
"""

from .default_scene import (
    DEFAULT_FOV,
    DEFAULT_HEIGHT,
    DEFAULT_LIGHTS,
    DEFAULT_SPHERES,
    DEFAULT_WIDTH,
    create_default_camera,
    create_default_scene,
)
from .environment import Environment
from .scene import (
    MAX_DISTANCE,
    LightInfo,
    Scene,
    SceneHit,
    SceneHitRecord,
    checkerboard_color,
)

__all__ = [
    # Environment map
    "Environment",
    # Scene
    "Scene",
    "LightInfo",
    "SceneHit",
    "SceneHitRecord",
    "checkerboard_color",
    "MAX_DISTANCE",
    # Default scene
    "create_default_scene",
    "create_default_camera",
    "DEFAULT_SPHERES",
    "DEFAULT_LIGHTS",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_FOV",
]
