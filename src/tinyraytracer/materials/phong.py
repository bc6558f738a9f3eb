"""Phong-style surface material with reflection and refraction weights.

A material combines four light transport terms, each weighted by one
component of its albedo:

    albedo[0]: diffuse (Lambert) shading of the diffuse colour
    albedo[1]: white specular highlight (Phong exponent)
    albedo[2]: mirror reflection
    albedo[3]: refraction through the surface

The weights need not sum to one, and nothing here clamps the result; range
handling happens when the image is written.

Example:
    >>> from tinyraytracer.materials.phong import MaterialInfo
    >>> glass = MaterialInfo(
    ...     refractive_index=1.5,
    ...     albedo=(0.0, 0.5, 0.1, 0.8),
    ...     diffuse_color=(0.6, 0.7, 0.8),
    ...     specular_exponent=125.0,
    ... )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Material parameters as seen by the shader.

    Attributes:
        refractive_index: Index of refraction (1.0 means no bending).
        albedo: Weights of the diffuse, specular, reflect and refract terms.
        diffuse_color: RGB colour of the diffuse term.
        specular_exponent: Sharpness of the specular highlight.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@ti.func
def default_material() -> Material:
    """Material used for surfaces without explicit parameters.

    Purely diffuse, black, no bending.
    """
    return Material(
        refractive_index=1.0,
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        diffuse_color=vec3(0.0, 0.0, 0.0),
        specular_exponent=0.0,
    )


@dataclass(frozen=True)
class MaterialInfo:
    """Python-side description of a material.

    Attributes:
        refractive_index: Index of refraction, must be positive.
        albedo: (diffuse, specular, reflect, refract) weights.
        diffuse_color: RGB diffuse colour, conceptually in [0, 1] (not clamped).
        specular_exponent: Non-negative Phong exponent.

    Raises:
        ValueError: If any parameter is out of range.
    """

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0

    def __post_init__(self) -> None:
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive."
            )
        if len(self.albedo) != 4:
            raise ValueError(f"Albedo must have 4 components, got {len(self.albedo)}")
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"Diffuse color must have 3 components, got {len(self.diffuse_color)}"
            )
        if self.specular_exponent < 0.0:
            raise ValueError(
                f"Specular exponent = {self.specular_exponent} is negative."
            )


# =============================================================================
# Material Presets
# =============================================================================

IVORY = MaterialInfo(
    refractive_index=1.0,
    albedo=(0.6, 0.3, 0.1, 0.0),
    diffuse_color=(0.4, 0.4, 0.3),
    specular_exponent=50.0,
)

GLASS = MaterialInfo(
    refractive_index=1.5,
    albedo=(0.0, 0.5, 0.1, 0.8),
    diffuse_color=(0.6, 0.7, 0.8),
    specular_exponent=125.0,
)

RED_RUBBER = MaterialInfo(
    refractive_index=1.0,
    albedo=(0.9, 0.1, 0.0, 0.0),
    diffuse_color=(0.3, 0.1, 0.1),
    specular_exponent=10.0,
)

MIRROR = MaterialInfo(
    refractive_index=1.0,
    albedo=(0.0, 10.0, 0.8, 0.0),
    diffuse_color=(1.0, 1.0, 1.0),
    specular_exponent=1425.0,
)
