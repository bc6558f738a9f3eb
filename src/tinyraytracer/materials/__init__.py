"""Materials module.

Components:
    phong: Material struct, MaterialInfo configuration and presets
"""

from .phong import (
    GLASS,
    IVORY,
    MIRROR,
    RED_RUBBER,
    Material,
    MaterialInfo,
    default_material,
)

__all__ = [
    "Material",
    "MaterialInfo",
    "default_material",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
]
