"""Preview module for output and visualization.

Components:
    export: Tone mapping and PPM/PNG export
    display: Matplotlib-based preview

Example:
    >>> from tinyraytracer.preview import save_image, show_preview
    >>> renderer.render()
    >>> save_image(renderer.get_image_numpy(), "out.ppm")
    >>> show_preview(renderer)
"""

from tinyraytracer.preview.display import process_image_for_display, show_preview
from tinyraytracer.preview.export import (
    compute_rmse,
    encode_ppm,
    image_to_uint8,
    save_image,
    save_png,
    save_ppm,
    tone_map_max,
)

__all__ = [
    # Display functions
    "show_preview",
    "process_image_for_display",
    # Export functions
    "tone_map_max",
    "image_to_uint8",
    "encode_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
]
