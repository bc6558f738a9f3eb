"""Matplotlib-based preview display for rendered images.

Example:
    >>> from tinyraytracer.preview.display import show_preview
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from tinyraytracer.preview.export import tone_map_max

if TYPE_CHECKING:
    from tinyraytracer.core.shading import Renderer


def process_image_for_display(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Tone map and clamp a linear image for display.

    Uses the same max-channel scaling as the exporters, so the preview
    matches the written file up to quantization.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Float image in [0, 1] range.
    """
    result = np.clip(tone_map_max(image), 0.0, 1.0)
    return result.astype(np.float32)


def show_preview(
    source: Renderer | npt.NDArray[np.float32],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (10.64, 7.68),
    block: bool = True,
) -> None:
    """Display a render as a Matplotlib figure.

    Args:
        source: A Renderer that has rendered, or a linear (H, W, 3) image.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    if isinstance(source, np.ndarray):
        image = source
    else:
        image = source.get_image_numpy()

    display_image = process_image_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
