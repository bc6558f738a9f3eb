"""Image export utilities for rendered framebuffers.

Framebuffer values are unclamped linear RGB. Before quantization each pixel
whose brightest channel exceeds 1.0 is scaled down by that channel, which
keeps the hue instead of clipping channels independently. Values are then
clamped to [0, 1] and truncated to 8 bits.

Supported formats:
    - PPM (binary P6, written directly)
    - PNG and anything else Pillow can write

Example:
    >>> from tinyraytracer.preview.export import save_image
    >>> renderer.render()
    >>> save_image(renderer.get_image_numpy(), "out.ppm")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def tone_map_max(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Scale down pixels whose brightest channel exceeds 1.0.

    Each such pixel is multiplied by 1 / max(r, g, b). Pixels with all
    channels at or below 1.0 are returned unchanged.

    Args:
        image: Linear image array of shape (..., 3).

    Returns:
        The tone mapped image (float32, same shape).
    """
    image = np.asarray(image, dtype=np.float32)
    peak = image.max(axis=-1, keepdims=True)
    scale = np.ones_like(peak)
    over = peak > 1.0
    scale[over] = np.float32(1.0) / peak[over]
    return (image * scale).astype(np.float32)


def image_to_uint8(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit for export.

    Applies tone_map_max(), clamps to [0, 1] and truncates 255 * value.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(tone_map_max(image), 0.0, 1.0)
    return (clamped * 255).astype(np.uint8)


def encode_ppm(image: npt.NDArray[np.float32]) -> bytes:
    """Encode an image as a binary PPM (P6).

    The output is the ASCII header "P6\\n<width> <height>\\n255\\n" followed by
    raw RGB bytes, row by row from the top.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        The encoded file contents.

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (height, width, 3), got {image.shape}")

    height, width = image.shape[:2]
    header = f"P6\n{width} {height}\n255\n".encode("ascii")
    return header + image_to_uint8(image).tobytes()


def save_ppm(image: npt.NDArray[np.float32], filepath: str | Path) -> None:
    """Save a linear image as a binary PPM file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
    """
    Path(filepath).write_bytes(encode_ppm(image))


def save_png(image: npt.NDArray[np.float32], filepath: str | Path) -> None:
    """Save a linear image as an 8-bit PNG (or any format Pillow infers).

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
    """
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)


def save_image(image: npt.NDArray[np.float32], filepath: str | Path) -> None:
    """Save a linear image, choosing the format from the file extension.

    ".ppm" (or no extension) writes a binary PPM; other extensions go
    through Pillow.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix in ("", ".ppm"):
        save_ppm(image, filepath)
    else:
        save_png(image, filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
