#!/usr/bin/env python3
"""Render the default sphere scene.

This script renders the four-sphere scene over the checkerboard floor with
an environment map backdrop and writes the result as a PPM (or any format
Pillow can write, chosen by extension).

Usage:
    python -m examples.render_default_scene --envmap ENVMAP [options]

Options:
    --envmap ENVMAP     Environment map image, 3-channel RGB (required)
    --width WIDTH       Image width in pixels (default: 1064)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov FOV           Field of view in degrees (default: 90)
    --output OUTPUT     Output file path (default: out.ppm)
    --arch {cpu,gpu}    Taichi backend (default: gpu, falls back to cpu)
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_default_scene --envmap envmap.jpg --output out.png
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--envmap",
        type=str,
        required=True,
        help="Environment map image, 3-channel RGB",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1064,
        help="Image width in pixels (default: 1064)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path (default: out.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_default_scene(
    envmap_path: str,
    width: int = 1064,
    height: int = 768,
    fov: float = 90.0,
    output_path: str = "out.ppm",
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the default scene and save it to a file.

    Args:
        envmap_path: Environment map image path.
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Field of view in degrees.
        output_path: Output file path.
        preview: If True, show the result with Matplotlib afterwards.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from tinyraytracer.core.shading import Renderer
    from tinyraytracer.preview.display import show_preview
    from tinyraytracer.preview.export import save_image
    from tinyraytracer.scene.default_scene import create_default_camera, create_default_scene
    from tinyraytracer.scene.environment import Environment

    if not quiet:
        print(f"Loading environment map {envmap_path}...")
    environment = Environment.from_file(envmap_path)

    scene = create_default_scene(environment)
    renderer = Renderer(scene, width, height, create_default_camera(fov))

    if not quiet:
        print(f"Rendering {width}x{height}...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} pixels ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_image(renderer.get_image_numpy(), output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        show_preview(renderer)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.arch == "gpu":
        # Use GPU if available, fall back to CPU
        try:
            ti.init(arch=ti.gpu)
        except Exception:
            ti.init(arch=ti.cpu)
    else:
        ti.init(arch=ti.cpu)

    try:
        render_default_scene(
            envmap_path=args.envmap,
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
