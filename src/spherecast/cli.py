"""Command-line entry point: render a JSON sphere scene to a PNG image.

Usage:
    spherecast SCENE.json [options]

Options:
    -o, --output OUTPUT           Output file path (default: SCENE.png)
    -w, --width WIDTH             Image width in pixels (default: 1920)
    -H, --height HEIGHT           Image height in pixels (default: 1080)
    -s, --samples SAMPLES         Samples per pixel (default: 100)
    -l, --camera-location (x,y,z) Camera position (default: (0,0,0))
    -d, --camera-direction (x,y,z)
                                  Viewing direction (default: (0,0,-1))
    -b, --background NAME         bluegradient or black (default: bluegradient)
    -f, --focal-length LENGTH     Size the viewport by focal length instead of FOV
    --fov DEGREES                 Horizontal field of view (default: 80)
    --seed SEED                   Random seed for reproducible renders
    -j, --workers N               Worker processes (default: CPU count)
    --backend {cpu,taichi}        Rendering backend (default: cpu)
    --full-sphere-scatter         Scatter over the whole unit ball
    --quiet                       Suppress progress output

Example:
    spherecast scenes/three_spheres.json -w 640 -H 360 -s 32 --seed 1
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from spherecast.config import BACKENDS, RenderConfig
from spherecast.core.renderer import Renderer
from spherecast.errors import ConfigurationError, SpherecastError
from spherecast.scene.loader import load_scene


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="spherecast",
        description="Render a JSON scene of colored spheres to a PNG image.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        help="Scene file name (must end in .json)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file name (must end in .png, default: scene name with .png)",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: 1920)",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: 1080)",
    )
    parser.add_argument(
        "-s",
        "--samples",
        type=int,
        default=None,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "-l",
        "--camera-location",
        default=None,
        help="Camera location as (x,y,z) (default: (0,0,0))",
    )
    parser.add_argument(
        "-d",
        "--camera-direction",
        default=None,
        help="Camera direction as (x,y,z), normalized (default: (0,0,-1))",
    )
    parser.add_argument(
        "-b",
        "--background",
        default=None,
        help="Background: bluegradient or black (default: bluegradient)",
    )
    parser.add_argument(
        "-f",
        "--focal-length",
        type=float,
        default=None,
        help="Focal length; overrides the field of view when given",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=None,
        help="Horizontal field of view in degrees (default: 80)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible render",
    )
    parser.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (default: CPU count)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="cpu",
        help="Rendering backend (default: cpu)",
    )
    parser.add_argument(
        "--full-sphere-scatter",
        action="store_true",
        help="Draw diffuse scatter offsets from the whole unit ball",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def resolve_output_path(scene: str, output: str | None) -> Path:
    """Check the scene and output file names and derive the default output.

    Raises:
        ConfigurationError: If the scene does not end in .json or the output
            does not end in .png.
    """
    if not scene.endswith(".json"):
        raise ConfigurationError(f"scene file must end in .json, got {scene!r}")
    if output is None:
        return Path(scene[: -len(".json")] + ".png")
    if not output.endswith(".png"):
        raise ConfigurationError(f"output file must end in .png, got {output!r}")
    return Path(output)


def _init_taichi(seed: int | None, quiet: bool) -> None:
    try:
        import taichi as ti
    except ImportError as e:
        raise ConfigurationError(
            "the taichi backend requires the taichi package "
            "(install spherecast[taichi])"
        ) from e

    # Use GPU if available, fall back to CPU
    seed = seed if seed is not None else 0
    try:
        ti.init(arch=ti.gpu, random_seed=seed)
        if not quiet:
            print("Using Taichi GPU backend")
    except Exception:
        ti.init(arch=ti.cpu, random_seed=seed)
        if not quiet:
            print("Using Taichi CPU backend")


def render_scene(args: argparse.Namespace) -> Path:
    """Load, render and save the scene described by parsed arguments.

    Returns:
        Path to the saved image file.
    """
    output_file = resolve_output_path(args.scene, args.output)
    config = RenderConfig.from_args(args)
    if args.workers is None:
        config.workers = os.cpu_count() or 1
    spheres = load_scene(args.scene)

    # Builds the viewport, so configuration errors surface before rendering
    renderer = Renderer(config, spheres)

    if config.backend == "taichi":
        _init_taichi(config.seed, args.quiet)

    if not args.quiet:
        print(
            f"Rendering {len(spheres)} spheres at {config.width}x{config.height}, "
            f"{config.multisampling} samples per pixel..."
        )

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not args.quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            print(
                f"\r  Progress: {current}/{target} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not args.quiet:
        print()  # Newline after progress

    renderer.save_image(str(output_file))

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        render_scene(args)
        return 0
    except (SpherecastError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
