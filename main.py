#!/usr/bin/env python3
"""
Lumentrace - A Python Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import os
import platform
import sys
import time
from typing import List, Optional

from tqdm import tqdm

from lumentrace.camera import CameraBuilder, CameraConfigError
from lumentrace.logging_config import setup_logging
from lumentrace.ppm import write_ppm
from lumentrace.renderer import Renderer, RenderSettings
from lumentrace.scene_parser import SceneParseError, load_scene
from lumentrace.scenes import SCENES, get_scene

logger = logging.getLogger("lumentrace.main")


def get_platform_info() -> dict:
    """Describe the host interpreter and CPU."""
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'python_version': platform.python_version(),
        'cpu_count': os.cpu_count(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Lumentrace - A Python Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene materials --output materials.ppm
  python main.py --scene final --width 1200 --samples 500 --seed 42
  python main.py --scene-file scenes/three_balls.yaml --threads 8
        '''
    )

    scene_group = parser.add_mutually_exclusive_group()
    scene_group.add_argument('--scene', type=str, default='default', choices=sorted(SCENES),
                             help='Built-in scene to render (default: default)')
    scene_group.add_argument('--scene-file', type=str, default=None,
                             help='YAML or JSON scene description')

    # Camera overrides; None keeps the scene's preset
    parser.add_argument('--width', type=int, default=None, help='Image width in pixels')
    parser.add_argument('--aspect-ratio', type=float, default=None, help='Width / height ratio')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel')
    parser.add_argument('--depth', type=int, default=None, help='Max ray bounces')
    parser.add_argument('--vfov', type=float, default=None, help='Vertical field of view in degrees')
    parser.add_argument('--defocus-angle', type=float, default=None, help='Lens cone angle in degrees')
    parser.add_argument('--focus-dist', type=float, default=None, help='Distance to the focus plane')

    parser.add_argument('--threads', type=int, default=None, help='Number of workers (0=auto)')
    parser.add_argument('--tile-size', type=int, default=None, help='Tile edge in pixels')
    parser.add_argument('--processes', action='store_true', help='Use processes instead of threads')
    parser.add_argument('--seed', type=int, default=None, help='Seed for reproducible output')

    parser.add_argument('--output', type=str, default='image.ppm', help='Output filename (default: image.ppm)')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    return parser


def apply_camera_overrides(builder: CameraBuilder, args: argparse.Namespace) -> CameraBuilder:
    if args.width is not None:
        builder.set_image_width(args.width)
    if args.aspect_ratio is not None:
        builder.set_aspect_ratio(args.aspect_ratio)
    if args.samples is not None:
        builder.set_samples_per_pixel(args.samples)
    if args.depth is not None:
        builder.set_max_depth(args.depth)
    if args.vfov is not None:
        builder.set_vfov(args.vfov)
    if args.defocus_angle is not None or args.focus_dist is not None:
        builder.set_focus(
            args.defocus_angle if args.defocus_angle is not None else builder.defocus_angle,
            args.focus_dist if args.focus_dist is not None else builder.focus_dist,
        )
    return builder


def apply_settings_overrides(settings: RenderSettings, args: argparse.Namespace) -> RenderSettings:
    changes = {}
    if args.threads is not None:
        changes['num_threads'] = args.threads
    if args.tile_size is not None:
        changes['tile_size'] = args.tile_size
    if args.seed is not None:
        changes['seed'] = args.seed
    if args.processes:
        changes['use_processes'] = True
    return dataclasses.replace(settings, **changes) if changes else settings


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging('DEBUG' if args.verbose else 'INFO')

    if args.info:
        info = get_platform_info()
        print("Lumentrace Platform Info:")
        for key, value in info.items():
            print(f"  {key}: {value}")
        return 0

    try:
        if args.scene_file:
            logger.info("Loading scene file: %s", args.scene_file)
            world, builder, settings = load_scene(args.scene_file)
        else:
            logger.info("Creating scene: %s", args.scene)
            world, builder = get_scene(args.scene, args.seed)
            settings = RenderSettings()

        settings = apply_settings_overrides(settings, args)
        camera = apply_camera_overrides(builder, args).build()
    except (SceneParseError, CameraConfigError, ValueError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Objects in scene: %d", len(world))
    logger.info("Resolution: %dx%d, samples: %d, max depth: %d, workers: %d",
                camera.image_width, camera.image_height, camera.samples_per_pixel,
                camera.max_depth, settings.num_threads)

    renderer = Renderer(settings)
    start_time = time.time()

    with tqdm(total=camera.total_pixels, unit='px', desc='Rendering',
              disable=args.no_progress) as progress:
        renderer.set_progress_callback(progress.update)
        image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    rays = camera.total_pixels * camera.samples_per_pixel
    logger.info("Render completed in %.2f seconds (%.0f samples/s)", elapsed, rays / max(elapsed, 1e-9))

    try:
        write_ppm(args.output, image)
    except OSError as e:
        logger.error("Cannot write %s: %s", args.output, e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
