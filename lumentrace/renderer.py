"""
Renderer module - the heart of the ray tracer.

Implements:
- Bounded path tracing (depth budget, absorption, sky on miss)
- Per-pixel supersampling with gamma correction
- Tile-parallel rendering on thread or process pools
- Seeded, schedule-independent random streams per tile
"""

from __future__ import annotations
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging
import math
import os
import time

import numpy as np

from .vec3 import Color
from .ray import Ray
from .interval import Interval
from .camera import Camera
from .shapes import Hittable
from .sampling import Sampler, SeedLike, seed_sequences

logger = logging.getLogger(__name__)

# Lower bound on hit distance; avoids shadow acne on secondary rays
T_MIN = 0.001

SKY_HORIZON = Color(1.0, 1.0, 1.0)
SKY_ZENITH = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Execution options for the renderer.

    Image size, samples and depth live on the Camera; these only control
    how the work is scheduled and seeded.
    """
    num_threads: int = 0  # 0 = auto-detect
    tile_size: int = 16
    seed: Optional[int] = None
    use_processes: bool = False

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4
        if self.num_threads < 1:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")


def sky_color(ray: Ray) -> Color:
    """Vertical gradient from white (looking down) to sky blue (looking up)."""
    unit_direction = ray.direction.normalize()
    a = 0.5 * (unit_direction.y + 1.0)
    return SKY_HORIZON.lerp(SKY_ZENITH, a)


def ray_color(ray: Ray, depth: int, scene: Hittable, sampler: Sampler) -> Color:
    """Trace a ray through the scene and return the light it carries back.

    Each bounce multiplies the running throughput by the material's
    attenuation. The path ends black when the depth budget runs out or a
    material absorbs it, and picks up the sky color when it escapes.

    Args:
        ray: The ray to trace
        depth: Maximum number of bounces; 0 returns black
        scene: Anything hittable, usually a Scene
        sampler: Random source owned by the calling task

    Returns:
        Linear RGB radiance
    """
    throughput = Color(1.0, 1.0, 1.0)
    window = Interval(T_MIN, math.inf)

    for _ in range(depth):
        found = scene.hit(ray, window)
        if found is None:
            return throughput * sky_color(ray)

        hit, material = found
        result = material.scatter(ray, hit, sampler)
        if result is None:
            return BLACK

        ray, attenuation = result
        throughput = throughput * attenuation

    return BLACK


def linear_to_gamma(color: Color) -> Color:
    """Gamma 2 transform: per-channel square root."""
    return color.sqrt()


def generate_tiles(width: int, height: int, tile_size: int) -> List[Tile]:
    """Split the image into row-major tiles of (x0, y0, x1, y1)."""
    tiles = []
    for y in range(0, height, tile_size):
        for x in range(0, width, tile_size):
            tiles.append((x, y, min(x + tile_size, width), min(y + tile_size, height)))
    return tiles


def render_pixel(camera: Camera, scene: Hittable, i: int, j: int, sampler: Sampler) -> Color:
    """Average all samples of pixel (i, j) and gamma-correct the mean."""
    pixel_sum = Color(0.0, 0.0, 0.0)
    for _ in range(camera.samples_per_pixel):
        ray = camera.get_ray(i, j, sampler)
        pixel_sum = pixel_sum + ray_color(ray, camera.max_depth, scene, sampler)
    return linear_to_gamma(pixel_sum / camera.samples_per_pixel)


def render_tile(camera: Camera, scene: Hittable, tile: Tile, seed: SeedLike) -> Tuple[Tile, np.ndarray]:
    """Render one tile with its own sampler.

    Module-level so process pools can pickle it.
    """
    x0, y0, x1, y1 = tile
    sampler = Sampler(seed)
    tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

    for j in range(y0, y1):
        for i in range(x0, x1):
            tile_image[j - y0, i - x0] = render_pixel(camera, scene, i, j, sampler).to_array()

    return tile, tile_image


class Renderer:
    """Tile-parallel renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Execution options (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[int], None]] = None

    def set_progress_callback(self, callback: Callable[[int], None]) -> None:
        """Set a callback receiving the number of pixels finished since the last call.

        The total is `camera.total_pixels`. Called from the rendering thread
        only; it never affects the image.
        """
        self._progress_callback = callback

    def _executor(self) -> Executor:
        if self.settings.use_processes:
            return ProcessPoolExecutor(max_workers=self.settings.num_threads)
        return ThreadPoolExecutor(max_workers=self.settings.num_threads)

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return gamma-corrected pixels.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Array of shape (image_height, image_width, 3), row 0 at the top
        """
        width, height = camera.image_width, camera.image_height
        image = np.zeros((height, width, 3), dtype=np.float64)

        tiles = generate_tiles(width, height, self.settings.tile_size)
        seeds = seed_sequences(self.settings.seed, len(tiles))

        logger.info("Rendering %dx%d, %d spp, depth %d, %d tiles on %d worker(s)",
                    width, height, camera.samples_per_pixel, camera.max_depth,
                    len(tiles), self.settings.num_threads)
        start = time.perf_counter()

        if self.settings.num_threads > 1:
            with self._executor() as executor:
                futures = [
                    executor.submit(render_tile, camera, scene, tile, seed)
                    for tile, seed in zip(tiles, seeds)
                ]
                for future in as_completed(futures):
                    self._store(image, *future.result())
        else:
            for tile, seed in zip(tiles, seeds):
                self._store(image, *render_tile(camera, scene, tile, seed))

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image

    def _store(self, image: np.ndarray, tile: Tile, tile_image: np.ndarray) -> None:
        x0, y0, x1, y1 = tile
        image[y0:y1, x0:x1] = tile_image
        logger.debug("Tile (%d, %d)-(%d, %d) done", x0, y0, x1, y1)
        if self._progress_callback:
            self._progress_callback((x1 - x0) * (y1 - y0))
