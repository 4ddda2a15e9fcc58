"""
Camera module for generating primary rays.

Supports:
- Perspective projection with configurable vertical field of view
- Arbitrary positioning via look-from / look-at / up
- Depth of field (defocus disk)
- Antialiasing by jittering each sample inside its pixel

A Camera is built once through CameraBuilder and is read-only afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .sampling import Sampler

logger = logging.getLogger(__name__)


class CameraConfigError(ValueError):
    """Raised when builder parameters cannot describe a camera."""


@dataclass(frozen=True)
class Camera:
    """Fully derived camera geometry plus sampling parameters."""
    image_width: int
    image_height: int
    samples_per_pixel: int
    max_depth: int
    center: Point3
    pixel00_loc: Point3
    pixel_delta_u: Vec3
    pixel_delta_v: Vec3
    u: Vec3
    v: Vec3
    w: Vec3
    defocus_angle: float
    defocus_disk_u: Vec3
    defocus_disk_v: Vec3

    @property
    def total_pixels(self) -> int:
        """Units of work in one render, for progress reporting."""
        return self.image_width * self.image_height

    def get_ray(self, i: int, j: int, sampler: Sampler) -> Ray:
        """Generate a randomly jittered ray through pixel (i, j).

        Args:
            i: Column, 0 at the left edge
            j: Row, 0 at the top edge
            sampler: Random source owned by the calling task

        Returns:
            A ray from the camera center (or a point on the defocus disk)
            towards a random location inside the pixel
        """
        pixel_center = self.pixel00_loc + self.pixel_delta_u * i + self.pixel_delta_v * j
        pixel_sample = pixel_center + self.pixel_sample_square(sampler)

        ray_origin = self.center if self.defocus_angle <= 0 else self.defocus_disk_sample(sampler)
        return Ray(ray_origin, pixel_sample - ray_origin)

    def pixel_sample_square(self, sampler: Sampler) -> Vec3:
        """Random offset within one pixel's footprint."""
        px = -0.5 + sampler.uniform()
        py = -0.5 + sampler.uniform()
        return self.pixel_delta_u * px + self.pixel_delta_v * py

    def defocus_disk_sample(self, sampler: Sampler) -> Point3:
        """Random point on the camera's defocus disk."""
        p = sampler.in_unit_disk()
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y


class CameraBuilder:
    """Fluent builder collecting camera parameters before derivation.

    Every setter returns the builder so calls can be chained:

        camera = (CameraBuilder()
                  .set_image_width(800)
                  .set_vfov(20.0)
                  .set_view_direction(Point3(13, 2, 3), Point3(0, 0, 0))
                  .set_focus(0.6, 10.0)
                  .build())
    """

    def __init__(self):
        self.aspect_ratio = 16.0 / 9.0
        self.image_width = 400
        self.samples_per_pixel = 64
        self.max_depth = 64
        self.vfov = 90.0
        self.look_from = Point3(0, 0, 0)
        self.look_at = Point3(0, 0, -1)
        self.vup = Vec3(0, 1, 0)
        self.defocus_angle = 0.0
        self.focus_dist = 1.0

    def set_aspect_ratio(self, aspect_ratio: float) -> CameraBuilder:
        self.aspect_ratio = float(aspect_ratio)
        return self

    def set_image_width(self, image_width: int) -> CameraBuilder:
        self.image_width = int(image_width)
        return self

    def set_samples_per_pixel(self, samples_per_pixel: int) -> CameraBuilder:
        self.samples_per_pixel = int(samples_per_pixel)
        return self

    def set_max_depth(self, max_depth: int) -> CameraBuilder:
        self.max_depth = int(max_depth)
        return self

    def set_vfov(self, vfov: float) -> CameraBuilder:
        """Vertical field of view in degrees."""
        self.vfov = float(vfov)
        return self

    def set_view_direction(self, look_from: Point3, look_at: Point3) -> CameraBuilder:
        self.look_from = look_from
        self.look_at = look_at
        return self

    def set_vup(self, vup: Vec3) -> CameraBuilder:
        self.vup = vup
        return self

    def set_focus(self, defocus_angle: float, focus_dist: float) -> CameraBuilder:
        """Lens settings.

        Args:
            defocus_angle: Cone angle in degrees of rays through each pixel
                (0 = pinhole, everything sharp)
            focus_dist: Distance from look_from to the plane of perfect focus
        """
        self.defocus_angle = float(defocus_angle)
        self.focus_dist = float(focus_dist)
        return self

    def _validate(self) -> None:
        if self.image_width < 1:
            raise CameraConfigError(f"image_width must be at least 1, got {self.image_width}")
        if self.samples_per_pixel < 1:
            raise CameraConfigError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise CameraConfigError(f"max_depth must not be negative, got {self.max_depth}")
        if not 0.0 < self.vfov < 180.0:
            raise CameraConfigError(f"vfov must lie in (0, 180) degrees, got {self.vfov}")
        if self.focus_dist <= 0.0:
            raise CameraConfigError(f"focus_dist must be positive, got {self.focus_dist}")
        if (self.look_from - self.look_at).near_zero():
            raise CameraConfigError("look_from and look_at must differ")
        if self.vup.cross(self.look_from - self.look_at).near_zero():
            raise CameraConfigError("vup must not be parallel to the view direction")

    def build(self) -> Camera:
        """Derive the immutable camera geometry."""
        self._validate()

        # Degenerate aspect ratios fall back to a single row
        image_height = int(self.image_width / self.aspect_ratio) if self.aspect_ratio > 0 else 0
        if image_height < 1:
            logger.warning("Image height clamped to 1 (width=%d, aspect_ratio=%g)",
                           self.image_width, self.aspect_ratio)
            image_height = 1

        center = self.look_from

        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * self.focus_dist
        viewport_width = viewport_height * (self.image_width / image_height)

        # Orthonormal camera basis
        w = (self.look_from - self.look_at).normalize()  # Points backward from camera
        u = self.vup.cross(w).normalize()                # Points right
        v = w.cross(u)                                   # Points up

        # Vectors across the horizontal and down the vertical viewport edges
        viewport_u = u * viewport_width
        viewport_v = -v * viewport_height

        pixel_delta_u = viewport_u / self.image_width
        pixel_delta_v = viewport_v / image_height

        viewport_upper_left = center - w * self.focus_dist - viewport_u / 2 - viewport_v / 2
        pixel00_loc = viewport_upper_left + (pixel_delta_u + pixel_delta_v) * 0.5

        defocus_radius = self.focus_dist * math.tan(math.radians(self.defocus_angle / 2))

        return Camera(
            image_width=self.image_width,
            image_height=image_height,
            samples_per_pixel=self.samples_per_pixel,
            max_depth=self.max_depth,
            center=center,
            pixel00_loc=pixel00_loc,
            pixel_delta_u=pixel_delta_u,
            pixel_delta_v=pixel_delta_v,
            u=u,
            v=v,
            w=w,
            defocus_angle=self.defocus_angle,
            defocus_disk_u=u * defocus_radius,
            defocus_disk_v=v * defocus_radius,
        )
