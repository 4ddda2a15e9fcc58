"""Tests for Camera and CameraBuilder."""

import pytest
import math

from lumentrace.vec3 import Vec3, Point3
from lumentrace.camera import Camera, CameraBuilder, CameraConfigError


class TestCameraBuilder:
    """Test builder defaults, chaining and derivation."""

    def test_defaults(self):
        cam = CameraBuilder().build()
        assert cam.image_width == 400
        assert cam.image_height == 225
        assert cam.samples_per_pixel == 64
        assert cam.max_depth == 64
        assert cam.center == Point3(0, 0, 0)
        assert cam.defocus_angle == 0.0

    def test_setters_chain(self):
        builder = CameraBuilder()
        assert builder.set_image_width(10) is builder
        assert builder.set_vfov(20) is builder
        assert builder.set_focus(0.6, 10.0) is builder

    def test_total_pixels(self):
        cam = CameraBuilder().set_image_width(20).set_aspect_ratio(2.0).build()
        assert cam.total_pixels == 20 * 10

    def test_height_clamped_to_one(self):
        cam = CameraBuilder().set_image_width(4).set_aspect_ratio(10.0).build()
        assert cam.image_height == 1

    def test_non_positive_aspect_ratio_recovers(self):
        for ratio in (0.0, -2.0):
            cam = CameraBuilder().set_image_width(8).set_aspect_ratio(ratio).build()
            assert cam.image_height == 1

    def test_basis_vectors(self):
        cam = (CameraBuilder()
               .set_view_direction(Point3(0, 0, 0), Point3(0, 0, -1))
               .build())
        # w points backward, u right, v up
        assert cam.w == Vec3(0, 0, 1)
        assert cam.u == Vec3(1, 0, 0)
        assert cam.v == Vec3(0, 1, 0)

    def test_viewport_size_from_vfov(self):
        cam = (CameraBuilder()
               .set_image_width(100)
               .set_aspect_ratio(1.0)
               .set_vfov(90)
               .set_focus(0.0, 2.0)
               .build())
        # viewport height = 2 * tan(45deg) * focus_dist = 4
        assert (cam.pixel_delta_v * 100).length() == pytest.approx(4.0)
        assert (cam.pixel_delta_u * 100).length() == pytest.approx(4.0)
        assert cam.pixel_delta_v.y < 0

    def test_pixel00_is_upper_left_center(self):
        cam = (CameraBuilder()
               .set_image_width(2)
               .set_aspect_ratio(1.0)
               .set_vfov(90)
               .build())
        # viewport is 2x2 at z=-1, so pixel centers sit at +-0.5
        assert cam.pixel00_loc == Point3(-0.5, 0.5, -1)

    def test_defocus_disk_scales_with_focus(self):
        cam = (CameraBuilder().set_focus(10.0, 3.4).build())
        radius = 3.4 * math.tan(math.radians(5.0))
        assert cam.defocus_disk_u.length() == pytest.approx(radius)
        assert cam.defocus_disk_v.length() == pytest.approx(radius)

    def test_camera_is_immutable(self):
        cam = CameraBuilder().build()
        with pytest.raises(AttributeError):
            cam.image_width = 10

    @pytest.mark.parametrize("configure", [
        lambda b: b.set_image_width(0),
        lambda b: b.set_samples_per_pixel(0),
        lambda b: b.set_max_depth(-1),
        lambda b: b.set_vfov(180),
        lambda b: b.set_focus(0.0, 0.0),
        lambda b: b.set_view_direction(Point3(1, 1, 1), Point3(1, 1, 1)),
        lambda b: b.set_view_direction(Point3(0, 5, 0), Point3(0, 0, 0)),
    ])
    def test_invalid_configuration(self, configure):
        with pytest.raises(CameraConfigError):
            configure(CameraBuilder()).build()

    def test_config_error_is_value_error(self):
        assert issubclass(CameraConfigError, ValueError)


class TestCameraRays:
    """Test Camera.get_ray()."""

    def _square_camera(self, **focus):
        builder = CameraBuilder().set_image_width(11).set_aspect_ratio(1.0).set_vfov(90)
        if focus:
            builder.set_focus(focus['angle'], focus['dist'])
        return builder.build()

    def test_center_pixel_points_forward(self, scripted):
        cam = self._square_camera()
        ray = cam.get_ray(5, 5, scripted(uniform=0.5))
        assert ray.origin == Point3(0, 0, 0)
        assert ray.direction == Vec3(0, 0, -1)

    def test_corner_rays(self, scripted):
        cam = self._square_camera()
        top_left = cam.get_ray(0, 0, scripted(uniform=0.5))
        bottom_right = cam.get_ray(10, 10, scripted(uniform=0.5))
        assert top_left.direction.x < 0 and top_left.direction.y > 0
        assert bottom_right.direction.x > 0 and bottom_right.direction.y < 0

    def test_jitter_stays_within_pixel(self, sampler):
        cam = self._square_camera()
        center = cam.pixel00_loc + cam.pixel_delta_u * 3 + cam.pixel_delta_v * 4
        half = cam.pixel_delta_u.length() / 2
        for _ in range(50):
            target = cam.get_ray(3, 4, sampler).direction
            assert abs(target.x - center.x) <= half
            assert abs(target.y - center.y) <= half

    def test_pinhole_origin_is_center(self, sampler):
        cam = (CameraBuilder()
               .set_view_direction(Point3(1, 2, 3), Point3(0, 0, 0))
               .build())
        for _ in range(10):
            assert cam.get_ray(0, 0, sampler).origin == Point3(1, 2, 3)

    def test_defocus_origin_on_disk(self, sampler):
        cam = self._square_camera(angle=20.0, dist=2.0)
        radius = 2.0 * math.tan(math.radians(10.0))
        origins = [cam.get_ray(5, 5, sampler).origin for _ in range(50)]
        for o in origins:
            assert o.z == pytest.approx(0.0)
            assert o.length() < radius + 1e-9
        assert len({(round(o.x, 9), round(o.y, 9)) for o in origins}) > 1

    def test_defocus_rays_converge_on_focus_plane(self, sampler):
        cam = self._square_camera(angle=20.0, dist=2.0)
        for _ in range(20):
            ray = cam.get_ray(5, 5, sampler)
            # The target lies on the focus plane within the center pixel
            target = ray.at(1.0)
            assert target.z == pytest.approx(-2.0)
            assert abs(target.x) <= cam.pixel_delta_u.length()
