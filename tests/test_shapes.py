"""Tests for geometric shapes and the scene."""

import pytest
import math

from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.interval import Interval
from lumentrace.shapes import HitRecord, Sphere, Scene
from lumentrace.materials import Lambertian, Metal

ANY_T = Interval(0.001, math.inf)
GRAY = Lambertian(Color(0.5, 0.5, 0.5))


class TestHitRecord:
    """Test face orientation."""

    def test_front_face_keeps_normal(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        rec = HitRecord.from_ray(ray, 4.0, Vec3(0, 0, -1))
        assert rec.front_face is True
        assert rec.normal == Vec3(0, 0, -1)
        assert rec.point == Point3(0, 0, -1)

    def test_back_face_flips_normal(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        rec = HitRecord.from_ray(ray, 1.0, Vec3(0, 0, 1))
        assert rec.front_face is False
        assert rec.normal == Vec3(0, 0, -1)

    def test_is_frozen(self):
        rec = HitRecord.from_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, Vec3(0, 0, 1))
        with pytest.raises(AttributeError):
            rec.t = 2.0


class TestSphere:
    """Test Sphere intersection."""

    def test_pierce_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        found = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), ANY_T)

        assert found is not None
        hit, material = found
        assert hit.t == pytest.approx(4.0)
        assert hit.point.z == pytest.approx(-1.0)
        assert material is GRAY

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        assert sphere.hit(Ray(Point3(0, 5, -5), Vec3(0, 0, 1)), ANY_T) is None

    def test_graze(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        inside = sphere.hit(Ray(Point3(0, 0.999, -5), Vec3(0, 0, 1)), ANY_T)
        outside = sphere.hit(Ray(Point3(0, 1.001, -5), Vec3(0, 0, 1)), ANY_T)
        assert inside is not None
        assert outside is None

    def test_sphere_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0, GRAY)
        assert sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), ANY_T) is None

    def test_from_inside_uses_far_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        hit, _ = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), ANY_T)
        assert hit.t == pytest.approx(1.0)
        assert hit.front_face is False

    def test_interval_excludes_near_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        hit, _ = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), Interval(4.5, math.inf))
        assert hit.t == pytest.approx(6.0)

    def test_interval_excludes_both_roots(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        assert sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), Interval(0.001, 3.0)) is None

    def test_root_on_boundary_is_rejected(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit, _ = sphere.hit(ray, Interval(4.0, math.inf))
        assert hit.t == pytest.approx(6.0)

    def test_zero_direction_is_no_hit(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        assert sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 0)), ANY_T) is None

    def test_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        hit, _ = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 2)), ANY_T)
        assert hit.t == pytest.approx(2.0)
        assert hit.point == Point3(0, 0, -1)

    def test_negative_radius_flips_outward_normal(self):
        shell = Sphere(Point3(0, 0, 0), -0.5, GRAY)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit, _ = shell.hit(ray, ANY_T)
        # Outward normal points inward, so the outside hit counts as a back face
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_zero_radius_is_rejected(self):
        with pytest.raises(ValueError):
            Sphere(Point3(0, 0, 0), 0.0, GRAY)

    @pytest.mark.parametrize("origin, direction", [
        (Point3(0, 0, -5), Vec3(0, 0, 1)),
        (Point3(0.3, 0.2, -4), Vec3(0, 0, 1)),
        (Point3(0, 0, 0), Vec3(1, 2, 3)),
        (Point3(3, 3, 3), Vec3(-1, -1, -1)),
        (Point3(0.5, 0, 0), Vec3(-1, 0.2, 0)),
    ])
    def test_normal_is_unit_and_faces_ray(self, origin, direction):
        sphere = Sphere(Point3(0, 0, 0), 1.0, GRAY)
        ray = Ray(origin, direction)
        hit, _ = sphere.hit(ray, ANY_T)
        assert hit.normal.length() == pytest.approx(1.0)
        assert ray.direction.dot(hit.normal) <= 0


class TestScene:
    """Test the linear closest-hit search."""

    def test_empty_scene(self):
        assert Scene().hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), ANY_T) is None

    def test_closest_hit_wins_regardless_of_order(self):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = Metal(Color(0, 0, 1), 0.0)
        near = Sphere(Point3(0, 0, -3), 1.0, near_mat)
        far = Sphere(Point3(0, 0, -10), 1.0, far_mat)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for order in ([near, far], [far, near]):
            hit, material = Scene(order).hit(ray, ANY_T)
            assert hit.t == pytest.approx(2.0)
            assert material is near_mat

    def test_add_and_len(self):
        world = Scene()
        world.add(Sphere(Point3(0, 0, -1), 0.5, GRAY))
        world.add(Sphere(Point3(0, -100.5, -1), 100, GRAY))
        assert len(world) == 2
        assert all(isinstance(s, Sphere) for s in world)

    def test_shared_material(self):
        world = Scene([Sphere(Point3(x, 0, -2), 0.4, GRAY) for x in (-1, 0, 1)])
        assert all(s.material is GRAY for s in world)

    def test_respects_upper_bound(self):
        world = Scene([Sphere(Point3(0, 0, -10), 1.0, GRAY)])
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), Interval(0.001, 5.0)) is None
