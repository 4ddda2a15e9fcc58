"""
Built-in example scenes.

Each factory returns the scene together with a CameraBuilder preset, so
callers can still override size, sampling or lens settings before building.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, Tuple
import math

from .vec3 import Vec3, Point3, Color
from .camera import CameraBuilder
from .materials import Lambertian, Metal, Dielectric
from .sampling import Sampler
from .shapes import Sphere, Scene

ScenePreset = Tuple[Scene, CameraBuilder]


def default_scene(seed: Optional[int] = None) -> ScenePreset:
    """A diffuse sphere with a small one resting on top and a ground sphere."""
    gray = Lambertian(Color(0.5, 0.5, 0.5))
    world = Scene([
        Sphere(Point3(0.0, 0.0, -1.0), 0.5, gray),
        Sphere(Point3(0.0, 0.5, -1.0), 0.2, gray),
        Sphere(Point3(0.0, -100.5, -1.0), 100.0, gray),
    ])
    return world, CameraBuilder()


def materials_scene(seed: Optional[int] = None) -> ScenePreset:
    """Glass and metals of varying fuzz around a small glass ball."""
    material_ground = Lambertian(Color(0.8, 0.8, 0.0))
    material_center = Dielectric(1.5)
    material_left = Metal(Color(0.9, 0.9, 0.9), 0.1)
    material_right = Metal(Color(0.2, 0.6, 0.8), 1.0)
    material_behind = Metal(Color(0.1, 0.6, 0.2), 0.6)
    material_front = Metal(Color(0.8, 0.3, 0.1), 0.8)

    world = Scene([
        Sphere(Point3(0.0, -100.5, -1.0), 100.0, material_ground),
        Sphere(Point3(0.0, -0.3, -3.0), 0.2, material_behind),
        Sphere(Point3(0.0, 0.25, -1.0), 0.25, material_center),
        Sphere(Point3(-1.0, 0.0, -1.0), 0.5, material_left),
        Sphere(Point3(1.0, 0.0, -1.0), 0.5, material_right),
        Sphere(Point3(0.2, -0.4, -0.6), 0.1, material_front),
    ])
    camera = (CameraBuilder()
              .set_image_width(800)
              .set_max_depth(128)
              .set_samples_per_pixel(128))
    return world, camera


def fov_scene(seed: Optional[int] = None) -> ScenePreset:
    """Two touching spheres that exactly fill a 90 degree view."""
    r = math.cos(math.pi / 4)
    world = Scene([
        Sphere(Point3(-r, 0.0, -1.0), r, Lambertian(Color(0.0, 0.0, 1.0))),
        Sphere(Point3(r, 0.0, -1.0), r, Lambertian(Color(1.0, 0.0, 0.0))),
    ])
    return world, CameraBuilder()


def focus_scene(seed: Optional[int] = None) -> ScenePreset:
    """Positioned camera with depth of field over a hollow glass sphere."""
    material_ground = Lambertian(Color(0.8, 0.8, 0.0))
    material_center = Lambertian(Color(0.1, 0.2, 0.5))
    material_left = Dielectric(1.5)
    material_right = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world = Scene([
        Sphere(Point3(0.0, -100.5, -1.0), 100.0, material_ground),
        Sphere(Point3(0.0, 0.0, -1.0), 0.5, material_center),
        Sphere(Point3(-1.0, 0.0, -1.0), 0.5, material_left),
        # Negative radius turns the inner surface into a bubble
        Sphere(Point3(-1.0, 0.0, -1.0), -0.4, material_left),
        Sphere(Point3(1.0, 0.0, -1.0), 0.5, material_right),
    ])
    camera = (CameraBuilder()
              .set_samples_per_pixel(200)
              .set_max_depth(64)
              .set_view_direction(Point3(-2.0, 2.0, 1.0), Point3(0.0, 0.0, -1.0))
              .set_vfov(20.0)
              .set_focus(11.0, 3.4))
    return world, camera


def final_scene(seed: Optional[int] = None) -> ScenePreset:
    """A field of small random spheres around three large ones."""
    sampler = Sampler(seed)
    world = Scene()

    for a in range(-11, 11):
        for b in range(-11, 11):
            center = Point3(a + 0.9 * sampler.uniform(), 0.2, b + 0.9 * sampler.uniform())
            if (center - Point3(4.0, 0.2, 0.0)).length() <= 0.9:
                continue

            choose_mat = sampler.uniform()
            if choose_mat < 0.8:
                albedo = _abs(sampler.in_unit_cube() * sampler.in_unit_cube())
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                material = Metal(_abs(sampler.in_unit_cube()), sampler.uniform_range(0.0, 0.5))
            else:
                material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0.0, -1000.0, 0.0), 1000.0, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0.0, 1.0, 0.0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4.0, 1.0, 0.0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4.0, 1.0, 0.0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    camera = (CameraBuilder()
              .set_image_width(800)
              .set_samples_per_pixel(128)
              .set_max_depth(50)
              .set_vfov(20.0)
              .set_view_direction(Point3(13.0, 2.0, 3.0), Point3(0.0, 0.0, 0.0))
              .set_focus(0.6, 10.0))
    return world, camera


def _abs(v: Vec3) -> Color:
    # Albedo components must be non-negative
    return Color(abs(v.x), abs(v.y), abs(v.z))


SCENES: Dict[str, Callable[[Optional[int]], ScenePreset]] = {
    'default': default_scene,
    'materials': materials_scene,
    'fov': fov_scene,
    'focus': focus_scene,
    'final': final_scene,
}


def get_scene(name: str, seed: Optional[int] = None) -> ScenePreset:
    """Look up a built-in scene by name.

    Raises:
        KeyError: If no scene has that name
    """
    try:
        factory = SCENES[name]
    except KeyError:
        raise KeyError(f"Unknown scene {name!r}; choose from {', '.join(SCENES)}") from None
    return factory(seed)
