"""
Lumentrace - A Python Ray Tracer

A small stochastic path tracer with:
- Spheres (negative radius for hollow shells)
- Lambertian, metal and dielectric materials
- Depth of field and antialiasing
- Tile-parallel, seedable rendering
- ASCII PPM output
"""

__version__ = "0.1.0"
__author__ = "Lumentrace Team"

import logging

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval, EMPTY, UNIVERSE
from .sampling import Sampler, spawn_samplers
from .materials import Material, Lambertian, Metal, Dielectric, ScatterResult
from .shapes import HitRecord, Hittable, Sphere, Scene
from .camera import Camera, CameraBuilder, CameraConfigError
from .renderer import Renderer, RenderSettings, ray_color, sky_color, linear_to_gamma
from .ppm import encode_ppm, write_ppm
from .scenes import SCENES, get_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

logging.getLogger(__name__).addHandler(logging.NullHandler())
