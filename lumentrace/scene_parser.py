"""
Scene description parser.

Reads YAML (or JSON) scene files into a Scene, a CameraBuilder preset and
RenderSettings.

Example scene file:
```yaml
camera:
  image_width: 400
  aspect_ratio: 1.7777
  samples_per_pixel: 64
  max_depth: 50
  vfov: 20
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vup: [0, 1, 0]
  defocus_angle: 0.6
  focus_dist: 10

render:
  threads: 4
  tile_size: 16
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    refractive_index: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import json
import logging

import yaml

from .vec3 import Vec3, Color
from .camera import CameraBuilder
from .shapes import Sphere, Scene
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

ParsedScene = Tuple[Scene, CameraBuilder, RenderSettings]


class SceneParseError(Exception):
    """Error during scene parsing."""


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.scene = Scene()
        self.camera = CameraBuilder()
        self.settings = RenderSettings()

    def parse_file(self, filepath: Union[str, Path]) -> ParsedScene:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (.json, otherwise YAML)

        Returns:
            Tuple of (scene, camera builder, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()
        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {path}: {e}") from e

        logger.debug("Parsing scene file %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> ParsedScene:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera builder, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

        # Materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'camera' in data:
            self._parse_camera(data['camera'])

        if 'render' in data:
            self._parse_settings(data['render'])

        return self.scene, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an {x, y, z} mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(_to_float(c, 'vector component') for c in data))
        elif isinstance(data, dict):
            return Vec3(*(_to_float(data.get(k, 0), k) for k in ('x', 'y', 'z')))
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an {r, g, b} mapping or a #rrggbb string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(_to_float(c, 'color component') for c in data))
        elif isinstance(data, dict):
            return Color(*(_to_float(data.get(k, 0), k) for k in ('r', 'g', 'b')))
        elif isinstance(data, str) and data.startswith('#') and len(data) == 7:
            try:
                r, g, b = (int(data[k:k + 2], 16) / 255.0 for k in (1, 3, 5))
            except ValueError:
                raise SceneParseError(f"Cannot parse color from string: {data}") from None
            return Color(r, g, b)
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material definition must be a mapping, got: {mat_data}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))
        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, _to_float(mat_data.get('fuzz', 0.0), 'fuzz'))
        elif mat_type == 'dielectric':
            return Dielectric(_to_float(mat_data.get('refractive_index', 1.5), 'refractive_index'))
        else:
            raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        _require(materials_data, dict, 'materials')
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        _require(objects_data, list, 'objects')
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object definition must be a mapping, got: {obj_data}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")
            if 'material' not in obj_data:
                raise SceneParseError("Every object needs a material")

            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
            radius = _to_float(obj_data.get('radius', 1.0), 'radius')
            material = self._get_material(obj_data['material'])
            try:
                self.scene.add(Sphere(center, radius, material))
            except ValueError as e:
                raise SceneParseError(f"Invalid sphere: {e}") from e

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section onto the builder."""
        _require(camera_data, dict, 'camera')
        cam = self.camera
        if 'aspect_ratio' in camera_data:
            cam.set_aspect_ratio(_to_float(camera_data['aspect_ratio'], 'aspect_ratio'))
        if 'image_width' in camera_data:
            cam.set_image_width(_to_int(camera_data['image_width'], 'image_width'))
        if 'samples_per_pixel' in camera_data:
            cam.set_samples_per_pixel(_to_int(camera_data['samples_per_pixel'], 'samples_per_pixel'))
        if 'max_depth' in camera_data:
            cam.set_max_depth(_to_int(camera_data['max_depth'], 'max_depth'))
        if 'vfov' in camera_data:
            cam.set_vfov(_to_float(camera_data['vfov'], 'vfov'))
        if 'look_from' in camera_data or 'look_at' in camera_data:
            cam.set_view_direction(
                self._parse_vec3(camera_data.get('look_from', list(cam.look_from))),
                self._parse_vec3(camera_data.get('look_at', list(cam.look_at))),
            )
        if 'vup' in camera_data:
            cam.set_vup(self._parse_vec3(camera_data['vup']))
        if 'defocus_angle' in camera_data or 'focus_dist' in camera_data:
            cam.set_focus(
                _to_float(camera_data.get('defocus_angle', cam.defocus_angle), 'defocus_angle'),
                _to_float(camera_data.get('focus_dist', cam.focus_dist), 'focus_dist'),
            )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        _require(settings_data, dict, 'render')
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                num_threads=_to_int(settings_data.get('threads', 0), 'threads'),
                tile_size=_to_int(settings_data.get('tile_size', 16), 'tile_size'),
                seed=_to_int(seed, 'seed') if seed is not None else None,
                use_processes=bool(settings_data.get('processes', False)),
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def _require(data: Any, kind: type, section: str) -> None:
    if not isinstance(data, kind):
        raise SceneParseError(f"'{section}' must be a {kind.__name__}, got {type(data).__name__}")


def _to_float(value: Any, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SceneParseError(f"Invalid number for {field}: {value!r}") from None


def _to_int(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SceneParseError(f"Invalid integer for {field}: {value!r}") from None


def load_scene(filepath: Union[str, Path]) -> ParsedScene:
    """Convenience function to load a scene file."""
    return SceneParser().parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> ParsedScene:
    """Convenience function to parse a scene from a dictionary."""
    return SceneParser().parse_dict(data)
