"""
Geometric shapes for the ray tracer.

Each shape implements `hit(ray, interval)` and returns the nearest valid
intersection together with the material it carries. The Scene searches its
shapes with a plain linear scan.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .interval import Interval

if TYPE_CHECKING:
    from .materials import Material

Hit = Tuple['HitRecord', 'Material']


@dataclass(frozen=True)
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: Unit surface normal, always facing against the ray
        t: The ray parameter at intersection
        front_face: True if the ray hit the outside of the surface
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool

    @classmethod
    def from_ray(cls, ray: Ray, t: float, outward_normal: Vec3) -> HitRecord:
        """Build a record whose normal points against the ray direction.

        Args:
            ray: The incoming ray
            t: Ray parameter of the hit
            outward_normal: Unit geometric normal pointing out of the surface
        """
        front_face = ray.direction.dot(outward_normal) < 0
        normal = outward_normal if front_face else -outward_normal
        return cls(point=ray.at(t), normal=normal, t=t, front_face=front_face)


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, interval: Interval) -> Optional[Hit]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            interval: Open range of acceptable ray parameters

        Returns:
            (HitRecord, Material) for the nearest hit, None otherwise
        """


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Material):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Non-zero radius; negative values flip the normal (hollow shell)
            material: Material for shading, may be shared with other shapes
        """
        if radius == 0:
            raise ValueError("Sphere radius must be non-zero")
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, interval: Interval) -> Optional[Hit]:
        """Test ray-sphere intersection using the half-b quadratic.

        (P-C)·(P-C) = r² with P = ray.at(t) gives a·t² + 2·half_b·t + c = 0.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a <= 0.0:
            return None
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Nearest root in the acceptable range
        root = interval.surround_where((-half_b - sqrtd) / a)
        if root is None:
            root = interval.surround_where((-half_b + sqrtd) / a)
            if root is None:
                return None

        outward_normal = (ray.at(root) - self.center) / self.radius
        return HitRecord.from_ray(ray, root, outward_normal), self.material

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Scene(Hittable):
    """An ordered collection of shapes searched for the closest hit."""

    def __init__(self, objects: Optional[List[Hittable]] = None):
        self.objects: List[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the scene."""
        self.objects.append(obj)

    def hit(self, ray: Ray, interval: Interval) -> Optional[Hit]:
        """Find the closest intersection among all objects."""
        closest: Optional[Hit] = None
        window = interval

        for obj in self.objects:
            found = obj.hit(ray, window)
            if found is not None:
                closest = found
                window = window.with_max(found[0].t)

        return closest

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
