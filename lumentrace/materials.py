"""
Materials and their scattering laws.

Implements:
- Lambertian diffuse
- Metal (mirror reflection blurred by fuzz)
- Dielectric (glass, water - refraction with Schlick reflectance)

Materials are immutable values; any number of shapes may share one instance.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NamedTuple, Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Color
from .ray import Ray

if TYPE_CHECKING:
    from .sampling import Sampler
    from .shapes import HitRecord


class ScatterResult(NamedTuple):
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


def reflect(direction: Vec3, normal: Vec3) -> Vec3:
    """Mirror `direction` about `normal`: d - 2(d.n)n."""
    return direction - normal * (2.0 * direction.dot(normal))


def refract(unit_direction: Vec3, normal: Vec3, etai_over_etat: float) -> Vec3:
    """Bend a unit direction through a surface using Snell's law.

    Args:
        unit_direction: Incoming direction, unit length
        normal: Surface normal facing the incoming ray
        etai_over_etat: Ratio of refractive indices (n1/n2)
    """
    cos_theta = min(-unit_direction.dot(normal), 1.0)
    r_out_perp = (unit_direction + normal * cos_theta) * etai_over_etat
    r_out_parallel = normal * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class Material(ABC):
    """Base class for the closed set of surface materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, sampler: Sampler) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: Intersection record with a normal facing the ray
            sampler: Random source owned by the calling task

        Returns:
            ScatterResult if the ray scatters, None if it is absorbed
        """


@dataclass(frozen=True)
class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""
    albedo: Color

    def scatter(self, ray_in: Ray, hit: HitRecord, sampler: Sampler) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + sampler.unit_vector()

        # Catch degenerate scatter direction
        if scatter_direction.length() <= 1e-8:
            scatter_direction = hit.normal

        return ScatterResult(Ray(hit.point, scatter_direction), self.albedo)


@dataclass(frozen=True)
class Metal(Material):
    """Metallic material with specular reflection.

    Attributes:
        albedo: The reflection color
        fuzz: Blur radius of the reflection, clamped into [0, 1]
    """
    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'fuzz', max(0.0, min(float(self.fuzz), 1.0)))

    def scatter(self, ray_in: Ray, hit: HitRecord, sampler: Sampler) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.normalize(), hit.normal)
        direction = reflected + sampler.unit_vector() * self.fuzz

        # Fuzz can push the reflection below the surface: absorbed
        if direction.dot(hit.normal) <= 0:
            return None
        return ScatterResult(Ray(hit.point, direction), self.albedo)


@dataclass(frozen=True)
class Dielectric(Material):
    """Dielectric (glass-like) material that always refracts or reflects."""
    refractive_index: float = 1.5

    def scatter(self, ray_in: Ray, hit: HitRecord, sampler: Sampler) -> Optional[ScatterResult]:
        attenuation = Color(1.0, 1.0, 1.0)

        # Entering the medium or leaving it
        refraction_ratio = 1.0 / self.refractive_index if hit.front_face else self.refractive_index

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or reflectance(cos_theta, refraction_ratio) > sampler.uniform():
            direction = reflect(unit_direction, hit.normal)
        else:
            direction = refract(unit_direction, hit.normal, refraction_ratio)

        return ScatterResult(Ray(hit.point, direction), attenuation)
