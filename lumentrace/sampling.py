"""
Random sampling for Monte Carlo ray tracing.

Every render task owns its own Sampler. Nothing in the tracer touches the
global numpy random state, so a fixed seed gives the same image no matter how
tasks are scheduled.
"""

from __future__ import annotations
from typing import List, Optional, Union
import numpy as np

from .vec3 import Vec3

SeedLike = Union[None, int, np.random.SeedSequence]


class Sampler:
    """Wraps a numpy Generator with the draws the tracer needs."""

    __slots__ = ('rng',)

    def __init__(self, seed: SeedLike = None):
        """Create a sampler.

        Args:
            seed: An int, a SeedSequence, or None for fresh OS entropy
        """
        self.rng = np.random.default_rng(seed)

    def uniform(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self.rng.random())

    def uniform_range(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return float(self.rng.uniform(low, high))

    def in_unit_cube(self) -> Vec3:
        """Point with each component uniform in [-1, 1)."""
        return Vec3.from_array(self.rng.uniform(-1.0, 1.0, 3))

    def in_unit_sphere(self) -> Vec3:
        """Point strictly inside the unit sphere, by rejection from the cube."""
        while True:
            p = self.in_unit_cube()
            if 1e-160 < p.length_squared() < 1.0:
                return p

    def unit_vector(self) -> Vec3:
        """Direction uniformly distributed on the unit sphere."""
        return self.in_unit_sphere().normalize()

    def in_unit_disk(self) -> Vec3:
        """Point strictly inside the unit disk in the z=0 plane."""
        while True:
            x, y = self.rng.uniform(-1.0, 1.0, 2)
            if x * x + y * y < 1.0:
                return Vec3(x, y, 0.0)


def seed_sequences(seed: SeedLike, count: int) -> List[np.random.SeedSequence]:
    """Derive `count` independent child seeds from one root seed."""
    root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return root.spawn(count)


def spawn_samplers(seed: Optional[int], count: int) -> List[Sampler]:
    """Create `count` independent samplers from one root seed.

    Args:
        seed: Root seed; None draws fresh entropy
        count: Number of samplers (one per parallel task)

    Returns:
        List of samplers whose streams do not overlap
    """
    return [Sampler(child) for child in seed_sequences(seed, count)]
