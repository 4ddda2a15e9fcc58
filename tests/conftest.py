"""Shared fixtures for lumentrace tests."""

import pytest

from lumentrace.vec3 import Vec3
from lumentrace.sampling import Sampler


class ScriptedSampler:
    """Sampler stand-in returning fixed draws, for exact expectations."""

    def __init__(self, uniform=0.5, unit_vector=Vec3(0, 0, 0), disk=Vec3(0, 0, 0)):
        self._uniform = uniform
        self._unit_vector = unit_vector
        self._disk = disk

    def uniform(self):
        return self._uniform

    def uniform_range(self, low, high):
        return low + (high - low) * self._uniform

    def unit_vector(self):
        return self._unit_vector

    def in_unit_disk(self):
        return self._disk


@pytest.fixture
def sampler():
    """Seeded sampler so randomized tests are repeatable."""
    return Sampler(1234)


@pytest.fixture
def scripted():
    """Factory for ScriptedSampler."""
    return ScriptedSampler
