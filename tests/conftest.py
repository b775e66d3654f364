"""Pytest configuration for spherecast tests.

This module provides shared fixtures for all test modules. The Taichi
runtime is only initialized for tests that request it, and those tests are
skipped when Taichi is not installed.
"""

import numpy as np
import pytest

from spherecast.core.color import Color
from spherecast.core.vector import Vector
from spherecast.geometry.sphere import Sphere


@pytest.fixture
def rng():
    """A seeded random generator, fresh for every test."""
    return np.random.default_rng(42)


@pytest.fixture
def red_sphere():
    """A unit-radius red sphere two units in front of the default camera."""
    return Sphere(center=Vector(0.0, 0.0, -3.0), radius=1.0, color=Color(1.0, 0.0, 0.0))


@pytest.fixture(scope="session")
def taichi_runtime():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti = pytest.importorskip("taichi")
    ti.init(arch=ti.cpu, random_seed=42)
    yield ti
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after
