"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path so `whitted` and `forward_render` import without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from whitted.config import RenderConfig  # noqa: E402
from whitted.geometry import Sphere  # noqa: E402
from whitted.types import Material, PointLight  # noqa: E402


@pytest.fixture
def ivory():
    return Material.create(diffuse_color=(0.4, 0.4, 0.3), albedo=(0.6, 0.3, 0.1), specular_exponent=50.0)


@pytest.fixture
def matte_red():
    """Pure diffuse material, no highlight or reflection."""
    return Material.create(diffuse_color=(0.9, 0.1, 0.0), albedo=(1.0, 0.0, 0.0), specular_exponent=10.0)


@pytest.fixture
def mirror():
    """Pure mirror: all of the color comes from the reflected ray."""
    return Material.create(diffuse_color=(0.0, 0.0, 1.0), albedo=(0.0, 0.0, 1.0), specular_exponent=1425.0)


@pytest.fixture
def front_sphere(ivory):
    return Sphere.create((0.0, 0.0, -5.0), 1.0, ivory)


@pytest.fixture
def origin_light():
    return PointLight.create((0.0, 0.0, 0.0), 1.0)


@pytest.fixture
def config():
    return RenderConfig.create(width=3, height=3)
