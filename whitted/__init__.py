"""Whitted-style recursive ray tracer for sphere scenes, built on JAX."""

import jax

# The engine works in float64 throughout; this must run before any array is built.
jax.config.update("jax_enable_x64", True)

from .types import Ray, HitRecord, Material, PointLight  # noqa: E402
from .geometry import Sphere, intersect_sphere, intersect_scene  # noqa: E402
from .scene import SceneData, build_scene, default_scene  # noqa: E402
from .config import RenderConfig  # noqa: E402
from .camera import Camera  # noqa: E402
from .integrator import cast_ray, direct_lighting, render, render_image, iter_rows  # noqa: E402
from .image import Image  # noqa: E402

__all__ = [
    "Ray",
    "HitRecord",
    "Material",
    "PointLight",
    "Sphere",
    "intersect_sphere",
    "intersect_scene",
    "SceneData",
    "build_scene",
    "default_scene",
    "RenderConfig",
    "Camera",
    "cast_ray",
    "direct_lighting",
    "render",
    "render_image",
    "iter_rows",
    "Image",
]
