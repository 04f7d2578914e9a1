import logging
from typing import Sequence, Tuple

import jax
import jax.numpy as jnp
from flax import struct

from .geometry import Sphere
from .types import Material, PointLight

logger = logging.getLogger(__name__)

# Scene is a container for the static scene data. Spheres and lights are
# stacked into arrays (one row per object) so the renderer can scan them.

@struct.dataclass
class SceneData:
    spheres: Sphere       # center (num_spheres, 3), radius (num_spheres,), material rows
    lights: PointLight    # position (num_lights, 3), intensity (num_lights,)

    @property
    def num_spheres(self) -> int:
        return self.spheres.radius.shape[0]

    @property
    def num_lights(self) -> int:
        return self.lights.intensity.shape[0]


def _empty_spheres() -> Sphere:
    return Sphere(
        center=jnp.zeros((0, 3), dtype=jnp.float64),
        radius=jnp.zeros((0,), dtype=jnp.float64),
        material=Material.zeros((0,)),
    )


def _empty_lights() -> PointLight:
    return PointLight(
        position=jnp.zeros((0, 3), dtype=jnp.float64),
        intensity=jnp.zeros((0,), dtype=jnp.float64),
    )


def _stack(items):
    return jax.tree.map(lambda *xs: jnp.stack([jnp.asarray(x, dtype=jnp.float64) for x in xs]), *items)


def build_scene(spheres: Sequence[Sphere], lights: Sequence[PointLight]) -> SceneData:
    """Validate and stack spheres and lights into a SceneData.

    Sphere order is preserved (it decides ties between equidistant hits).
    Raises ValueError for non-positive radii or negative light intensities,
    so bad scenes are rejected before any rendering work starts.
    """
    for index, sphere in enumerate(spheres):
        if jnp.shape(sphere.center) != (3,):
            raise ValueError(f"sphere {index}: center must have shape (3,)")
        if not float(sphere.radius) > 0.0:
            raise ValueError(f"sphere {index}: radius must be > 0, got {float(sphere.radius)}")
    for index, light in enumerate(lights):
        if jnp.shape(light.position) != (3,):
            raise ValueError(f"light {index}: position must have shape (3,)")
        if float(light.intensity) < 0.0:
            raise ValueError(f"light {index}: intensity must be >= 0, got {float(light.intensity)}")

    stacked_spheres = _stack(spheres) if spheres else _empty_spheres()
    stacked_lights = _stack(lights) if lights else _empty_lights()
    logger.debug("Built scene with %d spheres and %d lights", len(spheres), len(lights))
    return SceneData(spheres=stacked_spheres, lights=stacked_lights)

# --- Sample Materials ---

IVORY = Material.create(
    diffuse_color=(0.4, 0.4, 0.3),
    albedo=(0.6, 0.3, 0.1),
    specular_exponent=50.0,
)
RED_RUBBER = Material.create(
    diffuse_color=(0.3, 0.1, 0.1),
    albedo=(0.9, 0.1, 0.0),
    specular_exponent=10.0,
)
# Deliberately over-bright specular weight; exercises channel saturation
MIRROR = Material.create(
    diffuse_color=(1.0, 1.0, 1.0),
    albedo=(0.0, 10.0, 0.8),
    specular_exponent=1425.0,
)


def default_scene() -> Tuple[list, list]:
    """The stock scene: ivory, red rubber and two mirror spheres under three lights."""
    spheres = [
        Sphere.create((-3.0, 0.0, -16.0), 2.0, IVORY),
        Sphere.create((-1.0, -1.5, -12.0), 2.0, RED_RUBBER),
        Sphere.create((1.5, -0.5, -18.0), 3.0, MIRROR),
        Sphere.create((7.0, 5.0, -18.0), 4.0, MIRROR),
    ]
    lights = [
        PointLight.create((-20.0, 20.0, 20.0), 1.5),
        PointLight.create((30.0, 50.0, -25.0), 1.8),
        PointLight.create((30.0, 20.0, 30.0), 1.7),
    ]
    return spheres, lights
