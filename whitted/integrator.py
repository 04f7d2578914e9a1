import logging
import time
from functools import partial
from typing import Iterator, Sequence, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from jax import lax

from .camera import Camera
from .config import RenderConfig
from .geometry import Sphere, intersect_scene
from .scene import SceneData, build_scene
from .types import HitRecord, PointLight
from .utils import dot, norm, offset_origin, quantize, reflect

logger = logging.getLogger(__name__)

STRATEGIES = ("vectorized", "sequential")

# --- Direct Lighting ---

def direct_lighting(scene: SceneData, hit_rec: HitRecord, direction, config: RenderConfig) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Accumulates diffuse and specular intensity from every point light at a hit.

    Lights are visited left to right. For each one a shadow ray is cast from the
    (biased) hit point towards the light; if it hits anything strictly closer
    than the light, that light contributes nothing. A light sitting exactly on
    the hit point has no direction and also contributes nothing.

    Returns:
        Tuple: (diffuse_intensity, specular_intensity), both scalars.
    """
    hit_pos = hit_rec.position
    normal = hit_rec.normal
    exponent = hit_rec.material.specular_exponent

    def light_body(carry, light: PointLight):
        diffuse, specular = carry
        vec_to_light = light.position - hit_pos
        light_distance = norm(vec_to_light)
        has_direction = light_distance > 0.0
        light_dir = vec_to_light / jnp.where(has_direction, light_distance, 1.0)

        # --- Shadow Test ---
        shadow_origin = offset_origin(hit_pos, normal, light_dir, config.bias_epsilon)
        shadow_hit = intersect_scene(scene.spheres, shadow_origin, light_dir, config.world_horizon)
        occluded = shadow_hit.hit & (norm(shadow_hit.position - shadow_origin) < light_distance)
        lit = has_direction & ~occluded

        # --- Diffuse + Specular ---
        diffuse_term = light.intensity * jnp.clip(dot(light_dir, normal), 0.0, 1.0)
        highlight = jnp.clip(dot(reflect(light_dir, normal), direction), 0.0, 1.0)
        specular_term = light.intensity * jnp.power(highlight, exponent)

        diffuse = diffuse + jnp.where(lit, diffuse_term, 0.0)
        specular = specular + jnp.where(lit, specular_term, 0.0)
        return (diffuse, specular), None

    init = (jnp.zeros((), dtype=jnp.float64), jnp.zeros((), dtype=jnp.float64))
    (diffuse, specular), _ = lax.scan(light_body, init, scene.lights)
    return diffuse, specular

# --- Recursive Ray Casting ---

@partial(jax.jit, static_argnames=('depth',))
def cast_ray(scene: SceneData, origin, direction, config: RenderConfig, depth: int = 0) -> jnp.ndarray:
    """Whitted shading of one ray: direct lighting plus a recursively traced mirror bounce.

    `depth` is static, so the recursion is unrolled at trace time and stops at
    `config.max_depth + 1`, where the background color is returned as is. The
    result is linear and unclamped; see `utils.quantize` for display conversion.
    """
    if depth > config.max_depth:
        return config.background_color

    origin = jnp.asarray(origin, dtype=jnp.float64)
    direction = jnp.asarray(direction, dtype=jnp.float64)
    hit_rec = intersect_scene(scene.spheres, origin, direction, config.world_horizon)

    # Mirror bounce. Reflecting a unit vector about a unit normal keeps it unit length
    reflect_dir = reflect(direction, hit_rec.normal)
    reflect_origin = offset_origin(hit_rec.position, hit_rec.normal, reflect_dir, config.bias_epsilon)
    reflect_color = cast_ray(scene, reflect_origin, reflect_dir, config, depth=depth + 1)

    diffuse, specular = direct_lighting(scene, hit_rec, direction, config)

    material = hit_rec.material
    color = (
        material.diffuse_color * diffuse * material.albedo[0]
        + jnp.ones(3, dtype=jnp.float64) * specular * material.albedo[1]
        + reflect_color * material.albedo[2]
    )
    return jnp.where(hit_rec.hit, color, config.background_color)

# --- Frame Rendering ---

def _check_strategy(strategy: str) -> None:
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown render strategy {strategy!r}; expected one of {STRATEGIES}")


@partial(jax.jit, static_argnames=('strategy',))
def _render_image_jit(scene: SceneData, config: RenderConfig, strategy: str) -> jnp.ndarray:
    camera = Camera(fov=config.fov)
    rays = camera.generate_rays(config.width, config.height)
    directions = rays.direction.reshape(-1, 3)

    def shade(direction):
        return cast_ray(scene, camera.origin, direction, config)

    if strategy == "vectorized":
        # Every pixel is independent: fan out over all of them at once
        colors = jax.vmap(shade)(directions)
    else:
        # One pixel at a time, same shading function
        colors = lax.map(shade, directions)
    return colors.reshape(config.height, config.width, 3)


def render_image(scene: SceneData, config: RenderConfig, strategy: str = "vectorized") -> jnp.ndarray:
    """Render linear colors for every pixel, shape (height, width, 3), row 0 at the top."""
    _check_strategy(strategy)
    return _render_image_jit(scene, config, strategy)


@jax.jit
def _render_row(scene: SceneData, config: RenderConfig, row) -> jnp.ndarray:
    camera = Camera(fov=config.fov)
    i = jnp.arange(config.width, dtype=jnp.float64)
    directions = camera.primary_direction(i, jnp.zeros_like(i) + row, config.width, config.height)
    return jax.vmap(lambda d: cast_ray(scene, camera.origin, d, config))(directions)


def iter_rows(scene: SceneData, config: RenderConfig) -> Iterator[Tuple[int, jnp.ndarray]]:
    """Yield (j, colors) for each image row in turn, colors of shape (width, 3).

    The row kernel is compiled once and reused, so callers can report
    progress or stop early between rows.
    """
    for j in range(config.height):
        yield j, _render_row(scene, config, jnp.asarray(j, dtype=jnp.float64))


def render(
    width: int,
    height: int,
    fov: float,
    spheres: Sequence[Sphere],
    lights: Sequence[PointLight],
    *,
    strategy: str = "vectorized",
    **config_kwargs,
) -> np.ndarray:
    """Render a scene to a flat row-major RGB byte buffer of length width * height * 3.

    Pixel (i, j) occupies bytes [3 * (j * width + i), 3 * (j * width + i) + 3).
    Extra keyword arguments (max_depth, background_color, world_horizon,
    bias_epsilon) are passed to `RenderConfig.create`. Invalid configuration
    or scene data raises ValueError before any tracing happens.
    """
    _check_strategy(strategy)
    config = RenderConfig.create(width=width, height=height, fov=fov, **config_kwargs)
    scene = build_scene(spheres, lights)

    logger.debug("Rendering %dx%d (%s, max depth %d)", width, height, strategy, config.max_depth)
    start_time = time.time()
    colors = render_image(scene, config, strategy)
    buffer = np.asarray(quantize(colors)).reshape(-1)
    logger.debug("Rendering finished in %.2f seconds", time.time() - start_time)
    return buffer
