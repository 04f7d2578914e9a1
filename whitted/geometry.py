import jax
import jax.numpy as jnp
from flax import struct
from typing import Tuple

from .types import HitRecord, Material, as_vector3
from .utils import normalize, dot


@struct.dataclass
class Sphere:
    center: jnp.ndarray  # Shape (3,)
    radius: jnp.ndarray  # Scalar, > 0
    material: Material

    @classmethod
    def create(cls, center, radius, material: Material) -> "Sphere":
        r = jnp.asarray(radius, dtype=jnp.float64)
        if r.shape != ():
            raise ValueError("sphere radius must be a scalar")
        if not float(r) > 0.0:
            raise ValueError(f"sphere radius must be > 0, got {float(r)}")
        return cls(center=as_vector3(center, "sphere center"), radius=r, material=material)

    def ray_intersect(self, origin, direction) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """Distance to this sphere along a unit-direction ray, see `intersect_sphere`."""
        return intersect_sphere(self.center, self.radius, origin, direction)


@jax.jit
def intersect_sphere(center, radius, origin, direction) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """Ray-sphere intersection using the geometric (half-chord) method.

    Args:
        center (3,): Sphere center.
        radius (): Sphere radius.
        origin (3,): Ray origin.
        direction (3,): Ray direction, must be normalized.

    Returns:
        Tuple: (hit, t)
            hit (bool): True if the sphere lies (at least partly) in front of the origin.
            t (float): Distance to the near intersection, or to the far one when the
                origin is inside the sphere. inf when there is no hit.
    """
    to_center = center - origin
    tca = dot(to_center, direction)
    d2 = dot(to_center, to_center) - tca * tca
    radius2 = radius * radius
    # Perpendicular distance already rules the sphere out; keep the sqrt argument
    # non-negative so the discarded branch stays finite
    misses_line = d2 > radius2
    thc = jnp.sqrt(jnp.maximum(radius2 - d2, 0.0))
    t0 = tca - thc
    t1 = tca + thc
    t = jnp.where(t0 < 0.0, t1, t0)
    hit = ~misses_line & (t >= 0.0)
    return hit, jnp.where(hit, t, jnp.inf)


@jax.jit
def intersect_scene(spheres: Sphere, origin, direction, world_horizon) -> HitRecord:
    """Finds the closest hit by scanning over the stacked sphere arrays.

    `spheres` holds one row per sphere (see `scene.build_scene`). Spheres are
    visited in order and only a strictly closer hit replaces the current one,
    so of two equidistant spheres the earlier wins. Hits at or beyond
    `world_horizon` are reported as misses.
    """
    origin = jnp.asarray(origin, dtype=jnp.float64)
    direction = jnp.asarray(direction, dtype=jnp.float64)

    def scan_body(carry, sphere):
        best_t, best_center, best_material = carry
        hit, t = intersect_sphere(sphere.center, sphere.radius, origin, direction)
        is_closer = hit & (t < best_t)
        next_carry = jax.tree.map(
            lambda c, h: jnp.where(is_closer, h, c),
            (best_t, best_center, best_material),
            (t, sphere.center, sphere.material),
        )
        return next_carry, None

    init = (
        jnp.full((), jnp.inf, dtype=jnp.float64),
        jnp.zeros(3, dtype=jnp.float64),
        Material.zeros(),
    )
    (t, center, material), _ = jax.lax.scan(scan_body, init, spheres)

    hit = t < world_horizon
    # Use a finite stand-in distance on a miss so no inf/nan leaks into the zeroed fields
    safe_t = jnp.where(hit, t, 0.0)
    position = origin + direction * safe_t
    normal = normalize(position - center)

    return HitRecord(
        hit=hit,
        t=jnp.where(hit, t, jnp.inf),
        position=jnp.where(hit, position, jnp.zeros_like(position)),
        normal=jnp.where(hit, normal, jnp.zeros_like(normal)),
        material=jax.tree.map(lambda x: jnp.where(hit, x, jnp.zeros_like(x)), material),
    )
