import jax
import jax.numpy as jnp
from flax import struct
from functools import partial

from .types import Ray
from .utils import normalize


@struct.dataclass
class Camera:
    """Pinhole camera fixed at the origin, looking down the -z axis."""

    fov: float = jnp.pi / 2.0  # Vertical field of view (radians)

    @property
    def origin(self) -> jnp.ndarray:
        return jnp.zeros(3, dtype=jnp.float64)

    def primary_direction(self, i, j, width: int, height: int) -> jnp.ndarray:
        """Unit direction through the center of pixel (i, j); broadcasts over arrays of indices."""
        tan_half_fov = jnp.tan(self.fov / 2.0)
        x = (2.0 * (i + 0.5) / width - 1.0) * tan_half_fov * width / height
        # Row 0 is the top of the image
        y = -(2.0 * (j + 0.5) / height - 1.0) * tan_half_fov
        direction = jnp.stack([x, y, -jnp.ones_like(x)], axis=-1)
        return normalize(direction.astype(jnp.float64))

    @partial(jax.jit, static_argnames=['width', 'height'])
    def generate_rays(self, width: int, height: int) -> Ray:
        """Generate one primary ray per pixel, shape (height, width, 3)."""
        # Create pixel grid coordinates (image plane, origin at top-left)
        i, j = jnp.meshgrid(
            jnp.arange(width, dtype=jnp.float64),
            jnp.arange(height, dtype=jnp.float64),
        )
        directions = self.primary_direction(i, j, width, height)

        # Origin is the camera position for all rays
        ray_origin = jnp.tile(self.origin[None, None, :], (height, width, 1))

        return Ray(origin=ray_origin, direction=directions)
