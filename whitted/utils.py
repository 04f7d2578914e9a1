import jax
import jax.numpy as jnp

# --- Vector Utilities ---
def dot(v1, v2):
    return jnp.sum(v1 * v2, axis=-1)

def norm(v):
    return jnp.linalg.norm(v, axis=-1)

def normalize(v):
    """Normalize a vector."""
    # Add epsilon to avoid division by zero for zero-length vectors
    length = jnp.linalg.norm(v, axis=-1, keepdims=True)
    return v / jnp.maximum(length, 1e-12)

def reflect(v, n):
    """Reflect vector v around normal n."""
    return v - 2 * dot(v, n)[..., None] * n

def offset_origin(point, normal, direction, epsilon):
    """Nudge `point` off the surface to the side `direction` leaves from.

    Secondary rays (shadow and reflection) start here so they do not
    re-hit the surface they were spawned on.
    """
    leaving_inside = (dot(direction, normal) < 0.0)[..., None]
    return jnp.where(leaving_inside, point - normal * epsilon, point + normal * epsilon)

# --- Display Conversion ---

@jax.jit
def quantize(colors: jnp.ndarray) -> jnp.ndarray:
    """Map linear colors to 8-bit channels.

    Values are scaled by 255 and clamped to [0, 255] before truncation, so
    over-bright colors saturate at 255 instead of wrapping around.
    """
    return jnp.clip(colors * 255.0, 0.0, 255.0).astype(jnp.uint8)
