import jax.numpy as jnp
from flax import struct

# --- Type Aliases for Clarity ---
# Colors and points are plain (3,) float64 arrays
Vector3 = jnp.ndarray
Color = jnp.ndarray


def as_vector3(value, name: str = "vector") -> Vector3:
    """Coerce `value` to a float64 (3,) array, raising ValueError on any other shape."""
    vec = jnp.asarray(value, dtype=jnp.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {vec.shape}")
    return vec


@struct.dataclass
class Ray:
    origin: jnp.ndarray          # Shape (..., 3)
    direction: jnp.ndarray       # Shape (..., 3), unit length


@struct.dataclass
class Material:
    diffuse_color: jnp.ndarray   # Shape (3,), tint in [0, 1]^3 (not clamped)
    albedo: jnp.ndarray          # Shape (3,): diffuse, specular, reflection weights
    specular_exponent: jnp.ndarray  # Scalar Phong shininess

    @classmethod
    def create(cls, diffuse_color, albedo, specular_exponent) -> "Material":
        exponent = jnp.asarray(specular_exponent, dtype=jnp.float64)
        if exponent.shape != ():
            raise ValueError("specular_exponent must be a scalar")
        if float(exponent) < 0.0:
            raise ValueError(f"specular_exponent must be >= 0, got {float(exponent)}")
        return cls(
            diffuse_color=as_vector3(diffuse_color, "diffuse_color"),
            albedo=as_vector3(albedo, "albedo"),
            specular_exponent=exponent,
        )

    @classmethod
    def zeros(cls, batch_dims=()) -> "Material":
        """All-zero material, used as the placeholder carried by a miss."""
        return cls(
            diffuse_color=jnp.zeros(batch_dims + (3,), dtype=jnp.float64),
            albedo=jnp.zeros(batch_dims + (3,), dtype=jnp.float64),
            specular_exponent=jnp.zeros(batch_dims, dtype=jnp.float64),
        )


@struct.dataclass
class HitRecord:
    hit: jnp.ndarray             # Bool scalar; every other field is zeroed when False
    t: jnp.ndarray               # Distance along the ray, inf on a miss
    position: jnp.ndarray        # Shape (3,)
    normal: jnp.ndarray          # Shape (3,), outward facing
    material: Material

# --- Light Data Structures ---

@struct.dataclass
class PointLight:
    position: jnp.ndarray        # Position in 3D space
    intensity: jnp.ndarray       # Scalar, >= 0

    @classmethod
    def create(cls, position, intensity) -> "PointLight":
        value = jnp.asarray(intensity, dtype=jnp.float64)
        if value.shape != ():
            raise ValueError("light intensity must be a scalar")
        if float(value) < 0.0:
            raise ValueError(f"light intensity must be >= 0, got {float(value)}")
        return cls(position=as_vector3(position, "light position"), intensity=value)
