"""Render configuration: image size, camera field of view and tracing limits."""

import math

import jax.numpy as jnp
from flax import struct

from .types import as_vector3

# --- Defaults ---
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = math.pi / 2.0  # 90 degrees, radians
BACKGROUND_COLOR = (0.7, 0.8, 1.0)
MAX_RECURSION_DEPTH = 6
WORLD_HORIZON = 1000.0  # Hits at or beyond this distance count as misses
BIAS_EPSILON = 1e-3     # Offset of secondary ray origins along the normal


@struct.dataclass
class RenderConfig:
    # Static under jit: these shape the traced computation
    width: int = struct.field(pytree_node=False, default=DEFAULT_WIDTH)
    height: int = struct.field(pytree_node=False, default=DEFAULT_HEIGHT)
    max_depth: int = struct.field(pytree_node=False, default=MAX_RECURSION_DEPTH)
    # Dynamic
    fov: float = DEFAULT_FOV
    background_color: jnp.ndarray = struct.field(
        default_factory=lambda: jnp.asarray(BACKGROUND_COLOR, dtype=jnp.float64)
    )
    world_horizon: float = WORLD_HORIZON
    bias_epsilon: float = BIAS_EPSILON

    @classmethod
    def create(
        cls,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        fov: float = DEFAULT_FOV,
        max_depth: int = MAX_RECURSION_DEPTH,
        background_color=BACKGROUND_COLOR,
        world_horizon: float = WORLD_HORIZON,
        bias_epsilon: float = BIAS_EPSILON,
    ) -> "RenderConfig":
        """Build a validated config; raises ValueError before any rendering work."""
        if int(width) != width or width <= 0:
            raise ValueError(f"width must be a positive integer, got {width!r}")
        if int(height) != height or height <= 0:
            raise ValueError(f"height must be a positive integer, got {height!r}")
        if not 0.0 < fov < math.pi:
            raise ValueError(f"fov must be in (0, pi) radians, got {fov!r}")
        if int(max_depth) != max_depth or max_depth < 0:
            raise ValueError(f"max_depth must be a non-negative integer, got {max_depth!r}")
        if not world_horizon > 0.0:
            raise ValueError(f"world_horizon must be > 0, got {world_horizon!r}")
        if not bias_epsilon >= 0.0:
            raise ValueError(f"bias_epsilon must be >= 0, got {bias_epsilon!r}")
        return cls(
            width=int(width),
            height=int(height),
            max_depth=int(max_depth),
            fov=float(fov),
            background_color=as_vector3(background_color, "background_color"),
            world_horizon=float(world_horizon),
            bias_epsilon=float(bias_epsilon),
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height
