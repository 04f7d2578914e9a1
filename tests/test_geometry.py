import jax.numpy as jnp
import numpy as np
import pytest

from whitted.geometry import Sphere, intersect_sphere, intersect_scene
from whitted.scene import build_scene
from whitted.types import Material
from whitted.utils import normalize

ORIGIN = jnp.zeros(3)
FORWARD = jnp.array([0.0, 0.0, -1.0])

# --- Tests for intersect_sphere ---

def test_sphere_hit_head_on():
    """A ray aimed at the center hits at center distance minus radius."""
    hit, t = intersect_sphere(jnp.array([0.0, 0.0, -5.0]), 1.0, ORIGIN, FORWARD)
    assert bool(hit)
    assert jnp.allclose(t, 4.0, atol=1e-12)

def test_sphere_hit_off_axis_distance():
    center = jnp.array([2.0, 3.0, -6.0])
    direction = normalize(center)
    hit, t = intersect_sphere(center, 0.5, ORIGIN, direction)
    assert bool(hit)
    assert jnp.allclose(t, 7.0 - 0.5, atol=1e-9)

def test_sphere_miss_when_line_passes_outside():
    hit, t = intersect_sphere(jnp.array([0.0, 2.0, -5.0]), 1.0, ORIGIN, FORWARD)
    assert not bool(hit)
    assert jnp.isinf(t)

def test_sphere_behind_origin_is_missed():
    hit, _ = intersect_sphere(jnp.array([0.0, 0.0, 5.0]), 1.0, ORIGIN, FORWARD)
    assert not bool(hit)

def test_origin_inside_sphere_uses_far_root():
    hit, t = intersect_sphere(jnp.array([0.0, 0.0, -0.5]), 2.0, ORIGIN, FORWARD)
    assert bool(hit)
    assert jnp.allclose(t, 2.5, atol=1e-12)

def test_sphere_method_matches_function(ivory):
    sphere = Sphere.create((0.0, 0.0, -5.0), 1.0, ivory)
    hit, t = sphere.ray_intersect(ORIGIN, FORWARD)
    assert bool(hit)
    assert jnp.allclose(t, 4.0)

# --- Tests for intersect_scene ---

def test_scene_hit_reports_point_and_outward_normal(front_sphere, ivory):
    scene = build_scene([front_sphere], [])
    rec = intersect_scene(scene.spheres, ORIGIN, FORWARD, 1000.0)
    assert bool(rec.hit)
    assert jnp.allclose(rec.t, 4.0, atol=1e-12)
    assert jnp.allclose(rec.position, jnp.array([0.0, 0.0, -4.0]), atol=1e-12)
    # Normal points from the center back toward the ray origin
    assert jnp.allclose(rec.normal, jnp.array([0.0, 0.0, 1.0]), atol=1e-12)
    assert jnp.allclose(rec.material.diffuse_color, ivory.diffuse_color)
    assert jnp.allclose(rec.material.albedo, ivory.albedo)

def test_scene_picks_nearest_sphere(ivory, matte_red):
    far = Sphere.create((0.0, 0.0, -10.0), 1.0, ivory)
    near = Sphere.create((0.0, 0.0, -5.0), 1.0, matte_red)
    scene = build_scene([far, near], [])
    rec = intersect_scene(scene.spheres, ORIGIN, FORWARD, 1000.0)
    assert jnp.allclose(rec.t, 4.0)
    assert jnp.allclose(rec.material.diffuse_color, matte_red.diffuse_color)

def test_scene_tie_keeps_first_sphere(ivory, matte_red):
    """Equidistant spheres: the one listed first wins."""
    first = Sphere.create((0.0, 0.0, -5.0), 1.0, matte_red)
    second = Sphere.create((0.0, 0.0, -5.0), 1.0, ivory)
    rec = intersect_scene(build_scene([first, second], []).spheres, ORIGIN, FORWARD, 1000.0)
    assert jnp.allclose(rec.material.diffuse_color, matte_red.diffuse_color)

    rec_swapped = intersect_scene(build_scene([second, first], []).spheres, ORIGIN, FORWARD, 1000.0)
    assert jnp.allclose(rec_swapped.material.diffuse_color, ivory.diffuse_color)

def test_scene_miss_zeroes_fields(front_sphere):
    scene = build_scene([front_sphere], [])
    rec = intersect_scene(scene.spheres, ORIGIN, jnp.array([0.0, 0.0, 1.0]), 1000.0)
    assert not bool(rec.hit)
    assert jnp.isinf(rec.t)
    np.testing.assert_array_equal(np.asarray(rec.position), np.zeros(3))
    np.testing.assert_array_equal(np.asarray(rec.normal), np.zeros(3))
    np.testing.assert_array_equal(np.asarray(rec.material.albedo), np.zeros(3))

def test_scene_beyond_world_horizon_is_a_miss(ivory):
    distant = Sphere.create((0.0, 0.0, -2000.0), 1.0, ivory)
    spheres = build_scene([distant], []).spheres
    assert not bool(intersect_scene(spheres, ORIGIN, FORWARD, 1000.0).hit)
    rec = intersect_scene(spheres, ORIGIN, FORWARD, 5000.0)
    assert bool(rec.hit)
    assert jnp.allclose(rec.t, 1999.0)

def test_empty_scene_never_hits():
    scene = build_scene([], [])
    rec = intersect_scene(scene.spheres, ORIGIN, FORWARD, 1000.0)
    assert not bool(rec.hit)

# --- Construction checks ---

@pytest.mark.parametrize("radius", [0.0, -1.0])
def test_sphere_rejects_non_positive_radius(ivory, radius):
    with pytest.raises(ValueError):
        Sphere.create((0.0, 0.0, -5.0), radius, ivory)

def test_sphere_rejects_bad_center(ivory):
    with pytest.raises(ValueError):
        Sphere.create((0.0, -5.0), 1.0, ivory)

def test_material_rejects_negative_exponent():
    with pytest.raises(ValueError):
        Material.create((1.0, 1.0, 1.0), (1.0, 0.0, 0.0), -1.0)
