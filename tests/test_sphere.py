"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (near root)
- Ray missing sphere
- Sphere behind the ray origin
- Ray starting inside sphere (far root)
- Hit record update rules (strictly closer wins, ties keep the old hit)
"""

import math


def _ray(origin, direction):
    from pyramid_tracer.core.ray import Ray, Vec3, normalize

    return Ray(Vec3(*origin), normalize(Vec3(*direction)))


class TestRaySphere:
    """Tests for the distance query."""

    def test_direct_hit_returns_near_root(self):
        """Test that a head-on ray reports distance d - r."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        assert sphere.ray_sphere(_ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))) == 4.0

    def test_off_axis_hit(self):
        """Test a hit from an arbitrary direction against the analytic value."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(1.0, 2.0, 3.0), 0.5)
        origin = (4.0, 6.0, 3.0)
        # Aim at the center: distance 5, so the surface is 4.5 away
        t = sphere.ray_sphere(_ray(origin, (-3.0, -4.0, 0.0)))
        assert abs(t - 4.5) < 1e-12

    def test_miss_returns_infinity(self):
        """Test that a ray passing beside the sphere reports +inf."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import INFINITY, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        assert sphere.ray_sphere(_ray((0.0, 2.0, -5.0), (0.0, 0.0, 1.0))) == INFINITY

    def test_sphere_behind_origin_returns_infinity(self):
        """Test that a sphere entirely behind the ray is not hit."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        assert sphere.ray_sphere(_ray((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))) == math.inf

    def test_origin_inside_returns_far_root(self):
        """Test that a ray starting inside reports the exit distance."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 2.0)
        assert sphere.ray_sphere(_ray((0.0, 0.0, 0.5), (0.0, 0.0, 1.0))) == 1.5
        assert sphere.ray_sphere(_ray((0.0, 0.0, 0.5), (0.0, 0.0, -1.0))) == 2.5

    def test_leaving_surface_is_not_reported(self):
        """Test that a ray leaving from just outside the surface misses."""
        from pyramid_tracer.core.ray import DELTA, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        t = sphere.ray_sphere(_ray((0.0, 1.0 + DELTA, 0.0), (0.0, 1.0, 0.0)))
        assert t == math.inf


class TestSphereIntersect:
    """Tests for updating the hit record."""

    def test_records_distance_and_outward_normal(self):
        """Test that a hit stores the distance and the unit normal."""
        from pyramid_tracer.core.ray import Hit, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        hit = Hit()
        sphere.intersect(hit, _ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)))
        assert hit.distance == 4.0
        assert hit.normal == Vec3(0.0, 0.0, -1.0)

    def test_normal_is_unit_length(self):
        """Test the normal of an oblique hit."""
        from pyramid_tracer.core.ray import Hit, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, -1.0, 0.0), 1.0)
        hit = Hit()
        sphere.intersect(hit, _ray((0.0, 0.0, -4.0), (0.1, -0.2, 1.0)))
        assert not hit.missed
        assert abs(hit.normal.length() - 1.0) < 1e-12

    def test_farther_sphere_does_not_replace_hit(self):
        """Test that the hit distance never increases."""
        from pyramid_tracer.core.ray import Hit, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        near = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        far = Sphere(Vec3(0.0, 0.0, 5.0), 1.0)
        ray = _ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
        hit = Hit()
        near.intersect(hit, ray)
        far.intersect(hit, ray)
        assert hit.distance == 4.0

        hit = Hit()
        far.intersect(hit, ray)
        near.intersect(hit, ray)
        assert hit.distance == 4.0

    def test_tie_keeps_previous_normal(self):
        """Test that an equally distant hit does not overwrite the record."""
        from pyramid_tracer.core.ray import Hit, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        marker = Vec3(1.0, 0.0, 0.0)
        hit = Hit(distance=4.0, normal=marker)
        sphere.intersect(hit, _ray((0.0, 0.0, -5.0), (0.0, 0.0, 1.0)))
        assert hit.distance == 4.0
        assert hit.normal == marker

    def test_miss_leaves_record_untouched(self):
        """Test that a miss does not modify the record."""
        from pyramid_tracer.core.ray import Hit, Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        sphere = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
        hit = Hit()
        sphere.intersect(hit, _ray((0.0, 3.0, -5.0), (0.0, 0.0, 1.0)))
        assert hit.missed

    def test_describe(self):
        """Test the one-line description."""
        from pyramid_tracer.core.ray import Vec3
        from pyramid_tracer.geometry.sphere import Sphere

        text = Sphere(Vec3(0.0, -1.0, 0.0), 1.0).describe(indent=1)
        assert text == "  Sphere: center=(0.0, -1.0, 0.0) radius=1.0"
