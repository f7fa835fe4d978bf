"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length)
- Reflection and refraction helpers, including total internal reflection
"""

import math

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, 1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at computes correct point along ray."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_make_ray_normalizes_direction(self):
        """Test make_ray stores a unit direction."""
        from whitted.core.ray import make_ray, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(3.0, 0.0, 4.0))
            result[None] = ray.direction

        test_kernel()
        d = result[None]
        assert abs(d[0] - 0.6) < 1e-6
        assert abs(d[1]) < 1e-6
        assert abs(d[2] - 0.8) < 1e-6


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_length_and_length_squared(self):
        """Test Euclidean length of a 3-4-0 vector."""
        from whitted.core.ray import length, length_squared, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        len_sq_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            len_result[None] = length(v)
            len_sq_result[None] = length_squared(v)

        test_kernel()
        assert abs(len_result[None] - 5.0) < 1e-6
        assert abs(len_sq_result[None] - 25.0) < 1e-5

    def test_normalize_unit_length(self):
        """Test normalize produces a unit vector."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(1.0, 2.0, 2.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0 / 3.0) < 1e-6
        assert abs(r[1] - 2.0 / 3.0) < 1e-6
        assert abs(r[2] - 2.0 / 3.0) < 1e-6

    def test_normalize_zero_vector_is_zero(self):
        """Test normalizing the zero vector yields zero, not NaN."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        for i in range(3):
            assert not math.isnan(r[i])
            assert r[i] == 0.0

    def test_dot_and_cross(self):
        """Test dot and cross products of basis vectors."""
        from whitted.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())
        cross_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(dot_result[None] - 12.0) < 1e-6
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6


class TestReflectRefract:
    """Tests for reflection and refraction helpers."""

    def test_reflect_45_degrees(self):
        """Test reflection off a horizontal surface flips the y component."""
        from whitted.core.ray import normalize, reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, -1.0, 0.0))
            result[None] = reflect(incident, vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        s = 1.0 / math.sqrt(2.0)
        assert abs(r[0] - s) < 1e-6
        assert abs(r[1] - s) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_normal_incidence_passes_straight(self):
        """Test a ray along the normal is not bent."""
        from whitted.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -1.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 1.0) < 1e-6

    def test_refract_obeys_snell(self):
        """Test sin(theta_t) = eta * sin(theta_i) for an oblique ray."""
        from whitted.core.ray import normalize, refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        eta = 1.0 / 1.5

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, 0.0, 1.0))
            result[None] = refract(incident, vec3(0.0, 0.0, -1.0), eta)

        test_kernel()
        r = result[None]
        length = math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert abs(length - 1.0) < 1e-5
        sin_i = math.sin(math.pi / 4.0)
        assert abs(r[0] - eta * sin_i) < 1e-5
        assert r[2] > 0.0

    def test_refract_with_inverse_eta_restores_direction(self):
        """Test refracting with eta and then 1 / eta undoes the bend."""
        from whitted.core.ray import normalize, refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        original = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(0.3, 0.2, 1.0))
            facing = vec3(0.0, 0.0, -1.0)
            inside = refract(incident, facing, 1.0 / 1.5)
            original[None] = incident
            result[None] = refract(normalize(inside), facing, 1.5)

        test_kernel()
        r = result[None]
        o = original[None]
        for i in range(3):
            assert abs(r[i] - o[i]) < 1e-5

    def test_total_internal_reflection(self):
        """Test a grazing ray leaving glass has a negative discriminant."""
        from whitted.core.ray import normalize, refract, refraction_discriminant, vec3

        k_result = ti.field(dtype=ti.f32, shape=())
        dir_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            # 60 degrees from the normal, beyond the glass critical angle (~41.8)
            incident = normalize(vec3(ti.sqrt(3.0), 0.0, 1.0))
            normal = vec3(0.0, 0.0, -1.0)
            k_result[None] = refraction_discriminant(incident, normal, 1.5)
            dir_result[None] = refract(incident, normal, 1.5)

        test_kernel()
        assert k_result[None] < 0.0
        d = dir_result[None]
        assert d[0] == 0.0 and d[1] == 0.0 and d[2] == 0.0
