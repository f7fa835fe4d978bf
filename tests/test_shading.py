"""Tests for shadow rays and Phong local illumination.

The scenes here are a floor plane at y = 0 seen from straight above, so the
normal, light and view directions are all (0, 1, 0) unless a test moves the
light.
"""

import taichi as ti


def _shade(origin, direction):
    """Intersect a ray with the scene and return its local colour."""
    from whitted.core.shading import shade_local
    from whitted.materials.phong import get_phong_material
    from whitted.scene.intersection import intersect_scene, vec3

    result = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = intersect_scene(o, d)
        color = vec3(0.0, 0.0, 0.0)
        if rec.hit == 1:
            color = shade_local(rec, get_phong_material(rec.material_id))
        result[None] = color

    test_kernel(vec3(*origin), vec3(*direction))
    return result[None]


def _floor(
    ambient=(0.1, 0.1, 0.1),
    diffuse=(1.0, 1.0, 1.0),
    specular=(0.0, 0.0, 0.0),
    shininess=0.0,
):
    from whitted.materials.phong import add_phong_material
    from whitted.scene.intersection import add_plane, vec3

    mat = add_phong_material(
        ambient=ambient, diffuse=diffuse, specular=specular, shininess=shininess
    )
    add_plane(vec3(0, 0, 0), vec3(0, 1, 0), mat)


DOWN_FROM_ABOVE = ((0.0, 1.0, 0.0), (0.0, -1.0, 0.0))


class TestShadeLocal:
    """Tests for the Phong local term."""

    def test_ambient_only(self):
        """Test with no lights the colour is material ambient * scene ambient."""
        from whitted.scene.lights import set_ambient_light

        _floor(ambient=(0.2, 0.4, 0.6))
        set_ambient_light((0.5, 0.5, 0.5))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 0.1) < 1e-6
        assert abs(c[1] - 0.2) < 1e-6
        assert abs(c[2] - 0.3) < 1e-6

    def test_diffuse_head_on_is_not_clamped(self):
        """Test ambient and full diffuse add up beyond 1."""
        from whitted.scene.lights import add_point_light, set_ambient_light

        _floor()
        set_ambient_light((1.0, 1.0, 1.0))
        add_point_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 1.1) < 1e-5

    def test_diffuse_cosine_falloff(self):
        """Test a light at 60 degrees contributes cos(60) = 0.5."""
        from whitted.scene.lights import add_point_light

        _floor(ambient=(0.0, 0.0, 0.0))
        add_point_light((3.0**0.5, 1.0, 0.0), (1.0, 1.0, 1.0))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 0.5) < 1e-5

    def test_specular_highlight(self):
        """Test R.V = 1 gives the full specular colour."""
        from whitted.scene.lights import add_point_light

        _floor(
            ambient=(0.0, 0.0, 0.0),
            diffuse=(0.0, 0.0, 0.0),
            specular=(0.5, 0.5, 0.5),
            shininess=10.0,
        )
        add_point_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 0.5) < 1e-5

    def test_light_colors_multiply(self):
        """Test a coloured light tints the diffuse term per channel."""
        from whitted.scene.lights import add_point_light

        _floor(ambient=(0.0, 0.0, 0.0), diffuse=(0.5, 1.0, 1.0))
        add_point_light((0.0, 5.0, 0.0), (1.0, 0.0, 0.5))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 0.5) < 1e-5
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 0.5) < 1e-5

    def test_two_lights_sum(self):
        """Test contributions from two lights add up."""
        from whitted.scene.lights import add_point_light

        _floor(ambient=(0.0, 0.0, 0.0), diffuse=(0.25, 0.25, 0.25))
        add_point_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0))
        add_point_light((0.0, 9.0, 0.0), (1.0, 1.0, 1.0))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 0.5) < 1e-5


class TestShadows:
    """Tests for hard shadows."""

    def test_occluder_leaves_ambient_only(self):
        """Test a sphere between surface and light removes the direct term."""
        from whitted.materials.phong import add_phong_material
        from whitted.scene.intersection import add_sphere, vec3
        from whitted.scene.lights import add_point_light, set_ambient_light

        _floor()
        set_ambient_light((1.0, 1.0, 1.0))
        add_point_light((2.0, 5.0, 0.0), (1.0, 1.0, 1.0))
        blocker = add_phong_material(diffuse=(1.0, 0.0, 0.0))
        add_sphere(vec3(2.0, 2.5, 0.0), 0.5, blocker)

        # Directly under the sphere
        c = _shade((2.0, 1.0, 0.0), (0.0, -1.0, 0.0))
        assert abs(c[0] - 0.1) < 1e-5

        # The shadow ray from the origin passes beside the sphere
        c = _shade((0.0, 1.0, 0.0), (0.0, -1.0, 0.0))
        assert c[0] > 1.0

    def test_light_behind_surface_is_unlit(self):
        """Test a light on the far side of the surface contributes nothing."""
        from whitted.scene.lights import add_point_light

        _floor(ambient=(0.0, 0.0, 0.0))
        add_point_light((0.0, -5.0, 0.0), (1.0, 1.0, 1.0))

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0]) < 1e-6

    def test_blocker_beyond_light_does_not_shadow(self):
        """Test geometry farther away than the light casts no shadow."""
        from whitted.materials.phong import add_phong_material
        from whitted.scene.intersection import add_sphere, vec3
        from whitted.scene.lights import add_point_light

        _floor(ambient=(0.0, 0.0, 0.0))
        add_point_light((0.0, 2.0, 0.0), (1.0, 1.0, 1.0))
        add_sphere(vec3(0.0, 4.0, 0.0), 0.5, add_phong_material())

        c = _shade(*DOWN_FROM_ABOVE)
        assert abs(c[0] - 1.0) < 1e-5

    def test_is_in_shadow_direct(self):
        """Test is_in_shadow against a blocker and against open space."""
        from whitted.core.shading import is_in_shadow
        from whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 2.5, 0.0), 0.5, 0)
        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            up = vec3(0.0, 1.0, 0.0)
            result[0] = is_in_shadow(vec3(0.0, 0.0, 0.0), vec3(0.0, 5.0, 0.0), 5.0, up)
            result[1] = is_in_shadow(vec3(3.0, 0.0, 0.0), vec3(3.0, 5.0, 0.0), 5.0, up)

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
