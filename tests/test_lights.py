"""Tests for point lights and the ambient colour."""

import pytest
import taichi as ti


class TestPointLights:
    """Tests for the point light registry."""

    def test_add_point_light(self):
        """Test lights are stored in order."""
        from whitted.scene.lights import add_point_light, get_light_count, light_positions

        assert add_point_light((1.0, 2.0, 3.0), (1.0, 1.0, 1.0)) == 0
        assert add_point_light((4.0, 5.0, 6.0), (0.5, 0.5, 0.5)) == 1
        assert get_light_count() == 2
        assert abs(light_positions[1][2] - 6.0) < 1e-6

    def test_negative_color_raises(self):
        """Test a negative light colour is rejected."""
        from whitted.scene.lights import add_point_light

        with pytest.raises(ValueError, match="negative"):
            add_point_light((0.0, 0.0, 0.0), (1.0, -1.0, 1.0))

    def test_capacity(self, monkeypatch):
        """Test exceeding MAX_LIGHTS raises RuntimeError."""
        from whitted.scene import lights

        monkeypatch.setattr(lights, "MAX_LIGHTS", 1)
        lights.add_point_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            lights.add_point_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))


class TestAmbientLight:
    """Tests for the scene ambient colour."""

    def test_default_is_black(self):
        """Test the ambient colour starts black after clearing."""
        from whitted.scene.lights import get_ambient_light

        assert get_ambient_light() == (0.0, 0.0, 0.0)

    def test_set_and_read_in_kernel(self):
        """Test the ambient colour is visible from kernels."""
        from whitted.scene.lights import ambient_light, get_ambient_light, set_ambient_light

        set_ambient_light((0.25, 0.5, 0.75))
        assert get_ambient_light() == pytest.approx((0.25, 0.5, 0.75))

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = ambient_light()

        test_kernel()
        assert abs(result[None][1] - 0.5) < 1e-6

    def test_clear_lights_resets_ambient(self):
        """Test clear_lights also resets the ambient colour."""
        from whitted.scene.lights import clear_lights, get_ambient_light, set_ambient_light

        set_ambient_light((1.0, 1.0, 1.0))
        clear_lights()
        assert get_ambient_light() == (0.0, 0.0, 0.0)
