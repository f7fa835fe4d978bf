"""Tests for the demo scene factory.

This module tests:
- Scene contents (primitive, material and light counts)
- Parameter customization
- That the scene renders to a sensible image
"""

import numpy as np
import pytest


class TestDemoSceneContents:
    """Tests for what create_demo_scene builds."""

    def test_primitive_counts(self):
        """Test the scene has three spheres, two planes and a triangle."""
        from whitted.scene.demo import create_demo_scene

        scene, _ = create_demo_scene()

        assert scene.get_sphere_count() == 3
        assert scene.get_plane_count() == 2
        assert scene.get_triangle_count() == 1
        assert scene.get_material_count() == 6

    def test_lights_and_ambient(self):
        """Test two point lights and the default ambient colour."""
        from whitted.scene.demo import create_demo_scene

        scene, _ = create_demo_scene()

        assert scene.get_light_count() == 2
        assert scene.get_ambient_light() == pytest.approx((0.2, 0.2, 0.2))

    def test_default_camera(self):
        """Test the returned camera uses a 60 degree field of view."""
        from whitted.camera.pinhole import PinholeCamera
        from whitted.scene.demo import create_demo_scene

        _, camera = create_demo_scene()
        assert camera == PinholeCamera(hfov=60.0, focal_distance=1.0)

    def test_scene_uses_every_feature(self):
        """Test the scene has a mirror, a refractive material and a triangle."""
        from whitted.scene.demo import create_demo_scene

        scene, _ = create_demo_scene()
        params = [info.params for info in scene.materials]

        assert any(p["reflectivity"] >= 0.5 for p in params)
        assert any(p["transmissivity"] > 0.0 and p["refractive_index"] > 1.0 for p in params)

    def test_custom_params(self):
        """Test DemoSceneParams flow into materials, lights and camera."""
        from whitted.scene.demo import DemoSceneParams, create_demo_scene

        params = DemoSceneParams(
            key_light_color=(1.0, 0.5, 0.5),
            ambient_color=(0.0, 0.0, 0.0),
            mirror_reflectivity=1.0,
            glass_refractive_index=2.4,
            hfov=45.0,
        )
        scene, camera = create_demo_scene(params)

        assert camera.hfov == 45.0
        assert scene.lights[0].color == (1.0, 0.5, 0.5)
        assert scene.get_ambient_light() == (0.0, 0.0, 0.0)
        reflectivities = [info.params["reflectivity"] for info in scene.materials]
        assert 1.0 in reflectivities
        indices = [info.params["refractive_index"] for info in scene.materials]
        assert 2.4 in indices


class TestDemoSceneRender:
    """Tests that render the demo scene at a small size."""

    def test_render_small_image(self):
        """Test a small render completes with finite, varied colours."""
        from whitted.core.renderer import Renderer
        from whitted.scene.demo import create_demo_scene

        _, camera = create_demo_scene()
        renderer = Renderer(32, 24, camera=camera)

        assert renderer.render() is True

        image = renderer.get_image_numpy()
        assert image.shape == (24, 32, 3)
        assert np.all(np.isfinite(image))
        assert image.min() >= 0.0
        assert image.max() <= 1.0
        # Floor, walls and objects give more than one colour
        assert len(np.unique(image.reshape(-1, 3), axis=0)) > 10

    def test_floor_is_lit(self):
        """Test the bottom row (floor) is brighter than black."""
        from whitted.core.renderer import Renderer
        from whitted.scene.demo import create_demo_scene

        _, camera = create_demo_scene()
        renderer = Renderer(16, 12, camera=camera)
        renderer.render()

        image = renderer.get_image_numpy()
        assert image[-1].mean() > 0.1
