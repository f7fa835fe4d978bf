"""Pytest configuration for the whitted test suite.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are declared after ti.init()
    from whitted.core.integrator import clear_render_target
    from whitted.materials.phong import clear_phong_materials
    from whitted.scene.intersection import clear_scene
    from whitted.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_phong_materials()
        clear_lights()
        clear_render_target()

    _clear_all()
    yield
    _clear_all()
