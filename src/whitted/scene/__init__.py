"""Scene module for geometry, lights and scene building.

Components:
    intersection: Primitive storage and closest-hit / occlusion queries
    lights: Point lights and the scene ambient colour
    manager: SceneManager, the high-level scene builder
    demo: Demo scene factory

The scene is stored in module-level Taichi fields; the intersection and
shading code reads them directly from kernels.
"""

from whitted.scene.demo import DemoSceneParams, create_demo_scene
from whitted.scene.intersection import (
    EntityKind,
    SceneHitRecord,
    intersect_scene,
    intersect_scene_any,
)
from whitted.scene.manager import SceneConfig, SceneManager

__all__ = [
    "EntityKind",
    "SceneHitRecord",
    "intersect_scene",
    "intersect_scene_any",
    "SceneManager",
    "SceneConfig",
    "DemoSceneParams",
    "create_demo_scene",
]
