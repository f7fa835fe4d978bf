"""Demo scene configuration.

This module provides a factory function for a small scene that exercises
every feature of the tracer: local Phong shading with hard shadows from two
point lights, a mirror sphere, a glass sphere that refracts the scene behind
it, and a triangle.

The camera is fixed at the origin looking down +z, so the scene is laid out
in front of it:
- Floor plane at y = -1 (light grey, slightly reflective)
- Back wall plane at z = 12 (pale blue)
- Diffuse red sphere on the left
- Mirror sphere in the middle, further back
- Glass sphere on the right, closer to the camera
- Yellow triangle standing behind the glass sphere

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demo import create_demo_scene
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> scene, camera = create_demo_scene()
    >>> Renderer(320, 240, camera=camera).render()
    True
"""

from dataclasses import dataclass

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.manager import SceneManager

# =============================================================================
# Demo Scene Parameters
# =============================================================================


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        key_light_color: RGB intensity of the main light (upper left).
        fill_light_color: RGB intensity of the fill light (upper right).
        ambient_color: Scene ambient colour.
        mirror_reflectivity: Reflectivity of the mirror sphere in [0, 1].
        glass_transmissivity: Transmissivity of the glass sphere in [0, 1].
        glass_refractive_index: Refractive index of the glass sphere.
        hfov: Horizontal field of view of the camera in degrees.

    Example:
        >>> params = DemoSceneParams()
        >>> params.glass_refractive_index
        1.5

        >>> # Darker scene with a diamond-like sphere
        >>> custom = DemoSceneParams(
        ...     ambient_color=(0.05, 0.05, 0.05),
        ...     glass_refractive_index=2.4,
        ... )
    """

    key_light_color: tuple[float, float, float] = (0.9, 0.9, 0.9)
    fill_light_color: tuple[float, float, float] = (0.4, 0.4, 0.5)
    ambient_color: tuple[float, float, float] = (0.2, 0.2, 0.2)
    mirror_reflectivity: float = 0.8
    glass_transmissivity: float = 0.9
    glass_refractive_index: float = 1.5
    hfov: float = 60.0


# =============================================================================
# Demo Scene Constants
# =============================================================================

FLOOR_Y = -1.0
BACK_WALL_Z = 12.0

KEY_LIGHT_POSITION = (-4.0, 6.0, 2.0)
FILL_LIGHT_POSITION = (5.0, 4.0, 0.0)


# =============================================================================
# Demo Scene Factory
# =============================================================================


def create_demo_scene(
    params: DemoSceneParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the demo scene.

    Args:
        params: Optional DemoSceneParams for customizing lights and materials.
            If None, uses default DemoSceneParams().

    Returns:
        A tuple of (SceneManager, PinholeCamera) where:
        - SceneManager contains all geometry, materials and lights
        - PinholeCamera is configured with params.hfov

    Example:
        >>> scene, camera = create_demo_scene()
        >>> scene.get_sphere_count(), scene.get_plane_count(), scene.get_triangle_count()
        (3, 2, 1)
    """
    if params is None:
        params = DemoSceneParams()

    scene = SceneManager()

    # =========================================================================
    # Materials
    # =========================================================================

    floor_mat = scene.add_material(
        ambient=(0.6, 0.6, 0.6),
        diffuse=(0.6, 0.6, 0.6),
        specular=(0.1, 0.1, 0.1),
        shininess=10.0,
        reflectivity=0.1,
    )
    wall_mat = scene.add_material(
        ambient=(0.3, 0.4, 0.6),
        diffuse=(0.3, 0.4, 0.6),
    )
    red_mat = scene.add_material(
        ambient=(0.5, 0.05, 0.05),
        diffuse=(0.8, 0.1, 0.1),
        specular=(0.5, 0.5, 0.5),
        shininess=40.0,
    )
    mirror_mat = scene.add_material(
        ambient=(0.02, 0.02, 0.02),
        diffuse=(0.05, 0.05, 0.05),
        specular=(1.0, 1.0, 1.0),
        shininess=200.0,
        reflectivity=params.mirror_reflectivity,
    )
    glass_mat = scene.add_material(
        specular=(1.0, 1.0, 1.0),
        shininess=250.0,
        reflectivity=0.05,
        transmissivity=params.glass_transmissivity,
        refractive_index=params.glass_refractive_index,
    )
    yellow_mat = scene.add_material(
        ambient=(0.4, 0.35, 0.05),
        diffuse=(0.9, 0.8, 0.1),
        specular=(0.3, 0.3, 0.3),
        shininess=20.0,
    )

    # =========================================================================
    # Planes
    # =========================================================================

    scene.add_plane(center=(0.0, FLOOR_Y, 0.0), normal=(0.0, 1.0, 0.0), material_id=floor_mat)
    scene.add_plane(center=(0.0, 0.0, BACK_WALL_Z), normal=(0.0, 0.0, -1.0), material_id=wall_mat)

    # =========================================================================
    # Spheres (resting on the floor)
    # =========================================================================

    scene.add_sphere(center=(-2.2, 0.0, 7.0), radius=1.0, material_id=red_mat)
    scene.add_sphere(center=(0.3, 0.5, 9.0), radius=1.5, material_id=mirror_mat)
    scene.add_sphere(center=(1.6, -0.2, 5.0), radius=0.8, material_id=glass_mat)

    # =========================================================================
    # Triangle (behind the glass sphere)
    # =========================================================================

    scene.add_triangle(
        v0=(2.0, FLOOR_Y, 10.0),
        v1=(4.5, FLOOR_Y, 10.5),
        v2=(3.2, 2.0, 10.2),
        material_id=yellow_mat,
    )

    # =========================================================================
    # Lighting
    # =========================================================================

    scene.add_point_light(position=KEY_LIGHT_POSITION, color=params.key_light_color)
    scene.add_point_light(position=FILL_LIGHT_POSITION, color=params.fill_light_color)
    scene.set_ambient_light(params.ambient_color)

    camera = PinholeCamera(hfov=params.hfov, focal_distance=1.0)

    return scene, camera
