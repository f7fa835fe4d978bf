"""Scene manager for building Whitted scenes.

This module provides a high-level scene building API over the field
registries: Phong materials, spheres, planes, triangles, point lights and
the ambient colour. It validates input at the building layer (unknown
material ids, zero-length plane normals) so the tracing kernels never see
invalid data.

The SceneManager maintains:
- Python-side records of everything added, for inspection and serialization
- High-level methods for adding objects with materials in one call
- Scene serialization/configuration support (plain dicts, JSON-friendly)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material(diffuse=(0.8, 0.1, 0.1), ambient=(0.1, 0.0, 0.0))
    >>> scene.add_sphere(center=(0, 0, 5), radius=1.0, material_id=red)
    0
    >>> scene.add_point_light(position=(5, 5, 0), color=(1, 1, 1))
    0
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from whitted.materials.phong import (
    MAX_PHONG_MATERIALS,
    add_phong_material,
    clear_phong_materials,
    get_phong_material_count,
)
from whitted.scene.intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    MAX_TRIANGLES,
    add_plane,
    add_sphere,
    add_triangle,
    clear_scene,
    get_plane_count,
    get_sphere_count,
    get_triangle_count,
)
from whitted.scene.lights import (
    MAX_LIGHTS,
    add_point_light,
    clear_lights,
    get_ambient_light,
    get_light_count,
    set_ambient_light,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

Vec3Tuple = tuple[float, float, float]


def _as_tuple(values: Any) -> Vec3Tuple:
    """Convert a 3-element sequence (list from JSON, tuple) to a float tuple."""
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material ID.
        params: The material parameters as provided during creation.
    """

    material_id: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene."""

    sphere_index: int
    center: Vec3Tuple
    radius: float
    material_id: int


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        plane_index: The index in the plane storage arrays.
        center: A point on the plane.
        normal: The unit normal as stored.
        material_id: The material ID assigned to the plane.
    """

    plane_index: int
    center: Vec3Tuple
    normal: Vec3Tuple
    material_id: int


@dataclass
class TriangleInfo:
    """Information about a triangle in the scene."""

    triangle_index: int
    v0: Vec3Tuple
    v1: Vec3Tuple
    v2: Vec3Tuple
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: Vec3Tuple
    color: Vec3Tuple


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Primitives refer to materials by their position in the materials list.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        planes: List of plane configurations.
        triangles: List of triangle configurations.
        lights: List of point light configurations.
        ambient: The scene ambient colour.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    planes: list[dict[str, Any]] = field(default_factory=list)
    triangles: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    ambient: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


class SceneManager:
    """High-level builder for the scene registries.

    The registries are module-level Taichi fields, so there is effectively
    one scene per process; creating a SceneManager clears it.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        planes: List of PlaneInfo for all planes in the scene.
        triangles: List of TriangleInfo for all triangles in the scene.
        lights: List of LightInfo for all point lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> mirror = scene.add_material(specular=(1, 1, 1), shininess=100, reflectivity=0.9)
        >>> glass = scene.add_material(transmissivity=0.9, refractive_index=1.5)
        >>> scene.add_sphere((0, 0, 6), 1.0, mirror)
        0
        >>> scene.add_sphere((2, 0, 5), 1.0, glass)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.planes: list[PlaneInfo] = []
        self.triangles: list[TriangleInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_phong_materials()
        clear_lights()
        self.materials.clear()
        self.spheres.clear()
        self.planes.clear()
        self.triangles.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials, lights, ambient).

        Resets all Taichi fields and internal tracking structures.
        """
        self._clear_all()

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= get_phong_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        ambient: Vec3Tuple = (0.0, 0.0, 0.0),
        diffuse: Vec3Tuple = (0.0, 0.0, 0.0),
        specular: Vec3Tuple = (0.0, 0.0, 0.0),
        shininess: float = 0.0,
        reflectivity: float = 0.0,
        transmissivity: float = 0.0,
        refractive_index: float = 1.0,
    ) -> int:
        """Add a Phong material to the scene.

        See add_phong_material() for the meaning and valid range of each
        parameter.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is out of range.
        """
        params: dict[str, Any] = {
            "ambient": _as_tuple(ambient),
            "diffuse": _as_tuple(diffuse),
            "specular": _as_tuple(specular),
            "shininess": float(shininess),
            "reflectivity": float(reflectivity),
            "transmissivity": float(transmissivity),
            "refractive_index": float(refractive_index),
        }
        material_id = add_phong_material(**params)
        self.materials.append(MaterialInfo(material_id=material_id, params=params))
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_phong_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Args:
            material_id: The material ID.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(self, center: Vec3Tuple, radius: float, material_id: int) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere; must be positive.
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or radius is not positive.
        """
        self._check_material_id(material_id)
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")

        center = _as_tuple(center)
        sphere_index = add_sphere(vec3(*center), radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=float(radius),
                material_id=material_id,
            )
        )
        return sphere_index

    def add_plane(self, center: Vec3Tuple, normal: Vec3Tuple, material_id: int) -> int:
        """Add an infinite plane to the scene.

        Args:
            center: Any point on the plane as (x, y, z).
            normal: The plane normal; normalized before storage.
            material_id: The material ID to assign to the plane.

        Returns:
            The index of the added plane.

        Raises:
            RuntimeError: If the maximum number of planes is exceeded.
            ValueError: If material_id is invalid or the normal is zero.
        """
        self._check_material_id(material_id)

        center = _as_tuple(center)
        normal = _as_tuple(normal)
        n_len = math.sqrt(normal[0] ** 2 + normal[1] ** 2 + normal[2] ** 2)
        if n_len == 0.0:
            raise ValueError("Plane normal must be non-zero")
        unit_normal = (normal[0] / n_len, normal[1] / n_len, normal[2] / n_len)

        plane_index = add_plane(vec3(*center), vec3(*unit_normal), material_id)
        self.planes.append(
            PlaneInfo(
                plane_index=plane_index,
                center=center,
                normal=unit_normal,
                material_id=material_id,
            )
        )
        return plane_index

    def add_triangle(self, v0: Vec3Tuple, v1: Vec3Tuple, v2: Vec3Tuple, material_id: int) -> int:
        """Add a triangle to the scene.

        Degenerate triangles are accepted; rays simply never hit them.

        Args:
            v0: First vertex as (x, y, z).
            v1: Second vertex as (x, y, z).
            v2: Third vertex as (x, y, z).
            material_id: The material ID to assign to the triangle.

        Returns:
            The index of the added triangle.

        Raises:
            RuntimeError: If the maximum number of triangles is exceeded.
            ValueError: If material_id is invalid.
        """
        self._check_material_id(material_id)

        v0, v1, v2 = _as_tuple(v0), _as_tuple(v1), _as_tuple(v2)
        triangle_index = add_triangle(vec3(*v0), vec3(*v1), vec3(*v2), material_id)
        self.triangles.append(
            TriangleInfo(
                triangle_index=triangle_index,
                v0=v0,
                v1=v1,
                v2=v2,
                material_id=material_id,
            )
        )
        return triangle_index

    # =========================================================================
    # Lighting
    # =========================================================================

    def add_point_light(self, position: Vec3Tuple, color: Vec3Tuple) -> int:
        """Add a point light to the scene.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If a colour component is negative.
        """
        position, color = _as_tuple(position), _as_tuple(color)
        light_index = add_point_light(position, color)
        self.lights.append(LightInfo(light_index=light_index, position=position, color=color))
        return light_index

    def set_ambient_light(self, color: Vec3Tuple) -> None:
        """Set the scene ambient colour.

        Raises:
            ValueError: If a colour component is negative.
        """
        set_ambient_light(_as_tuple(color))

    def get_ambient_light(self) -> Vec3Tuple:
        """Get the scene ambient colour."""
        return get_ambient_light()

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return get_plane_count()

    def get_triangle_count(self) -> int:
        """Get the number of triangles in the scene."""
        return get_triangle_count()

    def get_light_count(self) -> int:
        """Get the number of point lights in the scene."""
        return get_light_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return self.get_sphere_count() + self.get_plane_count() + self.get_triangle_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials, primitives and lights.
        """
        config = SceneConfig(ambient=list(self.get_ambient_light()))

        for mat in self.materials:
            mat_config = {
                key: list(value) if isinstance(value, tuple) else value
                for key, value in mat.params.items()
            }
            config.materials.append(mat_config)

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for plane in self.planes:
            config.planes.append(
                {
                    "center": list(plane.center),
                    "normal": list(plane.normal),
                    "material_id": plane.material_id,
                }
            )

        for tri in self.triangles:
            config.triangles.append(
                {
                    "v0": list(tri.v0),
                    "v1": list(tri.v1),
                    "v2": list(tri.v2),
                    "material_id": tri.material_id,
                }
            )

        for light in self.lights:
            config.lights.append({"position": list(light.position), "color": list(light.color)})

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            KeyError: If a required key is missing.
        """
        self.clear()

        # Materials first; primitives refer to them by id
        for mat_config in config.materials:
            self.add_material(
                ambient=_as_tuple(mat_config.get("ambient", [0.0, 0.0, 0.0])),
                diffuse=_as_tuple(mat_config.get("diffuse", [0.0, 0.0, 0.0])),
                specular=_as_tuple(mat_config.get("specular", [0.0, 0.0, 0.0])),
                shininess=mat_config.get("shininess", 0.0),
                reflectivity=mat_config.get("reflectivity", 0.0),
                transmissivity=mat_config.get("transmissivity", 0.0),
                refractive_index=mat_config.get("refractive_index", 1.0),
            )

        for sphere_config in config.spheres:
            self.add_sphere(
                center=_as_tuple(sphere_config["center"]),
                radius=sphere_config["radius"],
                material_id=sphere_config["material_id"],
            )

        for plane_config in config.planes:
            self.add_plane(
                center=_as_tuple(plane_config["center"]),
                normal=_as_tuple(plane_config["normal"]),
                material_id=plane_config["material_id"],
            )

        for tri_config in config.triangles:
            self.add_triangle(
                v0=_as_tuple(tri_config["v0"]),
                v1=_as_tuple(tri_config["v1"]),
                v2=_as_tuple(tri_config["v2"]),
                material_id=tri_config["material_id"],
            )

        for light_config in config.lights:
            self.add_point_light(
                position=_as_tuple(light_config["position"]),
                color=_as_tuple(light_config["color"]),
            )

        self.set_ambient_light(_as_tuple(config.ambient))

        logger.debug(
            "Loaded scene: %d materials, %d primitives, %d lights",
            self.get_material_count(),
            self.get_primitive_count(),
            self.get_light_count(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "planes": config.planes,
            "triangles": config.triangles,
            "lights": config.lights,
            "ambient": config.ambient,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'planes',
                'triangles', 'lights' and 'ambient' keys (all optional).
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            planes=data.get("planes", []),
            triangles=data.get("triangles", []),
            lights=data.get("lights", []),
            ambient=data.get("ambient", [0.0, 0.0, 0.0]),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_planes() -> int:
        """Get the maximum number of planes supported."""
        return MAX_PLANES

    @staticmethod
    def get_max_triangles() -> int:
        """Get the maximum number of triangles supported."""
        return MAX_TRIANGLES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of point lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_PHONG_MATERIALS
