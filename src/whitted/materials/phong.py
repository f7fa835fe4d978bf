"""Phong material with reflection and transmission coefficients.

A Phong material describes how a surface responds to direct light (ambient,
diffuse and specular terms with a shininess exponent) and how much of the
recursively traced light it passes on:

    - reflectivity: weight of the mirror-reflected ray, in [0, 1]
    - transmissivity: weight of the refracted ray, in [0, 1]
    - refractive_index: index of the material (air is 1.0)

Reflectivity and transmissivity are independent; they are not required to
sum to at most 1.

Materials are stored structure-of-arrays in Taichi fields and referenced by
id from every primitive that uses them. They are immutable once added.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import add_phong_material
    >>> glass = add_phong_material(
    ...     ambient=(0.0, 0.0, 0.0),
    ...     diffuse=(0.0, 0.0, 0.0),
    ...     specular=(1.0, 1.0, 1.0),
    ...     shininess=200.0,
    ...     transmissivity=0.9,
    ...     refractive_index=1.5,
    ... )
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        ambient: Ambient reflectance (RGB), multiplied by the scene ambient.
        diffuse: Diffuse reflectance (RGB), scaled by max(0, N.L).
        specular: Specular reflectance (RGB), scaled by max(0, R.V)^shininess.
        shininess: Specular exponent (>= 0).
        reflectivity: Weight of the mirror reflection in [0, 1].
        transmissivity: Weight of the refracted ray in [0, 1].
        refractive_index: Index of refraction (> 0). Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ambient: vec3
    diffuse: vec3
    specular: vec3
    shininess: ti.f32
    reflectivity: ti.f32
    transmissivity: ti.f32
    refractive_index: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_PHONG_MATERIALS = 256

# Storage for material properties (Structure of Arrays)
phong_ambient = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_shininess = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_reflectivity = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_transmissivity = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_refractive_index = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def _validate_color(name: str, color: tuple[float, float, float]) -> None:
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"{name} component {i} = {component} is negative")


def add_phong_material(
    ambient: tuple[float, float, float] = (0.0, 0.0, 0.0),
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0),
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
    shininess: float = 0.0,
    reflectivity: float = 0.0,
    transmissivity: float = 0.0,
    refractive_index: float = 1.0,
) -> int:
    """Add a material to the material registry.

    Args:
        ambient: Ambient reflectance as (R, G, B); components must be >= 0.
        diffuse: Diffuse reflectance as (R, G, B); components must be >= 0.
        specular: Specular reflectance as (R, G, B); components must be >= 0.
        shininess: Specular exponent; must be >= 0.
        reflectivity: Mirror reflection weight in [0, 1].
        transmissivity: Refraction weight in [0, 1].
        refractive_index: Index of refraction; must be > 0.

    Returns:
        The id of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is out of range.
    """
    _validate_color("ambient", ambient)
    _validate_color("diffuse", diffuse)
    _validate_color("specular", specular)
    if shininess < 0.0:
        raise ValueError(f"Shininess must be non-negative, got {shininess}")
    if reflectivity < 0.0 or reflectivity > 1.0:
        raise ValueError(f"Reflectivity {reflectivity} is outside [0, 1]")
    if transmissivity < 0.0 or transmissivity > 1.0:
        raise ValueError(f"Transmissivity {transmissivity} is outside [0, 1]")
    if refractive_index <= 0.0:
        raise ValueError(f"Refractive index must be positive, got {refractive_index}")

    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_PHONG_MATERIALS}) exceeded")

    phong_ambient[idx] = vec3(ambient[0], ambient[1], ambient[2])
    phong_diffuse[idx] = vec3(diffuse[0], diffuse[1], diffuse[2])
    phong_specular[idx] = vec3(specular[0], specular[1], specular[2])
    phong_shininess[idx] = shininess
    phong_reflectivity[idx] = reflectivity
    phong_transmissivity[idx] = transmissivity
    phong_refractive_index[idx] = refractive_index
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_id: ti.i32) -> PhongMaterial:
    """Get a material by id.

    Args:
        material_id: The id returned by add_phong_material().

    Returns:
        The PhongMaterial stored under that id.
    """
    return PhongMaterial(
        ambient=phong_ambient[material_id],
        diffuse=phong_diffuse[material_id],
        specular=phong_specular[material_id],
        shininess=phong_shininess[material_id],
        reflectivity=phong_reflectivity[material_id],
        transmissivity=phong_transmissivity[material_id],
        refractive_index=phong_refractive_index[material_id],
    )
