"""Materials module.

Components:
    phong: Phong material (ambient, diffuse, specular, shininess) with
        reflectivity, transmissivity and refractive index for the traced
        secondary rays

Materials are stored in Taichi fields and looked up by id inside kernels.
"""

from .phong import (
    MAX_PHONG_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    get_phong_material,
    get_phong_material_count,
)

__all__ = [
    "PhongMaterial",
    "MAX_PHONG_MATERIALS",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material",
    "get_phong_material_count",
]
