"""Geometry module for shape primitives.

This module provides the three primitives a scene is built from:

Components:
    sphere: Sphere primitive, plus the HitRecord shared by all primitives
    plane: Infinite two-sided plane
    triangle: Two-sided triangle (Moller-Trumbore)

All intersection routines are Taichi functions (@ti.func) with the same
contract: given a ray, return the nearest valid hit or a miss record.
Degenerate configurations (parallel rays, hits behind the origin, points
outside a triangle) are misses, never errors.

Ray-object intersection follows the pattern:
    record = hit_<shape>(ray_origin, ray_direction, shape)
"""

from .plane import Plane, hit_plane
from .sphere import (
    PARALLEL_EPSILON,
    T_EPSILON,
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss_hit_record,
    make_sphere,
)
from .triangle import Triangle, hit_triangle, triangle_normal

__all__ = [
    "HitRecord",
    "make_miss_hit_record",
    "T_EPSILON",
    "PARALLEL_EPSILON",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "Plane",
    "hit_plane",
    "Triangle",
    "hit_triangle",
    "triangle_normal",
]
