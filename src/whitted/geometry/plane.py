"""Infinite plane primitive with ray-plane intersection.

A plane is defined by a point on it (the center) and a unit normal. Planes
are two-sided: the reported normal always faces the incoming ray, so a plane
is shaded the same way from either side.

The intersection solves (O + tD - C) . N = 0:

    t = (C - O) . N / (D . N)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import Plane, hit_plane
    >>> floor = Plane(center=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import PARALLEL_EPSILON, T_EPSILON, HitRecord, make_miss_hit_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane through a point with a given facing direction.

    Attributes:
        center: Any point on the plane (vec3).
        normal: The unit normal of the plane (vec3). Normalized when the
            plane is added to the scene.
    """

    center: vec3
    normal: vec3


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> HitRecord:
    """Test for ray-plane intersection.

    A ray whose direction is within PARALLEL_EPSILON of perpendicular to the
    normal is parallel to the plane and misses. An intersection at or
    behind the ray origin (t <= T_EPSILON) also misses.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test intersection against.

    Returns:
        A HitRecord whose normal opposes the ray direction. front_face is 1
        when the ray travels against the stored normal and 0 when it
        travels along it, so a pair of planes with outward normals can
        bound a refracting slab.
    """
    result = make_miss_hit_record()

    denominator = tm.dot(ray_direction, plane.normal)

    if ti.abs(denominator) >= PARALLEL_EPSILON:
        t = tm.dot(plane.center - ray_origin, plane.normal) / denominator

        if t > T_EPSILON:
            hit_point = ray_origin + t * ray_direction

            # Entering when the ray travels against the stored normal
            entering = 1
            facing_normal = plane.normal
            if denominator > 0.0:
                entering = 0
                facing_normal = -plane.normal

            result = HitRecord(
                hit=1,
                t=t,
                point=hit_point,
                normal=facing_normal,
                front_face=entering,
            )

    return result
