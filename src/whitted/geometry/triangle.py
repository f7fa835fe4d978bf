"""Triangle primitive with Moller-Trumbore ray-triangle intersection.

A triangle is defined by three vertices. The geometric normal is
normalize(e1 x e2) with e1 = v1 - v0 and e2 = v2 - v0, flipped so it faces
the incoming ray; triangles are two-sided like planes. The winding still
decides front_face, which refraction uses to tell entering from leaving.

Moller-Trumbore solves

    O + tD = (1 - u - v) v0 + u v1 + v v2

directly for (t, u, v) without computing the plane equation first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     v0=ti.math.vec3(0, 0, 0),
    ...     v1=ti.math.vec3(1, 0, 0),
    ...     v2=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize

from .sphere import PARALLEL_EPSILON, T_EPSILON, HitRecord, make_miss_hit_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        v0: First vertex (vec3).
        v1: Second vertex (vec3).
        v2: Third vertex (vec3).
    """

    v0: vec3
    v1: vec3
    v2: vec3


@ti.func
def triangle_normal(triangle: Triangle) -> vec3:
    """Compute the unoriented unit normal normalize(e1 x e2).

    Degenerate (zero-area) triangles yield the zero vector.
    """
    e1 = triangle.v1 - triangle.v0
    e2 = triangle.v2 - triangle.v0
    return normalize(tm.cross(e1, e2))


@ti.func
def hit_triangle(ray_origin: vec3, ray_direction: vec3, triangle: Triangle) -> HitRecord:
    """Test for ray-triangle intersection.

    Misses when:
    - |a| < PARALLEL_EPSILON (ray parallel to the triangle plane),
    - u is outside [0, 1], v < 0 or u + v > 1 (outside the triangle),
    - t <= T_EPSILON (intersection behind the ray origin).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        triangle: The triangle to test intersection against.

    Returns:
        A HitRecord whose normal opposes the ray direction. front_face is 1
        when the ray travels against e1 x e2 (counter-clockwise winding
        seen from the ray) and 0 otherwise.
    """
    result = make_miss_hit_record()

    e1 = triangle.v1 - triangle.v0
    e2 = triangle.v2 - triangle.v0
    h = tm.cross(ray_direction, e2)
    a = tm.dot(e1, h)

    if ti.abs(a) >= PARALLEL_EPSILON:
        f = 1.0 / a
        s = ray_origin - triangle.v0
        u = f * tm.dot(s, h)

        if u >= 0.0 and u <= 1.0:
            q = tm.cross(s, e1)
            v = f * tm.dot(ray_direction, q)

            if v >= 0.0 and u + v <= 1.0:
                t = f * tm.dot(e2, q)

                if t > T_EPSILON:
                    hit_point = ray_origin + t * ray_direction

                    facing_normal = triangle_normal(triangle)
                    entering = 1
                    if tm.dot(facing_normal, ray_direction) > 0.0:
                        entering = 0
                        facing_normal = -facing_normal

                    result = HitRecord(
                        hit=1,
                        t=t,
                        point=hit_point,
                        normal=facing_normal,
                        front_face=entering,
                    )

    return result
