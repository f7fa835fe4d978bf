"""Spheres and the hit record shared by every primitive.

A ray O + tD meets a sphere (C, r) where

    (D.D) t^2 + 2 (D.(O - C)) t + |O - C|^2 - r^2 = 0

The near root is taken from q = -(b + sign(b) sqrt(disc)) and the far root
from c / q, so neither is formed by subtracting two nearly equal numbers.
This matters for large, distant spheres in 32-bit floats.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> ball = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize

vec3 = tm.vec3

# Intersections at or below this ray parameter are rejected (self-intersection)
T_EPSILON = 1e-6

# Ray/surface alignment below this is treated as parallel (planes, triangles)
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Sphere:
    """Sphere given by its centre and a positive radius."""

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of intersecting a ray with one primitive.

    Attributes:
        hit: 1 on intersection, 0 on a miss. The remaining fields are only
            meaningful when hit == 1.
        t: Ray parameter of the intersection.
        point: World-space intersection point.
        normal: Unit normal. Spheres report the outward normal; planes and
            triangles report the normal already flipped to oppose the ray.
        front_face: 1 if the ray travels against the reported normal
            (entering the surface), 0 otherwise.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def make_miss_hit_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )


@ti.func
def _sphere_roots(half_b: ti.f32, a: ti.f32, c: ti.f32, root_disc: ti.f32):
    """Return both roots of a t^2 + 2 half_b t + c = 0, smallest first."""
    sign = ti.select(half_b < 0.0, -1.0, 1.0)
    q = -(half_b + sign * root_disc)

    near = 0.0
    far = 0.0
    if ti.abs(q) < 1e-10:
        # Only when half_b and the discriminant are both ~0
        near = -half_b / a
        far = near
    else:
        near = q / a
        far = c / q

    if near > far:
        swap = near
        near = far
        far = swap
    return near, far


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Intersect a ray with a sphere.

    The nearest root above T_EPSILON is used; a ray starting inside the
    sphere therefore hits the far wall. The normal is the outward normal
    and is not re-oriented here; front_face says whether the ray is
    entering, which refraction needs.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A HitRecord; hit == 0 on a miss or when both roots are behind.
    """
    to_origin = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    half_b = tm.dot(ray_direction, to_origin)
    c = tm.dot(to_origin, to_origin) - sphere.radius * sphere.radius
    disc = half_b * half_b - a * c

    result = make_miss_hit_record()
    if disc >= 0.0 and a > 0.0:
        near, far = _sphere_roots(half_b, a, c, tm.sqrt(disc))

        t = -1.0
        if near > T_EPSILON:
            t = near
        elif far > T_EPSILON:
            t = far

        if t > T_EPSILON:
            point = ray_origin + t * ray_direction
            outward = normalize(point - sphere.center)
            entering = 1
            if tm.dot(ray_direction, outward) >= 0.0:
                entering = 0
            result = HitRecord(hit=1, t=t, point=point, normal=outward, front_face=entering)

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from a centre and a positive radius."""
    return Sphere(center=center, radius=radius)
