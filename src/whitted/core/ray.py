"""Ray data structure and vector utilities for the Whitted tracer.

This module provides the Ray dataclass and the vector helpers used by the
intersection, shading and tracing code. All operations are Taichi functions
so they can be called from kernels on any backend.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Vectors shorter than this normalize to zero instead of producing NaNs
NORMALIZE_EPSILON = 1e-12


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Tracing code always
            builds rays with normalized directions; only t >= 0 is used.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from an origin and a direction.

    The direction is normalized so that t values are distances.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (any non-zero length).

    Returns:
        A new Ray instance.
    """
    return Ray(origin=origin, direction=normalize(direction))


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A vector shorter than
        NORMALIZE_EPSILON yields the zero vector, so degenerate input never
        produces NaNs downstream.
    """
    len_v = length(v)
    result = vec3(0.0, 0.0, 0.0)
    if len_v > NORMALIZE_EPSILON:
        result = v / len_v
    return result


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The mirror direction incident - 2 (incident . normal) normal.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refraction_discriminant(incident: vec3, normal: vec3, eta: ti.f32) -> ti.f32:
    """Compute the Snell's law discriminant 1 - eta^2 (1 - cos_i^2).

    A negative value means total internal reflection.

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal facing the incident ray (unit length).
        eta: The ratio n1 / n2 of the refractive indices.

    Returns:
        The squared cosine of the transmitted angle, or a negative number
        when no transmitted ray exists.
    """
    cos_i = -tm.dot(incident, normal)
    return 1.0 - eta * eta * (1.0 - cos_i * cos_i)


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32) -> vec3:
    """Refract an incident vector through a surface.

    Uses the vector form of Snell's law:
        eta * incident + (eta * cos_i - cos_t) * normal

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal facing the incident ray (unit length).
        eta: The ratio n1 / n2 of the refractive indices.

    Returns:
        The refracted direction, or the zero vector on total internal
        reflection.
    """
    cos_i = -tm.dot(incident, normal)
    k = refraction_discriminant(incident, normal, eta)
    result = vec3(0.0, 0.0, 0.0)
    if k >= 0.0:
        cos_t = tm.sqrt(k)
        result = eta * incident + (eta * cos_i - cos_t) * normal
    return result
