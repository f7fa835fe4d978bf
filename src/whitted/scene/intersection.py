"""Scene-level primitive storage and intersection testing.

This module stores the scene's spheres, planes and triangles in Taichi
fields and answers two queries against them:

    - intersect_scene: the closest hit along a ray, with material id and a
      normal oriented against the ray
    - intersect_scene_any: whether anything blocks a ray segment (shadows)

Both scan every entity linearly. The closest hit is chosen by the distance
from the ray origin to the hit point; ties keep the first entity encountered.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import (
    ...     add_sphere, add_plane, intersect_scene, clear_scene, vec3
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, 5), 1.0, material_id=0)
    >>> add_plane(vec3(0, -1, 0), vec3(0, 1, 0), material_id=1)
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere
from whitted.geometry.triangle import Triangle, hit_triangle

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Hits closer than this to the ray origin are treated as self-intersections
DISTANCE_EPSILON = 1e-6

# Initial "closest" distance; larger than any scene extent
FAR_DISTANCE = 1e30


class EntityKind(IntEnum):
    """Tag for the primitive kind a hit came from."""

    NONE = -1
    SPHERE = 0
    PLANE = 1
    TRIANGLE = 2


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal, oriented against the incoming ray
            (dot(normal, incident) <= 0). Only valid if hit == 1.
        incident: The direction of the ray that produced this hit.
        front_face: 1 if the ray entered the surface, 0 if it was leaving
            it (only spheres report 0). Only valid if hit == 1.
        material_id: The material id of the hit primitive.
            -1 indicates a miss.
        entity_kind: The EntityKind of the hit primitive (-1 on a miss).
        entity_index: The index of the hit primitive within its kind.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    incident: vec3
    front_face: ti.i32
    material_id: ti.i32
    entity_kind: ti.i32
    entity_index: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 64
MAX_TRIANGLES = 4096

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage
plane_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Triangle storage
triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_material_ids = ti.field(dtype=ti.i32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0
    num_triangles[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        material_id: The material id to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_plane(center: vec3, normal: vec3, material_id: int = 0) -> int:
    """Add an infinite plane to the scene.

    The normal is normalized before it is stored.

    Args:
        center: Any point on the plane.
        normal: The direction the plane faces (any non-zero length).
        material_id: The material id to associate with this plane.

    Returns:
        The index of the added plane.

    Raises:
        RuntimeError: If the maximum number of planes is exceeded.
        ValueError: If the normal has zero length.
    """
    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    n = vec3(normal[0], normal[1], normal[2])
    n_len = (n[0] * n[0] + n[1] * n[1] + n[2] * n[2]) ** 0.5
    if n_len <= 0.0:
        raise ValueError("Plane normal must be non-zero")
    plane_centers[idx] = center
    plane_normals[idx] = vec3(n[0] / n_len, n[1] / n_len, n[2] / n_len)
    plane_material_ids[idx] = material_id
    num_planes[None] = idx + 1
    return idx


def add_triangle(v0: vec3, v1: vec3, v2: vec3, material_id: int = 0) -> int:
    """Add a triangle to the scene.

    Args:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        material_id: The material id to associate with this triangle.

    Returns:
        The index of the added triangle.

    Raises:
        RuntimeError: If the maximum number of triangles is exceeded.
    """
    idx = num_triangles[None]
    if idx >= MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")
    triangle_v0[idx] = v0
    triangle_v1[idx] = v1
    triangle_v2[idx] = v2
    triangle_material_ids[idx] = material_id
    num_triangles[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


def get_triangle_count() -> int:
    """Get the number of triangles in the scene."""
    return int(num_triangles[None])


@ti.func
def _hit_record_to_scene_hit_record(
    rec: HitRecord,
    ray_direction: vec3,
    material_id: ti.i32,
    entity_kind: ti.i32,
    entity_index: ti.i32,
) -> SceneHitRecord:
    """Convert a primitive HitRecord to a SceneHitRecord.

    Orients the normal against the incoming ray. Planes and triangles are
    already oriented; sphere normals are flipped when the ray hits from
    inside. front_face is carried over unchanged.
    """
    normal = rec.normal
    if tm.dot(normal, ray_direction) > 0.0:
        normal = -normal

    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=normal,
        incident=ray_direction,
        front_face=rec.front_face,
        material_id=material_id,
        entity_kind=entity_kind,
        entity_index=entity_index,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        incident=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
        entity_kind=int(EntityKind.NONE),
        entity_index=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest intersection of a ray with the scene.

    Tests every sphere, plane and triangle. A hit is kept when its distance
    from the ray origin exceeds DISTANCE_EPSILON and is strictly smaller
    than the closest distance so far, so equal distances keep the first
    primitive encountered.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record if
        no primitive was hit.
    """
    closest_distance = FAR_DISTANCE
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1:
            distance = tm.length(rec.point - ray_origin)
            if distance > DISTANCE_EPSILON and distance < closest_distance:
                closest_distance = distance
                result = _hit_record_to_scene_hit_record(
                    rec, ray_direction, sphere_material_ids[i], int(EntityKind.SPHERE), i
                )

    for i in range(num_planes[None]):
        plane = Plane(center=plane_centers[i], normal=plane_normals[i])
        rec = hit_plane(ray_origin, ray_direction, plane)
        if rec.hit == 1:
            distance = tm.length(rec.point - ray_origin)
            if distance > DISTANCE_EPSILON and distance < closest_distance:
                closest_distance = distance
                result = _hit_record_to_scene_hit_record(
                    rec, ray_direction, plane_material_ids[i], int(EntityKind.PLANE), i
                )

    for i in range(num_triangles[None]):
        triangle = Triangle(v0=triangle_v0[i], v1=triangle_v1[i], v2=triangle_v2[i])
        rec = hit_triangle(ray_origin, ray_direction, triangle)
        if rec.hit == 1:
            distance = tm.length(rec.point - ray_origin)
            if distance > DISTANCE_EPSILON and distance < closest_distance:
                closest_distance = distance
                result = _hit_record_to_scene_hit_record(
                    rec, ray_direction, triangle_material_ids[i], int(EntityKind.TRIANGLE), i
                )

    return result


@ti.func
def intersect_scene_any(ray_origin: vec3, ray_direction: vec3, max_distance: ti.f32) -> ti.i32:
    """Test if anything blocks a ray segment (shadow ray query).

    Stops testing once a blocker is found.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        max_distance: Only hits strictly closer than this count.

    Returns:
        1 if any primitive is hit at a distance in
        (DISTANCE_EPSILON, max_distance), 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0:
            sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
            rec = hit_sphere(ray_origin, ray_direction, sphere)
            if rec.hit == 1:
                distance = tm.length(rec.point - ray_origin)
                if distance > DISTANCE_EPSILON and distance < max_distance:
                    hit_any = 1

    for i in range(num_planes[None]):
        if hit_any == 0:
            plane = Plane(center=plane_centers[i], normal=plane_normals[i])
            rec = hit_plane(ray_origin, ray_direction, plane)
            if rec.hit == 1:
                distance = tm.length(rec.point - ray_origin)
                if distance > DISTANCE_EPSILON and distance < max_distance:
                    hit_any = 1

    for i in range(num_triangles[None]):
        if hit_any == 0:
            triangle = Triangle(v0=triangle_v0[i], v1=triangle_v1[i], v2=triangle_v2[i])
            rec = hit_triangle(ray_origin, ray_direction, triangle)
            if rec.hit == 1:
                distance = tm.length(rec.point - ray_origin)
                if distance > DISTANCE_EPSILON and distance < max_distance:
                    hit_any = 1

    return hit_any
