"""Local illumination with hard shadows.

The local term of a hit is the Phong model evaluated for every point light
that is not blocked:

    ambient * scene_ambient
        + sum over unshadowed lights of
            diffuse * light * max(0, N.L)
            + specular * light * max(0, R.V)^shininess   (only when N.L > 0)

with L the unit direction to the light, R = normalize(2 (N.L) N - L) and
V = normalize(-incident). No term is clamped here.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import normalize
from whitted.materials.phong import PhongMaterial
from whitted.scene.intersection import SceneHitRecord, intersect_scene_any
from whitted.scene.lights import ambient_light, light_colors, light_positions, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# Shadow ray origin offset along the normal
SHADOW_EPSILON = 1e-3

# Blockers must be this many SHADOW_EPSILONs short of the light to count
SHADOW_DISTANCE_SLACK = 2.0


@ti.func
def is_in_shadow(
    hit_point: vec3, light_position: vec3, light_distance: ti.f32, normal: vec3
) -> ti.i32:
    """Test whether a light is blocked as seen from a surface point.

    A surface facing away from the light (N.L <= 0) is treated as unlit and
    no ray is cast.

    Args:
        hit_point: The shaded surface point.
        light_position: Position of the point light.
        light_distance: Distance from hit_point to the light.
        normal: The oriented surface normal at hit_point.

    Returns:
        1 if the point is in shadow for this light, 0 otherwise.
    """
    to_light = normalize(light_position - hit_point)
    shadowed = 1
    if tm.dot(normal, to_light) > 0.0:
        origin = hit_point + normal * SHADOW_EPSILON
        max_distance = light_distance - SHADOW_EPSILON * SHADOW_DISTANCE_SLACK
        shadowed = intersect_scene_any(origin, to_light, max_distance)
    return shadowed


@ti.func
def shade_local(hit: SceneHitRecord, material: PhongMaterial) -> vec3:
    """Evaluate the Phong local illumination at a hit.

    Args:
        hit: The scene hit record (normal oriented against the ray).
        material: The material of the hit primitive.

    Returns:
        The unclamped local colour.
    """
    color = material.ambient * ambient_light()
    n = hit.normal
    view = normalize(-hit.incident)

    for i in range(num_lights[None]):
        to_light_vec = light_positions[i] - hit.point
        light_distance = tm.length(to_light_vec)
        to_light = normalize(to_light_vec)

        if is_in_shadow(hit.point, light_positions[i], light_distance, n) == 0:
            light = light_colors[i]
            n_dot_l = tm.dot(n, to_light)
            color += material.diffuse * light * tm.max(0.0, n_dot_l)
            if n_dot_l > 0.0:
                r = normalize(2.0 * n_dot_l * n - to_light)
                r_dot_v = tm.max(0.0, tm.dot(r, view))
                color += material.specular * light * tm.pow(r_dot_v, material.shininess)

    return color
