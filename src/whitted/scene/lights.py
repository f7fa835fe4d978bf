"""Point lights and the scene ambient colour.

Point lights have a position and an RGB colour and no distance attenuation.
The ambient colour is a single scene-wide term that every material's ambient
reflectance is multiplied by. Both live in Taichi fields so the shading code
can read them from kernels.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of point lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

_ambient = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_lights() -> None:
    """Remove all point lights and reset the ambient colour to black."""
    num_lights[None] = 0
    _ambient[None] = vec3(0.0, 0.0, 0.0)


def add_point_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float],
) -> int:
    """Add a point light to the scene.

    Args:
        position: World-space position of the light.
        color: RGB intensity of the light; components must be >= 0.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If a colour component is negative.
    """
    if any(c < 0.0 for c in color):
        raise ValueError(f"Light color {tuple(color)} has a negative component")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = vec3(position[0], position[1], position[2])
    light_colors[idx] = vec3(color[0], color[1], color[2])
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of point lights in the scene."""
    return int(num_lights[None])


def set_ambient_light(color: tuple[float, float, float]) -> None:
    """Set the scene ambient colour.

    Raises:
        ValueError: If a colour component is negative.
    """
    if any(c < 0.0 for c in color):
        raise ValueError(f"Ambient color {tuple(color)} has a negative component")
    _ambient[None] = vec3(color[0], color[1], color[2])


def get_ambient_light() -> tuple[float, float, float]:
    """Get the scene ambient colour as an (R, G, B) tuple."""
    a = _ambient[None]
    return (float(a[0]), float(a[1]), float(a[2]))


@ti.func
def ambient_light() -> vec3:
    """Scene ambient colour, for use inside kernels."""
    return _ambient[None]
