"""Pinhole camera for primary ray generation.

The eye sits at the world origin looking down +z with +y up. The image plane
is at distance d in front of the eye, and the horizontal field of view fixes
its half-width:

    half_width  = tan(hfov / 2) * d
    half_height = half_width / (width / height)

Pixel (x, y) maps to the centre of its cell, with row 0 at the top of the
image:

    u  = (x + 0.5) / width          v  = (y + 0.5) / height
    sx = (2u - 1) * half_width      sy = (1 - 2v) * half_height

and the primary ray is origin (0, 0, 0), direction normalize(sx, sy, d).
One ray per pixel; there is no jitter.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera, get_primary_ray
    >>>
    >>> setup_camera(PinholeCamera(), width=640, height=480)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(320, 240, 640, 480)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the fixed pinhole camera.

    Attributes:
        hfov: Horizontal field of view in degrees (0 < hfov < 180).
        focal_distance: Distance d from the eye to the image plane.
    """

    hfov: float = 60.0
    focal_distance: float = 1.0


@dataclass
class CameraParams:
    """Image-plane geometry derived from a camera and an image size."""

    d: float
    half_width: float
    half_height: float


# Taichi fields holding the active camera parameters
_camera_d = ti.field(dtype=ti.f32, shape=())
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())


def build_camera_params(camera: PinholeCamera, width: int, height: int) -> CameraParams:
    """Compute the image-plane extents for an image size.

    Args:
        camera: Camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The CameraParams for this camera and image.

    Raises:
        ValueError: If the image size or camera parameters are invalid.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if not 0.0 < camera.hfov < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {camera.hfov}")
    if camera.focal_distance <= 0.0:
        raise ValueError(f"Focal distance must be positive, got {camera.focal_distance}")

    d = camera.focal_distance
    half_width = math.tan(math.radians(camera.hfov) / 2.0) * d
    aspect = width / height
    return CameraParams(d=d, half_width=half_width, half_height=half_width / aspect)


def setup_camera(camera: PinholeCamera, width: int, height: int) -> CameraParams:
    """Store the camera parameters for an image size in Taichi fields.

    Must be called before rendering, and again whenever the image size
    changes.

    Returns:
        The CameraParams that were stored.
    """
    params = build_camera_params(camera, width, height)
    _camera_d[None] = params.d
    _half_width[None] = params.half_width
    _half_height[None] = params.half_height
    return params


@ti.func
def get_primary_ray(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the centre of pixel (x, y).

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the origin with a unit direction.
    """
    u = (ti.cast(x, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    v = (ti.cast(y, ti.f32) + 0.5) / ti.cast(height, ti.f32)
    sx = (2.0 * u - 1.0) * _half_width[None]
    sy = (1.0 - 2.0 * v) * _half_height[None]
    return make_ray(vec3(0.0, 0.0, 0.0), tm.vec3(sx, sy, _camera_d[None]))


def get_camera_info() -> dict[str, float]:
    """Get the active camera parameters for debugging."""
    return {
        "d": float(_camera_d[None]),
        "half_width": float(_half_width[None]),
        "half_height": float(_half_height[None]),
    }
