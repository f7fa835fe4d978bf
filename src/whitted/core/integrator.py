"""Whitted ray tracing integrator.

This module implements the recursive Whitted tracer and the kernels that
render an image with it. A ray that hits a surface returns

    local + reflectivity * trace(reflected ray)
          + transmissivity * trace(refracted ray)

where local is the Phong term with hard shadows (see core.shading), and the
secondary rays are only followed when their coefficient exceeds
CONTRIBUTION_THRESHOLD and the depth limit has not been reached. A ray that
misses everything returns the background colour.

Taichi functions cannot recurse, so the recursion tree is walked with an
explicit work stack. Each entry holds a ray and the product of coefficients
along its path (its weight); the traced colour is the sum of
weight * local over every node of the tree, which is exactly what the
recursive formula expands to. Stacks live in global fields indexed by a
slot, one slot per pixel of the band being rendered, so images are rendered
in bands of at most BAND_ROWS scanlines. The gaps between bands are where
progress is reported and where a render can be cancelled.

Colours are accumulated without clamping; each pixel is clamped to [0, 1]
once, when it is written to the colour buffer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.integrator import render_image, setup_render_target
    >>> from whitted.scene.demo import create_demo_scene
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera, 320, 240)
    >>> setup_render_target(320, 240)
    >>> render_image()
    True
"""

import logging
from collections.abc import Callable

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_primary_ray
from whitted.core.ray import normalize, reflect, refract, refraction_discriminant
from whitted.core.shading import shade_local
from whitted.materials.phong import get_phong_material
from whitted.preview.export import save_png_from_array
from whitted.scene.intersection import SceneHitRecord, intersect_scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Rays at this depth or deeper contribute black
MAX_DEPTH = 8

# Reflection/transmission coefficients at or below this are not traced
CONTRIBUTION_THRESHOLD = 0.01

# Secondary ray origin offset along the normal
RAY_EPSILON = 1e-4

# Colour of rays that escape the scene
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)

# Maximum scanlines rendered per kernel launch
BAND_ROWS = 16

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final pixel colours, indexed [x, y] with y = 0 at the top of the image
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of leading scanlines that have been rendered
_rows_rendered = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# =============================================================================
# Work Stacks
# =============================================================================

# A node pushes at most two children and the tree is MAX_DEPTH levels deep
STACK_SIZE = MAX_DEPTH + 2

# One stack per pixel of a band
MAX_SLOTS = MAX_IMAGE_WIDTH * BAND_ROWS

_task_origin = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_SLOTS, STACK_SIZE))
_task_direction = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_SLOTS, STACK_SIZE))
_task_weight = ti.field(dtype=ti.f32, shape=(MAX_SLOTS, STACK_SIZE))
_task_depth = ti.field(dtype=ti.i32, shape=(MAX_SLOTS, STACK_SIZE))


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.
    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the colour buffer and the rendered-row counter."""
    _color_buffer.fill(0.0)
    _rows_rendered[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image() -> "ti.MatrixField":
    """Get the colour buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


def get_rows_rendered() -> int:
    """Get the number of scanlines rendered since the last clear."""
    return int(_rows_rendered[None])


# =============================================================================
# Secondary Rays
# =============================================================================


@ti.func
def reflection_ray(hit: SceneHitRecord):
    """Build the mirror reflection ray for a hit.

    Args:
        hit: The scene hit record (normal oriented against the ray).

    Returns:
        A tuple (origin, direction, valid). valid is 0 when the reflected
        direction points into the surface, in which case the ray must not
        be traced.
    """
    direction = normalize(reflect(hit.incident, hit.normal))
    origin = hit.point + hit.normal * RAY_EPSILON
    valid = 1
    if tm.dot(direction, hit.normal) < 0.0:
        valid = 0
    return origin, direction, valid


@ti.func
def refraction_ray(hit: SceneHitRecord, refractive_index: ti.f32):
    """Build the transmitted ray for a hit.

    A ray entering the surface (front_face == 1) uses eta = 1 / n and a ray
    leaving it uses eta = n, both against the oriented normal. On total
    internal reflection the mirror direction is returned instead, starting
    on the incident side.

    Args:
        hit: The scene hit record (normal oriented against the ray).
        refractive_index: Index of refraction of the hit material.

    Returns:
        A tuple (origin, direction).
    """
    eta = refractive_index
    if hit.front_face == 1:
        eta = 1.0 / refractive_index

    direction = vec3(0.0, 0.0, 0.0)
    origin = vec3(0.0, 0.0, 0.0)
    if refraction_discriminant(hit.incident, hit.normal, eta) < 0.0:
        direction = normalize(reflect(hit.incident, hit.normal))
        origin = hit.point + hit.normal * RAY_EPSILON
    else:
        direction = normalize(refract(hit.incident, hit.normal, eta))
        origin = hit.point - hit.normal * RAY_EPSILON
    return origin, direction


# =============================================================================
# Tracing Core
# =============================================================================


@ti.func
def _push_task(
    slot: ti.i32, top: ti.i32, origin: vec3, direction: vec3, weight: ti.f32, depth: ti.i32
):
    _task_origin[slot, top] = origin
    _task_direction[slot, top] = direction
    _task_weight[slot, top] = weight
    _task_depth[slot, top] = depth


@ti.func
def trace_ray(origin: vec3, direction: vec3, slot: ti.i32) -> vec3:
    """Trace a ray through the scene and return its colour.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        slot: The work-stack slot owned by the calling thread.

    Returns:
        The unclamped colour carried back along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)

    _push_task(slot, 0, origin, direction, 1.0, 0)
    top = 1

    while top > 0:
        top -= 1
        ray_origin = _task_origin[slot, top]
        ray_direction = _task_direction[slot, top]
        weight = _task_weight[slot, top]
        depth = _task_depth[slot, top]

        hit = intersect_scene(ray_origin, ray_direction)

        if hit.hit == 0:
            color += weight * BACKGROUND_COLOR
        else:
            material = get_phong_material(hit.material_id)
            color += weight * shade_local(hit, material)

            if depth + 1 < MAX_DEPTH:
                if material.reflectivity > CONTRIBUTION_THRESHOLD and top < STACK_SIZE:
                    r_origin, r_direction, valid = reflection_ray(hit)
                    if valid == 1:
                        r_weight = weight * material.reflectivity
                        _push_task(slot, top, r_origin, r_direction, r_weight, depth + 1)
                        top += 1

                if material.transmissivity > CONTRIBUTION_THRESHOLD and top < STACK_SIZE:
                    t_origin, t_direction = refraction_ray(hit, material.refractive_index)
                    t_weight = weight * material.transmissivity
                    _push_task(slot, top, t_origin, t_direction, t_weight, depth + 1)
                    top += 1

    return color


@ti.func
def _finalize_color(color: vec3) -> vec3:
    """Replace NaN/Inf with zero and clamp each channel to [0, 1]."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return tm.clamp(result, 0.0, 1.0)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32, height: ti.i32):
    """Render scanlines [row_start, row_end) into the colour buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        slot = i + (j - row_start) * width
        ray = get_primary_ray(i, j, width, height)
        color = trace_ray(ray.origin, ray.direction, slot)
        _color_buffer[i, j] = _finalize_color(color)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Render one pixel without writing it to the colour buffer."""
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    return _finalize_color(trace_ray(ray.origin, ray.direction, 0))


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace one ray using work-stack slot 0."""
    return trace_ray(origin, normalize(direction), 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of scanlines.

    Args:
        row_start: First row of the band (0 = top).
        row_end: One past the last row of the band.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the band is empty, out of range or taller than
            BAND_ROWS.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start < row_end <= height:
        raise ValueError(f"Invalid row band [{row_start}, {row_end}) for height {height}")
    if row_end - row_start > BAND_ROWS:
        raise ValueError(f"Row band of {row_end - row_start} rows exceeds BAND_ROWS ({BAND_ROWS})")

    _render_rows(row_start, row_end, width, height)
    _rows_rendered[None] = max(int(_rows_rendered[None]), row_end)


def render_image(
    should_cancel: Callable[[], bool] | None = None,
    callback: Callable[[int, int], None] | None = None,
    band_rows: int = BAND_ROWS,
) -> bool:
    """Render the whole image band by band.

    Args:
        should_cancel: Polled before each band; returning True stops the
            render, leaving the remaining rows untouched.
        callback: Called with (rows_done, height) after each band.
        band_rows: Scanlines per band, between 1 and BAND_ROWS.

    Returns:
        True if every row was rendered, False if the render was cancelled.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If band_rows is out of range.
    """
    _check_render_target_initialized()
    if not 1 <= band_rows <= BAND_ROWS:
        raise ValueError(f"band_rows must be in [1, {BAND_ROWS}], got {band_rows}")

    width, height = get_image_dimensions()
    logger.debug("Rendering %dx%d in bands of %d rows", width, height, band_rows)

    for row_start in range(0, height, band_rows):
        if should_cancel is not None and should_cancel():
            logger.info("Render cancelled after %d of %d rows", row_start, height)
            return False
        row_end = min(row_start + band_rows, height)
        render_rows(row_start, row_end)
        if callback is not None:
            callback(row_end, height)

    return True


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = top).

    Returns:
        Tuple of (R, G, B) values, clamped to [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray_color(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace a single ray and return its unclamped colour.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized before tracing).

    Returns:
        Tuple of (R, G, B) values.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]))


def get_normalized_image_numpy() -> np.ndarray:
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32 and values in
    [0, 1]. Row 0 is the top of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    return np.clip(image, 0.0, 1.0).astype(np.float32)


def save_image(filepath: str, gamma: float = 1.0) -> None:
    """Save the rendered image to a file.

    Args:
        filepath: Path to save the image (e.g., "output.png").
        gamma: Gamma correction value. 1.0 writes the colours unchanged.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    save_png_from_array(get_normalized_image_numpy(), filepath, gamma=gamma)
