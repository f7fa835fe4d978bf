"""Core rendering module.

This module contains the building blocks of the Whitted tracer:

Components:
    ray: Ray data structure and vector utilities
    shading: Shadow tests and Phong local illumination
    integrator: Secondary rays, the depth-bounded tracer and the render target
    renderer: Banded renderer with progress reporting and cancellation

The tracer combines local illumination with recursively traced mirror
reflection and dielectric refraction, cut off at a fixed depth. Every pixel
is independent, so rendering is a parallel Taichi kernel over pixels.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    refraction_discriminant,
    vec3,
)

# Note: shading, integrator and renderer are NOT imported here; they declare
# Taichi fields and must be imported after ti.init().
#
# For rendering, use:
#   from whitted.core.renderer import Renderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "refraction_discriminant",
]
