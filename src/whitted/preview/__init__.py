"""Preview module for image output.

Components:
    export: Gamma correction, 8-bit conversion and PNG export (Pillow)

Example:
    >>> from whitted.preview import save_png
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(320, 240)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from whitted.preview.export import (
    apply_gamma,
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "apply_gamma",
    "image_to_uint8",
    "save_png",
    "save_png_from_array",
    "compute_rmse",
]
