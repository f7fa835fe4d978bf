"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down +z

Pixel coordinates use a top-left origin:
    x in [0, width): left to right
    y in [0, height): top to bottom
"""

from .pinhole import (
    CameraParams,
    PinholeCamera,
    build_camera_params,
    get_camera_info,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "CameraParams",
    "PinholeCamera",
    "build_camera_params",
    "setup_camera",
    "get_primary_ray",
    "get_camera_info",
]
