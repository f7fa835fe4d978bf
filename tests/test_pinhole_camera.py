"""Unit tests for the pinhole camera module.

Tests cover:
- Image-plane extents from field of view and aspect ratio
- Parameter validation
- Ray generation for centre and corner pixels
- Row 0 at the top of the image
"""

import math

import pytest
import taichi as ti


def _primary_rays(pixels, width, height):
    """Generate primary rays for a list of (x, y) pixels."""
    from whitted.camera.pinhole import get_primary_ray

    n = len(pixels)
    xs = ti.field(dtype=ti.i32, shape=n)
    ys = ti.field(dtype=ti.i32, shape=n)
    origins = ti.Vector.field(3, dtype=ti.f32, shape=n)
    directions = ti.Vector.field(3, dtype=ti.f32, shape=n)
    for k, (x, y) in enumerate(pixels):
        xs[k] = x
        ys[k] = y

    @ti.kernel
    def test_kernel(w: ti.i32, h: ti.i32):
        for k in range(n):
            ray = get_primary_ray(xs[k], ys[k], w, h)
            origins[k] = ray.origin
            directions[k] = ray.direction

    test_kernel(width, height)
    return [(origins[k], directions[k]) for k in range(n)]


class TestCameraParams:
    """Tests for build_camera_params and setup_camera."""

    def test_default_camera(self):
        """Test 60 degree hfov at d = 1 on a 4:3 image."""
        from whitted.camera.pinhole import PinholeCamera, build_camera_params

        params = build_camera_params(PinholeCamera(), 640, 480)

        half_width = math.tan(math.radians(30.0))
        assert params.d == 1.0
        assert params.half_width == pytest.approx(half_width)
        assert params.half_height == pytest.approx(half_width * 0.75)

    def test_focal_distance_scales_plane(self):
        """Test the image plane grows with its distance."""
        from whitted.camera.pinhole import PinholeCamera, build_camera_params

        params = build_camera_params(PinholeCamera(hfov=90.0, focal_distance=2.0), 100, 100)

        assert params.half_width == pytest.approx(2.0)
        assert params.half_height == pytest.approx(2.0)

    def test_setup_camera_stores_params(self):
        """Test setup_camera writes the parameters read by kernels."""
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        params = setup_camera(PinholeCamera(hfov=90.0), 200, 100)
        info = get_camera_info()

        assert info["d"] == pytest.approx(1.0)
        assert info["half_width"] == pytest.approx(params.half_width, rel=1e-6)
        assert info["half_height"] == pytest.approx(0.5, rel=1e-6)

    @pytest.mark.parametrize(
        "kwargs,width,height,match",
        [
            ({}, 0, 10, "positive"),
            ({}, 10, -1, "positive"),
            ({"hfov": 0.0}, 10, 10, "Field of view"),
            ({"hfov": 180.0}, 10, 10, "Field of view"),
            ({"focal_distance": 0.0}, 10, 10, "Focal distance"),
        ],
    )
    def test_invalid_params_raise(self, kwargs, width, height, match):
        """Test invalid sizes and camera settings are rejected."""
        from whitted.camera.pinhole import PinholeCamera, build_camera_params

        with pytest.raises(ValueError, match=match):
            build_camera_params(PinholeCamera(**kwargs), width, height)


class TestPrimaryRays:
    """Tests for get_primary_ray."""

    def test_centre_ray_points_forward(self):
        """Test the ray through the image centre is (0, 0, 1)."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(), 3, 3)
        [(origin, direction)] = _primary_rays([(1, 1)], 3, 3)

        for c in range(3):
            assert abs(origin[c]) < 1e-6
        assert abs(direction[0]) < 1e-6
        assert abs(direction[1]) < 1e-6
        assert abs(direction[2] - 1.0) < 1e-6

    def test_corner_rays(self):
        """Test corner pixel centres map to the expected image-plane points."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        width, height = 4, 2
        params = setup_camera(PinholeCamera(hfov=90.0), width, height)
        rays = _primary_rays([(0, 0), (width - 1, height - 1)], width, height)

        # Pixel centres sit half a pixel in from the edges
        sx = (2.0 * 0.5 / width - 1.0) * params.half_width
        sy = (1.0 - 2.0 * 0.5 / height) * params.half_height
        length = math.sqrt(sx * sx + sy * sy + 1.0)

        (_, top_left), (_, bottom_right) = rays
        assert abs(top_left[0] - sx / length) < 1e-5
        assert abs(top_left[1] - sy / length) < 1e-5
        assert abs(top_left[2] - 1.0 / length) < 1e-5
        assert abs(bottom_right[0] + sx / length) < 1e-5
        assert abs(bottom_right[1] + sy / length) < 1e-5

    def test_top_row_looks_up(self):
        """Test row 0 is the top of the image."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(), 8, 8)
        (_, top), (_, bottom) = _primary_rays([(4, 0), (4, 7)], 8, 8)

        assert top[1] > 0.0
        assert bottom[1] < 0.0

    def test_directions_are_unit_length(self):
        """Test every primary ray direction is normalized."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(hfov=120.0), 5, 7)
        pixels = [(x, y) for x in range(5) for y in range(7)]
        for _, d in _primary_rays(pixels, 5, 7):
            assert abs(math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2) - 1.0) < 1e-5
