"""Banded renderer with progress reporting and cancellation.

This module provides a convenient wrapper around the core integrator that supports:
- Rendering the image band by band
- Progress callbacks and a generator interface for UI updates
- Cooperative cancellation between bands
- Easy reset, resize and export

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> renderer = Renderer(320, 240, camera=camera)
    >>> renderer.render()
    True
    >>> image = renderer.get_image_numpy()
"""

import logging
from collections.abc import Callable, Generator
from typing import Any

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import PinholeCamera, setup_camera
from whitted.core.integrator import (
    BAND_ROWS,
    clear_render_target,
    get_image,
    get_normalized_image_numpy,
    get_rows_rendered,
    render_image,
    render_rows,
    save_image,
    setup_render_target,
)
from whitted.preview.export import apply_gamma, image_to_uint8

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Polled between bands; returning True stops the render
CancelPredicate = Callable[[], bool]


class Renderer:
    """Renders the current scene into the shared render target.

    The renderer keeps the image size and camera, and delegates to the
    global integrator buffers (which are Taichi fields). Only one renderer
    should be active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        camera: The pinhole camera used for primary rays.
    """

    def __init__(
        self,
        width: int,
        height: int,
        camera: PinholeCamera | None = None,
        band_rows: int = BAND_ROWS,
    ) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            camera: Camera to render through; defaults to PinholeCamera().
            band_rows: Scanlines rendered per band (1 to BAND_ROWS).

        Raises:
            ValueError: If dimensions or band_rows are out of range.
        """
        if not 1 <= band_rows <= BAND_ROWS:
            raise ValueError(f"band_rows must be in [1, {BAND_ROWS}], got {band_rows}")
        self._camera = camera if camera is not None else PinholeCamera()
        self._band_rows = band_rows
        self._width = width
        self._height = height
        self._setup()

    def _setup(self) -> None:
        setup_render_target(self._width, self._height)
        setup_camera(self._camera, self._width, self._height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def camera(self) -> PinholeCamera:
        """Get the camera."""
        return self._camera

    @property
    def rows_rendered(self) -> int:
        """Get the number of scanlines rendered since the last reset."""
        return get_rows_rendered()

    @property
    def is_complete(self) -> bool:
        """Whether every scanline has been rendered."""
        return self.rows_rendered >= self._height

    def reset(self) -> None:
        """Clear the image so the next render starts from scratch."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset the image.

        Args:
            width: New image width in pixels.
            height: New image height in pixels.

        Raises:
            ValueError: If dimensions exceed maximum supported size.
        """
        self._width = width
        self._height = height
        self._setup()

    def render(
        self,
        callback: ProgressCallback | None = None,
        should_cancel: CancelPredicate | None = None,
    ) -> bool:
        """Render the full image.

        The camera and render target are set up again first, so a renderer
        can be used after another one has changed the shared state.

        Args:
            callback: Optional callback called after each band with
                (rows_done, height).
            should_cancel: Optional predicate polled before each band.

        Returns:
            True if the image was completed, False if it was cancelled.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(callback=progress)
        """
        self._setup()
        completed = render_image(
            should_cancel=should_cancel,
            callback=callback,
            band_rows=self._band_rows,
        )
        if completed:
            logger.debug("Rendered %dx%d image", self._width, self._height)
        return completed

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render band by band, yielding progress after each band.

        This is a generator-based alternative to render() with callbacks.
        Stopping iteration early leaves the remaining rows unrendered.

        Yields:
            Tuple of (rows_done, height).

        Example:
            >>> for done, total in renderer.render_progressive():
            ...     print(f"Progress: {done}/{total} rows")
        """
        self._setup()
        for row_start in range(0, self._height, self._band_rows):
            row_end = min(row_start + self._band_rows, self._height)
            render_rows(row_start, row_end)
            yield (row_end, self._height)

    def get_image(self) -> Any:
        """Get the raw Taichi colour buffer field.

        Note: This returns the full preallocated buffer. Use width/height
        properties to determine the active region.
        """
        return get_image()

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        return apply_gamma(get_normalized_image_numpy(), gamma)

    def get_image_uint8(self, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return image_to_uint8(get_normalized_image_numpy(), gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 1.0) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 1.0 (linear).
        """
        save_image(filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_rendered={self.rows_rendered})"
        )
