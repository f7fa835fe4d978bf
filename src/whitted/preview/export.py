"""Image export utilities for rendered images.

Rendered images are linear float32 arrays of shape (H, W, 3) in [0, 1]. This
module converts them to 8-bit with optional gamma correction and writes PNG
files through Pillow.

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(320, 240)
    >>> renderer.render()
    >>> save_png(renderer, "output.png", gamma=2.2)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from whitted.core.renderer import Renderer

logger = logging.getLogger(__name__)


def apply_gamma(image: npt.NDArray[np.float32], gamma: float = 1.0) -> npt.NDArray[np.float32]:
    """Apply gamma correction (x ** (1 / gamma)) to an image in [0, 1].

    Args:
        image: Image array with values in [0, 1].
        gamma: Gamma value; 1.0 leaves the image unchanged.

    Returns:
        The corrected image as float32.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    image = np.clip(image, 0.0, 1.0).astype(np.float32)
    if gamma == 1.0:
        return image
    return np.power(image, 1.0 / gamma).astype(np.float32)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8 for display/export.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value (default 1.0, no correction).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    corrected = apply_gamma(image, gamma)
    return np.round(corrected * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    gamma: float = 1.0,
) -> None:
    """Save a NumPy array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with values in [0, 1].
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, no correction).

    Raises:
        ValueError: If the array is not an RGB image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def save_png(renderer: Renderer, filepath: str, *, gamma: float = 1.0) -> None:
    """Save the renderer's current image as a PNG file.

    Args:
        renderer: The Renderer whose image to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, no correction).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath, gamma=gamma)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
