"""
Separable Gaussian smoothing.

The 2D blur is two 1D passes, horizontal then vertical. Out-of-bounds
samples are clamped to the nearest edge pixel (BORDER_REPLICATE), never
wrapped.
"""

import cv2
import numpy as np

from config import BLUR_RADIUS_FACTOR, BLUR_SIGMA
from geometry import round_half_up

from .types import Kernel


def gaussian_kernel(
    sigma: float = BLUR_SIGMA,
    radius_factor: float = BLUR_RADIUS_FACTOR,
) -> Kernel:
    """Build a normalized 1D Gaussian kernel.

    Radius is max(1, round(radius_factor * sigma)); weights are
    exp(-i^2 / (2 sigma^2)) for i in [-radius, radius], scaled to sum to 1.

    Raises:
        ValueError: If sigma is not positive.

    Examples:
        >>> len(gaussian_kernel(0.8))
        5
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")
    radius = max(1, round_half_up(radius_factor * sigma))
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    weights = np.exp(-(offsets ** 2) / (2.0 * sigma * sigma))
    return Kernel(weights / weights.sum())


def gaussian_blur_1d(img: np.ndarray, kernel: Kernel, vertical: bool = False) -> np.ndarray:
    """Convolve every row (or every column when vertical) with the kernel."""
    if img.ndim != 2:
        raise ValueError(f"Expected 2D image, got shape {img.shape}")
    taps = kernel.weights.reshape(-1, 1) if vertical else kernel.weights.reshape(1, -1)
    return cv2.filter2D(
        np.ascontiguousarray(img, dtype=np.float32),
        ddepth=-1,
        kernel=taps.astype(np.float32),
        borderType=cv2.BORDER_REPLICATE,
    )


def gaussian_blur(
    img: np.ndarray,
    sigma: float = BLUR_SIGMA,
    radius_factor: float = BLUR_RADIUS_FACTOR,
) -> np.ndarray:
    """Separable Gaussian blur: horizontal pass, then vertical pass."""
    kernel = gaussian_kernel(sigma, radius_factor)
    horizontal = gaussian_blur_1d(img, kernel, vertical=False)
    return gaussian_blur_1d(horizontal, kernel, vertical=True)
