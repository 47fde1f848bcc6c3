"""
Image normalization functions for the digit pipeline.

All functions are pure: they take an input and return a new output without
mutating the original array. This ensures predictable behavior and makes
testing straightforward.
"""

import numpy as np

from config import CANVAS_SIZE, LUMA_WEIGHTS, NORMALIZE_EPSILON, TARGET_SIZE
from geometry import centered_offset, round_half_up, round_half_up_array

from .types import GrayscaleImage, PixelBuffer


def to_grayscale(buffer: PixelBuffer) -> GrayscaleImage:
    """Convert an RGBA buffer to luminance in [0, 1].

    gray = (0.299 R + 0.587 G + 0.114 B) / 255; alpha is ignored.

    Args:
        buffer: RGBA8 input buffer.

    Returns:
        GrayscaleImage with the same width and height as the buffer.

    Raises:
        TypeError: If buffer is not a PixelBuffer.

    Examples:
        >>> buf = PixelBuffer(bytes([255, 255, 255, 255]), 1, 1)
        >>> float(to_grayscale(buf).pixels[0, 0])
        1.0
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")

    rgb = buffer.as_array()[:, :, :3].astype(np.float64)
    gray = (rgb @ np.asarray(LUMA_WEIGHTS, dtype=np.float64)) / 255.0
    return GrayscaleImage(np.clip(gray, 0.0, 1.0).astype(np.float32))


def ink_intensity(gray: GrayscaleImage, invert: bool) -> np.ndarray:
    """Polarity-corrected intensity: bright ink on a dark background.

    Light-background images (invert=True) are flipped so the canvas always
    matches the classifier's white-on-black training distribution.
    """
    pixels = gray.pixels.astype(np.float32)
    if invert:
        return (1.0 - pixels).astype(np.float32)
    return pixels.copy()


def resample_nearest(
    crop: np.ndarray,
    target_size: int = TARGET_SIZE,
) -> tuple[np.ndarray, float]:
    """Scale a crop so its longest side is target_size, nearest-neighbor.

    No interpolation or antialiasing: each destination pixel (xx, yy) reads
    source (min(w-1, round(xx/scale)), min(h-1, round(yy/scale))).

    Args:
        crop: 2D float array of shape (h, w).
        target_size: Desired longest side in pixels.

    Returns:
        Tuple of:
        - Resampled float32 array of shape (newH, newW)
        - Scale factor target_size / max(w, h)

    Raises:
        TypeError: If crop is not a numpy array.
        ValueError: If crop is not a non-empty 2D array or target_size is not positive.

    Examples:
        >>> out, scale = resample_nearest(np.ones((4, 2), dtype=np.float32), 20)
        >>> out.shape, scale
        ((20, 10), 5.0)
    """
    if not isinstance(crop, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(crop).__name__}")
    if crop.ndim != 2 or crop.size == 0:
        raise ValueError(f"Crop must be a non-empty 2D array, got shape {crop.shape}")
    if target_size <= 0:
        raise ValueError(f"target_size must be positive, got {target_size}")

    h, w = crop.shape
    scale = target_size / max(w, h)
    new_w = max(1, round_half_up(w * scale))
    new_h = max(1, round_half_up(h * scale))

    sx = np.minimum(w - 1, round_half_up_array(np.arange(new_w) / scale))
    sy = np.minimum(h - 1, round_half_up_array(np.arange(new_h) / scale))
    resampled = crop[np.ix_(sy, sx)].astype(np.float32)
    return resampled, scale


def composite_centered(block: np.ndarray, canvas_size: int = CANVAS_SIZE) -> np.ndarray:
    """Paste a block into the center of a zero canvas.

    Offsets are floor((canvas - size) / 2) on each axis; everything outside
    the pasted block stays 0.

    Raises:
        ValueError: If the block is larger than the canvas.
    """
    if block.ndim != 2:
        raise ValueError(f"Block must be 2D, got shape {block.shape}")
    new_h, new_w = block.shape
    if new_w > canvas_size or new_h > canvas_size:
        raise ValueError(
            f"Block {new_w}x{new_h} does not fit a {canvas_size}x{canvas_size} canvas"
        )

    canvas = np.zeros((canvas_size, canvas_size), dtype=np.float32)
    off_x = centered_offset(canvas_size, new_w)
    off_y = centered_offset(canvas_size, new_h)
    canvas[off_y:off_y + new_h, off_x:off_x + new_w] = block
    return canvas


def normalize_min_max(img: np.ndarray, epsilon: float = NORMALIZE_EPSILON) -> np.ndarray:
    """Rescale linearly to [0, 1] using (v - min) / max(range, epsilon).

    A flat image maps to all zeros. Applying the function to its own output
    returns the same values.
    """
    values = np.asarray(img, dtype=np.float64)
    low = float(values.min())
    high = float(values.max())
    spread = max(epsilon, high - low)
    return np.clip((values - low) / spread, 0.0, 1.0).astype(np.float32)
