"""
Global thresholding: Otsu's method, the polarity heuristic and binarization.

Intensities are quantized to floor(gray * 255) clamped to [0, 255]. Otsu
splits those levels into a dark class (levels <= t) and a bright class
(levels > t); the binarizer compares on the same level scale so the mask
reproduces exactly the split Otsu chose.
"""

import numpy as np

from config import HISTOGRAM_BINS, POLARITY_MEAN_THRESHOLD

from .types import BinaryMask, GrayscaleImage, ThresholdDecision

MAX_LEVEL = HISTOGRAM_BINS - 1


def quantize_levels(gray: GrayscaleImage) -> np.ndarray:
    """Map [0, 1] intensities to integer levels floor(gray * 255) in [0, 255]."""
    scaled = gray.pixels.astype(np.float64) * MAX_LEVEL
    return np.clip(np.floor(scaled), 0, MAX_LEVEL).astype(np.int64)


def otsu_level(gray: GrayscaleImage) -> int:
    """Level t maximizing the between-class variance wB * wF * (mB - mF)^2.

    Candidates where either class is empty are skipped. Ties resolve to the
    smallest t. When no level splits the histogram (a single populated
    level) the result is 0.
    """
    hist = np.bincount(quantize_levels(gray).ravel(), minlength=HISTOGRAM_BINS)
    hist = hist.astype(np.float64)
    levels = np.arange(HISTOGRAM_BINS, dtype=np.float64)

    total = hist.sum()
    weight_bg = np.cumsum(hist)
    weight_fg = total - weight_bg
    sum_bg = np.cumsum(levels * hist)
    sum_all = sum_bg[-1]

    valid = (weight_bg > 0) & (weight_fg > 0)
    if not valid.any():
        return 0

    mean_bg = np.divide(sum_bg, weight_bg, out=np.zeros_like(sum_bg), where=valid)
    mean_fg = np.divide(
        sum_all - sum_bg, weight_fg, out=np.zeros_like(sum_bg), where=valid
    )
    between = np.where(
        valid, weight_bg * weight_fg * (mean_bg - mean_fg) ** 2, -1.0
    )
    # argmax returns the first maximum, scanning levels in ascending order
    return int(np.argmax(between))


def otsu_threshold(gray: GrayscaleImage) -> float:
    """Otsu threshold as a float in [0, 1] (level / 255)."""
    return otsu_level(gray) / MAX_LEVEL


def mean_intensity(gray: GrayscaleImage) -> float:
    """Mean intensity over the whole image."""
    return float(gray.pixels.astype(np.float64).mean())


def decide_threshold(
    gray: GrayscaleImage,
    polarity_threshold: float = POLARITY_MEAN_THRESHOLD,
) -> ThresholdDecision:
    """Compute the Otsu threshold and decide the mask polarity.

    A mean above polarity_threshold means a light background with dark ink,
    so the dark class becomes foreground (invert=True). The global mean is
    the only polarity signal; a half-black, half-white image has mean
    exactly 0.5 and is not inverted.
    """
    level = otsu_level(gray)
    mean = mean_intensity(gray)
    return ThresholdDecision(
        threshold=level / MAX_LEVEL,
        level=level,
        invert=mean > polarity_threshold,
        mean=mean,
    )


def binarize(gray: GrayscaleImage, threshold: float, invert: bool) -> BinaryMask:
    """Apply a threshold and polarity to produce a foreground mask.

    The bright class is every pixel whose level exceeds round(threshold * 255).
    It is the foreground when invert is False; otherwise the dark class is.

    Raises:
        ValueError: If threshold is outside [0, 1].
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must lie in [0, 1], got {threshold}")

    cutoff = int(np.floor(threshold * MAX_LEVEL + 0.5))
    bright = quantize_levels(gray) > cutoff
    foreground = ~bright if invert else bright
    return BinaryMask(foreground.astype(np.uint8))
