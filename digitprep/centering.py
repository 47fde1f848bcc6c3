"""Center-of-mass alignment for the output canvas."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from geometry import clip_span, round_half_up


@dataclass(frozen=True)
class Centroid:
    """Intensity-weighted centroid. cx/cy fall back to the geometric center when mass is 0."""

    cx: float
    cy: float
    mass: float


def compute_centroid(img: np.ndarray) -> Centroid:
    """cx = sum(v * x) / sum(v), cy = sum(v * y) / sum(v)."""
    if img.ndim != 2:
        raise ValueError(f"Expected 2D image, got shape {img.shape}")
    values = img.astype(np.float64)
    h, w = values.shape
    mass = float(values.sum())
    if mass <= 0:
        return Centroid(cx=w / 2, cy=h / 2, mass=0.0)
    cx = float((values.sum(axis=0) * np.arange(w)).sum() / mass)
    cy = float((values.sum(axis=1) * np.arange(h)).sum() / mass)
    return Centroid(cx=cx, cy=cy, mass=mass)


def shift_image(img: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Translate by (dx, dy) without changing the size.

    Pixels shifted past an edge are dropped; uncovered pixels are 0.
    """
    h, w = img.shape
    shifted = np.zeros_like(img)
    sx0, sx1, dx0, dx1 = clip_span(dx, w, w)
    sy0, sy1, dy0, dy1 = clip_span(dy, h, h)
    if sx1 > sx0 and sy1 > sy0:
        shifted[dy0:dy1, dx0:dx1] = img[sy0:sy1, sx0:sx1]
    return shifted


def center_by_mass(img: np.ndarray) -> tuple[np.ndarray, tuple[int, int]]:
    """Shift content so its centroid lands on the canvas center.

    The target is (w / 2, h / 2), i.e. (14, 14) on a 28 canvas. An empty
    image is returned unchanged.

    Returns:
        Tuple of the shifted copy and the applied (dx, dy).
    """
    centroid = compute_centroid(img)
    if centroid.mass <= 0:
        return img.copy(), (0, 0)

    h, w = img.shape
    dx = round_half_up(w / 2 - centroid.cx)
    dy = round_half_up(h / 2 - centroid.cy)
    if dx == 0 and dy == 0:
        return img.copy(), (0, 0)
    return shift_image(img, dx, dy), (dx, dy)
