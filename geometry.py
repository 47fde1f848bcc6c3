"""Shared rounding and placement helpers for pixel geometry."""

from __future__ import annotations

import math

import numpy as np


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf (0.5 -> 1, -0.5 -> 0).

    Python's round() uses banker's rounding, which would shift a centroid
    sitting exactly between two pixels the other way.
    """
    return int(math.floor(value + 0.5))


def round_half_up_array(values: np.ndarray) -> np.ndarray:
    """Vectorized round_half_up returning an int64 array."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def centered_offset(outer: int, inner: int) -> int:
    """Offset that places a span of `inner` pixels centered inside `outer`."""
    return (outer - inner) // 2


def clip_span(offset: int, length: int, limit: int) -> tuple[int, int, int, int]:
    """Overlap of a span shifted by `offset` with [0, limit).

    Returns (src_start, src_stop, dst_start, dst_stop); an empty overlap
    yields start == stop.
    """
    src_start = max(0, -offset)
    src_stop = min(length, limit - offset)
    if src_stop < src_start:
        src_stop = src_start
    dst_start = src_start + offset
    dst_stop = src_stop + offset
    return src_start, src_stop, dst_start, dst_stop
