"""Helpers for interpreting classifier outputs for a normalized digit."""

from __future__ import annotations

from typing import Sequence

import numpy as np

# Exported models disagree on whether the last layer is softmaxed
PROBABILITY_SUM_TOLERANCE = 1e-3


def softmax(logits: Sequence[float] | np.ndarray) -> np.ndarray:
    """Softmax with max subtraction for numerical stability."""
    values = np.asarray(logits, dtype=np.float64)
    if values.ndim != 1 or values.size == 0:
        raise ValueError(f"Expected a non-empty 1D sequence, got shape {values.shape}")
    exps = np.exp(values - values.max())
    return exps / exps.sum()


def looks_like_probabilities(
    values: Sequence[float] | np.ndarray,
    tolerance: float = PROBABILITY_SUM_TOLERANCE,
) -> bool:
    """True when every value is non-negative and they sum to 1 within tolerance."""
    arr = np.asarray(values, dtype=np.float64)
    return bool(np.all(arr >= 0) and abs(arr.sum() - 1.0) < tolerance)


def as_probabilities(outputs: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return outputs unchanged if they are already a distribution, else softmax them."""
    arr = np.asarray(outputs, dtype=np.float64)
    if looks_like_probabilities(arr):
        return arr
    return softmax(arr)


def top_k(probs: Sequence[float] | np.ndarray, k: int) -> list[tuple[int, float]]:
    """The k most likely classes as (index, probability), most likely first.

    Equal probabilities keep ascending index order.
    """
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    arr = np.asarray(probs, dtype=np.float64)
    order = np.argsort(-arr, kind="stable")[:k]
    return [(int(i), float(arr[i])) for i in order]
