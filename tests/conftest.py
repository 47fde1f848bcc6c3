"""Pytest configuration and synthetic image fixtures.

Images are built from small uint8 grayscale arrays and expanded to opaque
RGBA buffers, so every test states its input pixel by pixel.
"""
import numpy as np
import pytest

from digitprep import PixelBuffer


def gray_to_rgba(gray: np.ndarray) -> np.ndarray:
    """(H, W) uint8 gray levels -> (H, W, 4) opaque RGBA."""
    gray = np.asarray(gray, dtype=np.uint8)
    alpha = np.full_like(gray, 255)
    return np.dstack([gray, gray, gray, alpha])


def buffer_from_gray(gray: np.ndarray) -> PixelBuffer:
    return PixelBuffer.from_array(gray_to_rgba(gray))


@pytest.fixture
def make_buffer():
    """Factory: (H, W) uint8 gray array -> PixelBuffer."""
    return buffer_from_gray


@pytest.fixture
def black_buffer():
    return buffer_from_gray(np.zeros((64, 64), dtype=np.uint8))


@pytest.fixture
def white_buffer():
    return buffer_from_gray(np.full((64, 64), 255, dtype=np.uint8))


@pytest.fixture
def white_square_on_white():
    """280x280 white canvas with a 4x4 black square at (10, 10)."""
    gray = np.full((280, 280), 255, dtype=np.uint8)
    gray[10:14, 10:14] = 0
    return buffer_from_gray(gray)


@pytest.fixture
def drawn_stroke():
    """A thick white vertical stroke on black, like the drawing pad produces."""
    gray = np.zeros((280, 280), dtype=np.uint8)
    gray[60:220, 120:150] = 255
    return buffer_from_gray(gray)
