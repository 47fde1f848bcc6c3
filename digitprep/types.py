"""
Type definitions for the normalization pipeline.

Every stage consumes and produces one of these containers. Each container
checks its shape and dtype on construction, so a shape mismatch between
stages fails at the seam where it happens instead of deep inside numpy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

import numpy as np

from config import CANVAS_SIZE, RGBA_CHANNELS

BufferLike = Union[bytes, bytearray, memoryview, np.ndarray]


def _require_positive_dims(width: int, height: int) -> None:
    for label, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise TypeError(f"{label} must be int, got {type(value).__name__}")
        if value <= 0:
            raise ValueError(f"{label} must be positive, got {value}")


def _require_ndarray(pixels: Any, kind: str) -> None:
    if not isinstance(pixels, np.ndarray):
        raise TypeError(
            f"{kind} expects numpy.ndarray, got {type(pixels).__name__}"
        )


def format_fixed(value: float, digits: int = 3) -> str:
    """Fixed-point text with ties rounded away from zero (0.3125 -> "0.313").

    Works on the exact binary value of the float, so only true ties round up.
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA8 input image.

    Attributes:
        data: Exactly width * height * 4 bytes, channel order R, G, B, A.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    data: bytes
    width: int
    height: int

    def __post_init__(self):
        _require_positive_dims(self.width, self.height)

        data = self.data
        if isinstance(data, np.ndarray):
            if data.dtype != np.uint8:
                raise TypeError(f"Pixel array must be uint8, got {data.dtype}")
            data = data.tobytes()
        elif isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(
                f"Expected bytes-like pixel data, got {type(self.data).__name__}"
            )

        expected = self.width * self.height * RGBA_CHANNELS
        if len(data) != expected:
            raise ValueError(
                f"RGBA buffer has {len(data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{RGBA_CHANNELS}"
            )
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> PixelBuffer:
        """Build a buffer from an (H, W, 4) uint8 array."""
        _require_ndarray(rgba, "PixelBuffer.from_array")
        if rgba.ndim != 3 or rgba.shape[2] != RGBA_CHANNELS:
            raise ValueError(
                f"Expected (H, W, {RGBA_CHANNELS}) RGBA array, got shape {rgba.shape}"
            )
        height, width = rgba.shape[:2]
        return cls(np.ascontiguousarray(rgba), width, height)

    def as_array(self) -> np.ndarray:
        """Read-only (H, W, 4) uint8 view of the buffer."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, RGBA_CHANNELS
        )

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class GrayscaleImage:
    """Single-channel luminance, float32 values in [0, 1]."""

    pixels: np.ndarray

    def __post_init__(self):
        _require_ndarray(self.pixels, "GrayscaleImage")
        if self.pixels.ndim != 2 or self.pixels.size == 0:
            raise ValueError(
                f"GrayscaleImage must be a non-empty 2D array, got shape {self.pixels.shape}"
            )
        pixels = self.pixels.astype(np.float32, copy=False)
        if np.any(pixels < 0.0) or np.any(pixels > 1.0):
            raise ValueError("GrayscaleImage values must lie in [0, 1]")
        object.__setattr__(self, "pixels", _read_only(pixels))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@dataclass(frozen=True)
class BinaryMask:
    """Foreground mask, uint8 values restricted to {0, 1}. 1 is ink."""

    pixels: np.ndarray

    def __post_init__(self):
        _require_ndarray(self.pixels, "BinaryMask")
        if self.pixels.ndim != 2 or self.pixels.size == 0:
            raise ValueError(
                f"BinaryMask must be a non-empty 2D array, got shape {self.pixels.shape}"
            )
        if not np.isin(self.pixels, (0, 1)).all():
            raise ValueError("BinaryMask values must be 0 or 1")
        object.__setattr__(
            self, "pixels", _read_only(self.pixels.astype(np.uint8, copy=False))
        )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def count(self) -> int:
        """Number of foreground pixels."""
        return int(self.pixels.sum())


@dataclass(frozen=True)
class RegionOfInterest:
    """Inclusive bounding box (x0, y0)..(x1, y1)."""

    x0: int
    y0: int
    x1: int
    y1: int

    def __post_init__(self):
        if self.x0 > self.x1 or self.y0 > self.y1:
            raise ValueError(
                f"Degenerate ROI [{self.x0},{self.y0}..{self.x1},{self.y1}]"
            )
        if self.x0 < 0 or self.y0 < 0:
            raise ValueError(
                f"ROI origin must be non-negative, got ({self.x0}, {self.y0})"
            )

    @classmethod
    def full(cls, width: int, height: int) -> RegionOfInterest:
        """The whole image, used when no foreground component exists."""
        _require_positive_dims(width, height)
        return cls(0, 0, width - 1, height - 1)

    @property
    def width(self) -> int:
        return self.x1 - self.x0 + 1

    @property
    def height(self) -> int:
        return self.y1 - self.y0 + 1

    def validate_within(self, width: int, height: int) -> None:
        """Raise ValueError if the box does not fit a width x height image."""
        if self.x1 >= width or self.y1 >= height:
            raise ValueError(
                f"ROI [{self.x0},{self.y0}..{self.x1},{self.y1}] exceeds "
                f"{width}x{height} image"
            )

    def crop(self, pixels: np.ndarray) -> np.ndarray:
        """Copy of the region from a 2D array."""
        self.validate_within(pixels.shape[1], pixels.shape[0])
        return pixels[self.y0:self.y1 + 1, self.x0:self.x1 + 1].copy()

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x0, self.y0, self.x1, self.y1)


@dataclass(frozen=True)
class Kernel:
    """Odd-length 1-D convolution kernel whose weights sum to 1."""

    weights: np.ndarray

    def __post_init__(self):
        weights = np.asarray(self.weights, dtype=np.float64)
        if weights.ndim != 1 or weights.size % 2 == 0:
            raise ValueError(
                f"Kernel must be a 1D odd-length sequence, got shape {weights.shape}"
            )
        total = float(weights.sum())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Kernel weights must sum to 1, got {total:.6f}")
        object.__setattr__(self, "weights", _read_only(weights))

    @property
    def radius(self) -> int:
        return self.weights.size // 2

    def __len__(self) -> int:
        return int(self.weights.size)


@dataclass(frozen=True)
class NormalizedImage:
    """The pipeline output: a CANVAS_SIZE x CANVAS_SIZE float32 array in [0, 1]."""

    pixels: np.ndarray

    def __post_init__(self):
        _require_ndarray(self.pixels, "NormalizedImage")
        shape = (CANVAS_SIZE, CANVAS_SIZE)
        if self.pixels.shape != shape:
            raise ValueError(
                f"NormalizedImage must have shape {shape}, got {self.pixels.shape}"
            )
        pixels = self.pixels.astype(np.float32, copy=False)
        if not np.all(np.isfinite(pixels)):
            raise ValueError("NormalizedImage contains NaN or Inf")
        if np.any(pixels < 0.0) or np.any(pixels > 1.0):
            raise ValueError("NormalizedImage values must lie in [0, 1]")
        object.__setattr__(self, "pixels", _read_only(pixels))

    def as_vector(self) -> np.ndarray:
        """Row-major float32 vector of CANVAS_SIZE ** 2 values."""
        return self.pixels.reshape(-1).copy()

    def as_model_input(self) -> np.ndarray:
        """(1, CANVAS_SIZE ** 2) float32 batch for a dense classifier."""
        return self.as_vector().reshape(1, -1)

    def __len__(self) -> int:
        return int(self.pixels.size)


@dataclass(frozen=True)
class ThresholdDecision:
    """Otsu threshold plus the polarity decision.

    Attributes:
        threshold: Otsu level divided by 255.
        level: The Otsu histogram level t in [0, 255].
        invert: True when the image looks like dark ink on a light background.
        mean: Mean intensity of the whole image.
    """

    threshold: float
    level: int
    invert: bool
    mean: float


@dataclass(frozen=True)
class DebugTrace:
    """Diagnostic record produced by every pipeline call.

    str(trace) is a stable contract consumed by UIs and tests; the field
    order and formatting must not change.
    """

    threshold: float
    invert: bool
    roi: RegionOfInterest
    width: int
    height: int
    scale: float

    def __str__(self) -> str:
        return (
            f"th={format_fixed(self.threshold)} invert={'true' if self.invert else 'false'} "
            f"roi=[{self.roi.x0},{self.roi.y0}..{self.roi.x1},{self.roi.y1}] "
            f"w×h={self.width}×{self.height} scale={format_fixed(self.scale)}"
        )


@dataclass
class NormalizeResult:
    """Result of one pipeline invocation.

    Attributes:
        image: The normalized 28x28 image.
        trace: Debug trace for this call.
        metadata: Aggregated per-stage metadata (mean, mask size, centroid...).
    """

    image: NormalizedImage
    trace: DebugTrace
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def vector(self) -> np.ndarray:
        return self.image.as_vector()

    @property
    def debug(self) -> str:
        return str(self.trace)
