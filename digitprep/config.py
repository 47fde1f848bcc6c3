"""
Configuration for the normalization pipeline.

All stages are parameterized through NormalizeConfig so a run can be
reproduced exactly from its config.
"""

from dataclasses import dataclass

from config import (
    BLUR_RADIUS_FACTOR,
    BLUR_SIGMA,
    CANVAS_SIZE,
    DEFAULT_BLUR,
    DEFAULT_CENTER,
    NORMALIZE_EPSILON,
    POLARITY_MEAN_THRESHOLD,
    TARGET_SIZE,
)


@dataclass(frozen=True)
class NormalizeConfig:
    """Configuration for every pipeline stage.

    The defaults produce the canonical MNIST-style representation. Only
    `blur` and `center` are meant to be toggled by callers; the remaining
    fields exist so experiments can vary them without editing code.

    Attributes:
        blur: Apply the separable Gaussian blur before normalizing.
        center: Shift the digit so its intensity centroid sits at the canvas center.
        target_size: Longest side of the resampled digit.
        blur_sigma: Gaussian sigma in pixels.
        blur_radius_factor: Kernel radius is max(1, round(factor * sigma)).
        polarity_threshold: Mean intensity above which the mask is inverted.
        epsilon: Floor on the min-max range during normalization.
    """

    blur: bool = DEFAULT_BLUR
    center: bool = DEFAULT_CENTER
    target_size: int = TARGET_SIZE
    blur_sigma: float = BLUR_SIGMA
    blur_radius_factor: float = BLUR_RADIUS_FACTOR
    polarity_threshold: float = POLARITY_MEAN_THRESHOLD
    epsilon: float = NORMALIZE_EPSILON

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.target_size <= 0:
            raise ValueError(f"target_size must be positive, got {self.target_size}")
        if self.target_size > CANVAS_SIZE:
            raise ValueError(
                f"target_size={self.target_size} does not fit a "
                f"{CANVAS_SIZE}x{CANVAS_SIZE} canvas"
            )
        if self.blur_sigma <= 0:
            raise ValueError(f"blur_sigma must be positive, got {self.blur_sigma}")
        if self.blur_radius_factor <= 0:
            raise ValueError(
                f"blur_radius_factor must be positive, got {self.blur_radius_factor}"
            )
        if not 0.0 <= self.polarity_threshold <= 1.0:
            raise ValueError(
                f"polarity_threshold must lie in [0, 1], got {self.polarity_threshold}"
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
