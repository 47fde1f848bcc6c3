"""
Normalization pipeline that applies all stages in order.

The pipeline is the main entry point: it turns an RGBA buffer into the
canonical 28x28 float image plus a debug trace.

This module provides three APIs:
1. run_pipeline() - Function API returning a NormalizeResult
2. preprocess_to_mnist() - Flat-argument API returning (image, trace)
3. build_pipeline() - The equivalent class-based Pipeline, for inspecting
   intermediates

Pipeline order:
Grayscale → Binarize (Otsu + polarity) → Crop (largest component) →
Resample → Composite → (Center of mass) → (Blur) → Normalize
"""

from __future__ import annotations

import logging

from .config import NormalizeConfig
from .steps import (
    BinarizeStep,
    CenterOfMassStep,
    CompositeStep,
    GaussianBlurStep,
    GrayscaleStep,
    NormalizeStep,
    Pipeline,
    PreprocessStep,
    RegionCropStep,
    ResampleStep,
)
from .types import BufferLike, DebugTrace, NormalizedImage, NormalizeResult, PixelBuffer

logger = logging.getLogger(__name__)


def build_pipeline(config: NormalizeConfig) -> Pipeline:
    """Build a Pipeline from a NormalizeConfig.

    Centering and blur steps are only added when enabled in the config.
    """
    steps: list[PreprocessStep] = [
        GrayscaleStep(),
        BinarizeStep(polarity_threshold=config.polarity_threshold),
        RegionCropStep(),
        ResampleStep(target_size=config.target_size),
        CompositeStep(),
    ]

    if config.center:
        steps.append(CenterOfMassStep())

    if config.blur:
        steps.append(
            GaussianBlurStep(
                sigma=config.blur_sigma,
                radius_factor=config.blur_radius_factor,
            )
        )

    steps.append(NormalizeStep(epsilon=config.epsilon))
    return Pipeline(steps=steps)


def run_pipeline(
    buffer: PixelBuffer,
    config: NormalizeConfig | None = None,
) -> NormalizeResult:
    """Normalize an RGBA buffer into the canonical 28x28 image.

    Pure: the buffer is never modified and no state survives the call.

    Args:
        buffer: RGBA8 input.
        config: Pipeline configuration. If None, uses default settings
                (no blur, centering on).

    Returns:
        NormalizeResult with the image, debug trace and stage metadata.

    Raises:
        ValueError: If the configuration is invalid.
        TypeError: If buffer is not a PixelBuffer.

    Examples:
        >>> buf = PixelBuffer(bytes(4 * 10 * 10), 10, 10)
        >>> result = run_pipeline(buf)
        >>> result.vector.shape
        (784,)
        >>> str(result.trace)
        'th=0.000 invert=false roi=[0,0..9,9] w×h=10×10 scale=2.000'
    """
    if config is None:
        config = NormalizeConfig()
    config.validate()

    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")

    results = build_pipeline(config).run(buffer)
    state = results.state

    trace = DebugTrace(
        threshold=state.decision.threshold,
        invert=state.decision.invert,
        roi=state.roi,
        width=state.roi.width,
        height=state.roi.height,
        scale=state.scale,
    )
    logger.debug("%s", trace)

    return NormalizeResult(
        image=NormalizedImage(results.final),
        trace=trace,
        metadata=results.all_metadata,
    )


def preprocess_to_mnist(
    data: BufferLike,
    width: int,
    height: int,
    blur: bool = False,
    center: bool = True,
) -> tuple[NormalizedImage, DebugTrace]:
    """Normalize raw RGBA bytes; the flat-argument form of run_pipeline().

    Raises:
        ValueError: If len(data) != width * height * 4.
    """
    buffer = PixelBuffer(data, width, height)
    result = run_pipeline(buffer, NormalizeConfig(blur=blur, center=center))
    return result.image, result.trace
