"""
Digit normalization for MNIST-style classifiers.

This module turns a raw RGBA stroke or uploaded bitmap into the canonical
28x28 float image a digit classifier was trained on. All functions are pure
and deterministic: input -> output with no mutation and no shared state.

Key components:
- config: NormalizeConfig dataclass for parameterizing all stages
- types: Typed, shape-checked containers passed between stages
- pipeline: run_pipeline() / preprocess_to_mnist() orchestrators
- steps: Class-based steps with a common PreprocessStep interface
- thresholding, components, normalization, centering, filters: the stages

Two APIs are available:
1. Function-based: run_pipeline(buffer, config) -> NormalizeResult
2. Class-based: build_pipeline(config).run(buffer) -> PipelineStepResults

The class-based API exposes every intermediate for debugging.
"""

from .config import NormalizeConfig
from .types import (
    PixelBuffer,
    GrayscaleImage,
    BinaryMask,
    RegionOfInterest,
    Kernel,
    NormalizedImage,
    ThresholdDecision,
    DebugTrace,
    NormalizeResult,
)
from .pipeline import run_pipeline, build_pipeline, preprocess_to_mnist
from .normalization import (
    to_grayscale,
    ink_intensity,
    resample_nearest,
    composite_centered,
    normalize_min_max,
)
from .thresholding import otsu_threshold, mean_intensity, decide_threshold, binarize
from .components import Component, largest_component, label_components
from .centering import Centroid, compute_centroid, shift_image, center_by_mass
from .filters import gaussian_kernel, gaussian_blur_1d, gaussian_blur
from .steps import (
    PreprocessStep,
    GrayscaleStep,
    BinarizeStep,
    RegionCropStep,
    ResampleStep,
    CompositeStep,
    CenterOfMassStep,
    GaussianBlurStep,
    NormalizeStep,
    Pipeline,
    PipelineStepResults,
    StageData,
    StepResult,
)

__all__ = [
    # Config and containers
    "NormalizeConfig",
    "PixelBuffer",
    "GrayscaleImage",
    "BinaryMask",
    "RegionOfInterest",
    "Kernel",
    "NormalizedImage",
    "ThresholdDecision",
    "DebugTrace",
    "NormalizeResult",
    # Function API
    "run_pipeline",
    "build_pipeline",
    "preprocess_to_mnist",
    "to_grayscale",
    "ink_intensity",
    "resample_nearest",
    "composite_centered",
    "normalize_min_max",
    "otsu_threshold",
    "mean_intensity",
    "decide_threshold",
    "binarize",
    "Component",
    "largest_component",
    "label_components",
    "Centroid",
    "compute_centroid",
    "shift_image",
    "center_by_mass",
    "gaussian_kernel",
    "gaussian_blur_1d",
    "gaussian_blur",
    # Class-based API
    "PreprocessStep",
    "GrayscaleStep",
    "BinarizeStep",
    "RegionCropStep",
    "ResampleStep",
    "CompositeStep",
    "CenterOfMassStep",
    "GaussianBlurStep",
    "NormalizeStep",
    "Pipeline",
    "PipelineStepResults",
    "StageData",
    "StepResult",
]
