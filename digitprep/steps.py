"""
Pipeline step classes with a common interface.

Each step is a frozen dataclass implementing PreprocessStep. Steps are pure
and stateless: they take a StageData and return a new StageData without
mutating the input, so one Pipeline can be shared across threads.

Usage:
    from digitprep.steps import GrayscaleStep, BinarizeStep, Pipeline

    pipeline = Pipeline(steps=[GrayscaleStep(), BinarizeStep()])
    result = pipeline.run(buffer)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from config import (
    BLUR_RADIUS_FACTOR,
    BLUR_SIGMA,
    CANVAS_SIZE,
    NORMALIZE_EPSILON,
    POLARITY_MEAN_THRESHOLD,
    TARGET_SIZE,
)

from .centering import center_by_mass, compute_centroid
from .components import largest_component
from .filters import gaussian_blur, gaussian_kernel
from .normalization import (
    composite_centered,
    ink_intensity,
    normalize_min_max,
    resample_nearest,
    to_grayscale,
)
from .thresholding import binarize, decide_threshold
from .types import (
    BinaryMask,
    GrayscaleImage,
    PixelBuffer,
    RegionOfInterest,
    ThresholdDecision,
)


@dataclass(frozen=True)
class StageData:
    """Everything the stages have produced so far.

    Attributes:
        buffer: The RGBA input.
        gray: Luminance image (after GrayscaleStep).
        decision: Threshold and polarity (after BinarizeStep).
        mask: Foreground mask (after BinarizeStep).
        roi: Selected region (after RegionCropStep).
        found_component: False when the ROI fell back to the full image.
        scale: Resampling factor (after ResampleStep).
        shift: Applied (dx, dy) (after CenterOfMassStep).
        image: The current float image handed from step to step.
    """

    buffer: PixelBuffer
    gray: GrayscaleImage | None = None
    decision: ThresholdDecision | None = None
    mask: BinaryMask | None = None
    roi: RegionOfInterest | None = None
    found_component: bool = False
    scale: float | None = None
    shift: tuple[int, int] | None = None
    image: np.ndarray | None = None

    def require(self, name: str, step: str) -> Any:
        value = getattr(self, name)
        if value is None:
            raise ValueError(f"{step} requires {name}; run the preceding steps first")
        return value


class PreprocessStep(ABC):
    """Base class for pipeline steps.

    Steps must be pure: apply() never mutates its input and returns a new
    StageData. Metadata is derived from the step's output so steps carry no
    per-call state.
    """

    @abstractmethod
    def apply(self, data: StageData) -> StageData:
        """Apply this step and return the updated stage data."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""
        pass

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        """Metadata describing the output of this step. Empty by default."""
        return {}

    def output_image(self, data: StageData) -> np.ndarray:
        """The array recorded as this step's intermediate."""
        return data.require("image", self.name)


@dataclass(frozen=True)
class GrayscaleStep(PreprocessStep):
    """RGBA buffer to luminance in [0, 1]."""

    def apply(self, data: StageData) -> StageData:
        gray = to_grayscale(data.buffer)
        return replace(data, gray=gray, image=gray.pixels)

    @property
    def name(self) -> str:
        return "grayscale"


@dataclass(frozen=True)
class BinarizeStep(PreprocessStep):
    """Otsu threshold, polarity decision and foreground mask.

    Attributes:
        polarity_threshold: Mean intensity above which the mask is inverted.
    """

    polarity_threshold: float = POLARITY_MEAN_THRESHOLD

    def apply(self, data: StageData) -> StageData:
        gray = data.require("gray", self.name)
        decision = decide_threshold(gray, self.polarity_threshold)
        mask = binarize(gray, decision.threshold, decision.invert)
        return replace(data, decision=decision, mask=mask)

    @property
    def name(self) -> str:
        return "binarize"

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        decision = data.require("decision", self.name)
        return {
            "threshold": decision.threshold,
            "otsu_level": decision.level,
            "invert": decision.invert,
            "mean_intensity": decision.mean,
            "foreground_pixels": data.require("mask", self.name).count(),
        }

    def output_image(self, data: StageData) -> np.ndarray:
        return data.require("mask", self.name).pixels.astype(np.float32)


@dataclass(frozen=True)
class RegionCropStep(PreprocessStep):
    """Crop the largest 4-connected component, or the full image if none."""

    def apply(self, data: StageData) -> StageData:
        gray = data.require("gray", self.name)
        decision = data.require("decision", self.name)
        roi = largest_component(data.require("mask", self.name))
        found = roi is not None
        if roi is None:
            roi = RegionOfInterest.full(gray.width, gray.height)
        crop = roi.crop(ink_intensity(gray, decision.invert))
        return replace(data, roi=roi, found_component=found, image=crop)

    @property
    def name(self) -> str:
        return "crop"

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        roi = data.require("roi", self.name)
        return {
            "roi": roi.as_tuple(),
            "roi_size": (roi.width, roi.height),
            "component_found": data.found_component,
        }


@dataclass(frozen=True)
class ResampleStep(PreprocessStep):
    """Nearest-neighbor resample so the longest side is target_size."""

    target_size: int = TARGET_SIZE

    def apply(self, data: StageData) -> StageData:
        resampled, scale = resample_nearest(
            data.require("image", self.name), self.target_size
        )
        return replace(data, image=resampled, scale=scale)

    @property
    def name(self) -> str:
        return f"resample({self.target_size})"

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        return {"scale_factor": data.require("scale", self.name)}


@dataclass(frozen=True)
class CompositeStep(PreprocessStep):
    """Paste the resampled digit into the center of the canvas."""

    canvas_size: int = CANVAS_SIZE

    def apply(self, data: StageData) -> StageData:
        canvas = composite_centered(data.require("image", self.name), self.canvas_size)
        return replace(data, image=canvas)

    @property
    def name(self) -> str:
        return "composite"


@dataclass(frozen=True)
class CenterOfMassStep(PreprocessStep):
    """Shift the canvas so its intensity centroid sits at the center."""

    def apply(self, data: StageData) -> StageData:
        shifted, shift = center_by_mass(data.require("image", self.name))
        return replace(data, image=shifted, shift=shift)

    @property
    def name(self) -> str:
        return "center"

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        centroid = compute_centroid(data.require("image", self.name))
        return {
            "centroid": (centroid.cx, centroid.cy),
            "mass": centroid.mass,
            "shift": data.require("shift", self.name),
        }


@dataclass(frozen=True)
class GaussianBlurStep(PreprocessStep):
    """Separable Gaussian blur with edge clamping."""

    sigma: float = BLUR_SIGMA
    radius_factor: float = BLUR_RADIUS_FACTOR

    def apply(self, data: StageData) -> StageData:
        blurred = gaussian_blur(
            data.require("image", self.name), self.sigma, self.radius_factor
        )
        return replace(data, image=blurred)

    @property
    def name(self) -> str:
        return f"blur(sigma={self.sigma})"

    def get_metadata(self, data: StageData) -> dict[str, Any]:
        return {"blur_radius": gaussian_kernel(self.sigma, self.radius_factor).radius}


@dataclass(frozen=True)
class NormalizeStep(PreprocessStep):
    """Min-max rescale to [0, 1]."""

    epsilon: float = NORMALIZE_EPSILON

    def apply(self, data: StageData) -> StageData:
        normalized = normalize_min_max(data.require("image", self.name), self.epsilon)
        return replace(data, image=normalized)

    @property
    def name(self) -> str:
        return "normalize"


@dataclass
class StepResult:
    """Result of applying a single step.

    Attributes:
        name: Name of the step that produced this result.
        image: Output array of the step (the mask for binarize).
        metadata: Metadata produced by the step.
    """

    name: str
    image: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineStepResults:
    """Results from running a pipeline.

    Attributes:
        original: The input buffer.
        state: StageData after the last step.
        steps: StepResult for each step, in order.
    """

    original: PixelBuffer
    state: StageData
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> np.ndarray | None:
        """The image produced by the last step."""
        return self.state.image

    def get_intermediate(self, step_name: str) -> np.ndarray | None:
        """Intermediate output by step name (e.g. "grayscale", "resample(20)")."""
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None

    def get_metadata(self, key: str) -> Any | None:
        """First metadata value stored under key, searching steps in order."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def scale_factor(self) -> float:
        """Convenience property for the common scale_factor metadata."""
        return self.get_metadata("scale_factor") or 1.0

    @property
    def all_metadata(self) -> dict[str, Any]:
        """Metadata from all steps merged; later steps win on conflicts."""
        result = {}
        for step in self.steps:
            result.update(step.metadata)
        return result


@dataclass
class Pipeline:
    """A sequence of steps applied in order.

    Each step receives the StageData produced by the previous one. All
    intermediate outputs are preserved in the returned results.

    Attributes:
        steps: PreprocessStep instances to apply in order.
    """

    steps: list[PreprocessStep]

    def run(self, buffer: PixelBuffer) -> PipelineStepResults:
        """Run the pipeline on an RGBA buffer."""
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")

        data = StageData(buffer=buffer)
        results: list[StepResult] = []
        for step in self.steps:
            data = step.apply(data)
            results.append(
                StepResult(
                    name=step.name,
                    image=step.output_image(data),
                    metadata=step.get_metadata(data),
                )
            )
        return PipelineStepResults(original=buffer, state=data, steps=results)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
