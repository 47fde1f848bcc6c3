"""Pydantic schemas for the JSON reports printed by the CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field

from digitprep import NormalizeResult


class RoiOut(BaseModel):
    """Inclusive bounding box of the selected component."""
    x0: int
    y0: int
    x1: int
    y1: int


class NormalizationReport(BaseModel):
    """One normalized image."""
    source: str
    debug: str
    threshold: float
    invert: bool
    roi: RoiOut
    width: int
    height: int
    scale: float
    component_found: bool
    vector: list[float] = Field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        source: str,
        result: NormalizeResult,
        include_vector: bool = False,
    ) -> NormalizationReport:
        trace = result.trace
        return cls(
            source=source,
            debug=str(trace),
            threshold=trace.threshold,
            invert=trace.invert,
            roi=RoiOut(x0=trace.roi.x0, y0=trace.roi.y0, x1=trace.roi.x1, y1=trace.roi.y1),
            width=trace.width,
            height=trace.height,
            scale=trace.scale,
            component_found=bool(result.metadata.get("component_found", False)),
            vector=[float(v) for v in result.vector] if include_vector else [],
        )
