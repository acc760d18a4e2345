"""Configuration settings for svgps."""

import math
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from svgps.domain.shape import FillRule


class StrokeSelection(str, Enum):
    """Which shapes of a document take part in stroke output."""

    ALL = "all"
    STROKED = "stroked"


class FlattenConfig(BaseModel):
    """Configuration for curve flattening."""

    tolerance: float = Field(
        default=0.01,
        gt=0.0,
        le=10.0,
        description="Maximum deviation between an arc and its cubic approximation (viewbox units)",
    )
    max_arc_segments: int = Field(
        default=64,
        ge=4,
        le=1024,
        description="Upper bound on cubic pieces generated for a single arc",
    )


class AutocutConfig(BaseModel):
    """Configuration for occlusion culling."""

    enabled: bool = Field(
        default=False,
        description="Remove stroke stretches hidden behind fills painted above them",
    )
    sample_tolerance: float = Field(
        default=0.05,
        gt=0.0,
        le=10.0,
        description="Maximum chord deviation when sampling curves for coverage",
    )
    max_samples_per_segment: int = Field(
        default=256,
        ge=1,
        le=4096,
        description="Upper bound on samples taken along one command",
    )
    line_sample_spacing: float | None = Field(
        default=None,
        gt=0.0,
        description="Subdivide lines and curves so samples are at most this far apart (None = lines as-is)",
    )
    cut_refinement_steps: int = Field(
        default=0,
        ge=0,
        le=32,
        description="Bisection steps refining a cut between its neighbouring samples",
    )
    fill_rule: FillRule | None = Field(
        default=None,
        description="Force a fill rule for every occluder (None = each shape's own rule)",
    )
    occluder_tolerance: float = Field(
        default=0.05,
        gt=0.0,
        le=10.0,
        description="Flattening tolerance for occluder outlines",
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes for per-shape culling (1 = in-process)",
    )


class PolishConfig(BaseModel):
    """Configuration for short sub-path removal."""

    enabled: bool = Field(
        default=False,
        description="Drop sub-paths shorter than the minimum length",
    )
    min_length: float | None = Field(
        default=None,
        ge=0.0,
        description="Absolute minimum sub-path length (overrides min_length_fraction)",
    )
    min_length_fraction: float = Field(
        default=0.001,
        ge=0.0,
        le=1.0,
        description="Minimum sub-path length as a fraction of the viewbox diagonal",
    )

    def get_min_length(self, width: float, height: float) -> float:
        """Resolve the length threshold for a viewbox.

        Args:
            width: Viewbox width
            height: Viewbox height

        Returns:
            Minimum length in viewbox units
        """
        if self.min_length is not None:
            return self.min_length
        return self.min_length_fraction * math.hypot(width, height)


class ReaderConfig(BaseModel):
    """Configuration for the SVG front end."""

    stroke_selection: StrokeSelection = Field(
        default=StrokeSelection.ALL,
        description="Shapes emitted as strokes: every visible shape or only stroked ones",
    )


class RenderConfig(BaseModel):
    """Configuration for rendering canonical streams back to SVG."""

    stroke: str = Field(
        default="#000000",
        description="Stroke color of rendered paths",
    )
    stroke_width: float = Field(
        default=1.0,
        gt=0.0,
        description="Stroke width of rendered paths",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SvgpsSettings(BaseModel):
    """Main application settings."""

    flatten: FlattenConfig = Field(default_factory=FlattenConfig)
    autocut: AutocutConfig = Field(default_factory=AutocutConfig)
    polish: PolishConfig = Field(default_factory=PolishConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
