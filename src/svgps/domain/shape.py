"""Source shapes handed to the flattener by the SVG front end.

Outlines form a closed set of variants. Every variant is already expressed in
viewbox coordinates with all transforms applied:

- PathOutline: Generic path made of MoveTo/LineTo/QuadTo/CubicTo/ArcTo/ClosePath
- RectOutline: Axis-aligned rectangle, optionally with rounded corners
- EllipseOutline: Ellipse or circle, optionally rotated
- PolylineOutline: Polyline or polygon
- Path: An outline that is already canonical
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from svgps.domain.path import Path, Point


class FillRule(str, Enum):
    """Rule deciding which points lie inside a filled outline."""

    NONZERO = "nonzero"
    EVENODD = "evenodd"


@dataclass(frozen=True, slots=True)
class MoveTo:
    point: Point


@dataclass(frozen=True, slots=True)
class LineTo:
    point: Point


@dataclass(frozen=True, slots=True)
class QuadTo:
    control: Point
    point: Point


@dataclass(frozen=True, slots=True)
class CubicTo:
    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True, slots=True)
class ArcTo:
    """Elliptical arc in SVG endpoint parameterization.

    Attributes:
        rx: X radius
        ry: Y radius
        rotation: X-axis rotation in degrees
        large_arc: Take the arc spanning more than 180 degrees
        sweep: Draw in positive-angle direction
        point: End point
    """

    rx: float
    ry: float
    rotation: float
    large_arc: bool
    sweep: bool
    point: Point


@dataclass(frozen=True, slots=True)
class ClosePath:
    pass


Segment = Union[MoveTo, LineTo, QuadTo, CubicTo, ArcTo, ClosePath]


@dataclass
class PathOutline:
    """Generic path outline.

    Attributes:
        segments: Path segments in drawing order
    """

    segments: list[Segment] = field(default_factory=list)


@dataclass(frozen=True)
class RectOutline:
    """Axis-aligned rectangle with optional corner radii."""

    x: float
    y: float
    width: float
    height: float
    rx: float = 0.0
    ry: float = 0.0


@dataclass(frozen=True)
class EllipseOutline:
    """Ellipse centered at (cx, cy), rotated by ``rotation`` degrees."""

    cx: float
    cy: float
    rx: float
    ry: float
    rotation: float = 0.0

    @classmethod
    def circle(cls, cx: float, cy: float, r: float) -> "EllipseOutline":
        return cls(cx, cy, r, r)


@dataclass
class PolylineOutline:
    """Straight-edged outline through points; polygons are closed."""

    points: list[Point]
    closed: bool = False


Outline = Union[PathOutline, RectOutline, EllipseOutline, PolylineOutline, Path]


@dataclass
class Shape:
    """One drawable element of a document.

    Attributes:
        outline: Outline in viewbox coordinates
        z_index: Position in paint order (higher paints on top)
        stroke: Whether the shape takes part in stroke output
        fill: Closed outline used for occlusion testing (None if unfilled)
        fill_rule: Rule used when testing points against the fill
        element_id: Source element id, for logging
    """

    outline: Outline
    z_index: int
    stroke: bool = True
    fill: Outline | None = None
    fill_rule: FillRule = FillRule.NONZERO
    element_id: str | None = None

    @property
    def name(self) -> str:
        """Human-readable label for logs."""
        if self.element_id:
            return self.element_id
        return f"shape-{self.z_index}"

    def has_fill(self) -> bool:
        return self.fill is not None


@dataclass
class Document:
    """Ordered shapes sharing one viewbox.

    Attributes:
        width: Viewbox width
        height: Viewbox height
        shapes: Shapes in paint order
    """

    width: float
    height: float
    shapes: list[Shape] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Viewbox must be positive, got {self.width}x{self.height}"
            )
