"""Converters between svgelements shapes and domain models.

This module turns one parsed svgelements shape, with its style already
resolved and its transform applied, into a domain Shape in viewbox
coordinates. Every primitive arrives as path segments; arcs keep their
elliptical geometry so the flattener can bound their error itself.
"""

import math

import svgelements

from svgps.config import ReaderConfig, StrokeSelection
from svgps.domain import (
    ArcTo,
    ClosePath,
    CubicTo,
    FillRule,
    LineTo,
    MoveTo,
    PathOutline,
    Point,
    QuadTo,
    Segment,
    Shape,
)
from svgps.exceptions import ParseError


def _point(point: svgelements.Point) -> Point:
    return Point(float(point.x), float(point.y))


def arc_axes(
    center: svgelements.Point, prx: svgelements.Point, pry: svgelements.Point
) -> tuple[float, float, float]:
    """Radii and rotation of a transformed ellipse.

    svgelements keeps an arc's ellipse as two conjugate semi-diameters
    (``prx - center`` and ``pry - center``). The principal semi-axes are the
    singular values of the matrix with those vectors as columns.

    Args:
        center: Ellipse center
        prx: Point at parameter 0
        pry: Point at parameter 90 degrees

    Returns:
        Tuple of (rx, ry, rotation in degrees)
    """
    a00, a10 = prx.x - center.x, prx.y - center.y
    a01, a11 = pry.x - center.x, pry.y - center.y

    e = a00 * a00 + a01 * a01
    f = a00 * a10 + a01 * a11
    g = a10 * a10 + a11 * a11

    mean = (e + g) / 2.0
    spread = math.hypot((e - g) / 2.0, f)
    rx = math.sqrt(mean + spread)
    ry = math.sqrt(max(mean - spread, 0.0))
    rotation = math.degrees(0.5 * math.atan2(2.0 * f, e - g))
    return rx, ry, rotation


def _arc_segment(arc: svgelements.Arc) -> Segment | None:
    end = _point(arc.end)
    if arc.start == arc.end:
        return None
    rx, ry, rotation = arc_axes(arc.center, arc.prx, arc.pry)
    if rx == 0.0 or ry == 0.0:
        return LineTo(end)

    # Direction of travel, taken from the midpoint so mirroring needs no special case
    center, start, middle = arc.center, arc.start, arc.point(0.5)
    turn = (start.x - center.x) * (middle.y - center.y) - (start.y - center.y) * (
        middle.x - center.x
    )
    return ArcTo(
        rx=rx,
        ry=ry,
        rotation=rotation,
        large_arc=abs(arc.sweep) > math.pi,
        sweep=turn > 0,
        point=end,
    )


def shape_segments(element: svgelements.Shape) -> list[Segment]:
    """Convert the transformed segments of an svgelements shape.

    Drawing that continues after a close starts a new sub-path at the
    closed sub-path's first point.

    Args:
        element: Parsed svgelements shape

    Returns:
        Path segments in viewbox space

    Raises:
        ParseError: If the shape geometry cannot be evaluated
    """
    try:
        source = list(element.segments(transformed=True))
    except (ValueError, TypeError, ZeroDivisionError) as e:
        raise ParseError(f"invalid geometry: {e}") from e

    segments: list[Segment] = []
    start: Point | None = None
    closed = False
    for segment in source:
        if isinstance(segment, svgelements.Move):
            if segment.end is None:
                continue
            start = _point(segment.end)
            segments.append(MoveTo(start))
            closed = False
            continue
        if start is None:
            raise ParseError(f"{type(segment).__name__} before the first move")
        if isinstance(segment, svgelements.Close):
            segments.append(ClosePath())
            closed = True
            continue
        if closed:
            segments.append(MoveTo(start))
            closed = False

        if isinstance(segment, svgelements.Line):
            segments.append(LineTo(_point(segment.end)))
        elif isinstance(segment, svgelements.QuadraticBezier):
            segments.append(QuadTo(_point(segment.control), _point(segment.end)))
        elif isinstance(segment, svgelements.CubicBezier):
            segments.append(
                CubicTo(_point(segment.control1), _point(segment.control2), _point(segment.end))
            )
        elif isinstance(segment, svgelements.Arc):
            arc = _arc_segment(segment)
            if arc is not None:
                segments.append(arc)
        else:
            raise ParseError(f"unsupported segment {type(segment).__name__}")
    return segments


def is_painted(color: svgelements.Color | None, raw: object = None) -> bool:
    """Whether a resolved paint value draws anything.

    Args:
        color: Paint after svgelements resolved it (opacity applied)
        raw: Unresolved property value; paint servers are counted as painted

    Returns:
        True for a color with non-zero alpha or a ``url(...)`` reference
    """
    if isinstance(raw, str) and raw.strip().startswith("url("):
        return True
    if color is None or color.value is None:
        return False
    return color.alpha > 0


def element_to_shape(element: svgelements.Shape, z_index: int, config: ReaderConfig) -> Shape:
    """Convert a parsed svgelements shape to a domain Shape.

    Args:
        element: svgelements shape with its transform applied
        z_index: Position of the element in paint order
        config: Reader configuration

    Returns:
        Domain Shape

    Raises:
        ParseError: If the geometry cannot be evaluated
    """
    values = element.values
    outline = PathOutline(shape_segments(element))

    filled = is_painted(element.fill, values.get("fill"))
    if config.stroke_selection == StrokeSelection.STROKED:
        stroke = is_painted(element.stroke, values.get("stroke"))
    else:
        stroke = True

    rule = str(values.get("fill-rule", "nonzero")).strip().lower()
    fill_rule = FillRule.EVENODD if rule == "evenodd" else FillRule.NONZERO

    return Shape(
        outline=outline,
        z_index=z_index,
        stroke=stroke,
        fill=outline if filled else None,
        fill_rule=fill_rule,
        element_id=values.get("id"),
    )
