"""Reduction of source outlines to the canonical command vocabulary.

Every outline variant funnels into ``CurveFlattener.flatten``, which emits
only Move, Line, Cubic and Close:

- Lines map directly to Line
- Quadratic curves are degree-raised to identical cubics
- Elliptical arcs are split into cubic pieces within a tolerance
- Rectangles, ellipses and polylines are expanded to their path equivalents
"""

import functools
import math

import structlog

from svgps.config import FlattenConfig
from svgps.core._bezier import elevate_quadratic, unit_arc_cubic, unit_arc_error
from svgps.domain import (
    ArcTo,
    Close,
    ClosePath,
    Cubic,
    CubicTo,
    EllipseOutline,
    Line,
    LineTo,
    Move,
    MoveTo,
    Outline,
    Path,
    PathCommand,
    PathOutline,
    Point,
    PolylineOutline,
    QuadTo,
    RectOutline,
    Shape,
)
from svgps.exceptions import ParseError

logger = structlog.get_logger("svgps.flattener")

HALF_PI = math.pi / 2


@functools.lru_cache(maxsize=1024)
def _arc_piece_error(delta: float) -> float:
    return unit_arc_error(delta)


def elliptical_arc_cubics(
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    rotation: float,
    theta1: float,
    dtheta: float,
    tolerance: float,
    max_segments: int = 64,
    granularity: int = 1,
    end: Point | None = None,
) -> list[Cubic]:
    """Approximate a center-parameterized elliptical arc with cubics.

    The piece count starts at one piece per quarter turn and grows (in steps
    of ``granularity``) until the radial error of a piece, scaled by the
    larger radius, is within tolerance.

    Args:
        cx: Center x
        cy: Center y
        rx: X radius (positive)
        ry: Y radius (positive)
        rotation: X-axis rotation in radians
        theta1: Start angle in radians
        dtheta: Signed sweep in radians
        tolerance: Maximum deviation from the true arc
        max_segments: Upper bound on pieces
        granularity: Piece count is kept a multiple of this
        end: Exact end point to use for the last piece

    Returns:
        Cubic commands, in drawing order
    """
    n = max(1, math.ceil(abs(dtheta) / HALF_PI - 1e-9))
    if n % granularity:
        n += granularity - n % granularity
    radius = max(rx, ry)
    while n < max_segments and _arc_piece_error(abs(dtheta) / n) * radius > tolerance:
        n += granularity

    cos_r, sin_r = math.cos(rotation), math.sin(rotation)

    def to_viewbox(u: float, v: float) -> Point:
        return Point(
            cx + rx * cos_r * u - ry * sin_r * v,
            cy + rx * sin_r * u + ry * cos_r * v,
        )

    delta = dtheta / n
    cubics: list[Cubic] = []
    for i in range(n):
        _, c1, c2, p = unit_arc_cubic(theta1 + i * delta, delta)
        end_point = end if (end is not None and i == n - 1) else to_viewbox(*p)
        cubics.append(Cubic(to_viewbox(*c1), to_viewbox(*c2), end_point))
    return cubics


def arc_to_cubics(start: Point, arc: ArcTo, tolerance: float, max_segments: int = 64) -> list[Cubic]:
    """Convert an SVG endpoint-parameterized arc to cubic pieces.

    Out-of-range radii are scaled up until the arc fits, as SVG renderers do.
    An arc whose end points coincide draws nothing.

    Args:
        start: Current point
        arc: Arc segment
        tolerance: Maximum deviation from the true arc
        max_segments: Upper bound on pieces

    Returns:
        Cubic commands ending exactly at the arc's end point

    Raises:
        ParseError: If a radius is zero, negative or not finite
    """
    end = arc.point
    rx, ry = arc.rx, arc.ry
    if not (math.isfinite(rx) and math.isfinite(ry)) or rx <= 0 or ry <= 0:
        raise ParseError(f"arc radii must be positive, got rx={rx}, ry={ry}")

    if start == end:
        return []

    phi = math.radians(arc.rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Step 1: start point in the ellipse's frame
    dx2 = (start.x - end.x) / 2.0
    dy2 = (start.y - end.y) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Scale radii up if the end points are out of reach
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1.0:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    # Step 2: center in the ellipse's frame
    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den))
    if arc.large_arc == arc.sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    # Step 3: center in viewbox space
    cx = cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2.0

    # Step 4: start angle and sweep
    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    theta2 = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx)
    dtheta = theta2 - theta1
    if arc.sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not arc.sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    return elliptical_arc_cubics(
        cx, cy, rx, ry, phi, theta1, dtheta, tolerance, max_segments, end=end
    )


class CurveFlattener:
    """Converts shape outlines into canonical paths.

    Example:
        flattener = CurveFlattener(FlattenConfig(tolerance=0.01))
        path = flattener.flatten(EllipseOutline.circle(50, 50, 10))
        print(path.tags)  # MCCCCZ
    """

    def __init__(self, config: FlattenConfig | None = None) -> None:
        """Initialize the flattener.

        Args:
            config: Flattening configuration (defaults if None)
        """
        self.config = config or FlattenConfig()

    def flatten(self, outline: Outline) -> Path:
        """Flatten one outline.

        Args:
            outline: Any outline variant

        Returns:
            Canonical path

        Raises:
            ParseError: If the outline as a whole is malformed
            TypeError: If the outline is not a known variant
        """
        if isinstance(outline, Path):
            return Path(list(outline.commands))
        if isinstance(outline, PathOutline):
            return self._flatten_path(outline)
        if isinstance(outline, RectOutline):
            return self._flatten_rect(outline)
        if isinstance(outline, EllipseOutline):
            return self._flatten_ellipse(outline)
        if isinstance(outline, PolylineOutline):
            return self._flatten_polyline(outline)
        raise TypeError(f"Unsupported outline type: {type(outline).__name__}")

    def flatten_shape(self, shape: Shape) -> Path:
        """Flatten a shape's outline, degrading malformed shapes to nothing.

        Args:
            shape: Shape to flatten

        Returns:
            Canonical path (empty if the outline is malformed)
        """
        try:
            return self.flatten(shape.outline)
        except ParseError as e:
            logger.warning("Shape dropped", shape=shape.name, reason=e.reason)
            return Path()

    def flatten_fill(self, shape: Shape) -> Path | None:
        """Flatten a shape's fill outline, if it has one."""
        if shape.fill is None:
            return None
        try:
            return self.flatten(shape.fill)
        except ParseError as e:
            logger.debug("Fill ignored", shape=shape.name, reason=e.reason)
            return None

    def _flatten_path(self, outline: PathOutline) -> Path:
        commands: list[PathCommand] = []
        start: Point | None = None
        current: Point | None = None

        for segment in outline.segments:
            if isinstance(segment, MoveTo):
                commands.append(Move(segment.point))
                start = current = segment.point
                continue

            if current is None or start is None:
                raise ParseError(
                    f"{type(segment).__name__} before the first MoveTo"
                )

            if isinstance(segment, LineTo):
                commands.append(Line(segment.point))
                current = segment.point
            elif isinstance(segment, QuadTo):
                c1, c2 = elevate_quadratic(current, segment.control, segment.point)
                commands.append(Cubic(c1, c2, segment.point))
                current = segment.point
            elif isinstance(segment, CubicTo):
                commands.append(Cubic(segment.control1, segment.control2, segment.point))
                current = segment.point
            elif isinstance(segment, ArcTo):
                try:
                    commands.extend(
                        arc_to_cubics(
                            current,
                            segment,
                            self.config.tolerance,
                            self.config.max_arc_segments,
                        )
                    )
                except ParseError as e:
                    logger.warning("Arc degraded to line", reason=e.reason)
                    commands.append(Line(segment.point))
                current = segment.point
            elif isinstance(segment, ClosePath):
                commands.append(Close())
                current = start
            else:
                raise TypeError(f"Unsupported segment type: {type(segment).__name__}")

        return Path(commands)

    def _flatten_rect(self, rect: RectOutline) -> Path:
        x, y, w, h = rect.x, rect.y, rect.width, rect.height
        if not all(math.isfinite(v) for v in (x, y, w, h)) or w <= 0 or h <= 0:
            raise ParseError(f"rectangle size must be positive, got {w}x{h}")

        rx = min(max(rect.rx, 0.0), w / 2.0)
        ry = min(max(rect.ry, 0.0), h / 2.0)

        # The left edge is drawn by the close
        if rx == 0.0 or ry == 0.0:
            return Path(
                [
                    Move(Point(x, y)),
                    Line(Point(x + w, y)),
                    Line(Point(x + w, y + h)),
                    Line(Point(x, y + h)),
                    Close(),
                ]
            )

        tol = self.config.tolerance
        limit = self.config.max_arc_segments
        commands: list[PathCommand] = [Move(Point(x + rx, y))]
        corners = (
            (Point(x + w - rx, y), (x + w - rx, y + ry), -HALF_PI, Point(x + w, y + ry)),
            (Point(x + w, y + h - ry), (x + w - rx, y + h - ry), 0.0, Point(x + w - rx, y + h)),
            (Point(x + rx, y + h), (x + rx, y + h - ry), HALF_PI, Point(x, y + h - ry)),
            (Point(x, y + ry), (x + rx, y + ry), math.pi, Point(x + rx, y)),
        )
        for line_end, (cx, cy), theta, arc_end in corners:
            if line_end != commands[-1].points()[-1]:
                commands.append(Line(line_end))
            commands.extend(
                elliptical_arc_cubics(cx, cy, rx, ry, 0.0, theta, HALF_PI, tol, limit, end=arc_end)
            )
        commands.append(Close())
        return Path(commands)

    def _flatten_ellipse(self, ellipse: EllipseOutline) -> Path:
        rx, ry = ellipse.rx, ellipse.ry
        if not (math.isfinite(rx) and math.isfinite(ry)) or rx <= 0 or ry <= 0:
            raise ParseError(f"ellipse radii must be positive, got rx={rx}, ry={ry}")

        phi = math.radians(ellipse.rotation)
        start = Point(
            ellipse.cx + rx * math.cos(phi),
            ellipse.cy + rx * math.sin(phi),
        )
        cubics = elliptical_arc_cubics(
            ellipse.cx,
            ellipse.cy,
            rx,
            ry,
            phi,
            0.0,
            2 * math.pi,
            self.config.tolerance,
            max(self.config.max_arc_segments, 4),
            granularity=4,
            end=start,
        )
        return Path([Move(start), *cubics, Close()])

    def _flatten_polyline(self, polyline: PolylineOutline) -> Path:
        if not polyline.points:
            raise ParseError("polyline has no points")

        commands: list[PathCommand] = [Move(polyline.points[0])]
        commands.extend(Line(p) for p in polyline.points[1:])
        if polyline.closed:
            commands.append(Close())
        return Path(commands)
