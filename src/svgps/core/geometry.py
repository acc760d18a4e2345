"""Geometric operations on canonical paths.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-fill testing (winding number, nonzero and even-odd rules)
- Flattening canonical paths into closed polygon rings
- Arc length of canonical paths

All functions are pure, stateless, and designed for use in parallel processing.
"""

from svgps.core._bezier import cubic_length, flatten_cubic
from svgps.domain import Close, Cubic, FillRule, Line, Move, Path, Point

BBox = tuple[float, float, float, float]


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction in a y-up frame:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> p1 = Point(0.0, 0.0)
        >>> p2 = Point(1.0, 0.0)
        >>> p3 = Point(1.0, 1.0)
        >>> p4 = Point(0.0, 1.0)
        >>> signed_area([p1, p2, p3, p4])
        1.0
        >>> signed_area([p1, p4, p3, p2])
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def winding_number(x: float, y: float, rings: list[list[Point]]) -> tuple[int, int]:
    """Count signed and unsigned ray crossings around a point.

    Casts a horizontal ray from (x, y) towards +x. Each ring is treated as
    closed. A crossing is counted when exactly one edge endpoint lies strictly
    below y, which avoids double-counting shared vertices and skips
    horizontal edges.

    Args:
        x: X coordinate of the test point
        y: Y coordinate of the test point
        rings: Closed polygon rings

    Returns:
        Tuple of (winding, crossings)
    """
    winding = 0
    crossings = 0

    for ring in rings:
        n = len(ring)
        if n < 2:
            continue
        j = n - 1
        for i in range(n):
            x0, y0 = ring[j].x, ring[j].y
            x1, y1 = ring[i].x, ring[i].y
            j = i

            if (y0 < y) == (y1 < y):
                continue

            t = (y - y0) / (y1 - y0)
            if x0 + t * (x1 - x0) > x:
                crossings += 1
                winding += 1 if y1 > y0 else -1

    return winding, crossings


def point_in_fill(point: Point, rings: list[list[Point]], rule: FillRule = FillRule.NONZERO) -> bool:
    """Determine if a point lies inside a filled set of rings.

    Args:
        point: The point to test
        rings: Closed polygon rings making up the fill
        rule: Nonzero winding or even-odd

    Returns:
        True if the point is inside the fill, False otherwise

    Examples:
        >>> square = [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
        >>> point_in_fill(Point(1.0, 1.0), [square])
        True
        >>> point_in_fill(Point(3.0, 3.0), [square])
        False
    """
    winding, crossings = winding_number(point.x, point.y, rings)
    if rule == FillRule.EVENODD:
        return crossings % 2 == 1
    return winding != 0


def path_to_rings(path: Path, tolerance: float) -> list[list[Point]]:
    """Flatten a canonical path into closed polygon rings.

    Every sub-path becomes one ring whether or not it ends with Close, since
    filling implicitly closes open sub-paths.

    Args:
        path: Canonical path
        tolerance: Maximum deviation when flattening cubics

    Returns:
        One list of points per sub-path (closing point not repeated)
    """
    rings: list[list[Point]] = []
    ring: list[Point] = []
    current: Point | None = None

    for cmd in path.commands:
        if isinstance(cmd, Move):
            if len(ring) > 1:
                rings.append(ring)
            ring = [cmd.point]
            current = cmd.point
        elif isinstance(cmd, Line):
            ring.append(cmd.point)
            current = cmd.point
        elif isinstance(cmd, Cubic) and current is not None:
            ring.extend(flatten_cubic((current, cmd.control1, cmd.control2, cmd.end), tolerance)[1:])
            current = cmd.end
        elif isinstance(cmd, Close) and ring:
            current = ring[0]

    if len(ring) > 1:
        rings.append(ring)

    for r in rings:
        if len(r) > 1 and r[0] == r[-1]:
            r.pop()

    return rings


def rings_bbox(rings: list[list[Point]]) -> BBox:
    """Bounding box of a set of rings as (min_x, min_y, max_x, max_y)."""
    xs = [p.x for ring in rings for p in ring]
    ys = [p.y for ring in rings for p in ring]
    if not xs:
        return (0.0, 0.0, 0.0, 0.0)
    return (min(xs), min(ys), max(xs), max(ys))


def bbox_overlaps(a: BBox, b: BBox) -> bool:
    """Check whether two bounding boxes intersect (touching counts)."""
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def bbox_contains(box: BBox, point: Point) -> bool:
    return box[0] <= point.x <= box[2] and box[1] <= point.y <= box[3]


def path_length(path: Path, tolerance: float) -> float:
    """Arc length of a canonical path.

    Straight segments (including implicit Close segments) contribute their
    exact length; cubics contribute the length of their flattened polyline.

    Args:
        path: Canonical path
        tolerance: Flattening tolerance for cubics

    Returns:
        Total length in viewbox units
    """
    total = 0.0
    start: Point | None = None
    current: Point | None = None

    for cmd in path.commands:
        if isinstance(cmd, Move):
            start = current = cmd.point
        elif current is None:
            continue
        elif isinstance(cmd, Line):
            total += current.distance_to(cmd.point)
            current = cmd.point
        elif isinstance(cmd, Cubic):
            total += cubic_length((current, cmd.control1, cmd.control2, cmd.end), tolerance)
            current = cmd.end
        elif isinstance(cmd, Close) and start is not None:
            total += current.distance_to(start)
            current = start

    return total
