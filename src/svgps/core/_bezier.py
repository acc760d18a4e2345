"""Internal Bezier curve algorithms.

This is an internal module containing helper functions for the flattener,
the occlusion engine and the polisher. Not intended for public use.
"""

import math

from svgps.domain import Point

CubicPoints = tuple[Point, Point, Point, Point]


def elevate_quadratic(p0: Point, control: Point, p2: Point) -> tuple[Point, Point]:
    """Raise a quadratic Bezier curve to an identical cubic.

    Args:
        p0: Start point
        control: Quadratic control point
        p2: End point

    Returns:
        The two cubic control points
    """
    c1 = Point(p0.x + 2.0 / 3.0 * (control.x - p0.x), p0.y + 2.0 / 3.0 * (control.y - p0.y))
    c2 = Point(p2.x + 2.0 / 3.0 * (control.x - p2.x), p2.y + 2.0 / 3.0 * (control.y - p2.y))
    return c1, c2


def cubic_point(points: CubicPoints, t: float) -> Point:
    """Evaluate a cubic Bezier curve at parameter t."""
    p0, p1, p2, p3 = points
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def split_cubic(points: CubicPoints, t: float) -> tuple[CubicPoints, CubicPoints]:
    """Split a cubic Bezier curve at t using De Casteljau's algorithm.

    Args:
        points: Control points [p0, p1, p2, p3]
        t: Split parameter in [0, 1]

    Returns:
        Control points of the left and right halves
    """
    p0, p1, p2, p3 = points

    # First level
    q0 = p0.lerp(p1, t)
    q1 = p1.lerp(p2, t)
    q2 = p2.lerp(p3, t)

    # Second level
    r0 = q0.lerp(q1, t)
    r1 = q1.lerp(q2, t)

    # Point on curve
    mid = r0.lerp(r1, t)

    return (p0, q0, r0, mid), (mid, r1, q2, p3)


def cubic_subsegment(points: CubicPoints, t0: float, t1: float) -> CubicPoints:
    """Extract the part of a cubic between parameters t0 and t1.

    The end points of the result are evaluated on the curve directly so they
    match samples taken with cubic_point.
    """
    if t0 <= 0.0 and t1 >= 1.0:
        return points

    segment = points
    if t0 > 0.0:
        _, segment = split_cubic(segment, t0)
    if t1 < 1.0:
        local = (t1 - t0) / (1.0 - t0) if t0 < 1.0 else 1.0
        segment, _ = split_cubic(segment, local)

    start = points[0] if t0 <= 0.0 else cubic_point(points, t0)
    end = points[3] if t1 >= 1.0 else cubic_point(points, t1)
    return (start, segment[1], segment[2], end)


def wang_step_count(points: CubicPoints, tolerance: float) -> int:
    """Uniform parametric steps keeping chords within tolerance of the curve.

    Wang's formula bounds the chord deviation of uniformly sampled cubics by
    the largest second difference of the control polygon.
    """
    p0, p1, p2, p3 = points
    dd1 = math.hypot(p0.x - 2.0 * p1.x + p2.x, p0.y - 2.0 * p1.y + p2.y)
    dd2 = math.hypot(p1.x - 2.0 * p2.x + p3.x, p1.y - 2.0 * p2.y + p3.y)
    m = max(dd1, dd2)
    if m == 0.0:
        return 1
    return max(1, math.ceil(math.sqrt(0.75 * m / tolerance)))


def flatten_cubic(points: CubicPoints, tolerance: float) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses the distance of both control points from the chord as flatness test
    and De Casteljau's algorithm for subdivision.

    Args:
        points: Control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve, both ends included
    """
    p0, p1, p2, p3 = points

    dx = p3.x - p0.x
    dy = p3.y - p0.y
    chord = math.hypot(dx, dy)

    if chord < 1e-12:
        # Closed loop: measure control points from the end point instead
        d1 = p0.distance_to(p1)
        d2 = p0.distance_to(p2)
    else:
        d1 = abs((p1.x - p0.x) * dy - (p1.y - p0.y) * dx) / chord
        d2 = abs((p2.x - p0.x) * dy - (p2.y - p0.y) * dx) / chord

    if max(d1, d2) <= tolerance:
        # Flat enough, return endpoints
        return [p0, p3]

    left_points, right_points = split_cubic(points, 0.5)

    left = flatten_cubic(left_points, tolerance)
    right = flatten_cubic(right_points, tolerance)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def cubic_length(points: CubicPoints, tolerance: float) -> float:
    """Chord-based arc length: the length of the flattened polyline."""
    polyline = flatten_cubic(points, tolerance)
    return sum(polyline[i].distance_to(polyline[i + 1]) for i in range(len(polyline) - 1))


def unit_arc_cubic(theta: float, delta: float) -> tuple[tuple[float, float], ...]:
    """Cubic approximation of a unit circle arc.

    Args:
        theta: Start angle in radians
        delta: Signed sweep in radians (at most a quarter turn)

    Returns:
        Four (x, y) tuples on/around the unit circle
    """
    k = 4.0 / 3.0 * math.tan(delta / 4.0)
    cos0, sin0 = math.cos(theta), math.sin(theta)
    cos1, sin1 = math.cos(theta + delta), math.sin(theta + delta)
    return (
        (cos0, sin0),
        (cos0 - k * sin0, sin0 + k * cos0),
        (cos1 + k * sin1, sin1 - k * cos1),
        (cos1, sin1),
    )


def unit_arc_error(delta: float, samples: int = 16) -> float:
    """Largest radial deviation of unit_arc_cubic from the unit circle."""
    pts = tuple(Point(x, y) for x, y in unit_arc_cubic(0.0, delta))
    worst = 0.0
    for i in range(1, samples):
        p = cubic_point(pts, i / samples)  # type: ignore[arg-type]
        worst = max(worst, abs(math.hypot(p.x, p.y) - 1.0))
    return worst
