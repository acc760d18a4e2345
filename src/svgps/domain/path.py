"""Canonical path types.

This module defines the closed command vocabulary every outline is reduced to:
- Point: A 2D point in viewbox space
- Move, Line, Cubic, Close: The four canonical path commands
- Path: An ordered sequence of canonical commands
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True, slots=True)
class Point:
    """A point in viewbox space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in viewbox units
        y: Y coordinate in viewbox units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: "Point", t: float) -> "Point":
        """Linear interpolation towards another point.

        Args:
            other: Target point (reached at t=1)
            t: Interpolation parameter

        Returns:
            Interpolated point
        """
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)


@dataclass(frozen=True, slots=True)
class Move:
    """Start a new sub-path at a point."""

    tag: ClassVar[str] = "M"

    point: Point

    def points(self) -> tuple[Point, ...]:
        return (self.point,)


@dataclass(frozen=True, slots=True)
class Line:
    """Straight segment from the current point."""

    tag: ClassVar[str] = "L"

    point: Point

    def points(self) -> tuple[Point, ...]:
        return (self.point,)


@dataclass(frozen=True, slots=True)
class Cubic:
    """Cubic Bezier segment from the current point.

    Attributes:
        control1: First control point
        control2: Second control point
        end: End point
    """

    tag: ClassVar[str] = "C"

    control1: Point
    control2: Point
    end: Point

    def points(self) -> tuple[Point, ...]:
        return (self.control1, self.control2, self.end)


@dataclass(frozen=True, slots=True)
class Close:
    """Straight segment back to the most recent Move point."""

    tag: ClassVar[str] = "Z"

    def points(self) -> tuple[Point, ...]:
        return ()


PathCommand = Union[Move, Line, Cubic, Close]

# Points consumed by each command tag
POINTS_PER_TAG: dict[str, int] = {"M": 1, "L": 1, "C": 3, "Z": 0}


@dataclass
class Path:
    """An ordered sequence of canonical commands.

    The first command of a non-empty path is always a Move; every Line and
    Cubic starts where the previous command ended.

    Attributes:
        commands: Canonical commands in drawing order
    """

    commands: list[PathCommand] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.commands and not isinstance(self.commands[0], Move):
            raise ValueError(
                f"Path must start with a Move, got {type(self.commands[0]).__name__}"
            )

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self.commands)

    def is_empty(self) -> bool:
        """Check if the path has no commands."""
        return len(self.commands) == 0

    def is_closed(self) -> bool:
        """Check if the path ends with a Close command."""
        return bool(self.commands) and isinstance(self.commands[-1], Close)

    @property
    def tags(self) -> str:
        """One-character command tags in order (e.g. 'MLLLZ')."""
        return "".join(cmd.tag for cmd in self.commands)

    @property
    def point_count(self) -> int:
        return sum(len(cmd.points()) for cmd in self.commands)

    @property
    def coordinate_count(self) -> int:
        return 2 * self.point_count

    def coordinates(self) -> list[float]:
        """Flat (x, y) interleaved coordinates in emission order."""
        coords: list[float] = []
        for cmd in self.commands:
            for p in cmd.points():
                coords.append(p.x)
                coords.append(p.y)
        return coords

    def subpaths(self) -> list["Path"]:
        """Split the path at every Move.

        Returns:
            List of paths, each starting with exactly one Move
        """
        result: list[Path] = []
        current: list[PathCommand] = []
        for cmd in self.commands:
            if isinstance(cmd, Move) and current:
                result.append(Path(current))
                current = []
            current.append(cmd)
        if current:
            result.append(Path(current))
        return result

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Bounding box of all command points, control points included.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        xs: list[float] = []
        ys: list[float] = []
        for cmd in self.commands:
            for p in cmd.points():
                xs.append(p.x)
                ys.append(p.y)
        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))
