"""Occlusion culling ("autocut") for stroke output.

Removes the stretches of a stroked outline that are painted over by the fill
of a shape drawn later, emulating a depth test in pure 2D vector space:

1. An immutable snapshot of every occluding fill is built once per document
2. Each stroke candidate is sampled densely along its commands
3. Samples are tested against the union of fills painted above the shape
4. An edge between two samples is hidden only if both samples are covered
5. Maximal runs of visible edges become independent sub-paths, reusing the
   original commands where a run covers them whole and cutting curves by
   exact parametric subdivision elsewhere

Key classes:
- FlatShape: A shape after flattening, ready for culling
- Occluder / OccluderSnapshot: Read-only fill geometry shared by all shapes
- OcclusionEngine: Runs the culling pass over a document
"""

import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from itertools import repeat
from typing import Any

import structlog

from svgps.config import AutocutConfig
from svgps.core._bezier import cubic_point, cubic_subsegment, wang_step_count
from svgps.core.geometry import (
    BBox,
    bbox_contains,
    bbox_overlaps,
    path_to_rings,
    point_in_fill,
    rings_bbox,
    signed_area,
)
from svgps.domain import Close, Cubic, FillRule, Line, Move, Path, PathCommand, Point
from svgps.exceptions import DegenerateFillError

logger = structlog.get_logger("svgps.occlusion")


@dataclass
class FlatShape:
    """A shape whose outline and fill are already canonical.

    Attributes:
        z_index: Position in paint order
        path: Flattened outline
        stroke: Whether the shape takes part in stroke output
        fill: Flattened fill outline (None if unfilled)
        fill_rule: Rule for testing points against the fill
        name: Label for logs
    """

    z_index: int
    path: Path
    stroke: bool = True
    fill: Path | None = None
    fill_rule: FillRule = FillRule.NONZERO
    name: str = ""


@dataclass(frozen=True)
class Occluder:
    """Closed fill geometry of one shape."""

    z_index: int
    rings: tuple[tuple[Point, ...], ...]
    bbox: BBox
    fill_rule: FillRule

    @classmethod
    def build(
        cls, z_index: int, fill: Path, fill_rule: FillRule, tolerance: float
    ) -> "Occluder":
        """Flatten a fill path into occluder rings.

        Args:
            z_index: Paint order of the filled shape
            fill: Canonical fill outline
            fill_rule: Rule used for membership tests
            tolerance: Flattening tolerance for curves

        Returns:
            Occluder instance

        Raises:
            DegenerateFillError: If the fill encloses no area
        """
        rings = [r for r in path_to_rings(fill, tolerance) if len(r) >= 3]
        if not rings:
            raise DegenerateFillError(z_index, "fewer than three points")

        area = sum(abs(signed_area(r)) for r in rings)
        if area <= 1e-12:
            raise DegenerateFillError(z_index, "zero area")

        return cls(
            z_index=z_index,
            rings=tuple(tuple(r) for r in rings),
            bbox=rings_bbox(rings),
            fill_rule=fill_rule,
        )

    def covers(self, point: Point, rule: FillRule | None = None) -> bool:
        """Check whether the fill paints over a point."""
        if not bbox_contains(self.bbox, point):
            return False
        return point_in_fill(point, self.rings, rule or self.fill_rule)  # type: ignore[arg-type]


@dataclass(frozen=True)
class OccluderSnapshot:
    """Immutable view of every occluder in a document, in paint order."""

    occluders: tuple[Occluder, ...] = ()

    def above(self, z_index: int) -> tuple[Occluder, ...]:
        """Occluders painted strictly above the given z-index."""
        return tuple(o for o in self.occluders if o.z_index > z_index)

    def __len__(self) -> int:
        return len(self.occluders)


@dataclass(frozen=True)
class _Piece:
    """One drawing command of a sub-path with its start point."""

    start: Point
    command: PathCommand
    end: Point

    def point_at(self, t: float) -> Point:
        if t <= 0.0:
            return self.start
        if t >= 1.0:
            return self.end
        if isinstance(self.command, Cubic):
            return cubic_point(self._cubic_points(), t)
        return self.start.lerp(self.end, t)

    def length_hint(self) -> float:
        """Chord length for lines, control polygon length for cubics."""
        if isinstance(self.command, Cubic):
            c = self._cubic_points()
            return c[0].distance_to(c[1]) + c[1].distance_to(c[2]) + c[2].distance_to(c[3])
        return self.start.distance_to(self.end)

    def full_command(self) -> PathCommand:
        """Original command; a closing edge becomes an explicit Line."""
        if isinstance(self.command, Close):
            return Line(self.end)
        return self.command

    def sub_command(self, t0: float, t1: float) -> PathCommand:
        """Command drawing the piece from point_at(t0) to point_at(t1)."""
        if isinstance(self.command, Cubic):
            _, c1, c2, end = cubic_subsegment(self._cubic_points(), t0, t1)
            return Cubic(c1, c2, end)
        return Line(self.point_at(t1))

    def _cubic_points(self) -> tuple[Point, Point, Point, Point]:
        cmd = self.command
        assert isinstance(cmd, Cubic)
        return (self.start, cmd.control1, cmd.control2, cmd.end)


@dataclass
class _Edge:
    """Polyline edge between two consecutive samples of one piece."""

    piece: int
    t0: float
    t1: float
    covered0: bool
    covered1: bool

    @property
    def hidden(self) -> bool:
        return self.covered0 and self.covered1


class _SubpathCutter:
    """Splits one sub-path into visible runs."""

    def __init__(
        self,
        subpath: Path,
        occluders: tuple[Occluder, ...],
        config: AutocutConfig,
    ) -> None:
        self.subpath = subpath
        self.occluders = occluders
        self.config = config
        self.closed = subpath.is_closed()
        self.move = subpath.commands[0].points()[0]
        self.pieces = self._build_pieces()

    def _build_pieces(self) -> list[_Piece]:
        pieces: list[_Piece] = []
        current = self.move
        for cmd in self.subpath.commands[1:]:
            if isinstance(cmd, Line):
                pieces.append(_Piece(current, cmd, cmd.point))
                current = cmd.point
            elif isinstance(cmd, Cubic):
                pieces.append(_Piece(current, cmd, cmd.end))
                current = cmd.end
            elif isinstance(cmd, Close):
                if current != self.move:
                    pieces.append(_Piece(current, cmd, self.move))
                current = self.move
        return pieces

    def covered(self, point: Point) -> bool:
        rule = self.config.fill_rule
        return any(o.covers(point, rule) for o in self.occluders)

    def _sample_params(self, piece: _Piece) -> list[float]:
        spacing = self.config.line_sample_spacing
        if isinstance(piece.command, Cubic):
            n = wang_step_count(piece._cubic_points(), self.config.sample_tolerance)
        else:
            n = 1
        if spacing is not None:
            n = max(n, math.ceil(piece.length_hint() / spacing))
        n = min(max(n, 1), self.config.max_samples_per_segment)
        return [i / n for i in range(n + 1)]

    def _edges(self) -> list[_Edge]:
        edges: list[_Edge] = []
        prev_covered: bool | None = None
        for index, piece in enumerate(self.pieces):
            ts = self._sample_params(piece)
            flags = [prev_covered if prev_covered is not None else self.covered(piece.start)]
            flags.extend(self.covered(piece.point_at(t)) for t in ts[1:])
            for i in range(len(ts) - 1):
                edges.append(_Edge(index, ts[i], ts[i + 1], flags[i], flags[i + 1]))
            prev_covered = flags[-1]
        return edges

    def _refine(self, piece: _Piece, visible_t: float, covered_t: float) -> float:
        """Bisect towards the coverage transition, returning the visible side."""
        for _ in range(self.config.cut_refinement_steps):
            mid = (visible_t + covered_t) / 2.0
            if self.covered(piece.point_at(mid)):
                covered_t = mid
            else:
                visible_t = mid
        return visible_t

    def cut(self) -> list[Path]:
        if not self.pieces:
            return [] if self.covered(self.move) else [self.subpath]

        edges = self._edges()
        if not any(e.hidden for e in edges):
            return [self.subpath]
        if all(e.hidden for e in edges):
            return []

        runs: list[list[_Edge]] = []
        current: list[_Edge] = []
        for edge in edges:
            if edge.hidden:
                if current:
                    runs.append(current)
                    current = []
            else:
                current.append(edge)
        if current:
            runs.append(current)

        # A closed loop continues through its starting point
        if (
            self.closed
            and len(runs) > 1
            and runs[0][0] is edges[0]
            and runs[-1][-1] is edges[-1]
        ):
            runs[0] = runs.pop() + runs[0]

        return [self._emit(run) for run in runs]

    def _emit(self, run: list[_Edge]) -> Path:
        first, last = run[0], run[-1]
        if self.config.cut_refinement_steps:
            if first.covered0 and not first.covered1:
                first.t0 = self._refine(self.pieces[first.piece], first.t1, first.t0)
            if last.covered1 and not last.covered0:
                last.t1 = self._refine(self.pieces[last.piece], last.t0, last.t1)

        # Group consecutive edges of the same piece into parameter spans
        spans: list[list[float]] = []
        span_pieces: list[int] = []
        for edge in run:
            if span_pieces and span_pieces[-1] == edge.piece and spans[-1][1] == edge.t0:
                spans[-1][1] = edge.t1
            else:
                span_pieces.append(edge.piece)
                spans.append([edge.t0, edge.t1])

        start_piece = self.pieces[span_pieces[0]]
        commands: list[PathCommand] = [Move(start_piece.point_at(spans[0][0]))]
        for index, (t0, t1) in zip(span_pieces, spans):
            piece = self.pieces[index]
            if t0 <= 0.0 and t1 >= 1.0:
                commands.append(piece.full_command())
            else:
                commands.append(piece.sub_command(t0, t1))
        return Path(commands)


def cut_shape(shape: FlatShape, snapshot: OccluderSnapshot, config: AutocutConfig) -> list[Path]:
    """Split one stroke candidate into its visible sub-paths.

    Args:
        shape: Flattened stroke candidate
        snapshot: Occluders of the whole document
        config: Culling configuration

    Returns:
        Visible sub-paths in drawing order. The unmodified path when nothing
        is painted above the shape, an empty list when it is fully hidden.
    """
    if shape.path.is_empty():
        return []

    bbox = shape.path.bounding_box()
    occluders = tuple(o for o in snapshot.above(shape.z_index) if bbox_overlaps(o.bbox, bbox))
    if not occluders:
        return [shape.path]

    result: list[Path] = []
    for subpath in shape.path.subpaths():
        result.extend(_SubpathCutter(subpath, occluders, config).cut())
    return result


def _cut_shape_task(
    shape: FlatShape, snapshot: OccluderSnapshot, config_dict: dict[str, Any]
) -> list[Path]:
    """Top-level picklable wrapper for worker processes."""
    return cut_shape(shape, snapshot, AutocutConfig(**config_dict))


class OcclusionEngine:
    """Runs occlusion culling over a flattened document.

    Example:
        engine = OcclusionEngine(AutocutConfig(enabled=True))
        visible = engine.cut(flat_shapes)
        for shape_paths in visible:
            ...
    """

    def __init__(self, config: AutocutConfig | None = None) -> None:
        """Initialize the engine.

        Args:
            config: Culling configuration (defaults if None)
        """
        self.config = config or AutocutConfig()

    @staticmethod
    def candidates(shapes: list[FlatShape]) -> list[FlatShape]:
        """Shapes that take part in stroke output, in paint order."""
        return [s for s in shapes if s.stroke]

    def build_snapshot(self, shapes: list[FlatShape]) -> OccluderSnapshot:
        """Collect the fill geometry of every filled shape.

        Degenerate fills are skipped: they contribute no coverage.

        Args:
            shapes: All shapes of the document

        Returns:
            Immutable occluder snapshot in ascending z-order
        """
        occluders: list[Occluder] = []
        for shape in shapes:
            if shape.fill is None or shape.fill.is_empty():
                continue
            try:
                occluders.append(
                    Occluder.build(
                        shape.z_index,
                        shape.fill,
                        shape.fill_rule,
                        self.config.occluder_tolerance,
                    )
                )
            except DegenerateFillError as e:
                logger.debug("Occluder skipped", shape=shape.name, reason=e.reason)

        occluders.sort(key=lambda o: o.z_index)
        return OccluderSnapshot(tuple(occluders))

    def cut(self, shapes: list[FlatShape], snapshot: OccluderSnapshot | None = None) -> list[list[Path]]:
        """Cull every stroke candidate.

        Args:
            shapes: All shapes of the document, in paint order
            snapshot: Prebuilt occluders (built from shapes if None)

        Returns:
            One list of visible sub-paths per stroke candidate, in document order
        """
        if snapshot is None:
            snapshot = self.build_snapshot(shapes)

        candidates = self.candidates(shapes)

        logger.debug(
            "Culling shapes",
            candidates=len(candidates),
            occluders=len(snapshot),
            workers=self.config.workers,
        )

        if self.config.workers > 1 and len(candidates) > 1:
            config_dict = self.config.model_dump()
            with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
                # map() yields results in submission order
                return list(
                    executor.map(
                        _cut_shape_task,
                        candidates,
                        repeat(snapshot),
                        repeat(config_dict),
                    )
                )

        return [cut_shape(shape, snapshot, self.config) for shape in candidates]
