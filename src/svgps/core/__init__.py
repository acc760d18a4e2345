"""Core processing algorithms for svgps.

This module contains the core algorithms for:

- Curve flattening (quadratic elevation, arc approximation, primitives)
- Geometry operations (winding numbers, fill membership, path length)
- Occlusion culling of strokes hidden by fills painted above them
- Polishing away insignificant sub-paths

Occlusion work is designed to be:
- Stateless per shape (safe for use in worker processes)
- Driven by an immutable occluder snapshot

Key classes:
- CurveFlattener: Converts outlines to Move/Line/Cubic/Close
- OcclusionEngine: Splits strokes into visible sub-paths
- Polisher: Drops short sub-paths
- DocumentProcessor: Runs the whole generate pipeline
"""

from svgps.core.flattener import CurveFlattener, arc_to_cubics, elliptical_arc_cubics
from svgps.core.geometry import path_length, point_in_fill, winding_number
from svgps.core.occlusion import (
    FlatShape,
    Occluder,
    OccluderSnapshot,
    OcclusionEngine,
    cut_shape,
)
from svgps.core.polisher import Polisher
from svgps.core.processor import DocumentProcessor

__all__ = [
    "CurveFlattener",
    "DocumentProcessor",
    "FlatShape",
    "Occluder",
    "OccluderSnapshot",
    "OcclusionEngine",
    "Polisher",
    "arc_to_cubics",
    "cut_shape",
    "elliptical_arc_cubics",
    "path_length",
    "point_in_fill",
    "winding_number",
]
