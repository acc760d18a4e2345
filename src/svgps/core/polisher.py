"""Removal of insignificant sub-paths left over after cutting."""

import structlog

from svgps.config import PolishConfig
from svgps.core.geometry import path_length
from svgps.domain import Path

logger = structlog.get_logger("svgps.polisher")


class Polisher:
    """Drops sub-paths whose arc length is below a threshold.

    This is a pure filter: surviving sub-paths are returned untouched.

    Example:
        polisher = Polisher(PolishConfig(min_length=0.5))
        kept = polisher.polish(paths, width=720, height=480)
    """

    def __init__(self, config: PolishConfig | None = None, tolerance: float = 0.01) -> None:
        """Initialize the polisher.

        Args:
            config: Polishing configuration (defaults if None)
            tolerance: Flattening tolerance for measuring cubic lengths
        """
        self.config = config or PolishConfig()
        self.tolerance = tolerance

    def polish(self, paths: list[Path], width: float, height: float) -> list[Path]:
        """Filter sub-paths by length.

        Args:
            paths: Paths to filter (split into sub-paths first)
            width: Viewbox width, for the relative threshold
            height: Viewbox height, for the relative threshold

        Returns:
            Surviving sub-paths in their original order
        """
        return self.filter(paths, self.threshold(width, height))

    def threshold(self, width: float, height: float) -> float:
        """Minimum sub-path length for a viewbox of the given size."""
        return self.config.get_min_length(width, height)

    def filter(self, paths: list[Path], min_length: float) -> list[Path]:
        """Keep sub-paths at least ``min_length`` long."""
        kept: list[Path] = []
        dropped = 0
        for path in paths:
            for subpath in path.subpaths():
                if path_length(subpath, self.tolerance) < min_length:
                    dropped += 1
                else:
                    kept.append(subpath)

        if dropped:
            logger.debug("Short sub-paths dropped", dropped=dropped, min_length=min_length)
        return kept
