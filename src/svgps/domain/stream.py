"""Persisted form of a converted document."""

import math
from dataclasses import dataclass, field

from svgps.domain.path import Path, PathCommand


@dataclass
class CanonicalStream:
    """Viewbox size plus the flat canonical command sequence.

    Attributes:
        width: Viewbox width (rounded up to an integer)
        height: Viewbox height (rounded up to an integer)
        commands: Canonical commands in emission order
    """

    width: int
    height: int
    commands: list[PathCommand] = field(default_factory=list)

    @classmethod
    def from_paths(cls, width: float, height: float, paths: list[Path]) -> "CanonicalStream":
        """Concatenate paths into a stream for a viewbox.

        Args:
            width: Viewbox width (ceiled to an integer)
            height: Viewbox height (ceiled to an integer)
            paths: Paths in emission order

        Returns:
            CanonicalStream instance
        """
        commands: list[PathCommand] = []
        for path in paths:
            commands.extend(path.commands)
        return cls(width=math.ceil(width), height=math.ceil(height), commands=commands)

    @property
    def command_count(self) -> int:
        return len(self.commands)

    @property
    def coordinate_count(self) -> int:
        return sum(2 * len(cmd.points()) for cmd in self.commands)

    @property
    def tags(self) -> str:
        return "".join(cmd.tag for cmd in self.commands)

    def coordinates(self) -> list[float]:
        """Flat (x, y) interleaved coordinates in emission order."""
        return Path(self.commands).coordinates() if self.commands else []

    def subpaths(self) -> list[Path]:
        """Maximal runs between Moves, in emission order."""
        if not self.commands:
            return []
        return Path(self.commands).subpaths()
