"""SVG reader for loading documents.

This module provides the SvgReader class for loading SVG files with
svgelements and extracting their shapes, in paint order, into domain models.
"""

from collections.abc import Iterator
from io import BytesIO
from pathlib import Path
from xml.etree.ElementTree import ParseError as XMLParseError

import structlog
import svgelements

from svgps.config import ReaderConfig
from svgps.domain import Document, Shape
from svgps.exceptions import DocumentLoadError, ParseError
from svgps.io.converter import element_to_shape

logger = structlog.get_logger("svgps.reader")

# Size used when the root has neither width/height nor a viewBox
DEFAULT_SIZE = 100.0

HIDDEN_VISIBILITY = frozenset({"hidden", "collapse"})

# Containers whose children are only drawn through <use>
DEFINITION_TAGS = frozenset({"defs", "symbol", "clipPath", "mask", "pattern", "marker"})


def _is_relative(value: object) -> bool:
    return value is None or str(value).strip().endswith("%")


def _tag(element: svgelements.SVGElement) -> str:
    values = getattr(element, "values", None) or {}
    return str(values.get("tag", ""))


class SvgReader:
    """Loads SVG files and extracts shapes in paint order.

    Parsing is delegated to svgelements, which resolves CSS, inherited
    styles, transforms, ``use`` references and viewBox mappings; the reader
    hands out a flat, z-ordered list of Shapes in viewbox coordinates.

    Example:
        with SvgReader(Path("drawing.svg")) as reader:
            for shape in reader.iter_shapes():
                print(shape.name)
    """

    def __init__(self, svg_path: Path, config: ReaderConfig | None = None) -> None:
        """Initialize the SVG reader.

        Args:
            svg_path: Path to the SVG file
            config: Reader configuration (defaults if None)
        """
        self._svg_path = svg_path
        self._config = config or ReaderConfig()
        self._svg: svgelements.SVG | None = None

    @classmethod
    def from_string(cls, text: str, config: ReaderConfig | None = None) -> "SvgReader":
        """Create a loaded reader from SVG markup."""
        reader = cls(Path("<string>"), config)
        reader._parse(text.encode("utf-8"))
        return reader

    def load(self) -> None:
        """Load the SVG file.

        Raises:
            DocumentLoadError: If the file does not exist or cannot be parsed
        """
        if not self._svg_path.exists():
            raise DocumentLoadError(str(self._svg_path), "file not found")

        try:
            data = self._svg_path.read_bytes()
        except OSError as e:
            raise DocumentLoadError(str(self._svg_path), str(e)) from e
        self._parse(data)

    def _parse(self, data: bytes) -> None:
        svg = self._parse_svg(data)
        width, height = svg.values.get("width"), svg.values.get("height")
        if _is_relative(width) or _is_relative(height):
            # Relative sizes resolve against the viewBox, as if it were the viewport
            view_box = svg.viewbox
            if view_box is not None and view_box.width and view_box.height:
                size = (float(view_box.width), float(view_box.height))
            else:
                size = (DEFAULT_SIZE, DEFAULT_SIZE)
            svg = self._parse_svg(data, *size)
        self._svg = svg

    def _parse_svg(
        self, data: bytes, width: float = DEFAULT_SIZE, height: float = DEFAULT_SIZE
    ) -> svgelements.SVG:
        try:
            svg = svgelements.SVG.parse(BytesIO(data), reify=True, width=width, height=height)
        except (XMLParseError, ValueError) as e:
            raise DocumentLoadError(str(self._svg_path), str(e)) from e
        if not isinstance(svg, svgelements.SVG):
            raise DocumentLoadError(str(self._svg_path), "document has no <svg> root element")
        return svg

    def _require_svg(self) -> svgelements.SVG:
        if self._svg is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        return self._svg

    @property
    def width(self) -> float:
        """Return the document width in user units.

        Falls back to the viewBox width when the root has no usable width.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        return float(self._require_svg().width)

    @property
    def height(self) -> float:
        """Return the document height in user units.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        return float(self._require_svg().height)

    def iter_shapes(self) -> Iterator[Shape]:
        """Iterate over drawable shapes in paint order.

        Non-shape elements, definitions and hidden elements are skipped. The
        z-index of a shape is its position among the drawable shapes.

        Yields:
            Shape domain models

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        counter = [0]
        yield from self._walk(self._require_svg(), counter, under_use=False)

    def _walk(
        self, container: svgelements.Group, counter: list[int], under_use: bool
    ) -> Iterator[Shape]:
        for element in container:
            tag = _tag(element)
            values = getattr(element, "values", None) or {}
            if str(values.get("display", "")).strip().lower() == "none":
                continue

            if isinstance(element, svgelements.Use):
                yield from self._walk(element, counter, under_use=True)
            elif isinstance(element, svgelements.Group):
                if tag in DEFINITION_TAGS and not under_use:
                    continue
                yield from self._walk(element, counter, under_use)
            elif isinstance(element, svgelements.Shape):
                visibility = str(values.get("visibility", "visible")).strip().lower()
                if visibility in HIDDEN_VISIBILITY:
                    continue
                try:
                    shape = element_to_shape(element, counter[0], self._config)
                except ParseError as e:
                    logger.warning(
                        "Shape skipped", element=values.get("id") or tag, reason=e.reason
                    )
                    continue
                counter[0] += 1
                yield shape
            else:
                logger.debug("Element skipped", element=values.get("id") or tag)

    def document(self) -> Document:
        """Build the complete document.

        Raises:
            DocumentLoadError: If the document has no positive size
        """
        width, height = self.width, self.height
        if width <= 0 or height <= 0:
            raise DocumentLoadError(
                str(self._svg_path), f"document size must be positive, got {width}x{height}"
            )
        return Document(width=width, height=height, shapes=list(self.iter_shapes()))

    def close(self) -> None:
        """Release the parsed document."""
        self._svg = None

    def __enter__(self) -> "SvgReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
