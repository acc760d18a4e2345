"""SVG writer for rendering canonical streams.

This module turns a canonical stream back into SVG markup so the output of
``generate`` can be inspected in any SVG viewer.
"""

from pathlib import Path

from lxml import etree

from svgps.config import RenderConfig
from svgps.domain import CanonicalStream, Close, Path as CanonicalPath
from svgps.exceptions import DocumentSaveError
from svgps.io.codec import format_coordinate

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def path_data(path: CanonicalPath) -> str:
    """Build the ``d`` attribute for one path.

    Args:
        path: Canonical path

    Returns:
        Path data using absolute M, L, C and Z commands
    """
    parts: list[str] = []
    for command in path:
        if isinstance(command, Close):
            parts.append("Z")
            continue
        coords = ",".join(
            f"{format_coordinate(p.x)} {format_coordinate(p.y)}" for p in command.points()
        )
        parts.append(f"{command.tag} {coords}")
    return " ".join(parts)


def build_svg(stream: CanonicalStream, config: RenderConfig | None = None) -> etree._Element:
    """Build the SVG element tree for a canonical stream.

    Each sub-path becomes its own ``<path>`` element drawn with the
    configured stroke and no fill.

    Args:
        stream: Stream to render
        config: Stroke options (defaults if None)

    Returns:
        Root ``<svg>`` element
    """
    config = config or RenderConfig()
    root = etree.Element(f"{{{SVG_NAMESPACE}}}svg", nsmap={None: SVG_NAMESPACE})
    root.set("version", "1.1")
    root.set("viewBox", f"0 0 {stream.width} {stream.height}")

    stroke_width = format_coordinate(config.stroke_width)
    for subpath in stream.subpaths():
        etree.SubElement(
            root,
            f"{{{SVG_NAMESPACE}}}path",
            {
                "stroke": config.stroke,
                "stroke-width": stroke_width,
                "fill": "none",
                "d": path_data(subpath),
            },
        )
    return root


def render_svg(stream: CanonicalStream, config: RenderConfig | None = None) -> str:
    """Render a canonical stream as SVG markup.

    Args:
        stream: Stream to render
        config: Stroke options (defaults if None)

    Returns:
        Complete SVG document with an XML declaration
    """
    markup = etree.tostring(
        build_svg(stream, config), encoding="utf-8", xml_declaration=True, pretty_print=True
    )
    return markup.decode("utf-8")


class SvgWriter:
    """Writes canonical streams as SVG files.

    Example:
        writer = SvgWriter(RenderConfig(stroke="red", stroke_width=3.0))
        writer.save(stream, Path("preview.svg"))
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        """Initialize the SVG writer.

        Args:
            config: Stroke options (defaults if None)
        """
        self.config = config or RenderConfig()

    def save(self, stream: CanonicalStream, output_path: Path) -> None:
        """Render a stream and write it to disk.

        Args:
            stream: Stream to render
            output_path: Destination SVG file

        Raises:
            DocumentSaveError: If the file cannot be written
        """
        markup = render_svg(stream, self.config)
        try:
            output_path.write_text(markup, encoding="utf-8")
        except OSError as e:
            raise DocumentSaveError(str(output_path), str(e)) from e
