"""Unit tests for the SVG reader and writer."""

from pathlib import Path as FilePath

import pytest
from lxml import etree

from svgps.config import ReaderConfig, RenderConfig, StrokeSelection
from svgps.core.flattener import CurveFlattener
from svgps.domain import (
    ArcTo,
    CanonicalStream,
    Close,
    ClosePath,
    Cubic,
    FillRule,
    Line,
    LineTo,
    Move,
    MoveTo,
    Path,
    PathOutline,
    Point,
)
from svgps.exceptions import DocumentLoadError, DocumentSaveError
from svgps.io import SvgReader, SvgWriter, render_svg
from svgps.io.writer import build_svg, path_data


def _svg(body: str, attributes: str = 'width="720" height="480"') -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'xmlns:xlink="http://www.w3.org/1999/xlink" {attributes}>{body}</svg>'
    )


def _shapes(body: str, config: ReaderConfig | None = None, attributes: str | None = None) -> list:
    markup = _svg(body) if attributes is None else _svg(body, attributes)
    return list(SvgReader.from_string(markup, config).iter_shapes())


def _paths(body: str, attributes: str | None = None) -> list[Path]:
    flattener = CurveFlattener()
    return [flattener.flatten(s.outline) for s in _shapes(body, attributes=attributes)]


class TestReaderDocument:
    """Tests for document level reading."""

    def test_size_from_attributes(self) -> None:
        """Test width and height attributes set the document size."""
        reader = SvgReader.from_string(_svg(""))
        assert (reader.width, reader.height) == (720, 480)

    def test_size_from_view_box(self) -> None:
        """Test the viewBox size is used without width and height."""
        reader = SvgReader.from_string(_svg("", 'viewBox="0 0 300 200"'))
        assert (reader.width, reader.height) == (300, 200)

    def test_percentage_size_falls_back(self) -> None:
        """Test percentage sizes fall back to the viewBox."""
        reader = SvgReader.from_string(_svg("", 'width="100%" height="100%" viewBox="0 0 30 20"'))
        assert (reader.width, reader.height) == (30, 20)

    def test_default_size(self) -> None:
        """Test documents without any size information."""
        reader = SvgReader.from_string(_svg("", ""))
        assert (reader.width, reader.height) == (100, 100)

    def test_units(self) -> None:
        """Test absolute units convert to user units."""
        reader = SvgReader.from_string(_svg("", 'width="1in" height="72pt"'))
        assert reader.width == pytest.approx(96)
        assert reader.height == pytest.approx(96)

    def test_view_box_scales_shapes(self) -> None:
        """Test viewBox coordinates are mapped onto the viewport."""
        paths = _paths(
            '<rect width="10" height="10"/>', attributes='width="100" height="100" viewBox="0 0 50 50"'
        )
        assert paths[0].coordinates() == pytest.approx([0, 0, 20, 0, 20, 20, 0, 20])

    def test_document(self) -> None:
        """Test the document holds every drawable shape."""
        document = SvgReader.from_string(
            _svg('<rect width="10" height="10"/><circle r="4"/>')
        ).document()
        assert (document.width, document.height) == (720, 480)
        assert [s.z_index for s in document.shapes] == [0, 1]

    def test_zero_size_document(self) -> None:
        """Test empty documents are rejected."""
        with pytest.raises(DocumentLoadError):
            SvgReader.from_string(_svg("", 'width="0" height="10"')).document()

    def test_malformed_xml(self) -> None:
        """Test unparsable markup is a load error."""
        with pytest.raises(DocumentLoadError):
            SvgReader.from_string("<svg><rect></svg>")

    def test_not_loaded(self) -> None:
        """Test reading before loading fails."""
        with pytest.raises(RuntimeError):
            list(SvgReader(FilePath("never.svg")).iter_shapes())

    def test_load_from_file(self, tmp_path: FilePath) -> None:
        """Test the context manager loads from disk."""
        source = tmp_path / "drawing.svg"
        source.write_text(_svg('<rect width="10" height="10"/>'), encoding="utf-8")
        with SvgReader(source) as reader:
            assert len(list(reader.iter_shapes())) == 1

    def test_missing_file(self, tmp_path: FilePath) -> None:
        """Test missing files are load errors."""
        with pytest.raises(DocumentLoadError, match="file not found"):
            SvgReader(tmp_path / "missing.svg").load()


class TestReaderShapes:
    """Tests for shape extraction."""

    def test_primitives(self) -> None:
        """Test each primitive becomes a path outline."""
        shapes = _shapes(
            '<rect x="1" y="2" width="3" height="4"/>'
            '<circle cx="5" cy="6" r="7"/>'
            '<line x1="0" y1="0" x2="5" y2="5"/>'
            '<polyline points="0,0 1,1 2,0"/>'
            '<polygon points="0,0 1,1 2,0"/>'
            '<path d="M0 0 L5 5"/>'
        )
        assert all(isinstance(s.outline, PathOutline) for s in shapes)
        flattener = CurveFlattener()
        tags = [flattener.flatten(s.outline).tags for s in shapes]
        assert tags[0] == "MLLLZ"
        assert tags[1] == "MCCCCZ"
        assert tags[2] == "ML"
        assert tags[3] == "MLL"
        assert tags[4].startswith("MLL") and tags[4].endswith("Z")
        assert tags[5] == "ML"

    def test_rect_outline(self) -> None:
        """Test a rectangle closes without repeating its first corner."""
        assert _paths('<rect x="1" y="2" width="3" height="4"/>')[0].coordinates() == [
            1, 2, 4, 2, 4, 6, 1, 6,
        ]

    def test_path_commands(self) -> None:
        """Test relative, shorthand and curve commands are resolved."""
        outline = _shapes('<path d="m10 10 h10 v10 q5 5 10 0 c1 1 2 2 3 3 z"/>')[0].outline
        kinds = [type(s).__name__ for s in outline.segments]
        assert kinds == ["MoveTo", "LineTo", "LineTo", "QuadTo", "CubicTo", "ClosePath"]
        assert outline.segments[2].point == Point(20, 20)
        assert outline.segments[4].point == Point(33, 23)

    def test_drawing_after_close(self) -> None:
        """Test drawing on after a close starts at the closed sub-path's start."""
        outline = _shapes('<path d="M0 0 L10 0 L10 10 Z L0 10"/>')[0].outline
        assert outline.segments[3:] == [ClosePath(), MoveTo(Point(0, 0)), LineTo(Point(0, 10))]

    def test_arc_kept_as_arc(self) -> None:
        """Test elliptical arcs keep their radii and flags."""
        outline = _shapes('<path d="M10 0 A10 10 0 0 1 0 10"/>')[0].outline
        arc = outline.segments[1]
        assert isinstance(arc, ArcTo)
        assert (arc.rx, arc.ry) == (pytest.approx(10), pytest.approx(10))
        assert not arc.large_arc
        assert arc.sweep
        assert arc.point.x == pytest.approx(0, abs=1e-9)
        assert arc.point.y == pytest.approx(10)

    def test_mirrored_arc(self) -> None:
        """Test a mirroring transform reverses the arc direction."""
        outline = _shapes(
            '<path d="M10 0 A10 10 0 0 1 0 10" transform="scale(-1 1)"/>'
        )[0].outline
        arc = outline.segments[1]
        assert isinstance(arc, ArcTo)
        assert not arc.sweep
        assert outline.segments[0].point == Point(-10, 0)

    def test_non_shapes_ignored(self) -> None:
        """Test text and metadata produce nothing."""
        shapes = _shapes(
            "<title>t</title><text>hi</text>"
            '<!-- note --><rect width="1" height="1"/>'
        )
        assert len(shapes) == 1

    def test_fill_detection(self) -> None:
        """Test only painted fills become occluders."""
        shapes = _shapes(
            '<rect width="1" height="1"/>'
            '<rect width="1" height="1" fill="none"/>'
            '<rect width="1" height="1" style="fill: #00000000"/>'
            '<rect width="1" height="1" fill="red" fill-opacity="0"/>'
        )
        assert [s.has_fill() for s in shapes] == [True, False, False, False]
        assert shapes[0].fill is shapes[0].outline

    def test_style_overrides_attribute(self) -> None:
        """Test the style attribute wins over presentation attributes."""
        shapes = _shapes('<rect width="1" height="1" fill="red" style="fill:none"/>')
        assert not shapes[0].has_fill()

    def test_stylesheet_class(self) -> None:
        """Test rules from a style element reach classed shapes."""
        shapes = _shapes(
            "<style>.outline{fill:none}</style>"
            '<rect class="outline" width="80" height="80"/>'
            '<rect width="1" height="1"/>'
        )
        assert [s.has_fill() for s in shapes] == [False, True]

    def test_inherited_style(self) -> None:
        """Test fill properties are inherited from groups."""
        shapes = _shapes(
            '<g fill="none" fill-rule="evenodd">'
            '<rect width="1" height="1"/>'
            '<rect width="1" height="1" fill="blue"/>'
            "</g>"
        )
        assert [s.has_fill() for s in shapes] == [False, True]
        assert shapes[1].fill_rule == FillRule.EVENODD

    def test_stroke_selection_all(self) -> None:
        """Test every visible shape is stroked by default."""
        shapes = _shapes('<rect width="1" height="1"/><rect width="1" height="1" stroke="red"/>')
        assert [s.stroke for s in shapes] == [True, True]

    def test_stroke_selection_stroked(self) -> None:
        """Test only stroked shapes are emitted when asked."""
        config = ReaderConfig(stroke_selection=StrokeSelection.STROKED)
        shapes = _shapes(
            '<g stroke="black"><rect width="1" height="1"/></g>'
            '<rect width="1" height="1"/>'
            '<rect width="1" height="1" stroke="red" stroke-opacity="0"/>',
            config,
        )
        assert [s.stroke for s in shapes] == [True, False, False]

    def test_hidden_elements_skipped(self) -> None:
        """Test display and visibility hide shapes."""
        shapes = _shapes(
            '<rect id="a" width="1" height="1" display="none"/>'
            '<g style="display:none"><rect id="b" width="1" height="1"/></g>'
            '<g visibility="hidden">'
            '<rect id="c" width="1" height="1"/>'
            '<rect id="d" width="1" height="1" visibility="visible"/>'
            "</g>"
            '<rect id="e" width="1" height="1"/>'
        )
        assert [s.name for s in shapes] == ["d", "e"]
        assert [s.z_index for s in shapes] == [0, 1]

    def test_group_transform(self) -> None:
        """Test group transforms are applied to children."""
        paths = _paths('<g transform="translate(10 20)"><circle r="5"/></g>')
        assert paths[0].commands[0] == Move(Point(15, 20))

    def test_nested_transforms(self) -> None:
        """Test transforms compose from the outside in."""
        paths = _paths(
            '<g transform="translate(100 0)">'
            '<rect x="1" y="1" width="2" height="3" transform="scale(2)"/>'
            "</g>"
        )
        assert paths[0].coordinates() == pytest.approx([102, 2, 106, 2, 106, 8, 102, 8])

    def test_rotated_rect(self) -> None:
        """Test a rotated rectangle keeps its corners."""
        paths = _paths('<rect width="10" height="10" transform="rotate(90)"/>')
        assert paths[0].tags == "MLLLZ"
        assert paths[0].coordinates() == pytest.approx([0, 0, 0, 10, -10, 10, -10, 0], abs=1e-9)

    def test_use_reference(self) -> None:
        """Test use elements instantiate their target with an offset."""
        paths = _paths('<rect id="r" width="10" height="10"/><use href="#r" x="20"/>')
        assert len(paths) == 2
        assert paths[1].coordinates() == pytest.approx([20, 0, 30, 0, 30, 10, 20, 10])

    def test_nested_svg_offset(self) -> None:
        """Test nested svg elements shift their content."""
        paths = _paths('<svg x="10" y="10"><rect width="5" height="5"/></svg>')
        assert paths[0].commands[0] == Move(Point(10, 10))

    def test_nested_svg_view_box(self) -> None:
        """Test a nested viewport scales its viewBox content."""
        paths = _paths(
            '<svg width="50" height="50" viewBox="0 0 100 100"><path d="M0 0 L100 100"/></svg>'
        )
        assert paths[0].coordinates() == pytest.approx([0, 0, 50, 50])

    def test_element_id(self) -> None:
        """Test shapes carry their element id."""
        shapes = _shapes('<rect id="door" width="1" height="1"/><rect width="1" height="1"/>')
        assert [s.name for s in shapes] == ["door", "shape-1"]


def _example_stream() -> CanonicalStream:
    path = Path(
        [
            Move(Point(0, 0)),
            Line(Point(100, 0)),
            Line(Point(100, 70)),
            Line(Point(0, 70)),
            Close(),
        ]
    )
    return CanonicalStream.from_paths(720, 480, [path])


class TestWriter:
    """Tests for rendering canonical streams as SVG."""

    def test_path_data(self) -> None:
        """Test absolute commands with compact coordinates."""
        path = Path(
            [
                Move(Point(0, 0.5)),
                Cubic(Point(1, 2), Point(3, 4), Point(5, 6)),
                Line(Point(-1, 0)),
                Close(),
            ]
        )
        assert path_data(path) == "M 0 0.5 C 1 2,3 4,5 6 L -1 0 Z"

    def test_build_example(self) -> None:
        """Test the element tree for the rectangle example."""
        root = build_svg(_example_stream())
        assert etree.QName(root).localname == "svg"
        assert root.nsmap[None] == "http://www.w3.org/2000/svg"
        assert root.get("viewBox") == "0 0 720 480"
        (path,) = root
        assert dict(path.attrib) == {
            "stroke": "#000000",
            "stroke-width": "1",
            "fill": "none",
            "d": "M 0 0 L 100 0 L 100 70 L 0 70 Z",
        }

    def test_render_has_declaration(self) -> None:
        """Test rendered markup is a standalone XML document."""
        markup = render_svg(_example_stream())
        assert markup.startswith("<?xml")
        assert 'd="M 0 0 L 100 0 L 100 70 L 0 70 Z"' in markup

    def test_one_element_per_subpath(self) -> None:
        """Test every sub-path gets its own path element."""
        first = Path([Move(Point(0, 0)), Line(Point(1, 0))])
        second = Path([Move(Point(5, 5)), Line(Point(6, 5))])
        assert len(build_svg(CanonicalStream.from_paths(10, 10, [first, second]))) == 2

    def test_render_options(self) -> None:
        """Test stroke color and width are applied."""
        markup = render_svg(_example_stream(), RenderConfig(stroke="red", stroke_width=2.5))
        assert 'stroke="red" stroke-width="2.5"' in markup

    def test_stroke_is_escaped(self) -> None:
        """Test attribute values are escaped in the markup."""
        markup = render_svg(_example_stream(), RenderConfig(stroke='a"b'))
        root = etree.fromstring(markup.encode("utf-8"))
        assert root[0].get("stroke") == 'a"b'

    def test_empty_stream(self) -> None:
        """Test an empty stream renders an empty document."""
        root = etree.fromstring(render_svg(CanonicalStream(width=5, height=5)).encode("utf-8"))
        assert len(root) == 0
        assert root.get("viewBox") == "0 0 5 5"

    def test_rendered_svg_reads_back(self) -> None:
        """Test rendered output is a readable SVG document."""
        reader = SvgReader.from_string(render_svg(_example_stream()))
        shapes = list(reader.iter_shapes())
        assert (reader.width, reader.height) == (720, 480)
        assert len(shapes) == 1
        assert not shapes[0].has_fill()

    def test_save(self, tmp_path: FilePath) -> None:
        """Test saving writes the rendered markup."""
        target = tmp_path / "preview.svg"
        SvgWriter().save(_example_stream(), target)
        assert target.read_text(encoding="utf-8") == render_svg(_example_stream())

    def test_save_failure(self, tmp_path: FilePath) -> None:
        """Test unwritable destinations raise a save error."""
        with pytest.raises(DocumentSaveError):
            SvgWriter().save(_example_stream(), tmp_path / "missing" / "preview.svg")
