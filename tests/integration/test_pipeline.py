"""End-to-end tests running SVG files through the whole pipeline."""

from pathlib import Path

import pytest

from svgps.config import AutocutConfig, PolishConfig, SvgpsSettings
from svgps.core.processor import DocumentProcessor
from svgps.domain import CanonicalStream
from svgps.io import SvgReader, read_svgcom

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
SCENE_PATH = FIXTURES_DIR / "scene.svg"

EXAMPLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="720" height="480">'
    '<path d="M0 0 L100 0 L100 70 L0 70 Z"/></svg>'
)


def _generate(tmp_path: Path, settings: SvgpsSettings | None = None) -> CanonicalStream:
    output = tmp_path / "scene.svgcom"
    DocumentProcessor(settings).process(SCENE_PATH, output)
    return read_svgcom(output)


class TestExample:
    """The rectangle example from the format description."""

    def test_rectangle_example(self, tmp_path: Path) -> None:
        """Test the exact bytes written for a closed rectangle path."""
        source = tmp_path / "rect.svg"
        source.write_text(EXAMPLE_SVG, encoding="utf-8")
        output = tmp_path / "rect.svgcom"

        DocumentProcessor().process(source, output)

        assert output.read_bytes() == b"720 480 5 8\nMLLLZ\n0 0 100 0 100 70 0 70\n"


class TestScene:
    """Tests on the fixture scene."""

    def test_without_options(self, tmp_path: Path) -> None:
        """Test every visible shape is emitted in paint order."""
        stream = _generate(tmp_path)
        tags = [p.tags for p in stream.subpaths()]
        assert (stream.width, stream.height) == (720, 480)
        assert tags == ["MLLLZ", "M" + "C" * 8 + "Z", "MLLLZ", "MLLLZ", "ML"]

    def test_badge_translated(self, tmp_path: Path) -> None:
        """Test group transforms reach the output coordinates."""
        badge = _generate(tmp_path).subpaths()[3]
        assert badge.coordinates() == [600, 400, 620, 400, 620, 410, 600, 410]

    def test_autocut(self, tmp_path: Path) -> None:
        """Test the part of the sun behind the cloud is removed."""
        settings = SvgpsSettings(autocut=AutocutConfig(enabled=True))
        subpaths = _generate(tmp_path, settings).subpaths()

        assert [p.tags for p in subpaths][0] == "MLLLZ"
        assert [p.tags for p in subpaths][2:] == ["MLLLZ", "MLLLZ", "ML"]

        sun = subpaths[1]
        assert "Z" not in sun.tags
        end_points = [cmd.points()[-1] for cmd in sun.commands]
        assert all(p.x < 310 for p in end_points)
        assert min(p.x for p in end_points) == pytest.approx(250)

    def test_autocut_and_polish(self, tmp_path: Path) -> None:
        """Test polishing removes the speck left over."""
        settings = SvgpsSettings(
            autocut=AutocutConfig(enabled=True),
            polish=PolishConfig(enabled=True),
        )
        subpaths = _generate(tmp_path, settings).subpaths()
        assert len(subpaths) == 4
        assert subpaths[-1].tags == "MLLLZ"

    def test_parallel_autocut_matches_serial(self, tmp_path: Path) -> None:
        """Test worker processes produce identical output."""
        serial = _generate(tmp_path, SvgpsSettings(autocut=AutocutConfig(enabled=True)))
        parallel = _generate(
            tmp_path, SvgpsSettings(autocut=AutocutConfig(enabled=True, workers=2))
        )
        assert parallel == serial

    def test_render_round_trip(self, tmp_path: Path) -> None:
        """Test rendered output reads back with one shape per sub-path."""
        generated = tmp_path / "scene.svgcom"
        rendered = tmp_path / "scene.render.svg"
        processor = DocumentProcessor(SvgpsSettings(autocut=AutocutConfig(enabled=True)))
        processor.process(SCENE_PATH, generated)
        stream = processor.render(generated, rendered)

        with SvgReader(rendered) as reader:
            shapes = list(reader.iter_shapes())
            assert (reader.width, reader.height) == (720, 480)
        assert len(shapes) == len(stream.subpaths())
        assert not any(s.has_fill() for s in shapes)

    def test_regenerate_rendered_output(self, tmp_path: Path) -> None:
        """Test generating from a rendered file reproduces the stream."""
        first = tmp_path / "first.svgcom"
        rendered = tmp_path / "first.svg"
        second = tmp_path / "second.svgcom"
        processor = DocumentProcessor()
        processor.process(SCENE_PATH, first)
        processor.render(first, rendered)
        processor.process(rendered, second)
        assert second.read_text(encoding="utf-8") == first.read_text(encoding="utf-8")


class TestStyledInput:
    """Documents whose geometry or paint comes from stylesheets and viewports."""

    def _process(
        self, tmp_path: Path, markup: str, settings: SvgpsSettings | None = None
    ) -> CanonicalStream:
        source = tmp_path / "styled.svg"
        source.write_text(markup, encoding="utf-8")
        output = tmp_path / "styled.svgcom"
        DocumentProcessor(settings).process(source, output)
        return read_svgcom(output)

    def test_unfilled_class_hides_nothing(self, tmp_path: Path) -> None:
        """Test a shape unfilled by a stylesheet rule does not cut what lies beneath."""
        stream = self._process(
            tmp_path,
            '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">'
            "<style>.outline{fill:none}</style>"
            '<path d="M10 50 L90 50"/>'
            '<rect class="outline" x="0" y="0" width="100" height="100"/>'
            "</svg>",
            SvgpsSettings(autocut=AutocutConfig(enabled=True)),
        )
        subpaths = stream.subpaths()
        assert subpaths[0].tags == "ML"
        assert subpaths[0].coordinates() == [10, 50, 90, 50]
        assert subpaths[1].tags == "MLLLZ"

    def test_filled_class_hides_line(self, tmp_path: Path) -> None:
        """Test a stylesheet fill does cut the stroke below it."""
        stream = self._process(
            tmp_path,
            '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">'
            "<style>.solid{fill:white}</style>"
            '<path d="M10 50 L90 50"/>'
            '<rect class="solid" x="0" y="0" width="100" height="100"/>'
            "</svg>",
            SvgpsSettings(autocut=AutocutConfig(enabled=True)),
        )
        assert [p.tags for p in stream.subpaths()] == ["MLLLZ"]

    def test_nested_viewport(self, tmp_path: Path) -> None:
        """Test a nested svg maps its viewBox onto its own width and height."""
        stream = self._process(
            tmp_path,
            '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">'
            '<svg width="50" height="50" viewBox="0 0 100 100"><path d="M0 0 L100 100"/></svg>'
            "</svg>",
        )
        assert stream.tags == "ML"
        assert stream.coordinates() == pytest.approx([0, 0, 50, 50])
