"""Pipeline orchestration for the generate and render directions.

Key components:
- DocumentProcessor: Runs Flattener -> [Occlusion] -> [Polisher] over a
  Document and produces a CanonicalStream
"""

import time
from pathlib import Path

import structlog

from svgps.config import SvgpsSettings
from svgps.core.flattener import CurveFlattener
from svgps.core.occlusion import FlatShape, OcclusionEngine
from svgps.core.polisher import Polisher
from svgps.domain import CanonicalStream, Document, Path as CanonicalPath, Shape
from svgps.io import SvgReader, SvgWriter, read_svgcom, write_svgcom
from svgps.utils import ProcessingLogger, ProcessingStats


class DocumentProcessor:
    """Orchestrates conversion of SVG documents to canonical streams.

    Manages the complete workflow:
    1. Flatten every shape (outline and fill) to canonical commands
    2. Optionally cut away stroke stretches hidden by fills above them
    3. Optionally drop insignificant sub-paths
    4. Concatenate the survivors in document order

    Example:
        processor = DocumentProcessor(SvgpsSettings())
        stats = processor.process(Path("drawing.svg"), Path("drawing.svgcom"))
    """

    def __init__(self, config: SvgpsSettings | None = None) -> None:
        """Initialize the processor.

        Args:
            config: Settings for every pipeline stage (defaults if None)
        """
        self.config = config or SvgpsSettings()
        self.logger = structlog.get_logger("svgps.processor")
        self.flattener = CurveFlattener(self.config.flatten)
        self.processing_logger = ProcessingLogger(self.logger)

    @property
    def stats(self) -> ProcessingStats:
        """Statistics of the most recent run."""
        return self.processing_logger.stats

    def flatten_shapes(self, shapes: list[Shape]) -> list[FlatShape]:
        """Flatten outlines and fills of all shapes.

        A fill that is the shape's own outline reuses the flattened outline.
        """
        flat: list[FlatShape] = []
        for shape in shapes:
            path = self.flattener.flatten_shape(shape)
            if shape.fill is None:
                fill = None
            elif shape.fill is shape.outline:
                fill = None if path.is_empty() else path
            else:
                fill = self.flattener.flatten_fill(shape)
            flat.append(
                FlatShape(
                    z_index=shape.z_index,
                    path=path,
                    stroke=shape.stroke,
                    fill=fill,
                    fill_rule=shape.fill_rule,
                    name=shape.name,
                )
            )
        return flat

    def generate(self, document: Document) -> CanonicalStream:
        """Convert a document into a canonical stream.

        Args:
            document: Shapes in paint order plus the viewbox

        Returns:
            CanonicalStream with the visible stroke output
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        self.processing_logger.log_document(document.width, document.height, len(document.shapes))
        flat_shapes = self.flatten_shapes(document.shapes)

        paths: list[CanonicalPath]
        autocut = self.config.autocut
        if autocut.enabled:
            engine = OcclusionEngine(autocut)
            snapshot = engine.build_snapshot(flat_shapes)
            self.processing_logger.log_snapshot(len(snapshot))

            paths = []
            visible_paths = engine.cut(flat_shapes, snapshot)
            for shape, visible in zip(engine.candidates(flat_shapes), visible_paths):
                self.processing_logger.log_shape_complete(shape.name, len(visible))
                paths.extend(visible)
        else:
            paths = []
            for shape in flat_shapes:
                if not shape.stroke:
                    continue
                self.processing_logger.log_shape_complete(
                    shape.name, len(shape.path.subpaths())
                )
                if not shape.path.is_empty():
                    paths.append(shape.path)

        if self.config.polish.enabled:
            polisher = Polisher(self.config.polish, tolerance=self.config.flatten.tolerance)
            before = sum(len(p.subpaths()) for p in paths)
            paths = polisher.polish(paths, document.width, document.height)
            self.processing_logger.log_polish(
                len(paths), before - len(paths), polisher.threshold(document.width, document.height)
            )

        stream = CanonicalStream.from_paths(document.width, document.height, paths)

        stats.end_time = time.time()
        self.processing_logger.log_complete(stream.command_count, len(stream.subpaths()))
        return stream

    def process(self, input_path: Path, output_path: Path) -> ProcessingStats:
        """Read an SVG file and write its canonical stream.

        The output file is only written after the whole stream has been
        produced.

        Args:
            input_path: Source SVG file
            output_path: Destination .svgcom file

        Returns:
            Statistics of the run

        Raises:
            DocumentLoadError: If the SVG cannot be loaded
            DocumentSaveError: If the output cannot be written
        """
        self.logger.info("Starting generate", input=str(input_path), output=str(output_path))

        with SvgReader(input_path, self.config.reader) as reader:
            document = reader.document()

        stream = self.generate(document)
        write_svgcom(output_path, stream)

        stats = self.stats
        self.logger.info(
            "Generate complete",
            subpaths=stats.subpaths_emitted,
            hidden=stats.hidden_count,
            dropped=stats.subpaths_dropped,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def render(self, input_path: Path, output_path: Path) -> CanonicalStream:
        """Render a .svgcom file as SVG.

        Args:
            input_path: Source .svgcom file
            output_path: Destination SVG file

        Returns:
            The decoded stream

        Raises:
            DocumentLoadError: If the input cannot be read
            FormatError: If the input is malformed
            DocumentSaveError: If the output cannot be written
        """
        stream = read_svgcom(input_path)
        SvgWriter(self.config.render).save(stream, output_path)
        self.logger.info(
            "Render complete",
            input=str(input_path),
            output=str(output_path),
            commands=stream.command_count,
        )
        return stream
