"""Logging utilities for svgps."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import structlog

# Marks handlers installed here so reconfiguring does not stack them
_HANDLER_ATTR = "_svgps_handler"


@dataclass
class ProcessingStats:
    """Statistics from a generate run."""

    shape_count: int = 0
    stroke_count: int = 0
    occluder_count: int = 0
    hidden_count: int = 0
    subpaths_emitted: int = 0
    subpaths_dropped: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def _install(handler: logging.Handler, level: str, fmt: str) -> None:
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _HANDLER_ATTR, True)
    logging.getLogger().addHandler(handler)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging to stderr and, optionally, a file.

    Args:
        log_file: Path to log file (no file logging if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        _install(
            logging.FileHandler(log_file, encoding="utf-8"),
            file_level,
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        )

    _install(
        logging.StreamHandler(sys.stderr),
        "ERROR" if quiet else console_level,
        "%(message)s",
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("svgps")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking generate progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger("svgps.processor")
        self._stats = ProcessingStats()

    def log_document(self, width: float, height: float, shape_count: int) -> None:
        """Log the loaded document."""
        self._logger.info("Document loaded", width=width, height=height, shapes=shape_count)
        self._stats.shape_count = shape_count

    def log_snapshot(self, occluder_count: int) -> None:
        """Log the occluder snapshot size."""
        self._logger.debug("Occluder snapshot built", occluders=occluder_count)
        self._stats.occluder_count = occluder_count

    def log_shape_complete(self, shape_name: str, subpaths: int) -> None:
        """Log the visible output of one stroke candidate."""
        if subpaths:
            self._logger.debug("Shape emitted", shape=shape_name, subpaths=subpaths)
        else:
            self._logger.debug("Shape hidden", shape=shape_name)
            self._stats.hidden_count += 1
        self._stats.stroke_count += 1

    def log_polish(self, kept: int, dropped: int, min_length: float) -> None:
        """Log polishing results."""
        self._logger.info(
            "Sub-paths polished", kept=kept, dropped=dropped, min_length=round(min_length, 6)
        )
        self._stats.subpaths_dropped += dropped

    def log_complete(self, command_count: int, subpaths: int) -> None:
        """Log the finished stream."""
        self._logger.info("Stream generated", commands=command_count, subpaths=subpaths)
        self._stats.subpaths_emitted = subpaths

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
