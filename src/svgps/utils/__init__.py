"""Utility functions for svgps.

This module provides logging setup and processing statistics.
"""

from svgps.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
