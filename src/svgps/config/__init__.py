"""Configuration management for svgps.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- FlattenConfig: Curve flattening tolerances
- AutocutConfig: Occlusion culling settings
- PolishConfig: Short sub-path removal settings
- ReaderConfig: SVG front end settings
- RenderConfig: Canonical stream to SVG rendering settings
- LoggingConfig: Logging settings
- SvgpsSettings: Main application settings
"""

from svgps.config.settings import (
    AutocutConfig,
    FillRule,
    FlattenConfig,
    LoggingConfig,
    PolishConfig,
    ReaderConfig,
    RenderConfig,
    StrokeSelection,
    SvgpsSettings,
)

__all__ = [
    "AutocutConfig",
    "FillRule",
    "FlattenConfig",
    "LoggingConfig",
    "PolishConfig",
    "ReaderConfig",
    "RenderConfig",
    "StrokeSelection",
    "SvgpsSettings",
]
