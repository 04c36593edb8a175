"""layermap configuration: ignore rules, language detection and render options."""

from layermap.config.ignore import (
    DEFAULT_IGNORE_DIRS,
    matches_exclude_pattern,
    normalize_path,
    should_ignore_dir,
)
from layermap.config.languages import SUPPORTED_EXTENSIONS, get_language, is_supported
from layermap.config.options import (
    Align,
    EdgeScope,
    LineEffect,
    LineStyle,
    RenderOptions,
    ViewKind,
)

__all__ = [
    "Align",
    "DEFAULT_IGNORE_DIRS",
    "EdgeScope",
    "LineEffect",
    "LineStyle",
    "RenderOptions",
    "SUPPORTED_EXTENSIONS",
    "ViewKind",
    "get_language",
    "is_supported",
    "matches_exclude_pattern",
    "normalize_path",
    "should_ignore_dir",
]
