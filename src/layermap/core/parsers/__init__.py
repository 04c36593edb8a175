"""Source parsers producing imports and type references."""

from layermap.core.parsers.base import ImportInfo, LanguageParser, ParseResult, TypeInfo

__all__ = ["ImportInfo", "LanguageParser", "ParseResult", "TypeInfo"]
