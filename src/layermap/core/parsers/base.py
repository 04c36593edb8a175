"""Shared result types and the abstract parser interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class ImportInfo:
    """One module reference found in a source file."""

    module: str
    line: int = 0
    is_relative: bool = False
    is_dynamic: bool = False


@dataclass
class TypeInfo:
    """Type names a file declares and the ones it refers to."""

    definitions: list[str] = field(default_factory=list)
    usages: list[str] = field(default_factory=list)


@dataclass
class ParseResult:
    """Everything extracted from one file."""

    imports: list[ImportInfo] = field(default_factory=list)
    types: TypeInfo = field(default_factory=TypeInfo)


class LanguageParser(ABC):
    """Parse the content of one source file."""

    @abstractmethod
    def parse(self, content: str, file_path: str) -> ParseResult:
        """Parse *content* and return a :class:`ParseResult`."""
