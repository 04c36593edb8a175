"""Language detection by file extension."""

from __future__ import annotations

from pathlib import PurePath

SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".swift": "swift",
}

# Declaration files describe types only and never import at runtime.
_SKIPPED_SUFFIXES: tuple[str, ...] = (".d.ts",)


def get_language(path: str | PurePath) -> str | None:
    """Return the language name for *path*, or ``None`` if unsupported."""
    name = PurePath(path).name
    if name.endswith(_SKIPPED_SUFFIXES):
        return None
    return SUPPORTED_EXTENSIONS.get(PurePath(name).suffix.lower())


def is_supported(path: str | PurePath) -> bool:
    return get_language(path) is not None


def is_script(path: str | PurePath) -> bool:
    """``True`` for TypeScript, TSX and JavaScript files."""
    return get_language(path) in ("typescript", "tsx", "javascript")
