"""Phase 3: Import resolution for TypeScript and JavaScript.

Parses every script file with tree-sitter, resolves relative specifiers
to files that exist in the scanned set and returns ``(source, target)``
path pairs.  Bare package specifiers and anything under ``node_modules``
are left out.
"""

from __future__ import annotations

import logging
import posixpath

from layermap.config.languages import is_script
from layermap.core.constants import EXTERNAL_DEPENDENCY_DIR
from layermap.core.graph.graph import Graph
from layermap.core.ingestion.walker import FileEntry, read_source
from layermap.core.parsers.typescript import TypeScriptParser

logger = logging.getLogger(__name__)

# Tried in order after the bare specifier itself.
_RESOLVE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
_INDEX_FILES: tuple[str, ...] = tuple(f"index{ext}" for ext in _RESOLVE_EXTENSIONS)

# ESM TypeScript imports spell the emitted extension.
_EMITTED_TO_SOURCE: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
    ".cjs": (".cts",),
}

_EXTERNAL_SEGMENT = f"/{EXTERNAL_DEPENDENCY_DIR}/"


def resolve_import(source_path: str, specifier: str, known: set[str]) -> str | None:
    """Map a relative *specifier* written in *source_path* to a known file.

    Returns:
        The resolved path, or ``None`` for bare specifiers and misses.
    """
    if not specifier.startswith("."):
        return None

    base = posixpath.normpath(posixpath.join(posixpath.dirname(source_path), specifier))
    candidates = [base]
    candidates.extend(base + ext for ext in _RESOLVE_EXTENSIONS)
    stem, ext = posixpath.splitext(base)
    candidates.extend(stem + alt for alt in _EMITTED_TO_SOURCE.get(ext, ()))
    candidates.extend(posixpath.join(base, index) for index in _INDEX_FILES)

    for candidate in candidates:
        if candidate in known:
            return candidate
    return None


def process_imports(files: list[FileEntry]) -> list[tuple[str, str]]:
    """Parse script files and return resolved ``(source, target)`` pairs.

    A file that cannot be read or parsed is skipped with a warning.
    """
    known = {f.path for f in files}
    parsers: dict[str, TypeScriptParser] = {}
    pairs: list[tuple[str, str]] = []

    for entry in files:
        if not is_script(entry.path):
            continue
        content = read_source(entry)
        if content is None:
            continue

        parser = parsers.get(entry.language)
        if parser is None:
            parser = parsers[entry.language] = TypeScriptParser(entry.language)

        try:
            result = parser.parse(content, entry.path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to parse %s: %s", entry.relative, exc)
            continue

        for imp in result.imports:
            target = resolve_import(entry.path, imp.module, known)
            if target is None:
                logger.debug("Unresolved import %r in %s", imp.module, entry.relative)
                continue
            if _EXTERNAL_SEGMENT in target:
                continue
            pairs.append((entry.path, target))

    return pairs


def merge_script_twins(graph: Graph) -> int:
    """Fold each ``.js`` leaf into its ``.ts`` sibling.

    The kept leaf is renamed ``<name>/.js`` and inherits every edge of the
    removed one.

    Returns:
        The number of merged pairs.
    """
    merged = 0
    for node in list(graph.root.iter_leaves()):
        if not node.data.endswith(".js"):
            continue
        twin = graph.get_leaf(node.data[: -len(".js")] + ".ts")
        if twin is None or twin is node:
            continue
        graph.merge_leaves(keep=twin, drop=node, name=f"{twin.name}/.js")
        merged += 1
    if merged:
        logger.debug("Merged %d .ts/.js twin(s)", merged)
    return merged
