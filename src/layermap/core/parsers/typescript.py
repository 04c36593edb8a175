"""TypeScript / TSX / JavaScript import extraction using tree-sitter.

Collects every module specifier a file depends on: ES ``import`` and
``export ... from`` statements, ``import x = require(...)``, CommonJS
``require(...)`` calls and dynamic ``import(...)`` expressions.
"""

from __future__ import annotations

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

from layermap.core.parsers.base import ImportInfo, LanguageParser, ParseResult

# ---------------------------------------------------------------------------
# Language singletons
# ---------------------------------------------------------------------------

TS_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())
JS_LANGUAGE = Language(tsjavascript.language())

_DIALECT_MAP: dict[str, Language] = {
    "typescript": TS_LANGUAGE,
    "tsx": TSX_LANGUAGE,
    "javascript": JS_LANGUAGE,
}


class TypeScriptParser(LanguageParser):
    """Parse TypeScript, TSX, or JavaScript files via tree-sitter.

    Args:
        dialect: One of ``"typescript"``, ``"tsx"``, or ``"javascript"``.
    """

    def __init__(self, dialect: str = "typescript") -> None:
        if dialect not in _DIALECT_MAP:
            raise ValueError(
                f"Unknown dialect {dialect!r}. "
                f"Expected one of: {', '.join(sorted(_DIALECT_MAP))}"
            )
        self.dialect = dialect
        self._language = _DIALECT_MAP[dialect]
        self._parser = Parser(self._language)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, content: str, file_path: str) -> ParseResult:
        """Parse *content* and return the imports it declares."""
        tree = self._parser.parse(content.encode("utf-8"))

        result = ParseResult()
        self._walk(tree.root_node, result)
        return result

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    def _walk(self, root: Node, result: ParseResult) -> None:
        """Visit the tree depth first, dispatching on node type."""
        stack = [root]
        while stack:
            node = stack.pop()
            ntype = node.type

            if ntype == "import_statement":
                self._extract_import(node, result)
            elif ntype == "export_statement":
                self._extract_reexport(node, result)
            elif ntype == "call_expression":
                self._maybe_extract_call_import(node, result)

            stack.extend(reversed(node.children))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _extract_import(self, node: Node, result: ParseResult) -> None:
        """Handle ``import ... from '...'`` and ``import x = require('...')``."""
        source_node = node.child_by_field_name("source")
        if source_node is None:
            for child in node.children:
                if child.type == "string":
                    source_node = child
                    break
                if child.type == "import_require_clause":
                    source_node = child.child_by_field_name("source") or _first_string(child)
                    break

        if source_node is not None:
            self._add(self._string_value(source_node), node, result)

    def _extract_reexport(self, node: Node, result: ParseResult) -> None:
        """Handle ``export { a } from '...'`` and ``export * from '...'``."""
        source_node = node.child_by_field_name("source")
        if source_node is not None:
            self._add(self._string_value(source_node), node, result)

    def _maybe_extract_call_import(self, node: Node, result: ParseResult) -> None:
        """Emit an import for ``require('./foo')`` or ``import('./foo')``."""
        func_node = node.child_by_field_name("function")
        if func_node is None:
            return

        is_dynamic = func_node.type == "import"
        if not is_dynamic and (
            func_node.type != "identifier" or func_node.text.decode() != "require"
        ):
            return

        args = node.child_by_field_name("arguments")
        if args is None:
            return

        # Only literal specifiers can be resolved.
        string_node = _first_string(args)
        if string_node is None:
            return
        self._add(self._string_value(string_node), node, result, is_dynamic=is_dynamic)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _add(
        module_str: str, node: Node, result: ParseResult, is_dynamic: bool = False
    ) -> None:
        if not module_str:
            return
        result.imports.append(
            ImportInfo(
                module=module_str,
                line=node.start_point[0] + 1,
                is_relative=module_str.startswith("."),
                is_dynamic=is_dynamic,
            )
        )

    @staticmethod
    def _string_value(string_node: Node) -> str:
        """Extract the raw string value from a tree-sitter ``string`` node.

        String nodes look like: string -> [quote, string_fragment, quote].
        """
        for child in string_node.children:
            if child.type == "string_fragment":
                return child.text.decode()
        text = string_node.text.decode()
        if len(text) >= 2 and text[0] in ("'", '"', "`") and text[-1] in ("'", '"', "`"):
            return text[1:-1]
        return text


def _first_string(node: Node) -> Node | None:
    for child in node.children:
        if child.type == "string":
            return child
    return None
