"""Swift type definition and usage extraction using tree-sitter.

Swift files reference each other by type name rather than by path, so a
dependency is inferred when one file mentions a type that another file
declares.  Comments and string text are separate nodes in the syntax
tree, so names inside them never reach the usage walk; names inside
string interpolations do.
"""

from __future__ import annotations

import tree_sitter_swift as tsswift
from tree_sitter import Language, Node, Parser

from layermap.core.parsers.base import LanguageParser, ParseResult, TypeInfo

SWIFT_LANGUAGE = Language(tsswift.language())

# ``class_declaration`` covers class, struct, enum and actor.
_DEFINITION_NODES: frozenset[str] = frozenset({"class_declaration", "protocol_declaration"})

# Identifier nodes that may name a type: annotations, inheritance,
# constructor calls and static member access.
_USAGE_NODES: frozenset[str] = frozenset({"type_identifier", "simple_identifier"})


class SwiftParser(LanguageParser):
    """Extract declared and referenced type names from Swift source."""

    def __init__(self) -> None:
        self._parser = Parser(SWIFT_LANGUAGE)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, content: str, file_path: str) -> ParseResult:
        """Parse *content* and return its type definitions and usages."""
        tree = self._parser.parse(content.encode("utf-8"))
        definitions = self.extract_definitions(tree.root_node)
        return ParseResult(
            types=TypeInfo(
                definitions=definitions,
                usages=self.extract_usages(tree.root_node, set(definitions)),
            )
        )

    # ------------------------------------------------------------------
    # Walks
    # ------------------------------------------------------------------

    @staticmethod
    def extract_definitions(root: Node) -> list[str]:
        """Names declared by class/struct/enum/actor/protocol, in order.

        Extensions reuse ``class_declaration`` but name an existing type,
        so they are skipped.
        """
        names: list[str] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in _DEFINITION_NODES:
                name = _declared_name(node)
                if name and name not in names:
                    names.append(name)
            stack.extend(reversed(node.children))
        return names

    @staticmethod
    def extract_usages(root: Node, defined: set[str]) -> list[str]:
        """Capitalized identifiers not declared in the same file."""
        names: list[str] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "import_declaration":
                continue
            if node.type in _USAGE_NODES:
                name = node.text.decode()
                # Swift types are capitalized by convention.
                if name[:1].isupper() and name not in defined and name not in names:
                    names.append(name)
            stack.extend(reversed(node.children))
        return names


def _declared_name(node: Node) -> str | None:
    kind = node.child_by_field_name("declaration_kind")
    if kind is not None and kind.type == "extension":
        return None
    name_node = node.child_by_field_name("name")
    if name_node is None or name_node.type != "type_identifier":
        return None
    return name_node.text.decode()
