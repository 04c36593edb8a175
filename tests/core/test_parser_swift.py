"""Tests for the Swift type scanner and Swift type resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from layermap.core.ingestion.types import process_types
from layermap.core.ingestion.walker import walk_sources
from layermap.core.parsers.swift import SwiftParser

USER_MODEL = """
import Foundation

public struct UserModel: Codable {
    let id: String
    let name: String
    let email: String
}

public class UserManager {
    func createUser() -> UserModel {
        return UserModel(id: "1", name: "Test", email: "test@example.com")
    }
}
"""

USER_VIEW = """
import SwiftUI

public struct UserView: View {
    @StateObject private var manager = UserManager()

    public var body: some View {
        VStack {
            Text("User View")
            UserProfileCard(user: manager.createUser())
        }
    }
}
"""

USER_PROFILE_CARD = """
import SwiftUI

public struct UserProfileCard: View {
    let user: UserModel

    public var body: some View {
        VStack {
            Text(user.name)
            Text(user.email)
        }
    }
}
"""

USER_SERVICE = """
import Foundation

public class UserService {
    private let manager = UserManager()

    func fetchUser() async -> UserModel {
        return await manager.createUser()
    }
}
"""


@pytest.fixture
def parser() -> SwiftParser:
    return SwiftParser()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def test_definitions(parser: SwiftParser) -> None:
    result = parser.parse(USER_MODEL, "UserModel.swift")
    assert result.types.definitions == ["UserModel", "UserManager"]
    assert result.imports == []


def test_usages_exclude_own_definitions(parser: SwiftParser) -> None:
    usages = parser.parse(USER_MODEL, "UserModel.swift").types.usages
    assert "UserModel" not in usages
    assert "String" in usages
    assert "Foundation" not in usages


def test_usages_skip_strings_and_comments(parser: SwiftParser) -> None:
    code = '// uses Ghost\nlet s = "Phantom"\nlet v = RealType()\n'
    assert parser.parse(code, "a.swift").types.usages == ["RealType"]


def test_class_func_is_not_a_definition(parser: SwiftParser) -> None:
    code = "class Box {\n    class func make() -> Box { Box() }\n}\nenum Kind { case a }\nprotocol Drawable {}\nactor Store {}\n"
    assert parser.parse(code, "a.swift").types.definitions == [
        "Box",
        "Kind",
        "Drawable",
        "Store",
    ]


def test_extension_is_not_a_definition(parser: SwiftParser) -> None:
    code = "extension Remote {\n    func ping() {}\n}\nstruct Local {}\n"
    result = parser.parse(code, "a.swift")
    assert result.types.definitions == ["Local"]
    assert "Remote" in result.types.usages


def test_nested_block_comment_hides_names(parser: SwiftParser) -> None:
    code = "struct A {}\n/* outer /* inner */ Bar is only mentioned in a comment */\n"
    assert "Bar" not in parser.parse(code, "A.swift").types.usages


def test_raw_string_hides_names(parser: SwiftParser) -> None:
    code = 'struct A {\n    let s = #"say "Bar" now"#\n}\n'
    assert "Bar" not in parser.parse(code, "A.swift").types.usages


def test_interpolation_is_a_usage(parser: SwiftParser) -> None:
    code = 'struct A {\n    let s = "count: \\(Counter.shared)"\n}\n'
    assert parser.parse(code, "A.swift").types.usages == ["Counter"]


# ---------------------------------------------------------------------------
# Resolution across files
# ---------------------------------------------------------------------------


def test_cross_file_dependencies(tmp_path: Path) -> None:
    files = {
        "UserModel.swift": USER_MODEL,
        "UserView.swift": USER_VIEW,
        "UserProfileCard.swift": USER_PROFILE_CARD,
        "UserService.swift": USER_SERVICE,
    }
    for name, content in files.items():
        (tmp_path / name).write_text(content, encoding="utf-8")

    entries = walk_sources(tmp_path)
    by_path = {e.path: e.relative for e in entries}
    pairs = {(by_path[s], by_path[t]) for s, t in process_types(entries)}

    assert pairs == {
        ("UserView.swift", "UserModel.swift"),
        ("UserView.swift", "UserProfileCard.swift"),
        ("UserProfileCard.swift", "UserModel.swift"),
        ("UserService.swift", "UserModel.swift"),
    }


def test_first_definition_wins(tmp_path: Path) -> None:
    (tmp_path / "A.swift").write_text("struct Shared {}\n", encoding="utf-8")
    (tmp_path / "B.swift").write_text("struct Shared {}\n", encoding="utf-8")
    (tmp_path / "C.swift").write_text("let x = Shared()\n", encoding="utf-8")

    entries = walk_sources(tmp_path)
    targets = {Path(t).name for _, t in process_types(entries)}
    assert targets == {"A.swift"}


@pytest.mark.parametrize(
    "content",
    [
        "struct A {}\n/* outer /* inner */ Bar is only mentioned in a comment */\n",
        'struct A {\n    let s = #"say "Bar" now"#\n}\n',
    ],
)
def test_no_pair_from_comment_or_raw_string(tmp_path: Path, content: str) -> None:
    (tmp_path / "A.swift").write_text(content, encoding="utf-8")
    (tmp_path / "Bar.swift").write_text("class Bar {}\n", encoding="utf-8")

    assert process_types(walk_sources(tmp_path)) == []
