"""Tests for the layermap CLI."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from layermap import __version__
from layermap.cli.main import app

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    files = {
        "src/app.ts": "import { util } from './util';\n",
        "src/util.ts": "export const util = 1;\n",
        "src/unused.ts": "export const unused = 1;\n",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"layermap v{__version__}" in result.output


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


def test_render_writes_svg_and_summary(project: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "diagram.svg"
    output.parent.mkdir()
    result = runner.invoke(app, ["render", str(project), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Nodes: 5, Edges: 1" in result.output
    assert "Orphan nodes: 1" in result.output
    assert output.read_text(encoding="utf-8").startswith("<svg ")


def test_render_json_and_orphans(project: Path, tmp_path: Path) -> None:
    output = tmp_path / "diagram.svg"
    result = runner.invoke(
        app,
        ["render", str(project), "-o", str(output), "--json", "--orphans", "--view", "layers"],
    )

    assert result.exit_code == 0, result.output
    assert "Found 1 orphan node(s):" in result.output
    assert "  - unused.ts" in result.output
    document = json.loads((tmp_path / "layermap.json").read_text(encoding="utf-8"))
    assert document["edges"] == [{"source": "src/app.ts", "target": "src/util.ts"}]


def test_render_circular_exits_100(tmp_path: Path) -> None:
    dot = tmp_path / "deps.dot"
    dot.write_text('digraph G { "a/x" -> "b/y"; "b/y" -> "a/x"; }', encoding="utf-8")
    result = runner.invoke(app, ["render", str(dot), "-o", str(tmp_path / "g.svg")])

    assert result.exit_code == 100
    assert "Circular dependencies: 2" in result.output


def test_render_list_files(project: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["render", str(project), "-o", str(tmp_path / "g.svg"), "--list-files"]
    )
    assert result.exit_code == 0, result.output
    assert "src/unused.ts" in result.output


def test_render_silent(project: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["render", str(project), "-o", str(tmp_path / "g.svg"), "-s"])
    assert result.exit_code == 0
    assert "Nodes:" not in result.output


def test_missing_input_exits_1(tmp_path: Path) -> None:
    result = runner.invoke(app, ["render", str(tmp_path / "missing.dot")])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_malformed_dot_exits_1(tmp_path: Path) -> None:
    dot = tmp_path / "bad.dot"
    dot.write_text("graph G { a -- b; }", encoding="utf-8")
    result = runner.invoke(app, ["render", str(dot), "-o", str(tmp_path / "g.svg")])
    assert result.exit_code == 1
    assert "no digraph found" in result.output


def test_empty_directory_is_not_an_error(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    result = runner.invoke(app, ["render", str(empty), "-o", str(tmp_path / "g.svg")])
    assert result.exit_code == 0
    assert "No files found" in result.output


def test_unreadable_pub_output_exits_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "pubspec.yaml").write_text("name: app\n", encoding="utf-8")

    class _Process:
        returncode = 0

        async def communicate(self) -> tuple[bytes, bytes]:
            return b"Resolving dependencies...\n{not json", b""

    async def fake_exec(*args, **kwargs):
        return _Process()

    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_exec)
    result = runner.invoke(app, ["render", str(tmp_path), "-o", str(tmp_path / "g.svg")])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "Invalid output" in result.output
