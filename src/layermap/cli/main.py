"""layermap CLI: dependency diagrams with layers and violations."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from layermap import __version__
from layermap.config.options import Align, EdgeScope, LineEffect, LineStyle, RenderOptions, ViewKind
from layermap.core.constants import EXIT_CIRCULAR
from layermap.core.errors import (
    DependencyCommandError,
    EmptyGraphError,
    GraphStructureError,
    InputFormatError,
    MissingInputError,
)

console = Console()
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="layermap",
    help="layermap: layered dependency diagrams for source trees.",
    no_args_is_help=True,
)

# Phase weights (approximate relative cost of each phase).
# Each phase reports 0.0 -> 1.0; we map that onto a global scale.
_PHASE_WEIGHTS: dict[str, float] = {
    "Reading DOT file": 10,
    "Listing packages": 30,
    "Walking files": 5,
    "Resolving dependencies": 30,
    "Processing structure": 5,
    "Preparing edges": 5,
    "Rendering": 15,
}
_TOTAL_WEIGHT = sum(_PHASE_WEIGHTS.values())


def _configure_logging(debug: bool, silent: bool) -> None:
    """Route stdlib logging through rich."""
    if debug:
        level = logging.DEBUG
    elif silent:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=debug, markup=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"layermap v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(  # noqa: N803
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """layermap: layered dependency diagrams for source trees."""


@app.command()
def render(
    path: Path = typer.Argument(Path("."), help="Source directory or .dot file."),
    view: ViewKind = typer.Option(ViewKind.POSTER, "--view", help="Diagram layout."),
    align: Align = typer.Option(Align.CENTER, "--align", help="Alignment of narrow rows."),
    edges: EdgeScope = typer.Option(EdgeScope.FILES, "--edges", help="Draw edges between files, folders or both."),
    lines: LineStyle = typer.Option(LineStyle.CURVE, "--lines", help="Edge line style."),
    line_effect: LineEffect = typer.Option(LineEffect.FLAT, "--line-effect", help="Edge paint effect."),
    layers: bool = typer.Option(False, "--layers", "-l", help="Show layer bands and numbers."),
    details: bool = typer.Option(False, "--details", "-d", help="Show per-container counts."),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Glob pattern to exclude (repeatable)."),
    externals: bool = typer.Option(False, "--externals", help="Keep transitive packages."),
    dev: bool = typer.Option(False, "--dev", help="Keep dev packages."),
    json_output: bool = typer.Option(False, "--json", help="Also write layermap.json next to the SVG."),
    output: Path = typer.Option(Path("layermap.svg"), "--output", "-o", help="SVG output file."),
    list_files: bool = typer.Option(False, "--list-files", help="Print every scanned file."),
    orphans: bool = typer.Option(False, "--orphans", help="List containers without edges."),
    silent: bool = typer.Option(False, "--silent", "-s", help="Only print errors."),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging."),
) -> None:
    """Render the dependency diagram of a source tree or DOT file."""
    from layermap.core.graph.serialize import write_json
    from layermap.core.ingestion.pipeline import PipelineResult, run_pipeline
    from layermap.core.ingestion.walker import FileEntry
    from layermap.core.layout import render_graph

    _configure_logging(debug, silent)

    options = RenderOptions(
        view=view,
        align=align,
        edges=edges,
        lines=lines,
        line_effect=line_effect,
        layers=layers,
        details=details,
        externals=externals,
        dev=dev,
        exclude=list(exclude or []),
        debug=debug,
    )
    logger.debug("Options: %s", options)

    input_path = path.resolve()
    scanned: list[FileEntry] = []
    start = time.monotonic()

    result: PipelineResult | None = None
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description:<30}"),
        BarColumn(bar_width=30),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
        disable=silent,
    ) as progress:
        task = progress.add_task("Starting...", total=_TOTAL_WEIGHT)

        _phase_done: dict[str, float] = {}  # phase -> weight already credited

        def on_progress(phase: str, pct: float) -> None:
            weight = _PHASE_WEIGHTS.get(phase, 2.0)
            prev = _phase_done.get(phase, 0.0)
            increment = weight * pct - prev
            if increment > 0:
                _phase_done[phase] = weight * pct
                progress.update(task, description=phase, advance=increment)

        try:
            graph, result = run_pipeline(
                input_path,
                options,
                progress_callback=on_progress,
                file_callback=scanned.extend,
            )
        except EmptyGraphError as exc:
            progress.stop()
            console.print(f"[yellow]{exc}[/yellow]")
            raise typer.Exit() from exc
        except (
            InputFormatError,
            MissingInputError,
            GraphStructureError,
            DependencyCommandError,
        ) as exc:
            progress.stop()
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=1) from exc

        on_progress("Rendering", 0.0)
        svg = render_graph(graph, options)
        on_progress("Rendering", 1.0)

    if list_files and not silent:
        for entry in scanned:
            console.print(entry.relative)

    try:
        output.write_text(svg, encoding="utf-8")
        if json_output:
            write_json(graph, output.with_name("layermap.json"))
    except OSError as exc:
        console.print(f"[red]Error:[/red] Cannot write output: {exc}")
        raise typer.Exit(code=1) from exc

    if not silent:
        console.print(f"Nodes: {result.nodes}, Edges: {result.edges}")
        if result.orphans:
            console.print(f"[yellow]Orphan nodes: {result.orphans}[/yellow]")
        if result.up_dependencies:
            console.print(f"[yellow]Upward dependencies: {result.up_dependencies}[/yellow]")
        if result.circular:
            console.print(f"[red]Circular dependencies: {result.circular}[/red]")

        if orphans:
            orphan_nodes = graph.get_orphan_nodes()
            if not orphan_nodes:
                console.print("No orphan nodes found.")
            else:
                console.print(f"Found {len(orphan_nodes)} orphan node(s):")
                for node in orphan_nodes:
                    console.print(f"  - {node.name}")

        console.print(f"[green]Wrote[/green] {output}")
        console.print(f"  Duration:       {time.monotonic() - start:.2f}s")

    if result.circular:
        raise typer.Exit(code=EXIT_CIRCULAR)
