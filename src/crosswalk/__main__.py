"""CLI entry point for crosswalk."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import closing
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from crosswalk import __version__
from crosswalk.config import ConfigurationError, Settings, load_run_configuration
from crosswalk.diagnostics import (
    DiagnosticSink,
    MarkerStoreError,
    NullMarkerStore,
    SqliteMarkerStore,
    open_marker_store,
)
from crosswalk.frontend import UnitDocumentError, load_unit
from crosswalk.pipeline import (
    BatchReport,
    BatchRunner,
    DirectoryOutputSink,
    PipelineOrchestrator,
    StreamOutputSink,
    UnitFailure,
)
from crosswalk.symbols import SymbolConflictError, SymbolResolver

# Rendered units may go to stdout, so status output goes to stderr
console = Console(stderr=True)
settings = Settings()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Log level",
)
def cli(log_level: str):
    """crosswalk - translate parsed source units into target source."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("units", nargs=-1, required=True, type=click.Path())
@click.option("--config", "config_path", type=click.Path(), help="YAML configuration file")
@click.option("--header", default=None, help="Header text written before each unit")
@click.option(
    "--header-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read the header from a file",
)
@click.option(
    "--ignore-errors/--no-ignore-errors",
    default=None,
    help="Translate units even when they have parse errors",
)
@click.option(
    "--emit-markers/--no-emit-markers",
    default=None,
    help="Persist diagnostics as markers",
)
@click.option(
    "--markers-db",
    type=click.Path(),
    help=f"Marker database (default: {settings.markers_db})",
)
@click.option(
    "--marker-failures",
    type=click.Choice(["log", "raise"]),
    default=None,
    help="On marker persistence failure: log and continue, or stop",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    help="Write one file per unit here instead of stdout",
)
@click.option(
    "--source-root",
    type=click.Path(),
    help="Strip this prefix from unit paths when naming output files",
)
@click.option("--fail-fast", is_flag=True, help="Stop at the first failed unit")
@click.option("--report", "report_path", type=click.Path(), help="Write a JSON run report")
def translate(
    units: tuple[str, ...],
    config_path: str | None,
    header: str | None,
    header_file: str | None,
    ignore_errors: bool | None,
    emit_markers: bool | None,
    markers_db: str | None,
    marker_failures: str | None,
    output_dir: str | None,
    source_root: str | None,
    fail_fast: bool,
    report_path: str | None,
):
    """Translate parsed unit documents.

    Example: crosswalk translate build/ast/*.json -o out/
    """
    try:
        config = load_run_configuration(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if header_file:
        header = Path(header_file).read_text(encoding="utf-8")
    try:
        config = config.with_overrides(
            header=header,
            ignore_errors=ignore_errors,
            emit_markers=emit_markers,
            marker_failure_policy=marker_failures,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if config.emit_markers:
        marker_store = open_marker_store(markers_db or settings.markers_db)
    else:
        marker_store = NullMarkerStore()

    if output_dir:
        output = DirectoryOutputSink(
            output_dir, extension=settings.output_extension, source_root=source_root
        )
    else:
        output = StreamOutputSink(sys.stdout)

    orchestrator = PipelineOrchestrator(
        config,
        resolver=SymbolResolver(),
        sink=DiagnosticSink(config, marker_store),
        output=output,
    )

    report = BatchReport()
    loaded = []
    for unit_path in units:
        try:
            loaded.append(load_unit(unit_path))
        except UnitDocumentError as e:
            console.print(f"[red]Error: {e}[/red]")
            report.failures.append(
                UnitFailure(path=unit_path, reason=str(e), kind="load_failed")
            )

    try:
        BatchRunner(orchestrator, fail_fast=fail_fast).run(loaded, report)
    except SymbolConflictError as e:
        console.print(f"[bold red]Internal error: {e}[/bold red]")
        sys.exit(2)
    except MarkerStoreError as e:
        console.print(f"[bold red]Marker persistence failed: {e}[/bold red]")
        sys.exit(2)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted; completed units were kept[/yellow]")
        sys.exit(130)
    finally:
        if isinstance(marker_store, SqliteMarkerStore):
            marker_store.close()

    _print_summary(report)

    if report_path:
        Path(report_path).write_text(json.dumps(report.to_dict(), indent=2))
        console.print(f"[green]✓ Report written to {report_path}[/green]")

    if not report.ok:
        sys.exit(1)


def _print_summary(report: BatchReport) -> None:
    table = Table(title="Translation summary")
    table.add_column("Unit")
    table.add_column("State")
    table.add_column("Problems", justify="right")

    for result in report.results:
        state = "suppressed" if result.suppressed else result.state.value
        color = {"done": "green", "suppressed": "cyan", "aborted": "red"}.get(
            state, "white"
        )
        table.add_row(result.path, f"[{color}]{state}[/{color}]", str(len(result.problems)))
    for failure in report.failures:
        if failure.kind != "aborted":
            table.add_row(failure.path, f"[red]{failure.kind}[/red]", "-")

    console.print(table)
    console.print(
        f"[bold]{len(report.rendered)} rendered, {len(report.suppressed)} suppressed, "
        f"{len(report.failures)} failed[/bold]"
    )


@cli.group()
def markers():
    """Inspect persisted diagnostics."""
    pass


@markers.command("show")
@click.argument("unit_path")
@click.option("--markers-db", type=click.Path(), help="Marker database")
def markers_show(unit_path: str, markers_db: str | None):
    """Show markers recorded for a unit."""
    with closing(open_marker_store(markers_db or settings.markers_db)) as store:
        found = store.markers_for(unit_path)
    if not found:
        console.print(f"[yellow]No markers for {unit_path}[/yellow]")
        return

    table = Table(title=unit_path)
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Message")
    for marker in found:
        table.add_row(str(marker.line), marker.severity.value, marker.message)
    console.print(table)


@markers.command("clear")
@click.argument("unit_path")
@click.option("--markers-db", type=click.Path(), help="Marker database")
def markers_clear(unit_path: str, markers_db: str | None):
    """Remove markers recorded for a unit."""
    with closing(open_marker_store(markers_db or settings.markers_db)) as store:
        store.clear_markers(unit_path)
    console.print(f"[green]✓ Markers cleared for {unit_path}[/green]")


@markers.command("list")
@click.option("--markers-db", type=click.Path(), help="Marker database")
def markers_list(markers_db: str | None):
    """List units that have markers."""
    with closing(open_marker_store(markers_db or settings.markers_db)) as store:
        unit_paths = store.unit_paths()
    for unit_path in unit_paths:
        console.print(unit_path)


if __name__ == "__main__":
    cli()
