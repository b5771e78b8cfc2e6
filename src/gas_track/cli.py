"""Typer CLI for gas-track.

Commands:
  snapshot  Measure gas usage and store it as the baseline
  track     Compare current gas usage against the baseline (exit 1 on regression)
  show      Print the stored baseline
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 Typer evaluates type hints at runtime
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from gas_track.config import GasTrackSettings, load_settings
from gas_track.errors import GasTrackError
from gas_track.pipeline import create_snapshot, run_gate
from gas_track.reporting import render_snapshot, render_table, write_report
from gas_track.store import SnapshotStore

app = typer.Typer(
    name="gas-track",
    help="Track smart contract gas usage against a stored baseline",
    no_args_is_help=True,
)
console = Console()

ReportOption = Annotated[
    Path | None,
    typer.Option("--report", "-r", help="Gas reporter JSON output to read"),
]
SnapshotOption = Annotated[
    Path | None,
    typer.Option("--snapshot", "-s", help="Baseline snapshot file"),
]
CommandOption = Annotated[
    str | None,
    typer.Option("--command", "-c", help="Command that runs the tests and writes the report"),
]


def _settings(**overrides: object) -> GasTrackSettings:
    try:
        return load_settings(**overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _fail(error: GasTrackError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    return typer.Exit(1)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Gas usage regression tracking."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def snapshot(
    report: ReportOption = None,
    snapshot_file: SnapshotOption = None,
    command: CommandOption = None,
) -> None:
    """Measure gas usage and save it as the new baseline."""
    settings = _settings(report_file=report, snapshot_file=snapshot_file, command=command)

    try:
        result = create_snapshot(settings)
    except GasTrackError as e:
        raise _fail(e) from None

    console.print(
        f"[green]✓[/green] Snapshot with {len(result)} keys saved to {settings.snapshot_file}"
    )


@app.command()
def track(
    report: ReportOption = None,
    snapshot_file: SnapshotOption = None,
    command: CommandOption = None,
    threshold: Annotated[
        float | None,
        typer.Option("--threshold", "-t", help="Percent increase tolerated before failing"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail on any increase, ignoring the threshold"),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-e", help="Key pattern to skip (repeatable, * wildcard)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Markdown report file"),
    ] = None,
) -> None:
    """Compare current gas usage against the baseline snapshot."""
    settings = _settings(
        report_file=report,
        snapshot_file=snapshot_file,
        command=command,
        threshold=threshold,
        strict=strict or None,
        exclude=exclude or None,
        output_file=output,
    )

    try:
        gate = run_gate(settings)
    except GasTrackError as e:
        raise _fail(e) from None

    console.print(render_table(gate))

    try:
        write_report(settings.output_file, gate, settings.policy)
    except OSError as e:
        console.print(
            f"[red]Error:[/red] Could not write report {settings.output_file}: {escape(str(e))}"
        )
        raise typer.Exit(1) from None

    if gate.has_regression:
        console.print("\n[red]Gas regression detected above threshold![/red]")
        raise typer.Exit(1)
    console.print("\n[green]Gas check passed![/green]")


@app.command()
def show(snapshot_file: SnapshotOption = None) -> None:
    """Print the stored baseline snapshot."""
    settings = _settings(snapshot_file=snapshot_file)

    try:
        baseline = SnapshotStore(settings.snapshot_file).load()
    except GasTrackError as e:
        raise _fail(e) from None

    console.print(render_snapshot(baseline))


if __name__ == "__main__":
    app()
