"""Comparison rendering: Rich console table and Markdown report file."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from gas_track.models import Verdict

if TYPE_CHECKING:
    from pathlib import Path

    from gas_track.models import ComparisonResult, GateResult, Policy, Snapshot

logger = logging.getLogger("gas_track.reporting")

_STYLES = {
    Verdict.IMPROVED: "green",
    Verdict.WARN: "yellow",
    Verdict.REGRESSED: "red",
}

_COLUMNS = ["Function Name", "Old Cost", "New Cost", "Diff (%)", "Status"]


def format_gas(value: float) -> str:
    return f"{value:.0f}"


def format_delta(delta_percent: float) -> str:
    if math.isinf(delta_percent):
        return "+inf%"
    if delta_percent > 0:
        return f"+{delta_percent:.2f}%"
    return f"{delta_percent:.2f}%"


def _status(result: ComparisonResult) -> str:
    return result.verdict.label if result.verdict else "-"


def render_table(gate: GateResult) -> Table:
    """Build a Rich table with one row per comparison result."""
    table = Table(title="Gas Usage Comparison", header_style="cyan")
    table.add_column(_COLUMNS[0])
    table.add_column(_COLUMNS[1], justify="right")
    table.add_column(_COLUMNS[2], justify="right")
    table.add_column(_COLUMNS[3], justify="right")
    table.add_column(_COLUMNS[4])

    for r in gate.results:
        style = _STYLES[r.verdict] if r.verdict else None
        # Unchanged costs keep a plain delta cell
        delta_style = style if r.delta_percent != 0 else None
        table.add_row(
            escape(r.key),
            format_gas(r.baseline_avg),
            format_gas(r.current_avg),
            _styled(format_delta(r.delta_percent), delta_style),
            _styled(_status(r), style),
        )

    return table


def _styled(text: str, style: str | None) -> str:
    return f"[{style}]{text}[/{style}]" if style else text


def render_snapshot(snapshot: Snapshot) -> Table:
    """Build a Rich table listing a snapshot's keys."""
    table = Table(title="Gas Snapshot", header_style="cyan")
    table.add_column("Key")
    table.add_column("Total Gas", justify="right")
    table.add_column("Calls", justify="right")
    table.add_column("Average", justify="right", style="green")

    for key, sample in snapshot.items():
        table.add_row(
            escape(key), str(sample.total_cost), str(sample.call_count), format_gas(sample.average)
        )

    return table


def render_markdown(gate: GateResult, policy: Policy) -> str:
    """Render the comparison as a Markdown table followed by a summary."""
    lines = [
        "# Gas Usage Report",
        "",
        "| " + " | ".join(_COLUMNS) + " |",
        "| " + " | ".join(["---"] * len(_COLUMNS)) + " |",
    ]
    for r in gate.results:
        cells = [
            f"`{r.key}`",
            format_gas(r.baseline_avg),
            format_gas(r.current_avg),
            format_delta(r.delta_percent),
            _status(r),
        ]
        lines.append("| " + " | ".join(cells) + " |")

    if not gate.results:
        lines.append("| _no comparable keys_ | | | | |")

    lines.extend(
        [
            "",
            "| metric | value |",
            "| --- | --- |",
            f"| improved | {gate.count(Verdict.IMPROVED)} |",
            f"| warn | {gate.count(Verdict.WARN)} |",
            f"| regressed | {gate.count(Verdict.REGRESSED)} |",
            f"| threshold | {policy.threshold_percent:.2f}% |",
            f"| strict | {str(policy.strict).lower()} |",
            f"| verdict | {'pass' if gate.passed else 'fail'} |",
        ]
    )
    return "\n".join(lines) + "\n"


def write_report(path: Path, gate: GateResult, policy: Policy) -> Path:
    """Write the Markdown report to ``path``, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_markdown(gate, policy), encoding="utf-8")
    logger.info("Wrote gas report to %s", path)
    return path
