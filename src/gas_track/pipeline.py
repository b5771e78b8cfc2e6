"""Batch pipeline: measure, normalize, load baseline, compare, classify.

Each stage consumes the previous stage's output completely before the next
starts. The baseline is loaded before anything is measured, so a missing
snapshot aborts the run without running the measurement command.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import TYPE_CHECKING

from gas_track.comparison import compare
from gas_track.errors import MeasurementCommandError
from gas_track.models import Verdict
from gas_track.normalizer import normalize_file
from gas_track.policy import evaluate
from gas_track.store import SnapshotStore

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gas_track.config import GasTrackSettings
    from gas_track.models import GateResult, Policy, Snapshot

logger = logging.getLogger("gas_track.pipeline")


def run_measurement(command: str) -> None:
    """Run the measurement command with inherited I/O, blocking until it exits."""
    argv = shlex.split(command)
    if not argv:
        raise MeasurementCommandError(argv, "empty command")

    logger.info("Running measurement command: %s", command)
    try:
        subprocess.run(argv, check=True)  # noqa: S603
    except FileNotFoundError:
        raise MeasurementCommandError(argv, f"{argv[0]} not found") from None
    except subprocess.CalledProcessError as exc:
        raise MeasurementCommandError(argv, f"exit code {exc.returncode}") from None


def measure(settings: GasTrackSettings) -> Snapshot:
    """Produce a fresh snapshot from the measurement provider's report."""
    if settings.command:
        run_measurement(settings.command)
    return normalize_file(settings.report_file)


def check(
    baseline: Snapshot,
    current: Snapshot,
    policy: Policy,
    exclusions: Iterable[str] = (),
) -> GateResult:
    """Compare two snapshots and classify the results."""
    return evaluate(compare(baseline, current, exclusions), policy)


def create_snapshot(settings: GasTrackSettings) -> Snapshot:
    """Measure and store the result as the new baseline."""
    snapshot = measure(settings)
    SnapshotStore(settings.snapshot_file).save(snapshot)
    return snapshot


def run_gate(settings: GasTrackSettings) -> GateResult:
    """Compare a fresh measurement against the stored baseline."""
    baseline = SnapshotStore(settings.snapshot_file).load()
    current = measure(settings)
    gate = check(baseline, current, settings.policy, settings.exclude)

    logger.info(
        "Compared %d keys: %d improved, %d warn, %d regressed",
        len(gate.results),
        gate.count(Verdict.IMPROVED),
        gate.count(Verdict.WARN),
        gate.count(Verdict.REGRESSED),
    )
    return gate
