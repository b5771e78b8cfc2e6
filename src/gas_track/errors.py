"""Error taxonomy for gas tracking runs.

Every error here is terminal for the current run: the CLI reports the message
and exits non-zero. A detected regression is not an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class GasTrackError(Exception):
    """Base class for fatal gas tracking errors."""


class UnrecognizedFormatError(GasTrackError):
    """Raised when a measurement report matches none of the supported shapes."""

    def __init__(self, detail: str | None = None, *, source: Path | str | None = None) -> None:
        self.detail = detail
        self.source = source
        where = f" in {source}" if source else ""
        lines = [f"Unrecognized gas report format{where}."]
        if detail:
            lines.append(detail)
        lines.extend(
            [
                "Expected one of:",
                '  - a snapshot mapping: {"Contract:method": {"gas": <total>, "calls": <count>}}',
                '  - a gas reporter JSON report with "methods" and "deployments"'
                ' (optionally nested under "data")',
                "Enable JSON output in your gas reporter, e.g. in hardhat.config:",
                "  gasReporter: { enabled: true, outputJSON: true,"
                ' outputJSONFile: "gasReporterOutput.json" }',
            ]
        )
        super().__init__("\n".join(lines))


class SnapshotNotFoundError(GasTrackError):
    """Raised when the baseline snapshot file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Snapshot not found: {path}. Run 'gas-track snapshot' first to create a baseline."
        )


class ReportNotFoundError(GasTrackError):
    """Raised when the measurement report file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Gas report not found: {path}. Run your tests with the gas reporter enabled"
            " (or pass --command) before reading the report."
        )


class ReportIOError(GasTrackError):
    """Raised when the measurement report exists but cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read gas report {path}: {reason}")


class CorruptSnapshotError(GasTrackError):
    """Raised when the baseline snapshot exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            f"Snapshot {path} is corrupt: {reason}. Recreate it with 'gas-track snapshot'."
        )


class SnapshotIOError(GasTrackError):
    """Raised when a snapshot cannot be read from or written to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Snapshot I/O failed for {path}: {reason}")


class MeasurementCommandError(GasTrackError):
    """Raised when the measurement command cannot start or exits non-zero."""

    def __init__(self, command: list[str], reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Measurement command '{' '.join(command)}' failed: {reason}")
