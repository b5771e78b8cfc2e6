"""Configuration for gas tracking runs.

Settings are assembled once per process from defaults, ``GAS_TRACK_*``
environment variables and explicit overrides (CLI options), in increasing
order of precedence:

    GAS_TRACK_THRESHOLD=2.5 GAS_TRACK_EXCLUDE='["Mock*"]' gas-track track
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gas_track.models import Policy
from gas_track.store import DEFAULT_SNAPSHOT_FILE

DEFAULT_REPORT_FILE = Path("gasReporterOutput.json")
DEFAULT_OUTPUT_FILE = Path("gas-track-report.md")


class GasTrackSettings(BaseSettings):
    """Main configuration for gas tracking."""

    model_config = SettingsConfigDict(env_prefix="GAS_TRACK_", frozen=True)

    # Policy
    threshold: float = Field(
        default=5.0,
        ge=0.0,
        allow_inf_nan=False,
        description="Percent increase tolerated before a key fails",
    )
    strict: bool = Field(default=False, description="Fail on any increase at all")
    exclude: list[str] = Field(
        default_factory=list, description="Key patterns to skip (* is a wildcard)"
    )

    # Files
    snapshot_file: Path = Field(
        default=DEFAULT_SNAPSHOT_FILE, description="Baseline snapshot location"
    )
    report_file: Path = Field(
        default=DEFAULT_REPORT_FILE, description="Gas reporter JSON output to read"
    )
    output_file: Path = Field(
        default=DEFAULT_OUTPUT_FILE, description="Markdown comparison report to write"
    )

    # Measurement
    command: str | None = Field(
        default=None, description="Command that runs the tests and writes the gas report"
    )

    @property
    def policy(self) -> Policy:
        return Policy(threshold_percent=self.threshold, strict=self.strict)


def load_settings(**overrides: Any) -> GasTrackSettings:
    """Build settings, letting non-None overrides win over env and defaults."""
    return GasTrackSettings(**{k: v for k, v in overrides.items() if v is not None})
