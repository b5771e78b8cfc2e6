"""Unit tests for the snapshot/track pipeline and measurement command."""

import shlex
import sys

import pytest

from gas_track import pipeline
from gas_track.config import load_settings
from gas_track.errors import (
    MeasurementCommandError,
    ReportNotFoundError,
    SnapshotNotFoundError,
    UnrecognizedFormatError,
)
from gas_track.models import Verdict
from gas_track.pipeline import create_snapshot, run_gate, run_measurement
from gas_track.store import load_snapshot, save_snapshot


@pytest.fixture
def settings_for(tmp_path):
    def _settings(**overrides):
        overrides.setdefault("snapshot_file", tmp_path / ".gas-snapshot.json")
        overrides.setdefault("report_file", tmp_path / "gasReporterOutput.json")
        return load_settings(**overrides)

    return _settings


class TestCreateSnapshot:
    def test_normalizes_and_saves(self, settings_for, write_json, gas_reporter_report):
        write_json("gasReporterOutput.json", gas_reporter_report)
        settings = settings_for()

        snapshot = create_snapshot(settings)

        assert load_snapshot(settings.snapshot_file) == snapshot
        assert "EnglishAuction:deploy" in snapshot

    def test_missing_report(self, settings_for):
        with pytest.raises(ReportNotFoundError):
            create_snapshot(settings_for())

    def test_unrecognized_report_writes_nothing(self, settings_for, write_json):
        write_json("gasReporterOutput.json", {"gas": "lots"})
        settings = settings_for()
        with pytest.raises(UnrecognizedFormatError):
            create_snapshot(settings)
        assert not settings.snapshot_file.exists()


class TestRunGate:
    def test_passes_with_small_increase(
        self, settings_for, write_json, baseline_snapshot, current_snapshot
    ):
        settings = settings_for()
        save_snapshot(settings.snapshot_file, baseline_snapshot)
        write_json("gasReporterOutput.json", current_snapshot.model_dump(by_alias=True))

        gate = run_gate(settings)

        assert gate.passed
        assert gate.results[0].verdict == Verdict.WARN

    def test_fails_with_lower_threshold(
        self, settings_for, write_json, baseline_snapshot, current_snapshot
    ):
        settings = settings_for(threshold=1.0)
        save_snapshot(settings.snapshot_file, baseline_snapshot)
        write_json("gasReporterOutput.json", current_snapshot.model_dump(by_alias=True))

        gate = run_gate(settings)

        assert gate.has_regression
        assert [r.key for r in gate.regressions] == ["Token:transfer"]

    def test_exclusions_from_settings(
        self, settings_for, write_json, baseline_snapshot, current_snapshot
    ):
        settings = settings_for(threshold=1.0, exclude=["*:transfer"])
        save_snapshot(settings.snapshot_file, baseline_snapshot)
        write_json("gasReporterOutput.json", current_snapshot.model_dump(by_alias=True))

        gate = run_gate(settings)

        assert [r.key for r in gate.results] == ["Token:deploy"]
        assert gate.passed

    def test_missing_baseline_skips_measurement(self, settings_for, monkeypatch):
        calls = []
        monkeypatch.setattr(pipeline, "run_measurement", calls.append)

        with pytest.raises(SnapshotNotFoundError):
            run_gate(settings_for(command="npx hardhat test"))

        assert calls == []

    def test_runs_command_before_reading_report(
        self, settings_for, write_json, baseline_snapshot, monkeypatch
    ):
        settings = settings_for(command="npx hardhat test")
        save_snapshot(settings.snapshot_file, baseline_snapshot)

        def fake_measurement(command):
            assert command == "npx hardhat test"
            write_json("gasReporterOutput.json", baseline_snapshot.model_dump(by_alias=True))

        monkeypatch.setattr(pipeline, "run_measurement", fake_measurement)

        gate = run_gate(settings)

        assert gate.passed
        assert all(r.delta_percent == 0 for r in gate.results)


class TestRunMeasurement:
    def test_success(self):
        run_measurement(shlex.join([sys.executable, "-c", "pass"]))

    def test_non_zero_exit(self):
        command = shlex.join([sys.executable, "-c", "import sys; sys.exit(3)"])
        with pytest.raises(MeasurementCommandError, match="exit code 3"):
            run_measurement(command)

    def test_missing_executable(self):
        with pytest.raises(MeasurementCommandError, match="not found"):
            run_measurement("gas-track-no-such-binary --flag")

    def test_empty_command(self):
        with pytest.raises(MeasurementCommandError, match="empty command"):
            run_measurement("   ")
