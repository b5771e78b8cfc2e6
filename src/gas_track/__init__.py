"""gas-track - gas usage regression tracking for smart contract test suites.

Quick Start:
    from pathlib import Path

    from gas_track.normalizer import normalize_file
    from gas_track.pipeline import check
    from gas_track.models import Policy
    from gas_track.store import SnapshotStore

    baseline = SnapshotStore(Path(".gas-snapshot.json")).load()
    current = normalize_file(Path("gasReporterOutput.json"))

    gate = check(baseline, current, Policy(threshold_percent=5.0), exclusions=["Mock*"])
    if gate.has_regression:
        ...
"""

__version__ = "0.1.0"
