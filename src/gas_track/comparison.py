"""Snapshot comparison: per-key average gas deltas between two snapshots."""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING

from gas_track.models import ComparisonResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gas_track.models import MetricKey, Snapshot

logger = logging.getLogger("gas_track.comparison")


def compile_exclusions(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile exclusion patterns into anchored regexes.

    ``*`` matches any run of characters; everything else is literal, so
    signatures like ``Vault:deposit(uint256[])`` can be excluded verbatim.
    """
    return [
        re.compile(".*".join(re.escape(part) for part in pattern.split("*")))
        for pattern in patterns
    ]


def is_excluded(key: MetricKey, exclusions: Iterable[re.Pattern[str]]) -> bool:
    return any(rule.fullmatch(key) for rule in exclusions)


def compare(
    baseline: Snapshot,
    current: Snapshot,
    exclusions: Iterable[str] = (),
) -> list[ComparisonResult]:
    """Compare average gas per key, in baseline order.

    Keys matching an exclusion pattern are skipped. Keys missing from
    ``current`` (removed or renamed methods) are omitted rather than reported,
    and keys that only exist in ``current`` have no baseline and are ignored.
    Results are returned unclassified.
    """
    rules = compile_exclusions(exclusions)
    results: list[ComparisonResult] = []

    for key, old in baseline.items():
        if is_excluded(key, rules):
            logger.debug("Excluded %s", key)
            continue

        new = current.get(key)
        if new is None:
            logger.debug("Skipping %s: not present in current run", key)
            continue

        baseline_avg = old.average
        current_avg = new.average
        results.append(
            ComparisonResult(
                key=key,
                baseline_avg=baseline_avg,
                current_avg=current_avg,
                delta_percent=_delta_percent(baseline_avg, current_avg),
            )
        )

    return results


def _delta_percent(old: float, new: float) -> float:
    """Percentage change from old to new; a zero baseline yields 0 or +inf."""
    if old == 0:
        return 0.0 if new == 0 else math.inf
    return (new - old) / old * 100
