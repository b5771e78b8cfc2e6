"""Regression policy: assigns verdicts and decides the overall run outcome.

Rules, per result:
- delta <= 0                              → IMPROVED
- delta > 0 and (strict or delta > limit) → REGRESSED (fails the run)
- delta > 0 otherwise                     → WARN
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gas_track.models import ComparisonResult, GateResult, Policy, Verdict

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger("gas_track.policy")


def verdict_for(delta_percent: float, policy: Policy) -> Verdict:
    if delta_percent <= 0:
        return Verdict.IMPROVED
    if policy.strict or delta_percent > policy.threshold_percent:
        return Verdict.REGRESSED
    return Verdict.WARN


def classify(result: ComparisonResult, policy: Policy) -> ComparisonResult:
    """Return a copy of ``result`` carrying its verdict under ``policy``."""
    return result.model_copy(update={"verdict": verdict_for(result.delta_percent, policy)})


def evaluate(results: Iterable[ComparisonResult], policy: Policy) -> GateResult:
    """Classify every result, preserving order, and compute the run verdict."""
    classified = [classify(r, policy) for r in results]
    has_regression = any(r.verdict == Verdict.REGRESSED for r in classified)

    for r in classified:
        if r.verdict == Verdict.REGRESSED:
            logger.info(
                "Regression: %s %+.2f%% (threshold %.2f%%, strict=%s)",
                r.key,
                r.delta_percent,
                policy.threshold_percent,
                policy.strict,
            )

    return GateResult(results=classified, has_regression=has_regression)
