"""Gas tracking data models: samples, snapshots, comparison results, policy.

A Snapshot maps a metric key (``"Token:transfer"``, ``"Token:deploy"``) to the
aggregate gas spent under that key and the number of calls that spent it.
Snapshots are written to disk using the ``{"gas": ..., "calls": ...}`` field
names so that baseline files stay readable and diffable in review.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, RootModel

MetricKey = str


class MetricSample(BaseModel):
    """Aggregate cost observed for one metric key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    total_cost: int = Field(alias="gas", ge=0, strict=True)
    call_count: int = Field(alias="calls", ge=1, strict=True)

    @property
    def average(self) -> float:
        return self.total_cost / self.call_count


class Snapshot(RootModel[dict[MetricKey, MetricSample]]):
    """Ordered mapping of metric key to sample.

    Insertion order is preserved through validation and serialization; the
    diff engine relies on it for report ordering.
    """

    model_config = ConfigDict(frozen=True)

    root: dict[MetricKey, MetricSample] = Field(default_factory=dict)

    @classmethod
    def from_totals(cls, totals: Mapping[MetricKey, tuple[int, int]]) -> Snapshot:
        """Build a snapshot from ``key -> (total_cost, call_count)`` pairs."""
        return cls(
            {
                key: MetricSample(total_cost=total, call_count=calls)
                for key, (total, calls) in totals.items()
            }
        )

    def __iter__(self) -> Iterator[MetricKey]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, key: MetricKey) -> MetricSample:
        return self.root[key]

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __len__(self) -> int:
        return len(self.root)

    def get(self, key: MetricKey) -> MetricSample | None:
        return self.root.get(key)

    def keys(self) -> list[MetricKey]:
        return list(self.root)

    def items(self) -> list[tuple[MetricKey, MetricSample]]:
        return list(self.root.items())

    def to_json(self) -> str:
        """Canonical on-disk encoding: indented JSON with ``gas``/``calls`` fields."""
        return self.model_dump_json(by_alias=True, indent=2) + "\n"


class Verdict(StrEnum):
    """Outcome of classifying a single comparison result."""

    IMPROVED = "improved"
    WARN = "warn"
    REGRESSED = "regressed"

    @property
    def label(self) -> str:
        """Short status label used in tables and reports."""
        return _VERDICT_LABELS[self]


_VERDICT_LABELS = {
    Verdict.IMPROVED: "OK",
    Verdict.WARN: "WARN",
    Verdict.REGRESSED: "FAIL",
}


class ComparisonResult(BaseModel):
    """Per-key comparison between a baseline and a current snapshot.

    ``verdict`` stays ``None`` until the result has been classified.
    """

    model_config = ConfigDict(frozen=True)

    key: MetricKey
    baseline_avg: float
    current_avg: float
    delta_percent: float
    verdict: Verdict | None = None


class Policy(BaseModel):
    """Regression policy applied to every comparison result of a run."""

    model_config = ConfigDict(frozen=True)

    threshold_percent: float = Field(
        default=5.0,
        ge=0.0,
        allow_inf_nan=False,
        description="Percent increase tolerated before a result fails",
    )
    strict: bool = Field(
        default=False,
        description="Fail on any positive delta regardless of threshold",
    )


class GateResult(BaseModel):
    """Classified results of one comparison run and the overall verdict."""

    model_config = ConfigDict(frozen=True)

    results: list[ComparisonResult]
    has_regression: bool

    @property
    def passed(self) -> bool:
        return not self.has_regression

    @property
    def regressions(self) -> list[ComparisonResult]:
        return [r for r in self.results if r.verdict == Verdict.REGRESSED]

    def count(self, verdict: Verdict) -> int:
        return sum(1 for r in self.results if r.verdict == verdict)
