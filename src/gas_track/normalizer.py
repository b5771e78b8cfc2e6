"""Report normalization: raw measurement reports to canonical snapshots.

Supported shapes, tried in order (first match wins):
1. Canonical snapshot mapping ``{"Contract:method": {"gas": n, "calls": m}}``,
   returned unchanged so snapshot files round-trip through ``normalize``.
2. Gas reporter JSON with ``methods`` and ``deployments`` collections, at the
   top level or nested under ``data``.

Anything else raises ``UnrecognizedFormatError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from gas_track.errors import ReportIOError, ReportNotFoundError, UnrecognizedFormatError
from gas_track.models import MetricKey, Snapshot

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("gas_track.normalizer")

ReportParser = Callable[[Any], Snapshot | None]
E = TypeVar("E", bound=BaseModel)


# ---------------------------------------------------------------------------
# Gas reporter entries
# ---------------------------------------------------------------------------


class MethodEntry(BaseModel):
    """One method entry of a gas reporter report."""

    model_config = ConfigDict(extra="ignore")

    key: str | None = None
    contract: str | None = None
    method: str | None = None
    samples: list[NonNegativeInt] = Field(
        default_factory=list, validation_alias=AliasChoices("gasData", "samples")
    )
    calls: NonNegativeInt | None = Field(
        default=None, validation_alias=AliasChoices("numberOfCalls", "calls")
    )


class DeploymentEntry(BaseModel):
    """One deployment entry of a gas reporter report."""

    model_config = ConfigDict(extra="ignore")

    name: str
    samples: list[NonNegativeInt] = Field(
        default_factory=list, validation_alias=AliasChoices("gasData", "samples")
    )


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_canonical(raw: Any) -> Snapshot | None:
    """Accept an already-canonical snapshot mapping unchanged."""
    if isinstance(raw, Snapshot):
        return raw
    if not isinstance(raw, Mapping):
        return None
    if not all(isinstance(v, Mapping) for v in raw.values()):
        return None
    try:
        return Snapshot.model_validate(dict(raw))
    except ValidationError:
        return None


def parse_gas_reporter(raw: Any) -> Snapshot | None:
    """Aggregate a gas reporter report into per-key totals.

    Entries without any samples are omitted; a key never carries zero calls.
    """
    body = _find_report_body(raw)
    if body is None:
        return None

    totals: dict[MetricKey, tuple[int, int]] = {}

    for key, entry in _iter_methods(body.get("methods")):
        calls = entry.calls if entry.calls is not None else len(entry.samples)
        if not entry.samples or calls == 0:
            logger.debug("Skipping method %s with no gas samples", key)
            continue
        _accumulate(totals, key, sum(entry.samples), calls)

    for deployment in _iter_deployments(body.get("deployments")):
        if not deployment.samples:
            logger.debug("Skipping deployment %s with no gas samples", deployment.name)
            continue
        _accumulate(
            totals, f"{deployment.name}:deploy", sum(deployment.samples), len(deployment.samples)
        )

    return Snapshot.from_totals(totals)


PARSERS: list[tuple[str, ReportParser]] = [
    ("canonical", parse_canonical),
    ("gas-reporter", parse_gas_reporter),
]


def normalize(raw: Any) -> Snapshot:
    """Convert a raw measurement report into a Snapshot."""
    for name, parser in PARSERS:
        snapshot = parser(raw)
        if snapshot is not None:
            logger.debug("Report matched %s shape (%d keys)", name, len(snapshot))
            return snapshot
    raise UnrecognizedFormatError(f"Got a top-level {type(raw).__name__}.")


def normalize_file(path: Path) -> Snapshot:
    """Read a JSON report from ``path`` and normalize it."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ReportNotFoundError(path) from None
    except OSError as e:
        raise ReportIOError(path, str(e)) from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise UnrecognizedFormatError(f"Invalid JSON: {e}", source=path) from None

    try:
        return normalize(raw)
    except UnrecognizedFormatError as e:
        raise UnrecognizedFormatError(e.detail, source=path) from None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _find_report_body(raw: Any) -> Mapping[str, Any] | None:
    if not isinstance(raw, Mapping):
        return None
    if "methods" in raw and "deployments" in raw:
        return raw
    data = raw.get("data")
    if isinstance(data, Mapping) and "methods" in data and "deployments" in data:
        return data
    return None


def _iter_methods(methods: Any) -> list[tuple[MetricKey, MethodEntry]]:
    if methods is None:
        return []
    if isinstance(methods, Mapping):
        return [
            (str(key), _validate_entry(MethodEntry, entry, str(key)))
            for key, entry in methods.items()
        ]
    if isinstance(methods, list):
        pairs: list[tuple[MetricKey, MethodEntry]] = []
        for index, raw_entry in enumerate(methods):
            entry = _validate_entry(MethodEntry, raw_entry, f"methods[{index}]")
            pairs.append((_method_key(entry, index), entry))
        return pairs
    raise UnrecognizedFormatError(
        f'"methods" must be an object or an array, got {type(methods).__name__}.'
    )


def _iter_deployments(deployments: Any) -> list[DeploymentEntry]:
    if deployments is None:
        return []
    if isinstance(deployments, Mapping):
        deployments = list(deployments.values())
    if not isinstance(deployments, list):
        raise UnrecognizedFormatError(
            f'"deployments" must be an array, got {type(deployments).__name__}.'
        )
    return [
        _validate_entry(DeploymentEntry, entry, f"deployments[{index}]")
        for index, entry in enumerate(deployments)
    ]


def _validate_entry(model: type[E], raw: Any, where: str) -> E:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise UnrecognizedFormatError(
            f"Invalid {model.__name__} at {where}: {e.error_count()} validation error(s)."
        ) from None


def _method_key(entry: MethodEntry, index: int) -> MetricKey:
    if entry.key:
        return entry.key
    if entry.contract and entry.method:
        return f"{entry.contract}:{entry.method}"
    raise UnrecognizedFormatError(
        f'Method entry methods[{index}] needs a "key" or both "contract" and "method".'
    )


def _accumulate(
    totals: dict[MetricKey, tuple[int, int]], key: MetricKey, total: int, calls: int
) -> None:
    prev_total, prev_calls = totals.get(key, (0, 0))
    totals[key] = (prev_total + total, prev_calls + calls)
