"""Fold a stream of k6 records into an immutable run summary."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Context, Decimal
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping

from .classifier import CheckPoint, Ignore, MetricKind, MetricPoint, classify
from .errors import AggregatorFinalizedError

# Shown instead of min/max/avg when no duration samples were seen.
NO_DATA = "n/a"
_CENTS = Decimal("0.01")
# Wide enough to hold any finite float to the cent.
_FIXED_CONTEXT = Context(prec=330)


@dataclass(frozen=True)
class DurationStats:
    """Response-time statistics in milliseconds, formatted to two decimals."""

    count: int
    min: str
    max: str
    avg: str


@dataclass(frozen=True)
class CheckSummary:
    total: int
    passed: float
    pass_rate_percent: float


@dataclass(frozen=True)
class Summary:
    """Finalized result of one aggregation run."""

    total_http_reqs: float
    failed_http_reqs: float
    duration_stats: DurationStats
    checks: Mapping[str, CheckSummary]
    vus_max: float

    @property
    def failure_rate_percent(self) -> float:
        """Failed share of all requests; 0 when no traffic was observed."""
        if self.total_http_reqs == 0:
            return 0.0
        return self.failed_http_reqs / self.total_http_reqs * 100

    @property
    def success_rate_percent(self) -> float:
        return 100.0 - self.failure_rate_percent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_http_reqs": self.total_http_reqs,
            "failed_http_reqs": self.failed_http_reqs,
            "duration_stats": {
                "count": self.duration_stats.count,
                "min": self.duration_stats.min,
                "max": self.duration_stats.max,
                "avg": self.duration_stats.avg,
            },
            "checks": {
                name: {
                    "total": c.total,
                    "passed": c.passed,
                    "pass_rate_percent": c.pass_rate_percent,
                }
                for name, c in self.checks.items()
            },
            "vus_max": self.vus_max,
        }


@dataclass
class _CheckTally:
    total: int = 0
    passed: float = 0.0


@dataclass
class Aggregator:
    """Running state for a single pass over a k6 results log.

    Records are folded one at a time in arrival order.  Only duration
    samples are retained; every other metric is reduced as it arrives.
    An instance is single-use: once :meth:`finalize` has run it rejects
    further input.
    """

    total_requests: float = 0.0
    failed_requests: float = 0.0
    duration_samples: List[float] = field(default_factory=list)
    check_stats: Dict[str, _CheckTally] = field(default_factory=dict)
    vus_max: float = 0.0
    _finalized: bool = field(default=False, repr=False)

    def feed(self, record: Any) -> None:
        """Classify *record* and fold it into the running state."""
        self._ensure_open()
        event = classify(record)
        if isinstance(event, Ignore):
            return
        if isinstance(event, CheckPoint):
            self._fold_check(event)
        else:
            self._FOLDERS[event.kind](self, event)

    def _fold_counter(self, event: MetricPoint) -> None:
        self.total_requests += event.value

    def _fold_rate(self, event: MetricPoint) -> None:
        # Sum of per-request 0/1 values; equals the failure count only when
        # every Point is exactly 0 or 1.
        self.failed_requests += event.value

    def _fold_distribution(self, event: MetricPoint) -> None:
        self.duration_samples.append(event.value)

    def _fold_gauge(self, event: MetricPoint) -> None:
        self.vus_max = max(self.vus_max, event.value)

    def _fold_check(self, event: CheckPoint) -> None:
        tally = self.check_stats.get(event.name)
        if tally is None:
            tally = self.check_stats[event.name] = _CheckTally()
        tally.total += event.total
        tally.passed += event.passed

    _FOLDERS = {
        MetricKind.COUNTER: _fold_counter,
        MetricKind.RATE: _fold_rate,
        MetricKind.DISTRIBUTION: _fold_distribution,
        MetricKind.GAUGE: _fold_gauge,
    }

    def finalize(self) -> Summary:
        """Compute derived statistics and return the immutable Summary."""
        self._ensure_open()
        self._finalized = True
        checks = {
            name: CheckSummary(
                total=tally.total,
                passed=tally.passed,
                pass_rate_percent=_pass_rate(tally),
            )
            for name, tally in self.check_stats.items()
        }
        return Summary(
            total_http_reqs=self.total_requests,
            failed_http_reqs=self.failed_requests,
            duration_stats=_duration_stats(self.duration_samples),
            checks=MappingProxyType(checks),
            vus_max=self.vus_max,
        )

    def run(self, records: Iterable[Any]) -> Summary:
        """Drain *records* and return the finalized Summary."""
        for record in records:
            self.feed(record)
        return self.finalize()

    def _ensure_open(self) -> None:
        if self._finalized:
            raise AggregatorFinalizedError("aggregator has already been finalized")


def _pass_rate(tally: _CheckTally) -> float:
    if tally.total <= 0:
        return 0.0
    return tally.passed / tally.total * 100


def _fixed(value: float) -> str:
    """Format *value* to two decimals, rounding exact ties away from zero."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    # -0.0 prints as 0.00
    exact = Decimal(value or 0.0)
    return str(exact.quantize(_CENTS, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT))


def _duration_stats(samples: List[float]) -> DurationStats:
    if not samples:
        return DurationStats(count=0, min=NO_DATA, max=NO_DATA, avg=NO_DATA)
    return DurationStats(
        count=len(samples),
        min=_fixed(min(samples)),
        max=_fixed(max(samples)),
        avg=_fixed(sum(samples) / len(samples)),
    )


def aggregate(records: Iterable[Any]) -> Summary:
    """Run a fresh :class:`Aggregator` over *records*."""
    return Aggregator().run(records)
