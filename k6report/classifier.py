"""Classify decoded k6 JSON records into the metric kinds the aggregator folds."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class MetricKind(Enum):
    """How a metric's Points are accumulated."""

    COUNTER = "counter"  # summed
    RATE = "rate"  # per-request 0/1, summed
    DISTRIBUTION = "distribution"  # every sample retained
    GAUGE = "gauge"  # running maximum


# Metric name -> kind, for every Point metric carrying a plain numeric value.
_METRIC_KINDS: Dict[str, MetricKind] = {
    "http_reqs": MetricKind.COUNTER,
    "http_req_failed": MetricKind.RATE,
    "http_req_duration": MetricKind.DISTRIBUTION,
    "vus_max": MetricKind.GAUGE,
}

CHECKS_METRIC = "checks"


@dataclass(frozen=True)
class MetricPoint:
    """A numeric Point for one of the metrics in ``_METRIC_KINDS``."""

    kind: MetricKind
    metric: str
    value: float


@dataclass(frozen=True)
class CheckPoint:
    """One evaluation of a named check."""

    name: str
    passed: float
    total: int = 1


class Ignore:
    """Marker for records that match no recognized shape."""

    _instance: Optional["Ignore"] = None

    def __new__(cls) -> "Ignore":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "IGNORE"


IGNORE = Ignore()

ClassifiedEvent = Union[MetricPoint, CheckPoint]


def _as_float(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or None if it is not a JSON number.

    Booleans are not numbers here.  Integers too large for a float are
    rejected rather than raising.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        result = float(value)
    except OverflowError:
        return None
    if not math.isfinite(result):
        return None
    return result


def _passed_value(value: Any) -> float:
    """Map a check Point's value to the amount it adds to ``passed``.

    ``true`` counts as 1, any other number is added as-is, and
    ``false``, absent, ``null``, non-numeric or unrepresentable values
    count as 0.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    number = _as_float(value)
    return 0.0 if number is None else number


def classify(record: Any) -> Union[ClassifiedEvent, Ignore]:
    """Return the classified event for *record*, or ``IGNORE``.

    Never raises: a record of any type or shape that is not a recognized
    k6 Point is an ordinary ``IGNORE`` outcome.
    """
    if not isinstance(record, dict) or record.get("type") != "Point":
        return IGNORE
    data = record.get("data")
    if not isinstance(data, dict):
        return IGNORE
    metric = record.get("metric")

    if metric == CHECKS_METRIC:
        tags = data.get("tags")
        if not isinstance(tags, dict):
            return IGNORE
        name = tags.get("check")
        if not isinstance(name, str) or not name:
            return IGNORE
        return CheckPoint(name=name, passed=_passed_value(data.get("value")))

    kind = _METRIC_KINDS.get(metric) if isinstance(metric, str) else None
    if kind is None:
        return IGNORE
    value = _as_float(data.get("value"))
    if value is None:
        return IGNORE
    return MetricPoint(kind=kind, metric=metric, value=value)
