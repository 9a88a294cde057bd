"""Render a finalized Summary for people (text) or tools (JSON)."""

import json
from typing import List

from .aggregator import NO_DATA, Summary


def _num(value: float) -> str:
    """Format *value* without a trailing ``.0`` when it is integral."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def _escape(text: str) -> str:
    """Backslash-escape control and other non-printable characters in *text*."""
    return "".join(
        ch if ch.isprintable() else ch.encode("unicode_escape").decode("ascii")
        for ch in text
    )


def _ms(value: str) -> str:
    if value == NO_DATA:
        return value
    return f"{value} ms"


def format_summary(summary: Summary) -> List[str]:
    """Return a list of lines forming the human-readable report."""
    d = summary.duration_stats
    lines = ["--- k6 summary ---"]
    lines.append("requests:")
    lines.append(f"  total:               {_num(summary.total_http_reqs)}")
    lines.append(f"  failed:              {_num(summary.failed_http_reqs)}")
    lines.append(f"  success rate:        {summary.success_rate_percent:.2f}%")
    lines.append(f"virtual users (max):   {_num(summary.vus_max)}")
    lines.append("response time:")
    lines.append(f"  min:                 {_ms(d.min)}")
    lines.append(f"  max:                 {_ms(d.max)}")
    lines.append(f"  avg:                 {_ms(d.avg)}")
    lines.append(f"  samples:             {d.count}")
    if not summary.checks:
        lines.append("checks: none recorded")
        return lines
    lines.append(f"checks ({len(summary.checks)}):")
    for name, check in summary.checks.items():
        status = "ok" if check.passed == check.total else "FAIL"
        lines.append(
            f"  [{status}] {_escape(name)}: {_num(check.passed)}/{check.total}"
            f" ({check.pass_rate_percent:.2f}%)"
        )
    return lines


def render_text(summary: Summary) -> str:
    return "\n".join(format_summary(summary)) + "\n"


def render_json(summary: Summary) -> str:
    """Return *summary* as an indented JSON document."""
    return json.dumps(summary.to_dict(), indent=2) + "\n"


RENDERERS = {
    "text": render_text,
    "json": render_json,
}
