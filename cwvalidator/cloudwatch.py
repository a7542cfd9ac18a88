"""CloudWatch dimensions and metric data queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from cwvalidator.config import MetricDimension, Statistics

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    """Double-quote a string, escaping specials and non-printable characters."""
    parts = []
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        elif ord(char) < 0x100:
            parts.append(f"\\x{ord(char):02x}")
        elif ord(char) < 0x10000:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(f"\\U{ord(char):08x}")
    return '"' + "".join(parts) + '"'


@dataclass(frozen=True)
class Dimension:
    """A CloudWatch metric dimension; either part may be absent."""

    name: str | None
    value: str | None


@dataclass(frozen=True)
class MetricQuery:
    """A single metric data query."""

    id: str
    namespace: str
    metric_name: str
    dimensions: tuple[Dimension, ...]
    period: int
    stat: Statistics


def format_dimensions(dimensions: Iterable[Dimension]) -> str:
    """Describe the dimensions that have both a name and a value, for log messages."""
    return "".join(
        f" dimension(name={_quote(d.name)}, val={_quote(d.value)}) "
        for d in dimensions
        if d.name is not None and d.value is not None
    )


def build_dimensions(
    instance_id: str, metric_dimensions: Iterable[MetricDimension]
) -> list[Dimension]:
    """Return the InstanceId dimension followed by the configured dimensions."""
    return [Dimension("InstanceId", instance_id)] + [
        Dimension(d.name, d.value) for d in metric_dimensions
    ]


def build_metric_query(
    metric_name: str,
    namespace: str,
    dimensions: Iterable[Dimension],
    period: int,
    stat: Statistics | str,
) -> MetricQuery:
    """Build a query whose id is the lower-cased metric name."""
    return MetricQuery(
        id=metric_name.lower(),
        namespace=namespace,
        metric_name=metric_name,
        dimensions=tuple(dimensions),
        period=int(period),
        stat=Statistics(stat),
    )