"""Checks shared by the basic validator: log line counts and metric values."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from cwvalidator.cloudwatch import Dimension, MetricQuery, build_metric_query
from cwvalidator.config import Statistics, ValidationError

logger = logging.getLogger(__name__)

METRIC_ERROR_BOUND = 0.1
WINDOWS_EVENTS_SOURCE = "WindowsEvents"


def count_matching_lines(
    logs: Iterable[str], log_line: str, log_level: str, log_source: str
) -> int:
    """Count the log entries that contain the expected line.

    For Windows event logs an entry must also contain the log level, and
    nothing matches when no level is given.
    """
    if log_source == WINDOWS_EVENTS_SOURCE:
        if not log_level:
            return 0
        return sum(1 for entry in logs if log_line in entry and log_level in entry)
    return sum(1 for entry in logs if log_line in entry)


def logs_satisfied(
    logs: Sequence[str],
    log_line: str,
    log_level: str,
    log_source: str,
    expected_lines: int,
) -> bool:
    """True if there are logs and at least the expected number of them match."""
    entries = list(logs)
    if not entries:
        return False
    actual = count_matching_lines(entries, log_line, log_level, log_source)
    logger.info(
        "Found %d log lines matching %r, expected at least %d",
        actual,
        log_line,
        expected_lines,
    )
    return expected_lines <= actual


def check_metric_value(metric_name: str, expected: float, actual: float) -> tuple[float, float]:
    """Check that actual lies within 10% of expected and return (lower, upper).

    An expected value of zero accepts any actual value.
    """
    upper = expected * (1 + METRIC_ERROR_BOUND)
    lower = expected * (1 - METRIC_ERROR_BOUND)
    if expected != 0.0 and (actual < lower or actual > upper):
        raise ValidationError(
            f"metric {metric_name} value {expected:f} is different from the actual value {actual:f}"
        )
    return lower, upper


def build_basic_query(
    metric_name: str, namespace: str, dimensions: Iterable[Dimension], period: float
) -> MetricQuery:
    """Build an average query over the collection period."""
    return build_metric_query(
        metric_name, namespace, dimensions, int(period), Statistics.AVERAGE
    )