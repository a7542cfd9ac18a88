"""Performance statistics and the result records stored for each run."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from cwvalidator.cloudwatch import Dimension, MetricQuery, build_metric_query
from cwvalidator.config import Statistics, ValidationError, ValidatorConfig
from cwvalidator.stats import Stats, calculate_statistics

logger = logging.getLogger(__name__)

SERVICE_NAME = "AmazonCloudWatchAgent"
DYNAMODB_DATABASE = "CWAPerformanceMetrics"
PERFORMANCE_QUERY_PERIOD = 10

# Byte-valued metrics that are reported in megabytes.
METRICS_CONVERT_TO_MB = frozenset(
    {
        "mem_total",
        "procstat_memory_rss",
        "procstat_memory_swap",
        "procstat_memory_data",
        "procstat_memory_vms",
        "procstat_write_bytes",
        "procstat_bytes_sent",
        "memory_rss",
        "memory_vms",
        "write_bytes",
        "Bytes_Sent_Per_Sec",
        "Available_Bytes",
    }
)

_BYTES_PER_MB = 1024 * 1024

PerformanceInformation = dict[str, Any]


class PerformanceError(ValidationError):
    """Raised when performance data cannot be summarised or merged."""


def _format_seconds(seconds: float) -> str:
    if float(seconds).is_integer():
        return str(int(seconds))
    return repr(float(seconds))


def _first_receiver(config: ValidatorConfig) -> str:
    if not config.receivers:
        raise PerformanceError("the configuration names no receiver")
    return config.receivers[0]


def metric_name_from_label(label: str) -> str:
    """Return the last space-separated word of a metric label."""
    return label.split(" ")[-1]


def all_non_negative(values: Iterable[float]) -> bool:
    """True if there is at least one value and none is negative."""
    items = list(values)
    return bool(items) and all(value >= 0 for value in items)


def calculate_metric_results(
    metrics: Iterable[tuple[str, Iterable[float]]], collection_period: float
) -> dict[str, Stats]:
    """Summarise each (label, values) series, keyed by metric name.

    Byte-valued metrics are converted to megabytes first.
    """
    results: dict[str, Stats] = {}
    for label, raw_values in metrics:
        name = metric_name_from_label(label)
        values = [float(v) for v in raw_values]
        if name in METRICS_CONVERT_TO_MB:
            values = [v / _BYTES_PER_MB for v in values]
        logger.info("Start calculate metric statistics for metric %s %s", name, values)
        if not all_non_negative(values):
            raise PerformanceError(
                f"values are not all greater than or equal to zero for metric {name} "
                f"with values: {values}"
            )
        stats = calculate_statistics(values, collection_period)
        logger.info("Finished calculate metric statistics for metric %s: %s", name, stats)
        results[name] = stats
    return results


def pack_performance_information(
    unique_id: str,
    receiver: str,
    data_type: str,
    collection_period: str,
    commit_hash: str,
    commit_date: int,
    result: Any,
    instance_ami: str,
    instance_type: str,
) -> PerformanceInformation:
    """Assemble the record stored in the performance database."""
    return {
        "UniqueID": unique_id,
        "Service": SERVICE_NAME,
        "UseCase": receiver,
        "CommitDate": commit_date,
        "CommitHash": commit_hash,
        "DataType": data_type,
        "Results": result,
        "CollectionPeriod": collection_period,
        "InstanceAMI": instance_ami,
        "InstanceType": instance_type,
    }


def build_performance_report(
    config: ValidatorConfig,
    metrics: Iterable[tuple[str, Iterable[float]]],
    instance_ami: str,
    instance_type: str,
) -> PerformanceInformation:
    """Summarise the metrics of one run into a fresh performance record."""
    receiver = _first_receiver(config)
    commit_hash, commit_date = config.commit_information()
    period = config.collection_period.total_seconds()
    results = calculate_metric_results(metrics, period)
    return pack_performance_information(
        config.new_unique_id(),
        receiver,
        config.data_type,
        _format_seconds(period),
        commit_hash,
        commit_date,
        {str(config.data_rate): results},
        instance_ami,
        instance_type,
    )


def merge_performance_information(
    existing: Mapping[str, Any],
    update: Mapping[str, Any],
    config: ValidatorConfig,
    instance_ami: str,
    instance_type: str,
) -> PerformanceInformation:
    """Merge the results of a new record into a stored one, keeping its UniqueID."""
    existing_results = existing.get("Results")
    update_results = update.get("Results")
    if not isinstance(existing_results, Mapping) or not isinstance(update_results, Mapping):
        raise PerformanceError("both records must hold a Results mapping")
    unique_id = existing.get("UniqueID")
    if not isinstance(unique_id, str):
        raise PerformanceError("the stored record has no UniqueID")

    receiver = _first_receiver(config)
    commit_hash, commit_date = config.commit_information()
    merged = {**existing_results, **update_results}
    return pack_performance_information(
        unique_id,
        receiver,
        config.data_type,
        _format_seconds(config.collection_period.total_seconds()),
        commit_hash,
        commit_date,
        merged,
        instance_ami,
        instance_type,
    )


def build_performance_query(
    metric_name: str, namespace: str, dimensions: Iterable[Dimension]
) -> MetricQuery:
    """Build an average query with a ten-second period."""
    return build_metric_query(
        metric_name, namespace, dimensions, PERFORMANCE_QUERY_PERIOD, Statistics.AVERAGE
    )