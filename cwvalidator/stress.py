"""Upper bounds on agent resource usage under load, and their checks."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from cwvalidator.cloudwatch import Dimension, MetricQuery, build_metric_query
from cwvalidator.config import Statistics, ValidationError

logger = logging.getLogger(__name__)

METRIC_ERROR_BOUND = 0.3
SAMPLE_COUNT_TOLERANCE = 5

BoundTable = Mapping[str, Mapping[str, Mapping[str, float]]]


def _linux_bounds(
    cpu: float,
    rss: float,
    vms: float,
    data: float,
    fds: float,
    bytes_sent: float,
    packets_sent: float,
) -> dict[str, float]:
    return {
        "procstat_cpu_usage": cpu,
        "procstat_memory_rss": rss,
        "procstat_memory_swap": 0.0,
        "procstat_memory_vms": vms,
        "procstat_memory_data": data,
        "procstat_num_fds": fds,
        "net_bytes_sent": bytes_sent,
        "net_packets_sent": packets_sent,
    }


def _windows_bounds(
    cpu: float, rss: float, vms: float, bytes_sent: float, packets_sent: float
) -> dict[str, float]:
    return {
        "procstat cpu_usage": cpu,
        "procstat memory_rss": rss,
        "procstat memory_vms": vms,
        "Bytes_Sent_Per_Sec": bytes_sent,
        "Packets_Sent_Per_Sec": packets_sent,
    }


# At 50000 values per minute most metrics are dropped, since the agent's
# default metric buffer holds 10000 entries.
LINUX_BOUNDS: BoundTable = {
    "1000": {
        "statsd": _linux_bounds(25, 82000000, 818000000, 83000000, 11, 105000, 105),
        "collectd": _linux_bounds(20, 80000000, 818000000, 82000000, 11, 102000, 105),
        "logs": _linux_bounds(250, 220000000, 888000000, 260000000, 110, 1800000, 5000),
        "system": _linux_bounds(15, 80000000, 818000000, 75000000, 12, 90000, 100),
        "emf": _linux_bounds(15, 80000000, 818000000, 75000000, 12, 90000, 100),
    },
    "5000": {
        "statsd": _linux_bounds(100, 130000000, 888000000, 145000000, 15, 524000, 520),
        "collectd": _linux_bounds(90, 120000000, 888000000, 135000000, 17, 490000, 450),
        "logs": _linux_bounds(400, 540000000, 1100000000, 540000000, 180, 6500000, 8500),
        "system": _linux_bounds(15, 80000000, 818000000, 75000000, 12, 90000, 100),
        "emf": _linux_bounds(25, 80000000, 818000000, 79000000, 12, 90000, 120),
    },
    "10000": {
        "statsd": _linux_bounds(150, 160000000, 888000000, 177000000, 17, 980000, 860),
        "collectd": _linux_bounds(120, 130000000, 888000000, 150000000, 17, 760000, 700),
        "logs": _linux_bounds(400, 800000000, 1500000000, 840000000, 180, 6820000, 8300),
        "system": _linux_bounds(15, 80000000, 818000000, 75000000, 12, 90000, 100),
        "emf": _linux_bounds(45, 88000000, 818000000, 88000000, 12, 90000, 120),
    },
    "50000": {
        "statsd": _linux_bounds(250, 300000000, 1000000000, 440000000, 18, 1700000, 1400),
        "collectd": _linux_bounds(220, 218000000, 980000000, 240000000, 18, 1250000, 1100),
        "logs": _linux_bounds(400, 800000000, 1500000000, 650000000, 200, 6900000, 6500),
        "system": _linux_bounds(15, 80000000, 818000000, 75000000, 12, 90000, 100),
        "emf": _linux_bounds(165, 120000000, 818000000, 110000000, 12, 280000, 220),
    },
}

WINDOWS_BOUNDS: BoundTable = {
    "1000": {
        "logs": _windows_bounds(250, 220000000, 888000000, 1800000, 5000),
        "system": _windows_bounds(15, 80000000, 818000000, 90000, 100),
    },
    "5000": {
        "logs": _windows_bounds(400, 540000000, 1100000000, 6500000, 8500),
        "system": _windows_bounds(15, 80000000, 818000000, 90000, 100),
    },
    "10000": {
        "logs": _windows_bounds(400, 800000000, 1500000000, 6820000, 8300),
        "system": _windows_bounds(15, 80000000, 818000000, 90000, 100),
    },
    "50000": {
        "logs": _windows_bounds(400, 800000000, 1500000000, 6900000, 6500),
        "system": _windows_bounds(15, 80000000, 818000000, 90000, 100),
    },
}


class StressError(ValidationError):
    """Raised when a stress metric has no bound or exceeds it."""


def upper_bound(
    data_rate: int | str, receiver: str, metric_name: str, windows: bool = False
) -> float:
    """Return the highest accepted value: the recorded bound plus 30%."""
    table = WINDOWS_BOUNDS if windows else LINUX_BOUNDS
    plugins = table.get(str(data_rate), {})
    if receiver not in plugins:
        raise StressError(f"plugin {receiver} does not have data rate")
    metrics = plugins[receiver]
    if metric_name not in metrics:
        # The Linux check has always reported the receiver here.
        subject = metric_name if windows else receiver
        raise StressError(f"metric {subject} does not have bound")
    return metrics[metric_name] * (1 + METRIC_ERROR_BOUND)


def check_stress_value(
    data_rate: int | str,
    receiver: str,
    metric_name: str,
    value: float,
    windows: bool = False,
) -> float:
    """Raise StressError unless 0 <= value <= the upper bound; return the bound."""
    bound = upper_bound(data_rate, receiver, metric_name, windows)
    logger.info(
        "Metric %s has value of %f and the upper bound is %f", metric_name, value, bound
    )
    if value < 0 or value > bound:
        raise StressError(
            f"metric {metric_name} with value {value:f} is larger than {bound:f} limit"
        )
    return bound


def sample_count_bounds(sample_count: int) -> tuple[int, int]:
    """Return the accepted (lowest, highest) sample count for an expected count."""
    return sample_count - SAMPLE_COUNT_TOLERANCE, sample_count


def build_stress_query(
    metric_name: str, namespace: str, dimensions: Iterable[Dimension], period: float
) -> MetricQuery:
    """Build a maximum-statistic query over the collection period."""
    return build_metric_query(metric_name, namespace, dimensions, int(period), Statistics.MAXIMUM)