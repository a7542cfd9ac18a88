"""Summary statistics over a series of metric values."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stats:
    """Summary of a metric series; period is the seconds covered by one value."""

    average: float = 0.0
    p99: float = 0.0
    max: float = 0.0
    min: float = 0.0
    period: int = 0
    std: float = 0.0


def calculate_statistics(data: Iterable[float], data_period: float) -> Stats:
    """Return average, min, max, p99, population deviation and per-value period.

    An empty series gives an all-zero Stats. A single value has no p99 entry
    and raises ValueError.
    """
    values = sorted(float(v) for v in data)
    length = len(values)
    if length == 0:
        return Stats()

    average = sum(values) / length

    if length < 99:
        logger.info("Note: less than 99 values given, p99 value will be equal the max value")
    p99_index = int(length * 0.99) - 1
    if p99_index < 0:
        raise ValueError(f"cannot take the p99 value of {length} value(s)")

    deviation_sum = sum((average - value) ** 2 for value in values)

    return Stats(
        average=average,
        p99=values[p99_index],
        max=values[-1],
        min=values[0],
        period=int(data_period / length),
        std=math.sqrt(deviation_sum / length),
    )