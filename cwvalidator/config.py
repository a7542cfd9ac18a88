"""Test-case configuration for the validator and the validator interface."""

from __future__ import annotations

import abc
import datetime
import logging
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

SUPPORTED_RECEIVERS = ("logs", "statsd", "collectd", "system", "emf")

_INTEGER = re.compile(r"[+-]?[0-9]+")


class Statistics(str, Enum):
    """CloudWatch statistics used by the validators."""

    MAXIMUM = "Maximum"
    AVERAGE = "Average"


class ValidationError(Exception):
    """Raised when a validation step fails."""


class ConfigError(ValidationError):
    """Raised when a validator configuration cannot be read or is unsupported."""


def _parse_integer(text: str) -> int | None:
    """Parse a plain base-10 integer; return None if the text is not one."""
    if _INTEGER.fullmatch(text):
        return int(text)
    return None


def _as_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float, datetime.date)):
        return str(value)
    raise ConfigError(f"field {key!r} must be a scalar, got {type(value).__name__}")


def _as_int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ConfigError(f"field {key!r} must be an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ConfigError(f"field {key!r} must be an integer, got {value!r}")


def _as_float(value: Any, key: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"field {key!r} must be a number, got {value!r}")
    return float(value)


def _as_list(value: Any, key: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"field {key!r} must be a list, got {type(value).__name__}")
    return value


def _as_mapping(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{key} must be a mapping, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class MetricDimension:
    """A dimension name and value attached to a validated metric."""

    name: str = ""
    value: str = ""

    @classmethod
    def _from_mapping(cls, raw: Any) -> MetricDimension:
        data = _as_mapping(raw, "metric_dimension entry")
        return cls(
            name=_as_str(data.get("name"), "name"),
            value=_as_str(data.get("value"), "value"),
        )


@dataclass
class MetricValidation:
    """A metric the validator expects to find in CloudWatch."""

    metric_name: str = ""
    metric_dimension: list[MetricDimension] = field(default_factory=list)
    metric_value: float = 0.0
    metric_sample_count: int = 0

    @classmethod
    def _from_mapping(cls, raw: Any) -> MetricValidation:
        data = _as_mapping(raw, "metric_validation entry")
        return cls(
            metric_name=_as_str(data.get("metric_name"), "metric_name"),
            metric_dimension=[
                MetricDimension._from_mapping(item)
                for item in _as_list(data.get("metric_dimension"), "metric_dimension")
            ],
            metric_value=_as_float(data.get("metric_value"), "metric_value"),
            metric_sample_count=_as_int(data.get("metric_sample_count"), "metric_sample_count"),
        )


@dataclass
class LogValidation:
    """A log line the validator expects to find in CloudWatch Logs."""

    log_value: str = ""
    log_lines: int = 0
    log_stream: str = ""
    log_level: str = ""
    log_source: str = ""

    @classmethod
    def _from_mapping(cls, raw: Any) -> LogValidation:
        data = _as_mapping(raw, "log_validation entry")
        return cls(
            log_value=_as_str(data.get("log_value"), "log_value"),
            log_lines=_as_int(data.get("log_lines"), "log_lines"),
            log_stream=_as_str(data.get("log_stream"), "log_stream"),
            log_level=_as_str(data.get("log_level"), "log_level"),
            log_source=_as_str(data.get("log_source"), "log_source"),
        )


@dataclass
class ValidatorConfig:
    """Parameters of one validation test case."""

    receivers: list[str] = field(default_factory=list)
    test_case: str = ""
    validate_type: str = ""
    data_type: str = ""
    number_monitored_logs: int = 0
    values_per_minute: str = ""
    agent_collection_period: int = 0
    os_family: str = ""
    config_path: str = ""
    metric_namespace: str = ""
    metric_validation: list[MetricValidation] = field(default_factory=list)
    log_validation: list[LogValidation] = field(default_factory=list)
    commit_hash: str = ""
    commit_date: str = ""

    @property
    def data_rate(self) -> int:
        """Number of metrics or log lines per minute, or 0 if not a valid integer."""
        rate = _parse_integer(self.values_per_minute)
        return 0 if rate is None else rate

    @property
    def collection_period(self) -> datetime.timedelta:
        """How long the agent runs and collects data."""
        return datetime.timedelta(seconds=self.agent_collection_period)

    def commit_information(self) -> tuple[str, int]:
        """Return the commit hash and the commit date (0 if the date is not an integer)."""
        date = _parse_integer(self.commit_date)
        return self.commit_hash, 0 if date is None else date

    def new_unique_id(self) -> str:
        """Return a fresh random identifier for a result record."""
        return str(uuid.uuid4())

    @classmethod
    def _from_mapping(cls, data: Mapping[str, Any]) -> ValidatorConfig:
        return cls(
            receivers=[_as_str(r, "receivers") for r in _as_list(data.get("receivers"), "receivers")],
            test_case=_as_str(data.get("test_case"), "test_case"),
            validate_type=_as_str(data.get("validate_type"), "validate_type"),
            data_type=_as_str(data.get("data_type"), "data_type"),
            number_monitored_logs=_as_int(data.get("number_monitored_logs"), "number_monitored_logs"),
            values_per_minute=_as_str(data.get("values_per_minute"), "values_per_minute"),
            agent_collection_period=_as_int(
                data.get("agent_collection_period"), "agent_collection_period"
            ),
            os_family=_as_str(data.get("os_family"), "os_family"),
            config_path=_as_str(data.get("cloudwatch_agent_config"), "cloudwatch_agent_config"),
            metric_namespace=_as_str(data.get("metric_namespace"), "metric_namespace"),
            metric_validation=[
                MetricValidation._from_mapping(item)
                for item in _as_list(data.get("metric_validation"), "metric_validation")
            ],
            log_validation=[
                LogValidation._from_mapping(item)
                for item in _as_list(data.get("log_validation"), "log_validation")
            ],
            commit_hash=_as_str(data.get("commit_hash"), "commit_hash"),
            commit_date=_as_str(data.get("commit_date"), "commit_date"),
        )


def validate_config(config: ValidatorConfig) -> None:
    """Raise ConfigError if the configuration names an unsupported receiver."""
    supported = "[" + " ".join(SUPPORTED_RECEIVERS) + "]"
    for receiver in config.receivers:
        if receiver not in SUPPORTED_RECEIVERS:
            raise ConfigError(
                f"only support {supported}, the validator does not support {receiver}"
            )


def parse_config(data: str | bytes) -> ValidatorConfig:
    """Parse YAML text into a validated ValidatorConfig."""
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as err:
        raise ConfigError(str(err)) from err
    config = ValidatorConfig._from_mapping(_as_mapping(raw, "configuration document"))
    logger.info("Parameters validation for %s", config)
    validate_config(config)
    return config


def load_config(path: str | Path) -> ValidatorConfig:
    """Read and validate a validator configuration file."""
    try:
        content = Path(path).read_bytes()
    except OSError as err:
        raise ConfigError(f"{err} with file {path}") from err
    return parse_config(content)


class ValidatorFactory(abc.ABC):
    """Interface every validator implements to drive a validation run."""

    @abc.abstractmethod
    def generate_load(self) -> None:
        """Send metrics, logs or traces for the agent to collect."""

    @abc.abstractmethod
    def check_data(self, start_time: datetime.datetime, end_time: datetime.datetime) -> None:
        """Fetch the collected data for the time range and validate it."""

    @abc.abstractmethod
    def cleanup(self) -> None:
        """Remove any resources created by the validator."""