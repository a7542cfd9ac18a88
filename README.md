# cwvalidator

Validation logic for CloudWatch agent test runs. It reads a YAML validator
configuration, builds metric query descriptions, computes statistics over
metric values, and checks values against expected figures and stress bounds.

## Installation

```
pip install cwvalidator
```

## Configuration

A validator configuration is a YAML document:

```yaml
receivers: ["statsd"]
test_case: statsd_stress
validate_type: stress
data_type: metrics
values_per_minute: "1000"
agent_collection_period: 300
os_family: linux
metric_namespace: CWAgent/Stress
metric_validation:
  - metric_name: procstat_cpu_usage
    metric_sample_count: 300
    metric_dimension:
      - name: exe
        value: cloudwatch-agent
log_validation:
  - log_value: "hello"
    log_lines: 10
    log_stream: test.log
commit_hash: abc123
commit_date: "1690000000"
```

`cwvalidator.config.load_config(path)` reads a file and
`cwvalidator.config.parse_config(data)` parses a string or bytes. Both return
a `ValidatorConfig` and raise `ConfigError` when the file cannot be read, the
YAML is invalid, a field has the wrong type, or a receiver other than `logs`,
`statsd`, `collectd`, `system` or `emf` is named. `validate_config(config)`
runs the receiver check on its own.

On a `ValidatorConfig`:

- `data_rate` is `values_per_minute` as an integer, or 0 if it is not one.
- `collection_period` is `agent_collection_period` as a `timedelta`.
- `commit_information()` returns `(commit_hash, commit_date)`, the date as an
  integer (0 if it is not one).
- `new_unique_id()` returns a fresh random UUID string.

## Modules

- `cwvalidator.config`: the configuration model (`ValidatorConfig`,
  `MetricValidation`, `LogValidation`, `MetricDimension`), the `Statistics`
  enum (`AVERAGE`, `MAXIMUM`), the exceptions `ValidationError` and
  `ConfigError`, and the abstract base class `ValidatorFactory` with
  `generate_load()`, `check_data(start_time, end_time)` and `cleanup()`.
- `cwvalidator.cloudwatch`: `Dimension` and `MetricQuery` values,
  `build_dimensions(instance_id, metric_dimensions)` (an `InstanceId`
  dimension followed by the configured ones),
  `build_metric_query(metric_name, namespace, dimensions, period, stat)` (query
  id is the lower-cased metric name) and `format_dimensions(dimensions)` for log
  messages.
- `cwvalidator.stats`: `calculate_statistics(data, data_period)` returns a
  `Stats` with average, p99, max, min, population standard deviation and the
  period per value. An empty series gives all zeros; a single value raises
  `ValueError`.
- `cwvalidator.performance`: `calculate_metric_results` summarises
  `(label, values)` pairs, keyed by the last word of each label, converting
  byte-valued metrics to megabytes and raising `PerformanceError` on empty or
  negative series. `build_performance_report` packs them into a result record;
  `merge_performance_information` merges a new record's results into a stored
  one, keeping the stored `UniqueID`. `build_performance_query` builds an
  average query with a ten-second period.
- `cwvalidator.stress`: per data rate and receiver bounds for Linux
  (`LINUX_BOUNDS`) and Windows (`WINDOWS_BOUNDS`). `upper_bound` returns the
  bound plus 30%, `check_stress_value` raises `StressError` when a value is
  negative or above it, `sample_count_bounds(n)` returns `(n - 5, n)`, and
  `build_stress_query` builds a maximum query.
- `cwvalidator.basic`: `count_matching_lines` and `logs_satisfied` check log
  entries (Windows event entries must also contain the level),
  `check_metric_value` accepts values within 10% of the expected one (an
  expected 0 accepts anything), and `build_basic_query` builds an average
  query.

## Example

```python
from cwvalidator.config import parse_config
from cwvalidator.stats import calculate_statistics
from cwvalidator.stress import check_stress_value

config = parse_config("receivers: [statsd]\nvalues_per_minute: '1000'\n")
bound = check_stress_value(config.data_rate, "statsd", "procstat_cpu_usage", 20.0)

stats = calculate_statistics([1.0, 2.0, 3.0, 4.0], 60)
print(bound, stats.average, stats.max, stats.period)
```

## What it does not do

The package holds the checks and data shapes only. It does not contact
CloudWatch, CloudWatch Logs, EC2 metadata or any database, does not send
metrics or write logs for an agent to collect, and provides no concrete
`ValidatorFactory` implementation and no command-line program. Fetching the
data and storing the reports is left to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```