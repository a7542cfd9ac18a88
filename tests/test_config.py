import datetime
import uuid

import pytest

from cwvalidator.config import (
    ConfigError,
    LogValidation,
    MetricDimension,
    MetricValidation,
    Statistics,
    ValidationError,
    ValidatorConfig,
    ValidatorFactory,
    load_config,
    parse_config,
    validate_config,
)

FULL_YAML = """
receivers: ["statsd"]
test_case: statsd_stress
validate_type: stress
data_type: metrics
number_monitored_logs: 2
values_per_minute: "1000"
agent_collection_period: 60
os_family: linux
cloudwatch_agent_config: /tmp/agent.json
metric_namespace: CWAgent/Stress
metric_validation:
  - metric_name: procstat_cpu_usage
    metric_dimension:
      - name: exe
        value: cloudwatch-agent
    metric_value: 25
    metric_sample_count: 60
log_validation:
  - log_value: hello
    log_lines: 5
    log_stream: stream-a
    log_level: Error
    log_source: WindowsEvents
commit_hash: abc123
commit_date: "1690000000"
"""


def test_parse_full_config():
    config = parse_config(FULL_YAML)
    assert config.receivers == ["statsd"]
    assert config.test_case == "statsd_stress"
    assert config.validate_type == "stress"
    assert config.data_type == "metrics"
    assert config.number_monitored_logs == 2
    assert config.os_family == "linux"
    assert config.config_path == "/tmp/agent.json"
    assert config.metric_namespace == "CWAgent/Stress"
    assert config.metric_validation == [
        MetricValidation(
            metric_name="procstat_cpu_usage",
            metric_dimension=[MetricDimension("exe", "cloudwatch-agent")],
            metric_value=25.0,
            metric_sample_count=60,
        )
    ]
    assert config.log_validation == [
        LogValidation("hello", 5, "stream-a", "Error", "WindowsEvents")
    ]


def test_data_rate_and_period():
    config = parse_config(FULL_YAML)
    assert config.data_rate == 1000
    assert config.collection_period == datetime.timedelta(seconds=60)


def test_data_rate_from_unquoted_number():
    config = parse_config("values_per_minute: 5000\n")
    assert config.values_per_minute == "5000"
    assert config.data_rate == 5000


@pytest.mark.parametrize("text", ["abc", "", " 12", "1.5"])
def test_data_rate_invalid_is_zero(text):
    assert ValidatorConfig(values_per_minute=text).data_rate == 0


def test_commit_information():
    config = parse_config(FULL_YAML)
    assert config.commit_information() == ("abc123", 1690000000)


def test_commit_information_bad_date():
    config = ValidatorConfig(commit_hash="abc123", commit_date="yesterday")
    assert config.commit_information() == ("abc123", 0)


def test_new_unique_id_is_fresh_uuid():
    config = ValidatorConfig()
    first, second = config.new_unique_id(), config.new_unique_id()
    assert first != second
    assert str(uuid.UUID(first)) == first


def test_empty_document_gives_defaults():
    config = parse_config("")
    assert config == ValidatorConfig()
    assert config.receivers == []


@pytest.mark.parametrize("receiver", ["logs", "statsd", "collectd", "system", "emf"])
def test_supported_receivers_accepted(receiver):
    config = parse_config(f"receivers: [{receiver}]\n")
    assert config.receivers == [receiver]


def test_unsupported_receiver_rejected():
    with pytest.raises(ConfigError, match="the validator does not support prometheus"):
        parse_config("receivers: [statsd, prometheus]\n")


def test_validate_config_message_lists_supported():
    with pytest.raises(ValidationError) as info:
        validate_config(ValidatorConfig(receivers=["otlp"]))
    assert "only support [logs statsd collectd system emf]" in str(info.value)


def test_non_mapping_document_rejected():
    with pytest.raises(ConfigError):
        parse_config("- a\n- b\n")


def test_wrong_type_rejected():
    with pytest.raises(ConfigError):
        parse_config("agent_collection_period: soon\n")


def test_malformed_yaml_rejected():
    with pytest.raises(ConfigError):
        parse_config("receivers: [statsd\n")


def test_load_config_roundtrip(tmp_path):
    path = tmp_path / "parameters.yml"
    path.write_text(FULL_YAML)
    assert load_config(path) == parse_config(FULL_YAML)


def test_load_config_missing_file(tmp_path):
    path = tmp_path / "missing.yml"
    with pytest.raises(ConfigError, match="with file"):
        load_config(path)


def test_statistics_values():
    assert Statistics.MAXIMUM.value == "Maximum"
    assert Statistics("Average") is Statistics.AVERAGE


def test_validator_factory_is_abstract():
    with pytest.raises(TypeError):
        ValidatorFactory()


def test_validator_factory_subclass_must_implement_all_methods():
    class Recorder(ValidatorFactory):
        def __init__(self, config):
            self.config = config
            self.calls = []

        def generate_load(self):
            self.calls.append(("load", self.config.data_rate))

        def check_data(self, start_time, end_time):
            validate_config(self.config)
            self.calls.append(("check", end_time - start_time))

        def cleanup(self):
            self.calls.append(("cleanup", self.config.data_type))

    recorder = Recorder(parse_config(FULL_YAML))
    start = datetime.datetime(2023, 1, 1, 0, 1)
    recorder.generate_load()
    recorder.check_data(start, start + recorder.config.collection_period)
    recorder.cleanup()
    assert recorder.calls == [
        ("load", 1000),
        ("check", datetime.timedelta(seconds=60)),
        ("cleanup", "metrics"),
    ]

    class MissingCleanup(ValidatorFactory):
        def generate_load(self):
            return None

        def check_data(self, start_time, end_time):
            return None

    with pytest.raises(TypeError, match="cleanup"):
        MissingCleanup()