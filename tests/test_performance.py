import uuid

import pytest

from cwvalidator.cloudwatch import Dimension
from cwvalidator.config import Statistics, ValidationError, ValidatorConfig
from cwvalidator.performance import (
    PerformanceError,
    all_non_negative,
    build_performance_query,
    build_performance_report,
    calculate_metric_results,
    merge_performance_information,
    metric_name_from_label,
    pack_performance_information,
)
from cwvalidator.stats import calculate_statistics


def _config():
    return ValidatorConfig(
        receivers=["statsd"],
        data_type="metrics",
        values_per_minute="1000",
        agent_collection_period=60,
        commit_hash="abc",
        commit_date="1690000000",
    )


def test_metric_name_from_label():
    assert metric_name_from_label("procstat memory_rss") == "memory_rss"
    assert metric_name_from_label("cpu_usage") == "cpu_usage"


def test_all_non_negative():
    assert all_non_negative([0.0, 1.0]) is True
    assert all_non_negative([1.0, -1.0]) is False
    assert all_non_negative([]) is False


def test_byte_metrics_converted_to_megabytes():
    mb = 1024 * 1024
    converted = calculate_metric_results([("x memory_rss", [2 * mb, 4 * mb])], 60)
    plain = calculate_metric_results([("x cpu", [2.0, 4.0])], 60)
    assert converted["memory_rss"] == plain["cpu"]


def test_other_metrics_not_converted():
    results = calculate_metric_results([("procstat cpu_usage", [10.0, 20.0])], 60)
    assert results["cpu_usage"] == calculate_statistics([10.0, 20.0], 60)


def test_negative_values_rejected():
    with pytest.raises(PerformanceError):
        calculate_metric_results([("cpu", [1.0, -2.0])], 60)


def test_empty_values_rejected():
    with pytest.raises(ValidationError):
        calculate_metric_results([("cpu", [])], 60)


def test_pack_performance_information():
    info = pack_performance_information(
        "id-1", "statsd", "metrics", "60", "abc", 12, {"k": 1}, "ami-test", "t3.micro"
    )
    assert info["Service"] == "AmazonCloudWatchAgent"
    assert info["UniqueID"] == "id-1"
    assert info["UseCase"] == "statsd"
    assert info["Results"] == {"k": 1}
    assert info["InstanceAMI"] == "ami-test"
    assert info["InstanceType"] == "t3.micro"


def test_build_performance_report():
    report = build_performance_report(
        _config(), [("procstat cpu_usage", [1.0, 2.0, 3.0])], "ami-test", "t3.micro"
    )
    assert set(report["Results"]) == {"1000"}
    assert set(report["Results"]["1000"]) == {"cpu_usage"}
    assert report["CollectionPeriod"] == "60"
    assert report["CommitHash"] == "abc"
    assert report["CommitDate"] == 1690000000
    assert report["UseCase"] == "statsd"
    assert str(uuid.UUID(report["UniqueID"])) == report["UniqueID"]


def test_report_requires_receiver():
    config = _config()
    config.receivers = []
    with pytest.raises(PerformanceError):
        build_performance_report(config, [("cpu", [1.0, 2.0])], "ami", "type")


def test_merge_keeps_existing_id_and_combines_results():
    existing = {"UniqueID": "old-id", "Results": {"1000": {"cpu": 1}}}
    update = {"UniqueID": "new-id", "Results": {"5000": {"cpu": 2}}}
    merged = merge_performance_information(existing, update, _config(), "ami", "type")
    assert merged["UniqueID"] == "old-id"
    assert merged["Results"] == {"1000": {"cpu": 1}, "5000": {"cpu": 2}}
    assert existing["Results"] == {"1000": {"cpu": 1}}


def test_merge_update_overrides_same_rate():
    existing = {"UniqueID": "old-id", "Results": {"1000": "old"}}
    update = {"Results": {"1000": "new"}}
    merged = merge_performance_information(existing, update, _config(), "ami", "type")
    assert merged["Results"] == {"1000": "new"}


def test_merge_requires_results():
    with pytest.raises(PerformanceError):
        merge_performance_information({"UniqueID": "x"}, {"Results": {}}, _config(), "a", "b")


def test_build_performance_query():
    dims = [Dimension("InstanceId", "i-test")]
    query = build_performance_query("Procstat_CPU", "CWAgent", dims)
    assert query.id == "procstat_cpu"
    assert query.period == 10
    assert query.stat is Statistics.AVERAGE
    assert query.dimensions == tuple(dims)
    assert query.namespace == "CWAgent"