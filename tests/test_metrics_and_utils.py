import json
import logging

import pytest
from sqlalchemy.exc import OperationalError

from logging_config import JsonFormatter, configure_logging
from services.obs.metrics import MetricsCollector
from utils import is_transient_error, retry_sync


def test_record_post_process_accumulates():
    collector = MetricsCollector()

    collector.record_post_process({"bundles": 2, "links": 5, "children_requested": 4,
                                   "children_found": 3, "children_missing": 1, "missing_skus": ["X"]})
    collector.record_post_process({"bundles": 1, "links": 1, "children_requested": 1,
                                   "children_found": 0, "children_missing": 1, "missing_skus": ["X"]})

    counters = collector.get_counters()
    assert counters["runs"] == 2
    assert counters["bundles"] == 3
    assert counters["links"] == 6
    assert counters["children_found"] == 3
    assert counters["children_missing"] == 2
    assert collector.missing_children["X"] == 2


def test_missing_children_map_is_bounded():
    collector = MetricsCollector(max_tracked_missing=10)
    for _ in range(5):
        collector.record_post_process({"missing_skus": ["HOT"]})

    for i in range(1000):
        collector.record_post_process({"missing_skus": [f"gone-{i}"]})

    assert len(collector.missing_children) == 10
    assert collector.missing_children["HOT"] == 5
    assert collector.get_counters()["runs"] == 1005


def test_metrics_reset():
    collector = MetricsCollector()
    collector.record_post_process({"bundles": 1})

    collector.reset()

    assert collector.get_counters()["runs"] == 0
    assert collector.last_summary is None


def test_is_transient_error():
    assert is_transient_error(OperationalError("SELECT 1", {}, Exception("boom")))
    assert is_transient_error(RuntimeError("database is locked"))
    assert not is_transient_error(ValueError("Unknown product filter field"))


def test_retry_sync_retries_transient_errors():
    delays = []
    calls = {"count": 0}

    @retry_sync(max_retries=2, base_delay=0.1, jitter=False, sleep=delays.append)
    def flaky():
        calls["count"] += 1
        if calls["count"] < 3:
            raise ConnectionError("connection reset")
        return "ok"

    assert flaky() == "ok"
    assert calls["count"] == 3
    assert delays == [0.1, 0.2]


def test_retry_sync_gives_up_after_max_retries():
    delays = []

    @retry_sync(max_retries=1, base_delay=0.1, jitter=False, sleep=delays.append)
    def always_down():
        raise TimeoutError("timeout")

    with pytest.raises(TimeoutError):
        always_down()
    assert delays == [0.1]


def test_retry_sync_does_not_retry_other_errors():
    delays = []

    @retry_sync(max_retries=3, sleep=delays.append)
    def broken():
        raise KeyError("sku")

    with pytest.raises(KeyError):
        broken()
    assert delays == []


def test_json_formatter_payload():
    record = logging.LogRecord("services.bundle_post_processor", logging.INFO, __file__, 1,
                               "Bundle post-process: bundles=%s", (2,), None)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["severity"] == "INFO"
    assert payload["logger"] == "services.bundle_post_processor"
    assert payload["message"] == "Bundle post-process: bundles=2"


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("debug")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
