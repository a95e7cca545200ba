import logging
import runpy
from pathlib import Path

from eventbus import Registry, Settings
from eventbus.observability import InstanceLogger, Metrics, get_logger


def test_metrics_track_registry_activity(registry):
    registry.subscribe("A", lambda: None)
    registry.subscribe("A", lambda: None)
    registry.subscribe_once("B", lambda: None)

    snap = registry.metrics.snapshot()
    assert snap["counters"]["subscribed"] == 3
    assert snap["gauges"] == {"event_names": 2, "subscriptions": 3}

    registry.publish("A")
    registry.publish("B")
    registry.publish("missing")
    registry.unsubscribe("A")

    assert registry.metrics.get_counter("published") == 2
    assert registry.metrics.get_counter("delivered") == 3
    assert registry.metrics.get_counter("unsubscribed") == 2
    assert registry.metrics.get_gauge("subscriptions") == 0
    assert registry.metrics.get_gauge("event_names") == 0


def test_shared_metrics_instance():
    metrics = Metrics()
    Registry(metrics=metrics).subscribe("A", lambda: None)
    assert metrics.get_counter("subscribed") == 1
    metrics.reset()
    assert metrics.snapshot() == {"counters": {}, "gauges": {}, "events": {}}


def test_subscribe_and_publish_are_logged(registry, caplog):
    with caplog.at_level(logging.INFO, logger="eventbus.registry"):
        sid = registry.subscribe("A", lambda: None)
        registry.publish("A")

    messages = [r.getMessage() for r in caplog.records]
    assert messages == ["subscribed", "published"]
    assert caplog.records[0].subscription_id == sid
    assert caplog.records[1].subscriber_count == 1


def test_get_logger_configures_once():
    logger = get_logger("eventbus.test.single", logging.WARNING)
    again = get_logger("eventbus.test.single", logging.DEBUG)
    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_log_level_is_per_registry(caplog):
    shared = get_logger("eventbus.registry")
    level_before = shared.level

    quiet = Registry(log_level=logging.WARNING)
    loud = Registry.from_settings(Settings(log_level=logging.INFO))

    assert quiet.log_level == logging.WARNING
    assert loud.log_level == logging.INFO
    assert shared.level == level_before

    with caplog.at_level(logging.INFO, logger="eventbus.registry"):
        quiet.subscribe("quiet", lambda: None)
        loud.subscribe("loud", lambda: None)

    subscribed = [r.event_name for r in caplog.records if r.getMessage() == "subscribed"]
    assert subscribed == ["loud"]


def test_instance_logger_keeps_extra(caplog):
    adapter = InstanceLogger(logging.getLogger("eventbus.test.adapter"), logging.INFO)
    with caplog.at_level(logging.DEBUG, logger="eventbus.test.adapter"):
        adapter.debug("hidden")
        adapter.info("shown", extra={"event_name": "A"})

    assert [r.getMessage() for r in caplog.records] == ["shown"]
    assert caplog.records[0].event_name == "A"


def test_metrics_per_event_counters(registry):
    registry.subscribe("A", lambda: None)
    registry.subscribe("B", lambda: None)
    registry.publish("A")
    registry.publish("A")
    registry.publish("B")

    metrics = registry.metrics
    assert metrics.get_counter("published") == 3
    assert metrics.get_counter("published", event_name="A") == 2
    assert metrics.event_counters("B") == {"subscribed": 1, "published": 1, "delivered": 1}
    assert metrics.event_counters("never") == {}
    assert metrics.snapshot()["events"]["A"]["delivered"] == 2


def test_example_leaves_root_logging_alone(monkeypatch):
    configured = []
    monkeypatch.setattr(logging, "basicConfig", lambda *a, **kw: configured.append(kw))
    monkeypatch.delenv("EVENTBUS_ISOLATE_ERRORS", raising=False)

    example = runpy.run_path(str(Path(__file__).resolve().parents[1] / "example.py"), run_name="example")
    example["main"]()

    assert configured == []
