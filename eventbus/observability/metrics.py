"""Metrics for observability (publish and delivery counts, live subscriptions)."""

from typing import Dict, Optional


class Metrics:
    """In-memory counters and gauges, with counters also broken down per event name."""

    def __init__(self) -> None:
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, int] = {}
        self._per_event: Dict[str, Dict[str, int]] = {}

    def increment(self, name: str, value: int = 1, event_name: Optional[str] = None) -> None:
        """Increment a counter, and its per-event twin when event_name is given."""
        self._counters[name] = self._counters.get(name, 0) + value
        if event_name is not None:
            counters = self._per_event.setdefault(event_name, {})
            counters[name] = counters.get(name, 0) + value

    def set_gauge(self, name: str, value: int) -> None:
        self._gauges[name] = value

    def get_counter(self, name: str, event_name: Optional[str] = None) -> int:
        if event_name is None:
            return self._counters.get(name, 0)
        return self._per_event.get(event_name, {}).get(name, 0)

    def get_gauge(self, name: str) -> int:
        return self._gauges.get(name, 0)

    def event_counters(self, event_name: str) -> Dict[str, int]:
        """Counters recorded for one event name (empty if it never saw traffic)."""
        return dict(self._per_event.get(event_name, {}))

    def reset(self) -> None:
        self._counters.clear()
        self._gauges.clear()
        self._per_event.clear()

    def snapshot(self) -> Dict[str, Dict]:
        """Return a snapshot of all metrics."""
        return {
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "events": {name: dict(c) for name, c in self._per_event.items()},
        }
