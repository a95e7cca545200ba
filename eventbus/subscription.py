"""Subscription record stored by the registry for each registered callback."""

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Subscription:
    """One callback registered against an event name."""

    subscription_id: str
    event_name: str
    callback: Callable[..., Any]
    once: bool = False

    def invoke(self, *args: Any) -> None:
        self.callback(*args)

    def to_dict(self) -> dict:
        """Serialize subscription for logging."""
        return {
            "subscription_id": self.subscription_id,
            "event_name": self.event_name,
            "callback": getattr(self.callback, "__qualname__", repr(self.callback)),
            "once": self.once,
        }
