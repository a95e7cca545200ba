"""In-memory registry of event subscriptions with synchronous, in-order dispatch."""

import types
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from eventbus.config import Settings, load_settings
from eventbus.errors import DispatchError, SubscriptionIdCollision
from eventbus.observability import InstanceLogger, Metrics, get_logger
from eventbus.subscription import Subscription

Callback = Callable[..., Any]
Target = Union[str, Callback, None]


def new_subscription_id() -> str:
    """Random 122-bit id (uuid4 hex)."""
    return uuid.uuid4().hex


def _same_callback(stored: Callback, target: Callback) -> bool:
    if stored is target:
        return True
    # bound methods are rebuilt on every attribute access
    return (
        isinstance(stored, types.MethodType)
        and isinstance(target, types.MethodType)
        and stored.__self__ is target.__self__
        and stored.__func__ is target.__func__
    )


class Registry:
    """
    Maps event names to ordered subscriptions and invokes them synchronously on publish.

    Callbacks run on the caller's thread in registration order. A publish iterates a
    snapshot of the subscriptions taken when it started, so callbacks may subscribe,
    unsubscribe or publish on the same registry. Fire-once subscriptions are removed
    from the live store as they are dispatched.

    By default an exception from a callback propagates and the rest of that publish is
    abandoned. With isolate_errors=True every callback runs, failures are logged, and a
    DispatchError carrying them is raised at the end.
    """

    def __init__(
        self,
        isolate_errors: bool = False,
        id_factory: Optional[Callable[[], str]] = None,
        metrics: Optional[Metrics] = None,
        log_level: int | None = None,
    ) -> None:
        self._events: Dict[str, Dict[str, Subscription]] = {}
        self._index: Dict[str, str] = {}
        # every id handed out, live or not, with the event it was issued for
        self._issued: Dict[str, str] = {}
        self._isolate_errors = isolate_errors
        self._id_factory = id_factory or new_subscription_id
        self._metrics = metrics if metrics is not None else Metrics()
        self._logger = InstanceLogger(get_logger("eventbus.registry"), log_level)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs: Any) -> "Registry":
        """
        Build a registry from Settings; loads them from the environment when omitted.
        Keyword arguments are passed to the constructor and win over the settings.
        """
        if settings is None:
            settings = load_settings()
        options: Dict[str, Any] = {
            "isolate_errors": settings.isolate_errors,
            "log_level": settings.log_level,
        }
        options.update(kwargs)
        return cls(**options)

    @property
    def log_level(self) -> int | None:
        return self._logger.floor

    @property
    def isolate_errors(self) -> bool:
        return self._isolate_errors

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    # ---- Subscribe ----

    def subscribe(self, event_name: str, callback: Callback) -> str:
        """Register callback for every publish of event_name. Returns the subscription id."""
        return self._add(event_name, callback, once=False)

    def subscribe_once(self, event_name: str, callback: Callback) -> str:
        """Register callback for the next publish of event_name only. Returns the subscription id."""
        return self._add(event_name, callback, once=True)

    def _add(self, event_name: str, callback: Callback, once: bool) -> str:
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        subscription_id = self._id_factory()
        if subscription_id in self._issued:
            raise SubscriptionIdCollision(subscription_id, self._issued[subscription_id])
        subscription = Subscription(
            subscription_id=subscription_id,
            event_name=event_name,
            callback=callback,
            once=once,
        )
        self._events.setdefault(event_name, {})[subscription_id] = subscription
        self._index[subscription_id] = event_name
        self._issued[subscription_id] = event_name
        self._metrics.increment("subscribed", event_name=event_name)
        self._update_gauges()
        self._logger.info("subscribed", extra=subscription.to_dict())
        return subscription_id

    # ---- Publish ----

    def publish(self, event_name: str, *args: Any) -> None:
        """
        Invoke every subscription of event_name with args, in registration order.
        Publishing an event nobody subscribed to is a no-op.

        The subscriptions to call are fixed when publish starts: one added by a callback
        waits for the next publish, and a regular one removed by an earlier callback is
        still called in this pass. A fire-once subscription removed before its turn (by
        unsubscribe or a nested publish) is skipped.
        """
        subscriptions = self._events.get(event_name)
        if not subscriptions:
            self._logger.debug("published_no_subscribers", extra={"event_name": event_name})
            return
        snapshot = list(subscriptions.values())
        self._metrics.increment("published", event_name=event_name)
        self._logger.info(
            "published",
            extra={"event_name": event_name, "subscriber_count": len(snapshot)},
        )
        errors: List[Tuple[Subscription, BaseException]] = []
        for subscription in snapshot:
            if subscription.once and not self._claim(subscription):
                continue
            try:
                subscription.invoke(*args)
            except Exception as e:
                self._metrics.increment("delivery_failed", event_name=event_name)
                if not self._isolate_errors:
                    raise
                self._logger.exception(
                    "delivery_failed",
                    extra={
                        "event_name": event_name,
                        "subscription_id": subscription.subscription_id,
                        "error": str(e),
                    },
                )
                errors.append((subscription, e))
                continue
            self._metrics.increment("delivered", event_name=event_name)
            self._logger.debug(
                "delivered",
                extra={"event_name": event_name, "subscription_id": subscription.subscription_id},
            )
        if errors:
            raise DispatchError(event_name, errors)

    def _claim(self, subscription: Subscription) -> bool:
        """Remove a fire-once subscription before it runs; False if something already removed it."""
        return self._discard(subscription.event_name, subscription.subscription_id)

    # ---- Unsubscribe ----

    def unsubscribe(self, event_name: str, target: Target = None) -> None:
        """
        Remove subscriptions from event_name.
        target None drops all of them, a str drops the subscription with that id, and a
        callable drops every subscription whose callback is that same object.
        Unknown names, ids and callbacks are ignored.
        """
        if target is not None and not isinstance(target, str) and not callable(target):
            raise TypeError(
                f"target must be a subscription id, a callback or None, got {type(target).__name__}"
            )
        subscriptions = self._events.get(event_name)
        if subscriptions is None:
            return
        if target is None:
            removed = list(subscriptions)
        elif isinstance(target, str):
            removed = [target] if target in subscriptions else []
        else:
            removed = [sid for sid, sub in subscriptions.items() if _same_callback(sub.callback, target)]
        for subscription_id in removed:
            self._discard(event_name, subscription_id)
        if removed:
            self._metrics.increment("unsubscribed", len(removed), event_name=event_name)
            self._logger.info(
                "unsubscribed",
                extra={"event_name": event_name, "removed": len(removed)},
            )

    def _discard(self, event_name: str, subscription_id: str) -> bool:
        subscriptions = self._events.get(event_name)
        if subscriptions is None or subscription_id not in subscriptions:
            return False
        del subscriptions[subscription_id]
        del self._index[subscription_id]
        if not subscriptions:
            del self._events[event_name]
        self._update_gauges()
        return True

    def clear(self) -> None:
        """Drop every subscription for every event name. Issued ids stay retired."""
        self._events.clear()
        self._index.clear()
        self._update_gauges()

    # ---- Aliases ----

    on = subscribe
    once = subscribe_once
    emit = publish
    off = unsubscribe

    # ---- Introspection ----

    def has_subscribers(self, event_name: str) -> bool:
        return event_name in self._events

    def subscription_count(self, event_name: Optional[str] = None) -> int:
        """Live subscriptions for one event name, or across all of them."""
        if event_name is None:
            return len(self._index)
        return len(self._events.get(event_name, {}))

    def event_names(self) -> List[str]:
        """Event names with at least one subscription, oldest first."""
        return list(self._events)

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        event_name = self._index.get(subscription_id)
        if event_name is None:
            return None
        return self._events[event_name][subscription_id]

    def _update_gauges(self) -> None:
        self._metrics.set_gauge("event_names", len(self._events))
        self._metrics.set_gauge("subscriptions", len(self._index))

    def __contains__(self, event_name: object) -> bool:
        return event_name in self._events

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"Registry(events={len(self._events)}, subscriptions={len(self._index)})"
