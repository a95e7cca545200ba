"""Exceptions raised by the event registry."""

from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from eventbus.subscription import Subscription


class EventBusError(Exception):
    """Base class for all eventbus errors."""


class SubscriptionIdCollision(EventBusError):
    """A freshly generated subscription id is already held by a live subscription."""

    def __init__(self, subscription_id: str, event_name: str) -> None:
        super().__init__(
            f"subscription id {subscription_id!r} already registered for event {event_name!r}"
        )
        self.subscription_id = subscription_id
        self.event_name = event_name


class DispatchError(EventBusError):
    """
    Raised after an isolated publish when one or more callbacks failed.
    errors holds (subscription, exception) pairs in dispatch order.
    """

    def __init__(self, event_name: str, errors: List[Tuple["Subscription", BaseException]]) -> None:
        super().__init__(f"{len(errors)} callback(s) failed while publishing {event_name!r}")
        self.event_name = event_name
        self.errors = errors

    @property
    def exceptions(self) -> List[BaseException]:
        return [exc for _, exc in self.errors]
