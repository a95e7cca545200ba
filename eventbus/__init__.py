"""In-process publish/subscribe registry with synchronous dispatch (in-memory only, no broker)."""

from eventbus.config import Settings, load_settings
from eventbus.errors import DispatchError, EventBusError, SubscriptionIdCollision
from eventbus.registry import Registry, new_subscription_id
from eventbus.subscription import Subscription

__all__ = [
    "Registry",
    "Subscription",
    "Settings",
    "load_settings",
    "new_subscription_id",
    "EventBusError",
    "SubscriptionIdCollision",
    "DispatchError",
]
