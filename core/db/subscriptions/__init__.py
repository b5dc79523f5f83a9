"""
Subscription storage re-exports.
"""
from core.db.subscriptions.subs_store import (
    add_subscription,
    count_subscriptions,
    get_channel_ids,
    get_subscriber_ids,
    is_subscribed,
    remove_subscription,
)

__all__ = [
    "add_subscription",
    "count_subscriptions",
    "get_channel_ids",
    "get_subscriber_ids",
    "is_subscribed",
    "remove_subscription",
]
