"""
Channel profiles and subscriptions between accounts.
"""
from __future__ import annotations

from typing import Dict, List

from core.db.subscriptions import (
    add_subscription,
    count_subscriptions,
    get_channel_ids,
    get_subscriber_ids,
    is_subscribed,
    remove_subscription,
)
from core.db.users import get_user_by_id, get_user_by_username, get_users_by_ids, sanitize_user
from core.errors import NotFoundError, ValidationError


def _require_channel(channel_id: str) -> Dict:
    channel = get_user_by_id(channel_id)
    if not channel:
        raise NotFoundError("Channel does not exist")
    return channel


def get_channel_profile(username: str, viewer_id: str) -> Dict:
    if not (username or "").strip():
        raise ValidationError("Username is missing")
    channel = get_user_by_username(username)
    if not channel:
        raise NotFoundError("Channel does not exist")
    counts = count_subscriptions(channel["id"])
    profile = sanitize_user(channel)
    profile.update(
        {
            "subscribersCount": counts["subscribers"],
            "channelsSubscribedToCount": counts["subscribed_to"],
            "isSubscribed": is_subscribed(viewer_id, channel["id"]),
        }
    )
    return profile


def toggle_subscription(subscriber_id: str, channel_id: str) -> bool:
    """Subscribe if not subscribed, otherwise unsubscribe. Returns the new state."""
    if subscriber_id == channel_id:
        raise ValidationError("You cannot subscribe to your own channel")
    _require_channel(channel_id)
    if remove_subscription(subscriber_id, channel_id):
        return False
    add_subscription(subscriber_id, channel_id)
    return True


def list_subscribers(channel_id: str) -> List[Dict]:
    _require_channel(channel_id)
    return [sanitize_user(u) for u in get_users_by_ids(get_subscriber_ids(channel_id))]


def list_subscribed_channels(subscriber_id: str) -> List[Dict]:
    if not get_user_by_id(subscriber_id):
        raise NotFoundError("User does not exist")
    return [sanitize_user(u) for u in get_users_by_ids(get_channel_ids(subscriber_id))]


__all__ = [
    "get_channel_profile",
    "toggle_subscription",
    "list_subscribers",
    "list_subscribed_channels",
]
