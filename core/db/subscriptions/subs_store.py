"""
Subscription storage helpers (subscriber -> channel, both are user ids).
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List
from uuid import uuid4

from core.db.base import get_conn, is_unique_violation


def add_subscription(subscriber_id: str, channel_id: str) -> bool:
    """Subscribe; returns False if the pair already existed."""
    conn = get_conn()
    cur = conn.cursor()
    try:
        cur.execute(
            """
            INSERT INTO subscriptions (id, subscriber_id, channel_id, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (uuid4().hex, subscriber_id, channel_id, datetime.utcnow().isoformat(timespec="seconds")),
        )
        conn.commit()
    except Exception as exc:
        conn.rollback()
        if is_unique_violation(exc):
            return False
        raise
    finally:
        conn.close()
    return True


def remove_subscription(subscriber_id: str, channel_id: str) -> bool:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "DELETE FROM subscriptions WHERE subscriber_id = ? AND channel_id = ?",
        (subscriber_id, channel_id),
    )
    removed = cur.rowcount
    conn.commit()
    conn.close()
    return removed > 0


def is_subscribed(subscriber_id: str, channel_id: str) -> bool:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "SELECT 1 AS hit FROM subscriptions WHERE subscriber_id = ? AND channel_id = ?",
        (subscriber_id, channel_id),
    )
    row = cur.fetchone()
    conn.close()
    return row is not None


def get_subscriber_ids(channel_id: str) -> List[str]:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "SELECT subscriber_id FROM subscriptions WHERE channel_id = ? ORDER BY created_at, id",
        (channel_id,),
    )
    rows = cur.fetchall()
    conn.close()
    return [r["subscriber_id"] for r in rows]


def get_channel_ids(subscriber_id: str) -> List[str]:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        "SELECT channel_id FROM subscriptions WHERE subscriber_id = ? ORDER BY created_at, id",
        (subscriber_id,),
    )
    rows = cur.fetchall()
    conn.close()
    return [r["channel_id"] for r in rows]


def count_subscriptions(user_id: str) -> Dict[str, int]:
    """Return {'subscribers': n, 'subscribed_to': m} for a user."""
    conn = get_conn()
    cur = conn.cursor()
    cur.execute("SELECT COUNT(*) AS count FROM subscriptions WHERE channel_id = ?", (user_id,))
    subscribers = int(cur.fetchone()["count"])
    cur.execute("SELECT COUNT(*) AS count FROM subscriptions WHERE subscriber_id = ?", (user_id,))
    subscribed_to = int(cur.fetchone()["count"])
    conn.close()
    return {"subscribers": subscribers, "subscribed_to": subscribed_to}


__all__ = [
    "add_subscription",
    "remove_subscription",
    "is_subscribed",
    "get_subscriber_ids",
    "get_channel_ids",
    "count_subscriptions",
]
