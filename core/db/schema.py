"""
Schema helpers (Postgres and SQLite share the same DDL).
"""
from __future__ import annotations

from core.db.base import get_conn


def init_db() -> None:
    """Create the users and subscriptions tables if they don't exist."""
    conn = get_conn()
    cur = conn.cursor()

    # username/email are stored lower-cased, so plain UNIQUE is case-insensitive.
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS users(
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            full_name TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            avatar_url TEXT NOT NULL,
            cover_image_url TEXT NOT NULL DEFAULT '',
            refresh_token TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS subscriptions(
            id TEXT PRIMARY KEY,
            subscriber_id TEXT NOT NULL,
            channel_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY(subscriber_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY(channel_id) REFERENCES users(id) ON DELETE CASCADE,
            UNIQUE(subscriber_id, channel_id)
        )
        """
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_subscriptions_channel ON subscriptions(channel_id)"
    )

    conn.commit()
    conn.close()


__all__ = ["init_db"]
