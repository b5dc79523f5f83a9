"""
Refresh-token session storage.

Each account has at most one live refresh token, kept in users.refresh_token.
NULL means there is no session. Only the functions below write that column.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from core.db.base import get_conn


@dataclass(frozen=True)
class NoSession:
    pass


@dataclass(frozen=True)
class ActiveSession:
    token: str


SessionState = Union[NoSession, ActiveSession]


def _write(sql: str, params: tuple) -> int:
    conn = get_conn()
    cur = conn.cursor()
    try:
        cur.execute(sql, params)
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()
    return updated


def persist_refresh_token(user_id: str, refresh_token: str) -> None:
    """Store refresh_token as the account's only session, replacing whatever was there."""
    _write(
        "UPDATE users SET refresh_token = ?, updated_at = ? WHERE id = ?",
        (refresh_token, datetime.utcnow().isoformat(timespec="seconds"), user_id),
    )


def rotate_refresh_token(user_id: str, current_token: str, new_token: str) -> bool:
    """
    Swap current_token for new_token in one conditional UPDATE.
    Returns False when the stored value is no longer current_token, so two
    concurrent refreshes presenting the same token cannot both win.
    """
    updated = _write(
        """
        UPDATE users
        SET refresh_token = ?, updated_at = ?
        WHERE id = ? AND refresh_token = ?
        """,
        (new_token, datetime.utcnow().isoformat(timespec="seconds"), user_id, current_token),
    )
    return updated == 1


def clear_refresh_token(user_id: str) -> None:
    """End the session (logout)."""
    _write(
        "UPDATE users SET refresh_token = NULL, updated_at = ? WHERE id = ?",
        (datetime.utcnow().isoformat(timespec="seconds"), user_id),
    )


def get_refresh_token(user_id: str) -> Optional[str]:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute("SELECT refresh_token FROM users WHERE id = ?", (user_id,))
    row = cur.fetchone()
    conn.close()
    return row["refresh_token"] if row else None


def current_session(user_id: str) -> SessionState:
    token = get_refresh_token(user_id)
    return ActiveSession(token) if token else NoSession()


__all__ = [
    "NoSession",
    "ActiveSession",
    "SessionState",
    "persist_refresh_token",
    "rotate_refresh_token",
    "clear_refresh_token",
    "get_refresh_token",
    "current_session",
]
