"""
Account CRUD. Username and email are normalized to lower case on every read and write.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import uuid4

from core.db.base import get_conn, is_unique_violation
from core.errors import ConflictError

_USER_COLUMNS = """
    id, username, email, full_name, password_hash, avatar_url, cover_image_url,
    refresh_token, created_at, updated_at
"""

# Fields that may cross the service boundary, with their public names.
_PUBLIC_FIELDS = (
    ("id", "id"),
    ("username", "username"),
    ("email", "email"),
    ("full_name", "fullName"),
    ("avatar_url", "avatarUrl"),
    ("cover_image_url", "coverImageUrl"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
)


def _now() -> str:
    return datetime.utcnow().isoformat(timespec="seconds")


def normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def sanitize_user(user: Dict | None) -> Dict | None:
    """Public view of an account row: never includes password_hash or refresh_token."""
    if user is None:
        return None
    return {public: user.get(column) for column, public in _PUBLIC_FIELDS}


def create_user(
    username: str,
    email: str,
    full_name: str,
    password_hash: str,
    avatar_url: str,
    cover_image_url: str = "",
) -> str:
    """
    Insert a new account and return its id.
    Raises ConflictError when the username or email is already taken.
    """
    user_id = uuid4().hex
    now = _now()

    conn = get_conn()
    cur = conn.cursor()
    try:
        cur.execute(
            """
            INSERT INTO users (
                id, username, email, full_name, password_hash,
                avatar_url, cover_image_url, refresh_token, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, NULL, ?, ?)
            """,
            (
                user_id,
                normalize(username),
                normalize(email),
                full_name.strip(),
                password_hash,
                avatar_url,
                cover_image_url or "",
                now,
                now,
            ),
        )
        conn.commit()
    except Exception as exc:
        conn.rollback()
        if is_unique_violation(exc):
            raise ConflictError("User with this username or email already exists") from exc
        raise
    finally:
        conn.close()
    return user_id


def _fetch_one(where: str, params: tuple) -> Optional[Dict]:
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}", params)
    row = cur.fetchone()
    conn.close()
    return dict(row) if row else None


def get_user_by_id(user_id: str) -> Optional[Dict]:
    """Look up a user by id. Returns dict or None."""
    if not user_id:
        return None
    return _fetch_one("id = ?", (user_id,))


def get_user_by_username(username: str) -> Optional[Dict]:
    return _fetch_one("username = ?", (normalize(username),))


def find_user_by_username_or_email(username: str | None, email: str | None) -> Optional[Dict]:
    """Match on either identifier; blank identifiers never match."""
    username_n, email_n = normalize(username), normalize(email)
    if not (username_n or email_n):
        return None
    return _fetch_one("username = ? OR email = ?", (username_n, email_n))


def _update(sql: str, params: tuple) -> bool:
    conn = get_conn()
    cur = conn.cursor()
    try:
        cur.execute(sql, params)
        updated = cur.rowcount
        conn.commit()
    except Exception as exc:
        conn.rollback()
        if is_unique_violation(exc):
            raise ConflictError("User with this email already exists") from exc
        raise
    finally:
        conn.close()
    return updated > 0


def update_user_password(user_id: str, password_hash: str) -> bool:
    """Replace only the password hash; other fields are untouched."""
    return _update(
        "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
        (password_hash, _now(), user_id),
    )


def update_user_details(user_id: str, full_name: str, email: str) -> bool:
    return _update(
        "UPDATE users SET full_name = ?, email = ?, updated_at = ? WHERE id = ?",
        (full_name.strip(), normalize(email), _now(), user_id),
    )


def update_user_avatar(user_id: str, avatar_url: str) -> bool:
    return _update(
        "UPDATE users SET avatar_url = ?, updated_at = ? WHERE id = ?",
        (avatar_url, _now(), user_id),
    )


def update_user_cover_image(user_id: str, cover_image_url: str) -> bool:
    return _update(
        "UPDATE users SET cover_image_url = ?, updated_at = ? WHERE id = ?",
        (cover_image_url, _now(), user_id),
    )


def get_users_by_ids(user_ids: List[str]) -> List[Dict]:
    if not user_ids:
        return []
    placeholders = ", ".join("?" for _ in user_ids)
    conn = get_conn()
    cur = conn.cursor()
    cur.execute(
        f"SELECT {_USER_COLUMNS} FROM users WHERE id IN ({placeholders}) ORDER BY username",
        tuple(user_ids),
    )
    rows = cur.fetchall()
    conn.close()
    return [dict(r) for r in rows]


__all__ = [
    "normalize",
    "sanitize_user",
    "create_user",
    "get_user_by_id",
    "get_user_by_username",
    "find_user_by_username_or_email",
    "update_user_password",
    "update_user_details",
    "update_user_avatar",
    "update_user_cover_image",
    "get_users_by_ids",
]
