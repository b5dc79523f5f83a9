"""
User-related storage helpers, split by responsibility.
"""
from core.db.users.auth import hash_password, verify_password
from core.db.users.user_store import (
    create_user,
    find_user_by_username_or_email,
    get_user_by_id,
    get_user_by_username,
    get_users_by_ids,
    normalize,
    sanitize_user,
    update_user_avatar,
    update_user_cover_image,
    update_user_details,
    update_user_password,
)
from core.db.users.sessions import (
    ActiveSession,
    NoSession,
    SessionState,
    clear_refresh_token,
    current_session,
    get_refresh_token,
    persist_refresh_token,
    rotate_refresh_token,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_user",
    "find_user_by_username_or_email",
    "get_user_by_id",
    "get_user_by_username",
    "get_users_by_ids",
    "normalize",
    "sanitize_user",
    "update_user_avatar",
    "update_user_cover_image",
    "update_user_details",
    "update_user_password",
    "ActiveSession",
    "NoSession",
    "SessionState",
    "clear_refresh_token",
    "current_session",
    "get_refresh_token",
    "persist_refresh_token",
    "rotate_refresh_token",
]
