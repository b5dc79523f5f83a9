"""
Environment-driven settings for auth tokens and media storage.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int | None, default: int) -> int:
    """Parse '15m', '1h', '10d', '30s' or a bare number of seconds."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    match = _DURATION_RE.match(value.lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]


def _cookie_secure() -> bool:
    """Secure unless COOKIE_SECURE is explicitly turned off (plain-http local runs)."""
    return os.getenv("COOKIE_SECURE", "true").strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class AuthSettings:
    access_token_secret: str
    access_token_expiry: int
    refresh_token_secret: str
    refresh_token_expiry: int
    bcrypt_rounds: int = 12
    secure_cookies: bool = True


@dataclass(frozen=True)
class MediaSettings:
    bucket: str
    region: str = "us-east-1"
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    public_url: str | None = None
    upload_dir: str = "./public/temp"


def get_auth_settings() -> AuthSettings:
    return AuthSettings(
        access_token_secret=os.getenv("ACCESS_TOKEN_SECRET", ""),
        access_token_expiry=parse_duration(os.getenv("ACCESS_TOKEN_EXPIRY"), 86400),
        refresh_token_secret=os.getenv("REFRESH_TOKEN_SECRET", ""),
        refresh_token_expiry=parse_duration(os.getenv("REFRESH_TOKEN_EXPIRY"), 10 * 86400),
        bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
        secure_cookies=_cookie_secure(),
    )


def get_media_settings() -> MediaSettings:
    return MediaSettings(
        bucket=os.getenv("MEDIA_BUCKET", ""),
        region=os.getenv("MEDIA_REGION", "us-east-1"),
        endpoint_url=os.getenv("MEDIA_ENDPOINT_URL") or None,
        access_key=os.getenv("MEDIA_ACCESS_KEY_ID") or None,
        secret_key=os.getenv("MEDIA_SECRET_ACCESS_KEY") or None,
        public_url=os.getenv("MEDIA_PUBLIC_URL") or None,
        upload_dir=os.getenv("UPLOAD_TMP_DIR", "./public/temp"),
    )


__all__ = [
    "AuthSettings",
    "MediaSettings",
    "get_auth_settings",
    "get_media_settings",
    "parse_duration",
]
