"""
Helpers for auth cookies and current-user lookup.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict

from fastapi import Depends, Request
from fastapi.responses import Response

from core.auth_service import AuthService, TokenPair
from core.config import get_auth_settings, get_media_settings
from core.media import MediaUploader

ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    return AuthService(get_auth_settings(), MediaUploader(get_media_settings()))


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def get_current_user(
    request: Request, service: AuthService = Depends(get_auth_service)
) -> Dict:
    """
    Resolve the caller from the accessToken cookie or an Authorization: Bearer header.
    Raises AuthenticationError (401) when neither holds a valid token.
    """
    token = request.cookies.get(ACCESS_COOKIE_NAME) or _bearer_token(request)
    return service.authenticate(token)


def set_auth_cookies(response: Response, tokens: TokenPair, service: AuthService) -> None:
    settings = service.settings
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=tokens.access_token,
        httponly=True,
        max_age=settings.access_token_expiry,
        samesite="lax",
        secure=settings.secure_cookies,
    )
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=tokens.refresh_token,
        httponly=True,
        max_age=settings.refresh_token_expiry,
        samesite="lax",
        secure=settings.secure_cookies,
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE_NAME)
    response.delete_cookie(REFRESH_COOKIE_NAME)


__all__ = [
    "ACCESS_COOKIE_NAME",
    "REFRESH_COOKIE_NAME",
    "get_auth_service",
    "get_current_user",
    "set_auth_cookies",
    "clear_auth_cookies",
]
