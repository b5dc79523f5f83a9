"""
Signed access/refresh tokens (HS256 JWT).

Access tokens carry the public identity claims so requests can be
authorized without a storage lookup. Refresh tokens carry only the
account id plus a random jti, so two tokens minted in the same second
still differ.
"""
from __future__ import annotations

import secrets
import time
from typing import Any, Callable, Dict

import jwt

from core.config import AuthSettings
from core.errors import TokenConfigError, TokenExpired, TokenInvalidSignature, TokenMalformed

ACCESS = "access"
REFRESH = "refresh"
ALGORITHM = "HS256"

_REQUIRED_CLAIMS = {
    ACCESS: ["id", "username", "email", "fullName", "iat", "exp"],
    REFRESH: ["id", "iat", "exp"],
}


class TokenIssuer:
    def __init__(self, settings: AuthSettings, clock: Callable[[], float] = time.time):
        self._settings = settings
        self._clock = clock

    def _secret(self, kind: str) -> str:
        if kind == ACCESS:
            secret = self._settings.access_token_secret
        elif kind == REFRESH:
            secret = self._settings.refresh_token_secret
        else:
            raise ValueError(f"Unknown token kind: {kind!r}")
        if not secret:
            raise TokenConfigError(f"{kind} token secret is not configured")
        return secret

    def _lifetime(self, kind: str) -> int:
        if kind == ACCESS:
            return self._settings.access_token_expiry
        return self._settings.refresh_token_expiry

    def _sign(self, kind: str, claims: Dict[str, Any]) -> str:
        secret = self._secret(kind)
        now = int(self._clock())
        payload = dict(claims)
        payload.update(
            {
                "iat": now,
                "exp": now + self._lifetime(kind),
                "jti": secrets.token_hex(8),
            }
        )
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def issue_access(self, user: Dict) -> str:
        return self._sign(
            ACCESS,
            {
                "id": user["id"],
                "username": user["username"],
                "email": user["email"],
                "fullName": user["full_name"],
            },
        )

    def issue_refresh(self, user_id: str) -> str:
        return self._sign(REFRESH, {"id": user_id})

    def verify(self, token: str, kind: str) -> Dict[str, Any]:
        """
        Decode and check a token of the given kind.
        Raises TokenMalformed, TokenInvalidSignature or TokenExpired.
        The signature is checked before any claim is read.
        """
        secret = self._secret(kind)
        if not token or not isinstance(token, str):
            raise TokenMalformed("token is empty")
        try:
            # exp is checked below against the injected clock, not the wall clock.
            claims = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={
                    "require": _REQUIRED_CLAIMS[kind],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenInvalidSignature(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformed(str(exc)) from exc

        exp = claims["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise TokenMalformed("exp claim must be a number")
        if exp <= int(self._clock()):
            raise TokenExpired("Signature has expired")
        return claims


__all__ = ["ACCESS", "REFRESH", "ALGORITHM", "TokenIssuer"]
