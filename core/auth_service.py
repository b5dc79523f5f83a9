"""
Account registration, login and the refresh-token session lifecycle.

Session state per account:
    NoSession --login--> Active(T1) --refresh(T1)--> Active(T2)
    Active(T2) --refresh(T1)--> rejected, nothing changes
    Active --logout--> NoSession
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from core.config import AuthSettings
from core.db.users import (
    ActiveSession,
    clear_refresh_token,
    create_user,
    current_session,
    find_user_by_username_or_email,
    get_user_by_id,
    hash_password,
    persist_refresh_token,
    rotate_refresh_token,
    sanitize_user,
    update_user_avatar,
    update_user_cover_image,
    update_user_details,
    update_user_password,
    verify_password,
)
from core.errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    TokenConfigError,
    TokenError,
    ValidationError,
)
from core.media import MediaUploader, remove_local_file
from core.tokens import ACCESS, REFRESH, TokenIssuer

log = logging.getLogger("auth")


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    user: Dict
    tokens: TokenPair


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ""


class AuthService:
    def __init__(
        self,
        settings: AuthSettings,
        uploader: MediaUploader,
        issuer: TokenIssuer | None = None,
    ):
        self.settings = settings
        self.uploader = uploader
        self.issuer = issuer or TokenIssuer(settings)

    # -------- helpers --------
    def _hash(self, raw_password: str) -> str:
        try:
            return hash_password(raw_password, rounds=self.settings.bcrypt_rounds)
        except Exception as exc:
            log.exception("password hashing failed")
            raise InternalError("Could not process password") from exc

    def _issue_tokens(self, user: Dict) -> TokenPair:
        try:
            return TokenPair(
                access_token=self.issuer.issue_access(user),
                refresh_token=self.issuer.issue_refresh(user["id"]),
            )
        except TokenConfigError as exc:
            log.error("token signing is not configured: %s", exc)
            raise InternalError("Something went wrong while generating tokens") from exc

    def _discard_uploads(self, *urls: str) -> None:
        for url in urls:
            if url:
                self.uploader.delete(url)

    def _require_user(self, user_id: str) -> Dict:
        user = get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User does not exist")
        return user

    # -------- registration --------
    def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        avatar_path: str | None,
        cover_path: str | None = None,
    ) -> Dict:
        """
        Create an account and return its public view.
        The local upload files are removed on every exit path.
        """
        try:
            return self._register(username, email, password, full_name, avatar_path, cover_path)
        finally:
            remove_local_file(avatar_path)
            remove_local_file(cover_path)

    def _register(self, username, email, password, full_name, avatar_path, cover_path) -> Dict:
        if any(_blank(field) for field in (username, email, password, full_name)):
            raise ValidationError("All fields are required")

        if find_user_by_username_or_email(username, email):
            raise ConflictError("User with this username or email already exists")

        if not avatar_path:
            raise ValidationError("Avatar file is required")

        avatar = self.uploader.upload(avatar_path)
        if avatar is None:
            raise InternalError("Avatar upload failed")
        cover = self.uploader.upload(cover_path) if cover_path else None
        cover_url = cover.url if cover else ""

        try:
            password_hash = self._hash(password)
            user_id = create_user(
                username=username,
                email=email,
                full_name=full_name,
                password_hash=password_hash,
                avatar_url=avatar.url,
                cover_image_url=cover_url,
            )
        except (ConflictError, InternalError):
            # ConflictError here means a concurrent registration won the unique index.
            self._discard_uploads(avatar.url, cover_url)
            raise
        except Exception as exc:
            log.exception("account insert failed")
            self._discard_uploads(avatar.url, cover_url)
            raise InternalError("Something went wrong while registering the user") from exc

        created = get_user_by_id(user_id)
        if not created:
            self._discard_uploads(avatar.url, cover_url)
            raise InternalError("Something went wrong while registering the user")

        log.info("registered user id=%s", user_id)
        return sanitize_user(created)

    # -------- sessions --------
    def login(self, password: str, username: str | None = None, email: str | None = None) -> LoginResult:
        if _blank(username) and _blank(email):
            raise ValidationError("Username or email is required")
        if _blank(password):
            raise ValidationError("Password is required")

        user = find_user_by_username_or_email(username, email)
        if not user:
            raise AuthenticationError("User does not exist")

        if not verify_password(password, user["password_hash"]):
            raise AuthenticationError("Invalid user credentials")

        tokens = self._issue_tokens(user)
        persist_refresh_token(user["id"], tokens.refresh_token)
        log.info("login user id=%s", user["id"])
        return LoginResult(user=sanitize_user(user), tokens=tokens)

    def refresh(self, presented_token: str | None) -> TokenPair:
        """Exchange the current refresh token for a new pair, invalidating the old one."""
        if _blank(presented_token):
            raise AuthenticationError("Unauthorized request")

        try:
            claims = self.issuer.verify(presented_token, REFRESH)
        except TokenConfigError as exc:
            raise InternalError("Something went wrong while verifying tokens") from exc
        except TokenError as exc:
            raise AuthenticationError("Invalid or expired refresh token") from exc

        user = get_user_by_id(claims["id"])
        if not user:
            raise AuthenticationError("Invalid refresh token")

        session = current_session(user["id"])
        if not isinstance(session, ActiveSession) or not hmac.compare_digest(
            session.token, presented_token
        ):
            log.warning("stale refresh token presented for user id=%s", user["id"])
            raise AuthenticationError("Refresh token is used or expired")

        tokens = self._issue_tokens(user)
        if not rotate_refresh_token(user["id"], presented_token, tokens.refresh_token):
            log.warning("concurrent refresh lost for user id=%s", user["id"])
            raise AuthenticationError("Refresh token is used or expired")
        return tokens

    def logout(self, user_id: str) -> None:
        clear_refresh_token(user_id)
        log.info("logout user id=%s", user_id)

    def authenticate(self, access_token: str | None) -> Dict:
        """Resolve an access token to the (sanitized) account it belongs to."""
        if _blank(access_token):
            raise AuthenticationError("Unauthorized request")
        try:
            claims = self.issuer.verify(access_token, ACCESS)
        except TokenConfigError as exc:
            raise InternalError("Something went wrong while verifying tokens") from exc
        except TokenError as exc:
            raise AuthenticationError("Invalid access token") from exc

        user = get_user_by_id(claims["id"])
        if not user:
            raise AuthenticationError("Invalid access token")
        return sanitize_user(user)

    # -------- account --------
    def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        # Existing refresh token stays valid.
        if _blank(new_password):
            raise ValidationError("New password is required")
        user = self._require_user(user_id)
        if not verify_password(old_password or "", user["password_hash"]):
            raise ValidationError("Invalid old password")
        update_user_password(user_id, self._hash(new_password))
        log.info("password changed for user id=%s", user_id)

    def get_current_user(self, user_id: str) -> Dict:
        return sanitize_user(self._require_user(user_id))

    def update_account(self, user_id: str, full_name: str, email: str) -> Dict:
        if _blank(full_name) or _blank(email):
            raise ValidationError("All fields are required")
        self._require_user(user_id)
        update_user_details(user_id, full_name, email)
        return sanitize_user(self._require_user(user_id))

    def _replace_image(self, user_id, local_path, label, field, store_url) -> Dict:
        try:
            if not local_path:
                raise ValidationError(f"{label} file is missing")
            user = self._require_user(user_id)
            uploaded = self.uploader.upload(local_path)
            if uploaded is None:
                raise InternalError(f"Error while uploading {label.lower()}")
            try:
                store_url(user_id, uploaded.url)
            except Exception as exc:
                self._discard_uploads(uploaded.url)
                if isinstance(exc, AppError):
                    raise
                log.exception("could not store %s for user id=%s", field, user_id)
                raise InternalError(f"Error while updating {label.lower()}") from exc
            self._discard_uploads(user[field])
            return sanitize_user(self._require_user(user_id))
        finally:
            remove_local_file(local_path)

    def update_avatar(self, user_id: str, local_path: str | None) -> Dict:
        return self._replace_image(user_id, local_path, "Avatar", "avatar_url", update_user_avatar)

    def update_cover_image(self, user_id: str, local_path: str | None) -> Dict:
        return self._replace_image(
            user_id, local_path, "Cover image", "cover_image_url", update_user_cover_image
        )


__all__ = ["AuthService", "LoginResult", "TokenPair"]
