from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import BaseModel

from app.auth_utils import (
    REFRESH_COOKIE_NAME,
    clear_auth_cookies,
    get_auth_service,
    get_current_user,
    set_auth_cookies,
)
from app.responses import api_response
from core.auth_service import AuthService
from core.channels import get_channel_profile
from core.media import staged_file

router = APIRouter(prefix="/api/v1/users", tags=["users"])


class LoginRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = ""


class RefreshRequest(BaseModel):
    refreshToken: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    oldPassword: str = ""
    newPassword: str = ""


class UpdateAccountRequest(BaseModel):
    fullName: str = ""
    email: str = ""


def _stage(service: AuthService, upload: Optional[UploadFile]):
    if upload is None or not upload.filename:
        return staged_file(service.uploader.upload_dir, None)
    return staged_file(service.uploader.upload_dir, upload.file, upload.filename)


@router.post("/register")
def register(
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    fullName: str = Form(""),
    avatar: Optional[UploadFile] = File(None),
    coverImage: Optional[UploadFile] = File(None),
    service: AuthService = Depends(get_auth_service),
):
    with _stage(service, avatar) as avatar_path, _stage(service, coverImage) as cover_path:
        user = service.register(
            username=username,
            email=email,
            password=password,
            full_name=fullName,
            avatar_path=avatar_path,
            cover_path=cover_path,
        )
    return api_response(201, user, "User registered successfully")


@router.post("/login")
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = service.login(payload.password, username=payload.username, email=payload.email)
    response = api_response(
        200,
        {
            "user": result.user,
            "accessToken": result.tokens.access_token,
            "refreshToken": result.tokens.refresh_token,
        },
        "User logged in successfully",
    )
    set_auth_cookies(response, result.tokens, service)
    return response


@router.post("/logout")
def logout(user: dict = Depends(get_current_user), service: AuthService = Depends(get_auth_service)):
    service.logout(user["id"])
    response = api_response(200, {}, "User logged out")
    clear_auth_cookies(response)
    return response


@router.post("/refresh-token")
def refresh_token(
    request: Request,
    payload: Optional[RefreshRequest] = None,
    service: AuthService = Depends(get_auth_service),
):
    presented = request.cookies.get(REFRESH_COOKIE_NAME) or (payload.refreshToken if payload else None)
    tokens = service.refresh(presented)
    response = api_response(
        200,
        {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        "Access token refreshed",
    )
    set_auth_cookies(response, tokens, service)
    return response


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user: dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.change_password(user["id"], payload.oldPassword, payload.newPassword)
    return api_response(200, {}, "Password changed successfully")


@router.get("/current-user")
def current_user(user: dict = Depends(get_current_user)):
    return api_response(200, user, "Current user fetched successfully")


@router.patch("/update-account")
def update_account(
    payload: UpdateAccountRequest,
    user: dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    updated = service.update_account(user["id"], payload.fullName, payload.email)
    return api_response(200, updated, "Account details updated successfully")


@router.patch("/avatar")
def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    with _stage(service, avatar) as avatar_path:
        updated = service.update_avatar(user["id"], avatar_path)
    return api_response(200, updated, "Avatar updated successfully")


@router.patch("/cover-image")
def update_cover_image(
    coverImage: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    with _stage(service, coverImage) as cover_path:
        updated = service.update_cover_image(user["id"], cover_path)
    return api_response(200, updated, "Cover image updated successfully")


@router.get("/c/{username}")
def channel_profile(username: str, user: dict = Depends(get_current_user)):
    profile = get_channel_profile(username, user["id"])
    return api_response(200, profile, "Channel profile fetched successfully")
