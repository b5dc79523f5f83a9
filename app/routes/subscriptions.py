from fastapi import APIRouter, Depends

from app.auth_utils import get_current_user
from app.responses import api_response
from core.channels import list_subscribed_channels, list_subscribers, toggle_subscription

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
def toggle(channel_id: str, user: dict = Depends(get_current_user)):
    subscribed = toggle_subscription(user["id"], channel_id)
    message = "Subscribed successfully" if subscribed else "Unsubscribed successfully"
    return api_response(200, {"subscribed": subscribed}, message)


@router.get("/c/{channel_id}/subscribers")
def subscribers(channel_id: str, user: dict = Depends(get_current_user)):
    return api_response(200, list_subscribers(channel_id), "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}/channels")
def subscribed_channels(subscriber_id: str, user: dict = Depends(get_current_user)):
    return api_response(
        200, list_subscribed_channels(subscriber_id), "Subscribed channels fetched successfully"
    )
