"""Notification endpoints."""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends

from cedoi.api.deps import get_current_user, get_now, get_settings, get_store
from cedoi.core.config import Settings
from cedoi.schemas import Notification, User
from cedoi.services.notifications import notifications_for_user
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("", response_model=List[Notification])
async def list_notifications(
    user: User = Depends(get_current_user),
    store: AttendanceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """
    Notifications for the signed-in user, recomputed on every call.

    Clients poll this endpoint; `read` is always false because read state
    is kept on the device.
    """
    return notifications_for_user(store, user, now, settings.tz)
