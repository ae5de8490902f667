"""Shared API dependencies."""
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request

from cedoi.core.config import Settings
from cedoi.core.enums import Role, can_create_meeting, can_mark_attendance
from cedoi.core.security import decode_session_token, get_session_token
from cedoi.schemas import User
from cedoi.services.auth import OtpManager
from cedoi.storage import AttendanceStore


def get_store(request: Request) -> AttendanceStore:
    """The store created by create_app; one per application instance."""
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_otp_manager(request: Request) -> OtpManager:
    return request.app.state.otp_manager


def get_now() -> datetime:
    """Current instant in UTC. Overridden in tests to pin the clock."""
    return datetime.now(timezone.utc)


def get_optional_user(
    request: Request,
    store: AttendanceStore = Depends(get_store),
) -> Optional[User]:
    """The signed-in user, or None when the request carries no session."""
    token = get_session_token(request)
    if not token:
        return None

    payload = decode_session_token(token)
    user = store.get_user(payload["sub"])
    if user is None:
        raise HTTPException(status_code=401, detail="Session user no longer exists")
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_role(predicate: Callable[[Role], bool], detail: str) -> Callable[..., User]:
    """Dependency factory admitting only users whose role satisfies `predicate`."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not predicate(user.role):
            raise HTTPException(status_code=403, detail=detail)
        return user

    return dependency


require_chairman = require_role(can_create_meeting, "Only the chairman can do this")
require_marker = require_role(can_mark_attendance, "Only the chairman or organizer can mark attendance")
