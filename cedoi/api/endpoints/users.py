"""User endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Response

from cedoi.api.deps import get_store
from cedoi.schemas import EntityId, User, UserCreate
from cedoi.services.attendance import get_user_or_404
from cedoi.services.users import create_user, get_user_qr_code, list_users
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("", response_model=List[User])
async def list_users_endpoint(store: AttendanceStore = Depends(get_store)):
    return list_users(store)


@router.post("", response_model=User)
async def create_user_endpoint(user: UserCreate, store: AttendanceStore = Depends(get_store)):
    """
    Register a user.

    Raises:
        ConflictError: 409 if the email is already registered
    """
    return create_user(store, user)


@router.get("/{user_id}", response_model=User)
async def get_user_endpoint(user_id: EntityId, store: AttendanceStore = Depends(get_store)):
    return get_user_or_404(store, user_id)


@router.get("/{user_id}/qr", response_class=Response)
async def get_user_qr_endpoint(user_id: EntityId, store: AttendanceStore = Depends(get_store)):
    """The member's attendance QR code as an SVG image, for printing on badges."""
    return Response(
        content=get_user_qr_code(store, user_id),
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-cache"},
    )
