"""Statistics endpoints."""
from fastapi import APIRouter, Depends

from cedoi.api.deps import get_store
from cedoi.schemas import EntityId, StatsResponse
from cedoi.services.stats import get_attendance_stats
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def forum_stats(store: AttendanceStore = Depends(get_store)):
    return get_attendance_stats(store)


@router.get("/stats/{user_id}", response_model=StatsResponse)
async def member_stats(user_id: EntityId, store: AttendanceStore = Depends(get_store)):
    """Totals for one member. An unknown user id simply has no records."""
    return get_attendance_stats(store, user_id)
