"""Report export endpoints."""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response

from cedoi.api.deps import get_now, get_settings, get_store
from cedoi.core.config import Settings
from cedoi.schemas import EntityId, MemberReportRow
from cedoi.services.attendance import get_meeting_or_404, get_summary
from cedoi.services.reports import (
    export_meeting_csv,
    export_member_report_csv,
    member_report,
    render_meeting_html,
    report_filename,
)
from cedoi.storage import AttendanceStore

router = APIRouter()


@router.get("/meetings/{meeting_id}.csv", response_class=Response)
async def meeting_csv(
    meeting_id: EntityId,
    store: AttendanceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    meeting = get_meeting_or_404(store, meeting_id)
    content = export_meeting_csv(meeting, get_summary(store, meeting.id), now, settings.tz)
    filename = report_filename(meeting, settings.tz, "csv")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/meetings/{meeting_id}.html", response_class=HTMLResponse)
async def meeting_html(
    meeting_id: EntityId,
    store: AttendanceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
):
    """Printable report; the browser's print dialog turns it into a PDF."""
    meeting = get_meeting_or_404(store, meeting_id)
    return HTMLResponse(render_meeting_html(meeting, get_summary(store, meeting.id), now, settings.tz))


@router.get("/members", response_model=List[MemberReportRow])
async def members_report(
    period: str = Query("month"),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Per-member attendance rates over week, month, quarter or all meetings."""
    return member_report(store, period, now)


@router.get("/members.csv", response_class=Response)
async def members_report_csv(
    period: str = Query("month"),
    store: AttendanceStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    content = export_member_report_csv(member_report(store, period, now))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="member-report-{period}.csv"'},
    )
