"""
Notification & Calendar Routes

GET /notifications - Inbox, upcoming saved-job deadlines (job seekers) and jobs awaiting processing (HR)
GET /calendar - Month view of deadlines, applications and interviews
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from smarthire.core.auth import get_current_user
from smarthire.services.calendar_service import get_calendar
from smarthire.services.job_service import jobs_needing_processing
from smarthire.services.notification_service import get_emails_for_user, upcoming_deadlines
from smarthire.schemas.schemas import CalendarResponse, NotificationsResponse, UserRole

router = APIRouter(tags=["Notifications"])


@router.get("/notifications", response_model=NotificationsResponse)
async def get_notifications(user: dict = Depends(get_current_user)):
    emails = get_emails_for_user(user["user_id"])
    if user["role"] == UserRole.hr.value:
        return NotificationsResponse(
            emails=emails, jobs_needing_processing=jobs_needing_processing(user["user_id"])
        )
    return NotificationsResponse(emails=emails, upcoming_deadlines=upcoming_deadlines(user["user_id"]))


@router.get("/calendar", response_model=CalendarResponse)
async def calendar_view(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user: dict = Depends(get_current_user)
):
    """Defaults to the current month."""
    today = datetime.utcnow()
    return get_calendar(user, year or today.year, month or today.month)
