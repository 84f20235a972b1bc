"""
Calendar Service - month views for HR users and job seekers.

Interviews are not actually scheduled anywhere: an Interviewing application
is placed on day (candidate_id % 28) + 1 of the viewed month, at
((day % 8) + 9):00 AM, so the same candidate always lands on the same slot.
"""

import calendar
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import and_, select

from smarthire.db.database import fetch_all
from smarthire.db.tables import jobs, saved_jobs
from smarthire.schemas.schemas import UserRole
from smarthire.services.application_service import get_applied_dates, get_interviewing_applications


def interview_slot(candidate_id: int, year: int, month: int):
    """Return (date, time label) of a candidate's interview in the given month."""
    day = candidate_id % 28 + 1
    return date(year, month, day), f"{day % 8 + 9}:00 AM"


def _month_bounds(year: int, month: int):
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day, 23, 59, 59, 999999)


def _event(day: date, kind: str, title: str, job_title: str, time: Optional[str] = None) -> dict:
    return {"date": day.isoformat(), "type": kind, "title": title, "job_title": job_title, "time": time}


def get_hr_events(hr_id: int, year: int, month: int) -> List[dict]:
    start, end = _month_bounds(year, month)
    events = []

    deadlines = fetch_all(
        select(jobs.c.title, jobs.c.application_deadline)
        .where(and_(
            jobs.c.hr_id == hr_id,
            jobs.c.application_deadline.is_not(None),
            jobs.c.application_deadline.between(start, end),
        ))
    )
    for job in deadlines:
        events.append(_event(job["application_deadline"].date(), "deadline", "Deadline", job["title"]))

    for app in get_interviewing_applications(hr_id=hr_id):
        day, time = interview_slot(app["candidate_id"], year, month)
        events.append(_event(
            day, "interview", "Interview", f"{app['candidate_name']} ({app['job_title']})", time
        ))

    return _sorted(events)


def get_seeker_events(user_id: int, year: int, month: int, today: Optional[date] = None) -> List[dict]:
    start, end = _month_bounds(year, month)
    today = today or datetime.utcnow().date()
    # deadlines that already passed are hidden
    start = max(start, datetime.combine(today, datetime.min.time()))
    events = []

    deadlines = fetch_all(
        select(jobs.c.title, jobs.c.application_deadline)
        .join(saved_jobs, saved_jobs.c.job_id == jobs.c.job_id)
        .where(and_(
            saved_jobs.c.user_id == user_id,
            jobs.c.application_deadline.is_not(None),
            jobs.c.application_deadline.between(start, end),
        ))
    )
    for job in deadlines:
        events.append(_event(
            job["application_deadline"].date(), "deadline", f"Deadline: {job['title']}", job["title"]
        ))

    for row in get_applied_dates(user_id):
        applied = row["applied_at"]
        if applied.year == year and applied.month == month:
            events.append(_event(applied.date(), "applied", f"Applied: {row['job_title']}", row["job_title"]))

    for app in get_interviewing_applications(user_id=user_id):
        day, time = interview_slot(app["candidate_id"], year, month)
        events.append(_event(day, "interview", f"Interview: {app['job_title']}", app["job_title"], time))

    return _sorted(events)


def _sorted(events: List[dict]) -> List[dict]:
    return sorted(events, key=lambda e: (e["date"], e["type"]))


def get_calendar(user: dict, year: int, month: int) -> dict:
    if user["role"] == UserRole.hr.value:
        events = get_hr_events(user["user_id"], year, month)
    else:
        events = get_seeker_events(user["user_id"], year, month)
    return {"year": year, "month": month, "events": events}
