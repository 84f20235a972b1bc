"""
Job Service - job posting CRUD shared by the job routes and the agents.

Ownership rule: only the HR user who created a job may change it.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import and_, delete, func, insert, or_, select, update

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import applications, candidates, jobs, questions, saved_jobs
from smarthire.schemas.schemas import DatePosted, JobStatus, ProcessingStatus
from smarthire.services.notification_service import notify_job_alerts
from smarthire.utils.logo import generate_company_logo

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Job"
DEFAULT_DESCRIPTION = "No description provided."
DEFAULT_REQUIREMENTS = "No requirements specified."

DATE_POSTED_WINDOWS = {
    DatePosted.past_24_hours: timedelta(hours=24),
    DatePosted.past_week: timedelta(days=7),
    DatePosted.past_month: timedelta(days=30),
}

UPDATABLE_FIELDS = (
    "title", "company_name", "description", "role_and_responsibilities", "requirements",
    "company_culture", "location", "salary", "work_model", "application_deadline",
    "number_of_positions", "min_ats_score", "is_video_intro_required", "status",
)


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def get_job(job_id: int) -> Optional[dict]:
    return fetch_one(select(jobs).where(jobs.c.job_id == job_id))


def require_job(job_id: int) -> dict:
    job = get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def require_owned_job(job_id: int, hr_id: int) -> dict:
    """Fetch a job owned by the given HR user or raise 404."""
    job = get_job(job_id)
    if not job or job["hr_id"] != hr_id:
        raise HTTPException(status_code=404, detail="Job not found or access denied")
    return job


def create_job(hr_id: int, data: dict) -> dict:
    """
    Create a job posting with defaults for missing fields and fire job alerts.

    Args:
        hr_id: owning HR user
        data: any subset of the job fields; missing text fields get defaults
    """
    now = datetime.utcnow()
    company_name = (data.get("company_name") or "").strip() or None
    values = {
        "hr_id": hr_id,
        "title": (data.get("title") or "").strip() or DEFAULT_TITLE,
        "company_name": company_name,
        "description": data.get("description") or DEFAULT_DESCRIPTION,
        "role_and_responsibilities": data.get("role_and_responsibilities"),
        "requirements": data.get("requirements") or DEFAULT_REQUIREMENTS,
        "company_culture": data.get("company_culture"),
        "location": data.get("location"),
        "salary": data.get("salary"),
        "work_model": _enum_value(data.get("work_model")),
        "application_deadline": data.get("application_deadline"),
        "number_of_positions": data.get("number_of_positions") or 1,
        "min_ats_score": data.get("min_ats_score") if data.get("min_ats_score") is not None else 70,
        "is_video_intro_required": bool(data.get("is_video_intro_required")),
        "status": JobStatus.open.value,
        "processing_status": ProcessingStatus.pending.value,
        "company_logo": generate_company_logo(company_name) if company_name else None,
        "created_at": now,
        "updated_at": now,
    }

    with get_db_session() as db:
        result = db.execute(insert(jobs).values(**values))
        job_id = result.inserted_primary_key[0]

    job = get_job(job_id)
    logger.info("Job %s created by HR user %s: %s", job_id, hr_id, job["title"])

    alerted = notify_job_alerts(job)
    if alerted:
        logger.info("Job alert sent to %d subscriber(s) for job %s", alerted, job_id)
    return job


def update_job(job_id: int, hr_id: int, updates: dict) -> dict:
    """Apply the provided (non-None) fields to an owned job."""
    require_owned_job(job_id, hr_id)

    values = {
        field: _enum_value(updates[field])
        for field in UPDATABLE_FIELDS
        if updates.get(field) is not None
    }
    if "company_name" in values:
        values["company_logo"] = generate_company_logo(values["company_name"])

    if values:
        values["updated_at"] = datetime.utcnow()
        with get_db_session() as db:
            db.execute(update(jobs).where(jobs.c.job_id == job_id).values(**values))

    return get_job(job_id)


def find_job_by_title(hr_id: int, title: str) -> Optional[dict]:
    """Case-insensitive exact title match among the HR user's own jobs."""
    rows = fetch_all(
        select(jobs)
        .where(and_(jobs.c.hr_id == hr_id, func.lower(jobs.c.title) == title.strip().lower()))
        .order_by(jobs.c.created_at.desc(), jobs.c.job_id.desc())
    )
    return rows[0] if rows else None


def update_job_by_title(hr_id: int, title: str, updates: dict) -> Optional[dict]:
    """Update the HR user's job with the given title. Returns None when no job matches."""
    job = find_job_by_title(hr_id, title)
    if not job:
        return None
    return update_job(job["job_id"], hr_id, updates)


def close_job(job_id: int, hr_id: int) -> dict:
    return update_job(job_id, hr_id, {"status": JobStatus.closed.value})


def delete_job(job_id: int, hr_id: int) -> None:
    """Delete an owned job together with its candidates, applications, questions and saves."""
    require_owned_job(job_id, hr_id)
    with get_db_session() as db:
        db.execute(delete(applications).where(applications.c.job_id == job_id))
        db.execute(delete(candidates).where(candidates.c.job_id == job_id))
        db.execute(delete(questions).where(questions.c.job_id == job_id))
        db.execute(delete(saved_jobs).where(saved_jobs.c.job_id == job_id))
        db.execute(delete(jobs).where(jobs.c.job_id == job_id))
    logger.info("Job %s deleted by HR user %s", job_id, hr_id)


def list_jobs(
    search: Optional[str] = None,
    work_model: Optional[str] = None,
    location: Optional[str] = None,
    date_posted: DatePosted = DatePosted.any_time,
    hr_id: Optional[int] = None,
    include_closed: bool = False,
) -> List[dict]:
    """
    List jobs, newest first.

    Only open jobs unless include_closed; hr_id restricts to one recruiter's jobs.
    """
    stmt = select(jobs)

    if not include_closed:
        stmt = stmt.where(jobs.c.status == JobStatus.open.value)
    if hr_id is not None:
        stmt = stmt.where(jobs.c.hr_id == hr_id)
    if search:
        stmt = stmt.where(or_(
            jobs.c.title.icontains(search, autoescape=True),
            jobs.c.description.icontains(search, autoescape=True),
            jobs.c.requirements.icontains(search, autoescape=True),
        ))
    if work_model:
        stmt = stmt.where(jobs.c.work_model == work_model)
    if location:
        stmt = stmt.where(jobs.c.location == location)
    if date_posted in DATE_POSTED_WINDOWS:
        stmt = stmt.where(jobs.c.created_at >= datetime.utcnow() - DATE_POSTED_WINDOWS[date_posted])

    stmt = stmt.order_by(jobs.c.created_at.desc(), jobs.c.job_id.desc())
    return fetch_all(stmt)


def jobs_needing_processing(hr_id: int) -> List[dict]:
    """Own open jobs whose deadline has passed and whose applications are not finalized."""
    return fetch_all(
        select(jobs)
        .where(and_(
            jobs.c.hr_id == hr_id,
            jobs.c.status == JobStatus.open.value,
            jobs.c.processing_status != ProcessingStatus.completed.value,
            jobs.c.application_deadline.is_not(None),
            jobs.c.application_deadline < datetime.utcnow(),
        ))
        .order_by(jobs.c.application_deadline)
    )


# ============================================================
# SAVED JOBS
# ============================================================

def save_job(user_id: int, job_id: int) -> None:
    require_job(job_id)
    with get_db_session() as db:
        exists = db.execute(
            select(saved_jobs.c.job_id)
            .where(and_(saved_jobs.c.user_id == user_id, saved_jobs.c.job_id == job_id))
        ).first()
        if not exists:
            db.execute(insert(saved_jobs).values(user_id=user_id, job_id=job_id, saved_at=datetime.utcnow()))


def unsave_job(user_id: int, job_id: int) -> None:
    with get_db_session() as db:
        db.execute(
            delete(saved_jobs)
            .where(and_(saved_jobs.c.user_id == user_id, saved_jobs.c.job_id == job_id))
        )


def list_saved_jobs(user_id: int) -> List[dict]:
    """Most recently saved first."""
    return fetch_all(
        select(jobs)
        .join(saved_jobs, saved_jobs.c.job_id == jobs.c.job_id)
        .where(saved_jobs.c.user_id == user_id)
        .order_by(saved_jobs.c.saved_at.desc(), jobs.c.job_id.desc())
    )
