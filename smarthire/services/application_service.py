"""
Application Service - candidates and applications as seen by HR and job seekers.

A Candidate row holds the scored resume; its Application row holds the
pipeline status and the intro-video analysis. The two are created together
when a job seeker applies (see screening_service.apply_with_resume).
"""

import csv
import io
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_, select, update

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import applications, candidates, jobs
from smarthire.schemas.schemas import ApplicationStatus, CandidateSort
from smarthire.services.job_service import get_job, require_owned_job

logger = logging.getLogger(__name__)

CSV_HEADER = ["Name", "Email", "Score", "Summary", "Strengths", "Weaknesses"]


def _candidate_with_application():
    return (
        select(candidates, applications.c.application_id, applications.c.status)
        .join(applications, applications.c.candidate_id == candidates.c.candidate_id, isouter=True)
    )


# ============================================================
# HR VIEWS
# ============================================================

def get_candidates_for_job(
    job_id: int,
    hr_id: int,
    search: Optional[str] = None,
    status: Optional[ApplicationStatus] = None,
    sort_by: CandidateSort = CandidateSort.score,
) -> List[dict]:
    """
    Candidates of one owned job.

    search matches name, email or summary (case-insensitive).
    sort_by: score (highest first), name (A-Z), date (newest first).
    """
    require_owned_job(job_id, hr_id)

    stmt = _candidate_with_application().where(candidates.c.job_id == job_id)
    if search:
        stmt = stmt.where(or_(
            candidates.c.name.icontains(search, autoescape=True),
            candidates.c.email.icontains(search, autoescape=True),
            candidates.c.summary.icontains(search, autoescape=True),
        ))
    if status is not None:
        stmt = stmt.where(applications.c.status == status.value)

    if sort_by == CandidateSort.name:
        stmt = stmt.order_by(func.lower(candidates.c.name), candidates.c.candidate_id)
    elif sort_by == CandidateSort.date:
        stmt = stmt.order_by(candidates.c.applied_at.desc(), candidates.c.candidate_id.desc())
    else:
        stmt = stmt.order_by(candidates.c.score.desc(), candidates.c.candidate_id)

    return fetch_all(stmt)


def get_candidate(candidate_id: int) -> Optional[dict]:
    return fetch_one(_candidate_with_application().where(candidates.c.candidate_id == candidate_id))


def require_owned_candidate(candidate_id: int, hr_id: int) -> dict:
    candidate = get_candidate(candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    require_owned_job(candidate["job_id"], hr_id)
    return candidate


def get_application(application_id: int) -> Optional[dict]:
    return fetch_one(select(applications).where(applications.c.application_id == application_id))


def get_application_detail(application_id: int) -> Optional[dict]:
    """Application joined with its job and candidate."""
    app = get_application(application_id)
    if not app:
        return None
    app["job"] = get_job(app["job_id"])
    app["candidate"] = get_candidate(app["candidate_id"])
    return app


def get_application_for_candidate(candidate_id: int, hr_id: int) -> dict:
    require_owned_candidate(candidate_id, hr_id)
    app = fetch_one(select(applications.c.application_id).where(applications.c.candidate_id == candidate_id))
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    return get_application_detail(app["application_id"])


def set_application_status(application_id: int, status: ApplicationStatus) -> None:
    with get_db_session() as db:
        db.execute(
            update(applications)
            .where(applications.c.application_id == application_id)
            .values(status=status.value, updated_at=datetime.utcnow())
        )


def update_application_status(application_id: int, hr_id: int, status: ApplicationStatus) -> dict:
    """Move an application to a new pipeline status. Only the job's owner may do this."""
    app = get_application(application_id)
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    require_owned_job(app["job_id"], hr_id)

    set_application_status(application_id, status)
    logger.info("Application %s moved to %s by HR user %s", application_id, status.value, hr_id)
    return get_application_detail(application_id)


def export_candidates_csv(job_id: int, hr_id: int) -> str:
    """CSV of a job's candidates, highest score first. List cells are joined with '; '."""
    rows = get_candidates_for_job(job_id, hr_id)
    if not rows:
        raise HTTPException(status_code=404, detail="No candidates to export for this job.")

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for c in rows:
        writer.writerow([
            c["name"],
            c["email"],
            c["score"],
            c["summary"],
            "; ".join(c["strengths"] or []),
            "; ".join(c["weaknesses"] or []),
        ])
    return output.getvalue()


# ============================================================
# JOB SEEKER VIEWS
# ============================================================

def get_applications_for_user(user_id: int) -> dict:
    """All of a user's applications with job and candidate attached, newest applied first."""
    rows = fetch_all(
        select(applications.c.application_id)
        .join(candidates, candidates.c.candidate_id == applications.c.candidate_id)
        .where(applications.c.user_id == user_id)
        .order_by(candidates.c.applied_at.desc(), applications.c.application_id.desc())
    )
    details = [get_application_detail(row["application_id"]) for row in rows]
    details = [d for d in details if d["job"] is not None]
    return {
        "applications": details,
        "applied_job_ids": sorted({d["job_id"] for d in details}),
    }


def require_own_application(application_id: int, user_id: int) -> dict:
    app = get_application(application_id)
    if not app or app["user_id"] != user_id:
        raise HTTPException(status_code=404, detail="Application not found")
    return app


def attach_intro_video(application_id: int, video_url: str, transcript: Optional[str]) -> dict:
    """Store the intro video location and its transcript; any earlier analysis is discarded."""
    with get_db_session() as db:
        db.execute(
            update(applications)
            .where(applications.c.application_id == application_id)
            .values(
                self_intro_video_url=video_url,
                self_intro_video_transcript=(transcript or "").strip() or None,
                interview_score=None,
                skill_breakdown=None,
                communication_analysis=None,
                ai_evaluation_summary=None,
                recommendation=None,
                updated_at=datetime.utcnow(),
            )
        )
    logger.info("Intro video stored for application %s", application_id)
    return get_application_detail(application_id)


def get_interviewing_applications(hr_id: Optional[int] = None, user_id: Optional[int] = None) -> List[dict]:
    """Applications in the Interviewing stage with their job title (for the calendar)."""
    stmt = (
        select(applications.c.application_id, applications.c.candidate_id, applications.c.job_id,
               candidates.c.name.label("candidate_name"), jobs.c.title.label("job_title"))
        .join(candidates, candidates.c.candidate_id == applications.c.candidate_id)
        .join(jobs, jobs.c.job_id == applications.c.job_id)
        .where(applications.c.status == ApplicationStatus.interviewing.value)
    )
    if hr_id is not None:
        stmt = stmt.where(jobs.c.hr_id == hr_id)
    if user_id is not None:
        stmt = stmt.where(applications.c.user_id == user_id)
    return fetch_all(stmt.order_by(applications.c.candidate_id))


def get_applied_dates(user_id: int) -> List[dict]:
    return fetch_all(
        select(candidates.c.applied_at, jobs.c.title.label("job_title"))
        .join(jobs, jobs.c.job_id == candidates.c.job_id)
        .where(candidates.c.user_id == user_id)
        .order_by(candidates.c.applied_at)
    )
