"""
Notification Service - email log, job alerts and deadline reminders.

Emails are not delivered over SMTP; every message a user would receive is
recorded in email_logs and shown in their notifications inbox.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import and_, insert, select, update

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import email_logs, job_alerts, jobs, saved_jobs, users
from smarthire.schemas.schemas import JobStatus, UserRole

logger = logging.getLogger(__name__)

DEADLINE_WINDOW = timedelta(days=7)


# ============================================================
# EMAIL LOG
# ============================================================

def _with_read_flag(row: dict) -> dict:
    row["read"] = bool(row["is_read"])
    return row


def log_email(user_id: int, job_title: str, subject: str, body: str,
              candidate_id: Optional[int] = None) -> dict:
    """Record an email sent to a user. sent_at is set here, read starts False."""
    with get_db_session() as db:
        result = db.execute(insert(email_logs).values(
            user_id=user_id,
            candidate_id=candidate_id,
            job_title=job_title,
            subject=subject,
            body=body,
            sent_at=datetime.utcnow(),
            is_read=False,
        ))
        email_id = result.inserted_primary_key[0]
    return _with_read_flag(fetch_one(select(email_logs).where(email_logs.c.email_id == email_id)))


def get_emails_for_user(user_id: int) -> List[dict]:
    """Newest first."""
    rows = fetch_all(
        select(email_logs)
        .where(email_logs.c.user_id == user_id)
        .order_by(email_logs.c.sent_at.desc(), email_logs.c.email_id.desc())
    )
    return [_with_read_flag(row) for row in rows]


def mark_emails_read(user_id: int) -> int:
    with get_db_session() as db:
        result = db.execute(
            update(email_logs)
            .where(and_(email_logs.c.user_id == user_id, email_logs.c.is_read.is_(False)))
            .values(is_read=True)
        )
        return result.rowcount


# ============================================================
# JOB ALERTS
# ============================================================

def clean_keywords(keywords: List[str]) -> List[str]:
    return [kw.strip() for kw in keywords if kw and kw.strip()]


def get_job_alerts(user_id: int) -> Optional[dict]:
    return fetch_one(select(job_alerts).where(job_alerts.c.user_id == user_id))


def update_job_alerts(user_id: int, keywords: List[str]) -> dict:
    """Replace the user's alert keywords (creates the subscription if missing)."""
    keywords = clean_keywords(keywords)
    with get_db_session() as db:
        exists = db.execute(
            select(job_alerts.c.user_id).where(job_alerts.c.user_id == user_id)
        ).first()
        if exists:
            db.execute(update(job_alerts).where(job_alerts.c.user_id == user_id).values(keywords=keywords))
        else:
            db.execute(insert(job_alerts).values(user_id=user_id, keywords=keywords))
    return {"user_id": user_id, "keywords": keywords}


def job_matches_keywords(job: dict, keywords: List[str]) -> bool:
    text = " ".join(
        str(job.get(field) or "") for field in ("title", "description", "requirements")
    ).lower()
    return any(kw.lower() in text for kw in keywords)


def notify_job_alerts(job: dict) -> int:
    """
    Email every job seeker whose alert keywords match a newly posted job.

    Returns:
        Number of alert emails logged
    """
    if job.get("status") != JobStatus.open.value:
        return 0

    subscriptions = fetch_all(
        select(job_alerts.c.user_id, job_alerts.c.keywords, users.c.name)
        .join(users, users.c.user_id == job_alerts.c.user_id)
        .where(users.c.role == UserRole.job_seeker.value)
    )

    sent = 0
    for sub in subscriptions:
        keywords = clean_keywords(sub["keywords"] or [])
        if not keywords or not job_matches_keywords(job, keywords):
            continue
        company = f" at {job['company_name']}" if job.get("company_name") else ""
        log_email(
            user_id=sub["user_id"],
            job_title=job["title"],
            subject=f"New job alert: {job['title']}{company}",
            body=(
                f"Hi {sub['name']},\n\n"
                f"A new position matching your alert keywords was just posted: "
                f"{job['title']}{company}.\n\n"
                f"{job['description']}\n\nRequirements: {job['requirements']}\n\n"
                "Log in to SmartHire to apply.\n"
            ),
        )
        sent += 1
    return sent


# ============================================================
# DEADLINES
# ============================================================

def upcoming_deadlines(user_id: int, now: Optional[datetime] = None) -> List[dict]:
    """Saved open jobs whose deadline falls within the next 7 days, soonest first."""
    now = now or datetime.utcnow()
    rows = fetch_all(
        select(jobs.c.job_id, jobs.c.title, jobs.c.application_deadline)
        .join(saved_jobs, saved_jobs.c.job_id == jobs.c.job_id)
        .where(and_(
            saved_jobs.c.user_id == user_id,
            jobs.c.status == JobStatus.open.value,
            jobs.c.application_deadline.is_not(None),
            jobs.c.application_deadline > now,
            jobs.c.application_deadline <= now + DEADLINE_WINDOW,
        ))
        .order_by(jobs.c.application_deadline)
    )
    for row in rows:
        remaining = row["application_deadline"] - now
        row["days_left"] = math.ceil(remaining.total_seconds() / 86400)
    return rows
