"""
Email Service - AI-drafted emails and the job seeker's email assistant chat.
"""

import logging
from datetime import datetime
from typing import Iterator, List

from fastapi import HTTPException
from sqlalchemy import and_, delete, insert, select

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import applications, chat_messages
from smarthire.schemas.schemas import ApplicationStatus
from smarthire.services.application_service import get_candidate
from smarthire.services.job_service import require_job, require_owned_job
from smarthire.services.llm_client import AIServiceError, get_llm_client
from smarthire.services.notification_service import log_email

logger = logging.getLogger(__name__)

STREAM_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


def validate_email_draft(data: dict) -> dict:
    subject = str(data.get("subject") or "").strip()
    body = str(data.get("body") or "").strip()
    if not subject or not body:
        raise AIServiceError("AI returned an incomplete email draft")
    return {"subject": subject, "body": body}


def draft_status_email(candidate_id: int, hr_id: int, status: ApplicationStatus) -> dict:
    """Draft the email telling a candidate their application moved to `status`."""
    candidate = get_candidate(candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate or job not found")
    job = require_owned_job(candidate["job_id"], hr_id)

    reply = get_llm_client().draft_status_email(candidate["name"], job["title"], status.value)
    return validate_email_draft(reply)


def notify_status_change(candidate_id: int, hr_id: int, status: ApplicationStatus) -> dict:
    """Draft a status email and log it to the candidate's inbox."""
    draft = draft_status_email(candidate_id, hr_id, status)
    candidate = get_candidate(candidate_id)
    job = require_job(candidate["job_id"])
    return log_email(
        user_id=candidate["user_id"],
        candidate_id=candidate_id,
        job_title=job["title"],
        subject=draft["subject"],
        body=draft["body"],
    )


def draft_seeker_follow_up(user: dict, job_id: int) -> dict:
    """Draft a follow-up from a job seeker to the hiring team of a job."""
    job = require_job(job_id)
    app = fetch_one(
        select(applications.c.status)
        .where(and_(applications.c.user_id == user["user_id"], applications.c.job_id == job_id))
    )
    reply = get_llm_client().draft_seeker_follow_up(
        user["name"], job["title"], job["company_name"], app["status"] if app else None
    )
    return validate_email_draft(reply)


# ============================================================
# EMAIL AGENT (chat)
# ============================================================

def get_chat_history(user_id: int) -> List[dict]:
    """Oldest first."""
    return fetch_all(
        select(chat_messages.c.role, chat_messages.c.text, chat_messages.c.created_at)
        .where(chat_messages.c.user_id == user_id)
        .order_by(chat_messages.c.created_at, chat_messages.c.message_id)
    )


def _save_message(user_id: int, role: str, text: str) -> None:
    with get_db_session() as db:
        db.execute(insert(chat_messages).values(
            user_id=user_id, role=role, text=text, created_at=datetime.utcnow()
        ))


def clear_chat_history(user_id: int) -> None:
    with get_db_session() as db:
        db.execute(delete(chat_messages).where(chat_messages.c.user_id == user_id))


def run_email_agent(user_id: int, prompt: str) -> Iterator[str]:
    """
    Stream the assistant's reply to `prompt` as text chunks.

    The user message is stored before the call, the model message once the
    stream ends. If the stream fails the error text is sent (and stored) in
    place of the reply.
    """
    _save_message(user_id, "user", prompt)
    history = [{"role": m["role"], "text": m["text"]} for m in get_chat_history(user_id)]

    chunks = []
    try:
        for chunk in get_llm_client().stream_email_agent(history):
            chunks.append(chunk)
            yield chunk
    except AIServiceError as e:
        logger.error("Email agent stream error for user %s: %s", user_id, e)
        chunks = [STREAM_ERROR_MESSAGE]
        yield STREAM_ERROR_MESSAGE

    _save_message(user_id, "model", "".join(chunks))
