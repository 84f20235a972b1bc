"""
Screening Service - AI-assisted resume scoring, JD parsing and profile tools.

AI OUTPUT → VALIDATED → STORED
Model replies are never trusted as-is: every reply goes through a validate_*
helper that coerces types, clamps scores to 0-100 and drops junk before any
field reaches the relational store. The raw reply is kept in MongoDB.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from fastapi import HTTPException
from sqlalchemy import and_, insert, select, update
from sqlalchemy.exc import IntegrityError

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import applications, candidates, jobs, user_profiles
from smarthire.schemas.schemas import ApplicationStatus, JobStatus
from smarthire.services.document_service import (
    ParsedJobDescriptionService,
    RawResumeService,
    ResumeEvaluationService,
)
from smarthire.services.job_service import require_job
from smarthire.services.llm_client import AIServiceError, get_llm_client

logger = logging.getLogger(__name__)

RESUME_FAILURE_MESSAGE = "Failed to process resume with AI. Please check the file and try again."


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def string_list(value) -> List[str]:
    """Coerce a model field into a list of non-empty strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def clamp_score(value, default: int = 0) -> int:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (ValueError, TypeError):
        return default


def validate_score_response(data: dict) -> dict:
    """Validate the resume scoring reply."""
    return {
        "name": str(data.get("name") or "").strip(),
        "email": str(data.get("email") or "").strip(),
        "score": clamp_score(data.get("score")),
        "summary": str(data.get("summary") or "").strip(),
        "strengths": string_list(data.get("strengths")),
        "weaknesses": string_list(data.get("weaknesses")),
        "skills": string_list(data.get("skills")),
        "projects": string_list(data.get("projects")),
        "publications": string_list(data.get("publications")),
        "certifications": string_list(data.get("certifications")),
    }


def validate_parsed_jd(data: dict) -> dict:
    requirements = data.get("requirements")
    if isinstance(requirements, list):
        requirements = ", ".join(string_list(requirements))
    return {
        "title": str(data.get("title") or "").strip() or "Untitled Job",
        "description": str(data.get("description") or "").strip(),
        "requirements": str(requirements or "").strip(),
    }


def validate_profile_extraction(data: dict) -> dict:
    return {
        "summary": str(data.get("summary") or "").strip(),
        "skills": string_list(data.get("skills")),
    }


def validate_optimized_resume(data: dict) -> dict:
    optimized = str(data.get("optimizedResume") or data.get("optimized_resume") or "").strip()
    if not optimized:
        raise AIServiceError("AI returned an empty resume")
    return {"optimized_resume": optimized, "changes": string_list(data.get("changes"))}


def _as_job_id(value) -> Optional[int]:
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def validate_recommendations(data: dict, allowed_job_ids: Iterable[int]) -> dict:
    """Keep only entries that reference jobs that were actually offered to the model."""
    allowed = set(allowed_job_ids)
    recommendations = []
    for item in data.get("recommendations") or []:
        if not isinstance(item, dict):
            continue
        job_id = _as_job_id(item.get("jobId", item.get("job_id")))
        if job_id in allowed:
            recommendations.append({"job_id": job_id, "reason": str(item.get("reason") or "").strip()})

    scores = []
    for item in data.get("scores") or []:
        if not isinstance(item, dict):
            continue
        job_id = _as_job_id(item.get("jobId", item.get("job_id")))
        if job_id in allowed:
            scores.append({
                "job_id": job_id,
                "match_score": clamp_score(item.get("matchScore", item.get("match_score"))),
            })

    return {"recommendations": recommendations[:5], "scores": scores}


# ============================================================
# RESUME SCORING (apply to job)
# ============================================================

def has_applied(user_id: int, job_id: int) -> bool:
    return fetch_one(
        select(applications.c.application_id)
        .where(and_(applications.c.user_id == user_id, applications.c.job_id == job_id))
    ) is not None


def apply_with_resume(user: dict, job_id: int, resume_text: str, filename: str = None) -> dict:
    """
    Full application pipeline:
    1. Check the job is open and the user has not applied yet
    2. Store raw resume in MongoDB
    3. Score the resume against the job with the AI
    4. Validate the reply
    5. Create Candidate + Application ("Under Review")
    6. Keep the raw reply in MongoDB

    Returns:
        {"candidate_id": ..., "application_id": ..., "score": ...}
    """
    job = require_job(job_id)
    if job["status"] != JobStatus.open.value:
        raise HTTPException(status_code=400, detail="Job is not accepting applications")
    if has_applied(user["user_id"], job_id):
        raise HTTPException(status_code=400, detail="Already applied to this job")

    raw_resume_service = RawResumeService()
    raw_id = raw_resume_service.insert(
        user_id=user["user_id"], resume_text=resume_text, filename=filename, job_id=job_id
    )

    ai_client = get_llm_client()
    try:
        raw_reply = ai_client.score_resume(job["title"], job["requirements"], resume_text)
    except AIServiceError as e:
        logger.error("Resume scoring failed for user %s, job %s: %s", user["user_id"], job_id, e)
        raise AIServiceError(RESUME_FAILURE_MESSAGE) from e
    result = validate_score_response(raw_reply)

    now = datetime.utcnow()
    try:
        with get_db_session() as db:
            cand = db.execute(insert(candidates).values(
                job_id=job_id,
                user_id=user["user_id"],
                name=user["name"],
                email=user["email"],
                score=result["score"],
                summary=result["summary"],
                strengths=result["strengths"],
                weaknesses=result["weaknesses"],
                resume_text=resume_text,
                applied_at=now,
                skills=result["skills"],
                projects=result["projects"],
                publications=result["publications"],
                certifications=result["certifications"],
                resume_document_id=raw_id,
            ))
            candidate_id = cand.inserted_primary_key[0]
            app = db.execute(insert(applications).values(
                job_id=job_id,
                user_id=user["user_id"],
                candidate_id=candidate_id,
                status=ApplicationStatus.under_review.value,
                created_at=now,
                updated_at=now,
            ))
            application_id = app.inserted_primary_key[0]
    except IntegrityError:
        if has_applied(user["user_id"], job_id):
            logger.warning("Concurrent application by user %s to job %s rejected", user["user_id"], job_id)
            raise HTTPException(status_code=400, detail="Already applied to this job")
        raise

    ResumeEvaluationService().insert(
        candidate_id=candidate_id, job_id=job_id, raw_resume_id=raw_id,
        model=ai_client.model, response=raw_reply
    )
    raw_resume_service.mark_as_evaluated(raw_id)

    logger.info(
        "User %s applied to job %s (candidate %s, score %s)",
        user["user_id"], job_id, candidate_id, result["score"]
    )
    return {"candidate_id": candidate_id, "application_id": application_id, "score": result["score"]}


# ============================================================
# JOB DESCRIPTION PARSING
# ============================================================

def parse_job_description(hr_id: int, jd_text: str, filename: str = None) -> dict:
    """Extract {title, description, requirements} from an uploaded JD for the create form."""
    parsed = validate_parsed_jd(get_llm_client().parse_job_description(jd_text))
    ParsedJobDescriptionService().insert(
        hr_id=hr_id, filename=filename, jd_text=jd_text, parsed_data=parsed
    )
    return parsed


# ============================================================
# PROFILE
# ============================================================

def get_profile(user_id: int) -> Optional[dict]:
    return fetch_one(select(user_profiles).where(user_profiles.c.user_id == user_id))


def upsert_profile(user_id: int, updates: dict) -> dict:
    """Merge the provided fields into the user's profile, creating it if needed."""
    values = {k: v for k, v in updates.items() if v is not None}
    values["updated_at"] = datetime.utcnow()
    with get_db_session() as db:
        exists = db.execute(
            select(user_profiles.c.user_id).where(user_profiles.c.user_id == user_id)
        ).first()
        if exists:
            db.execute(update(user_profiles).where(user_profiles.c.user_id == user_id).values(**values))
        else:
            db.execute(insert(user_profiles).values(
                user_id=user_id,
                summary=values.get("summary", ""),
                skills=values.get("skills", []),
                resume_text=values.get("resume_text", ""),
                updated_at=values["updated_at"],
            ))
    return get_profile(user_id)


def build_profile_from_resume(user_id: int, resume_text: str, filename: str = None) -> dict:
    """Have the AI summarize a master resume and store it as the user's profile."""
    RawResumeService().insert(
        user_id=user_id, resume_text=resume_text, filename=filename, source="profile"
    )
    extracted = validate_profile_extraction(get_llm_client().extract_profile(resume_text))
    return upsert_profile(user_id, {
        "resume_text": resume_text,
        "summary": extracted["summary"],
        "skills": extracted["skills"],
    })


def optimize_resume_for_job(user_id: int, job_id: int) -> dict:
    job = fetch_one(select(jobs).where(jobs.c.job_id == job_id))
    profile = get_profile(user_id)
    if not job or not profile or not profile["resume_text"]:
        raise HTTPException(status_code=404, detail="Job or user profile not found")

    reply = get_llm_client().optimize_resume(job["title"], job["requirements"], profile["resume_text"])
    return validate_optimized_resume(reply)


# ============================================================
# RECOMMENDATIONS
# ============================================================

def get_job_recommendations(user_id: int) -> dict:
    """
    Recommend open jobs the user has not applied to yet.

    No profile (or nothing left to recommend) → empty lists, no AI call.
    """
    empty = {"recommendations": [], "scores": []}
    profile = get_profile(user_id)
    if not profile:
        return empty

    applied = select(applications.c.job_id).where(applications.c.user_id == user_id)
    open_jobs = fetch_all(
        select(jobs.c.job_id, jobs.c.title, jobs.c.requirements)
        .where(and_(jobs.c.status == JobStatus.open.value, jobs.c.job_id.not_in(applied)))
    )
    if not open_jobs:
        return empty

    reply = get_llm_client().recommend_jobs(
        profile["summary"],
        profile["skills"] or [],
        [{"id": j["job_id"], "title": j["title"], "requirements": j["requirements"]} for j in open_jobs],
    )
    return validate_recommendations(reply, [j["job_id"] for j in open_jobs])
