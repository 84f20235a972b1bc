"""
Profile Routes (job seekers)

GET /profile - Get own profile
PUT /profile - Create or update profile
POST /profile/resume - Build profile from a master resume (AI)
GET /profile/resume/formats - Supported upload formats
POST /profile/optimize/{job_id} - Tailor the master resume to a job (AI)
GET /profile/recommendations - Recommended jobs with match scores (AI)
GET /profile/saved-jobs - Saved jobs
POST /profile/saved-jobs/{job_id} - Save a job
DELETE /profile/saved-jobs/{job_id} - Unsave a job
GET /profile/job-alerts - Alert keywords
PUT /profile/job-alerts - Replace alert keywords
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import List

from smarthire.core.auth import get_current_seeker
from smarthire.services import job_service, notification_service, screening_service
from smarthire.utils.file_upload import extract_text_from_file, get_supported_formats
from smarthire.schemas.schemas import (
    ProfileUpdate, ProfileResponse, OptimizedResumeResponse, RecommendationResponse,
    JobResponse, JobAlertUpdate, JobAlertResponse, MessageResponse
)

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(seeker: dict = Depends(get_current_seeker)):
    profile = screening_service.get_profile(seeker["user_id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("", response_model=ProfileResponse)
async def update_profile(data: ProfileUpdate, seeker: dict = Depends(get_current_seeker)):
    """Update profile. Only provided fields are updated; summary and skills may not be emptied."""
    if data.summary is not None and not data.summary.strip():
        raise HTTPException(status_code=400, detail="Summary cannot be empty")
    skills = None
    if data.skills is not None:
        skills = [s.strip() for s in data.skills if s and s.strip()]
        if not skills:
            raise HTTPException(status_code=400, detail="Skills cannot be empty")
    if data.summary is None and skills is None and data.resume_text is None:
        raise HTTPException(status_code=400, detail="No fields to update")

    return screening_service.upsert_profile(seeker["user_id"], {
        "summary": data.summary.strip() if data.summary is not None else None,
        "skills": skills,
        "resume_text": data.resume_text,
    })


@router.post("/resume", response_model=ProfileResponse)
async def upload_profile_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, TXT or MD)"),
    seeker: dict = Depends(get_current_seeker)
):
    """
    Upload a master resume.

    Process:
    1. Extract text from file
    2. AI writes a summary and lists skills
    3. Profile is created or replaced
    """
    resume_text, filename = await extract_text_from_file(file)
    return screening_service.build_profile_from_resume(seeker["user_id"], resume_text, filename)


@router.get("/resume/formats")
async def get_resume_formats():
    """Get supported resume file formats."""
    return get_supported_formats()


@router.post("/optimize/{job_id}", response_model=OptimizedResumeResponse)
async def optimize_resume(job_id: int, seeker: dict = Depends(get_current_seeker)):
    return screening_service.optimize_resume_for_job(seeker["user_id"], job_id)


@router.get("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(seeker: dict = Depends(get_current_seeker)):
    """Up to 5 recommended open jobs plus a match score for each one not yet applied to."""
    return screening_service.get_job_recommendations(seeker["user_id"])


@router.get("/saved-jobs", response_model=List[JobResponse])
async def list_saved_jobs(seeker: dict = Depends(get_current_seeker)):
    return job_service.list_saved_jobs(seeker["user_id"])


@router.post("/saved-jobs/{job_id}", response_model=MessageResponse, status_code=201)
async def save_job(job_id: int, seeker: dict = Depends(get_current_seeker)):
    job_service.save_job(seeker["user_id"], job_id)
    return MessageResponse(message="Job saved")


@router.delete("/saved-jobs/{job_id}", response_model=MessageResponse)
async def unsave_job(job_id: int, seeker: dict = Depends(get_current_seeker)):
    job_service.unsave_job(seeker["user_id"], job_id)
    return MessageResponse(message="Job removed from saved jobs")


@router.get("/job-alerts", response_model=JobAlertResponse)
async def get_job_alerts(seeker: dict = Depends(get_current_seeker)):
    alerts = notification_service.get_job_alerts(seeker["user_id"])
    return alerts or JobAlertResponse(user_id=seeker["user_id"], keywords=[])


@router.put("/job-alerts", response_model=JobAlertResponse)
async def update_job_alerts(data: JobAlertUpdate, seeker: dict = Depends(get_current_seeker)):
    """Replace alert keywords. New jobs mentioning any keyword land in the inbox."""
    return notification_service.update_job_alerts(seeker["user_id"], data.keywords)
