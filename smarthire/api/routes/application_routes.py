"""
Application Routes

GET /applications/mine - My applications with job and candidate (job seeker only)
GET /applications/candidate/{candidate_id} - Application of a candidate (HR owner)
PATCH /applications/{application_id}/status - Change pipeline status (HR owner)
POST /applications/{application_id}/video - Upload intro video + transcript (job seeker owner)
POST /applications/{application_id}/analyze - Score the intro video now (HR owner)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from smarthire.core.auth import get_current_hr, get_current_seeker
from smarthire.services.agents import VideoAnalysisAgent
from smarthire.services.application_service import (
    attach_intro_video,
    get_application,
    get_application_for_candidate,
    get_applications_for_user,
    require_own_application,
    update_application_status,
)
from smarthire.services.email_service import notify_status_change
from smarthire.services.job_service import require_owned_job
from smarthire.services.llm_client import AIServiceError
from smarthire.utils.file_upload import save_video_file
from smarthire.schemas.schemas import (
    ApplicationDetailResponse, ApplicationListResponse, ApplicationStatusUpdate
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/mine", response_model=ApplicationListResponse)
async def my_applications(seeker: dict = Depends(get_current_seeker)):
    """Newest application first, plus the ids of every job applied to."""
    return get_applications_for_user(seeker["user_id"])


@router.get("/candidate/{candidate_id}", response_model=ApplicationDetailResponse)
async def application_for_candidate(candidate_id: int, hr: dict = Depends(get_current_hr)):
    return get_application_for_candidate(candidate_id, hr["user_id"])


@router.patch("/{application_id}/status", response_model=ApplicationDetailResponse)
async def update_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    hr: dict = Depends(get_current_hr)
):
    """
    Update application status.

    With notify=true an AI-drafted status email is logged to the candidate.
    The status change stands even if drafting the email fails.
    """
    app = update_application_status(application_id, hr["user_id"], data.status)
    if data.notify:
        try:
            notify_status_change(app["candidate_id"], hr["user_id"], data.status)
        except AIServiceError as e:
            logger.error("Status email for application %s not sent: %s", application_id, e)
    return app


@router.post("/{application_id}/video", response_model=ApplicationDetailResponse)
async def upload_intro_video(
    application_id: int,
    file: UploadFile = File(..., description="Intro video (WEBM, MP4 or MOV)"),
    transcript: Optional[str] = Form(None),
    seeker: dict = Depends(get_current_seeker)
):
    """Attach a self-introduction video (and its transcript) to my application."""
    require_own_application(application_id, seeker["user_id"])
    video_url = await save_video_file(file, application_id)
    return attach_intro_video(application_id, video_url, transcript)


@router.post("/{application_id}/analyze", response_model=ApplicationDetailResponse)
async def analyze_intro_video(application_id: int, hr: dict = Depends(get_current_hr)):
    app = get_application(application_id)
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    require_owned_job(app["job_id"], hr["user_id"])
    if not app["self_intro_video_url"]:
        raise HTTPException(status_code=400, detail="This application has no intro video")

    result = VideoAnalysisAgent().analyze_application(application_id)
    if result is None:
        raise HTTPException(status_code=400, detail="This intro video has no transcript to analyze")
    return result
