"""
Job Routes

POST /jobs - Create job posting (HR only)
GET /jobs - List open jobs with filters
GET /jobs/mine - List own jobs, any status (HR only)
GET /jobs/needing-processing - Own jobs past deadline, not processed (HR only)
POST /jobs/parse-description - Prefill a job from an uploaded JD file (HR only)
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (owner only)
PATCH /jobs/{job_id}/criteria - Update screening criteria (owner only)
POST /jobs/{job_id}/close - Close job (owner only)
DELETE /jobs/{job_id} - Delete job (owner only)
POST /jobs/{job_id}/apply - Apply with a resume file (job seeker only)
GET /jobs/{job_id}/candidates - Ranked candidates (owner only)
GET /jobs/{job_id}/candidates/export - Candidates as CSV (owner only)
"""

from fastapi import APIRouter, BackgroundTasks, Depends, File, Query, UploadFile
from fastapi.responses import Response
from typing import List, Optional

from smarthire.core.auth import get_current_hr, get_current_seeker
from smarthire.services import job_service
from smarthire.services.agents import analyze_closed_job
from smarthire.services.application_service import (
    export_candidates_csv, get_application_detail, get_candidates_for_job
)
from smarthire.services.screening_service import apply_with_resume, parse_job_description
from smarthire.utils.file_upload import extract_text_from_file
from smarthire.schemas.schemas import (
    JobCreate, JobUpdate, JobCriteriaUpdate, JobResponse, JobListResponse, ParsedJobDescription,
    CandidateResponse, ApplicationDetailResponse, ApplicationStatus, CandidateSort, DatePosted,
    JobStatus, WorkModel, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(job: JobCreate, hr: dict = Depends(get_current_hr)):
    """Create a new job posting. Missing title/description/requirements get defaults."""
    return job_service.create_job(hr["user_id"], job.model_dump())


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: Optional[str] = Query(None, description="Search in title, description and requirements"),
    work_model: Optional[WorkModel] = Query(None),
    location: Optional[str] = Query(None),
    date_posted: DatePosted = Query(DatePosted.any_time),
):
    """List open job postings, newest first."""
    jobs = job_service.list_jobs(
        search=search,
        work_model=work_model.value if work_model else None,
        location=location,
        date_posted=date_posted,
    )
    return JobListResponse(jobs=jobs, total=len(jobs))


@router.get("/mine", response_model=JobListResponse)
async def list_my_jobs(
    search: Optional[str] = Query(None),
    work_model: Optional[WorkModel] = Query(None),
    location: Optional[str] = Query(None),
    date_posted: DatePosted = Query(DatePosted.any_time),
    hr: dict = Depends(get_current_hr),
):
    """The HR user's own postings, open and closed."""
    jobs = job_service.list_jobs(
        search=search,
        work_model=work_model.value if work_model else None,
        location=location,
        date_posted=date_posted,
        hr_id=hr["user_id"],
        include_closed=True,
    )
    return JobListResponse(jobs=jobs, total=len(jobs))


@router.get("/needing-processing", response_model=List[JobResponse])
async def jobs_needing_processing(hr: dict = Depends(get_current_hr)):
    return job_service.jobs_needing_processing(hr["user_id"])


@router.post("/parse-description", response_model=ParsedJobDescription)
async def parse_description(
    file: UploadFile = File(..., description="Job description (PDF, DOCX, TXT or MD)"),
    hr: dict = Depends(get_current_hr)
):
    """
    Extract title, description and requirements from a JD file with AI.

    Nothing is created; the result prefills the create form.
    """
    jd_text, filename = await extract_text_from_file(file)
    return parse_job_description(hr["user_id"], jd_text, filename)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int):
    return job_service.require_job(job_id)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    updates: JobUpdate,
    background_tasks: BackgroundTasks,
    hr: dict = Depends(get_current_hr)
):
    """Update job. Only provided fields are updated."""
    before = job_service.require_owned_job(job_id, hr["user_id"])
    job = job_service.update_job(job_id, hr["user_id"], updates.model_dump(exclude_none=True))
    if before["status"] != JobStatus.closed.value and job["status"] == JobStatus.closed.value:
        background_tasks.add_task(analyze_closed_job, job_id)
    return job


@router.patch("/{job_id}/criteria", response_model=JobResponse)
async def update_job_criteria(job_id: int, criteria: JobCriteriaUpdate, hr: dict = Depends(get_current_hr)):
    """Change the minimum ATS score and/or the number of open positions."""
    return job_service.update_job(job_id, hr["user_id"], criteria.model_dump(exclude_none=True))


@router.post("/{job_id}/close", response_model=JobResponse)
async def close_job(job_id: int, background_tasks: BackgroundTasks, hr: dict = Depends(get_current_hr)):
    """Close the posting; intro videos of its applicants are then analyzed in the background."""
    job = job_service.close_job(job_id, hr["user_id"])
    background_tasks.add_task(analyze_closed_job, job_id)
    return job


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, hr: dict = Depends(get_current_hr)):
    """Delete job with its candidates, applications and questions."""
    job_service.delete_job(job_id, hr["user_id"])
    return MessageResponse(message="Job deleted successfully")


@router.post("/{job_id}/apply", response_model=ApplicationDetailResponse, status_code=201)
async def apply_to_job(
    job_id: int,
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, TXT or MD)"),
    seeker: dict = Depends(get_current_seeker)
):
    """
    Apply to a job with a resume.

    Process:
    1. Extract text from file
    2. AI scores the resume against the job
    3. Candidate + Application ("Under Review") are created
    """
    job_service.require_job(job_id)
    resume_text, filename = await extract_text_from_file(file)
    result = apply_with_resume(seeker, job_id, resume_text, filename)
    return get_application_detail(result["application_id"])


@router.get("/{job_id}/candidates", response_model=List[CandidateResponse])
async def list_candidates(
    job_id: int,
    search: Optional[str] = Query(None, description="Search in name, email and summary"),
    status: Optional[ApplicationStatus] = Query(None),
    sort_by: CandidateSort = Query(CandidateSort.score),
    hr: dict = Depends(get_current_hr)
):
    return get_candidates_for_job(job_id, hr["user_id"], search=search, status=status, sort_by=sort_by)


@router.get("/{job_id}/candidates/export")
async def export_candidates(job_id: int, hr: dict = Depends(get_current_hr)):
    """Download the job's candidates as CSV."""
    content = export_candidates_csv(job_id, hr["user_id"])
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="job-{job_id}-candidates.csv"'},
    )
