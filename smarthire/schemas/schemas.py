"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store every timestamp as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    hr = "HR"
    job_seeker = "Job Seeker"


class UserStatus(str, Enum):
    active = "active"
    pending_verification = "pending_verification"


class JobStatus(str, Enum):
    open = "Open"
    closed = "Closed"


class WorkModel(str, Enum):
    on_site = "On-site"
    remote = "Remote"
    hybrid = "Hybrid"


class ProcessingStatus(str, Enum):
    pending = "Pending"
    completed = "Completed"


class ApplicationStatus(str, Enum):
    under_review = "Under Review"
    interviewing = "Interviewing"
    rejected = "Rejected"
    hired = "Hired"


class DatePosted(str, Enum):
    any_time = "any"
    past_24_hours = "24h"
    past_week = "week"
    past_month = "month"


class CandidateSort(str, Enum):
    score = "score"
    name = "name"
    date = "date"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class PasswordResetRequest(BaseModel):
    email: EmailStr

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    name: str
    role: str

class UserResponse(BaseModel):
    user_id: int
    name: str
    email: str
    role: str
    status: str
    created_at: datetime


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    company_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    role_and_responsibilities: Optional[str] = None
    requirements: Optional[str] = None
    company_culture: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    work_model: Optional[WorkModel] = None
    application_deadline: Optional[datetime] = None
    number_of_positions: int = Field(1, ge=1)
    min_ats_score: int = Field(70, ge=0, le=100)
    is_video_intro_required: bool = False

    @field_validator("application_deadline")
    @classmethod
    def deadline_as_naive_utc(cls, value):
        return _naive_utc(value)

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    company_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    role_and_responsibilities: Optional[str] = None
    requirements: Optional[str] = None
    company_culture: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    work_model: Optional[WorkModel] = None
    application_deadline: Optional[datetime] = None
    number_of_positions: Optional[int] = Field(None, ge=1)
    min_ats_score: Optional[int] = Field(None, ge=0, le=100)
    is_video_intro_required: Optional[bool] = None
    status: Optional[JobStatus] = None

    @field_validator("application_deadline")
    @classmethod
    def deadline_as_naive_utc(cls, value):
        return _naive_utc(value)

class JobCriteriaUpdate(BaseModel):
    min_ats_score: Optional[int] = Field(None, ge=0, le=100)
    number_of_positions: Optional[int] = Field(None, ge=1)

class JobResponse(BaseModel):
    job_id: int
    hr_id: int
    title: str
    company_name: Optional[str] = None
    description: str
    role_and_responsibilities: Optional[str] = None
    requirements: str
    company_culture: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    status: str
    created_at: datetime
    application_deadline: Optional[datetime] = None
    number_of_positions: int
    min_ats_score: int
    work_model: Optional[str] = None
    is_video_intro_required: bool = False
    processing_status: str
    company_logo: Optional[str] = None

class JobListResponse(BaseModel):
    jobs: List[JobResponse]
    total: int

class ParsedJobDescription(BaseModel):
    title: str
    description: str
    requirements: str


# ============================================================
# CANDIDATE / APPLICATION SCHEMAS
# ============================================================

class CandidateResponse(BaseModel):
    candidate_id: int
    job_id: int
    user_id: int
    name: str
    email: str
    score: int
    summary: str
    strengths: List[str] = []
    weaknesses: List[str] = []
    resume_text: str
    applied_at: datetime
    skills: List[str] = []
    projects: List[str] = []
    publications: List[str] = []
    certifications: List[str] = []
    application_id: Optional[int] = None
    status: Optional[str] = None

class SkillScore(BaseModel):
    skill: str
    score: int
    rationale: str

class CommunicationMetric(BaseModel):
    score: int
    rationale: str

class CommunicationAnalysis(BaseModel):
    clarity: CommunicationMetric
    confidence: CommunicationMetric
    articulation: CommunicationMetric
    overall_fit: CommunicationMetric

class ApplicationResponse(BaseModel):
    application_id: int
    job_id: int
    user_id: int
    candidate_id: int
    status: str
    self_intro_video_url: Optional[str] = None
    self_intro_video_transcript: Optional[str] = None
    interview_score: Optional[int] = None
    skill_breakdown: Optional[List[SkillScore]] = None
    communication_analysis: Optional[CommunicationAnalysis] = None
    ai_evaluation_summary: Optional[str] = None
    recommendation: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ApplicationDetailResponse(ApplicationResponse):
    job: JobResponse
    candidate: CandidateResponse

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notify: bool = False

class ApplicationListResponse(BaseModel):
    applications: List[ApplicationDetailResponse]
    applied_job_ids: List[int]


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(BaseModel):
    summary: Optional[str] = None
    skills: Optional[List[str]] = None
    resume_text: Optional[str] = None

class ProfileResponse(BaseModel):
    user_id: int
    summary: str
    skills: List[str] = []
    resume_text: str
    updated_at: datetime

class OptimizedResumeResponse(BaseModel):
    optimized_resume: str
    changes: List[str] = []

class JobRecommendation(BaseModel):
    job_id: int
    reason: str

class JobMatchScore(BaseModel):
    job_id: int
    match_score: int

class RecommendationResponse(BaseModel):
    recommendations: List[JobRecommendation] = []
    scores: List[JobMatchScore] = []

class JobAlertUpdate(BaseModel):
    keywords: List[str]

class JobAlertResponse(BaseModel):
    user_id: int
    keywords: List[str] = []


# ============================================================
# QUESTION SCHEMAS
# ============================================================

class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=2000)

class AnswerCreate(BaseModel):
    answer_text: str = Field(..., min_length=1, max_length=4000)

class AnswerResponse(BaseModel):
    hr_id: int
    hr_name: str
    answer_text: str
    answered_at: datetime

class QuestionResponse(BaseModel):
    question_id: int
    job_id: int
    user_id: int
    user_name: str
    question_text: str
    created_at: datetime
    answer: Optional[AnswerResponse] = None


# ============================================================
# EMAIL SCHEMAS
# ============================================================

class EmailDraft(BaseModel):
    subject: str
    body: str

class FollowUpEmailRequest(BaseModel):
    candidate_id: int
    status: ApplicationStatus

class EmailLogCreate(BaseModel):
    user_id: int
    candidate_id: Optional[int] = None
    job_title: str
    subject: str = Field(..., min_length=1, max_length=300)
    body: str = Field(..., min_length=1)

class EmailLogResponse(BaseModel):
    email_id: int
    user_id: int
    candidate_id: Optional[int] = None
    job_title: str
    subject: str
    body: str
    sent_at: datetime
    read: bool

class ChatMessageResponse(BaseModel):
    role: str
    text: str
    created_at: datetime

class EmailAgentRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)


# ============================================================
# AGENT SCHEMAS
# ============================================================

class AgentLogResponse(BaseModel):
    log_id: int
    agent: str
    job_id: Optional[int] = None
    message: str
    created_at: datetime

class StrategicAgentRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)

class StrategicAgentResponse(BaseModel):
    action: Optional[str] = None
    thought: Optional[str] = None
    job_id: Optional[int] = None
    logs: List[str] = []

class ProcessingResult(BaseModel):
    job_id: int
    interviewing: List[int] = []
    rejected: List[int] = []
    completed: bool
    logs: List[str] = []

class VideoAnalysisQueue(BaseModel):
    pending: List[ApplicationDetailResponse] = []
    completed: List[ApplicationDetailResponse] = []
    missing_transcript: List[ApplicationDetailResponse] = []


# ============================================================
# NOTIFICATION / CALENDAR SCHEMAS
# ============================================================

class DeadlineNotice(BaseModel):
    job_id: int
    title: str
    application_deadline: datetime
    days_left: int

class NotificationsResponse(BaseModel):
    emails: List[EmailLogResponse] = []
    upcoming_deadlines: List[DeadlineNotice] = []
    jobs_needing_processing: List[JobResponse] = []

class CalendarEvent(BaseModel):
    date: str
    type: str
    title: str
    job_title: str
    time: Optional[str] = None

class CalendarResponse(BaseModel):
    year: int
    month: int
    events: List[CalendarEvent] = []


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
