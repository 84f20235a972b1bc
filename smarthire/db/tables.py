"""
Relational schema.

Structured records live here (users, jobs, candidates, applications, profiles,
questions, email logs, alerts, saved jobs, agent logs, chat history).
Uploaded documents and raw AI outputs live in MongoDB (see db/mongodb.py).
"""

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Integer, MetaData, String,
    Table, Text, UniqueConstraint,
)

metadata = MetaData()


users = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("status", String(30), nullable=False, default="active"),
    Column("created_at", DateTime, nullable=False),
)

jobs = Table(
    "jobs", metadata,
    Column("job_id", Integer, primary_key=True, autoincrement=True),
    Column("hr_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("title", String(200), nullable=False),
    Column("company_name", String(200)),
    Column("description", Text, nullable=False),
    Column("role_and_responsibilities", Text),
    Column("requirements", Text, nullable=False),
    Column("company_culture", Text),
    Column("location", String(200)),
    Column("salary", String(100)),
    Column("status", String(20), nullable=False, default="Open"),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Column("application_deadline", DateTime),
    Column("number_of_positions", Integer, nullable=False, default=1),
    Column("min_ats_score", Integer, nullable=False, default=70),
    Column("work_model", String(20)),
    Column("is_video_intro_required", Boolean, nullable=False, default=False),
    Column("processing_status", String(20), nullable=False, default="Pending"),
    Column("company_logo", Text),
)

candidates = Table(
    "candidates", metadata,
    Column("candidate_id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("score", Integer, nullable=False, default=0),
    Column("summary", Text, nullable=False, default=""),
    Column("strengths", JSON, nullable=False, default=list),
    Column("weaknesses", JSON, nullable=False, default=list),
    Column("resume_text", Text, nullable=False, default=""),
    Column("applied_at", DateTime, nullable=False),
    Column("skills", JSON, nullable=False, default=list),
    Column("projects", JSON, nullable=False, default=list),
    Column("publications", JSON, nullable=False, default=list),
    Column("certifications", JSON, nullable=False, default=list),
    Column("resume_document_id", String(64)),
)

applications = Table(
    "applications", metadata,
    Column("application_id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("candidate_id", Integer, ForeignKey("candidates.candidate_id", ondelete="CASCADE"), nullable=False, unique=True),
    Column("status", String(20), nullable=False, default="Under Review"),
    Column("self_intro_video_url", String(500)),
    Column("self_intro_video_transcript", Text),
    Column("interview_score", Integer),
    Column("skill_breakdown", JSON),
    Column("communication_analysis", JSON),
    Column("ai_evaluation_summary", Text),
    Column("recommendation", String(200)),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),
)

user_profiles = Table(
    "user_profiles", metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("summary", Text, nullable=False, default=""),
    Column("skills", JSON, nullable=False, default=list),
    Column("resume_text", Text, nullable=False, default=""),
    Column("updated_at", DateTime, nullable=False),
)

questions = Table(
    "questions", metadata,
    Column("question_id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.job_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("user_name", String(100), nullable=False),
    Column("question_text", Text, nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("answer_hr_id", Integer),
    Column("answer_hr_name", String(100)),
    Column("answer_text", Text),
    Column("answered_at", DateTime),
)

email_logs = Table(
    "email_logs", metadata,
    Column("email_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("candidate_id", Integer),
    Column("job_title", String(200), nullable=False),
    Column("subject", String(300), nullable=False),
    Column("body", Text, nullable=False),
    Column("sent_at", DateTime, nullable=False),
    Column("is_read", Boolean, nullable=False, default=False),
)

job_alerts = Table(
    "job_alerts", metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("keywords", JSON, nullable=False, default=list),
)

saved_jobs = Table(
    "saved_jobs", metadata,
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True),
    Column("job_id", Integer, ForeignKey("jobs.job_id", ondelete="CASCADE"), primary_key=True),
    Column("saved_at", DateTime, nullable=False),
)

agent_logs = Table(
    "agent_logs", metadata,
    Column("log_id", Integer, primary_key=True, autoincrement=True),
    Column("agent", String(20), nullable=False, index=True),
    Column("user_id", Integer),
    Column("job_id", Integer),
    Column("message", Text, nullable=False),
    Column("created_at", DateTime, nullable=False),
)

chat_messages = Table(
    "chat_messages", metadata,
    Column("message_id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True),
    Column("role", String(10), nullable=False),
    Column("text", Text, nullable=False),
    Column("created_at", DateTime, nullable=False),
)
