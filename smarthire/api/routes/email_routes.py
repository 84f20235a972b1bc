"""
Email Routes

POST /emails/follow-up - Draft a status email to a candidate (HR only)
POST /emails/seeker-follow-up/{job_id} - Draft a follow-up to the hiring team (job seeker only)
POST /emails - Send (log) an email to a user (HR only)
GET /emails - My inbox, newest first
POST /emails/mark-read - Mark my inbox as read
POST /emails/agent - Chat with the email assistant, streamed (job seeker only)
GET /emails/agent/messages - Email assistant history (job seeker only)
DELETE /emails/agent/messages - Clear email assistant history (job seeker only)
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from typing import List

from smarthire.core.auth import get_current_hr, get_current_seeker, get_current_user
from smarthire.db.database import fetch_one
from smarthire.db.tables import users
from smarthire.services import email_service, notification_service
from smarthire.schemas.schemas import (
    EmailDraft, FollowUpEmailRequest, EmailLogCreate, EmailLogResponse,
    ChatMessageResponse, EmailAgentRequest, MessageResponse
)

router = APIRouter(prefix="/emails", tags=["Emails"])


@router.post("/follow-up", response_model=EmailDraft)
async def generate_follow_up_email(data: FollowUpEmailRequest, hr: dict = Depends(get_current_hr)):
    """AI draft telling the candidate about their new status. Nothing is sent."""
    return email_service.draft_status_email(data.candidate_id, hr["user_id"], data.status)


@router.post("/seeker-follow-up/{job_id}", response_model=EmailDraft)
async def generate_seeker_follow_up_email(job_id: int, seeker: dict = Depends(get_current_seeker)):
    return email_service.draft_seeker_follow_up(seeker, job_id)


@router.post("", response_model=EmailLogResponse, status_code=201)
async def send_email(data: EmailLogCreate, hr: dict = Depends(get_current_hr)):
    """Deliver an email to a user's inbox."""
    if not fetch_one(select(users.c.user_id).where(users.c.user_id == data.user_id)):
        raise HTTPException(status_code=404, detail="Recipient not found")
    return notification_service.log_email(
        user_id=data.user_id,
        candidate_id=data.candidate_id,
        job_title=data.job_title,
        subject=data.subject,
        body=data.body,
    )


@router.get("", response_model=List[EmailLogResponse])
async def get_my_emails(user: dict = Depends(get_current_user)):
    return notification_service.get_emails_for_user(user["user_id"])


@router.post("/mark-read", response_model=MessageResponse)
async def mark_emails_read(user: dict = Depends(get_current_user)):
    count = notification_service.mark_emails_read(user["user_id"])
    return MessageResponse(message=f"{count} email(s) marked as read")


@router.post("/agent")
async def run_email_agent(data: EmailAgentRequest, seeker: dict = Depends(get_current_seeker)):
    """Stream the assistant's reply as plain text chunks."""
    return StreamingResponse(
        email_service.run_email_agent(seeker["user_id"], data.prompt),
        media_type="text/plain"
    )


@router.get("/agent/messages", response_model=List[ChatMessageResponse])
async def get_email_agent_messages(seeker: dict = Depends(get_current_seeker)):
    return email_service.get_chat_history(seeker["user_id"])


@router.delete("/agent/messages", response_model=MessageResponse)
async def clear_email_agent(seeker: dict = Depends(get_current_seeker)):
    email_service.clear_chat_history(seeker["user_id"])
    return MessageResponse(message="Conversation cleared")
