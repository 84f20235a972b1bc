"""
Question Routes

POST /jobs/{job_id}/questions - Ask about a job (job seeker only)
GET /jobs/{job_id}/questions - Questions on a job, newest first
POST /questions/{question_id}/answer - Answer a question (HR owner of the job)
"""

from fastapi import APIRouter, Depends
from typing import List

from smarthire.core.auth import get_current_hr, get_current_seeker
from smarthire.services import question_service
from smarthire.schemas.schemas import QuestionCreate, AnswerCreate, QuestionResponse

router = APIRouter(tags=["Questions"])


@router.post("/jobs/{job_id}/questions", response_model=QuestionResponse, status_code=201)
async def ask_question(job_id: int, data: QuestionCreate, seeker: dict = Depends(get_current_seeker)):
    return question_service.ask_question(job_id, seeker, data.question_text)


@router.get("/jobs/{job_id}/questions", response_model=List[QuestionResponse])
async def get_questions(job_id: int):
    return question_service.get_questions_for_job(job_id)


@router.post("/questions/{question_id}/answer", response_model=QuestionResponse)
async def answer_question(question_id: int, data: AnswerCreate, hr: dict = Depends(get_current_hr)):
    return question_service.answer_question(question_id, hr, data.answer_text)
