"""Job Q&A - job seekers ask, the job's recruiter answers."""

from datetime import datetime
from typing import List

from fastapi import HTTPException
from sqlalchemy import insert, select, update

from smarthire.db.database import fetch_all, fetch_one, get_db_session
from smarthire.db.tables import questions
from smarthire.services.job_service import require_job, require_owned_job


def to_response(row: dict) -> dict:
    """Nest the answer columns the way the API returns them."""
    answer = None
    if row["answer_text"] is not None:
        answer = {
            "hr_id": row["answer_hr_id"],
            "hr_name": row["answer_hr_name"],
            "answer_text": row["answer_text"],
            "answered_at": row["answered_at"],
        }
    return {
        "question_id": row["question_id"],
        "job_id": row["job_id"],
        "user_id": row["user_id"],
        "user_name": row["user_name"],
        "question_text": row["question_text"],
        "created_at": row["created_at"],
        "answer": answer,
    }


def get_question(question_id: int) -> dict:
    row = fetch_one(select(questions).where(questions.c.question_id == question_id))
    if not row:
        raise HTTPException(status_code=404, detail="Question not found")
    return row


def ask_question(job_id: int, user: dict, question_text: str) -> dict:
    require_job(job_id)
    text = question_text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Question cannot be empty")

    with get_db_session() as db:
        result = db.execute(insert(questions).values(
            job_id=job_id,
            user_id=user["user_id"],
            user_name=user["name"],
            question_text=text,
            created_at=datetime.utcnow(),
        ))
        question_id = result.inserted_primary_key[0]
    return to_response(get_question(question_id))


def get_questions_for_job(job_id: int) -> List[dict]:
    """Newest first."""
    require_job(job_id)
    rows = fetch_all(
        select(questions)
        .where(questions.c.job_id == job_id)
        .order_by(questions.c.created_at.desc(), questions.c.question_id.desc())
    )
    return [to_response(row) for row in rows]


def answer_question(question_id: int, hr: dict, answer_text: str) -> dict:
    """Answer (or re-answer) a question on one of the HR user's own jobs."""
    question = get_question(question_id)
    require_owned_job(question["job_id"], hr["user_id"])
    text = answer_text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Answer cannot be empty")

    with get_db_session() as db:
        db.execute(
            update(questions)
            .where(questions.c.question_id == question_id)
            .values(
                answer_hr_id=hr["user_id"],
                answer_hr_name=hr["name"],
                answer_text=text,
                answered_at=datetime.utcnow(),
            )
        )
    return to_response(get_question(question_id))
