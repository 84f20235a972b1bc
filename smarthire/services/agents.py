"""
Agents - automated recruiting workflows.

1. ProcessingAgent      - finalizes a job's applications (Interviewing / Rejected)
2. MasterAgent          - periodically processes jobs left overdue by their owners
3. StrategicHRAgent     - turns a recruiter's free-text command into a job action
4. VideoAnalysisAgent   - scores intro-video transcripts with the AI

Every agent writes its progress to agent_logs so the HR dashboard can replay it;
the same lines go to the application log.
"""

import asyncio
import logging
import threading
from datetime import datetime, timedelta
from typing import List, Optional, Set

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import and_, delete, insert, select, update

from smarthire.db.database import fetch_all, get_db_session
from smarthire.db.tables import agent_logs, applications, candidates, jobs
from smarthire.schemas.schemas import ApplicationStatus, JobStatus, ProcessingStatus, WorkModel
from smarthire.services.application_service import (
    get_application,
    get_application_detail,
    set_application_status,
)
from smarthire.services.document_service import InterviewEvaluationService
from smarthire.services.job_service import (
    create_job,
    get_job,
    list_jobs,
    require_owned_job,
    update_job_by_title,
)
from smarthire.services.llm_client import AIServiceError, get_llm_client
from smarthire.services.screening_service import clamp_score

logger = logging.getLogger(__name__)

PROCESSING = "processing"
MASTER = "master"
STRATEGIC = "strategic"

OVERDUE_AFTER = timedelta(days=2)


# ============================================================
# AGENT LOG
# ============================================================

def log_agent(agent: str, message: str, user_id: Optional[int] = None,
              job_id: Optional[int] = None) -> str:
    logger.info("[%s agent] %s", agent, message)
    with get_db_session() as db:
        db.execute(insert(agent_logs).values(
            agent=agent, user_id=user_id, job_id=job_id,
            message=message, created_at=datetime.utcnow()
        ))
    return message


def list_agent_logs(user_id: int, agent: Optional[str] = None) -> List[dict]:
    stmt = select(agent_logs).where(agent_logs.c.user_id == user_id)
    if agent:
        stmt = stmt.where(agent_logs.c.agent == agent)
    return fetch_all(stmt.order_by(agent_logs.c.created_at, agent_logs.c.log_id))


def clear_agent_logs(user_id: int, agent: Optional[str] = None) -> None:
    stmt = delete(agent_logs).where(agent_logs.c.user_id == user_id)
    if agent:
        stmt = stmt.where(agent_logs.c.agent == agent)
    with get_db_session() as db:
        db.execute(stmt)


# ============================================================
# STOP REQUESTS
# ============================================================

_active_runs: Set[int] = set()
_stop_requests: Set[int] = set()
_stop_lock = threading.Lock()


def request_stop(job_id: int) -> bool:
    """
    Ask the processing run for this job to halt at its next checkpoint.

    Returns False when no run is active for the job; nothing is recorded then.
    """
    with _stop_lock:
        if job_id not in _active_runs:
            return False
        _stop_requests.add(job_id)
        return True


def _start_run(job_id: int) -> None:
    with _stop_lock:
        _active_runs.add(job_id)
        _stop_requests.discard(job_id)


def _finish_run(job_id: int) -> None:
    with _stop_lock:
        _active_runs.discard(job_id)
        _stop_requests.discard(job_id)


def _consume_stop(job_id: int) -> bool:
    with _stop_lock:
        if job_id in _stop_requests:
            _stop_requests.discard(job_id)
            return True
        return False


# ============================================================
# PROCESSING AGENT
# ============================================================

class ProcessingAgent:
    """
    Finalize a job's applications.

    Candidates are ranked by score. The best `number_of_positions` candidates
    that reach `min_ats_score` move to Interviewing; everyone else is Rejected.
    The job's processing_status then becomes Completed.
    """

    def __init__(self, job_id: int, user_id: Optional[int] = None):
        self.job_id = job_id
        self.user_id = user_id
        self.logs: List[str] = []
        self.found_candidates = False

    def _log(self, message: str) -> None:
        self.logs.append(log_agent(PROCESSING, message, self.user_id, self.job_id))

    def _stopped(self) -> bool:
        if _consume_stop(self.job_id):
            self._log("Stop requested. Agent halted; job processing remains Pending.")
            return True
        return False

    def _result(self, completed: bool, interviewing=None, rejected=None) -> dict:
        return {
            "job_id": self.job_id,
            "interviewing": interviewing or [],
            "rejected": rejected or [],
            "completed": completed,
            "logs": self.logs,
        }

    def run(self) -> dict:
        _start_run(self.job_id)
        try:
            return self._process()
        finally:
            _finish_run(self.job_id)

    def _process(self) -> dict:
        job = get_job(self.job_id)
        if self.user_id is None and job:
            self.user_id = job["hr_id"]

        self._log("Agent activated. Analyzing job and candidates...")

        job_candidates = fetch_all(
            select(candidates.c.candidate_id, candidates.c.score, applications.c.application_id)
            .join(applications, applications.c.candidate_id == candidates.c.candidate_id)
            .where(candidates.c.job_id == self.job_id)
            .order_by(candidates.c.score.desc(), candidates.c.candidate_id)
        ) if job else []

        if not job_candidates:
            self._log("No candidates found for this job. Agent shutting down.")
            return self._result(completed=False)
        self.found_candidates = True

        min_score = job["min_ats_score"] if job["min_ats_score"] is not None else 70
        positions = job["number_of_positions"] or 1
        self._log(
            f"Found {len(job_candidates)} candidates. Minimum score set to {min_score}. "
            f"Number of positions: {positions}."
        )
        if self._stopped():
            return self._result(completed=False)

        qualified = [c for c in job_candidates if c["score"] >= min_score]
        top = qualified[:positions]
        top_ids = {c["candidate_id"] for c in top}
        rejected = [c for c in job_candidates if c["candidate_id"] not in top_ids]

        self._log(f"Identified {len(top)} top candidates to move to 'Interviewing'.")
        if self._stopped():
            return self._result(completed=False)

        for c in top:
            set_application_status(c["application_id"], ApplicationStatus.interviewing)
        for c in rejected:
            set_application_status(c["application_id"], ApplicationStatus.rejected)

        self._log(
            f"Identified {len(rejected)} candidates to be rejected based on score and position availability."
        )

        with get_db_session() as db:
            db.execute(
                update(jobs)
                .where(jobs.c.job_id == self.job_id)
                .values(processing_status=ProcessingStatus.completed.value, updated_at=datetime.utcnow())
            )
        self._log("Agent has finished processing applications. Statuses have been updated.")

        return self._result(
            completed=True,
            interviewing=[c["candidate_id"] for c in top],
            rejected=[c["candidate_id"] for c in rejected],
        )


def process_applications(job_id: int, hr_id: int) -> dict:
    """Manual run by the job's owner, only once the deadline has passed."""
    job = require_owned_job(job_id, hr_id)
    if job["processing_status"] == ProcessingStatus.completed.value:
        raise HTTPException(status_code=409, detail="Applications for this job were already processed")
    if not job["application_deadline"] or job["application_deadline"] > datetime.utcnow():
        raise HTTPException(status_code=400, detail="The application deadline has not passed yet")
    return ProcessingAgent(job_id, hr_id).run()


# ============================================================
# MASTER AGENT
# ============================================================

class MasterAgent:
    """Processes jobs whose owners left them unprocessed 2+ days past the deadline."""

    def overdue_jobs(self, now: Optional[datetime] = None) -> List[dict]:
        now = now or datetime.utcnow()
        return fetch_all(
            select(jobs)
            .where(and_(
                jobs.c.status == JobStatus.open.value,
                jobs.c.processing_status != ProcessingStatus.completed.value,
                jobs.c.application_deadline.is_not(None),
                jobs.c.application_deadline < now - OVERDUE_AFTER,
            ))
            .order_by(jobs.c.application_deadline, jobs.c.job_id)
        )

    def sweep(self, now: Optional[datetime] = None) -> Optional[dict]:
        """Process the first overdue job, if any. Returns the processing result."""
        overdue = self.overdue_jobs(now)
        if not overdue:
            return None

        job = overdue[0]
        log_agent(
            MASTER,
            f'Detected overdue job: "{job["title"]}". Initiating automatic processing.',
            job["hr_id"], job["job_id"],
        )
        agent = ProcessingAgent(job["job_id"], job["hr_id"])
        result = agent.run()

        # nothing to process; mark it so the next sweep moves on
        if not agent.found_candidates:
            with get_db_session() as db:
                db.execute(
                    update(jobs)
                    .where(jobs.c.job_id == job["job_id"])
                    .values(processing_status=ProcessingStatus.completed.value)
                )
        return result


async def run_master_agent_loop(interval_seconds: int) -> None:
    """Background task started with the app; cancelled on shutdown."""
    agent = MasterAgent()
    logger.info("Master agent started (interval %ss)", interval_seconds)
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(agent.sweep)
        except Exception:
            logger.exception("Master agent sweep failed")


# ============================================================
# STRATEGIC HR AGENT
# ============================================================

STRATEGIC_ACTIONS = ("create_job", "update_job", "close_job", "answer_question")

DETAIL_FIELDS = {
    "title": "title",
    "description": "description",
    "requirements": "requirements",
    "location": "location",
    "salary": "salary",
    "workModel": "work_model",
    "applicationDeadline": "application_deadline",
}


def parse_deadline(value) -> Optional[datetime]:
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d")
    except ValueError:
        return None


def job_details_to_fields(details: dict) -> dict:
    """Map the model's jobDetails onto job fields, dropping empty or invalid values."""
    fields = {}
    for source, target in DETAIL_FIELDS.items():
        value = details.get(source)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        if target == "work_model":
            if value not in {m.value for m in WorkModel}:
                continue
        elif target == "application_deadline":
            value = parse_deadline(value)
            if value is None:
                continue
        else:
            value = str(value).strip()
        fields[target] = value
    return fields


class StrategicHRAgent:
    """Execute one free-text recruiter command."""

    def __init__(self, user: dict):
        self.user = user
        self.logs: List[str] = []

    def _log(self, message: str, job_id: Optional[int] = None) -> None:
        self.logs.append(log_agent(STRATEGIC, message, self.user["user_id"], job_id))

    def _fail(self, message: str):
        self._log(f"Agent: Error - {message}")
        raise HTTPException(status_code=400, detail=message)

    def run(self, prompt: str) -> dict:
        self._log(f"User: {prompt}")
        self._log("Agent: Analyzing request...")

        own_jobs = list_jobs(hr_id=self.user["user_id"], include_closed=True)[:5]
        context = [
            {"title": j["title"], "description": j["description"], "requirements": j["requirements"]}
            for j in own_jobs
        ]
        today = datetime.utcnow().date().isoformat()

        try:
            result = get_llm_client().plan_hr_action(prompt, context, today)
        except AIServiceError as e:
            self._log(f"Agent: Error - {e}")
            raise

        thought = str(result.get("thought") or "").strip()
        action = result.get("action")
        details = result.get("jobDetails") if isinstance(result.get("jobDetails"), dict) else None
        job_id = None

        if thought:
            self._log(f"Agent: {thought}")

        if action == "create_job":
            if not details:
                self._fail("Action 'create_job' was specified, but no job details were provided.")
            job = create_job(self.user["user_id"], job_details_to_fields(details))
            job_id = job["job_id"]
            self._log(f'Agent: I have created the new job posting for "{job["title"]}". It is now live.', job_id)

        elif action == "update_job":
            target = (details or {}).get("targetJobTitle")
            if not target:
                self._fail("Action 'update_job' requires 'targetJobTitle' and details to update.")
            job = update_job_by_title(self.user["user_id"], target, job_details_to_fields(details))
            if job:
                job_id = job["job_id"]
                self._log(f'Agent: I have updated the job posting for "{target}".', job_id)
            else:
                self._log(f'Agent: I couldn\'t find a job titled "{target}" to update.')

        elif action == "close_job":
            target = (details or {}).get("targetJobTitle")
            if not target:
                self._fail("Action 'close_job' requires 'targetJobTitle'.")
            job = update_job_by_title(self.user["user_id"], target, {"status": JobStatus.closed.value})
            if job:
                job_id = job["job_id"]
                self._log(f'Agent: I have closed the job posting for "{target}".', job_id)
            else:
                self._log(f'Agent: I couldn\'t find a job titled "{target}" to close.')

        elif action == "answer_question":
            answer = str(result.get("answer") or "").strip()
            if not answer:
                self._fail("Action 'answer_question' was specified, but no answer was provided.")
            self._log(f"Agent: {answer}")

        else:
            self._log(
                "Agent: I understood the request, but I couldn't map it to a specific action. "
                "Please try rephrasing."
            )
            action = None

        return {"action": action, "thought": thought or None, "job_id": job_id, "logs": self.logs}


# ============================================================
# VIDEO ANALYSIS AGENT
# ============================================================

COMMUNICATION_METRICS = {
    "clarity": "clarity",
    "confidence": "confidence",
    "articulation": "articulation",
    "overall_fit": "overallFit",
}


def validate_interview_evaluation(data: dict) -> dict:
    breakdown = []
    for item in data.get("skillBreakdown") or []:
        if isinstance(item, dict) and str(item.get("skill") or "").strip():
            breakdown.append({
                "skill": str(item["skill"]).strip(),
                "score": clamp_score(item.get("score")),
                "rationale": str(item.get("rationale") or "").strip(),
            })

    communication = data.get("communicationAnalysis")
    if not isinstance(communication, dict):
        communication = {}
    analysis = {}
    for key, source in COMMUNICATION_METRICS.items():
        metric = communication.get(source) or communication.get(key)
        if not isinstance(metric, dict):
            metric = {}
        analysis[key] = {
            "score": clamp_score(metric.get("score")),
            "rationale": str(metric.get("rationale") or "").strip(),
        }

    return {
        "interview_score": clamp_score(data.get("interviewScore")),
        "skill_breakdown": breakdown,
        "communication_analysis": analysis,
        "ai_evaluation_summary": str(data.get("aiEvaluationSummary") or "").strip(),
        "recommendation": str(data.get("recommendation") or "").strip()[:200],
    }


class VideoAnalysisAgent:
    """Evaluate intro-video transcripts and store the scores on the application."""

    def analyze_application(self, application_id: int) -> Optional[dict]:
        """
        Returns:
            Updated application detail, or None when there is no transcript to analyze
        """
        app = get_application(application_id)
        if not app or not app["self_intro_video_transcript"]:
            logger.info("Application %s has no transcript, skipping video analysis", application_id)
            return None

        job = get_job(app["job_id"])
        ai_client = get_llm_client()
        raw = ai_client.evaluate_interview(job["title"], job["requirements"], app["self_intro_video_transcript"])
        evaluation = validate_interview_evaluation(raw)

        with get_db_session() as db:
            db.execute(
                update(applications)
                .where(applications.c.application_id == application_id)
                .values(updated_at=datetime.utcnow(), **evaluation)
            )
        InterviewEvaluationService().insert(
            application_id=application_id,
            transcript=app["self_intro_video_transcript"],
            model=ai_client.model,
            response=raw,
        )
        logger.info("Video analysis stored for application %s (score %s)",
                    application_id, evaluation["interview_score"])
        return get_application_detail(application_id)

    def analyze_job(self, job_id: int) -> int:
        """Analyze every pending video of a job. Returns how many were scored."""
        pending = fetch_all(
            select(applications.c.application_id)
            .where(and_(
                applications.c.job_id == job_id,
                applications.c.self_intro_video_url.is_not(None),
                applications.c.self_intro_video_transcript.is_not(None),
                applications.c.interview_score.is_(None),
            ))
        )
        analyzed = 0
        for row in pending:
            try:
                if self.analyze_application(row["application_id"]):
                    analyzed += 1
            except AIServiceError as e:
                logger.error("Video analysis failed for application %s: %s", row["application_id"], e)
        logger.info("Video analysis for job %s: %d of %d analyzed", job_id, analyzed, len(pending))
        return analyzed

    def queue(self, hr_id: int) -> dict:
        """
        Own applications with an intro video.

        Scored ones are completed; unscored ones are pending when they have a
        transcript and missing_transcript otherwise.
        """
        rows = fetch_all(
            select(
                applications.c.application_id,
                applications.c.interview_score,
                applications.c.self_intro_video_transcript,
            )
            .join(jobs, jobs.c.job_id == applications.c.job_id)
            .join(candidates, candidates.c.candidate_id == applications.c.candidate_id)
            .where(and_(jobs.c.hr_id == hr_id, applications.c.self_intro_video_url.is_not(None)))
            .order_by(candidates.c.applied_at.desc(), applications.c.application_id.desc())
        )
        queue = {"pending": [], "completed": [], "missing_transcript": []}
        for row in rows:
            if row["interview_score"] is not None:
                key = "completed"
            elif row["self_intro_video_transcript"]:
                key = "pending"
            else:
                key = "missing_transcript"
            queue[key].append(get_application_detail(row["application_id"]))
        return queue


def analyze_closed_job(job_id: int) -> None:
    """Background task run after a job is closed."""
    try:
        VideoAnalysisAgent().analyze_job(job_id)
    except Exception:
        logger.exception("Video analysis for closed job %s failed", job_id)
