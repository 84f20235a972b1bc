"""
Agent Routes (HR only)

POST /agents/processing/{job_id} - Finalize a job's applications
POST /agents/processing/{job_id}/stop - Ask a running processing agent to stop
POST /agents/master/sweep - Run one master agent sweep now
POST /agents/strategic - Execute a free-text command
GET /agents/logs - Agent logs (optionally one agent)
DELETE /agents/logs - Clear agent logs (optionally one agent)
GET /agents/video-analysis - Pending and completed intro-video analyses
POST /agents/video-analysis/jobs/{job_id} - Analyze a job's pending videos now
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from typing import List, Optional

from smarthire.core.auth import get_current_hr
from smarthire.services import agents
from smarthire.services.job_service import require_owned_job
from smarthire.schemas.schemas import (
    ProcessingResult, StrategicAgentRequest, StrategicAgentResponse, AgentLogResponse,
    VideoAnalysisQueue, MessageResponse
)

router = APIRouter(prefix="/agents", tags=["Agents"])

AGENT_NAMES = (agents.PROCESSING, agents.MASTER, agents.STRATEGIC)


def _agent_filter(agent: Optional[str]) -> Optional[str]:
    if agent is not None and agent not in AGENT_NAMES:
        raise HTTPException(status_code=400, detail=f"Unknown agent '{agent}'")
    return agent


@router.post("/processing/{job_id}", response_model=ProcessingResult)
def run_processing_agent(job_id: int, hr: dict = Depends(get_current_hr)):
    """
    Move the top candidates to Interviewing and reject the rest.

    Only after the application deadline, and only once per job.
    Runs in the threadpool so a stop request can reach it.
    """
    return agents.process_applications(job_id, hr["user_id"])


@router.post("/processing/{job_id}/stop", response_model=MessageResponse)
async def request_agent_stop(job_id: int, hr: dict = Depends(get_current_hr)):
    require_owned_job(job_id, hr["user_id"])
    if not agents.request_stop(job_id):
        raise HTTPException(status_code=409, detail="No processing run is active for this job")
    return MessageResponse(message="Stop requested")


@router.post("/master/sweep", response_model=Optional[ProcessingResult])
def run_master_sweep(hr: dict = Depends(get_current_hr)):
    """Process the first job that is more than 2 days past its deadline (null if none)."""
    return agents.MasterAgent().sweep()


@router.post("/strategic", response_model=StrategicAgentResponse)
async def run_strategic_agent(
    data: StrategicAgentRequest,
    background_tasks: BackgroundTasks,
    hr: dict = Depends(get_current_hr)
):
    result = agents.StrategicHRAgent(hr).run(data.prompt)
    if result["action"] == "close_job" and result["job_id"]:
        background_tasks.add_task(agents.analyze_closed_job, result["job_id"])
    return result


@router.get("/logs", response_model=List[AgentLogResponse])
async def get_agent_logs(
    agent: Optional[str] = Query(None, description="processing, master or strategic"),
    hr: dict = Depends(get_current_hr)
):
    return agents.list_agent_logs(hr["user_id"], _agent_filter(agent))


@router.delete("/logs", response_model=MessageResponse)
async def clear_agent_logs(agent: Optional[str] = Query(None), hr: dict = Depends(get_current_hr)):
    agents.clear_agent_logs(hr["user_id"], _agent_filter(agent))
    return MessageResponse(message="Logs cleared")


@router.get("/video-analysis", response_model=VideoAnalysisQueue)
async def video_analysis_queue(hr: dict = Depends(get_current_hr)):
    return agents.VideoAnalysisAgent().queue(hr["user_id"])


@router.post("/video-analysis/jobs/{job_id}", response_model=MessageResponse)
def analyze_job_videos(job_id: int, hr: dict = Depends(get_current_hr)):
    require_owned_job(job_id, hr["user_id"])
    analyzed = agents.VideoAnalysisAgent().analyze_job(job_id)
    return MessageResponse(message=f"{analyzed} video(s) analyzed")
