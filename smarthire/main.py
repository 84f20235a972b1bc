"""
SmartHire - Main Application

FastAPI backend with:
- SQL database (SQLite or PostgreSQL) for structured data
- MongoDB for documents (resumes, JDs, raw AI output)
- Generative AI (OpenAI-compatible endpoint) for scoring and drafting
- JWT authentication
- Static frontend served from /frontend

Run: uvicorn smarthire.main:app --reload
"""

import asyncio
import json
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from smarthire.api import api_router
from smarthire.core.config import get_settings
from smarthire.core.logging_setup import setup_logging
from smarthire.db.database import init_db, test_db_connection
from smarthire.db.mongodb import init_mongo_indexes, test_mongo_connection
from smarthire.db.seed import seed_demo_data
from smarthire.services.agents import run_master_agent_loop
from smarthire.services.llm_client import AIServiceError

settings = get_settings()
logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend")

# Create FastAPI app
app = FastAPI(
    title="SmartHire",
    description="""
    A recruiting platform connecting HR recruiters and job seekers.

    ## Features
    - **Authentication**: JWT-based auth for HR users and job seekers
    - **Jobs**: Posting, search and filters, AI parsing of job description files
    - **Applications**: Resume upload with AI scoring, candidate ranking, CSV export
    - **Profile**: Master resume, AI resume optimization and job recommendations
    - **Agents**: Application processing, overdue-job sweeps, free-text HR commands, video scoring
    - **Emails**: AI-drafted status emails, inbox, streaming email assistant

    ## Databases
    - SQL: users, jobs, candidates, applications, profiles, questions, emails
    - MongoDB: raw resumes, job descriptions and AI outputs
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.api_base)

# Uploaded intro videos
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

# Serve static files (for any additional assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    logger.error("AI service error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables, seed demo data, prepare MongoDB and start the master agent."""
    setup_logging(settings.log_level)
    init_db()

    if settings.seed_demo_data and seed_demo_data():
        logger.info("Seeded demo data")

    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)

    if settings.master_agent_enabled:
        app.state.master_agent = asyncio.create_task(
            run_master_agent_loop(settings.master_agent_interval_seconds)
        )


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "master_agent", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Master agent stopped")


@app.get("/config.js", tags=["Frontend"])
async def frontend_config():
    """Public settings for the static frontend. Secrets stay on the server."""
    config = {"API_BASE": settings.api_base}
    return Response(
        content=f"window.SMARTHIRE_CONFIG = {json.dumps(config)};\n",
        media_type="application/javascript"
    )


# Serve frontend for root path
@app.get("/", tags=["Frontend"])
async def serve_frontend():
    """Serve the frontend."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "SmartHire", "message": "Frontend not found. API is running."}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_db_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
