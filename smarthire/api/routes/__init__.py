"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from smarthire.api.routes.auth_routes import router as auth_router
from smarthire.api.routes.job_routes import router as job_router
from smarthire.api.routes.application_routes import router as application_router
from smarthire.api.routes.profile_routes import router as profile_router
from smarthire.api.routes.question_routes import router as question_router
from smarthire.api.routes.email_routes import router as email_router
from smarthire.api.routes.agent_routes import router as agent_router
from smarthire.api.routes.notification_routes import router as notification_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(profile_router)
api_router.include_router(question_router)
api_router.include_router(email_router)
api_router.include_router(agent_router)
api_router.include_router(notification_router)
