"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from jobboard.api.applications import router as applications_router
from jobboard.api.health import router as health_router
from jobboard.api.jobs import router as jobs_router
from jobboard.api.users import router as users_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Users, auth and profiles
api_router.include_router(users_router, tags=["Users"])

# Job postings
api_router.include_router(jobs_router, tags=["Jobs"])

# Applications (includes /jobs/{id}/applications)
api_router.include_router(applications_router, tags=["Applications"])
