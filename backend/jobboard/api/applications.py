"""Applications API — applicants apply and track; job owners review."""

from fastapi import APIRouter, Depends

from jobboard.api.deps import get_application_service, parse_id, require_role, validation_context
from jobboard.models.domain import Application, Identity
from jobboard.models.requests import CreateApplicationRequest, UpdateApplicationStatusRequest
from jobboard.models.responses import Envelope
from jobboard.services.applications import ApplicationService
from jobboard.validators import Role, struct_validator

router = APIRouter()

applicants_only = require_role(Role.APPLICANT)
reviewers = require_role(Role.RECRUITER, Role.ADMIN)


@router.post("/applications", status_code=201, response_model=Envelope[Application])
async def create_application(
    body: CreateApplicationRequest,
    identity: Identity = Depends(applicants_only),
    applications: ApplicationService = Depends(get_application_service),
):
    context = validation_context(identity)
    struct_validator.validate_or_raise(body, context)
    application = await applications.apply(body, context)
    return Envelope(status=201, message="Application submitted successfully", data=application)


@router.get("/applications", response_model=Envelope[list[Application]])
async def list_my_applications(
    identity: Identity = Depends(applicants_only),
    applications: ApplicationService = Depends(get_application_service),
):
    results = await applications.list_mine(validation_context(identity))
    return Envelope(status=200, message="Applications retrieved successfully", data=results)


@router.get("/jobs/{job_id}/applications", response_model=Envelope[list[Application]])
async def list_job_applications(
    job_id: str,
    identity: Identity = Depends(reviewers),
    applications: ApplicationService = Depends(get_application_service),
):
    results = await applications.list_for_job(parse_id(job_id, "job_id"), validation_context(identity))
    return Envelope(status=200, message="Applications retrieved successfully", data=results)


@router.patch("/applications/{application_id}/status", response_model=Envelope[Application])
async def update_application_status(
    application_id: str,
    body: UpdateApplicationStatusRequest,
    identity: Identity = Depends(reviewers),
    applications: ApplicationService = Depends(get_application_service),
):
    application_id = parse_id(application_id, "application_id")
    context = validation_context(identity)
    struct_validator.validate_or_raise(body, context)
    application = await applications.update_status(application_id, body.status, context)
    return Envelope(status=200, message="Application status updated successfully", data=application)
