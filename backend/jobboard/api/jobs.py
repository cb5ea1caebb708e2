"""Jobs API — public search and detail, recruiter-managed postings."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from jobboard.api.deps import get_job_service, parse_id, require_role, validation_context
from jobboard.models.domain import Identity, Job
from jobboard.models.requests import ChangeJobStatusRequest, CreateJobRequest, JobFilter, UpdateJobRequest
from jobboard.models.responses import Envelope, Meta
from jobboard.services.jobs import JobService
from jobboard.validators import Role, struct_validator

router = APIRouter(prefix="/jobs")

manage_jobs = require_role(Role.RECRUITER, Role.ADMIN)


@router.get("", response_model=Envelope[list[Job]])
async def list_jobs(
    location: Optional[str] = None,
    job_type: Optional[str] = None,
    experience_level: Optional[str] = None,
    skills: list[str] = Query(default=[]),
    company_id: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
    jobs: JobService = Depends(get_job_service),
):
    """Search postings. Filters combine with AND; `skills` matches any listed skill."""
    job_filter = JobFilter(
        location=location,
        job_type=job_type,
        experience_level=experience_level,
        skills=skills,
        company_id=company_id,
        status=status,
        page=page,
        page_size=page_size,
    )
    struct_validator.validate_or_raise(job_filter)

    results, total = await jobs.search(job_filter)
    return Envelope(
        status=200,
        message="Jobs retrieved successfully",
        data=results,
        meta=Meta.build(total=total, page=job_filter.page, page_size=job_filter.page_size),
    )


@router.get("/{job_id}", response_model=Envelope[Job])
async def get_job(job_id: str, jobs: JobService = Depends(get_job_service)):
    job = await jobs.get(parse_id(job_id, "job_id"))
    return Envelope(status=200, message="Job retrieved successfully", data=job)


@router.post("", status_code=201, response_model=Envelope[Job])
async def create_job(
    body: CreateJobRequest,
    identity: Identity = Depends(manage_jobs),
    jobs: JobService = Depends(get_job_service),
):
    context = validation_context(identity)
    struct_validator.validate_or_raise(body, context)
    job = await jobs.create(body, context)
    return Envelope(status=201, message="Job created successfully", data=job)


@router.put("/{job_id}", response_model=Envelope[Job])
async def update_job(
    job_id: str,
    body: UpdateJobRequest,
    identity: Identity = Depends(manage_jobs),
    jobs: JobService = Depends(get_job_service),
):
    job_id = parse_id(job_id, "job_id")
    context = validation_context(identity)
    struct_validator.validate_or_raise(body, context)
    job = await jobs.update(job_id, body, context)
    return Envelope(status=200, message="Job updated successfully", data=job)


@router.patch("/{job_id}/status", response_model=Envelope[Job])
async def change_job_status(
    job_id: str,
    body: ChangeJobStatusRequest,
    identity: Identity = Depends(manage_jobs),
    jobs: JobService = Depends(get_job_service),
):
    job_id = parse_id(job_id, "job_id")
    context = validation_context(identity)
    struct_validator.validate_or_raise(body, context)
    job = await jobs.change_status(job_id, body.status, context)
    return Envelope(status=200, message="Job status updated successfully", data=job)


@router.delete("/{job_id}", response_model=Envelope[dict])
async def delete_job(
    job_id: str,
    identity: Identity = Depends(manage_jobs),
    jobs: JobService = Depends(get_job_service),
):
    await jobs.delete(parse_id(job_id, "job_id"), validation_context(identity))
    return Envelope(status=200, message="Job deleted successfully")
