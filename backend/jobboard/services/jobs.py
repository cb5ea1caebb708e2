"""Job service — postings CRUD, status changes and search."""

import structlog
from fastapi.concurrency import run_in_threadpool

from jobboard.models.domain import Job
from jobboard.models.requests import CreateJobRequest, JobFilter, UpdateJobRequest
from jobboard.services.errors import NotFoundError, PermissionDeniedError
from jobboard.services.repository import JobBoardRepository
from jobboard.validators import FieldError, ValidationContext, ValidationErrorSet, ValidationFailed
from jobboard.validators.policy import can_manage_company, canonical_id
from jobboard.validators.rules import is_empty

logger = structlog.get_logger()


class JobService:
    def __init__(self, repository: JobBoardRepository):
        self.repository = repository

    async def create(self, request: CreateJobRequest, context: ValidationContext) -> Job:
        company_id = canonical_id(request.company_id) or context.organization_id
        if company_id is None:
            # admins have no company of their own and must name one
            raise ValidationFailed(ValidationErrorSet([
                FieldError(field="company_id", message="This field is required"),
            ]))

        job = await run_in_threadpool(
            lambda: self.repository.create_job(
                company_id=company_id,
                title=request.title,
                description=request.description,
                location=request.location,
                salary_range=request.salary_range,
                job_type=request.job_type.lower(),
                experience_level=request.experience_level.lower(),
                skills=request.skills,
                is_featured=bool(request.is_featured),
                salary_visible=True if request.salary_visible is None else request.salary_visible,
            )
        )
        logger.info("job_created", job_id=job.id, company_id=company_id, created_by=context.caller_id)
        return job

    async def get(self, job_id: str) -> Job:
        job = await run_in_threadpool(self.repository.get_job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    async def get_owned(self, job_id: str, context: ValidationContext) -> Job:
        """Fetch a job the caller may manage: its company's recruiter, or an admin."""
        job = await self.get(job_id)
        if not can_manage_company(context, job.company_id):
            logger.info("job_access_denied", job_id=job_id, caller_id=context.caller_id)
            raise PermissionDeniedError("Unauthorized", "Not allowed to modify this job")
        return job

    async def update(self, job_id: str, request: UpdateJobRequest, context: ValidationContext) -> Job:
        await self.get_owned(job_id, context)
        updates = {
            "title": request.title,
            "description": request.description,
            "location": request.location,
            "salary_range": request.salary_range,
            "job_type": request.job_type.lower(),
            "experience_level": request.experience_level.lower(),
            "skills": request.skills,
        }
        if not is_empty(request.status):
            updates["status"] = request.status.lower()
        if request.is_featured is not None:
            updates["is_featured"] = request.is_featured
        if request.salary_visible is not None:
            updates["salary_visible"] = request.salary_visible

        job = await run_in_threadpool(self.repository.update_job, job_id, updates)
        logger.info("job_updated", job_id=job_id, updated_by=context.caller_id)
        return job

    async def change_status(self, job_id: str, status: str, context: ValidationContext) -> Job:
        await self.get_owned(job_id, context)
        job = await run_in_threadpool(self.repository.update_job, job_id, {"status": status.lower()})
        logger.info("job_status_changed", job_id=job_id, status=job.status)
        return job

    async def delete(self, job_id: str, context: ValidationContext) -> None:
        await self.get_owned(job_id, context)
        await run_in_threadpool(self.repository.delete_job, job_id)
        logger.info("job_deleted", job_id=job_id, deleted_by=context.caller_id)

    async def search(self, job_filter: JobFilter) -> tuple[list[Job], int]:
        return await run_in_threadpool(self.repository.list_jobs, job_filter)
