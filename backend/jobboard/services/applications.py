"""Application service — apply to jobs, list, and move applications through review."""

import structlog
from fastapi.concurrency import run_in_threadpool

from jobboard.models.domain import Application
from jobboard.models.requests import CreateApplicationRequest
from jobboard.services.errors import ConflictError, NotFoundError
from jobboard.services.jobs import JobService
from jobboard.services.repository import JobBoardRepository
from jobboard.validators import ValidationContext
from jobboard.validators.policy import canonical_id

logger = structlog.get_logger()


class ApplicationService:
    def __init__(self, repository: JobBoardRepository, jobs: JobService):
        self.repository = repository
        self.jobs = jobs

    async def apply(self, request: CreateApplicationRequest, context: ValidationContext) -> Application:
        job = await self.jobs.get(canonical_id(request.job_id))
        if job.status != "active":
            raise ConflictError("Job is not accepting applications", f"job status is {job.status}")

        applicant_id = canonical_id(request.applicant_id) or context.caller_id
        if await run_in_threadpool(self.repository.application_exists, job.id, applicant_id):
            raise ConflictError("Already applied", "an application for this job already exists")

        application = await run_in_threadpool(
            lambda: self.repository.create_application(
                job_id=job.id,
                applicant_id=applicant_id,
                cover_letter=request.cover_letter,
                resume_url=request.resume_url,
            )
        )
        logger.info("application_created", application_id=application.id, job_id=job.id)
        return application

    async def list_mine(self, context: ValidationContext) -> list[Application]:
        return await run_in_threadpool(
            lambda: self.repository.list_applications(applicant_id=context.caller_id)
        )

    async def list_for_job(self, job_id: str, context: ValidationContext) -> list[Application]:
        await self.jobs.get_owned(job_id, context)
        return await run_in_threadpool(lambda: self.repository.list_applications(job_id=job_id))

    async def update_status(self, application_id: str, status: str, context: ValidationContext) -> Application:
        application = await run_in_threadpool(self.repository.get_application, application_id)
        if application is None:
            raise NotFoundError("Application not found")
        await self.jobs.get_owned(application.job_id, context)

        updated = await run_in_threadpool(
            self.repository.update_application_status, application_id, status.lower()
        )
        logger.info(
            "application_status_changed",
            application_id=application_id,
            status=updated.status,
            changed_by=context.caller_id,
        )
        return updated
