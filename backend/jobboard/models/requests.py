"""API request models and their constraint tables.

Fields default to None so a missing value reaches the validator and is
reported as `required` together with every other problem in the payload,
instead of being rejected one at a time by the parser.
"""

from typing import Optional

from pydantic import BaseModel, Field

from jobboard.validators import constrained


# ─── Users ───


@constrained(
    email="required,email",
    password="required,password",
    role="required,self_service_role",
    full_name="required,min=2,max=100",
    company_name="omitempty,min=2,max=100",
)
class RegisterRequest(BaseModel):
    """Self-service sign-up. Validated without a caller context."""

    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    full_name: Optional[str] = None
    company_name: Optional[str] = None


@constrained(
    email="required,email",
    password="required",
)
class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


@constrained(
    user_id="omitempty,uuid,same_user",
    full_name="required,min=2,max=100",
    phone="required,phone",
    company_name="omitempty,min=2,max=100",
    resume_url="omitempty,url",
    profile_picture_url="omitempty,url",
    bio="omitempty,max=2000",
    location="omitempty,max=100",
    skills="omitempty,max=50,each=required",
    role="omitempty,user_role,admin_only",
)
class UpdateProfileRequest(BaseModel):
    """Profile update. `user_id` targets another account (admins only);
    `role` may only be changed by an administrator."""

    user_id: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    resume_url: Optional[str] = None
    profile_picture_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    skills: Optional[list[str]] = None
    role: Optional[str] = None


# ─── Jobs ───


class JobFields(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    skills: Optional[list[str]] = None
    is_featured: Optional[bool] = None
    salary_visible: Optional[bool] = None


_JOB_TAGS = dict(
    title="required,min=3,max=100",
    description="required,min=10",
    location="required",
    salary_range="required,salary_range",
    job_type="required,job_type",
    experience_level="required,experience_level",
    skills="required,min=1,each=required",
    is_featured="omitempty,admin_only",
    salary_visible="omitempty,recruiter_only",
)


@constrained(company_id="omitempty,uuid,same_company", **_JOB_TAGS)
class CreateJobRequest(JobFields):
    """New posting. `company_id` defaults to the caller's company."""

    company_id: Optional[str] = None


@constrained(status="omitempty,job_status", **_JOB_TAGS)
class UpdateJobRequest(JobFields):
    status: Optional[str] = None


@constrained(status="required,job_status")
class ChangeJobStatusRequest(BaseModel):
    status: Optional[str] = None


@constrained(
    location="omitempty,max=100",
    job_type="omitempty,job_type",
    experience_level="omitempty,experience_level",
    skills="omitempty,each=required",
    company_id="omitempty,uuid",
    status="omitempty,job_status",
    page="min=1",
    page_size="min=1,max=100",
)
class JobFilter(BaseModel):
    """Search filters and pagination for job listings."""

    location: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    company_id: Optional[str] = None
    status: Optional[str] = None
    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ─── Applications ───


@constrained(
    job_id="required,uuid",
    applicant_id="omitempty,uuid,same_user",
    cover_letter="required,min=50",
    resume_url="required,url",
)
class CreateApplicationRequest(BaseModel):
    job_id: Optional[str] = None
    applicant_id: Optional[str] = None
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None


@constrained(status="required,application_status")
class UpdateApplicationStatusRequest(BaseModel):
    status: Optional[str] = None
