"""Domain records as stored and returned by the API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from jobboard.validators import Role


class User(BaseModel):
    """Public view of an account. The password hash never leaves the repository."""

    id: str
    email: str
    role: Role
    full_name: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    resume_url: Optional[str] = None
    profile_picture_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    verified: bool = False
    created_at: datetime
    updated_at: datetime


class Job(BaseModel):
    id: str
    title: str
    description: str
    company_id: str
    location: str
    salary_range: Optional[str] = None
    job_type: str
    experience_level: str
    skills: list[str] = Field(default_factory=list)
    status: str = "active"
    is_featured: bool = False
    salary_visible: bool = True
    created_at: datetime
    updated_at: datetime


class Application(BaseModel):
    id: str
    job_id: str
    applicant_id: str
    cover_letter: str
    resume_url: str
    status: str = "pending"
    created_at: datetime
    updated_at: datetime


class Identity(BaseModel):
    """Authenticated caller, as recovered from a verified token."""

    user_id: str
    role: Role
    organization_id: Optional[str] = None
