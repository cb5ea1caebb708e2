"""API response models."""

from datetime import datetime
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel

from jobboard.validators import FieldError

T = TypeVar("T")


class Meta(BaseModel):
    """Pagination metadata for list responses."""

    total: int
    page: int
    page_size: int
    total_page: int

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> "Meta":
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            total_page=(total + page_size - 1) // page_size,
        )


class Envelope(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    status: int
    message: str
    data: Optional[T] = None
    meta: Optional[Meta] = None


class ErrorResponse(BaseModel):
    """Error envelope. `errors` is filled for validation failures only."""

    status: int
    message: str
    error: Optional[str] = None
    errors: Optional[list[FieldError]] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class HealthDependency(BaseModel):
    """Health status of a single dependency."""

    status: Literal["healthy", "unhealthy", "degraded"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """System health check response."""

    status: Literal["healthy", "unhealthy", "degraded"]
    version: str = "1.0.0"
    uptime_seconds: float
    dependencies: dict[str, HealthDependency]
