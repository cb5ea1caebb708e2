"""Request dependencies — caller identity, role gates, per-request validation context."""

import uuid

import structlog
from fastapi import Depends, Request

from jobboard.models.domain import Identity
from jobboard.services.applications import ApplicationService
from jobboard.services.errors import AuthenticationError, PermissionDeniedError
from jobboard.services.jobs import JobService
from jobboard.services.users import UserService
from jobboard.validators import FieldError, Role, RuleKind, ValidationContext, ValidationErrorSet, ValidationFailed
from jobboard.validators.messages import FORMAT_MESSAGES

logger = structlog.get_logger()


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_job_service(request: Request) -> JobService:
    return request.app.state.job_service


def get_application_service(request: Request) -> ApplicationService:
    return request.app.state.application_service


async def get_identity(request: Request) -> Identity:
    """Verify the bearer token and return who is calling."""
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError("missing authorization header")

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError("invalid authorization header")

    identity = request.app.state.tokens.verify(parts[1])
    structlog.contextvars.bind_contextvars(user_id=identity.user_id, role=identity.role.value)
    return identity


def require_role(*roles: Role):
    """Allow only callers whose role is one of `roles`."""
    allowed = frozenset(roles)

    async def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in allowed:
            logger.info("role_denied", role=identity.role.value, allowed=sorted(r.value for r in allowed))
            raise PermissionDeniedError("insufficient permissions")
        return identity

    return dependency


def validation_context(identity: Identity) -> ValidationContext:
    """A new context for this request only."""
    return ValidationContext(
        role=identity.role,
        caller_id=identity.user_id,
        organization_id=identity.organization_id,
    )


async def get_validation_context(identity: Identity = Depends(get_identity)) -> ValidationContext:
    return validation_context(identity)


def parse_id(value: str, field: str = "id") -> str:
    """Canonical UUID string for a path parameter, or a 400 naming the field."""
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise ValidationFailed(ValidationErrorSet([
            FieldError(field=field, message=FORMAT_MESSAGES[RuleKind.UUID]),
        ]))
