"""User service — registration, login, profile reads and updates."""

from typing import Optional

import structlog
from fastapi.concurrency import run_in_threadpool

from jobboard.config import Settings
from jobboard.models.domain import User
from jobboard.models.requests import RegisterRequest, UpdateProfileRequest
from jobboard.services.auth import TokenService, hash_password, verify_password
from jobboard.services.errors import AuthenticationError, ConflictError, NotFoundError, PermissionDeniedError
from jobboard.services.repository import JobBoardRepository
from jobboard.validators import Role, ValidationContext
from jobboard.validators.policy import can_act_for_user, canonical_id
from jobboard.validators.rules import is_empty

logger = structlog.get_logger()

PROFILE_FIELDS = (
    "full_name", "phone", "company_name", "resume_url", "profile_picture_url",
    "bio", "location", "skills",
)


class UserService:
    def __init__(self, repository: JobBoardRepository, tokens: TokenService, settings: Settings):
        self.repository = repository
        self.tokens = tokens
        self.hash_iterations = settings.PASSWORD_HASH_ITERATIONS

    async def register(self, request: RegisterRequest) -> User:
        """Create an account. `request` must already have passed validation."""
        email = request.email.strip()
        if await run_in_threadpool(self.repository.email_exists, email):
            raise ConflictError("User already exists", "user with this email already exists")

        password_hash = await run_in_threadpool(hash_password, request.password, self.hash_iterations)
        user = await run_in_threadpool(
            lambda: self.repository.create_user(
                email=email,
                password_hash=password_hash,
                role=Role(request.role).value,
                full_name=request.full_name.strip(),
                company_name=request.company_name,
            )
        )
        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    async def login(self, email: str, password: str):
        found = await run_in_threadpool(self.repository.get_credentials, email.strip())
        if found is None:
            raise AuthenticationError("invalid credentials")
        user, password_hash = found
        if not await run_in_threadpool(verify_password, password, password_hash):
            logger.info("login_failed", user_id=user.id)
            raise AuthenticationError("invalid credentials")
        logger.info("login_succeeded", user_id=user.id)
        return self.tokens.issue(user)

    async def get(self, user_id: str, context: Optional[ValidationContext] = None) -> User:
        if context is not None and not can_act_for_user(context, user_id):
            raise PermissionDeniedError("Unauthorized", "Not allowed to view this user")
        user = await run_in_threadpool(self.repository.get_user, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, request: UpdateProfileRequest, context: ValidationContext) -> User:
        """Apply a validated profile update to the caller, or to `user_id` for admins."""
        target_id = canonical_id(request.user_id) or context.caller_id
        await self.get(target_id)

        updates = {
            name: getattr(request, name)
            for name in PROFILE_FIELDS
            if getattr(request, name) is not None
        }
        if not is_empty(request.role):
            updates["role"] = Role(request.role).value

        user = await run_in_threadpool(self.repository.update_user, target_id, updates)
        logger.info(
            "profile_updated",
            user_id=target_id,
            updated_by=context.caller_id,
            fields=sorted(updates),
        )
        return user
