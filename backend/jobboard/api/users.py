"""Users API — register, login, read and update profiles."""

from fastapi import APIRouter, Depends

from jobboard.api.deps import get_identity, get_user_service, get_validation_context, parse_id, validation_context
from jobboard.models.domain import Identity, User
from jobboard.models.requests import LoginRequest, RegisterRequest, UpdateProfileRequest
from jobboard.models.responses import Envelope, TokenResponse
from jobboard.services.users import UserService
from jobboard.validators import ValidationContext, struct_validator

router = APIRouter(prefix="/users")


@router.post("/register", status_code=201, response_model=Envelope[User])
async def register(body: RegisterRequest, users: UserService = Depends(get_user_service)):
    """Self-service sign-up. Runs without a caller context."""
    struct_validator.validate_or_raise(body)
    user = await users.register(body)
    return Envelope(status=201, message="User registered successfully", data=user)


@router.post("/login", response_model=Envelope[TokenResponse])
async def login(body: LoginRequest, users: UserService = Depends(get_user_service)):
    struct_validator.validate_or_raise(body)
    token, expires_at = await users.login(body.email, body.password)
    return Envelope(
        status=200,
        message="Login successful",
        data=TokenResponse(token=token, expires_at=expires_at),
    )


@router.get("/me", response_model=Envelope[User])
async def get_me(identity: Identity = Depends(get_identity), users: UserService = Depends(get_user_service)):
    user = await users.get(identity.user_id)
    return Envelope(status=200, message="User retrieved successfully", data=user)


@router.put("/profile", response_model=Envelope[User])
async def update_profile(
    body: UpdateProfileRequest,
    context: ValidationContext = Depends(get_validation_context),
    users: UserService = Depends(get_user_service),
):
    """Update the caller's profile; admins may target another account via `user_id`."""
    struct_validator.validate_or_raise(body, context)
    user = await users.update_profile(body, context)
    return Envelope(status=200, message="Profile updated successfully", data=user)


@router.get("/{user_id}", response_model=Envelope[User])
async def get_user(
    user_id: str,
    identity: Identity = Depends(get_identity),
    users: UserService = Depends(get_user_service),
):
    user = await users.get(parse_id(user_id, "user_id"), validation_context(identity))
    return Envelope(status=200, message="User retrieved successfully", data=user)
