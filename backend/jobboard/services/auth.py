"""Password hashing and access tokens.

Hashes are PBKDF2-HMAC-SHA256 (cryptography), stored as
`pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>`.
Tokens are HS256 JWTs carrying the caller's id, role and organization.
"""

import base64
import secrets
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import structlog
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from jobboard.config import Settings
from jobboard.models.domain import Identity, User
from jobboard.services.errors import AuthenticationError
from jobboard.validators import Role
from jobboard.validators.policy import organization_for

logger = structlog.get_logger()

HASH_SCHEME = "pbkdf2_sha256"
HASH_LENGTH = 32
SALT_LENGTH = 16


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(algorithm=hashes.SHA256(), length=HASH_LENGTH, salt=salt, iterations=iterations)


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def hash_password(password: str, iterations: int) -> str:
    salt = secrets.token_bytes(SALT_LENGTH)
    key = _kdf(salt, iterations).derive(password.encode("utf-8"))
    return f"{HASH_SCHEME}${iterations}${_b64(salt)}${_b64(key)}"


def verify_password(password: str, encoded: str) -> bool:
    """Constant-time check of `password` against a stored hash; malformed hashes never match."""
    try:
        scheme, iterations, salt_b64, key_b64 = encoded.split("$")
        salt = base64.urlsafe_b64decode(salt_b64.encode("ascii"))
        expected = base64.urlsafe_b64decode(key_b64.encode("ascii"))
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != HASH_SCHEME or rounds < 1:
        return False
    try:
        _kdf(salt, rounds).verify(password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    return True


class TokenService:
    """Issues and verifies access tokens."""

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(hours=settings.JWT_EXPIRE_HOURS)

    def issue(self, user: User) -> tuple[str, datetime]:
        now = datetime.now(timezone.utc)
        expires_at = now + self.lifetime
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "org_id": organization_for(user.role, user.id),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return token, expires_at

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "role", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("token expired")
        except jwt.InvalidTokenError as e:
            logger.info("token_rejected", error=str(e))
            raise AuthenticationError("invalid token")

        try:
            user_id = str(uuid.UUID(str(claims["sub"])))
            role = Role(claims["role"])
        except ValueError:
            raise AuthenticationError("invalid token claims")

        return Identity(user_id=user_id, role=role, organization_id=claims.get("org_id"))
