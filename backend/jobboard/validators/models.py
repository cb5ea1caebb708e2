"""Validation models — roles, per-call context, constraints, and error sets.

A ValidationContext is built fresh for every request and handed to the engine
as an argument. Nothing in this package stores it on a shared object.
"""

from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Caller roles, closed set."""

    ADMIN = "admin"
    RECRUITER = "recruiter"
    APPLICANT = "applicant"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Role"]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "job_seeker":  # legacy token value
                return cls.APPLICANT
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    def satisfies(self, required: "Role") -> bool:
        """True when this role may act wherever `required` is demanded."""
        return _PRIVILEGE[self] >= _PRIVILEGE[required]


_PRIVILEGE = {
    Role.APPLICANT: 0,
    Role.RECRUITER: 1,
    Role.ADMIN: 2,
}


class ValidationContext(BaseModel):
    """Who is calling: role, identity and organization, for one validation call."""

    model_config = ConfigDict(frozen=True)

    role: Role
    caller_id: str
    organization_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class RuleKind(str, Enum):
    """Every rule a constraint can name.

    UNKNOWN is the slot for names that did not parse to a real rule; it
    always fails with the generic message.
    """

    # Structural
    REQUIRED = "required"
    OMITEMPTY = "omitempty"
    MIN = "min"
    MAX = "max"
    EMAIL = "email"
    EACH = "each"

    # Format
    PASSWORD = "password"
    PHONE = "phone"
    UUID = "uuid"
    JOB_TYPE = "job_type"
    EXPERIENCE_LEVEL = "experience_level"
    APPLICATION_STATUS = "application_status"
    JOB_STATUS = "job_status"
    SELF_SERVICE_ROLE = "self_service_role"
    USER_ROLE = "user_role"
    URL = "url"
    SALARY_RANGE = "salary_range"

    # Role
    ADMIN_ONLY = "admin_only"
    RECRUITER_ONLY = "recruiter_only"
    SAME_USER = "same_user"
    SAME_COMPANY = "same_company"

    UNKNOWN = "unknown"


ROLE_RULES = frozenset({
    RuleKind.ADMIN_ONLY,
    RuleKind.RECRUITER_ONLY,
    RuleKind.SAME_USER,
    RuleKind.SAME_COMPANY,
})


class Constraint(BaseModel):
    """One named rule attached to one field, plus its parameter if any.

    `name` is the tag as written, so an UNKNOWN constraint still reports the
    name the declaration used.
    """

    model_config = ConfigDict(frozen=True)

    kind: RuleKind
    name: str
    param: Optional[Any] = None

    @property
    def is_role_rule(self) -> bool:
        return self.kind in ROLE_RULES

    def __str__(self) -> str:
        if self.param is None:
            return self.name
        return f"{self.name}={self.param}"


class FieldError(BaseModel):
    """A single user-facing validation finding."""

    field: str
    message: str


class ValidationErrorSet:
    """Ordered, non-deduplicated collection of FieldError.

    Order is field declaration order, then constraint order within a field.
    Empty means the record passed.
    """

    def __init__(self, errors: Optional[list[FieldError]] = None):
        self._errors: list[FieldError] = list(errors or [])

    def append(self, error: FieldError) -> None:
        self._errors.append(error)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __getitem__(self, index: int) -> FieldError:
        return self._errors[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationErrorSet):
            return NotImplemented
        return self._errors == other._errors

    def __repr__(self) -> str:
        return f"ValidationErrorSet({self._errors!r})"

    def __str__(self) -> str:
        return "; ".join(f"{e.field}: {e.message}" for e in self._errors)

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self._errors]

    def for_field(self, field: str) -> list[FieldError]:
        return [e for e in self._errors if e.field == field]

    def to_list(self) -> list[dict]:
        return [e.model_dump() for e in self._errors]


class ValidationFailed(Exception):
    """Raised by callers that want the error set as an exception.

    The engine itself never raises this; it only returns error sets.
    """

    def __init__(self, errors: ValidationErrorSet):
        self.errors = errors
        super().__init__(str(errors))
