"""Error aggregator — turns failed constraints into user-facing {field, message} pairs."""

import re
from collections.abc import Sized
from typing import Any, Optional

from jobboard.validators.models import Constraint, FieldError, RuleKind, ValidationContext

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """'SalaryRange' -> 'salary_range', 'UserID' -> 'user_id'; snake_case passes through."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


FORMAT_MESSAGES: dict[RuleKind, str] = {
    RuleKind.REQUIRED: "This field is required",
    RuleKind.EMAIL: "Invalid email format",
    RuleKind.PASSWORD: (
        "Password must be at least 8 characters long and contain at least one uppercase letter, "
        "one lowercase letter, one number, and one special character"
    ),
    RuleKind.PHONE: "Invalid phone number format",
    RuleKind.UUID: "Invalid UUID format",
    RuleKind.JOB_TYPE: "Invalid job type. Must be one of: full-time, part-time, contract, internship, freelance, remote",
    RuleKind.EXPERIENCE_LEVEL: "Invalid experience level. Must be one of: entry, junior, mid, senior, lead, executive",
    RuleKind.APPLICATION_STATUS: "Invalid application status. Must be one of: pending, reviewed, accepted, rejected",
    RuleKind.JOB_STATUS: "Invalid job status. Must be one of: active, inactive, closed, draft",
    RuleKind.SELF_SERVICE_ROLE: "Invalid role. Must be one of: recruiter, applicant",
    RuleKind.USER_ROLE: "Invalid role. Must be one of: admin, recruiter, applicant",
    RuleKind.URL: "Invalid URL format",
    RuleKind.SALARY_RANGE: "Invalid salary range format. Example: 50000-75000 or 50k-75k",
}

ROLE_MESSAGES: dict[RuleKind, str] = {
    RuleKind.ADMIN_ONLY: "This field can only be modified by administrators",
    RuleKind.RECRUITER_ONLY: "This field can only be modified by recruiters or administrators",
    RuleKind.SAME_USER: "You can only modify data belonging to your own account",
    RuleKind.SAME_COMPANY: "You can only modify data belonging to your own company",
}


def _bound_message(constraint: Constraint, value: Any) -> str:
    bound = constraint.param
    word = "at least" if constraint.kind == RuleKind.MIN else "at most"
    if isinstance(value, str) or value is None:
        return f"Must be {word} {bound} characters long"
    if isinstance(value, Sized):
        noun = "item" if bound == 1 else "items"
        return f"Must contain {word} {bound} {noun}"
    return f"Must be {word} {bound}"


def message_for(
    constraint: Constraint,
    value: Any = None,
    context: Optional[ValidationContext] = None,
) -> str:
    """Pick the message for a failed constraint.

    Role-rule text names who may make the change; for same_company it also
    covers callers with no company at all.
    """
    if constraint.kind in (RuleKind.MIN, RuleKind.MAX):
        return _bound_message(constraint, value)
    if constraint.kind == RuleKind.SAME_COMPANY and context is not None and context.organization_id is None:
        return "Your account is not associated with a company"
    if constraint.is_role_rule:
        return ROLE_MESSAGES[constraint.kind]
    if constraint.kind in FORMAT_MESSAGES:
        return FORMAT_MESSAGES[constraint.kind]
    return f"Failed validation on {constraint.name}"


def build_error(
    field: str,
    constraint: Constraint,
    value: Any = None,
    context: Optional[ValidationContext] = None,
) -> FieldError:
    return FieldError(field=to_snake_case(field), message=message_for(constraint, value, context))
