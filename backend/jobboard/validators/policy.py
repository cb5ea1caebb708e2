"""Authorization policy — role and ownership rules.

Role rules are permissive when no context is supplied. Plain validation
(registration, validate-only calls) runs without a context, so these rules
pass; once a context is present they deny unless the caller qualifies, and
admin always qualifies.

The ownership helpers at the bottom are used by services for checks that
need stored data (e.g. who owns a job) rather than request fields.
"""

import uuid
from typing import Any, Optional

from jobboard.validators.models import Role, ValidationContext


def canonical_id(value: Any) -> Optional[str]:
    """Canonical string form of an id so UUID objects and strings compare equal."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    text = str(value).strip()
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return text


def same_identity(left: Any, right: Any) -> bool:
    a, b = canonical_id(left), canonical_id(right)
    return a is not None and a == b


# ── Role rules ──


def check_admin_only(value: Any, context: Optional[ValidationContext]) -> bool:
    if context is None:
        return True
    return context.role == Role.ADMIN


def check_recruiter_only(value: Any, context: Optional[ValidationContext]) -> bool:
    if context is None:
        return True
    return context.role.satisfies(Role.RECRUITER)


def check_same_user(value: Any, context: Optional[ValidationContext]) -> bool:
    if context is None:
        return True
    return context.is_admin or same_identity(value, context.caller_id)


def check_same_company(value: Any, context: Optional[ValidationContext]) -> bool:
    if context is None:
        return True
    return context.is_admin or same_identity(value, context.organization_id)


# ── Ownership checks on stored records ──


def can_act_for_user(context: ValidationContext, user_id: Any) -> bool:
    return check_same_user(user_id, context)


def can_manage_company(context: ValidationContext, company_id: Any) -> bool:
    return check_same_company(company_id, context)


def organization_for(role: Role, user_id: str) -> Optional[str]:
    """A recruiter account is its own company; other roles have none."""
    if role == Role.RECRUITER:
        return user_id
    return None
