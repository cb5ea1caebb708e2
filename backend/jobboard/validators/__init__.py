"""Request validation — shape rules plus role-aware authorization rules.

Usage:
    from jobboard.validators import struct_validator, ValidationContext, Role

    ctx = ValidationContext(role=Role.RECRUITER, caller_id=user_id, organization_id=user_id)
    errors = struct_validator.validate_with_role(request, ctx)
    if errors:
        # errors.to_list() -> [{"field": ..., "message": ...}, ...]
"""

from jobboard.validators.engine import StructValidator, struct_validator
from jobboard.validators.models import (
    Constraint,
    FieldError,
    Role,
    RuleKind,
    ValidationContext,
    ValidationErrorSet,
    ValidationFailed,
)
from jobboard.validators.schema import ConstraintDeclarationError, constrained, table_for

__all__ = [
    "StructValidator",
    "struct_validator",
    "Constraint",
    "FieldError",
    "Role",
    "RuleKind",
    "ValidationContext",
    "ValidationErrorSet",
    "ValidationFailed",
    "ConstraintDeclarationError",
    "constrained",
    "table_for",
]
