"""Rule registry — one evaluator per RuleKind.

The table is checked for exhaustiveness at import time: adding a RuleKind
without an evaluator stops the application from starting.
"""

from typing import Any, Callable, Optional

from jobboard.validators import policy, rules
from jobboard.validators.models import Constraint, RuleKind, ValidationContext

Evaluator = Callable[[Any, Optional[Any], Optional[ValidationContext]], bool]


def _format(predicate: Callable[[Any, Optional[Any]], bool]) -> Evaluator:
    def evaluate(value, param, context):
        return predicate(value, param)

    evaluate.__name__ = predicate.__name__
    return evaluate


def _role(predicate: Callable[[Any, Optional[ValidationContext]], bool]) -> Evaluator:
    def evaluate(value, param, context):
        return predicate(value, context)

    evaluate.__name__ = predicate.__name__
    return evaluate


def _never(value, param, context) -> bool:
    return False


def _always(value, param, context) -> bool:
    return True


EVALUATORS: dict[RuleKind, Evaluator] = {
    RuleKind.REQUIRED: _format(rules.check_required),
    RuleKind.OMITEMPTY: _always,  # flow control, handled by the engine
    RuleKind.MIN: _format(rules.check_min),
    RuleKind.MAX: _format(rules.check_max),
    RuleKind.EMAIL: _format(rules.check_email),
    RuleKind.EACH: _always,  # flow control, handled by the engine
    RuleKind.PASSWORD: _format(rules.check_password),
    RuleKind.PHONE: _format(rules.check_phone),
    RuleKind.UUID: _format(rules.check_uuid),
    RuleKind.JOB_TYPE: _format(rules.check_job_type),
    RuleKind.EXPERIENCE_LEVEL: _format(rules.check_experience_level),
    RuleKind.APPLICATION_STATUS: _format(rules.check_application_status),
    RuleKind.JOB_STATUS: _format(rules.check_job_status),
    RuleKind.SELF_SERVICE_ROLE: _format(rules.check_self_service_role),
    RuleKind.USER_ROLE: _format(rules.check_user_role),
    RuleKind.URL: _format(rules.check_url),
    RuleKind.SALARY_RANGE: _format(rules.check_salary_range),
    RuleKind.ADMIN_ONLY: _role(policy.check_admin_only),
    RuleKind.RECRUITER_ONLY: _role(policy.check_recruiter_only),
    RuleKind.SAME_USER: _role(policy.check_same_user),
    RuleKind.SAME_COMPANY: _role(policy.check_same_company),
    RuleKind.UNKNOWN: _never,
}

# Rules that take a parameter, and how to parse it from a tag.
PARAM_PARSERS: dict[RuleKind, Callable[[str], Any]] = {
    RuleKind.MIN: int,
    RuleKind.MAX: int,
}

_missing = set(RuleKind) - set(EVALUATORS)
if _missing:
    raise RuntimeError(f"No evaluator registered for rules: {sorted(k.value for k in _missing)}")


def evaluate(constraint: Constraint, value: Any, context: Optional[ValidationContext] = None) -> bool:
    """Run one constraint against one value with the caller's context."""
    return EVALUATORS[constraint.kind](value, constraint.param, context)


def lookup(name: str) -> RuleKind:
    """Resolve a tag name; names that are not rules resolve to UNKNOWN."""
    try:
        kind = RuleKind(name)
    except ValueError:
        return RuleKind.UNKNOWN
    return kind
