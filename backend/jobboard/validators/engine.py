"""Struct Validator — walks a record's constraint table and collects every failure.

Usage:
    from jobboard.validators import struct_validator

    errors = struct_validator.validate(request)                   # shape only
    errors = struct_validator.validate_with_role(request, context)  # shape + authorization
    if errors:
        raise ValidationFailed(errors)

The validator holds no per-call state. The context travels as an argument
through every rule evaluation, so one instance serves concurrent requests
without locking.
"""

import time
from typing import Any, Optional

import structlog

from jobboard.validators.messages import build_error, to_snake_case
from jobboard.validators.models import (
    Constraint,
    FieldError,
    RuleKind,
    ValidationContext,
    ValidationErrorSet,
    ValidationFailed,
)
from jobboard.validators.registry import evaluate
from jobboard.validators.rules import is_empty
from jobboard.validators.schema import ConstraintTable, table_for

logger = structlog.get_logger()


class StructValidator:
    """Evaluates declared constraints against records.

    Contract:
        - every constraint on every field is evaluated, no short-circuit
          (except `omitempty` on an empty value, which skips the rest of
          that field by definition)
        - errors come back in field declaration order, then constraint order
        - never raises for user input; programming errors propagate
    """

    def validate(self, record: Any) -> ValidationErrorSet:
        """Validate shape only. Role rules pass because there is no context."""
        return self._run(record, None)

    def validate_with_role(self, record: Any, context: ValidationContext) -> ValidationErrorSet:
        """Validate shape and authorization for the given caller."""
        if context is None:
            raise TypeError("validate_with_role requires a ValidationContext")
        return self._run(record, context)

    def validate_or_raise(self, record: Any, context: Optional[ValidationContext] = None) -> None:
        """Raise ValidationFailed carrying the whole error set if anything fails."""
        errors = self._run(record, context)
        if errors:
            raise ValidationFailed(errors)

    # ── Internals ──

    def _run(self, record: Any, context: Optional[ValidationContext]) -> ValidationErrorSet:
        if record is None:
            raise TypeError("Cannot validate None")

        start_time = time.perf_counter()
        errors = ValidationErrorSet()
        table = table_for(type(record))

        if table is not None:
            self._walk(record, table, context, errors)

        duration = (time.perf_counter() - start_time) * 1000
        if errors:
            logger.info(
                "validation_failed",
                record=type(record).__name__,
                role=context.role.value if context else None,
                fields=errors.fields,
                total_errors=len(errors),
                duration_ms=round(duration, 3),
            )
        return errors

    def _walk(
        self,
        record: Any,
        table: ConstraintTable,
        context: Optional[ValidationContext],
        errors: ValidationErrorSet,
    ) -> None:
        for field, constraints in table:
            value = getattr(record, field)
            for error in self._check_field(field, value, constraints, context):
                errors.append(error)

    def _check_field(
        self,
        field: str,
        value: Any,
        constraints: tuple[Constraint, ...],
        context: Optional[ValidationContext],
    ) -> list[FieldError]:
        found: list[FieldError] = []
        for constraint in constraints:
            if constraint.kind == RuleKind.OMITEMPTY:
                if is_empty(value):
                    break
                continue

            if constraint.kind == RuleKind.EACH:
                found.extend(self._check_each(field, value, constraint.param, context))
                continue

            if not evaluate(constraint, value, context):
                found.append(build_error(field, constraint, value, context))
        return found

    def _check_each(
        self,
        field: str,
        value: Any,
        inner: Constraint,
        context: Optional[ValidationContext],
    ) -> list[FieldError]:
        if value is None:
            return []
        found = []
        for index, item in enumerate(value):
            if not evaluate(inner, item, context):
                error = build_error(field, inner, item, context)
                found.append(FieldError(field=f"{to_snake_case(field)}[{index}]", message=error.message))
        return found


# Module-level singleton
struct_validator = StructValidator()
