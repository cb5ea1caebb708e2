from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import pytest
from pydantic import BaseModel

from jobboard.models.requests import CreateJobRequest, RegisterRequest, UpdateProfileRequest
from jobboard.validators import (
    Role,
    StructValidator,
    ValidationContext,
    ValidationFailed,
    constrained,
    struct_validator,
)

from conftest import PASSWORD, VALID_JOB

CALLER = str(uuid.uuid4())
OTHER = str(uuid.uuid4())

ADMIN = ValidationContext(role=Role.ADMIN, caller_id=CALLER)
RECRUITER = ValidationContext(role=Role.RECRUITER, caller_id=CALLER, organization_id=CALLER)
APPLICANT = ValidationContext(role=Role.APPLICANT, caller_id=CALLER)


@constrained(
    name="required,min=3",
    code="uuid",
)
class Widget(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None


@constrained(
    nickname="omitempty,min=3",
    flavor="required,frobnicate",
)
class Gadget(BaseModel):
    nickname: Optional[str] = None
    flavor: Optional[str] = None


def test_valid_record_has_no_errors():
    errors = struct_validator.validate(CreateJobRequest(**VALID_JOB))

    assert not errors
    assert len(errors) == 0


def test_every_violation_is_reported():
    errors = struct_validator.validate(Widget(name="", code="abc"))

    assert len(errors) == 3
    assert errors.fields == ["name", "name", "code"]
    assert [e.message for e in errors] == [
        "This field is required",
        "Must be at least 3 characters long",
        "Invalid UUID format",
    ]


def test_errors_follow_declaration_order():
    errors = struct_validator.validate(
        RegisterRequest(email="nope", password="weak", role="admin", full_name="J")
    )

    assert errors.fields == ["email", "password", "role", "full_name"]


def test_validation_is_idempotent():
    record = Widget(name="x", code="y")

    assert struct_validator.validate(record) == struct_validator.validate(record)


def test_types_without_constraints_pass():
    class Plain(BaseModel):
        anything: Optional[str] = None

    assert not struct_validator.validate(Plain())


def test_none_record_is_a_programming_error():
    with pytest.raises(TypeError):
        struct_validator.validate(None)


def test_validate_with_role_requires_context():
    with pytest.raises(TypeError):
        struct_validator.validate_with_role(Widget(), None)


def test_admin_only_field():
    record = CreateJobRequest(**VALID_JOB, is_featured=True)

    applicant_errors = struct_validator.validate_with_role(record, APPLICANT)
    admin_errors = struct_validator.validate_with_role(record, ADMIN)

    assert applicant_errors.to_list() == [
        {"field": "is_featured", "message": "This field can only be modified by administrators"},
    ]
    assert not admin_errors


def test_role_rules_pass_without_context():
    record = UpdateProfileRequest(
        user_id=OTHER, full_name="Jane Doe", phone="+14155552671", role="admin",
    )

    assert not struct_validator.validate(record)


def test_same_user_and_admin_only_together():
    record = UpdateProfileRequest(
        user_id=OTHER, full_name="Jane Doe", phone="+14155552671", role="admin",
    )

    errors = struct_validator.validate_with_role(record, APPLICANT)

    assert errors.fields == ["user_id", "role"]
    assert errors[0].message == "You can only modify data belonging to your own account"
    assert errors.for_field("role")[0].message == "This field can only be modified by administrators"
    assert not struct_validator.validate_with_role(record, ADMIN)


def test_same_company_for_recruiter():
    own = CreateJobRequest(**VALID_JOB, company_id=CALLER)
    foreign = CreateJobRequest(**VALID_JOB, company_id=OTHER)

    assert not struct_validator.validate_with_role(own, RECRUITER)
    assert struct_validator.validate_with_role(foreign, RECRUITER).fields == ["company_id"]


def test_recruiter_only_field():
    record = CreateJobRequest(**VALID_JOB, salary_visible=True)

    assert not struct_validator.validate_with_role(record, RECRUITER)
    assert struct_validator.validate_with_role(record, APPLICANT).fields == ["salary_visible"]


def test_omitempty_skips_remaining_rules():
    assert struct_validator.validate(Gadget(nickname=None, flavor="x")).fields == ["flavor"]
    assert struct_validator.validate(Gadget(nickname="ab", flavor="x")).fields == ["nickname", "flavor"]


def test_unknown_rule_fails_with_generic_message():
    errors = struct_validator.validate(Gadget(flavor="vanilla"))

    assert errors.to_list() == [{"field": "flavor", "message": "Failed validation on frobnicate"}]


def test_each_reports_element_positions():
    record = CreateJobRequest(**{**VALID_JOB, "skills": ["python", "", "sql", " "]})

    errors = struct_validator.validate(record)

    assert errors.fields == ["skills[1]", "skills[3]"]
    assert {e.message for e in errors} == {"This field is required"}


def test_collection_bounds():
    record = CreateJobRequest(**{**VALID_JOB, "skills": []})

    errors = struct_validator.validate(record)

    assert errors.to_list() == [
        {"field": "skills", "message": "This field is required"},
        {"field": "skills", "message": "Must contain at least 1 item"},
    ]


def test_validate_or_raise_carries_all_errors():
    with pytest.raises(ValidationFailed) as excinfo:
        struct_validator.validate_or_raise(Widget(name="", code="abc"))

    assert len(excinfo.value.errors) == 3
    assert str(excinfo.value).startswith("name: This field is required; ")


def test_registration_accepts_legacy_role_name():
    record = RegisterRequest(
        email="jane@acme.io", password=PASSWORD, role="job_seeker", full_name="Jane Doe",
    )

    assert not struct_validator.validate(record)


def test_concurrent_calls_keep_their_own_context():
    validator = StructValidator()
    record = CreateJobRequest(**VALID_JOB, is_featured=True)
    contexts = [ADMIN if i % 2 == 0 else APPLICANT for i in range(400)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda ctx: validator.validate_with_role(record, ctx), contexts))

    for ctx, errors in zip(contexts, results):
        if ctx.is_admin:
            assert not errors
        else:
            assert errors.fields == ["is_featured"]


@pytest.mark.parametrize("ctx", [APPLICANT, RECRUITER])
def test_admin_only_rejects_explicit_false(ctx):
    record = CreateJobRequest(**VALID_JOB, is_featured=False)

    errors = struct_validator.validate_with_role(record, ctx)

    assert errors.to_list() == [
        {"field": "is_featured", "message": "This field can only be modified by administrators"},
    ]
    assert not struct_validator.validate_with_role(record, ADMIN)


def test_recruiter_only_rejects_explicit_false():
    record = CreateJobRequest(**VALID_JOB, salary_visible=False)

    assert struct_validator.validate_with_role(record, APPLICANT).fields == ["salary_visible"]
    assert not struct_validator.validate_with_role(record, RECRUITER)


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_optional_role_is_skipped(blank):
    record = UpdateProfileRequest(full_name="Jane Doe", phone="+14155552671", role=blank)

    assert not struct_validator.validate_with_role(record, APPLICANT)
