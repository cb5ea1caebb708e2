from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from jobboard.validators import Role, ValidationContext
from jobboard.validators import policy

ALICE = str(uuid.uuid4())
BOB = str(uuid.uuid4())


def context(role: Role, caller_id: str = ALICE, organization_id: str | None = None) -> ValidationContext:
    return ValidationContext(role=role, caller_id=caller_id, organization_id=organization_id)


def test_role_parsing():
    assert Role("ADMIN") is Role.ADMIN
    assert Role("job_seeker") is Role.APPLICANT
    assert Role(" recruiter ") is Role.RECRUITER
    with pytest.raises(ValueError):
        Role("boss")


@pytest.mark.parametrize(
    "role, required, expected",
    [
        (Role.ADMIN, Role.RECRUITER, True),
        (Role.ADMIN, Role.ADMIN, True),
        (Role.RECRUITER, Role.RECRUITER, True),
        (Role.RECRUITER, Role.ADMIN, False),
        (Role.APPLICANT, Role.RECRUITER, False),
        (Role.APPLICANT, Role.APPLICANT, True),
    ],
)
def test_role_hierarchy(role, required, expected):
    assert role.satisfies(required) is expected


@pytest.mark.parametrize(
    "check",
    [
        policy.check_admin_only,
        policy.check_recruiter_only,
        policy.check_same_user,
        policy.check_same_company,
    ],
)
def test_role_rules_pass_without_context(check):
    assert check("anything", None)


def test_admin_only():
    assert policy.check_admin_only(True, context(Role.ADMIN))
    assert not policy.check_admin_only(True, context(Role.RECRUITER))
    assert not policy.check_admin_only(True, context(Role.APPLICANT))


def test_recruiter_only_admits_admins():
    assert policy.check_recruiter_only(False, context(Role.RECRUITER))
    assert policy.check_recruiter_only(False, context(Role.ADMIN))
    assert not policy.check_recruiter_only(False, context(Role.APPLICANT))


@pytest.mark.parametrize("role", [Role.APPLICANT, Role.RECRUITER])
def test_same_user_matches_own_id(role):
    assert policy.check_same_user(ALICE, context(role))
    assert not policy.check_same_user(BOB, context(role))


def test_same_user_admin_bypass():
    assert policy.check_same_user(BOB, context(Role.ADMIN))


def test_same_user_compares_canonical_ids():
    assert policy.check_same_user(ALICE.upper(), context(Role.APPLICANT))
    assert policy.check_same_user(uuid.UUID(ALICE), context(Role.APPLICANT))


def test_same_company():
    recruiter = context(Role.RECRUITER, organization_id=ALICE)

    assert policy.check_same_company(ALICE, recruiter)
    assert not policy.check_same_company(BOB, recruiter)
    assert not policy.check_same_company(ALICE, context(Role.APPLICANT))
    assert policy.check_same_company(BOB, context(Role.ADMIN))


def test_organization_for():
    assert policy.organization_for(Role.RECRUITER, ALICE) == ALICE
    assert policy.organization_for(Role.APPLICANT, ALICE) is None
    assert policy.organization_for(Role.ADMIN, ALICE) is None


def test_context_is_immutable():
    ctx = context(Role.APPLICANT)
    with pytest.raises(ValidationError):
        ctx.role = Role.ADMIN
