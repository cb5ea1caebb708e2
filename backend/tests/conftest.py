from __future__ import annotations

import itertools
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from jobboard.config import Settings
from jobboard.main import create_app

PASSWORD = "Sup3r$ecret"

VALID_JOB = {
    "title": "Backend Engineer",
    "description": "Build and operate the Python APIs behind the job board.",
    "location": "Berlin",
    "salary_range": "50k-75k",
    "job_type": "full-time",
    "experience_level": "mid",
    "skills": ["python", "sql"],
}

COVER_LETTER = (
    "I have spent six years building HTTP services in Python and would love "
    "to bring that experience to your team."
)

_counter = itertools.count()


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        DATABASE_PATH=str(tmp_path / "job_board.sqlite3"),
        JWT_SECRET="test-secret",
        PASSWORD_HASH_ITERATIONS=1_000,
        RATE_LIMIT_REQUESTS_PER_MINUTE=10_000,
        RATE_LIMIT_BURST=10_000,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def client(tmp_path: Path):
    app = create_app(make_settings(tmp_path))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_account(client: TestClient):
    """Register and log in a user; returns {"user": ..., "headers": ...}.

    Admins cannot sign up themselves, so they are promoted in the store
    before logging in.
    """

    def _make(role: str = "applicant", **fields) -> dict:
        n = next(_counter)
        signup_role = "recruiter" if role == "admin" else role
        payload = {
            "email": f"user{n}@acme.io",
            "password": PASSWORD,
            "role": signup_role,
            "full_name": f"Test User {n}",
        }
        payload.update(fields)
        response = client.post("/api/v1/users/register", json=payload)
        assert response.status_code == 201, response.text
        user = response.json()["data"]

        if role == "admin":
            client.app.state.repository.update_user(user["id"], {"role": "admin"})

        login = client.post(
            "/api/v1/users/login",
            json={"email": payload["email"], "password": payload["password"]},
        )
        assert login.status_code == 200, login.text
        token = login.json()["data"]["token"]
        return {"user": user, "headers": {"Authorization": f"Bearer {token}"}}

    return _make


@pytest.fixture
def recruiter(make_account):
    return make_account("recruiter", company_name="Acme Corp")


@pytest.fixture
def applicant(make_account):
    return make_account("applicant")


@pytest.fixture
def admin(make_account):
    return make_account("admin")


@pytest.fixture
def posted_job(client: TestClient, recruiter: dict) -> dict:
    response = client.post("/api/v1/jobs", headers=recruiter["headers"], json=VALID_JOB)
    assert response.status_code == 201, response.text
    return response.json()["data"]
