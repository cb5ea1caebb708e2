from __future__ import annotations

import uuid

import pytest

from conftest import VALID_JOB

pytestmark = pytest.mark.integration


def post_job(client, account, **overrides):
    return client.post("/api/v1/jobs", headers=account["headers"], json={**VALID_JOB, **overrides})


def test_recruiter_creates_job_for_own_company(client, recruiter):
    response = post_job(client, recruiter)

    assert response.status_code == 201
    job = response.json()["data"]
    assert job["company_id"] == recruiter["user"]["id"]
    assert job["status"] == "active"
    assert job["is_featured"] is False
    assert job["skills"] == ["python", "sql"]


def test_applicant_cannot_post_jobs(client, applicant):
    response = post_job(client, applicant)

    assert response.status_code == 403
    assert response.json()["message"] == "insufficient permissions"


def test_recruiter_cannot_feature_a_job(client, recruiter):
    response = post_job(client, recruiter, is_featured=True)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "is_featured", "message": "This field can only be modified by administrators"},
    ]


def test_recruiter_cannot_post_for_another_company(client, recruiter):
    response = post_job(client, recruiter, company_id=str(uuid.uuid4()))

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "company_id", "message": "You can only modify data belonging to your own company"},
    ]


def test_admin_posts_featured_job_for_a_company(client, admin, recruiter):
    response = post_job(client, admin, company_id=recruiter["user"]["id"], is_featured=True)

    assert response.status_code == 201
    assert response.json()["data"]["is_featured"] is True
    assert response.json()["data"]["company_id"] == recruiter["user"]["id"]


def test_admin_must_name_a_company(client, admin):
    response = post_job(client, admin)

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "company_id", "message": "This field is required"}]


def test_invalid_job_reports_all_fields(client, recruiter):
    response = post_job(client, recruiter, title="QA", job_type="onsite", salary_range="50000", skills=[])

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == [
        "title", "salary_range", "job_type", "skills", "skills",
    ]


def test_list_jobs_is_public_and_paginated(client, recruiter):
    for title in ("Backend Engineer", "Data Engineer", "Platform Engineer"):
        assert post_job(client, recruiter, title=title).status_code == 201

    response = client.get("/api/v1/jobs", params={"page": 1, "page_size": 2})

    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["meta"] == {"total": 3, "page": 1, "page_size": 2, "total_page": 2}


def test_list_jobs_filters(client, recruiter, admin):
    post_job(client, recruiter, title="Go Developer", job_type="contract", skills=["go"])
    post_job(client, recruiter, title="Python Developer", job_type="REMOTE", skills=["Python"])
    featured = post_job(
        client, admin, title="Staff Engineer", company_id=recruiter["user"]["id"], is_featured=True,
    ).json()["data"]

    remote = client.get("/api/v1/jobs", params={"job_type": "remote"}).json()
    assert [job["title"] for job in remote["data"]] == ["Python Developer"]

    by_skill = client.get("/api/v1/jobs", params=[("skills", "go"), ("skills", "python")]).json()
    assert by_skill["meta"]["total"] == 3
    assert by_skill["data"][0]["id"] == featured["id"]


@pytest.mark.parametrize(
    "params, field",
    [
        ({"job_type": "onsite"}, "job_type"),
        ({"page_size": 500}, "page_size"),
        ({"page": 0}, "page"),
        ({"company_id": "acme"}, "company_id"),
    ],
)
def test_list_jobs_rejects_bad_filters(client, params, field):
    response = client.get("/api/v1/jobs", params=params)

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == [field]


def test_get_job(client, posted_job):
    response = client.get(f"/api/v1/jobs/{posted_job['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["title"] == VALID_JOB["title"]


def test_get_missing_job(client):
    assert client.get(f"/api/v1/jobs/{uuid.uuid4()}").status_code == 404
    assert client.get("/api/v1/jobs/not-a-uuid").status_code == 400


def test_owner_updates_job(client, recruiter, posted_job):
    response = client.put(
        f"/api/v1/jobs/{posted_job['id']}",
        headers=recruiter["headers"],
        json={**VALID_JOB, "title": "Senior Backend Engineer", "status": "draft"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Senior Backend Engineer"
    assert response.json()["data"]["status"] == "draft"


def test_other_recruiter_cannot_update_job(client, make_account, posted_job):
    rival = make_account("recruiter", company_name="Rival Inc")

    response = client.put(f"/api/v1/jobs/{posted_job['id']}", headers=rival["headers"], json=VALID_JOB)

    assert response.status_code == 403


def test_change_status(client, recruiter, posted_job):
    path = f"/api/v1/jobs/{posted_job['id']}/status"

    invalid = client.patch(path, headers=recruiter["headers"], json={"status": "archived"})
    assert invalid.status_code == 400
    assert invalid.json()["errors"] == [
        {"field": "status", "message": "Invalid job status. Must be one of: active, inactive, closed, draft"},
    ]

    closed = client.patch(path, headers=recruiter["headers"], json={"status": "CLOSED"})
    assert closed.status_code == 200
    assert closed.json()["data"]["status"] == "closed"


def test_delete_job(client, recruiter, admin, posted_job):
    path = f"/api/v1/jobs/{posted_job['id']}"

    assert client.delete(path, headers=admin["headers"]).status_code == 200
    assert client.get(path).status_code == 404
    assert client.delete(path, headers=recruiter["headers"]).status_code == 404


@pytest.mark.parametrize("flag", [True, False])
def test_recruiter_cannot_set_featured_on_create(client, recruiter, flag):
    response = post_job(client, recruiter, is_featured=flag)

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["is_featured"]


def test_recruiter_cannot_unfeature_a_job(client, admin, recruiter):
    job = post_job(client, admin, company_id=recruiter["user"]["id"], is_featured=True).json()["data"]
    path = f"/api/v1/jobs/{job['id']}"

    response = client.put(path, headers=recruiter["headers"], json={**VALID_JOB, "is_featured": False})

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "is_featured", "message": "This field can only be modified by administrators"},
    ]
    assert client.get(path).json()["data"]["is_featured"] is True


def test_admin_can_unfeature_a_job(client, admin, recruiter):
    job = post_job(client, admin, company_id=recruiter["user"]["id"], is_featured=True).json()["data"]

    response = client.put(
        f"/api/v1/jobs/{job['id']}", headers=admin["headers"], json={**VALID_JOB, "is_featured": False},
    )

    assert response.status_code == 200
    assert response.json()["data"]["is_featured"] is False


def test_recruiter_can_hide_salary(client, recruiter):
    response = post_job(client, recruiter, salary_visible=False)

    assert response.status_code == 201
    assert response.json()["data"]["salary_visible"] is False


def test_blank_status_on_update_keeps_current_status(client, recruiter, posted_job):
    response = client.put(
        f"/api/v1/jobs/{posted_job['id']}",
        headers=recruiter["headers"],
        json={**VALID_JOB, "status": "  "},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "active"
