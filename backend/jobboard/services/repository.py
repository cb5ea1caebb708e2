"""Relational store for users, jobs and applications (SQLite).

Methods are synchronous; async callers go through run_in_threadpool.
One connection is shared and guarded by a re-entrant lock.
"""

import json
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import structlog

from jobboard.models.domain import Application, Job, User
from jobboard.models.requests import JobFilter

logger = structlog.get_logger()

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL,
    full_name TEXT NOT NULL,
    company_name TEXT,
    phone TEXT,
    resume_url TEXT,
    profile_picture_url TEXT,
    bio TEXT,
    location TEXT,
    skills TEXT NOT NULL DEFAULT '[]',
    verified INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    company_id TEXT NOT NULL,
    location TEXT NOT NULL,
    salary_range TEXT,
    job_type TEXT NOT NULL,
    experience_level TEXT NOT NULL,
    skills TEXT NOT NULL DEFAULT '[]',
    status TEXT NOT NULL DEFAULT 'active',
    is_featured INTEGER NOT NULL DEFAULT 0,
    salary_visible INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_id);

CREATE TABLE IF NOT EXISTS applications (
    id TEXT PRIMARY KEY,
    job_id TEXT NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    applicant_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    cover_letter TEXT NOT NULL,
    resume_url TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE (job_id, applicant_id)
);
"""

USER_COLUMNS = (
    "full_name", "company_name", "phone", "resume_url", "profile_picture_url",
    "bio", "location", "skills", "role",
)
JOB_COLUMNS = (
    "title", "description", "location", "salary_range", "job_type", "experience_level",
    "skills", "status", "is_featured", "salary_visible",
)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class JobBoardRepository:
    def __init__(self, database_path: str) -> None:
        self.database_path = Path(database_path)
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise RuntimeError("Database connection is not initialized")
        return self._connection

    def connect(self) -> None:
        with self._lock:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(self.database_path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys=ON")
            self._connection.executescript(SCHEMA)
            self._connection.commit()
        logger.info("database_connected", path=str(self.database_path))

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
        logger.info("database_closed")

    def ping(self) -> None:
        with self._lock:
            self.connection.execute("SELECT 1").fetchone()

    # ── Users ──

    def create_user(self, *, email: str, password_hash: str, role: str, full_name: str,
                    company_name: Optional[str] = None) -> User:
        user_id = new_id()
        now = now_iso()
        with self._lock, self.connection:
            self.connection.execute(
                """
                INSERT INTO users (id, email, password_hash, role, full_name, company_name,
                                   created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, email, password_hash, role, full_name, company_name, now, now),
            )
        return self.get_user(user_id)

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            row = self.connection.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._to_user(row) if row else None

    def get_credentials(self, email: str) -> Optional[tuple[User, str]]:
        """User plus stored password hash, looked up case-insensitively by email."""
        with self._lock:
            row = self.connection.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            return None
        return self._to_user(row), row["password_hash"]

    def email_exists(self, email: str) -> bool:
        with self._lock:
            row = self.connection.execute("SELECT 1 FROM users WHERE email = ?", (email,)).fetchone()
        return row is not None

    def update_user(self, user_id: str, updates: dict[str, Any]) -> Optional[User]:
        self._update("users", user_id, updates, USER_COLUMNS)
        return self.get_user(user_id)

    # ── Jobs ──

    def create_job(self, *, company_id: str, title: str, description: str, location: str,
                   salary_range: Optional[str], job_type: str, experience_level: str,
                   skills: list[str], status: str = "active", is_featured: bool = False,
                   salary_visible: bool = True) -> Job:
        job_id = new_id()
        now = now_iso()
        with self._lock, self.connection:
            self.connection.execute(
                """
                INSERT INTO jobs (id, title, description, company_id, location, salary_range,
                                  job_type, experience_level, skills, status, is_featured,
                                  salary_visible, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    job_id, title, description, company_id, location, salary_range,
                    job_type, experience_level, json.dumps(skills), status,
                    int(is_featured), int(salary_visible), now, now,
                ),
            )
        return self.get_job(job_id)

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            row = self.connection.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        return self._to_job(row) if row else None

    def update_job(self, job_id: str, updates: dict[str, Any]) -> Optional[Job]:
        self._update("jobs", job_id, updates, JOB_COLUMNS)
        return self.get_job(job_id)

    def delete_job(self, job_id: str) -> bool:
        with self._lock, self.connection:
            self.connection.execute("DELETE FROM applications WHERE job_id = ?", (job_id,))
            cursor = self.connection.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
        return cursor.rowcount > 0

    def list_jobs(self, job_filter: JobFilter) -> tuple[list[Job], int]:
        clauses: list[str] = []
        args: list[Any] = []

        if job_filter.location:
            clauses.append("lower(location) = lower(?)")
            args.append(job_filter.location)
        if job_filter.job_type:
            clauses.append("lower(job_type) = lower(?)")
            args.append(job_filter.job_type)
        if job_filter.experience_level:
            clauses.append("lower(experience_level) = lower(?)")
            args.append(job_filter.experience_level)
        if job_filter.company_id:
            clauses.append("company_id = ?")
            args.append(job_filter.company_id)
        if job_filter.status:
            clauses.append("lower(status) = lower(?)")
            args.append(job_filter.status)
        if job_filter.skills:
            placeholders = ", ".join("?" for _ in job_filter.skills)
            clauses.append(
                f"EXISTS (SELECT 1 FROM json_each(jobs.skills) WHERE lower(json_each.value) IN ({placeholders}))"
            )
            args.extend(skill.lower() for skill in job_filter.skills)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._lock:
            total = self.connection.execute(f"SELECT COUNT(*) FROM jobs {where}", args).fetchone()[0]
            rows = self.connection.execute(
                f"""
                SELECT * FROM jobs {where}
                ORDER BY is_featured DESC, created_at DESC, id
                LIMIT ? OFFSET ?
                """,
                [*args, job_filter.page_size, job_filter.offset],
            ).fetchall()
        return [self._to_job(row) for row in rows], total

    # ── Applications ──

    def create_application(self, *, job_id: str, applicant_id: str, cover_letter: str,
                           resume_url: str) -> Application:
        application_id = new_id()
        now = now_iso()
        with self._lock, self.connection:
            self.connection.execute(
                """
                INSERT INTO applications (id, job_id, applicant_id, cover_letter, resume_url,
                                          status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, 'pending', ?, ?)
                """,
                (application_id, job_id, applicant_id, cover_letter, resume_url, now, now),
            )
        return self.get_application(application_id)

    def get_application(self, application_id: str) -> Optional[Application]:
        with self._lock:
            row = self.connection.execute(
                "SELECT * FROM applications WHERE id = ?", (application_id,)
            ).fetchone()
        return self._to_application(row) if row else None

    def application_exists(self, job_id: str, applicant_id: str) -> bool:
        with self._lock:
            row = self.connection.execute(
                "SELECT 1 FROM applications WHERE job_id = ? AND applicant_id = ?",
                (job_id, applicant_id),
            ).fetchone()
        return row is not None

    def list_applications(self, *, applicant_id: Optional[str] = None,
                          job_id: Optional[str] = None) -> list[Application]:
        clauses, args = [], []
        if applicant_id is not None:
            clauses.append("applicant_id = ?")
            args.append(applicant_id)
        if job_id is not None:
            clauses.append("job_id = ?")
            args.append(job_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._lock:
            rows = self.connection.execute(
                f"SELECT * FROM applications {where} ORDER BY created_at DESC, id", args
            ).fetchall()
        return [self._to_application(row) for row in rows]

    def update_application_status(self, application_id: str, status: str) -> Optional[Application]:
        self._update("applications", application_id, {"status": status}, ("status",))
        return self.get_application(application_id)

    # ── Helpers ──

    def _update(self, table: str, record_id: str, updates: dict[str, Any], allowed: tuple[str, ...]) -> None:
        unknown = set(updates) - set(allowed)
        if unknown:
            raise ValueError(f"Cannot update {table} columns: {sorted(unknown)}")
        if not updates:
            return
        values = {
            key: json.dumps(value) if key == "skills" else (int(value) if isinstance(value, bool) else value)
            for key, value in updates.items()
        }
        assignments = ", ".join(f"{key} = ?" for key in values)
        with self._lock, self.connection:
            self.connection.execute(
                f"UPDATE {table} SET {assignments}, updated_at = ? WHERE id = ?",
                [*values.values(), now_iso(), record_id],
            )

    def _to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            role=row["role"],
            full_name=row["full_name"],
            company_name=row["company_name"],
            phone=row["phone"],
            resume_url=row["resume_url"],
            profile_picture_url=row["profile_picture_url"],
            bio=row["bio"],
            location=row["location"],
            skills=json.loads(row["skills"] or "[]"),
            verified=bool(row["verified"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _to_job(self, row: sqlite3.Row) -> Job:
        return Job(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            company_id=row["company_id"],
            location=row["location"],
            salary_range=row["salary_range"],
            job_type=row["job_type"],
            experience_level=row["experience_level"],
            skills=json.loads(row["skills"] or "[]"),
            status=row["status"],
            is_featured=bool(row["is_featured"]),
            salary_visible=bool(row["salary_visible"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _to_application(self, row: sqlite3.Row) -> Application:
        return Application(
            id=row["id"],
            job_id=row["job_id"],
            applicant_id=row["applicant_id"],
            cover_letter=row["cover_letter"],
            resume_url=row["resume_url"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
