"""Test configuration and fixtures."""

from __future__ import annotations

import itertools
import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from workflow_orchestrator.models import Role, TemplateDraft, User, WorkflowStep
from workflow_orchestrator.store import WorkflowStore

FIXED_NOW = datetime(2025, 1, 1, 9, 30, tzinfo=UTC)


def _make_user(user_id: str, role: Role) -> User:
    return User(
        id=user_id,
        name=user_id.replace("-", " ").title(),
        email=f"{user_id}@example.edu",
        role=role,
        department="Testing",
        access_level=1,
    )


def _make_step(step_id: str, *, depends_on: list[str] | None = None) -> WorkflowStep:
    return WorkflowStep(
        id=step_id,
        name=f"Step {step_id}",
        description=f"Do {step_id}",
        assigned_roles=[Role.INSTRUCTOR],
        required_documents=["outline"],
        completion_criteria="Reviewed",
        depends_on_steps=depends_on or [],
    )


@pytest.fixture
def admin() -> User:
    """Provide an admin user."""
    return _make_user("admin-1", Role.ADMIN)


@pytest.fixture
def instructor() -> User:
    """Provide an instructor user."""
    return _make_user("instructor-1", Role.INSTRUCTOR)


@pytest.fixture
def two_step_draft() -> TemplateDraft:
    """Provide a two-step template draft with a 14 day timeline."""
    return TemplateDraft(
        name="Course Creation",
        description="Create and approve a course",
        steps=[_make_step("step1"), _make_step("step2", depends_on=["step1"])],
        required_approvals=["department-head"],
        timeline_in_days=14,
    )


@pytest.fixture
def store() -> WorkflowStore:
    """Provide an empty store with deterministic ids and a fixed clock."""
    counter = itertools.count(1)
    return WorkflowStore(id_factory=lambda: f"id-{next(counter)}", clock=lambda: FIXED_NOW)


@pytest.fixture
def admin_store(store: WorkflowStore, admin: User) -> WorkflowStore:
    """Provide the deterministic store with an admin logged in."""
    store.set_current_user(admin)
    return store


@pytest.fixture
def now() -> datetime:
    """The fixed instant the deterministic store's clock returns."""
    return FIXED_NOW


SEED_DIRECTORY: dict[str, object] = {
    "users": [
        {
            "id": "admin-1",
            "name": "Senior Administrator",
            "email": "admin@example.edu",
            "role": "admin",
            "department": "Administration",
            "accessLevel": 5,
        },
        {
            "id": "student-1",
            "name": "John Smith",
            "email": "john@example.edu",
            "role": "student",
            "department": "Biology",
            "accessLevel": 1,
        },
    ],
    "templates": [
        {
            "id": "template-1",
            "name": "Course Creation Workflow",
            "description": "Create and approve new courses",
            "createdBy": "admin-1",
            "createdDate": "2024-03-01T00:00:00+00:00",
            "timelineInDays": 30,
            "steps": [
                {"id": "step-1", "name": "Course Proposal", "requiredDocuments": ["outline"]},
                {"id": "step-2", "name": "Department Review", "dependsOnSteps": ["step-1"]},
            ],
            "requiredApprovals": ["department-head"],
            "notificationSettings": [
                {"type": "email", "trigger": "step_complete", "roles": ["admin"]}
            ],
        },
        {
            "id": "template-empty",
            "name": "Draft Without Steps",
            "createdBy": "admin-1",
            "createdDate": "2024-03-02T00:00:00+00:00",
            "timelineInDays": 7,
        },
    ],
}


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    """Write a small seed directory (two users, two templates) to disk."""
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED_DIRECTORY), encoding="utf-8")
    return path
