"""Unit tests for domain model validation and JSON aliases."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from workflow_orchestrator.models import (
    Role,
    StepStatus,
    TemplateDraft,
    TemplatePatch,
    User,
    WorkflowStep,
)


def test_models_accept_camel_case_and_dump_camel_case() -> None:
    user = User.model_validate(
        {
            "id": "u-1",
            "name": "Ada",
            "email": "ada@example.edu",
            "role": "instructor",
            "department": "Maths",
            "accessLevel": 99,
        }
    )
    assert user.role is Role.INSTRUCTOR
    assert user.access_level == 99
    assert user.to_json()["accessLevel"] == 99


def test_step_status_defaults_to_not_started() -> None:
    step = WorkflowStep(id="s1", name="Proposal")
    assert step.status is StepStatus.NOT_STARTED
    assert step.depends_on_steps == ()


def test_template_draft_requires_positive_timeline() -> None:
    with pytest.raises(ValidationError):
        TemplateDraft(name="Bad", timeline_in_days=0)


def test_models_are_frozen() -> None:
    step = WorkflowStep(id="s1", name="Proposal")
    with pytest.raises(ValidationError):
        step.name = "Changed"  # type: ignore[misc]


def test_patch_changes_only_include_provided_fields() -> None:
    patch = TemplatePatch.model_validate({"timelineInDays": 21})
    assert patch.changes() == {"timeline_in_days": 21}


def test_patch_rejects_explicit_null() -> None:
    with pytest.raises(ValidationError):
        TemplatePatch.model_validate({"name": None})
