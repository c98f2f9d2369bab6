"""Domain models for workflow templates, instances, approvals and audit entries.

Attributes are snake_case; JSON uses the camelCase aliases the dashboard expects
(``createdBy``, ``timelineInDays``, ...). Either spelling is accepted on input.

All models are frozen. The store replaces records instead of mutating them, which
keeps previously returned values (and audit entries in particular) unchanged.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"
    STAKEHOLDER = "stakeholder"


class StepStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class InstanceStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    # Written when a step is rejected.
    REJECTED = "rejected"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StepAction(str, Enum):
    COMPLETE = "complete"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"


class ApprovalDecision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    EMAIL = "email"
    IN_APP = "in_app"


class NotificationTrigger(str, Enum):
    STEP_COMPLETE = "step_complete"
    APPROVAL_NEEDED = "approval_needed"
    DEADLINE_APPROACHING = "deadline_approaching"


class DomainModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class User(DomainModel):
    id: str
    name: str
    email: str
    role: Role
    department: str = ""
    # Higher means more privilege. No upper bound.
    access_level: int = 0


class NotificationSetting(DomainModel):
    """Stored with a template. Nothing dispatches notifications."""

    type: NotificationType
    trigger: NotificationTrigger
    roles: tuple[Role, ...] = Field(default_factory=tuple)


class WorkflowStep(DomainModel):
    """A step definition inside a template (not an instance's live state)."""

    id: str
    name: str
    description: str = ""
    assigned_roles: tuple[Role, ...] = Field(default_factory=tuple)
    required_documents: tuple[str, ...] = Field(default_factory=tuple)
    status: StepStatus = StepStatus.NOT_STARTED
    completion_criteria: str = ""
    # Recorded only; step order is never checked against it.
    depends_on_steps: tuple[str, ...] = Field(default_factory=tuple)


class TemplateDraft(DomainModel):
    """Input for template creation: everything except the store-stamped fields."""

    name: str
    description: str = ""
    steps: tuple[WorkflowStep, ...] = Field(default_factory=tuple)
    required_approvals: tuple[str, ...] = Field(default_factory=tuple)
    timeline_in_days: int = Field(gt=0)
    notification_settings: tuple[NotificationSetting, ...] = Field(default_factory=tuple)


class WorkflowTemplate(TemplateDraft):
    id: str
    created_by: str
    created_date: datetime


class TemplatePatch(DomainModel):
    """Partial template update.

    Only fields present in ``model_fields_set`` are applied; each replaces the
    stored value entirely (a new ``steps`` list replaces all steps).
    """

    name: str | None = None
    description: str | None = None
    steps: tuple[WorkflowStep, ...] | None = None
    required_approvals: tuple[str, ...] | None = None
    timeline_in_days: int | None = Field(default=None, gt=0)
    notification_settings: tuple[NotificationSetting, ...] | None = None

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> TemplatePatch:
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Patch fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class Approval(DomainModel):
    id: str
    requested_by: str
    requested_from: str
    status: ApprovalStatus = ApprovalStatus.PENDING
    comments: str = ""
    date: datetime


class Comment(DomainModel):
    id: str
    user_id: str
    content: str
    timestamp: datetime


class AuditEntry(DomainModel):
    id: str
    action: str
    performed_by: str
    timestamp: datetime
    details: str


class WorkflowInstance(DomainModel):
    """One execution of a template.

    ``template_id`` is a weak reference: deleting the template leaves the instance
    in place, and template data is never re-read after the start.
    """

    id: str
    template_id: str
    title: str
    initiated_by: str
    initiated_date: datetime
    due_date: datetime
    current_step: str
    completed_steps: tuple[str, ...] = Field(default_factory=tuple)
    status: InstanceStatus = InstanceStatus.ACTIVE
    associated_documents: tuple[str, ...] = Field(default_factory=tuple)
    approvals: tuple[Approval, ...] = Field(default_factory=tuple)
    comments: tuple[Comment, ...] = Field(default_factory=tuple)
    related_course: str | None = None
    audit_trail: tuple[AuditEntry, ...] = Field(default_factory=tuple)

    def find_approval(self, approval_id: str) -> int | None:
        for idx, approval in enumerate(self.approvals):
            if approval.id == approval_id:
                return idx
        return None


class ApprovalOutcome(DomainModel):
    approval: Approval
    instance: WorkflowInstance
