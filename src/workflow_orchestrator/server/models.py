"""Pydantic request/response bodies for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from workflow_orchestrator.models import ApprovalDecision, StepAction


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionRequest(ApiModel):
    # None logs the current user out.
    user_id: str | None = None


class StartWorkflowRequest(ApiModel):
    template_id: str
    title: str
    related_course: str | None = None


class ProcessStepRequest(ApiModel):
    action: StepAction
    comments: str | None = None
    documents: list[str] = Field(default_factory=list)


class RequestApprovalRequest(ApiModel):
    approver_id: str


class ApprovalDecisionRequest(ApiModel):
    decision: ApprovalDecision
    comments: str | None = None


class PermissionCheck(ApiModel):
    role: str
    allowed: bool
