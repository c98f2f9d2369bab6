"""Workflow REST API.

Thin routes over :class:`workflow_orchestrator.store.WorkflowStore`. Store errors
propagate and are mapped to HTTP statuses by the handlers registered in
``create_app``.

All routes are mounted under `/api`.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from workflow_orchestrator import __version__
from workflow_orchestrator.models import (
    Approval,
    ApprovalOutcome,
    TemplateDraft,
    TemplatePatch,
    User,
    WorkflowInstance,
    WorkflowTemplate,
)
from workflow_orchestrator.seed import SeedDirectory
from workflow_orchestrator.server.models import (
    ApprovalDecisionRequest,
    PermissionCheck,
    ProcessStepRequest,
    RequestApprovalRequest,
    SessionRequest,
    StartWorkflowRequest,
)
from workflow_orchestrator.store import WorkflowStore

router = APIRouter()


def _store(request: Request) -> WorkflowStore:
    store = getattr(request.app.state, "store", None)
    if not isinstance(store, WorkflowStore):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Workflow store not configured")
    return store


def _directory(request: Request) -> SeedDirectory:
    directory = getattr(request.app.state, "directory", None)
    if not isinstance(directory, SeedDirectory):
        return SeedDirectory()
    return directory


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    store = _store(request)
    return {
        "status": "ok",
        "version": __version__,
        "templates": len(store.templates),
        "instances": len(store.instances),
    }


# -- session -----------------------------------------------------------------


@router.get("/users", response_model=list[User])
def list_users(request: Request) -> list[User]:
    return _directory(request).users


@router.get("/session", response_model=User | None)
def get_session(request: Request) -> User | None:
    return _store(request).current_user


@router.put("/session", response_model=User | None)
def set_session(request: Request, body: SessionRequest) -> User | None:
    user = None if body.user_id is None else _directory(request).find_user(body.user_id)
    _store(request).set_current_user(user)
    return user


@router.get("/session/permissions/{role}", response_model=PermissionCheck)
def check_permission(request: Request, role: str) -> PermissionCheck:
    return PermissionCheck(role=role, allowed=_store(request).has_permission(role))


# -- templates ---------------------------------------------------------------


@router.get("/templates", response_model=list[WorkflowTemplate])
def list_templates(request: Request) -> list[WorkflowTemplate]:
    return list(_store(request).templates)


@router.get("/templates/{template_id}", response_model=WorkflowTemplate)
def get_template(request: Request, template_id: str) -> WorkflowTemplate:
    return _store(request).get_template(template_id)


@router.post("/templates", response_model=WorkflowTemplate, status_code=201)
def create_template(request: Request, body: TemplateDraft) -> WorkflowTemplate:
    return _store(request).create_template(body)


@router.patch("/templates/{template_id}", response_model=WorkflowTemplate)
def update_template(request: Request, template_id: str, body: TemplatePatch) -> WorkflowTemplate:
    return _store(request).update_template(template_id, body)


@router.delete("/templates/{template_id}", status_code=204)
def delete_template(request: Request, template_id: str) -> Response:
    _store(request).delete_template(template_id)
    return Response(status_code=204)


# -- instances ---------------------------------------------------------------


@router.get("/instances", response_model=list[WorkflowInstance])
def list_instances(request: Request) -> list[WorkflowInstance]:
    return list(_store(request).instances)


@router.get("/instances/{instance_id}", response_model=WorkflowInstance)
def get_instance(request: Request, instance_id: str) -> WorkflowInstance:
    return _store(request).get_instance(instance_id)


@router.post("/instances", response_model=WorkflowInstance, status_code=201)
def start_workflow(request: Request, body: StartWorkflowRequest) -> WorkflowInstance:
    return _store(request).start_workflow(body.template_id, body.title, body.related_course)


@router.post("/instances/{instance_id}/steps/{step_id}", response_model=WorkflowInstance)
def process_step(
    request: Request, instance_id: str, step_id: str, body: ProcessStepRequest
) -> WorkflowInstance:
    return _store(request).process_step(
        instance_id, step_id, body.action, body.comments, body.documents
    )


# -- approvals ---------------------------------------------------------------


@router.post("/instances/{instance_id}/approvals", response_model=Approval, status_code=201)
def request_approval(
    request: Request, instance_id: str, body: RequestApprovalRequest
) -> Approval:
    return _store(request).request_approval(instance_id, body.approver_id)


@router.post("/approvals/{approval_id}", response_model=ApprovalOutcome)
def process_approval(
    request: Request, approval_id: str, body: ApprovalDecisionRequest
) -> ApprovalOutcome:
    return _store(request).process_approval(approval_id, body.decision, body.comments)
