"""In-memory workflow store.

The store owns a single immutable :class:`WorkflowState` snapshot. Every operation
reads the snapshot, computes a new one and installs it as a whole under one lock,
so operations are all-or-nothing: a refused operation leaves state untouched.

Design intent:
- Keep the state explicit and injectable (no module-level singleton)
- Keep the rules in plain functions of (snapshot, inputs)
- Audit trails are append-only; entries are never rewritten
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

from workflow_orchestrator.errors import NotFound, PreconditionViolation, Unauthenticated
from workflow_orchestrator.ids import IdFactory, generate_id
from workflow_orchestrator.models import (
    Approval,
    ApprovalDecision,
    ApprovalOutcome,
    ApprovalStatus,
    AuditEntry,
    Comment,
    InstanceStatus,
    Role,
    StepAction,
    TemplateDraft,
    TemplatePatch,
    User,
    WorkflowInstance,
    WorkflowTemplate,
)
from workflow_orchestrator.permissions import has_permission

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

WORKFLOW_STARTED = "WORKFLOW_STARTED"
APPROVAL_REQUESTED = "APPROVAL_REQUESTED"

_STEP_STATUS: dict[StepAction, InstanceStatus] = {
    StepAction.COMPLETE: InstanceStatus.COMPLETED,
    StepAction.REJECT: InstanceStatus.REJECTED,
    StepAction.REQUEST_CHANGES: InstanceStatus.ACTIVE,
}


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class WorkflowState:
    """A complete, immutable view of the store.

    Collections keep insertion order.
    """

    templates: tuple[WorkflowTemplate, ...] = ()
    instances: tuple[WorkflowInstance, ...] = ()
    current_user: User | None = None


def _index_of(items: Sequence[WorkflowTemplate | WorkflowInstance], entity_id: str) -> int | None:
    for idx, item in enumerate(items):
        if item.id == entity_id:
            return idx
    return None


def _replaced(items: tuple, idx: int, item: object) -> tuple:
    return items[:idx] + (item,) + items[idx + 1 :]


class WorkflowStore:
    """Template, instance and approval operations over one state snapshot."""

    def __init__(
        self,
        state: WorkflowState | None = None,
        *,
        id_factory: IdFactory = generate_id,
        clock: Clock = utc_now,
    ) -> None:
        self._state = state if state is not None else WorkflowState()
        self._new_id = id_factory
        self._now = clock
        self._lock = threading.Lock()

    # -- reads ---------------------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def templates(self) -> tuple[WorkflowTemplate, ...]:
        return self._state.templates

    @property
    def instances(self) -> tuple[WorkflowInstance, ...]:
        return self._state.instances

    @property
    def current_user(self) -> User | None:
        return self._state.current_user

    def get_template(self, template_id: str) -> WorkflowTemplate:
        templates = self._state.templates
        idx = _index_of(templates, template_id)
        if idx is None:
            raise NotFound("template", template_id)
        return templates[idx]

    def get_instance(self, instance_id: str) -> WorkflowInstance:
        instances = self._state.instances
        idx = _index_of(instances, instance_id)
        if idx is None:
            raise NotFound("instance", instance_id)
        return instances[idx]

    # -- session -------------------------------------------------------------

    def set_current_user(self, user: User | None) -> None:
        """Replace the session user. No credential check is performed."""

        with self._lock:
            self._state = replace(self._state, current_user=user)
        logger.info("Current user set", extra={"user_id": user.id if user else None})

    def has_permission(self, role: Role | str) -> bool:
        return has_permission(self._state.current_user, role)

    # -- templates -----------------------------------------------------------

    def create_template(self, draft: TemplateDraft) -> WorkflowTemplate:
        with self._lock:
            state = self._state
            user = self._require_user(state, "create a template")
            fields = {name: getattr(draft, name) for name in TemplateDraft.model_fields}
            template = WorkflowTemplate(
                **fields,
                id=self._new_id(),
                created_by=user.id,
                created_date=self._now(),
            )
            self._state = replace(state, templates=state.templates + (template,))

        logger.info(
            "Template created",
            extra={"template_id": template.id, "user_id": user.id, "steps": len(template.steps)},
        )
        return template

    def update_template(self, template_id: str, patch: TemplatePatch) -> WorkflowTemplate:
        with self._lock:
            state = self._state
            user = self._require_user(state, "update a template")
            idx = _index_of(state.templates, template_id)
            if idx is None:
                raise self._not_found("template", template_id)
            changes = patch.changes()
            updated = state.templates[idx].model_copy(update=changes)
            self._state = replace(state, templates=_replaced(state.templates, idx, updated))

        logger.info(
            "Template updated",
            extra={"template_id": template_id, "user_id": user.id, "fields": sorted(changes)},
        )
        return updated

    def delete_template(self, template_id: str) -> None:
        """Remove a template. Unknown ids are ignored; instances are left in place."""

        with self._lock:
            state = self._state
            user = self._require_user(state, "delete a template")
            remaining = tuple(t for t in state.templates if t.id != template_id)
            self._state = replace(state, templates=remaining)

        logger.info(
            "Template deleted",
            extra={
                "template_id": template_id,
                "user_id": user.id,
                "removed": len(remaining) != len(state.templates),
            },
        )

    # -- instances -----------------------------------------------------------

    def start_workflow(
        self, template_id: str, title: str, related_course: str | None = None
    ) -> WorkflowInstance:
        with self._lock:
            state = self._state
            user = self._require_user(state, "start a workflow")
            idx = _index_of(state.templates, template_id)
            if idx is None:
                raise self._not_found("template", template_id)
            template = state.templates[idx]
            if not template.steps:
                logger.warning(
                    "Refusing to start workflow from template without steps",
                    extra={"template_id": template_id},
                )
                raise PreconditionViolation(
                    f"Template {template_id!r} has no steps; a workflow needs at least one"
                )

            now = self._now()
            instance = WorkflowInstance(
                id=self._new_id(),
                template_id=template_id,
                title=title,
                initiated_by=user.id,
                initiated_date=now,
                due_date=now + timedelta(days=template.timeline_in_days),
                current_step=template.steps[0].id,
                status=InstanceStatus.ACTIVE,
                related_course=related_course,
                audit_trail=(
                    self._audit(
                        WORKFLOW_STARTED,
                        user,
                        f'Workflow "{title}" started from template "{template.name}"',
                    ),
                ),
            )
            self._state = replace(state, instances=state.instances + (instance,))

        logger.info(
            "Workflow started",
            extra={"instance_id": instance.id, "template_id": template_id, "user_id": user.id},
        )
        return instance

    def process_step(
        self,
        instance_id: str,
        step_id: str,
        action: StepAction | str,
        comments: str | None = None,
        documents: Sequence[str] = (),
    ) -> WorkflowInstance:
        """Record an action on a step of a running instance.

        Completing a step appends it to ``completed_steps`` every time it is
        called; nothing checks that the step belongs to the template or that it
        is the current one. ``documents`` must be a sequence of names; a bare
        string is refused rather than split into characters.
        """

        if isinstance(documents, str):
            raise TypeError("documents must be a sequence of document names, not a str")
        action = StepAction(action)
        with self._lock:
            state = self._state
            user = self._require_user(state, "process a step")
            idx = _index_of(state.instances, instance_id)
            if idx is None:
                raise self._not_found("instance", instance_id)
            instance = state.instances[idx]

            completed_steps = instance.completed_steps
            if action is StepAction.COMPLETE:
                completed_steps += (step_id,)

            new_comments = instance.comments
            if comments:
                new_comments += (
                    Comment(
                        id=self._new_id(), user_id=user.id, content=comments, timestamp=self._now()
                    ),
                )

            # TODO: derive current_step from completed_steps and the template step
            # order once it is settled whether the store or the caller advances it.
            updated = instance.model_copy(
                update={
                    "status": _STEP_STATUS[action],
                    "completed_steps": completed_steps,
                    "comments": new_comments,
                    "associated_documents": (*instance.associated_documents, *documents),
                    "audit_trail": (
                        *instance.audit_trail,
                        self._audit(
                            f"STEP_{action.value.upper()}",
                            user,
                            f'Step "{step_id}" {action.value}',
                        ),
                    ),
                }
            )
            self._state = replace(state, instances=_replaced(state.instances, idx, updated))

        logger.info(
            "Step processed",
            extra={
                "instance_id": instance_id,
                "step_id": step_id,
                "action": action.value,
                "user_id": user.id,
            },
        )
        return updated

    # -- approvals -----------------------------------------------------------

    def request_approval(self, instance_id: str, approver_id: str) -> Approval:
        with self._lock:
            state = self._state
            user = self._require_user(state, "request approval")
            idx = _index_of(state.instances, instance_id)
            if idx is None:
                raise self._not_found("instance", instance_id)
            instance = state.instances[idx]

            approval = Approval(
                id=self._new_id(),
                requested_by=user.id,
                requested_from=approver_id,
                status=ApprovalStatus.PENDING,
                comments="",
                date=self._now(),
            )
            updated = instance.model_copy(
                update={
                    "approvals": (*instance.approvals, approval),
                    "audit_trail": (
                        *instance.audit_trail,
                        self._audit(
                            APPROVAL_REQUESTED, user, f"Approval requested from user {approver_id}"
                        ),
                    ),
                }
            )
            self._state = replace(state, instances=_replaced(state.instances, idx, updated))

        logger.info(
            "Approval requested",
            extra={
                "instance_id": instance_id,
                "approval_id": approval.id,
                "approver_id": approver_id,
                "user_id": user.id,
            },
        )
        return approval

    def process_approval(
        self,
        approval_id: str,
        decision: ApprovalDecision | str,
        comments: str | None = None,
    ) -> ApprovalOutcome:
        """Decide a pending approval.

        Approval ids are assumed unique across instances; the first instance (in
        insertion order) holding the id is the one updated.
        """

        decision = ApprovalDecision(decision)
        with self._lock:
            state = self._state
            user = self._require_user(state, "process approval")
            for idx, instance in enumerate(state.instances):
                pos = instance.find_approval(approval_id)
                if pos is not None:
                    break
            else:
                raise self._not_found("approval", approval_id)

            approval = instance.approvals[pos].model_copy(
                update={
                    "status": ApprovalStatus(decision.value),
                    "comments": comments or "",
                    "date": self._now(),
                }
            )
            updated = instance.model_copy(
                update={
                    "approvals": _replaced(instance.approvals, pos, approval),
                    "audit_trail": (
                        *instance.audit_trail,
                        self._audit(
                            f"APPROVAL_{decision.value.upper()}",
                            user,
                            f"Approval {decision.value} by {user.id}",
                        ),
                    ),
                }
            )
            self._state = replace(state, instances=_replaced(state.instances, idx, updated))

        logger.info(
            "Approval processed",
            extra={
                "instance_id": updated.id,
                "approval_id": approval_id,
                "decision": decision.value,
                "user_id": user.id,
            },
        )
        return ApprovalOutcome(approval=approval, instance=updated)

    # -- helpers -------------------------------------------------------------

    def _require_user(self, state: WorkflowState, operation: str) -> User:
        user = state.current_user
        if user is None:
            logger.warning("Refusing unauthenticated operation", extra={"operation": operation})
            raise Unauthenticated(operation)
        return user

    def _not_found(self, kind: str, entity_id: str) -> NotFound:
        logger.warning(f"{kind.capitalize()} not found", extra={"entity_id": entity_id})
        return NotFound(kind, entity_id)

    def _audit(self, action: str, user: User, details: str) -> AuditEntry:
        return AuditEntry(
            id=self._new_id(),
            action=action,
            performed_by=user.id,
            timestamp=self._now(),
            details=details,
        )
