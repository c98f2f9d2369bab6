"""Workflow Orchestrator.

An in-memory workflow model:
- reusable step-based templates
- tracked workflow instances with approval gates
- an append-only audit trail per instance
"""

__version__ = "0.1.0"

from workflow_orchestrator.config import WorkflowSettings
from workflow_orchestrator.store import WorkflowState, WorkflowStore

__all__ = ["__version__", "WorkflowSettings", "WorkflowState", "WorkflowStore"]
