"""FastAPI server adapter for workflow-orchestrator.

This module exposes a REST API over the workflow store.

Design intent:
- Keep workflow rules in `workflow_orchestrator.store`
- Keep server-specific concerns (routing, CORS, HTTP error mapping) here

Run with ``uvicorn workflow_orchestrator.server:create_app --factory``.
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_orchestrator.server.app import create_app
