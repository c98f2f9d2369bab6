"""Initial user directory and templates for a store.

The store itself has no seeding operation; callers build a :class:`WorkflowState`
from a seed directory and hand it to :class:`WorkflowStore`.

Seed file shape::

    {"users": [{"id": ..., "role": ..., ...}], "templates": [{"id": ..., ...}]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from workflow_orchestrator.errors import NotFound
from workflow_orchestrator.models import User, WorkflowTemplate
from workflow_orchestrator.store import WorkflowState

logger = logging.getLogger(__name__)


class SeedDirectory(BaseModel):
    users: list[User] = Field(default_factory=list)
    templates: list[WorkflowTemplate] = Field(default_factory=list)

    def find_user(self, user_id: str) -> User:
        for user in self.users:
            if user.id == user_id:
                return user
        raise NotFound("user", user_id)


def load_seed_directory(path: Path | None) -> SeedDirectory:
    """Load a seed directory from JSON.

    A missing path yields an empty directory. Malformed content raises ValueError.
    """

    if path is None or not path.exists():
        if path is not None:
            logger.info("Seed file not found; starting empty", extra={"path": str(path)})
        return SeedDirectory()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Seed file is not valid JSON: {path}") from e

    if not isinstance(raw, dict):
        raise ValueError(f"Seed file must contain a JSON object: {path}")

    try:
        directory = SeedDirectory.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Seed file has unexpected shape: {path}\n{e}") from e

    logger.info(
        "Seed directory loaded",
        extra={
            "path": str(path),
            "users": len(directory.users),
            "templates": len(directory.templates),
        },
    )
    return directory


def initial_state(directory: SeedDirectory) -> WorkflowState:
    """Seeded templates, no instances and no current user."""

    return WorkflowState(templates=tuple(directory.templates))
