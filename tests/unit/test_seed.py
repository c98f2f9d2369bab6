"""Unit tests for loading the seed directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from workflow_orchestrator.errors import NotFound
from workflow_orchestrator.models import NotificationTrigger, Role
from workflow_orchestrator.seed import SeedDirectory, initial_state, load_seed_directory


def test_load_seed_directory(seed_file: Path) -> None:
    directory = load_seed_directory(seed_file)

    assert [u.id for u in directory.users] == ["admin-1", "student-1"]
    assert directory.find_user("student-1").role is Role.STUDENT
    template = directory.templates[0]
    assert template.timeline_in_days == 30
    assert template.steps[1].depends_on_steps == ["step-1"]
    assert template.notification_settings[0].trigger is NotificationTrigger.STEP_COMPLETE


def test_missing_seed_file_is_empty(tmp_path: Path) -> None:
    assert load_seed_directory(tmp_path / "nope.json") == SeedDirectory()
    assert load_seed_directory(None) == SeedDirectory()


@pytest.mark.parametrize("content", ["{not json", "[]", '{"users": [{"id": 1}]}'])
def test_malformed_seed_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "seed.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_seed_directory(path)


def test_unknown_user_is_not_found(seed_file: Path) -> None:
    with pytest.raises(NotFound):
        load_seed_directory(seed_file).find_user("ghost")


def test_initial_state_has_templates_and_no_user(seed_file: Path) -> None:
    state = initial_state(load_seed_directory(seed_file))

    assert [t.id for t in state.templates] == ["template-1", "template-empty"]
    assert state.instances == ()
    assert state.current_user is None
