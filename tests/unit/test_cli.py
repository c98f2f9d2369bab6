"""Unit tests for the command line entrypoint."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from workflow_orchestrator.main import main


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WORKFLOW_SEED_PATH", raising=False)
    monkeypatch.delenv("WORKFLOW_ID_LENGTH", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    # main() reconfigures root logging; put pytest's handlers back afterwards.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_permissions_table(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["permissions"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["admin", "admin"]
    assert lines[2].startswith("student")
    assert "stakeholder" in lines[2]


def test_templates_lists_seeded_templates(
    seed_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["--seed", str(seed_file), "templates"]) == 0

    out = capsys.readouterr().out
    assert "template-1\tCourse Creation Workflow\t2 steps\t30 days" in out
    assert "template-empty" in out


def test_templates_without_seed(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["templates"]) == 0
    assert "No templates seeded." in capsys.readouterr().out


def test_demo_completes_first_step(seed_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        [
            "--seed",
            str(seed_file),
            "demo",
            "--user-id",
            "admin-1",
            "--template-id",
            "template-1",
            "--title",
            "Genomics",
            "--comments",
            "ok",
            "--document",
            "outline.pdf",
        ]
    )

    assert code == 0
    instance = json.loads(capsys.readouterr().out)
    assert instance["status"] == "completed"
    assert instance["completedSteps"] == ["step-1"]
    assert instance["currentStep"] == "step-1"
    assert instance["associatedDocuments"] == ["outline.pdf"]
    assert len(instance["auditTrail"]) == 2


def test_demo_reports_workflow_errors(
    seed_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(
        [
            "--seed",
            str(seed_file),
            "demo",
            "--user-id",
            "admin-1",
            "--template-id",
            "template-empty",
            "--title",
            "Nothing",
        ]
    )

    assert code == 1
    assert "has no steps" in capsys.readouterr().err


def test_bad_seed_file_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "seed.json"
    path.write_text("{oops", encoding="utf-8")

    assert main(["--seed", str(path), "templates"]) == 2
    assert "not valid JSON" in capsys.readouterr().err


def test_invalid_settings_exit_2(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("WORKFLOW_ID_LENGTH", "1000")

    assert main(["permissions"]) == 2
    assert "Configuration error" in capsys.readouterr().err
