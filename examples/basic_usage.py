#!/usr/bin/env python3
"""Programmatic store usage example.

This demonstrates using the store directly:

* load the seed directory (users and templates)
* start a workflow as an instructor
* complete the first step and request an approval
* decide the approval as an admin

Nothing is persisted; the printed instance is the final in-memory state.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from workflow_orchestrator.config import WorkflowSettings
from workflow_orchestrator.logging import configure_logging
from workflow_orchestrator.seed import initial_state, load_seed_directory
from workflow_orchestrator.store import WorkflowStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one course workflow end to end.")
    parser.add_argument(
        "--seed",
        type=Path,
        default=Path(__file__).with_name("seed.json"),
        help="Seed directory JSON file",
    )
    parser.add_argument("--template-id", default="template-1", help="Template to start from")
    parser.add_argument("--title", default="Intro to Genomics", help="Instance title")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = WorkflowSettings()
    configure_logging(settings.log_level)

    directory = load_seed_directory(args.seed)
    store = WorkflowStore(initial_state(directory))

    store.set_current_user(directory.find_user("instructor-1"))
    instance = store.start_workflow(args.template_id, args.title, related_course="BIO-210")
    store.process_step(
        instance.id,
        instance.current_step,
        "complete",
        comments="Outline and objectives attached",
        documents=["course-outline.pdf", "learning-objectives.pdf"],
    )
    approval = store.request_approval(instance.id, approver_id="admin-1")

    store.set_current_user(directory.find_user("admin-1"))
    outcome = store.process_approval(approval.id, "approved", comments="Ready for committee")

    print(json.dumps(outcome.instance.to_json(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
