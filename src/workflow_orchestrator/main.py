"""CLI entrypoint for the workflow orchestrator.

Commands work against the seed directory named by WORKFLOW_SEED_PATH; nothing
is persisted between runs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from workflow_orchestrator import __version__
from workflow_orchestrator.config import WorkflowSettings
from workflow_orchestrator.errors import WorkflowError
from workflow_orchestrator.ids import id_factory
from workflow_orchestrator.logging import configure_logging
from workflow_orchestrator.models import StepAction
from workflow_orchestrator.permissions import capability_rows
from workflow_orchestrator.seed import SeedDirectory, initial_state, load_seed_directory
from workflow_orchestrator.store import WorkflowStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-orchestrator",
        description="In-memory workflow templates, instances and approvals",
    )
    parser.add_argument(
        "--version", action="version", version=f"workflow-orchestrator {__version__}"
    )
    parser.add_argument(
        "--seed",
        type=Path,
        default=None,
        help="Seed directory JSON file (overrides WORKFLOW_SEED_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("permissions", help="Print the role capability table")
    subparsers.add_parser("templates", help="List seeded workflow templates")

    demo = subparsers.add_parser(
        "demo",
        help="Start a workflow from a seeded template and complete its first step",
    )
    demo.add_argument("--user-id", required=True, help="Seeded user acting as current user")
    demo.add_argument("--template-id", required=True, help="Seeded template to start from")
    demo.add_argument("--title", required=True, help="Workflow instance title")
    demo.add_argument("--course", default=None, help="Optional related course reference")
    demo.add_argument("--comments", default=None, help="Comment recorded with the step")
    demo.add_argument(
        "--document",
        dest="documents",
        action="append",
        default=[],
        help="Document id to attach (repeatable)",
    )

    return parser


def _print_permissions() -> None:
    for role, allowed in capability_rows():
        print(f"{role.value:<12} {', '.join(r.value for r in allowed)}")


def _print_templates(directory: SeedDirectory) -> None:
    if not directory.templates:
        print("No templates seeded.")
        return
    for template in directory.templates:
        print(
            f"{template.id}\t{template.name}\t"
            f"{len(template.steps)} steps\t{template.timeline_in_days} days"
        )


def _run_demo(args: argparse.Namespace, directory: SeedDirectory, store: WorkflowStore) -> int:
    store.set_current_user(directory.find_user(args.user_id))
    instance = store.start_workflow(args.template_id, args.title, args.course)
    instance = store.process_step(
        instance.id,
        instance.current_step,
        StepAction.COMPLETE,
        args.comments,
        args.documents,
    )
    print(json.dumps(instance.to_json(), indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorkflowSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "permissions":
        _print_permissions()
        return 0

    seed_path = args.seed if args.seed is not None else settings.seed_path
    try:
        directory = load_seed_directory(seed_path)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.command == "templates":
        _print_templates(directory)
        return 0

    if args.command == "demo":
        store = WorkflowStore(initial_state(directory), id_factory=id_factory(settings.id_length))
        try:
            return _run_demo(args, directory, store)
        except WorkflowError as e:
            logger.error("Demo failed", extra={"error": type(e).__name__})
            print(str(e), file=sys.stderr)
            return 1

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
