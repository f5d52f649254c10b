"""CLI entry point for claim workflow validation and the local claims database."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

# Ensure src is on path when run as script
if __name__ == "__main__" and str(Path(__file__).resolve().parent.parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def _setup_logging() -> None:
    from claim_workflow.observability import get_logger

    get_logger("claim_workflow")
    logging.getLogger("claim_workflow").setLevel(
        logging.DEBUG if "--debug" in sys.argv else logging.INFO
    )


def _usage() -> str:
    return """Usage:
  claim-workflow validate <input.json>           Validate {"current", "updates", "role"}
  claim-workflow transitions <status>            Allowed next statuses and their requirements
  claim-workflow create <claim.json>             Create a DRAFT claim in the local database
  claim-workflow edit <claim_id> <updates.json>  Apply a validated update (needs --role)
  claim-workflow status <claim_id>               Show a claim
  claim-workflow history <claim_id>              Show the claim audit log
  claim-workflow reprocesses <claim_id>          Show reprocess records

Options:
  --role=<role>                                  Caller role for edit
  --user=<user_id>                               Caller user ID for create/edit
  --debug                                        Enable debug logging
  --json                                         Use JSON log format
"""


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_json(path: Path) -> Any:
    if not path.exists():
        _fail(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {path}: {e}")


def _option(options: list[str], name: str) -> str | None:
    prefix = f"--{name}="
    for opt in options:
        if opt.startswith(prefix):
            return opt[len(prefix):]
    return None


def cmd_validate(input_path: Path) -> None:
    """Run the engine on a JSON file and print the result. Exit 1 if invalid."""
    from claim_workflow.workflow.engine import validate

    data = _load_json(input_path)
    if not isinstance(data, dict) or "current" not in data:
        _fail('Input must be an object with "current", "updates" and "role"')
    try:
        result = validate(data["current"], data.get("updates") or {}, data.get("role"))
    except ValueError as e:
        _fail(f"Malformed input: {e}")
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    if not result.valid:
        sys.exit(1)


def cmd_transitions(status: str) -> None:
    from claim_workflow.models.claim import ClaimStatus
    from claim_workflow.workflow.lifecycle import get_allowed_transitions, get_editable_fields
    from claim_workflow.workflow.requirements import get_transition_requirement

    try:
        current = ClaimStatus(status.upper())
    except ValueError:
        _fail(f"Unknown status: {status}")
    transitions = []
    for target in get_allowed_transitions(current):
        requirement = get_transition_requirement(current, target)
        transitions.append(
            {
                "to": target.value,
                "requires": list(requirement.fields),
                "creates_linked_record": requirement.creates_linked_record,
                "recomputes_derived_duration": requirement.recomputes_derived_duration,
            }
        )
    print(
        json.dumps(
            {
                "status": current.value,
                "editable_fields": list(get_editable_fields(current)),
                "transitions": transitions,
            },
            indent=2,
        )
    )


def cmd_create(claim_path: Path, user_id: str | None = None) -> None:
    from claim_workflow.db.repository import ClaimRepository
    from claim_workflow.models.claim import ClaimCreate

    data = _load_json(claim_path)
    try:
        claim_input = ClaimCreate.model_validate(data)
    except ValidationError as e:
        print("Error: Invalid claim data:", file=sys.stderr)
        print(e.json(), file=sys.stderr)
        sys.exit(1)
    claim_id = ClaimRepository().create_claim(claim_input, user_id=user_id)
    print(json.dumps({"claim_id": claim_id}, indent=2))


def cmd_edit(claim_id: str, updates_path: Path, role: str | None, user_id: str | None = None) -> None:
    from claim_workflow.db.repository import ClaimNotFoundError, ClaimRepository
    from claim_workflow.models.claim import ClaimUpdate
    from claim_workflow.workflow.errors import ClaimWorkflowError

    if not role:
        _fail("edit requires --role=<role>")
    data = _load_json(updates_path)
    try:
        updates = ClaimUpdate.model_validate(data)
    except ValidationError as e:
        print("Error: Invalid update data:", file=sys.stderr)
        print(e.json(), file=sys.stderr)
        sys.exit(1)
    try:
        outcome = ClaimRepository().edit_claim(claim_id, updates, role, user_id=user_id)
    except ClaimNotFoundError as e:
        _fail(str(e))
    except ClaimWorkflowError as e:
        _fail(f"{e} ({e.code})")
    print(
        json.dumps(
            {
                "claim": outcome.claim,
                "result": outcome.result.model_dump(mode="json"),
                "reprocess_id": outcome.reprocess_id,
                "business_days": outcome.business_days,
            },
            indent=2,
            default=str,
        )
    )


def cmd_status(claim_id: str) -> None:
    from claim_workflow.db.repository import ClaimRepository

    claim = ClaimRepository().get_claim(claim_id)
    if claim is None:
        _fail(f"Claim not found: {claim_id}")
    print(json.dumps(claim, indent=2))


def cmd_history(claim_id: str) -> None:
    from claim_workflow.db.repository import ClaimRepository

    repo = ClaimRepository()
    if repo.get_claim(claim_id) is None:
        _fail(f"Claim not found: {claim_id}")
    print(json.dumps(repo.get_claim_history(claim_id), indent=2))


def cmd_reprocesses(claim_id: str) -> None:
    from claim_workflow.db.repository import ClaimRepository

    repo = ClaimRepository()
    if repo.get_claim(claim_id) is None:
        _fail(f"Claim not found: {claim_id}")
    print(json.dumps(repo.get_reprocesses(claim_id), indent=2))


def main() -> None:
    """Dispatch claim-workflow subcommands."""
    argv = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    options = [arg for arg in sys.argv[1:] if arg.startswith("--")]

    if "--json" in options:
        os.environ["CLAIM_WORKFLOW_LOG_FORMAT"] = "json"
    if "--debug" in options:
        os.environ["CLAIM_WORKFLOW_LOG_LEVEL"] = "DEBUG"

    _setup_logging()

    if not argv:
        print(_usage(), file=sys.stderr)
        sys.exit(1)

    command = argv[0].lower()
    user_id = _option(options, "user")

    if command in ("validate", "transitions", "create", "status", "history", "reprocesses"):
        if len(argv) < 2:
            print(f"Error: {command} requires an argument", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        arg = argv[1]
        if command == "validate":
            cmd_validate(Path(arg))
        elif command == "transitions":
            cmd_transitions(arg)
        elif command == "create":
            cmd_create(Path(arg), user_id=user_id)
        elif command == "status":
            cmd_status(arg)
        elif command == "history":
            cmd_history(arg)
        else:
            cmd_reprocesses(arg)
        return

    if command == "edit":
        if len(argv) < 3:
            print("Error: edit requires <claim_id> <updates.json>", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        cmd_edit(argv[1], Path(argv[2]), _option(options, "role"), user_id=user_id)
        return

    print(f"Error: Unknown command: {command}", file=sys.stderr)
    print(_usage(), file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
