# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from guild_logbook.app import (
    delete_roster_entity,
    export_roster_file,
    import_roster_file,
    preview_import_file,
)
from guild_logbook.config import configure_logging
from guild_logbook.domain.data_integration import ImportMode, ImportValidationError
from guild_logbook.domain.reconciliation import MISSING
from guild_logbook.domain.types import EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import FrameType

    from guild_logbook.domain.reconciliation import MergeReport

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the Guild Logbook roster")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Show what importing a file would change")
    preview.add_argument("file", type=Path, help="JSON export to compare against the roster")
    _add_mode_argument(preview)
    preview.add_argument(
        "--json",
        action="store_true",
        help="Print the merge reports as JSON instead of text",
    )

    import_ = subparsers.add_parser("import", help="Import a JSON export into the roster")
    import_.add_argument("file", type=Path, help="JSON export to import")
    _add_mode_argument(import_)
    import_.add_argument(
        "--yes",
        action="store_true",
        help="Apply the import without asking for confirmation",
    )

    export = subparsers.add_parser("export", help="Export the roster as JSON")
    export.add_argument("file", type=Path, help="Destination path for the export")
    export.add_argument(
        "--character-id",
        type=str,
        help="Export only this character as a single-character document",
    )

    delete = subparsers.add_parser("delete", help="Delete one entity from the roster")
    delete.add_argument(
        "kind",
        type=EntityKind,
        choices=list(EntityKind),
        help="Collection the entity belongs to",
    )
    delete.add_argument("entity_id", type=str, help="Id of the entity to delete")

    return parser.parse_args(list(argv))


def _add_mode_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        type=ImportMode,
        choices=list(ImportMode),
        default=ImportMode.MERGE,
        help=(
            "merge keeps entities missing from the file, replace overwrites them "
            "(default: %(default)s)"
        ),
    )


def format_report(kind: EntityKind, report: MergeReport) -> str:
    """Render one merge report as human-readable text."""

    summary = report.summary
    lines = [
        f"{kind}: {summary.added} added, {summary.modified} modified, "
        f"{summary.removed} not in import, {summary.unchanged} unchanged"
    ]
    lines.extend(f"  + {entry.name or '(unnamed)'} [{entry.id}]" for entry in report.details.added)
    for entry in report.details.modified:
        lines.append(f"  ~ {entry.name or '(unnamed)'} [{entry.id}]")
        lines.extend(
            f"      {change.field}: {_display(change.before)} -> {_display(change.after)}"
            for change in entry.changes
        )
    lines.extend(
        f"  ? {entry.name or '(unnamed)'} [{entry.id}]" for entry in report.details.removed
    )
    return "\n".join(lines)


def _display(value: object) -> str:
    if value is MISSING:
        return "(absent)"
    return json.dumps(value, ensure_ascii=False, default=str)


def _print_reports(reports: Mapping[EntityKind, MergeReport]) -> None:
    for kind, report in reports.items():
        print(format_report(kind, report))


def _interactive_review(reports: Mapping[EntityKind, MergeReport]) -> bool:
    _print_reports(reports)
    try:
        answer = input("Apply these changes? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _auto_approve(reports: Mapping[EntityKind, MergeReport]) -> bool:
    _print_reports(reports)
    return True


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        configure_logging()
        if parsed_args.command == "preview":
            preview = preview_import_file(parsed_args.file, mode=parsed_args.mode)
            if parsed_args.json:
                document = {
                    str(kind): report.to_dict() for kind, report in preview.reports.items()
                }
                print(json.dumps(document, indent=2, ensure_ascii=False, default=str))
            else:
                _print_reports(preview.reports)
        elif parsed_args.command == "import":
            review = _auto_approve if parsed_args.yes else _interactive_review
            result = import_roster_file(parsed_args.file, review=review, mode=parsed_args.mode)
            if not result.applied:
                log.info("Import cancelled; nothing was saved")
        elif parsed_args.command == "export":
            path = export_roster_file(parsed_args.file, character_id=parsed_args.character_id)
            log.info("Wrote %s", path)
        elif parsed_args.command == "delete":
            if not delete_roster_entity(parsed_args.kind, parsed_args.entity_id):
                raise LookupError(  # noqa: TRY301
                    f"No {parsed_args.kind} entity with id {parsed_args.entity_id}"
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ImportValidationError as exc:
        for error in exc.errors:
            log.error("Invalid import: %s", error)  # noqa: TRY400
        sys.exit(2)
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
