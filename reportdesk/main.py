"""ReportDesk command line.

Terminal front end for the report store: submit, status, confirmation,
history, delete, clear and track. Usage: reportdesk [-c config.yaml] <command>.
"""

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from reportdesk.config import AppConfig, load_config
from reportdesk.logging import ReportDeskLogging
from reportdesk.services.lookup import find_by_id
from reportdesk.services.report_repository import GenerationExhaustedError, ReportRepository
from reportdesk.services.session_pointer import get_last_created
from reportdesk.services.store import ReportStore, create_storage
from reportdesk.services.tracking import run_tracking
from reportdesk.services.validation import ReportValidationError, clean_query

LOG = logging.getLogger("reportdesk.main")

NOT_PERSISTED_WARNING = "Warning: the change could not be saved to storage and may be lost."


def build_repository(config: AppConfig) -> ReportRepository:
    """Wire storage backend, report store and repository from config."""
    storage = create_storage(config.storage)
    store = ReportStore(
        storage,
        reports_key=config.storage.reports_key,
        pointer_key=config.storage.pointer_key,
    )
    return ReportRepository(store, id_config=config.report_id)


def build_parser() -> argparse.ArgumentParser:
    """CLI parser with global options and one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="reportdesk",
        description="ReportDesk - submit and track citizen service reports",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    sub = parser.add_subparsers(dest="command")

    submit = sub.add_parser("submit", help="Submit a new report")
    submit.add_argument("--name", default="", help="Your name")
    submit.add_argument("--address", default="", help="Where the problem is")
    submit.add_argument("--issue", default="", help="What the problem is")

    status = sub.add_parser("status", help="Look up a report by id")
    status.add_argument("report_id", nargs="?", default="", help="Report id, e.g. RPT1234")

    sub.add_parser("confirmation", help="Show the report submitted last")
    sub.add_parser("history", help="List all reports, newest first")

    delete = sub.add_parser("delete", help="Delete one report")
    delete.add_argument("report_id", help="Report id to delete (exact)")
    delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    clear = sub.add_parser("clear", help="Delete all reports")
    clear.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    track = sub.add_parser("track", help="Simulate pickup tracking")
    track.add_argument("--interval", type=float, default=None, help="Seconds between steps")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse global options and the subcommand."""
    return build_parser().parse_args(argv)


def confirm(prompt: str, ask: Callable[[str], str] = input) -> bool:
    """Ask a yes/no question; only y/yes confirms."""
    try:
        answer = ask(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _warn_if_not_persisted(repository: ReportRepository) -> None:
    if not repository.last_save_ok:
        print(NOT_PERSISTED_WARNING, file=sys.stderr)


def cmd_submit(repository: ReportRepository, args: argparse.Namespace) -> int:
    try:
        report = repository.create(args.name, args.address, args.issue)
    except ReportValidationError as e:
        print(e, file=sys.stderr)
        return 2
    _warn_if_not_persisted(repository)
    print("Report submitted.")
    print(report.to_text(), end="")
    return 0


def cmd_status(repository: ReportRepository, args: argparse.Namespace) -> int:
    query = clean_query(args.report_id)
    if query is None:
        print("Please enter a Report ID.")
        return 2
    report = find_by_id(repository, query)
    if report is None:
        print(f"No report found for {query}.")
        return 0
    print(report.to_text(), end="")
    return 0


def cmd_confirmation(repository: ReportRepository, args: argparse.Namespace) -> int:
    report = get_last_created(repository)
    if report is None:
        print("No recent report found.")
        return 0
    print(report.to_text(), end="")
    return 0


def cmd_history(repository: ReportRepository, args: argparse.Namespace) -> int:
    reports = repository.list_reports()
    if not reports:
        print("No reports yet.")
        return 0
    cards = [r.to_text() for r in reversed(reports)]
    print("\n".join(cards), end="")
    return 0


def cmd_delete(
    repository: ReportRepository,
    args: argparse.Namespace,
    ask: Callable[[str], str] = input,
) -> int:
    if not args.yes and not confirm(f"Delete report {args.report_id}?", ask):
        print("Cancelled.")
        return 0
    if not repository.delete_by_id(args.report_id):
        print(f"No report found for {args.report_id}.")
        return 1
    _warn_if_not_persisted(repository)
    print(f"Deleted report {args.report_id}.")
    return 0


def cmd_clear(
    repository: ReportRepository,
    args: argparse.Namespace,
    ask: Callable[[str], str] = input,
) -> int:
    if not args.yes and not confirm("Are you sure you want to delete all saved reports?", ask):
        print("Cancelled.")
        return 0
    repository.clear_all()
    _warn_if_not_persisted(repository)
    remaining = len(repository.list_reports())
    print(f"All reports cleared ({remaining} remaining).")
    return 0


def cmd_track(config: AppConfig, args: argparse.Namespace) -> int:
    interval = args.interval if args.interval is not None else config.tracking.interval_seconds
    run_tracking(lambda line: print(line, flush=True), interval=interval)
    return 0


COMMANDS = {
    "submit": cmd_submit,
    "status": cmd_status,
    "confirmation": cmd_confirmation,
    "history": cmd_history,
    "delete": cmd_delete,
    "clear": cmd_clear,
}


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, set up logging, dispatch the subcommand."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")

    config = load_config(config_path)
    ReportDeskLogging(config.logging).setup()

    if args.check:
        print("Config OK:", config.storage.backend, config.storage.data_dir)
        return 0

    if args.command is None:
        build_parser().print_help()
        return 2

    if args.command == "track":
        return cmd_track(config, args)

    repository = build_repository(config)
    try:
        return COMMANDS[args.command](repository, args)
    except GenerationExhaustedError as e:
        LOG.error("Cannot create report: %s", e)
        print(f"Cannot create report: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        LOG.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
