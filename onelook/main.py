import argparse
import sys
from typing import List, Optional

from onelook.assignments import query
from onelook.assignments.models import ALL_SOURCES, Assignment, Source, parse_due
from onelook.core.app import OneLookApp, setup_basic_logging

URGENCY_MARKERS = {
    query.CRITICAL: "!!",
    query.WARNING: "! ",
    query.NORMAL: "  ",
}


def format_row(item: Assignment, days: int, band: str) -> str:
    due = parse_due(item.due_iso).strftime("%m/%d %I:%M %p")
    line = (
        f"{URGENCY_MARKERS[band]} {query.describe_days_left(days):<14} {due}  "
        f"{item.title}  [{item.course} | {Source.parse(item.source).value}]  {item.id}"
    )
    if item.link:
        line += f"\n{'':<18}{item.link}"
    return line


def cmd_list(app: OneLookApp, args: argparse.Namespace) -> int:
    defaults = app.view_defaults
    next7_only = defaults["next7_only"] if args.next7 is None else args.next7
    source = args.source or defaults["source"]
    rows = app.board.view(args.query or "", source, next7_only)
    if not rows:
        print("No items here yet. Use 'onelook add' to create one.")
        return 0
    for item in rows:
        days = app.board.days_left(item)
        print(format_row(item, days, query.urgency(days, **app.urgency_thresholds)))
    return 0


def cmd_add(app: OneLookApp, args: argparse.Namespace) -> int:
    item = app.board.create(args.title, args.course, args.source, args.due, args.link)
    if item is None:
        print("Not added: title and course are required, and the due time must be a valid date/time.",
              file=sys.stderr)
        return 1
    print(f"Added {item.id}: {item.title} due {item.due_iso}")
    return 0


def cmd_remove(app: OneLookApp, args: argparse.Namespace) -> int:
    if app.board.remove(args.id):
        print(f"Removed {args.id}")
        return 0
    print(f"No assignment with id {args.id}", file=sys.stderr)
    return 1


def cmd_sources(app: OneLookApp, args: argparse.Namespace) -> int:
    for label in Source.labels():
        print(label)
    return 0


def cmd_reset(app: OneLookApp, args: argparse.Namespace) -> int:
    items = app.board.reset()
    print(f"Stored assignments cleared; {len(items)} example(s) restored")
    return 0


def cmd_serve(app: OneLookApp, args: argparse.Namespace) -> int:
    from onelook.api.server import run_api_server

    app.config.start_watching()
    run_api_server(app, host=args.host, port=args.port)
    return 0


def _source_choice(value: str) -> str:
    if value.strip().lower() == ALL_SOURCES.lower():
        return ALL_SOURCES
    try:
        return Source.parse(value).value
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid source {value!r} (choose from {', '.join([ALL_SOURCES] + Source.labels())})"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="onelook", description="OneLook: unified assignment deadlines")
    parser.add_argument("--config", help="Path to config file (default: ~/.onelook/config.yaml)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show assignments, soonest first")
    list_parser.add_argument("-q", "--query", help="Search title, course, source, link")
    list_parser.add_argument("--source", type=_source_choice, help="Canvas, Gradescope, Piazza, Other or All")
    window = list_parser.add_mutually_exclusive_group()
    window.add_argument("--next7", dest="next7", action="store_true", default=None,
                        help="Only items due within the next 7 days")
    window.add_argument("--all", dest="next7", action="store_false", help="Include items due later")
    list_parser.set_defaults(func=cmd_list)

    add_parser = subparsers.add_parser("add", help="Add an assignment")
    add_parser.add_argument("--title", required=True)
    add_parser.add_argument("--course", required=True)
    add_parser.add_argument("--source", type=_source_choice, default=Source.CANVAS.value)
    add_parser.add_argument("--due", required=True, help="Local due time, e.g. '2025-01-03 10:00'")
    add_parser.add_argument("--link")
    add_parser.set_defaults(func=cmd_add)

    remove_parser = subparsers.add_parser("remove", help="Remove an assignment by id")
    remove_parser.add_argument("id")
    remove_parser.set_defaults(func=cmd_remove)

    sources_parser = subparsers.add_parser("sources", help="List source labels")
    sources_parser.set_defaults(func=cmd_sources)

    reset_parser = subparsers.add_parser("reset", help="Discard stored assignments and restore the examples")
    reset_parser.set_defaults(func=cmd_reset)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_basic_logging()
    args = build_parser().parse_args(argv)

    app = OneLookApp(config_path=args.config)
    app.setup_logging()
    try:
        return args.func(app, args)
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
