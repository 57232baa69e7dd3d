from __future__ import annotations

import argparse
import logging

from .api import ApiState
from .bootstrap import configure_logging
from .config import get_settings
from .domain import SchedulingError
from .services import ServiceContext
from .services.http import run_local_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="slotvote command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server for scheduling polls.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    ics_parser = subparsers.add_parser("ics", help="Print the calendar file for an event's current decision.")
    ics_parser.add_argument("event_id")

    return parser


def main() -> None:
    settings = get_settings()
    configure_logging(settings.logging)
    logger = logging.getLogger(__name__)
    parser = build_parser()
    args = parser.parse_args()

    if not settings.supabase.is_configured:
        logger.warning("Supabase is not configured; missing %s", ", ".join(settings.supabase.missing_env_vars))

    state = ApiState(context=ServiceContext(settings=settings))
    if args.command == "api":
        logger.info("slotvote API starting on %s:%d", args.host, args.port)
        run_local_server(host=args.host, port=args.port, state=state)
    elif args.command == "ics":
        try:
            document = state.calendar.export_current_decision(args.event_id)
        except SchedulingError as exc:
            parser.exit(1, f"{exc.message}\n")
        print(document.content)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
