from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import orjson

from .core.store import ScheduleStore
from .core.timegrid import format_minutes, get_clock_mode, set_clock_mode
from .domain.enums import ClockMode
from .errors import ShareError
from .logging import configure_logging
from .remote.client import ShareClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Weekly schedule builder command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Start the share backend.")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    show_parser = subparsers.add_parser("show", help="Print the saved schedule.")
    show_parser.add_argument("--json", action="store_true", help="Dump the raw document instead of a summary.")

    subparsers.add_parser("share", help="Upload the saved schedule and print its link.")

    load_parser = subparsers.add_parser("load", help="Replace the saved schedule with a shared one or a JSON file.")
    load_parser.add_argument("source", help="Share id or path to a JSON document.")

    subparsers.add_parser("reset", help="Restore the default schedule.")

    clock_parser = subparsers.add_parser("clock", help="Show or set the 12/24 hour display mode.")
    clock_parser.add_argument("mode", nargs="?", choices=[mode.value for mode in ClockMode])

    return parser


def describe(store: ScheduleStore) -> List[str]:
    """Human-readable summary of the saved schedule, one block per line."""

    schedule = store.state
    mode = get_clock_mode()
    lines = [schedule.meta.title, store.meta_line(), "Days: " + ", ".join(store.visible_day_labels())]
    visible = set(store.visible_day_indices())
    for block in sorted(schedule.items, key=lambda item: (item.day_index, item.start)):
        if block.day_index not in visible:
            continue
        label = schedule.meta.days[block.day_index]
        lines.append(
            f"  {label} {format_minutes(block.start, mode)}-{format_minutes(block.end, mode)}  {block.text}"
        )
    return lines


def _load_source(source: str) -> dict:
    path = Path(source)
    if path.suffix == ".json" or path.is_file():
        return orjson.loads(path.read_bytes())
    with ShareClient() as client:
        return client.load(source)


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    logger.info("Schedule builder CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        from .remote.server import run_share_server

        run_share_server(host=args.host, port=args.port)
        return 0

    if args.command == "clock":
        if args.mode:
            set_clock_mode(args.mode)
        print(f"{get_clock_mode().value}h")
        return 0

    store = ScheduleStore()
    if args.command == "show":
        if args.json:
            print(orjson.dumps(store.state.to_record(), option=orjson.OPT_INDENT_2).decode())
        else:
            print("\n".join(describe(store)))
    elif args.command == "share":
        try:
            with ShareClient() as client:
                receipt = client.share(store.state)
        except ShareError as exc:
            print(f"Share failed: {exc}", file=sys.stderr)
            return 1
        print(receipt.url)
    elif args.command == "load":
        try:
            document = _load_source(args.source)
        except ShareError as exc:
            print(f"Load failed: {exc}", file=sys.stderr)
            return 1
        except (OSError, orjson.JSONDecodeError) as exc:
            print(f"Could not read {args.source}: {exc}", file=sys.stderr)
            return 1
        if not store.replace_all(document):
            print("Not a schedule document.", file=sys.stderr)
            return 1
        print(f"Loaded {len(store.state.items)} block(s).")
    elif args.command == "reset":
        store.reset()
        print("Schedule reset.")
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
