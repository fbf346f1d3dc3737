"""Utility script to run one reminder evaluation pass against the database."""

from __future__ import annotations

import argparse
import asyncio
from datetime import datetime

from lifestream.application.services import build_services
from lifestream.application.use_cases.reminders import evaluate_reminders
from lifestream.infrastructure.database import SessionLocal, initialize_database
from lifestream.infrastructure.storage import BlobStore, SqlBlobStore
from lifestream.utils import now_in_app_timezone, parse_instant


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the reminder check."""

    parser = argparse.ArgumentParser(
        description="Evaluate the stored events once and deliver the due reminders.",
    )
    parser.add_argument(
        "--at",
        default=None,
        help="ISO-8601 instant to evaluate at (default: now in the app timezone)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list the due events; nothing is stored or delivered.",
    )
    return parser.parse_args(argv)


async def run_check(store: BlobStore, *, now: datetime, dry_run: bool = False) -> list[str]:
    """Run one pass over the events in ``store``; return the due event titles."""

    services = build_services(store)
    services.load()
    if dry_run:
        evaluation = evaluate_reminders(
            services.events.list(), now=now, tolerance=services.scheduler.tolerance
        )
        return [event.title for event in evaluation.due]

    due = services.scheduler.run_once(now)
    await services.scheduler.wait_for_dispatches()
    return [event.title for event in due]


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    now = now_in_app_timezone()
    if args.at:
        parsed = parse_instant(args.at)
        if parsed is None:
            raise SystemExit(f"Invalid --at value: {args.at}")
        now = parsed

    initialize_database()
    titles = asyncio.run(run_check(SqlBlobStore(SessionLocal), now=now, dry_run=args.dry_run))
    if not titles:
        print("No reminders due.")
        return
    print(f"{len(titles)} reminder(s) due at {now.isoformat()}:")
    for title in titles:
        print(f"  - {title}")


if __name__ == "__main__":
    main()
