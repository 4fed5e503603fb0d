"""Process scheduled notifications whose dispatch time has passed.

Meant to be run periodically by an external scheduler such as cron; each
invocation handles the currently due notifications once and exits.
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from notifyhub.application.use_cases.notifications import dispatch_due_notifications
from notifyhub.config import get_settings
from notifyhub.infrastructure.database import SessionLocal, initialize_database
from notifyhub.infrastructure.providers import build_provider_registry
from notifyhub.logging_config import configure_logging


def _parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 timestamp: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the dispatch run."""

    parser = argparse.ArgumentParser(
        description="Dispatch every scheduled notification that is due.",
    )
    parser.add_argument(
        "--now",
        type=_parse_timestamp,
        default=None,
        help="Reference time in ISO 8601 (default: current UTC time). Naive values are UTC.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Dispatch due notifications using the configured providers."""

    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    initialize_database()
    registry = build_provider_registry(settings)

    session = SessionLocal()
    try:
        results = dispatch_due_notifications(session, registry, now=args.now)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while dispatching notifications: {exc}") from exc
    else:
        print(f"Dispatched {len(results)} due notification(s)")
        for result in results:
            notification = result.notification
            print(f"  {notification.id}: {notification.channel} via {notification.provider} -> {notification.status}")
    finally:
        session.close()
        registry.close()


if __name__ == "__main__":
    main()
