"""ISO-8601 helpers.

Every date crossing a module boundary is an ISO string; these helpers are the
only place strings become datetimes. Naive timestamps are read as UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime

from loguru import logger


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string. Returns None for empty or unparseable input."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unparseable date: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_iso(moment: datetime) -> str:
    """Format an aware datetime the way browsers do: UTC, millisecond precision, ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_past(value: str | None, now: datetime) -> bool:
    """True if ``value`` parses and lies strictly before ``now``."""
    parsed = parse_iso(value)
    return parsed is not None and parsed < now
