"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, date, datetime


def now_utc() -> datetime:
    """Current UTC time as a naive datetime, second precision (front-matter dates)."""
    return datetime.now(UTC).replace(tzinfo=None, microsecond=0)


def format_fm_date(value: datetime) -> str:
    """Render a datetime the way posts carry it: ``YYYY-MM-DD HH:MM:SS``."""
    return value.strftime("%Y-%m-%d %H:%M:%S")


def parse_cli_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` or an ISO datetime given on the command line.

    Raises:
        ValueError: The value is neither.
    """
    text = value.strip()
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        pass
    parsed = date.fromisoformat(text)
    return datetime(parsed.year, parsed.month, parsed.day)
