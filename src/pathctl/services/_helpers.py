"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as ISO 8601 with microseconds.

    Fixed width, so string comparison orders timestamps correctly.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds")


def parse_iso(value: str) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def normalize_since(value: str | datetime | None) -> str | None:
    """Normalize an ``updated_after`` cursor to the stored timestamp format."""
    if value is None:
        return None
    parsed = value if isinstance(value, datetime) else parse_iso(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat(timespec="microseconds")
