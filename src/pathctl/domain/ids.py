"""Identifier and title validation.

Runs before any store access. Identifiers are positive integers assigned by
the store; callers may hand them over as ints or numeric strings.
"""

from __future__ import annotations

import re

from pathctl.domain.errors import ErrorCode, PathError

_NUMERIC = re.compile(r"^\s*\d+\s*$")

# SQLite INTEGER PRIMARY KEY upper bound
MAX_ID = 2**63 - 1


def _coerce(value: object) -> int | None:
    """Return *value* as a positive int, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _NUMERIC.match(value):
        number = int(value)
    else:
        return None
    if number < 1 or number > MAX_ID:
        return None
    return number


def parse_id(value: object, field: str) -> int:
    """Parse a single identifier.

    Raises:
        PathError: ``NULL_INPUT`` if missing, ``INVALID_INPUT`` if not numeric.
    """
    if value is None:
        raise PathError(ErrorCode.NULL_INPUT, fields=field)
    number = _coerce(value)
    if number is None:
        raise PathError(ErrorCode.INVALID_INPUT, field=field, value=value)
    return number


def parse_point_pair(origin: object, destination: object) -> tuple[int, int]:
    """Parse and validate an (origin, destination) pair.

    Examples:
        >>> parse_point_pair("1", 2)
        (1, 2)
    """
    if origin is None or destination is None:
        raise PathError(ErrorCode.NULL_POINTS, origin=origin, destination=destination)

    origin_id = _coerce(origin)
    destination_id = _coerce(destination)
    if origin_id is None or destination_id is None:
        raise PathError(ErrorCode.INVALID_NUMERIC_IDS, origin=origin, destination=destination)

    if origin_id == destination_id:
        raise PathError(ErrorCode.SAME_POINTS, point=origin_id)
    return origin_id, destination_id


def normalize_title(title: str | None) -> str:
    """Trim a point title, rejecting missing or blank titles."""
    if title is None or not title.strip():
        raise PathError(ErrorCode.NULL_INPUT, fields="title")
    return title.strip()


def normalize_summary(summary: str | None) -> str | None:
    """Trim a free-text summary; blank collapses to None."""
    if summary is None:
        return None
    return summary.strip() or None
