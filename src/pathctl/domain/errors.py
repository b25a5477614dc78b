"""Error catalog — stable codes, kinds, and message templates.

Every failure a caller can observe maps to exactly one :class:`ErrorCode`.
Services raise :class:`PathError` inside a transaction (so the transaction
rolls back) and convert it to a ``ServiceError`` at the service boundary.
"""

from __future__ import annotations

from enum import Enum, StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Coarse error taxonomy."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ErrorCode(Enum):
    """Catalog of error codes with their kind and message template.

    Templates use ``str.format`` named placeholders; the placeholder values
    travel with the error as ``detail`` so callers never parse messages.
    """

    # path errors
    BACKWARD_PATH = (
        ErrorKind.CONFLICT,
        "A backward path exists from destination to origin within {depth} edges"
        " - origin: {origin}, destination: {destination}",
    )

    # point errors
    NULL_POINTS = (
        ErrorKind.VALIDATION,
        "Origin and destination must not be null - origin: {origin}, destination: {destination}",
    )
    SAME_POINTS = (
        ErrorKind.VALIDATION,
        "Origin and destination cannot be the same point - point: {point}",
    )
    INVALID_NUMERIC_IDS = (
        ErrorKind.VALIDATION,
        "Point identifiers must be positive integers - origin: {origin}, destination: {destination}",
    )
    NON_EXISTENT_POINTS = (
        ErrorKind.NOT_FOUND,
        "Either one of the points does not exist - points: {points}",
    )
    POINT_NOT_FOUND = (
        ErrorKind.NOT_FOUND,
        "The specified point could not be found - point: {point}",
    )
    POINT_NAME_DUPLICATED = (
        ErrorKind.CONFLICT,
        "The provided title already exists for a point - title: {title}",
    )
    POINT_NOT_DELETABLE = (
        ErrorKind.CONFLICT,
        "The point cannot be deleted - point: {point}, reason: {reason}",
    )

    # edge errors
    EDGE_ALREADY_EXISTS = (
        ErrorKind.CONFLICT,
        "An edge already exists between these points - origin: {origin}, destination: {destination}",
    )

    # project / user errors
    PROJECT_NOT_FOUND = (
        ErrorKind.NOT_FOUND,
        "The specified project could not be found - project: {project}",
    )
    USER_NOT_FOUND = (
        ErrorKind.NOT_FOUND,
        "The specified user could not be found - user: {user}",
    )
    USER_ALREADY_EXISTS = (
        ErrorKind.CONFLICT,
        "A user with this email already exists - email: {email}",
    )

    # generic errors
    NULL_INPUT = (
        ErrorKind.VALIDATION,
        "Required input is missing or blank - fields: {fields}",
    )
    INVALID_INPUT = (
        ErrorKind.VALIDATION,
        "Invalid input - {field}: {value}",
    )
    INTERNAL_SERVER = (
        ErrorKind.INTERNAL,
        "An unexpected error occurred - {cause}",
    )

    def __init__(self, kind: ErrorKind, template: str) -> None:
        self.kind = kind
        self.template = template

    @property
    def code(self) -> str:
        return self.name

    def format(self, **params: Any) -> str:
        """Render the message template with *params*."""
        return self.template.format(**params)


class PathError(Exception):
    """Domain error carrying a stable :class:`ErrorCode`.

    Args:
        code: The catalog entry.
        cause: Original exception for unclassified store failures.
        **params: Values for the message template placeholders.
    """

    def __init__(self, code: ErrorCode, *, cause: BaseException | None = None, **params: Any):
        if code is ErrorCode.INTERNAL_SERVER and "cause" not in params:
            params["cause"] = repr(cause) if cause is not None else "unknown"
        self.code = code
        self.params = params
        self.cause = cause
        super().__init__(code.format(**params))

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    @property
    def message(self) -> str:
        return str(self)

    def detail(self) -> dict[str, Any]:
        """JSON-friendly detail payload for ``ServiceError.detail``."""
        detail: dict[str, Any] = {"kind": str(self.kind)}
        for key, value in self.params.items():
            if isinstance(value, (list, tuple)):
                detail[key] = list(value)
            elif isinstance(value, (int, str, bool, type(None))):
                detail[key] = value
            else:
                detail[key] = str(value)
        return detail
