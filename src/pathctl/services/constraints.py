"""ConstraintErrorTranslator — storage failures to stable domain errors.

Each call site supplies an ordered list of :class:`ConstraintRule`. A rule
matches when every keyword occurs in the driver's message
(case-insensitive) and, if the rule names a :class:`ConstraintKind`, the
failure was classified as that kind. The first match wins; no match becomes
``INTERNAL_SERVER`` carrying the original exception as its cause.

Classification prefers the driver's structured error name
(``sqlite3.Error.sqlite_errorname``) and falls back to message text only
when the driver does not expose one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from pathctl.domain.errors import ErrorCode, PathError

logger = logging.getLogger(__name__)


class ConstraintKind(StrEnum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    NOT_NULL = "not_null"
    CHECK = "check"
    OTHER = "other"


_ERRORNAME_KINDS: dict[str, ConstraintKind] = {
    "SQLITE_CONSTRAINT_UNIQUE": ConstraintKind.UNIQUE,
    "SQLITE_CONSTRAINT_PRIMARYKEY": ConstraintKind.UNIQUE,
    "SQLITE_CONSTRAINT_FOREIGNKEY": ConstraintKind.FOREIGN_KEY,
    "SQLITE_CONSTRAINT_NOTNULL": ConstraintKind.NOT_NULL,
    "SQLITE_CONSTRAINT_CHECK": ConstraintKind.CHECK,
}

_MESSAGE_KINDS: tuple[tuple[str, ConstraintKind], ...] = (
    ("unique constraint", ConstraintKind.UNIQUE),
    ("foreign key constraint", ConstraintKind.FOREIGN_KEY),
    ("not null constraint", ConstraintKind.NOT_NULL),
    ("check constraint", ConstraintKind.CHECK),
)


def _driver_error(exc: BaseException) -> BaseException:
    """The DBAPI exception wrapped by SQLAlchemy, or *exc* itself."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return exc.orig
    return exc


def error_message(exc: BaseException) -> str:
    """Driver message text used for keyword matching."""
    return str(_driver_error(exc))


def classify(exc: BaseException) -> ConstraintKind:
    """Classify a storage failure by constraint kind."""
    orig = _driver_error(exc)
    errorname = getattr(orig, "sqlite_errorname", None)
    if errorname in _ERRORNAME_KINDS:
        return _ERRORNAME_KINDS[errorname]

    message = str(orig).lower()
    for needle, kind in _MESSAGE_KINDS:
        if needle in message:
            return kind
    return ConstraintKind.OTHER


@dataclass(frozen=True)
class ConstraintRule:
    """One translation rule: required keywords (and kind) → domain error.

    Example::

        ConstraintRule(
            ErrorCode.POINT_NAME_DUPLICATED,
            ("points.title",),
            kind=ConstraintKind.UNIQUE,
            params={"title": title},
        )
    """

    code: ErrorCode
    keywords: tuple[str, ...] = ()
    kind: ConstraintKind | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def matches(self, kind: ConstraintKind, message: str) -> bool:
        if self.kind is not None and self.kind is not kind:
            return False
        lowered = message.lower()
        return all(keyword.lower() in lowered for keyword in self.keywords)

    def to_error(self, cause: BaseException) -> PathError:
        return PathError(self.code, cause=cause, **self.params)


class ConstraintErrorTranslator:
    """Ordered rule list applied to one store interaction."""

    def __init__(self, *rules: ConstraintRule) -> None:
        self._rules = rules

    def translate(self, exc: BaseException) -> PathError:
        """Map *exc* to a :class:`PathError`; never re-queries the store."""
        if isinstance(exc, PathError):
            return exc

        kind = classify(exc)
        message = error_message(exc)
        for rule in self._rules:
            if rule.matches(kind, message):
                logger.debug("Translated %s failure to %s: %s", kind, rule.code.code, message)
                return rule.to_error(exc)

        logger.warning("Unclassified store failure (%s): %s", kind, message)
        return PathError(ErrorCode.INTERNAL_SERVER, cause=exc)


@contextmanager
def translating(*rules: ConstraintRule) -> Iterator[None]:
    """Translate store failures raised inside the block.

    Usable around ``await`` expressions::

        with translating(ConstraintRule(ErrorCode.EDGE_ALREADY_EXISTS, ...)):
            await txn.edges.insert(origin_id, destination_id, now=now)
    """
    try:
        yield
    except PathError:
        raise
    except (SQLAlchemyError, OSError) as exc:
        raise ConstraintErrorTranslator(*rules).translate(exc) from exc
