"""UserService — creator records referenced by points and projects."""

from __future__ import annotations

import logging

from pathctl.domain.errors import ErrorCode, PathError
from pathctl.services._helpers import now_iso
from pathctl.services.base import BaseService
from pathctl.services.constraints import ConstraintKind, ConstraintRule, translating
from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import traced

logger = logging.getLogger(__name__)


def _normalize_email(email: str | None) -> str:
    if email is None or not email.strip():
        raise PathError(ErrorCode.NULL_INPUT, fields="email")
    clean = email.strip().lower()
    local, _, domain = clean.partition("@")
    if not local or not domain:
        raise PathError(ErrorCode.INVALID_INPUT, field="email", value=email)
    return clean


class UserService(BaseService):
    """Registers users and resolves them by email."""

    @traced
    async def register(
        self,
        email: str | None,
        *,
        name: str | None = None,
        avatar: str | None = None,
    ) -> ServiceResult:
        """Create a user; a taken email fails with ``USER_ALREADY_EXISTS``."""
        op = "register_user"
        now = now_iso()
        try:
            clean = _normalize_email(email)
            with translating(
                ConstraintRule(
                    ErrorCode.USER_ALREADY_EXISTS,
                    ("users.email",),
                    kind=ConstraintKind.UNIQUE,
                    params={"email": clean},
                ),
            ):
                async with self._store.transaction() as txn:
                    user_id = await txn.users.insert(email=clean, now=now, name=name, avatar=avatar)
        except PathError as exc:
            return self._failure(op, exc)

        logger.info("Registered user %d", user_id)
        return self._success(op, {"user_id": user_id, "email": clean, "created": True})

    @traced
    async def ensure(
        self,
        email: str | None,
        *,
        name: str | None = None,
        avatar: str | None = None,
    ) -> ServiceResult:
        """Get-or-create by email. ``data["created"]`` tells which happened."""
        op = "ensure_user"
        now = now_iso()
        try:
            clean = _normalize_email(email)
            with translating():
                async with self._store.transaction() as txn:
                    existing = await txn.users.find_by_email(clean)
                    if existing is not None:
                        user_id, created = existing["id"], False
                    else:
                        user_id = await txn.users.insert(email=clean, now=now, name=name, avatar=avatar)
                        created = True
        except PathError as exc:
            return self._failure(op, exc)

        return self._success(op, {"user_id": user_id, "email": clean, "created": created})
