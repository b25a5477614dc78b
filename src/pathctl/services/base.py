"""BaseService — abstract foundation for all pathctl services.

Every service receives a :class:`GraphStore` at construction time. The store
provides transactional access to the database and the graph engine.
Services own their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pathctl.domain.errors import ErrorCode, PathError
from pathctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathctl.infrastructure.store import GraphStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class GraphMutationService(BaseService):
            async def connect(self, origin, destination) -> ServiceResult:
                try:
                    async with self._store.transaction() as txn:
                        ...
                except PathError as exc:
                    return self._failure("connect", exc)
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    @property
    def max_depth(self) -> int:
        """Hop bound for the backward-path check (``[graph] max_depth``)."""
        return self._store.settings.graph.max_depth

    @staticmethod
    def _failure(op: str, exc: PathError, *, warnings: list[str] | None = None) -> ServiceResult:
        """Convert a domain error into a failed :class:`ServiceResult`."""
        if exc.code is ErrorCode.INTERNAL_SERVER:
            logger.error("%s failed: %s", op, exc.message, exc_info=exc.cause)
        else:
            logger.debug("%s rejected with %s", op, exc.code.code)
        return ServiceResult(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError.from_path_error(exc),
        )

    @staticmethod
    def _success(op: str, data: dict[str, Any], *, warnings: list[str] | None = None) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [])
