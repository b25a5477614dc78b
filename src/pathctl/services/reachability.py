"""ReachabilityValidator — bounded backward-path check.

Adding ``origin -> destination`` closes a cycle exactly when *origin* is
already reachable from *destination*. The check only looks *max_depth* hops
ahead: longer cycles go undetected. ``pathctl check`` reports those.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pathctl.domain.errors import ErrorCode, PathError
from pathctl.services.telemetry import trace_span

if TYPE_CHECKING:
    from pathctl.infrastructure.repositories import EdgeRepository

logger = logging.getLogger(__name__)


class ReachabilityValidator:
    """Reject candidate edges whose reverse path exists within a hop bound."""

    def __init__(self, max_depth: int) -> None:
        if max_depth < 1:
            msg = f"max_depth must be >= 1, got {max_depth}"
            raise ValueError(msg)
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    async def assert_no_cycle(
        self,
        edges: EdgeRepository,
        origin_id: int,
        destination_id: int,
    ) -> None:
        """Raise ``BACKWARD_PATH`` if *destination_id* reaches *origin_id*.

        *edges* must be bound to the caller's transaction so the check sees
        the same snapshot the subsequent insert commits against.
        """
        with trace_span("reachability") as span:
            found = await edges.exists_path_within_depth(
                destination_id, origin_id, self._max_depth
            )
            if span is not None:
                span.annotate("backward_path", found)

        if found:
            logger.info(
                "Backward path %s -> %s within %d hops", destination_id, origin_id, self._max_depth
            )
            raise PathError(
                ErrorCode.BACKWARD_PATH,
                depth=self._max_depth,
                origin=origin_id,
                destination=destination_id,
            )
