"""Point creation modes as an explicit tagged variant.

A new point is created standalone, hung off one existing point, or inserted
into the edge between two points. Callers pick the mode; the mutation
service never infers it from which fields happen to be present.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from pathctl.domain.ids import parse_id, parse_point_pair


class EdgeDirection(StrEnum):
    """Direction of the single edge created in :class:`SingleEdge` mode."""

    FROM_EXISTING = "from_existing"  # existing -> new
    TO_EXISTING = "to_existing"  # new -> existing


@dataclass(frozen=True)
class Standalone:
    """Create the point with no edges."""

    kind = "standalone"


@dataclass(frozen=True)
class SingleEdge:
    """Create the point and one edge between it and *existing_point_id*."""

    existing_point_id: int
    direction: EdgeDirection

    kind = "single_edge"

    def endpoints(self, new_point_id: int) -> tuple[int, int]:
        """Return ``(origin, destination)`` of the edge to create."""
        if self.direction is EdgeDirection.FROM_EXISTING:
            return self.existing_point_id, new_point_id
        return new_point_id, self.existing_point_id


@dataclass(frozen=True)
class SplitEdge:
    """Create the point in the middle of ``origin_id -> destination_id``."""

    origin_id: int
    destination_id: int

    kind = "split_edge"


CreationMode: TypeAlias = Standalone | SingleEdge | SplitEdge


def mode_from_endpoints(origin: object = None, destination: object = None) -> CreationMode:
    """Build a creation mode for callers holding optional endpoint ids.

    Validates identifiers on the way, so a malformed id fails here before
    any store access.

    Examples:
        >>> mode_from_endpoints()
        Standalone()
        >>> mode_from_endpoints(origin=4)
        SingleEdge(existing_point_id=4, direction=<EdgeDirection.FROM_EXISTING: 'from_existing'>)
    """
    if origin is None and destination is None:
        return Standalone()
    if destination is None:
        return SingleEdge(parse_id(origin, "origin"), EdgeDirection.FROM_EXISTING)
    if origin is None:
        return SingleEdge(parse_id(destination, "destination"), EdgeDirection.TO_EXISTING)
    origin_id, destination_id = parse_point_pair(origin, destination)
    return SplitEdge(origin_id, destination_id)
