"""Point lifecycle.

A point with any incident edge cannot be deleted; it must first be
disconnected back to the isolated state.
"""

from __future__ import annotations

from enum import StrEnum


class PointState(StrEnum):
    ABSENT = "absent"
    ISOLATED = "isolated"  # exists, no edges
    CONNECTED = "connected"  # exists, has edges


POINT_TRANSITIONS: dict[str, list[str]] = {
    "absent": ["isolated"],
    "isolated": ["connected", "absent"],
    "connected": ["connected", "isolated"],
}


def compute_point_state(exists: bool, degree: int) -> PointState:
    """Derive the lifecycle state from existence and incident edge count."""
    if not exists:
        return PointState.ABSENT
    if degree > 0:
        return PointState.CONNECTED
    return PointState.ISOLATED


def can_delete(state: PointState) -> bool:
    return "absent" in POINT_TRANSITIONS.get(state, [])
