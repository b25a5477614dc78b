"""CheckService — read-only integrity audit of the point graph.

The mutation path only rejects cycles up to ``[graph] max_depth`` hops, and
concurrent writers in separate processes are not serialised. This audit
walks the full NetworkX graph and reports what those checks can miss.

Categories: graph health (cycles, isolated points) and membership
(points in no project).
"""

from __future__ import annotations

from itertools import islice
from typing import Any

import networkx as nx
from sqlalchemy import select

from pathctl.domain.errors import PathError
from pathctl.infrastructure.database.schema import project_points
from pathctl.services.base import BaseService
from pathctl.services.constraints import translating
from pathctl.services.result import ServiceResult
from pathctl.services.telemetry import trace_span, traced

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_GRAPH = "graph_health"
CAT_MEMBERSHIP = "membership"

# Enumerating cycles is exponential in the worst case.
MAX_REPORTED_CYCLES = 100


class CheckService(BaseService):
    """Handles graph integrity checking."""

    @traced
    async def check(self) -> ServiceResult:
        """Report integrity issues without modifying anything."""
        issues: list[dict[str, Any]] = []
        try:
            with translating():
                graph = await self._store.graph.graph()
                with trace_span("graph_health"):
                    issues.extend(self._check_cycles(graph))
                    issues.extend(self._check_isolated(graph))
                with trace_span("membership"):
                    issues.extend(await self._check_membership(graph))
        except PathError as exc:
            return self._failure("check", exc)

        return ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": issues,
                "count": len(issues),
                "is_dag": nx.is_directed_acyclic_graph(graph),
                "points": graph.number_of_nodes(),
                "edges": graph.number_of_edges(),
                "max_depth": self.max_depth,
            },
        )

    def _check_cycles(self, graph: nx.DiGraph) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        bound = self.max_depth + 1
        for cycle in islice(nx.simple_cycles(graph), MAX_REPORTED_CYCLES):
            # A cycle of n edges is caught by the bounded check iff n <= max_depth + 1.
            beyond_bound = len(cycle) > bound
            path = " -> ".join(str(p) for p in [*cycle, cycle[0]])
            issues.append(
                {
                    "category": CAT_GRAPH,
                    "severity": SEVERITY_ERROR,
                    "point_ids": list(cycle),
                    "length": len(cycle),
                    "beyond_bound": beyond_bound,
                    "message": f"Cycle of {len(cycle)} edges: {path}",
                }
            )
        return issues

    def _check_isolated(self, graph: nx.DiGraph) -> list[dict[str, Any]]:
        return [
            {
                "category": CAT_GRAPH,
                "severity": SEVERITY_WARNING,
                "point_id": node,
                "message": f"Isolated point with zero connections: {node}",
            }
            for node in sorted(nx.isolates(graph))
        ]

    async def _check_membership(self, graph: nx.DiGraph) -> list[dict[str, Any]]:
        async with self._store.read() as txn:
            rows = await txn.conn.execute(select(project_points.c.point_id).distinct())
            members = {row.point_id for row in rows}
        return [
            {
                "category": CAT_MEMBERSHIP,
                "severity": SEVERITY_WARNING,
                "point_id": node,
                "message": f"Point belongs to no project: {node}",
            }
            for node in sorted(graph.nodes)
            if node not in members
        ]
