import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from indoor_nav.domain.entities.geography import NavigationNode
from indoor_nav.domain.entities.graph import NavigationGraph

log = logging.getLogger(__name__)

PathStatus = Literal[
    "ok", "same_node", "unknown_node", "unreachable", "iteration_cap", "broken_chain"
]

# safety valve: dequeues allowed per node before the search gives up
ITERATIONS_PER_NODE = 10


@dataclass(frozen=True)
class PathResult:
    waypoints: tuple[NavigationNode, ...] = field(default_factory=tuple)
    total_distance: float = 0.0
    found: bool = False
    status: PathStatus = "unreachable"

    @classmethod
    def not_found(cls, status: PathStatus) -> "PathResult":
        return cls((), 0.0, False, status)

    @property
    def node_ids(self) -> list[str]:
        return [n.id for n in self.waypoints]


def find_path(graph: NavigationGraph, start_id: str, goal_id: str) -> PathResult:
    """
    A* over the graph arena with a straight-line heuristic.

    Priority queue entries are (g + h, seq, index); seq is the insertion counter so equal
    priorities pop in insertion order. Stale entries for already finalized nodes are skipped.
    """
    s, g_idx = graph.index_of(start_id), graph.index_of(goal_id)
    if s is None or g_idx is None:
        return PathResult.not_found("unknown_node")
    if s == g_idx:
        return PathResult((graph.node_at(s),), 0.0, True, "same_node")

    gx, gz = graph.xs[g_idx], graph.zs[g_idx]

    def h(i: int) -> float:
        return math.hypot(gx - graph.xs[i], gz - graph.zs[i])

    n = len(graph)
    g_score = [math.inf] * n
    came_from = [-1] * n
    visited = [False] * n

    g_score[s] = 0.0
    seq = 0
    q: list[tuple[float, int, int]] = [(h(s), seq, s)]
    max_iterations = ITERATIONS_PER_NODE * n
    iterations = 0

    while q:
        iterations += 1
        if iterations > max_iterations:
            log.error(
                "astar iteration cap hit (%d) searching %s -> %s", max_iterations, start_id, goal_id
            )
            return PathResult.not_found("iteration_cap")

        _, _, cur = heapq.heappop(q)
        if cur == g_idx:
            return _reconstruct(graph, came_from, s, g_idx, g_score[g_idx])
        if visited[cur]:
            continue
        visited[cur] = True

        g_cur = g_score[cur]
        for nxt, w in graph.out_edges(cur):
            if visited[nxt]:
                continue
            tentative = g_cur + w
            if tentative < g_score[nxt]:
                came_from[nxt] = cur
                g_score[nxt] = tentative
                seq += 1
                heapq.heappush(q, (tentative + h(nxt), seq, nxt))

    return PathResult.not_found("unreachable")


def _reconstruct(
    graph: NavigationGraph, came_from: list[int], s: int, goal: int, cost: float
) -> PathResult:
    chain = [goal]
    cur = goal
    while cur != s:
        cur = came_from[cur]
        if cur < 0:
            log.error(
                "broken predecessor chain reconstructing %s -> %s",
                graph.node_at(s).id,
                graph.node_at(goal).id,
            )
            return PathResult.not_found("broken_chain")
        chain.append(cur)
    chain.reverse()
    return PathResult(tuple(graph.node_at(i) for i in chain), float(cost), True, "ok")


def nearest_walkable_node(graph: NavigationGraph, x: float, z: float) -> NavigationNode | None:
    """Full scan for the closest walkable node; first one wins on ties."""
    if len(graph) == 0:
        return None
    d = np.where(graph.walkable_mask, np.hypot(graph.xs - x, graph.zs - z), np.inf)
    if not np.isfinite(d).any():
        return None
    return graph.node_at(int(np.argmin(d)))
