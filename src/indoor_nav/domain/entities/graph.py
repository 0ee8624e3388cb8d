import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import numpy as np

from indoor_nav.domain.entities.geography import (
    DestinationSection,
    NavigationEdge,
    NavigationNode,
    Neighbor,
    NodeCategory,
)


class NavigationGraph:
    """
    Read-only topology for one session.

    Nodes live in a dense arena: each node id gets an integer index at load time and the search
    works on indices only (coordinate arrays, adjacency lists). Ids are kept at the boundary.

    Invariants:
      • every stored edge references known nodes (others are dropped and counted);
      • the search adjacency skips edges into or out of non-walkable nodes, the raw edge list
        keeps them;
      • at most one default entry node.
    """

    def __init__(
        self,
        nodes: Iterable[NavigationNode],
        edges: Iterable[NavigationEdge] = (),
        sections: Iterable[DestinationSection] = (),
    ):
        index: dict[str, int] = {}
        arena: list[NavigationNode] = []
        for n in nodes:
            if n.id in index:
                arena[index[n.id]] = n  # later record for the same id wins
            else:
                index[n.id] = len(arena)
                arena.append(n)

        self._index = index
        self._arena = tuple(arena)
        self._xs = np.array([n.x for n in arena], dtype=float)
        self._zs = np.array([n.z for n in arena], dtype=float)
        self._walkable = np.array([n.walkable for n in arena], dtype=bool)

        kept: list[NavigationEdge] = []
        out: list[list[tuple[int, float]]] = [[] for _ in arena]
        self.dropped_edges = 0
        for e in edges:
            i, j = index.get(e.from_node), index.get(e.to_node)
            if i is None or j is None:
                self.dropped_edges += 1
                continue
            if e.distance is None:
                a, b = arena[i], arena[j]
                e = NavigationEdge(e.from_node, e.to_node, math.hypot(b.x - a.x, b.z - a.z), e.id)
            kept.append(e)
            if self._walkable[i] and self._walkable[j]:
                out[i].append((j, float(e.distance)))

        self._edges = tuple(kept)
        self._out = tuple(tuple(o) for o in out)
        self._sections = tuple(sections)
        self._sections_by_id = {s.id: s for s in self._sections}
        self.entry_node_id = self._find_entry()

    # ------------- arena access (search hot path) ---------------

    def index_of(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def node_at(self, i: int) -> NavigationNode:
        return self._arena[i]

    def out_edges(self, i: int) -> tuple[tuple[int, float], ...]:
        return self._out[i]

    @property
    def xs(self) -> np.ndarray:
        return self._xs

    @property
    def zs(self) -> np.ndarray:
        return self._zs

    @property
    def walkable_mask(self) -> np.ndarray:
        return self._walkable

    # ------------- id-keyed boundary -----------------------------

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def nodes(self) -> Mapping[str, NavigationNode]:
        return MappingProxyType({n.id: n for n in self._arena})

    @property
    def edges(self) -> tuple[NavigationEdge, ...]:
        return self._edges

    @property
    def adjacency(self) -> Mapping[str, tuple[Neighbor, ...]]:
        return MappingProxyType({n.id: self.neighbors(n.id) for n in self._arena})

    @property
    def sections(self) -> tuple[DestinationSection, ...]:
        return self._sections

    def node(self, node_id: str) -> NavigationNode | None:
        i = self._index.get(node_id)
        return None if i is None else self._arena[i]

    def neighbors(self, node_id: str) -> tuple[Neighbor, ...]:
        i = self._index.get(node_id)
        if i is None:
            return ()
        return tuple(Neighbor(self._arena[j].id, d) for j, d in self._out[i])

    def section(self, section_id: str) -> DestinationSection | None:
        return self._sections_by_id.get(section_id)

    def find_sections(self, query: str = "") -> list[DestinationSection]:
        q = query.strip().lower()
        hits = [s for s in self._sections if q in s.name.lower()]
        return sorted(hits, key=lambda s: s.name.lower())

    def _find_entry(self) -> str | None:
        for n in self._arena:
            if n.category == NodeCategory.ENTRANCE:
                return n.id
        for n in self._arena:
            if n.label and n.label.strip().lower() == "entrance":
                return n.id
        if not self._arena:
            return None
        # closest to the map origin; argmin keeps the first on ties
        return self._arena[int(np.argmin(np.hypot(self._xs, self._zs)))].id
