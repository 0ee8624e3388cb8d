import pytest

from indoor_nav.domain.entities.geography import (
    DestinationSection,
    NavigationEdge,
    NavigationNode,
    NodeCategory,
)
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.sim.clock import ManualClock


def _make_graph(coords, pairs, *, sections=(), bidirectional=True, walkable=None, categories=None):
    """coords: {id: (x, z)}; pairs: [(a, b)] or [(a, b, w)] with optional explicit weight."""
    walkable = walkable or {}
    categories = categories or {}
    nodes = [
        NavigationNode(
            id=i,
            x=float(x),
            z=float(z),
            walkable=walkable.get(i, True),
            label=i,
            category=categories.get(i, NodeCategory.NORMAL),
        )
        for i, (x, z) in coords.items()
    ]
    edges = []
    for p in pairs:
        a, b = p[0], p[1]
        w = p[2] if len(p) > 2 else None
        edges.append(NavigationEdge(a, b, w))
        if bidirectional:
            edges.append(NavigationEdge(b, a, w))
    secs = [DestinationSection(s_id, name, node_id) for s_id, name, node_id in sections]
    return NavigationGraph(nodes, edges, secs)


@pytest.fixture
def graph_factory():
    return _make_graph


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def shoes_graph() -> NavigationGraph:
    # A(0,0) entrance -> B(0,5) -> C(5,5) "Shoes"
    return _make_graph(
        {"A": (0, 0), "B": (0, 5), "C": (5, 5)},
        [("A", "B"), ("B", "C")],
        sections=[("shoes", "Shoes", "C")],
        categories={"A": NodeCategory.ENTRANCE, "C": NodeCategory.DESTINATION},
    )


@pytest.fixture
def line_graph() -> NavigationGraph:
    # five waypoints 2 m apart along x, destination at the far end
    coords = {f"w{i}": (2.0 * i, 0.0) for i in range(5)}
    pairs = [(f"w{i}", f"w{i + 1}") for i in range(4)]
    return _make_graph(coords, pairs, sections=[("end", "End", "w4")])
