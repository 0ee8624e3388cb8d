# tests/domain/test_pathfinder.py
import itertools
import math

import numpy as np
import pytest

from indoor_nav.domain.entities.geography import NavigationEdge, NavigationNode
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.domain.routing import astar
from indoor_nav.domain.routing.astar import PathResult, find_path, nearest_walkable_node
from indoor_nav.domain.routing.geometry import (
    distance_between,
    point_to_segment_distance,
    polyline_length,
)


# ---- brute-force reference ----
def _brute_force_cost(g: NavigationGraph, start: str, goal: str) -> float:
    best = math.inf

    def dfs(u: str, seen: set[str], cost: float):
        nonlocal best
        if cost >= best:
            return
        if u == goal:
            best = cost
            return
        for nb in g.neighbors(u):
            if nb.node_id not in seen:
                seen.add(nb.node_id)
                dfs(nb.node_id, seen, cost + nb.distance)
                seen.discard(nb.node_id)

    dfs(start, {start}, 0.0)
    return best


def _random_graph(rng: np.random.Generator, n: int, p: float) -> NavigationGraph:
    pts = rng.uniform(0.0, 20.0, size=(n, 2))
    nodes = [NavigationNode(f"n{i}", float(x), float(z)) for i, (x, z) in enumerate(pts)]
    edges = []
    for i, j in itertools.permutations(range(n), 2):
        if rng.random() < p:
            # weights never below straight-line length, so the heuristic stays admissible
            d = math.hypot(*(pts[i] - pts[j])) * float(rng.uniform(1.0, 1.5))
            edges.append(NavigationEdge(f"n{i}", f"n{j}", d))
    return NavigationGraph(nodes, edges)


def _path_cost(g: NavigationGraph, ids: list[str]) -> float:
    total = 0.0
    for a, b in zip(ids, ids[1:]):
        total += min(nb.distance for nb in g.neighbors(a) if nb.node_id == b)
    return total


def test_matches_brute_force_on_random_small_graphs():
    rng = np.random.default_rng(7)
    checked = 0
    for _ in range(40):
        n = int(rng.integers(2, 11))
        g = _random_graph(rng, n, p=0.3)
        start, goal = rng.choice(n, size=2, replace=False)
        s, t = f"n{start}", f"n{goal}"
        expected = _brute_force_cost(g, s, t)
        res = find_path(g, s, t)
        if math.isinf(expected):
            assert not res.found
            assert res.waypoints == ()
            continue
        checked += 1
        assert res.found and res.status == "ok"
        assert res.total_distance == pytest.approx(expected)
        ids = res.node_ids
        assert ids[0] == s and ids[-1] == t
        assert _path_cost(g, ids) == pytest.approx(res.total_distance)
    assert checked > 0


def test_prefers_two_cheap_hops_over_expensive_direct_edge(graph_factory):
    g = graph_factory(
        {"a": (0, 0), "b": (1, 0), "c": (2, 0)},
        [("a", "b"), ("b", "c"), ("a", "c", 10.0)],
    )
    res = find_path(g, "a", "c")
    assert res.node_ids == ["a", "b", "c"]
    assert res.total_distance == pytest.approx(2.0)


def test_triangle_inequality_on_fully_connected_triples():
    rng = np.random.default_rng(11)
    for _ in range(25):
        pts = rng.uniform(-10.0, 10.0, size=(3, 2))
        nodes = [NavigationNode(k, float(x), float(z)) for k, (x, z) in zip("abc", pts)]
        edges = [
            NavigationEdge(u, v, float(rng.uniform(1.0, 2.0)) * math.hypot(*(pts[i] - pts[j])))
            for (i, u), (j, v) in itertools.permutations(enumerate("abc"), 2)
        ]
        g = NavigationGraph(nodes, edges)
        ac = find_path(g, "a", "c").total_distance
        ab = find_path(g, "a", "b").total_distance
        bc = find_path(g, "b", "c").total_distance
        assert ac <= ab + bc + 1e-9


def test_shoes_route(shoes_graph):
    res = find_path(shoes_graph, "A", "C")
    assert res.node_ids == ["A", "B", "C"]
    assert res.total_distance == pytest.approx(10.0)


def test_start_equals_goal_is_single_node_route(shoes_graph):
    res = find_path(shoes_graph, "B", "B")
    assert res.found
    assert res.node_ids == ["B"]
    assert res.total_distance == 0.0


def test_disconnected_goal_is_not_found(graph_factory):
    g = graph_factory({"a": (0, 0), "b": (1, 0), "island": (5, 5)}, [("a", "b")])
    res = find_path(g, "a", "island")
    assert res == PathResult.not_found("unreachable")
    assert res.waypoints == () and res.total_distance == 0.0 and not res.found


def test_one_way_edges_are_respected(graph_factory):
    g = graph_factory({"a": (0, 0), "b": (1, 0)}, [("a", "b")], bidirectional=False)
    assert find_path(g, "a", "b").found
    assert not find_path(g, "b", "a").found


def test_unknown_endpoint(shoes_graph):
    assert find_path(shoes_graph, "A", "nowhere").status == "unknown_node"
    assert find_path(shoes_graph, "nowhere", "A").status == "unknown_node"


def test_route_never_passes_through_non_walkable_node(graph_factory):
    g = graph_factory(
        {"a": (0, 0), "blocked": (1, 0), "b": (2, 0), "detour": (1, 3)},
        [("a", "blocked"), ("blocked", "b"), ("a", "detour"), ("detour", "b")],
        walkable={"blocked": False},
    )
    res = find_path(g, "a", "b")
    assert res.node_ids == ["a", "detour", "b"]


def test_iteration_cap_returns_not_found_and_logs(caplog):
    # many parallel a->b edges with strictly decreasing weights leave stale queue entries
    nodes = [NavigationNode("a", 0, 0), NavigationNode("b", 1, 0), NavigationNode("g", 50, 50)]
    edges = [NavigationEdge("a", "b", float(w)) for w in range(100, 0, -1)]
    g = NavigationGraph(nodes, edges)
    assert astar.ITERATIONS_PER_NODE * len(g) < 100

    with caplog.at_level("ERROR", logger="indoor_nav.domain.routing.astar"):
        res = find_path(g, "a", "g")
    assert not res.found
    assert res.status == "iteration_cap"
    assert any("iteration cap" in r.getMessage() for r in caplog.records)


def test_broken_predecessor_chain_is_not_found(graph_factory):
    g = graph_factory({"a": (0, 0), "b": (1, 0)}, [])
    res = astar._reconstruct(g, [-1, -1], 0, 1, 1.0)
    assert res.status == "broken_chain"
    assert not res.found


# ---- nearest walkable node ----
def test_nearest_walkable_node_skips_non_walkable(graph_factory):
    g = graph_factory(
        {"wall": (0, 0), "far": (3, 0), "near": (-2, 0)}, [], walkable={"wall": False}
    )
    assert nearest_walkable_node(g, 0.1, 0.0).id == "near"


def test_nearest_walkable_node_first_wins_on_ties(graph_factory):
    g = graph_factory({"p": (1, 0), "q": (-1, 0)}, [])
    assert nearest_walkable_node(g, 0.0, 0.0).id == "p"


def test_nearest_walkable_node_empty_or_all_blocked(graph_factory):
    assert nearest_walkable_node(NavigationGraph([]), 0.0, 0.0) is None
    g = graph_factory({"x": (0, 0)}, [], walkable={"x": False})
    assert nearest_walkable_node(g, 0.0, 0.0) is None


# ---- geometry ----
def test_distance_between():
    assert distance_between(0, 0, 3, 4) == pytest.approx(5.0)
    assert distance_between(1, 1, 1, 1) == 0.0


@pytest.mark.parametrize(
    "p, expected",
    [
        ((5.0, 3.0), 3.0),  # projects inside
        ((-4.0, 3.0), 5.0),  # clamped to a
        ((13.0, -4.0), 5.0),  # clamped to b
        ((7.0, 0.0), 0.0),  # on the segment
    ],
)
def test_point_to_segment_distance(p, expected):
    assert point_to_segment_distance(p[0], p[1], 0.0, 0.0, 10.0, 0.0) == pytest.approx(expected)


def test_point_to_degenerate_segment():
    assert point_to_segment_distance(3, 4, 0, 0, 0, 0) == pytest.approx(5.0)


def test_polyline_length(shoes_graph):
    route = find_path(shoes_graph, "A", "C").waypoints
    assert polyline_length(route) == pytest.approx(10.0)
    assert polyline_length(route[:1]) == 0.0
