# indoor_nav/io/loaders.py
import json
import pickle
from collections.abc import Mapping
from functools import lru_cache

from indoor_nav.config.models import GraphDataModel
from indoor_nav.domain.entities.geography import (
    DestinationSection,
    NavigationEdge,
    NavigationNode,
    NodeCategory,
)
from indoor_nav.domain.entities.graph import NavigationGraph


def graph_from_records(data: GraphDataModel | Mapping) -> NavigationGraph:
    """Validate loader records and build the session graph."""
    model = data if isinstance(data, GraphDataModel) else GraphDataModel.model_validate(data)
    nodes = [
        NavigationNode(
            id=n.id,
            x=n.x,
            z=n.z,
            walkable=n.walkable,
            label=n.label,
            category=NodeCategory(n.category),
            floor_id=n.floor_id,
        )
        for n in model.nodes
    ]
    edges: list[NavigationEdge] = []
    for e in model.edges:
        edges.append(NavigationEdge(e.from_node, e.to_node, e.distance, e.id))
        if model.bidirectional:
            rid = f"{e.to_node}-{e.from_node}" if e.id is None else f"{e.id}~r"
            edges.append(NavigationEdge(e.to_node, e.from_node, e.distance, rid))
    sections = [DestinationSection(s.id, s.name, s.node_id, s.icon) for s in model.sections]
    return NavigationGraph(nodes, edges, sections)


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str = "json") -> NavigationGraph:
    if fmt == "json":
        with open(file, encoding="utf-8") as f:
            return graph_from_records(json.load(f))
    if fmt == "pickle":
        with open(file, "rb") as f:
            obj = pickle.load(f)
        if isinstance(obj, NavigationGraph):
            return obj
        return graph_from_records(obj)
    raise ValueError(f"Unsupported graph fmt {fmt!r}")


# ------------- Demo store ----------------------

# (id, x, z, label, category)
_DEMO_NODES = [
    ("n001", 0, 0, "Entrance", "entrance"),
    ("n002", 0, 3, "Main Aisle Start", "normal"),
    ("n003", 0, 6, "Main Junction 1", "normal"),
    ("n004", 0, 10, "Main Junction 2", "normal"),
    ("n005", 0, 14, "Back Wall", "normal"),
    ("n006", -4, 6, "Left Aisle 1", "normal"),
    ("n007", -8, 6, "Groceries", "destination"),
    ("n008", -4, 10, "Left Aisle 2", "normal"),
    ("n009", -8, 10, "Fresh Produce", "normal"),
    ("n010", 4, 6, "Right Aisle 1", "normal"),
    ("n011", 8, 6, "Electronics", "destination"),
    ("n012", 4, 10, "Right Aisle 2", "normal"),
    ("n013", 8, 10, "Clothing", "destination"),
    ("n014", -4, 14, "Back Left", "normal"),
    ("n015", 4, 14, "Back Right", "normal"),
    ("n016", 4, 2, "Billing", "destination"),
    ("n017", 4, 3, "Right Near Entrance", "normal"),
    ("n018", -4, 3, "Left Near Entrance", "normal"),
]

_DEMO_AISLES = [
    ("n001", "n002"), ("n002", "n003"), ("n003", "n004"), ("n004", "n005"),
    ("n003", "n006"), ("n006", "n007"), ("n004", "n008"), ("n008", "n009"),
    ("n006", "n008"), ("n007", "n009"),
    ("n003", "n010"), ("n010", "n011"), ("n004", "n012"), ("n012", "n013"),
    ("n010", "n012"), ("n011", "n013"),
    ("n005", "n014"), ("n005", "n015"), ("n008", "n014"), ("n012", "n015"),
    ("n002", "n017"), ("n017", "n016"), ("n002", "n018"),
]  # fmt: skip

_DEMO_SECTIONS = [
    ("s1", "Billing", "n016", "💳"),
    ("s2", "Electronics", "n011", "📱"),
    ("s3", "Groceries", "n007", "🛒"),
    ("s4", "Clothing", "n013", "👕"),
]


def demo_graph_records() -> dict:
    return {
        "nodes": [
            {"id": i, "x": x, "z": z, "label": label, "category": cat}
            for i, x, z, label, cat in _DEMO_NODES
        ],
        "edges": [{"from_node": a, "to_node": b, "id": f"{a}-{b}"} for a, b in _DEMO_AISLES],
        "sections": [
            {"id": i, "name": name, "node_id": nid, "icon": icon}
            for i, name, nid, icon in _DEMO_SECTIONS
        ],
        "bidirectional": True,
    }


def build_demo_graph() -> NavigationGraph:
    """Small single-floor store: entrance n001, four sections, aisles walkable both ways."""
    return graph_from_records(demo_graph_records())
