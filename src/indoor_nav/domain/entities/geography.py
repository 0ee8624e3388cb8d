from dataclasses import dataclass
from enum import Enum


class NodeCategory(str, Enum):
    NORMAL = "normal"
    ENTRANCE = "entrance"
    DESTINATION = "destination"  # marks a section's node
    ANCHOR = "anchor"  # an anchor-scan marker is mounted here


# Core geometry types used by routing
@dataclass(frozen=True)
class Point:
    x: float  # meters in map (or local) space
    z: float


@dataclass(frozen=True)
class NavigationNode:
    id: str
    x: float
    z: float
    walkable: bool = True
    label: str | None = None
    category: NodeCategory = NodeCategory.NORMAL
    floor_id: str | None = None  # carried through, not reasoned about

    @property
    def point(self) -> Point:
        return Point(self.x, self.z)


@dataclass(frozen=True)
class NavigationEdge:
    from_node: str
    to_node: str
    distance: float | None = None  # None => Euclidean length of the endpoints
    id: str | None = None


@dataclass(frozen=True)
class Neighbor:
    node_id: str
    distance: float


@dataclass(frozen=True)
class DestinationSection:
    id: str
    name: str
    node_id: str
    icon: str | None = None
