# indoor_nav/domain/state.py
from dataclasses import dataclass, field
from enum import Enum

from indoor_nav.domain.entities.geography import NavigationNode, Point


class NavigationStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    ROUTING = "routing"
    ARRIVED = "arrived"
    NO_PATH = "no_path"


@dataclass(frozen=True)
class NavigationState:
    """One per position update; the engine keeps nothing of it beyond the route index."""

    remaining_waypoints: tuple[NavigationNode, ...] = field(default_factory=tuple)
    next_waypoint_index: int = 0
    total_waypoints: int = 0
    distance_to_next: float = 0.0
    remaining_distance: float = 0.0
    arrived: bool = False
    recalculated: bool = False
    user_position: Point = Point(0.0, 0.0)
    closest_node: NavigationNode | None = None
    status: NavigationStatus = NavigationStatus.UNINITIALIZED

    @property
    def next_waypoint(self) -> NavigationNode | None:
        return self.remaining_waypoints[0] if self.remaining_waypoints else None
