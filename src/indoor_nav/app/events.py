# app/events.py
from dataclasses import dataclass, field
from typing import ClassVar

from indoor_nav.domain.entities.geography import NavigationNode


@dataclass(frozen=True)
class NavigationEvent:
    kind: ClassVar[str] = "event"
    t: float  # engine clock, ms


# Route lifecycle
@dataclass(frozen=True)
class PathComputed(NavigationEvent):
    kind: ClassVar[str] = "path_computed"
    path: tuple[NavigationNode, ...] = field(default_factory=tuple)
    total_waypoints: int = 0


@dataclass(frozen=True)
class PathRecalculated(NavigationEvent):
    kind: ClassVar[str] = "path_recalculated"
    path: tuple[NavigationNode, ...] = field(default_factory=tuple)
    total_waypoints: int = 0


@dataclass(frozen=True)
class NoPathFound(NavigationEvent):
    kind: ClassVar[str] = "no_path"
    reason: str | None = None


# Progress
@dataclass(frozen=True)
class WaypointReached(NavigationEvent):
    kind: ClassVar[str] = "waypoint_reached"
    waypoint_index: int = 0
    total_waypoints: int = 0


@dataclass(frozen=True)
class Arrived(NavigationEvent):
    kind: ClassVar[str] = "arrived"
    total_waypoints: int = 0
