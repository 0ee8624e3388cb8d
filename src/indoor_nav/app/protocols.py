from typing import Protocol, runtime_checkable

from indoor_nav.app.events import NavigationEvent
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.domain.routing.astar import PathResult


@runtime_checkable
class Clock(Protocol):
    """
    Time source for hysteresis (recalculation cooldown) and event stamps.
    Units: milliseconds; only differences matter, the origin is arbitrary.
    """

    def now_ms(self) -> float: ...


@runtime_checkable
class NavigationListener(Protocol):
    """Receives every navigation event synchronously, in registration order."""

    def __call__(self, event: NavigationEvent) -> None: ...


@runtime_checkable
class Pathfinder(Protocol):
    """
    Responsibilities:
      • Compute the least-cost waypoint sequence between two node ids.
      • Report not-found instead of raising for unknown or unreachable endpoints.
    """

    def __call__(self, graph: NavigationGraph, start_id: str, goal_id: str) -> PathResult: ...
