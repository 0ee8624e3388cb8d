# indoor_nav/app/controllers/navigation.py
from collections.abc import Mapping
from dataclasses import dataclass

from indoor_nav.app.events import (
    Arrived,
    NavigationEvent,
    NoPathFound,
    PathComputed,
    PathRecalculated,
    WaypointReached,
)
from indoor_nav.app.protocols import Clock, NavigationListener, Pathfinder
from indoor_nav.config.models import EngineModel
from indoor_nav.domain.entities.geography import DestinationSection, NavigationNode, Point
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.domain.routing.astar import PathResult, find_path, nearest_walkable_node
from indoor_nav.domain.routing.geometry import distance_between, point_to_segment_distance
from indoor_nav.domain.state import NavigationState, NavigationStatus
from indoor_nav.sim.clock import MonotonicClock
from indoor_nav.sim.hooks import EngineHooks, NoopHooks


@dataclass(frozen=True)
class ListenerHandle:
    id: int


class NavigationEngine:
    """
    Per-session route controller.

    Lifecycle: UNINITIALIZED -> ROUTING -> ARRIVED, with NO_PATH whenever no usable route is
    held. Driven by one update_position call per tracking frame; re-plans when the user drifts
    further than deviation_threshold_m from the route, at most once per recalc_cooldown_ms.
    """

    def __init__(
        self,
        config: EngineModel | Mapping | None = None,
        *,
        clock: Clock | None = None,
        hooks: EngineHooks | None = None,
        pathfinder: Pathfinder = find_path,
    ):
        if config is None:
            config = EngineModel()
        if not isinstance(config, EngineModel):
            config = EngineModel.model_validate(config)
        self.config = config
        self.clock = clock or MonotonicClock()
        self._hooks = hooks or NoopHooks()
        self._find_path = pathfinder

        self._graph: NavigationGraph | None = None
        self._target_section: DestinationSection | None = None
        self._target_node_id = ""
        self._start_node_id = ""

        self._path: tuple[NavigationNode, ...] = ()
        self._idx = 0  # next waypoint
        self._status = NavigationStatus.UNINITIALIZED
        self._last_recalc_ms: float | None = None

        self._listeners: dict[int, NavigationListener] = {}
        self._next_handle = 0
        self._user = Point(0.0, 0.0)

    # --------------- Listeners -----------------------------

    def add_listener(self, listener: NavigationListener) -> ListenerHandle:
        self._next_handle += 1
        self._listeners[self._next_handle] = listener
        return ListenerHandle(self._next_handle)

    def remove_listener(self, handle: ListenerHandle) -> bool:
        return self._listeners.pop(handle.id, None) is not None

    def _emit(self, ev: NavigationEvent) -> None:
        # snapshot so a listener may unsubscribe itself mid-dispatch
        for listener in list(self._listeners.values()):
            listener(ev)

    # --------------- Getters -----------------------------

    @property
    def status(self) -> NavigationStatus:
        return self._status

    @property
    def graph(self) -> NavigationGraph | None:
        return self._graph

    @property
    def full_path(self) -> tuple[NavigationNode, ...]:
        return self._path

    @property
    def next_waypoint_index(self) -> int:
        return self._idx

    @property
    def user_position(self) -> Point:
        return self._user

    @property
    def target_section(self) -> DestinationSection | None:
        return self._target_section

    @property
    def start_node_id(self) -> str:
        return self._start_node_id

    # --------------- Route computation -----------------------------

    def initialize(self, graph: NavigationGraph, start_node_id: str, section_id: str) -> bool:
        now = self.clock.now_ms()
        self._graph = graph
        self._start_node_id = start_node_id
        self._path, self._idx = (), 0
        self._last_recalc_ms = None

        section = graph.section(section_id)
        if section is None:
            self._target_section, self._target_node_id = None, ""
            self._status = NavigationStatus.NO_PATH
            self._hooks.route_failed(
                reason="initialize", start=start_node_id, goal=None, status="unknown_section", t=now
            )
            self._emit(NoPathFound(t=now, reason="unknown_section"))
            return False

        self._target_section = section
        self._target_node_id = section.node_id
        return self._recompute(start_node_id, reason="initialize", now=now)

    def set_start_node(self, node_id: str) -> bool:
        """Re-anchor the route origin (anchor scan) and recompute right away."""
        if self._graph is None or not self._target_node_id:
            return False
        self._start_node_id = node_id
        return self._recompute(node_id, reason="anchor", now=self.clock.now_ms())

    def force_recalculate(self) -> bool:
        """User-triggered retry from the last known position; ignores the cooldown."""
        if self._graph is None or not self._target_node_id:
            return False
        now = self.clock.now_ms()
        closest = nearest_walkable_node(self._graph, self._user.x, self._user.z)
        if closest is None:
            self._fail_without_route("no_walkable_node", now)
            return False
        ok = self._recompute(closest.id, reason="forced", now=now)
        if ok:
            self._last_recalc_ms = now
        return ok

    def _route(self, from_id: str, reason: str, now: float) -> PathResult | None:
        result = self._find_path(self._graph, from_id, self._target_node_id)
        if not result.found or not result.waypoints:
            self._hooks.route_failed(
                reason=reason, start=from_id, goal=self._target_node_id, status=result.status, t=now
            )
            return None
        self._hooks.route_computed(
            reason=reason,
            start=from_id,
            goal=self._target_node_id,
            waypoints=len(result.waypoints),
            cost=result.total_distance,
            t=now,
        )
        return result

    def _recompute(self, from_id: str, *, reason: str, now: float) -> bool:
        result = self._route(from_id, reason, now)
        if result is None:
            self._fail_without_route("no_path", now)
            return False
        self._commit(result)
        if reason == "forced":
            self._emit(PathRecalculated(t=now, path=self._path, total_waypoints=len(self._path)))
        else:
            self._emit(PathComputed(t=now, path=self._path, total_waypoints=len(self._path)))
        return True

    def _fail_without_route(self, reason: str, now: float) -> None:
        # an explicit request failed; any previous route is still the best guidance we have
        if not self._path:
            self._status = NavigationStatus.NO_PATH
        self._emit(NoPathFound(t=now, reason=reason))

    def _commit(self, result: PathResult) -> None:
        self._path = result.waypoints
        self._idx = 0
        self._status = NavigationStatus.ROUTING

    # --------------- Per-frame update -----------------------------

    def update_position(self, x: float, z: float) -> NavigationState:
        now = self.clock.now_ms()
        self._user = Point(x, z)

        if self._graph is None or not self._path:
            return self._empty_state()
        if self._status == NavigationStatus.ARRIVED:
            return self._arrived_state()

        self._advance(x, z, now)

        if self._idx >= len(self._path):
            self._status = NavigationStatus.ARRIVED
            self._emit(Arrived(t=now, total_waypoints=len(self._path)))
            return self._arrived_state()

        deviation = self._deviation(x, z)
        recalculated = False
        if deviation > self.config.deviation_threshold_m:
            recalculated = self._try_recalculate(x, z, now)

        nxt = self._path[self._idx]
        self._hooks.position(t=now, x=x, z=z, deviation=deviation, next_index=self._idx)
        return NavigationState(
            remaining_waypoints=self._path[self._idx :],
            next_waypoint_index=self._idx,
            total_waypoints=len(self._path),
            distance_to_next=distance_between(x, z, nxt.x, nxt.z),
            remaining_distance=self._remaining_distance(x, z),
            arrived=False,
            recalculated=recalculated,
            user_position=self._user,
            closest_node=nearest_walkable_node(self._graph, x, z),
            status=self._status,
        )

    def _advance(self, x: float, z: float, now: float) -> None:
        """
        Pass every waypoint up to the furthest one within reach in the look-ahead window,
        reporting each passed waypoint in order. Repeats until nothing in the window is in reach.

        A waypoint beyond the next one only counts when the position also lies within reach of
        every leg leading up to it; otherwise a route folding back on itself would be skipped.
        """
        path, reach = self._path, self.config.reach_threshold_m
        while self._idx < len(path):
            window_end = min(self._idx + 1 + self.config.lookahead, len(path))
            hit = -1
            for i in range(self._idx, window_end):
                if distance_between(x, z, path[i].x, path[i].z) > reach:
                    continue
                if i > self._idx and not self._on_legs(x, z, self._idx, i):
                    continue
                hit = i
            if hit < 0:
                return
            for i in range(self._idx, hit + 1):
                self._emit(WaypointReached(t=now, waypoint_index=i, total_waypoints=len(path)))
            self._idx = hit + 1

    def _on_legs(self, x: float, z: float, first: int, last: int) -> bool:
        # legs path[k-1] -> path[k] for first < k <= last
        path, reach = self._path, self.config.reach_threshold_m
        for k in range(first + 1, last + 1):
            a, b = path[k - 1], path[k]
            if point_to_segment_distance(x, z, a.x, a.z, b.x, b.z) > reach:
                return False
        return True

    def _deviation(self, x: float, z: float) -> float:
        path, i = self._path, self._idx
        nxt = path[i]
        best = distance_between(x, z, nxt.x, nxt.z)
        for wp in path[i + 1 : i + 1 + self.config.lookahead]:
            best = min(best, distance_between(x, z, wp.x, wp.z))
        if i > 0:
            prev = path[i - 1]
            best = min(best, point_to_segment_distance(x, z, prev.x, prev.z, nxt.x, nxt.z))
        return best

    def _try_recalculate(self, x: float, z: float, now: float) -> bool:
        last = self._last_recalc_ms
        if last is not None and now - last < self.config.recalc_cooldown_ms:
            self._hooks.recalc_skipped(t=now, since_last_ms=now - last)
            return False

        closest = nearest_walkable_node(self._graph, x, z)
        if closest is None:
            self._hooks.route_failed(
                reason="deviation",
                start=None,
                goal=self._target_node_id,
                status="no_walkable_node",
                t=now,
            )
            return False

        result = self._route(closest.id, "deviation", now)
        if result is None:
            return False  # keep the previous route

        self._commit(result)
        self._last_recalc_ms = now
        self._emit(PathRecalculated(t=now, path=self._path, total_waypoints=len(self._path)))
        return True

    def _remaining_distance(self, x: float, z: float) -> float:
        path, i = self._path, self._idx
        total = distance_between(x, z, path[i].x, path[i].z)
        for a, b in zip(path[i:], path[i + 1 :]):
            total += distance_between(a.x, a.z, b.x, b.z)
        return total

    # --------------- Snapshots -----------------------------

    def _empty_state(self) -> NavigationState:
        return NavigationState(user_position=self._user, status=self._status)

    def _arrived_state(self) -> NavigationState:
        n = len(self._path)
        return NavigationState(
            remaining_waypoints=(),
            next_waypoint_index=n,
            total_waypoints=n,
            distance_to_next=0.0,
            remaining_distance=0.0,
            arrived=True,
            recalculated=False,
            user_position=self._user,
            closest_node=self._path[-1],
            status=NavigationStatus.ARRIVED,
        )

    # --------------- Cleanup -----------------------------

    def dispose(self) -> None:
        if self._graph is None and not self._listeners and not self._path:
            return
        self._listeners.clear()
        self._path, self._idx = (), 0
        self._graph = None
        self._target_section, self._target_node_id = None, ""
        self._status = NavigationStatus.UNINITIALIZED
        self._hooks.disposed(t=self.clock.now_ms())
