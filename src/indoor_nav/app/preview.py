# indoor_nav/app/preview.py
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from indoor_nav.app.controllers.navigation import NavigationEngine
from indoor_nav.app.events import NavigationEvent
from indoor_nav.config.models import EngineModel
from indoor_nav.domain.entities.geography import NavigationNode, Point
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.domain.routing.geometry import polyline_length
from indoor_nav.domain.state import NavigationState
from indoor_nav.io.recorder import MemorySink
from indoor_nav.sim.clock import SEC, ManualClock


def checkpoints(waypoints: Sequence[NavigationNode], step_m: float = 0.5) -> Iterable[Point]:
    """Yield positions along the route every step_m meters, always hitting each waypoint."""
    if step_m <= 0:
        raise ValueError(f"step_m must be > 0, got {step_m}")
    if not waypoints:
        return
    yield waypoints[0].point
    for a, b in zip(waypoints, waypoints[1:]):
        L = math.hypot(b.x - a.x, b.z - a.z)
        if L <= step_m:
            yield b.point
            continue
        steps = max(1, math.ceil(L / step_m))
        for k in range(1, steps + 1):
            s = min(k * step_m, L) / L
            yield Point(a.x + s * (b.x - a.x), a.z + s * (b.z - a.z))


@dataclass
class WalkPreview:
    route: tuple[NavigationNode, ...]
    route_length_m: float  # walked length, independent of edge weights
    states: list[NavigationState] = field(default_factory=list)
    events: list[NavigationEvent] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def found(self) -> bool:
        return bool(self.route)

    @property
    def arrived(self) -> bool:
        return bool(self.states) and self.states[-1].arrived


def preview_walk(
    graph: NavigationGraph,
    start_node_id: str,
    section_id: str,
    *,
    step_m: float = 0.5,
    walk_mps: float = 1.2,
    config: EngineModel | None = None,
) -> WalkPreview:
    """
    Simulate someone walking the planned route at walk_mps, sampling a frame every step_m.
    Runs a private engine on a manual clock, so no tracking session is needed.
    """
    if step_m <= 0:
        raise ValueError(f"step_m must be > 0, got {step_m}")
    if not math.isfinite(walk_mps) or walk_mps <= 0:
        raise ValueError(f"walk_mps must be a positive finite speed, got {walk_mps}")

    clock = ManualClock()
    engine = NavigationEngine(config, clock=clock)
    sink = MemorySink()
    engine.add_listener(sink.write)

    try:
        if not engine.initialize(graph, start_node_id, section_id):
            return WalkPreview((), 0.0, [], sink.events, 0.0)

        route = engine.full_path
        preview = WalkPreview(route, polyline_length(route), events=sink.events)
        prev = route[0].point
        for p in checkpoints(route, step_m):
            clock.advance(math.hypot(p.x - prev.x, p.z - prev.z) / walk_mps * SEC)
            prev = p
            state = engine.update_position(p.x, p.z)
            preview.states.append(state)
            if state.arrived:
                break

        preview.duration_ms = clock.now_ms()
        return preview
    finally:
        engine.dispose()
