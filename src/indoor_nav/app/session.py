# indoor_nav/app/session.py
from dataclasses import dataclass

from indoor_nav.app.controllers.navigation import NavigationEngine
from indoor_nav.app.protocols import Clock
from indoor_nav.domain.calibration import CoordinateMapper
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.domain.state import NavigationState
from indoor_nav.io.anchors import parse_anchor_payload
from indoor_nav.io.recorder import Recorder


@dataclass
class NavigationSession:
    """
    Glue between the tracking collaborator and the core: local frames go through the mapper
    into the engine, anchor scans re-anchor both.
    """

    engine: NavigationEngine
    mapper: CoordinateMapper
    graph: NavigationGraph
    clock: Clock
    destination: str  # section id
    start_node: str | None = None
    recorder: Recorder | None = None

    def start(self, local_x: float = 0.0, local_z: float = 0.0) -> bool:
        """Begin guidance; the user is assumed to stand on the start node right now."""
        start = self.start_node or self.graph.entry_node_id or ""
        node = self.graph.node(start)
        if node is not None:
            self.mapper.calibrate_to_node(node, local_x, local_z)
        return self.engine.initialize(self.graph, start, self.destination)

    def on_tracking_frame(self, local_x: float, local_z: float) -> NavigationState:
        p = self.mapper.local_to_map(local_x, local_z)
        return self.engine.update_position(p.x, p.z)

    def on_anchor_scan(self, payload: str | bytes | None, local_x: float, local_z: float) -> bool:
        node_id = parse_anchor_payload(payload)
        node = self.graph.node(node_id) if node_id else None
        if node is None:
            return False
        self.mapper.recalibrate(node.x, node.z, local_x, local_z)
        self.start_node = node.id
        return self.engine.set_start_node(node.id)

    def close(self) -> None:
        self.engine.dispose()
        self.mapper.reset()
