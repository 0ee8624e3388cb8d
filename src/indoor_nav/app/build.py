# indoor_nav/app/build.py
from collections.abc import Mapping

from indoor_nav.app.controllers.navigation import NavigationEngine
from indoor_nav.app.session import NavigationSession
from indoor_nav.config.models import SessionModel
from indoor_nav.domain.calibration import CoordinateMapper
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.io.engine_logging import EngineLogging  # JSON logs
from indoor_nav.io.recorder import Recorder
from indoor_nav.runtime.registries import make_clock, make_sink, resolve_graph
from indoor_nav.sim.hooks import NoopHooks


def build(
    cfg: SessionModel | Mapping,
    *,
    graph: NavigationGraph | None = None,
    use_logging: bool = True,
    sink_deps: dict | None = None,
) -> NavigationSession:
    # 0) Validate config
    model = cfg if isinstance(cfg, SessionModel) else SessionModel.model_validate(cfg)

    # 1) Clock & hooks
    clock = make_clock(model.clock)
    hooks = (
        EngineLogging(
            session_id=model.session_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Graph (a caller-supplied graph wins over the configured reference)
    g = graph if graph is not None else resolve_graph(model.graph)

    # 3) Engine, recorder, mapper
    engine = NavigationEngine(model.engine, clock=clock, hooks=hooks)
    recorder = None
    if model.recorder.sinks:
        recorder = Recorder(*(make_sink(kind, deps=sink_deps) for kind in model.recorder.sinks))
        engine.add_listener(recorder)

    return NavigationSession(
        engine=engine,
        mapper=CoordinateMapper(),
        graph=g,
        clock=clock,
        destination=model.destination,
        start_node=model.start_node,
        recorder=recorder,
    )
