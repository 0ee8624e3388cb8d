# runtime/registries.py
from collections.abc import Callable
from typing import Any

from indoor_nav.app.protocols import Clock
from indoor_nav.config.models import (
    ClockManualModel,
    ClockMonotonicModel,
    ClockUnion,
    GraphByPath,
    GraphDemo,
    GraphInline,
    GraphRef,
)
from indoor_nav.domain.entities.graph import NavigationGraph
from indoor_nav.io.loaders import build_demo_graph, graph_from_records, load_graph_from_path
from indoor_nav.io.recorder import JsonlSink, MemorySink, Sink
from indoor_nav.sim.clock import ManualClock, MonotonicClock

ClockFactory = Callable[[ClockUnion], Clock]
SinkFactory = Callable[[dict[str, Any]], Sink]

_clock_registry: dict[str, ClockFactory] = {}
_sink_registry: dict[str, SinkFactory] = {}


# ------------------- Clocks ---------------------------


def register_clock(kind: str):
    def deco(fn: ClockFactory):
        _clock_registry[kind] = fn
        return fn

    return deco


def make_clock(cfg: ClockUnion) -> Clock:
    try:
        factory = _clock_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown clock kind {cfg.kind!r}") from None
    return factory(cfg)


@register_clock("monotonic")
def _make_monotonic(cfg: ClockMonotonicModel):
    return MonotonicClock()


@register_clock("manual")
def _make_manual(cfg: ClockManualModel):
    return ManualClock(cfg.start_ms)


# ------------------- Sinks ---------------------------


def register_sink(kind: str):
    def deco(fn: SinkFactory):
        _sink_registry[kind] = fn
        return fn

    return deco


def make_sink(kind: str, *, deps: dict | None = None) -> Sink:
    try:
        factory = _sink_registry[kind]
    except KeyError:
        raise ValueError(f"Unknown sink kind {kind!r}") from None
    return factory(deps or {})


@register_sink("jsonl")
def _make_jsonl(deps):
    return JsonlSink(deps["fp"]) if "fp" in deps else JsonlSink()


@register_sink("memory")
def _make_memory(deps):
    return MemorySink()


# ------------------- Graphs ---------------------------


def resolve_graph(ref: GraphRef | None, *, deps: dict | None = None) -> NavigationGraph:
    """
    deps can include:
      - 'graph': NavigationGraph  # prebuilt, used when ref is None
    """
    deps = deps or {}
    if ref is None:
        if "graph" in deps:
            return deps["graph"]
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByPath):
        return load_graph_from_path(ref.file, ref.fmt)
    if isinstance(ref, GraphInline):
        return graph_from_records(ref.data)
    if isinstance(ref, GraphDemo):
        return build_demo_graph()
    raise TypeError(ref)
