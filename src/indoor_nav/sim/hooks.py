# sim/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def route_computed(self, *, reason, start, goal, waypoints, cost, t): ...
    def route_failed(self, *, reason, start, goal, status, t): ...
    def recalc_skipped(self, *, t, since_last_ms): ...
    def position(self, *, t, x, z, deviation, next_index): ...
    def disposed(self, *, t): ...


class NoopHooks:
    def route_computed(self, **_):
        pass

    def route_failed(self, **_):
        pass

    def recalc_skipped(self, **_):
        pass

    def position(self, **_):
        pass

    def disposed(self, **_):
        pass
