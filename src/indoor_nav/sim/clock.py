# sim/clock.py
from __future__ import annotations

import time
from dataclasses import dataclass, field

MS = 1.0
SEC = 1000.0 * MS
MIN = 60.0 * SEC


def ms(x: float) -> float:
    return x


def seconds(x: float) -> float:
    return x * SEC


def minutes(x: float) -> float:
    return x * MIN


class MonotonicClock:
    """Milliseconds from the process monotonic clock; offset so the first reading is ~0."""

    def __init__(self):
        self._t0 = time.monotonic()

    def now_ms(self) -> float:
        return (time.monotonic() - self._t0) * SEC


@dataclass
class ManualClock:
    """Deterministic clock for tests and previews; time only moves when told to."""

    t_ms: float = field(default=0.0)

    def now_ms(self) -> float:
        return self.t_ms

    def advance(self, dt_ms: float) -> float:
        if dt_ms < 0:
            raise ValueError(f"cannot advance clock backwards by {dt_ms} ms")
        self.t_ms += dt_ms
        return self.t_ms

    def set(self, t_ms: float) -> None:
        if t_ms < self.t_ms:
            raise ValueError(f"time went backwards: {t_ms} < {self.t_ms}")
        self.t_ms = t_ms
