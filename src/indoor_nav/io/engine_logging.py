# io/engine_logging.py
import json
import logging
import sys

from indoor_nav.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="indoor_nav", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    One place to shape and emit structured logs for the navigation engine.
    """

    # statuses that mean the search itself misbehaved rather than the map having no route
    INTERNAL = {"iteration_cap", "broken_chain"}

    def __init__(
        self,
        session_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 30,
        logger: logging.Logger | None = None,
    ):
        self.session_id, self.debug, self.sample_every = session_id, debug, max(1, sample_every)
        self.log = logger or default_json_logger(level=level)
        self._frames = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"session_id": self.session_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------------------------------------------------

    def route_computed(self, *, reason, start, goal, waypoints, cost, t):
        self._emit(
            "INFO",
            "route_computed",
            reason=reason,
            start=start,
            goal=goal,
            waypoints=waypoints,
            cost=round(float(cost), 3),
            t=t,
        )

    def route_failed(self, *, reason, start, goal, status, t):
        level = "ERROR" if status in self.INTERNAL else "WARNING"
        self._emit(level, "route_failed", reason=reason, start=start, goal=goal, status=status, t=t)

    def recalc_skipped(self, *, t, since_last_ms):
        if self.debug:
            self._emit("DEBUG", "recalc_skipped", t=t, since_last_ms=since_last_ms)

    def position(self, *, t, x, z, deviation, next_index):
        self._frames += 1
        if self.debug and (self._frames % self.sample_every) == 0:
            self._emit(
                "DEBUG", "position", t=t, x=x, z=z, deviation=deviation, next_index=next_index
            )

    def disposed(self, *, t):
        self._emit("INFO", "disposed", t=t, frames=self._frames)
