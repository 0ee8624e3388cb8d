# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

from indoor_nav.app.events import NavigationEvent

log = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, ev: NavigationEvent) -> None: ...


def event_payload(ev: NavigationEvent) -> dict:
    payload = {"event": ev.kind, **asdict(ev)}
    # routes are logged as id lists; full node records are noise in an event log
    if "path" in payload:
        payload["path"] = [n.id for n in ev.path]
    return payload


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev: NavigationEvent) -> None:
        self.fp.write(json.dumps(event_payload(ev)) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list[NavigationEvent] = []

    def write(self, ev: NavigationEvent) -> None:
        self.events.append(ev)

    def kinds(self) -> list[str]:
        return [ev.kind for ev in self.events]


class Recorder:
    """Navigation listener that fans events out to sinks; a failing sink never stops the others."""

    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def __call__(self, ev: NavigationEvent) -> None:
        for s in self.sinks:
            try:
                s.write(ev)
            except Exception:
                log.exception("sink %s failed on %s", type(s).__name__, ev.kind)
