"""In-process notification bus.

The tail engine publishes here; presentation code (console, submitters, tests)
subscribes. Publishing never raises: a failing subscriber is logged and the
remaining subscribers still run, so log tailing is never interrupted by output.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List

from .schema import BaseNotification
from .metrics import get_events_total

log = logging.getLogger("bountycounter.events")

Subscriber = Callable[[BaseNotification], None]


class EventBus:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

    def subscribe(self, fn: Subscriber) -> Subscriber:
        with self._lock:
            self._subscribers.append(fn)
        return fn

    def unsubscribe(self, fn: Subscriber) -> None:
        with self._lock:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

    def publish(self, note: BaseNotification) -> None:
        try:
            get_events_total().labels(note.event_type).inc()
        except Exception:
            pass
        # Single-line JSON for log shipping
        log.info(note.model_dump_json())
        with self._lock:
            subscribers = list(self._subscribers)
        for fn in subscribers:
            try:
                fn(note)
            except Exception:
                log.exception("subscriber %r failed on %s", fn, note.event_type)
