from __future__ import annotations

import os
from typing import Optional
from prometheus_client import Counter, REGISTRY

_events_total: Optional[Counter] = None
_bounty_isk_total: Optional[Counter] = None
_read_errors_total: Optional[Counter] = None


class _NoOp:
    def labels(self, *args, **kwargs):
        return self
    def inc(self, *args, **kwargs):
        return None


def _safe_counter(name: str, doc: str, labelnames):
    if os.getenv("DISABLE_PROMETHEUS", "0") == "1":
        return _NoOp()
    try:
        return Counter(name, doc, labelnames)
    except ValueError:
        # Already registered (module reloaded in tests); reuse the existing collector
        coll = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if coll is not None:
            return coll
        return _NoOp()


def get_events_total():
    global _events_total
    if _events_total is None:
        _events_total = _safe_counter("bountycounter_events", "Notifications published", ["type"])  # type: ignore[assignment]
    return _events_total


def get_bounty_isk_total():
    global _bounty_isk_total
    if _bounty_isk_total is None:
        _bounty_isk_total = _safe_counter("bountycounter_bounty_isk", "Bounty ISK counted", ["entity"])  # type: ignore[assignment]
    return _bounty_isk_total


def get_read_errors_total():
    global _read_errors_total
    if _read_errors_total is None:
        _read_errors_total = _safe_counter("bountycounter_read_errors", "Transient log read failures", ["stage"])  # type: ignore[assignment]
    return _read_errors_total
