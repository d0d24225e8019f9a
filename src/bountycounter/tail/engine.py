"""
Tail engine: turns file-system notifications into ledger updates and notifications.

What it does:
- On a new log file, re-resolves sessions for the whole directory and starts
  tracking any character whose newest log changed. Tracking begins at the
  current end of file; history already in the file is never replayed.
- On a modified log file, reads from the committed offset to end of file,
  classifies each complete line and folds undock/bounty events into the ledger.
  The new offset is committed only after every line before it was applied. A
  trailing line without its newline is left for the next read.
- Transient I/O errors (the client holding the file) are logged and skipped; the
  next notification retries from the last committed offset.

Where it is used:
- `bountycounter.main` wires it to a `WatchdogWatcher`; tests drive
  `on_created` / `on_modified` directly with a fake watcher.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Callable, List, Optional

from ..errors import LogsDirectoryError
from ..events.bus import EventBus
from ..events.metrics import get_read_errors_total
from ..events.schema import BaseNotification, BountyUpdated, EntitySnapshot, TrackingStarted, Undocking
from ..ledger import Ledger, TrackedEntity
from ..parsing.lines import RewardAmount, Undock, classify_line
from ..session.resolver import LOG_SUFFIX, resolve_sessions
from .watcher import DirectoryWatcher, WatchdogWatcher

log = logging.getLogger("bountycounter.tail")

WatcherFactory = Callable[[str], DirectoryWatcher]

# Game log headers are a handful of lines; files without markers by then are not session logs
MAX_HEADER_LINES = 20


def _norm(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))


class TailEngine:
    def __init__(
        self,
        logs_dir: str,
        bus: Optional[EventBus] = None,
        ledger: Optional[Ledger] = None,
        watcher_factory: Optional[WatcherFactory] = None,
        max_header_lines: Optional[int] = MAX_HEADER_LINES,
    ):
        path = os.path.abspath(os.path.expanduser(logs_dir or ""))
        if not logs_dir or not os.path.isdir(path):
            raise LogsDirectoryError(logs_dir, "directory does not exist")
        if not os.access(path, os.R_OK | os.X_OK):
            raise LogsDirectoryError(logs_dir, "permission denied")
        self.logs_dir = path
        self.bus = bus or EventBus()
        self.ledger = ledger or Ledger()
        self._watcher = (watcher_factory or WatchdogWatcher)(path)
        self.max_header_lines = max_header_lines
        self._enabled = False
        # Serializes handler bodies; the ledger has its own lock
        self._handler_lock = threading.Lock()
        self._read_errors = get_read_errors_total()

    # ---- lifecycle ----

    def start(self) -> None:
        if self._enabled:
            return
        try:
            self._watcher.start(self.on_created, self.on_modified)
        except OSError as e:
            raise LogsDirectoryError(self.logs_dir, str(e)) from e
        self._enabled = True
        self.rescan()

    def stop(self) -> None:
        self._enabled = False
        self._watcher.stop()

    # ---- notification handlers ----

    def on_created(self, path: str) -> None:
        if not self._enabled or not path.lower().endswith(LOG_SUFFIX):
            return
        self.rescan()

    def on_modified(self, path: str) -> None:
        if not self._enabled:
            return
        self.read_new_lines(path)

    # ---- work ----

    def rescan(self) -> List[TrackedEntity]:
        """Resolve the newest log per character and (re)attribute changed ones."""
        started: List[TrackedEntity] = []
        with self._handler_lock:
            try:
                winners = resolve_sessions(self.logs_dir, max_lines=self.max_header_lines)
            except OSError as e:
                self._count_error("scan")
                log.debug("scan of %s failed: %s", self.logs_dir, e)
                return started
            for name in sorted(winners):
                path = _norm(winners[name].file_path)
                try:
                    size = os.path.getsize(path)
                except OSError as e:
                    self._count_error("scan")
                    log.debug("cannot stat %s: %s", path, e)
                    continue
                ent = self.ledger.attribute(name, path, size)
                if ent is None:
                    continue
                log.info("tracking %s from %s @%d", name, os.path.basename(path), size)
                started.append(ent)
        for ent in started:
            self.bus.publish(TrackingStarted(entity=EntitySnapshot.of(ent)))
        return started

    def read_new_lines(self, path: str) -> int:
        """Apply lines appended to `path` since the committed offset. Returns lines read.

        Notifications go out after the offset is committed and the handler lock released.
        """
        path = _norm(path)
        notes: List[BaseNotification] = []
        with self._handler_lock:
            ent = self.ledger.find_by_path(path)
            if ent is None:
                return 0
            try:
                chunk = self._read_tail(path, ent.read_offset)
            except OSError as e:
                self._count_error("tail")
                log.debug("read of %s failed, will retry: %s", path, e)
                return 0
            end = chunk.rfind(b"\n")
            if end < 0:
                return 0
            consumed = chunk[: end + 1]
            lines = consumed.split(b"\n")[:-1]
            for raw in lines:
                note = self._apply_line(ent.name, path, raw.decode("utf-8", errors="replace").rstrip("\r"))
                if note is not None:
                    notes.append(note)
            self.ledger.commit_offset(ent.name, path, ent.read_offset + len(consumed))
        for note in notes:
            self.bus.publish(note)
        return len(lines)

    def _read_tail(self, path: str, offset: int) -> bytes:
        with open(path, "rb") as f:
            f.seek(0, os.SEEK_END)
            size = f.tell()
            if size < offset:
                log.warning("%s shrank below read offset (%d < %d); waiting for a new session", path, size, offset)
                return b""
            if size == offset:
                return b""
            f.seek(offset)
            return f.read(size - offset)

    def _apply_line(self, name: str, path: str, line: str) -> Optional[BaseNotification]:
        event = classify_line(line)
        if event is None:
            return None
        if isinstance(event, Undock):
            snap = self.ledger.record_undock(name, path)
            if snap is not None:
                log.debug("%s undocking", name)
                return Undocking(entity=EntitySnapshot.of(snap))
        elif isinstance(event, RewardAmount):
            snap = self.ledger.record_reward(name, path, event.value)
            if snap is not None:
                return BountyUpdated(entity=EntitySnapshot.of(snap), increment=event.value)
        return None

    def _count_error(self, stage: str) -> None:
        try:
            self._read_errors.labels(stage).inc()
        except Exception:
            pass

    # ---- user operations / queries ----

    def reset_entity_total(self, name: str) -> Optional[TrackedEntity]:
        """Zero the lifetime total for `name` (user initiated, no notification)."""
        ent = self.ledger.reset_total(name)
        if ent is not None:
            log.info("%s: lifetime total reset", name)
        return ent

    def get_entity(self, name: str) -> Optional[TrackedEntity]:
        return self.ledger.get(name)

    def entities(self) -> List[TrackedEntity]:
        return sorted(self.ledger.snapshot(), key=lambda e: e.name)
