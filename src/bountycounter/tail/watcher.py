from __future__ import annotations

import logging
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

log = logging.getLogger("bountycounter.tail")

PathCallback = Callable[[str], None]


class DirectoryWatcher:
    """Minimal file-watch capability the tail engine depends on."""

    def start(self, on_created: PathCallback, on_modified: PathCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError


class _LogDirHandler(FileSystemEventHandler):
    def __init__(self, suffix: str, on_created: PathCallback, on_modified: PathCallback):
        self.suffix = suffix
        self._on_created = on_created
        self._on_modified = on_modified

    def _wanted(self, event: FileSystemEvent) -> bool:
        return not event.is_directory and str(event.src_path).lower().endswith(self.suffix)

    def on_created(self, event: FileSystemEvent) -> None:
        if self._wanted(event):
            self._on_created(str(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if self._wanted(event):
            self._on_modified(str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # A log renamed into the directory looks like a new file
        dest = str(getattr(event, "dest_path", "") or "")
        if not event.is_directory and dest.lower().endswith(self.suffix):
            self._on_created(dest)


class WatchdogWatcher(DirectoryWatcher):
    """watchdog Observer on one directory, non-recursive, `*.txt` only.

    The observer thread dispatches events one at a time, so callbacks never overlap.
    """

    def __init__(self, directory: str, suffix: str = ".txt"):
        self.directory = directory
        self.suffix = suffix
        self._observer: Optional[Observer] = None

    def start(self, on_created: PathCallback, on_modified: PathCallback) -> None:
        if self._observer is not None:
            return
        handler = _LogDirHandler(self.suffix, on_created, on_modified)
        observer = Observer()
        observer.schedule(handler, self.directory, recursive=False)
        observer.start()
        self._observer = observer
        log.info("watching %s", self.directory)

    def stop(self) -> None:
        observer = self._observer
        if observer is None:
            return
        self._observer = None
        observer.stop()
        observer.join()
        log.info("stopped watching %s", self.directory)
