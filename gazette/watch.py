"""Watch-and-rebuild loop for Gazette.

Filesystem events from watchdog are pushed onto a queue. A ticker drains the
queue once per interval; a tick that drained at least one event requests a
single rebuild, so a burst of saves costs one build.

Rebuilds run on their own worker thread, never on the observer thread, and
are serialized: a request made while a build is running is held in a single
slot and produces exactly one follow-up build. A failed rebuild is logged and
the watcher goes back to idle; the next change triggers another attempt.

Key classes:
- Watcher: The debounce/rebuild state machine.
- WatchState: IDLE or BUILDING.
"""

from __future__ import annotations

import enum
import logging
import queue
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0

# opened and closed_no_write fire on every read, including the rebuild's own
CHANGE_EVENTS = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)


class WatchState(enum.Enum):
    IDLE = "idle"
    BUILDING = "building"


class _ChangeHandler(FileSystemEventHandler):
    """Forwards file events to the watcher's queue."""

    def __init__(self, watcher: Watcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent):
        if event.is_directory or event.event_type not in CHANGE_EVENTS:
            return
        self.watcher.push(Path(str(event.src_path)))
        if event.event_type == EVENT_TYPE_MOVED:
            self.watcher.push(Path(str(event.dest_path)))


class Watcher:
    """Debounced, serialized rebuild loop.

    Attributes:
        rebuild: Callable running one full build; exceptions are logged.
        paths: Directories (watched recursively) or files to watch.
        interval: Seconds between queue drains.
        ignore: Directories whose events are dropped (build output).
        on_rebuilt: Called with the rebuild's return value after a success.
        state: Current WatchState.
        builds: Number of completed rebuild attempts.
    """

    def __init__(
        self,
        rebuild: Callable[[], Any],
        paths: Iterable[Path],
        interval: float = DEFAULT_INTERVAL,
        ignore: Iterable[Path] = (),
        on_rebuilt: Callable[[Any], None] | None = None,
    ):
        self.rebuild = rebuild
        self.paths = list(paths)
        self.interval = interval
        self.ignore = [Path(p).resolve() for p in ignore]
        self.on_rebuilt = on_rebuilt
        self.state = WatchState.IDLE
        self.builds = 0
        self.events: queue.Queue[Path] = queue.Queue()
        self._requested = threading.Event()
        self._stopped = threading.Event()
        self._threads: list[threading.Thread] = []
        self._observer: Observer | None = None

    def is_watched(self, path: Path) -> bool:
        """Whether *path* is a watched file or lies in a watched directory."""
        resolved = path.resolve()
        for ignored in self.ignore:
            if resolved.is_relative_to(ignored):
                return False
        for watched in self.paths:
            target = watched.resolve()
            if resolved == target or (watched.is_dir() and resolved.is_relative_to(target)):
                return True
        return False

    def push(self, path: Path) -> None:
        """Queue a changed path unless it is ignored or not watched."""
        if self.is_watched(path):
            self.events.put(path)

    def drain(self) -> list[Path]:
        """Take every queued event without blocking."""
        drained = []
        while True:
            try:
                drained.append(self.events.get_nowait())
            except queue.Empty:
                return drained

    def tick(self) -> bool:
        """Drain the queue; request one rebuild if anything changed.

        Returns:
            True when a rebuild was requested.
        """
        changed = self.drain()
        if not changed:
            return False
        logger.info("Change detected (%d event(s)); rebuilding...", len(changed))
        self.request_rebuild()
        return True

    def request_rebuild(self) -> None:
        # repeated requests before the worker wakes collapse into one
        self._requested.set()

    @property
    def rebuild_pending(self) -> bool:
        return self._requested.is_set()

    def run_pending(self) -> bool:
        """Run the requested rebuild, if any, on the calling thread.

        Returns:
            True when a rebuild ran.
        """
        if not self._requested.is_set():
            return False
        self._requested.clear()
        self._run_rebuild()
        return True

    def _run_rebuild(self) -> None:
        self.state = WatchState.BUILDING
        try:
            result = self.rebuild()
        except Exception:
            logger.exception("Rebuild failed; keeping the last successful build")
        else:
            logger.info("Rebuild finished")
            if self.on_rebuilt is not None:
                self.on_rebuilt(result)
        finally:
            self.builds += 1
            self.state = WatchState.IDLE

    def _tick_loop(self) -> None:
        while not self._stopped.wait(self.interval):
            self.tick()

    def _worker_loop(self) -> None:
        while not self._stopped.is_set():
            if self._requested.wait(self.interval):
                self.run_pending()

    def start(self) -> None:
        """Start the observer, the ticker and the rebuild worker."""
        handler = _ChangeHandler(self)
        observer = Observer()
        for path in self.paths:
            if path.is_dir():
                observer.schedule(handler, str(path), recursive=True)
            elif path.exists():
                observer.schedule(handler, str(path.parent), recursive=False)
        observer.start()
        self._observer = observer
        self._stopped.clear()
        self._threads = [
            threading.Thread(target=self._tick_loop, name="gazette-ticker", daemon=True),
            threading.Thread(target=self._worker_loop, name="gazette-rebuild", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logger.info("Watching %s", ", ".join(str(p) for p in self.paths))

    def stop(self) -> None:
        """Stop watching and wait for a running rebuild to finish."""
        self._stopped.set()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        for thread in self._threads:
            thread.join()
        self._threads = []
