"""Hot-reloading of the config file.

``ChangeWatcher`` watches the directory holding the config file. Every
file change in that directory starts a short debounce timer; when it
fires, a reload is posted to the apply thread. The notification thread
never touches the configuration store itself.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Final

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from passmenu.constants import RELOAD_DEBOUNCE_SECONDS
from passmenu.dispatch.protocols import Dispatcher
from passmenu.errors import DispatcherStoppedError
from passmenu.settings.manager import ConfigManager

logger: Final = logging.getLogger(__name__)


class _ReloadOnChange(FileSystemEventHandler):
    """Forward file events in the watched directory to the watcher."""

    def __init__(self, watcher: ChangeWatcher, path: Path) -> None:
        super().__init__()
        self._watcher = watcher
        self._path = path

    def on_modified(self, event: FileSystemEvent) -> None:
        self._watcher.handle_event(event, self._path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._watcher.handle_event(event, self._path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._watcher.handle_event(event, self._path)


class ChangeWatcher:
    """Reload the configuration when its file changes on disk.

    At most one directory watch is live at a time. Re-arming releases
    the previous watch first; ``close`` (or leaving the ``with`` block)
    releases it for good.

    Examples:
        with ApplyThread() as apply_thread, ChangeWatcher(manager, apply_thread) as watcher:
            watcher.enable_auto_reloading(path)
            ...
    """

    def __init__(
        self,
        manager: ConfigManager,
        dispatcher: Dispatcher,
        debounce_seconds: float = RELOAD_DEBOUNCE_SECONDS,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        """Initialize an unarmed watcher.

        Args:
            manager: Manager whose ``reload`` is called after a change
            dispatcher: Runs reloads on the apply thread
            debounce_seconds: Delay between a change and its reload
            observer_factory: Creates the watchdog observer
        """
        self.manager = manager
        self.dispatcher = dispatcher
        self.debounce_seconds = debounce_seconds
        self._observer_factory = observer_factory
        self._observer: BaseObserver | None = None
        self._path: Path | None = None
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()

    @property
    def is_armed(self) -> bool:
        return self._observer is not None

    @property
    def watched_path(self) -> Path | None:
        return self._path

    @property
    def pending_reloads(self) -> int:
        """Number of debounce timers that have not fired yet."""
        with self._lock:
            return len(self._timers)

    def enable_auto_reloading(self, path: Path | str) -> None:
        """Start watching the directory containing ``path``.

        Args:
            path: Config file to reload when its directory changes

        Raises:
            OSError: If the directory cannot be watched
        """
        path = Path(path)
        directory = path.parent if path.parent != Path(".") else Path.cwd()

        self.disable()

        observer = self._observer_factory()
        observer.schedule(_ReloadOnChange(self, path), str(directory), recursive=False)
        with self._lock:
            self._path = path
        try:
            observer.start()
        except Exception:
            with self._lock:
                self._path = None
            raise

        with self._lock:
            self._observer = observer
        logger.info("Watching %s for configuration changes", directory)

    def handle_event(self, event: FileSystemEvent, path: Path) -> None:
        """Schedule a debounced reload of ``path`` for one change event."""
        if event.is_directory:
            return

        def fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            self._dispatch_reload(event, path)

        timer = threading.Timer(self.debounce_seconds, fire)
        timer.daemon = True
        with self._lock:
            if self._path != path:
                return
            self._timers.add(timer)
        timer.start()

    def disable(self, timeout: float | None = 5.0) -> None:
        """Stop watching and cancel reloads that have not been dispatched yet.

        Safe to call multiple times.
        """
        with self._lock:
            observer, self._observer = self._observer, None
            timers = list(self._timers)
            self._timers.clear()
            self._path = None

        for timer in timers:
            timer.cancel()

        if observer is not None:
            observer.stop()
            observer.join(timeout)
            logger.debug("Stopped watching for configuration changes")

    close = disable

    def _dispatch_reload(self, event: FileSystemEvent, path: Path) -> None:
        logger.info(
            "Configuration file changed (change type: %s), attempting reload.",
            event.event_type,
        )
        try:
            self.dispatcher.post(lambda: self.manager.reload(path))
        except DispatcherStoppedError:
            logger.warning("Apply thread is not running, skipping reload of %s", path)

    def __enter__(self) -> ChangeWatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
