"""Dedicated thread that applies configuration changes.

Configuration writes and the UI resources a reload creates must all be
made on one thread. ``ApplyThread`` is that thread for hosts that do not
bring their own UI loop: work posted from any thread is queued and run
one callback at a time, in order.

Usage:
    with ApplyThread() as apply_thread:
        result = apply_thread.invoke(lambda: manager.load(path))  # waits
        apply_thread.post(lambda: manager.reload(path))           # returns at once
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, Final, TypeVar

from passmenu.errors import DispatcherStoppedError

logger: Final = logging.getLogger(__name__)

T = TypeVar("T")

_Work = tuple[Callable[[], Any], "Future[Any] | None"]
_STOP: Final = object()


class ApplyThread:
    """Single consumer thread executing dispatched callbacks sequentially.

    Implements the ``Dispatcher`` protocol. Errors raised by posted
    callbacks are logged and the thread keeps running; errors raised by
    invoked callbacks are re-raised in the caller.
    """

    def __init__(self, name: str = "passmenu-apply") -> None:
        """Initialize the apply thread (not yet started).

        Args:
            name: Thread name, shown in log records
        """
        self.name = name
        self._thread: threading.Thread | None = None
        self._queue: queue.Queue[_Work | object] = queue.Queue()
        self._accepting = False
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the worker thread.

        Safe to call multiple times (no-op if already started).
        """
        with self._lock:
            if self._accepting:
                return
            self._queue = queue.Queue()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._queue,),
                name=self.name,
                daemon=True,
            )
            self._accepting = True
            self._thread.start()
            logger.debug("Apply thread %s started", self.name)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop accepting work, finish what is queued, and join the thread.

        Safe to call multiple times.

        Args:
            timeout: Seconds to wait for the thread to finish
        """
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            self._queue.put(_STOP)
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Apply thread %s did not stop within %.1fs", self.name, timeout)
        logger.debug("Apply thread %s stopped", self.name)

    @property
    def is_running(self) -> bool:
        return self._accepting and self._thread is not None and self._thread.is_alive()

    def is_current(self) -> bool:
        """Whether the caller is running on this apply thread."""
        return self._thread is not None and threading.current_thread() is self._thread

    def post(self, callback: Callable[[], object]) -> None:
        """Queue ``callback`` and return without waiting for it."""
        self._submit(callback, None)

    def invoke(self, callback: Callable[[], T]) -> T:
        """Run ``callback`` on the apply thread and return its result.

        Called from the apply thread itself, the callback runs inline.
        """
        if self.is_current():
            return callback()

        future: Future[T] = Future()
        self._submit(callback, future)
        return future.result()

    def _submit(self, callback: Callable[[], Any], future: Future[Any] | None) -> None:
        with self._lock:
            if not self._accepting:
                raise DispatcherStoppedError(f"Apply thread {self.name} is not running")
            self._queue.put((callback, future))

    def _run(self, work: queue.Queue[_Work | object]) -> None:
        while True:
            item = work.get()
            if item is _STOP:
                break
            callback, future = item  # type: ignore[misc]

            if future is not None and not future.set_running_or_notify_cancel():
                continue
            try:
                result = callback()
            except Exception as exc:
                if future is None:
                    logger.exception("Error in callback dispatched to %s", self.name)
                else:
                    future.set_exception(exc)
            else:
                if future is not None:
                    future.set_result(result)

    def __enter__(self) -> ApplyThread:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
