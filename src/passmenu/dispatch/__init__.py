"""Apply-thread dispatch - runs configuration work on a single thread."""

from passmenu.dispatch.apply_thread import ApplyThread
from passmenu.dispatch.protocols import Dispatcher, InlineDispatcher

__all__ = ["ApplyThread", "Dispatcher", "InlineDispatcher"]
