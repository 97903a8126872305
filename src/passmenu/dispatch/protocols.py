"""Dispatcher protocol for running configuration work on the apply thread."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Dispatcher(Protocol):
    """Protocol for running work on the apply thread.

    The configuration store is only written from the apply thread, and
    reloading builds UI-bound resources that must be created there. Hosts
    with their own UI loop can implement this protocol on top of it.
    """

    def post(self, callback: Callable[[], object]) -> None:
        """Queue ``callback`` to run on the apply thread and return immediately.

        Args:
            callback: Function to run
        """
        ...

    def invoke(self, callback: Callable[[], T]) -> T:
        """Run ``callback`` on the apply thread and wait for its result.

        Args:
            callback: Function to run

        Returns:
            Whatever ``callback`` returned

        Raises:
            Exception: Anything raised by ``callback``
        """
        ...


class InlineDispatcher:
    """Dispatcher that runs every callback on the calling thread.

    Suitable for tests and for hosts where the caller already is the
    apply thread.
    """

    def __init__(self) -> None:
        self.calls = 0

    def post(self, callback: Callable[[], object]) -> None:
        self.calls += 1
        callback()

    def invoke(self, callback: Callable[[], T]) -> T:
        self.calls += 1
        return callback()
