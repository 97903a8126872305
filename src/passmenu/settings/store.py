"""Holder for the configuration currently in effect."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Final

from passmenu.settings.models import Config

logger: Final = logging.getLogger(__name__)

ConfigListener = Callable[[Config], None]


class ConfigurationProvider:
    """Process-wide slot holding the active ``Config``.

    Readers on any thread get either the old or the new value, never a
    mix: ``replace`` swaps a single reference. Only ``ConfigManager``
    writes to it, and only from the apply thread.

    Examples:
        provider = ConfigurationProvider()
        manager = ConfigManager(provider)
        manager.load(path)

        timeout = provider.current.interface.clipboard_timeout
    """

    def __init__(self, initial: Config | None = None) -> None:
        """Initialize with the built-in default unless a value is given."""
        self._config: Config = initial if initial is not None else Config()
        self._listeners: list[ConfigListener] = []

    @property
    def current(self) -> Config:
        """The active configuration."""
        return self._config

    def replace(self, config: Config) -> None:
        """Swap in a new configuration and notify listeners.

        Args:
            config: Fully decoded configuration to make active
        """
        if config is None:
            raise ValueError("Active configuration cannot be None")
        self._config = config

        for listener in list(self._listeners):
            try:
                listener(config)
            except Exception:
                logger.exception("Error in configuration listener %r", listener)

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """Call ``listener`` with each newly applied configuration.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
