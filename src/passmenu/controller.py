# filepath: src/passmenu/controller.py
"""Startup and shutdown of the configuration subsystem."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from passmenu.constants import RELOAD_DEBOUNCE_SECONDS
from passmenu.dispatch.apply_thread import ApplyThread
from passmenu.dispatch.protocols import Dispatcher
from passmenu.errors import ConfigLoadError
from passmenu.settings.manager import ConfigManager, LoadResult
from passmenu.settings.models import Config
from passmenu.settings.store import ConfigurationProvider
from passmenu.watcher import ChangeWatcher

logger: Final = logging.getLogger(__name__)


class ConfigController:
    """Owns the configuration subsystem for the lifetime of the process.

    This class wires the pieces together and drives them:
    - Loading the config file on the apply thread at startup
    - Backing up and replacing outdated files, then loading again
    - Arming the change watcher once a configuration is in effect
    - Releasing the watcher and the apply thread on shutdown

    Examples:
        with ConfigController(path) as controller:
            if controller.start() is LoadResult.NEW_FILE_CREATED:
                print("Edit the new config file and restart")
            timeout = controller.config.interface.clipboard_timeout
    """

    def __init__(
        self,
        config_path: Path | str,
        dispatcher: Dispatcher | None = None,
        manager: ConfigManager | None = None,
        debounce_seconds: float = RELOAD_DEBOUNCE_SECONDS,
        debug: bool = False,
    ):
        """Initialize the controller.

        Args:
            config_path: Path to the config file
            dispatcher: Optional apply-thread dispatcher owned by the host;
                a private ApplyThread is created otherwise
            manager: Optional custom config manager
            debounce_seconds: Delay between a file change and its reload
            debug: Enable debug logging
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        self.config_path = Path(config_path)
        self.manager = manager or ConfigManager(ConfigurationProvider())
        self.provider = self.manager.provider

        # Only a dispatcher created here is started and stopped here
        self._apply_thread = ApplyThread() if dispatcher is None else None
        self.dispatcher: Dispatcher = dispatcher or self._apply_thread  # type: ignore[assignment]

        self.watcher = ChangeWatcher(self.manager, self.dispatcher, debounce_seconds)
        self.backup_path: Path | None = None

    @property
    def config(self) -> Config:
        """The configuration currently in effect."""
        return self.provider.current

    def start(self, watch: bool = True) -> LoadResult:
        """Load the config file and optionally start hot-reloading it.

        Args:
            watch: Arm the change watcher after a successful load

        Returns:
            SUCCESS, or NEW_FILE_CREATED when a default file was written
            and the user should edit it before restarting

        Raises:
            ConfigLoadError: If the file could not be created or upgraded
            DecodeError: If the file is malformed or does not fit the schema
        """
        if self._apply_thread is not None:
            self._apply_thread.start()

        result = self.dispatcher.invoke(self._load)

        if result is LoadResult.SUCCESS and watch:
            self.watcher.enable_auto_reloading(self.config_path)
        return result

    def _load(self) -> LoadResult:
        result = self.manager.load(self.config_path)

        if result is LoadResult.NEEDS_UPGRADE:
            self.backup_path = self.manager.backup(self.config_path)
            logger.warning(
                "Configuration file is outdated; moved it to %s and wrote a new default",
                self.backup_path,
            )
            result = self.manager.load(self.config_path)
            if result is LoadResult.NEEDS_UPGRADE:
                raise ConfigLoadError(
                    result, self.config_path, "the default configuration has an unexpected version"
                )

        if result is LoadResult.FILE_CREATION_FAILURE:
            raise ConfigLoadError(result, self.config_path)
        return result

    def close(self) -> None:
        """Stop watching and stop the apply thread. Safe to call multiple times."""
        self.watcher.close()
        if self._apply_thread is not None:
            self._apply_thread.stop()

    def __enter__(self) -> ConfigController:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
