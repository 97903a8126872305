"""Lifecycle of the config file on disk.

``ConfigManager`` creates the file from the bundled default on first run,
gates loading on the file's ``config-version`` tag, moves outdated files
aside, and re-reads the file when it changes.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import BinaryIO, Final

from passmenu.constants import CONFIG_VERSION_KEY, DEFAULT_CONFIG_RESOURCE, LAST_CONFIG_VERSION
from passmenu.settings.deserializer import Deserializer, default_deserializer
from passmenu.settings.models import Config
from passmenu.settings.store import ConfigurationProvider

logger: Final = logging.getLogger(__name__)

DefaultConfigSource = Callable[[], BinaryIO]


class LoadResult(Enum):
    """What state a load attempt left the config file and store in."""

    NEW_FILE_CREATED = "new-file-created"
    FILE_CREATION_FAILURE = "file-creation-failure"
    NEEDS_UPGRADE = "needs-upgrade"
    SUCCESS = "success"


def bundled_default_config() -> BinaryIO:
    """Open the default configuration shipped with the package."""
    resource = resources.files("passmenu") / "resources" / DEFAULT_CONFIG_RESOURCE
    return resource.open("rb")


class ConfigManager:
    """Load, reload and back up the configuration file.

    Successful loads and reloads replace the value held by the
    ``ConfigurationProvider``; every other outcome leaves it untouched.

    Examples:
        provider = ConfigurationProvider()
        manager = ConfigManager(provider)

        result = manager.load(path)
        if result is LoadResult.NEEDS_UPGRADE:
            manager.backup(path)
            result = manager.load(path)
    """

    def __init__(
        self,
        provider: ConfigurationProvider,
        deserializer: Deserializer | None = None,
        default_config: DefaultConfigSource | None = None,
        expected_version: str = LAST_CONFIG_VERSION,
    ) -> None:
        """Initialize the manager.

        Args:
            provider: Store that receives successfully decoded configurations
            deserializer: Optional custom deserializer
            default_config: Optional source of the default file contents
            expected_version: Version tag a file must carry to be loaded
        """
        self.provider = provider
        self.deserializer = deserializer or default_deserializer()
        self.default_config = default_config or bundled_default_config
        self.expected_version = expected_version

    def load(self, path: Path | str) -> LoadResult:
        """Load the config file, creating it first if it does not exist.

        Args:
            path: Location of the config file

        Returns:
            NEW_FILE_CREATED if a default file was written (nothing decoded),
            FILE_CREATION_FAILURE if that file could not be written,
            NEEDS_UPGRADE if the file's version tag is missing or outdated,
            SUCCESS if the file was decoded and made active

        Raises:
            DecodeError: If the file is malformed or does not fit the schema
        """
        path = Path(path)

        if not path.is_file():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                self._write_default(path)
            except OSError as exc:
                logger.error("Could not create configuration file %s: %s", path, exc)
                return LoadResult.FILE_CREATION_FAILURE
            logger.info("Created default configuration file at %s", path)
            return LoadResult.NEW_FILE_CREATED

        if not self._version_matches(path):
            return LoadResult.NEEDS_UPGRADE

        self.provider.replace(self._decode(path))
        logger.info("Configuration loaded from %s", path)
        return LoadResult.SUCCESS

    def reload(self, path: Path | str) -> None:
        """Re-read the config file and apply it if it decodes cleanly.

        Failures are logged and otherwise ignored; the previous
        configuration stays in effect.

        Args:
            path: Location of the config file
        """
        try:
            config = self._decode(Path(path))
        except Exception:
            logger.exception("Could not reload configuration file %s, keeping previous settings", path)
            return

        self.provider.replace(config)
        logger.info("Configuration file reloaded successfully.")

    def backup(self, path: Path | str) -> Path:
        """Move the config file aside and write a fresh default in its place.

        The file is renamed to ``<stem>-backup<ext>``, or to the first free
        ``<stem>-backup-N<ext>`` for N = 2, 3, ...

        Args:
            path: Location of the config file

        Returns:
            Path the old file was moved to

        Raises:
            OSError: If the file cannot be renamed; no default is written
        """
        path = Path(path)
        backup_path = path.with_name(f"{path.stem}-backup{path.suffix}")
        counter = 2
        while backup_path.exists():
            backup_path = path.with_name(f"{path.stem}-backup-{counter}{path.suffix}")
            counter += 1

        path.rename(backup_path)
        logger.info("Moved configuration file %s to %s", path, backup_path)

        self._write_default(path)
        logger.info("Wrote default configuration file to %s", path)
        return backup_path

    # ---- helpers ----
    def _write_default(self, path: Path) -> None:
        with self.default_config() as source, path.open("wb") as target:
            shutil.copyfileobj(source, target)

    def _version_matches(self, path: Path) -> bool:
        with path.open("r", encoding="utf-8") as reader:
            probe = self.deserializer.deserialize(reader, dict)

        if probe is None or CONFIG_VERSION_KEY not in probe:
            logger.info("Configuration file %s has no %s, upgrade needed", path, CONFIG_VERSION_KEY)
            return False

        version = probe[CONFIG_VERSION_KEY]
        if not isinstance(version, str) or version != self.expected_version:
            logger.info(
                "Configuration file %s has version %r, expected %r; upgrade needed",
                path,
                version,
                self.expected_version,
            )
            return False
        return True

    def _decode(self, path: Path) -> Config:
        with path.open("r", encoding="utf-8") as reader:
            return self.deserializer.deserialize(reader, Config)
