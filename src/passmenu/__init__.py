"""passmenu - configuration loading and hot-reloading for the passmenu desktop utility."""

__version__ = "0.1.0"

from .controller import ConfigController
from .dispatch import ApplyThread, Dispatcher, InlineDispatcher
from .errors import ConfigLoadError, DecodeError, DispatcherStoppedError, PassMenuError
from .settings import Config, ConfigManager, ConfigurationProvider, Deserializer, LoadResult
from .watcher import ChangeWatcher

# Define what gets imported with: from passmenu import *
__all__ = [
    "ApplyThread",
    "ChangeWatcher",
    "Config",
    "ConfigController",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigurationProvider",
    "DecodeError",
    "Deserializer",
    "Dispatcher",
    "DispatcherStoppedError",
    "InlineDispatcher",
    "LoadResult",
    "PassMenuError",
]
