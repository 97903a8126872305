"""Configuration settings management.

This package provides:
- Config: Settings schema decoded from passmenu.yaml
- Deserializer: YAML decoding with pluggable scalar converters
- ConfigurationProvider: Holder of the configuration in effect
- ConfigManager: Load, reload and backup of the config file
"""

from passmenu.settings.deserializer import Deserializer, default_deserializer
from passmenu.settings.manager import ConfigManager, LoadResult, bundled_default_config
from passmenu.settings.models import (
    Config,
    HotkeyAction,
    HotkeyConfig,
    HotkeyOptions,
    InterfaceConfig,
    NotificationConfig,
    PasswordEditorConfig,
    PasswordStoreConfig,
    StyleConfig,
)
from passmenu.settings.store import ConfigurationProvider
from passmenu.settings.types import (
    Brush,
    BrushConverter,
    Thickness,
    ThicknessConverter,
    TypeConverter,
    Width,
    WidthConverter,
)

__all__ = [
    "Brush",
    "BrushConverter",
    "Config",
    "ConfigManager",
    "ConfigurationProvider",
    "Deserializer",
    "HotkeyAction",
    "HotkeyConfig",
    "HotkeyOptions",
    "InterfaceConfig",
    "LoadResult",
    "NotificationConfig",
    "PasswordEditorConfig",
    "PasswordStoreConfig",
    "StyleConfig",
    "Thickness",
    "ThicknessConverter",
    "TypeConverter",
    "Width",
    "WidthConverter",
    "bundled_default_config",
    "default_deserializer",
]
