from pathlib import Path

# Version tag the bundled default carries; files with any other tag need an upgrade
LAST_CONFIG_VERSION = "1.0"

# Top-level key probed before a full decode
CONFIG_VERSION_KEY = "config-version"

# Delay between a file change notification and the reload it triggers
RELOAD_DEBOUNCE_SECONDS = 0.5

# Config file location
DEFAULT_CONFIG_FILENAME = "passmenu.yaml"
DEFAULT_CONFIG_PATH = Path("~/.config/passmenu").expanduser() / DEFAULT_CONFIG_FILENAME
CONFIG_PATH_ENVVAR = "PASSMENU_CONFIG"

# Packaged resource copied to create a new config file
DEFAULT_CONFIG_RESOURCE = "default-config.yaml"
