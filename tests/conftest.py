from pathlib import Path

import pytest

from passmenu.settings import ConfigManager, ConfigurationProvider, bundled_default_config


@pytest.fixture
def default_bytes() -> bytes:
    with bundled_default_config() as f:
        return f.read()


@pytest.fixture
def provider() -> ConfigurationProvider:
    return ConfigurationProvider()


@pytest.fixture
def manager(provider: ConfigurationProvider) -> ConfigManager:
    return ConfigManager(provider)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "passmenu.yaml"
