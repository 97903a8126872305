from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from passmenu.cli import app

runner = CliRunner()

CONFIG_YAML = """\
config-version: "1.0"
interface:
  directory-separator: ":"
  style:
    width: narrow
"""


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "run" in result.output
    assert "config" in result.output


def test_run_first_time_creates_file_then_loads(tmp_path: Path, default_bytes: bytes) -> None:
    path = tmp_path / "passmenu.yaml"

    first = runner.invoke(app, ["run", "--no-watch", "--config-file", str(path)])
    assert first.exit_code == 0
    assert "A new configuration file has been created" in first.output
    assert path.read_bytes() == default_bytes

    second = runner.invoke(app, ["run", "--no-watch", "--config-file", str(path)])
    assert second.exit_code == 0
    assert f"Configuration loaded from {path}" in second.output


def test_run_reads_path_from_environment(tmp_path: Path) -> None:
    path = tmp_path / "from-env.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    result = runner.invoke(app, ["run", "--no-watch"], env={"PASSMENU_CONFIG": str(path)})

    assert result.exit_code == 0
    assert "Configuration loaded from" in result.output


def test_run_upgrades_outdated_file(tmp_path: Path) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text('config-version: "0.1"\n', encoding="utf-8")

    result = runner.invoke(app, ["run", "--no-watch", "--config-file", str(path)])

    assert result.exit_code == 0
    assert "outdated" in result.output
    assert (tmp_path / "passmenu-backup.yaml").read_text(encoding="utf-8") == 'config-version: "0.1"\n'


def test_run_reports_malformed_file(tmp_path: Path) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text('config-version: "1.0"\ninterface:\n  clipboard-timeout: soon\n', encoding="utf-8")

    result = runner.invoke(app, ["run", "--no-watch", "--config-file", str(path)])

    assert result.exit_code == 1


def test_validate_accepts_current_file(tmp_path: Path) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    result = runner.invoke(app, ["config", "validate", str(path)])

    assert result.exit_code == 0
    assert "Config valid" in result.output


@pytest.mark.parametrize(
    "text",
    [
        'config-version: "0.9"\n',
        'config-version: "1.0"\ninterface:\n  style:\n    width: enormous\n',
        "interface: [oops\n",
    ],
)
def test_validate_rejects_bad_files(tmp_path: Path, text: str) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text(text, encoding="utf-8")

    result = runner.invoke(app, ["config", "validate", str(path)])

    assert result.exit_code == 1


def test_validate_requires_existing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["config", "validate", str(tmp_path / "nope.yaml")])
    assert result.exit_code != 0


def test_backup_command(tmp_path: Path, default_bytes: bytes) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text("old: true\n", encoding="utf-8")

    result = runner.invoke(app, ["config", "backup", str(path)])

    assert result.exit_code == 0
    assert "passmenu-backup.yaml" in result.output
    assert path.read_bytes() == default_bytes
    assert (tmp_path / "passmenu-backup.yaml").read_text(encoding="utf-8") == "old: true\n"


def test_default_writes_bundled_file(tmp_path: Path, default_bytes: bytes) -> None:
    dst = tmp_path / "passmenu.yaml"

    result = runner.invoke(app, ["config", "default", str(dst)])

    assert result.exit_code == 0
    assert dst.read_bytes() == default_bytes


def test_default_refuses_to_overwrite_without_force(tmp_path: Path, default_bytes: bytes) -> None:
    dst = tmp_path / "passmenu.yaml"
    dst.write_text("mine\n", encoding="utf-8")

    refused = runner.invoke(app, ["config", "default", str(dst)])
    assert refused.exit_code == 1
    assert dst.read_text(encoding="utf-8") == "mine\n"

    forced = runner.invoke(app, ["config", "default", "--force", str(dst)])
    assert forced.exit_code == 0
    assert dst.read_bytes() == default_bytes


def test_show_prints_effective_config(tmp_path: Path) -> None:
    path = tmp_path / "passmenu.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")

    result = runner.invoke(app, ["config", "show", "--config-file", str(path)])

    assert result.exit_code == 0
    shown = yaml.safe_load(result.output)
    assert list(shown)[0] == "config-version"
    assert shown["config-version"] == "1.0"
    assert shown["interface"]["directory-separator"] == ":"
    assert "follow-cursor" in shown["interface"]
    assert shown["hotkeys"][0] == {"hotkey": "ctrl alt p", "action": "decrypt-password"}
