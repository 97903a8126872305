"""passmenu configuration CLI.

This module provides the command-line interface for the configuration
subsystem: the startup routine that loads (and upgrades) the config file
and keeps it hot-reloaded, plus helpers to validate, back up, inspect and
create config files.
"""

from __future__ import annotations

import logging
import shutil
import sys
import time
from pathlib import Path
from typing import Final

import typer
import yaml
from dotenv import load_dotenv

from passmenu.constants import CONFIG_PATH_ENVVAR, CONFIG_VERSION_KEY, DEFAULT_CONFIG_PATH
from passmenu.controller import ConfigController
from passmenu.errors import ConfigLoadError, DecodeError
from passmenu.settings import ConfigManager, ConfigurationProvider, LoadResult
from passmenu.settings.manager import bundled_default_config

# Pick up PASSMENU_CONFIG from a .env file
load_dotenv()

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="passmenu configuration CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "passmenu.cli"

CONFIG_FILE_OPTION = typer.Option(
    DEFAULT_CONFIG_PATH,
    "--config-file",
    "-c",
    envvar=CONFIG_PATH_ENVVAR,
    dir_okay=False,
    help="Configuration file to use",
)
EXISTING_CONFIG_OPTION = typer.Option(
    DEFAULT_CONFIG_PATH,
    "--config-file",
    "-c",
    envvar=CONFIG_PATH_ENVVAR,
    exists=True,
    dir_okay=False,
    help="Configuration file to use",
)
EXISTING_FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False)
DST_ARGUMENT = typer.Argument(..., dir_okay=False, help="Output passmenu.yaml")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
WATCH_OPTION = typer.Option(True, "--watch/--no-watch", help="Reload the file when it changes")
FORCE_OPTION = typer.Option(False, "--force", "-f", help="Overwrite an existing file")


@app.command()
def run(
    config_file: Path = CONFIG_FILE_OPTION,
    watch: bool = WATCH_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Load the configuration and keep it up to date until interrupted."""
    with ConfigController(config_file, debug=debug) as controller:
        try:
            result = controller.start(watch=watch)
        except (ConfigLoadError, DecodeError) as exc:
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        if result is LoadResult.NEW_FILE_CREATED:
            typer.echo(
                f"A new configuration file has been created at {config_file}. "
                "Edit it to your liking and restart passmenu."
            )
            return

        if controller.backup_path is not None:
            typer.secho(
                f"Your configuration file was outdated. It has been moved to "
                f"{controller.backup_path} and replaced with a new default.",
                fg=typer.colors.YELLOW,
            )
        typer.echo(f"Configuration loaded from {config_file}")

        if not watch:
            return

        typer.echo("Watching for changes - press Ctrl+C to quit")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            typer.echo("Stopping")


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path = EXISTING_FILE_ARGUMENT):
    """Check a config file's version and validate it against the schema."""
    manager = ConfigManager(ConfigurationProvider())
    try:
        result = manager.load(file)
    except DecodeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if result is not LoadResult.SUCCESS:
        typer.secho(
            f"Config has an outdated {CONFIG_VERSION_KEY} (expected {manager.expected_version!r})",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo("✅ Config valid")


@config_app.command("backup")
def backup_config(file: Path = EXISTING_FILE_ARGUMENT):
    """Move a config file aside and replace it with the default."""
    manager = ConfigManager(ConfigurationProvider())
    backup_path = manager.backup(file)
    typer.secho(f"Config moved to {backup_path}, default written to {file}", fg=typer.colors.GREEN)


@config_app.command("default")
def write_default(dst: Path = DST_ARGUMENT, force: bool = FORCE_OPTION):
    """Write the default configuration file."""
    if dst.exists() and not force:
        typer.secho(f"{dst} already exists (use --force to overwrite)", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    with bundled_default_config() as source, dst.open("wb") as target:
        shutil.copyfileobj(source, target)
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


@config_app.command("show")
def show_config(config_file: Path = EXISTING_CONFIG_OPTION):
    """Print the effective configuration, defaults included."""
    manager = ConfigManager(ConfigurationProvider())
    try:
        result = manager.load(config_file)
    except DecodeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if result is not LoadResult.SUCCESS:
        typer.secho(f"Could not load {config_file} ({result.name})", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    data: dict[str, object] = {CONFIG_VERSION_KEY: manager.expected_version}
    data.update(manager.provider.current.model_dump(mode="json", by_alias=True))
    typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
