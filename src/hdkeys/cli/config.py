"""
Configuration commands: config-init, languages, coins, version.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from hdkeys.bip39 import list_languages
from hdkeys.bip44 import COIN_TYPES
from hdkeys.cli import app
from hdkeys.settings import ensure_config_file, reset_settings
from hdkeys.version import get_version


@app.command()
def config_init(
    data_dir: Annotated[
        Path | None,
        typer.Option(
            "--data-dir",
            "-d",
            help="Write config.toml here instead of the active config path",
        ),
    ] = None,
) -> None:
    """Initialize the config file with default settings."""
    reset_settings()

    config_path = ensure_config_file(data_dir)
    typer.echo(f"Config file created at: {config_path}")
    typer.echo("\nAll settings are commented out by default.")
    typer.echo("Edit the file to customize your configuration.")
    typer.echo("\nPriority (highest to lowest):")
    typer.echo("  1. CLI arguments")
    typer.echo("  2. Environment variables")
    typer.echo("  3. Config file")
    typer.echo("  4. Built-in defaults")


@app.command()
def languages() -> None:
    """List the supported BIP39 wordlist languages."""
    for language in sorted(list_languages()):
        typer.echo(language)


@app.command()
def coins() -> None:
    """List the registered BIP44 coin types."""
    for coin in sorted(COIN_TYPES.values(), key=lambda c: c.id):
        typer.echo(f"{coin.id:<6} {coin.symbol:<6} {coin.name}")


@app.command()
def version() -> None:
    """Show the hdkeys version."""
    typer.echo(f"hdkeys {get_version()}")
