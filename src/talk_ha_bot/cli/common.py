"""Helpers shared by the CLI command modules."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from talk_ha_bot.config import BotConfig, load_config
from talk_ha_bot.errors import ConfigError

console = Console()

config_option = click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./config.yaml, ./config.yml or ./config.json)",
)


def load_config_or_exit(config_path: Optional[Path]) -> BotConfig:
    """Load the config, printing the problems and exiting with status 1 if it is invalid."""
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Fatal error config file: {e}[/red]")
        if e.details:
            for err in e.details.get("errors", []):
                loc = ".".join(str(part) for part in err.get("loc", ()))
                console.print(f"  [red]bot.{loc}[/red]: {err.get('msg')}")
        raise SystemExit(1)
