"""
talk-ha-bot CLI.

Commands:
  talk-ha-bot serve            Run the webhook server
  talk-ha-bot check-config     Validate config.yaml
  talk-ha-bot sign <message>   Compute a Talk signature
  talk-ha-bot parse <text>     Show how a chat line is interpreted
"""

import logging
from pathlib import Path
from typing import Optional

import click
import uvicorn

from talk_ha_bot import __version__
from talk_ha_bot.cli.common import config_option, console, load_config_or_exit
from talk_ha_bot.cli.tools import parse_cmd, sign_cmd

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)


@click.group()
@click.version_option(__version__)
def main():
    """Nextcloud Talk bot relaying @ha commands to Home Assistant."""


@main.command("serve")
@config_option
@click.option("--host", default=None, help="Bind address (overrides bot.host)")
@click.option("--port", type=int, default=None, help="Port (overrides bot.port)")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="INFO")
def serve(config_path: Optional[Path], host: Optional[str], port: Optional[int], log_level: str):
    """Listen for Talk webhook calls on POST /message."""
    from talk_ha_bot.server import create_app

    _setup_logging(log_level.upper())
    config = load_config_or_exit(config_path)
    host = host or config.host
    port = port or config.port

    logging.getLogger(__name__).info("Listening on %s:%d", host, port)
    uvicorn.run(create_app(config), host=host, port=port, log_level=log_level.lower())


@main.command("check-config")
@config_option
def check_config(config_path: Optional[Path]):
    """Validate the config file and print it with the secret masked."""
    config = load_config_or_exit(config_path)
    console.print("[green]Config OK[/green]")
    console.print_json(data=config.redacted())


main.add_command(sign_cmd)
main.add_command(parse_cmd)


if __name__ == "__main__":
    main()
