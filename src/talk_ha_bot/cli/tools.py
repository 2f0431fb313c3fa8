"""CLI: talk-ha-bot sign|parse"""

import json
from pathlib import Path
from typing import Optional

import click

from talk_ha_bot.cli.common import config_option, console, load_config_or_exit
from talk_ha_bot.commands import DEFAULT_MARKER, NoMatch, parse_command
from talk_ha_bot.signature import generate_nonce, sign


@click.command("sign")
@click.argument("message")
@config_option
@click.option("--secret", default=None, help="Shared secret (instead of reading the config file)")
@click.option("--nonce", default=None, help="Nonce to sign with (default: a fresh random one)")
@click.option("--json-output", "--json", is_flag=True)
def sign_cmd(message: str, config_path: Optional[Path], secret: Optional[str], nonce: Optional[str], json_output: bool):
    """Sign MESSAGE the way Talk and the bot do (HMAC-SHA256 of nonce + message)."""
    if secret is None:
        secret = load_config_or_exit(config_path).secret
    nonce = nonce or generate_nonce()
    signature = sign(message, nonce, secret)
    if json_output:
        click.echo(json.dumps({"random": nonce, "signature": signature}))
        return
    console.print(f"[bold]Random:[/bold]    {nonce}")
    console.print(f"[bold]Signature:[/bold] {signature}")


@click.command("parse")
@click.argument("text")
@click.option("--marker", default=DEFAULT_MARKER, show_default=True)
def parse_cmd(text: str, marker: str):
    """Show whether TEXT would trigger a Home Assistant call."""
    result = parse_command(text, marker)
    if isinstance(result, NoMatch):
        console.print(f"[yellow]Not a command[/yellow] ({result.reason})")
        return
    console.print(f"[green]Command[/green] action={result.action} target={result.target}")
    click.echo(result.model_dump_json())
