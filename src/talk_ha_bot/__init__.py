"""
talk-ha-bot — Nextcloud Talk bot for Home Assistant.

Verifies signed webhook calls from Talk, turns ``@ha <action> <target>``
chat lines into Home Assistant webhook calls and answers in the room.
"""

__version__ = "0.1.0"

from talk_ha_bot.commands import NoMatch, parse_command
from talk_ha_bot.config import BotConfig, load_config
from talk_ha_bot.errors import (
    AutomationDispatchFailure,
    BodyReadError,
    BotError,
    ConfigError,
    EnvelopeDecodeError,
    ReplyDeliveryFailure,
    RichTextDecodeError,
    SignatureMismatch,
)
from talk_ha_bot.gateway import GatewayResult, InboundGateway, Outcome
from talk_ha_bot.models.message import Command, Message, Reply, RichObjectMessage
from talk_ha_bot.signature import generate_nonce, sign, verify
from talk_ha_bot.transport.http import AutomationClient, OutboundNotifier

__all__ = [
    "AutomationClient",
    "AutomationDispatchFailure",
    "BodyReadError",
    "BotConfig",
    "BotError",
    "Command",
    "ConfigError",
    "EnvelopeDecodeError",
    "GatewayResult",
    "InboundGateway",
    "Message",
    "NoMatch",
    "OutboundNotifier",
    "Outcome",
    "Reply",
    "ReplyDeliveryFailure",
    "RichObjectMessage",
    "RichTextDecodeError",
    "SignatureMismatch",
    "generate_nonce",
    "load_config",
    "parse_command",
    "sign",
    "verify",
]
