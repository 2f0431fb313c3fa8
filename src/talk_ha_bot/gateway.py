"""
Inbound message handling.

    Received -> SignatureVerified -> Decoded -> NotACommand | CommandDispatched

Every request ends in exactly one Outcome. Only COMMAND_DISPATCHED has side
effects (webhook call and chat reply); the HTTP status never reflects the
automation result, the chat reply does.
"""

import logging
import secrets
from enum import Enum
from typing import Mapping, Optional

from talk_ha_bot.commands import NoMatch, parse_command
from talk_ha_bot.config import BotConfig
from talk_ha_bot.errors import EnvelopeDecodeError, RichTextDecodeError, SignatureMismatch
from talk_ha_bot.models.message import Command
from talk_ha_bot.signature import verify
from talk_ha_bot.transport.envelope import decode_envelope, decode_rich_text
from talk_ha_bot.transport.http import AutomationClient, OutboundNotifier

BACKEND_HEADER = "X-Nextcloud-Talk-Backend"
RANDOM_HEADER = "X-Nextcloud-Talk-Random"
SIGNATURE_HEADER = "X-Nextcloud-Talk-Signature"

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    BODY_UNREADABLE = "body_unreadable"
    SIGNATURE_MISMATCH = "signature_mismatch"
    ENVELOPE_INVALID = "envelope_invalid"
    NOT_A_MESSAGE = "not_a_message"
    RICH_TEXT_INVALID = "rich_text_invalid"
    NOT_A_COMMAND = "not_a_command"
    COMMAND_DISPATCHED = "command_dispatched"


# (status, response body) per outcome
HTTP_RESPONSES: dict[Outcome, tuple[int, str]] = {
    Outcome.BODY_UNREADABLE: (400, "can't read body"),
    Outcome.SIGNATURE_MISMATCH: (400, "Invalid signature"),
    Outcome.ENVELOPE_INVALID: (400, "Invalid body"),
    Outcome.NOT_A_MESSAGE: (200, "Received"),
    Outcome.RICH_TEXT_INVALID: (200, "Received"),
    Outcome.NOT_A_COMMAND: (200, "Received"),
    Outcome.COMMAND_DISPATCHED: (200, "Received"),
}


class GatewayResult:
    __slots__ = ("outcome", "command", "dispatched", "reply_text", "replied")

    def __init__(
        self,
        outcome: Outcome,
        command: Optional[Command] = None,
        dispatched: Optional[bool] = None,
        reply_text: Optional[str] = None,
        replied: Optional[bool] = None,
    ):
        self.outcome = outcome
        self.command = command
        self.dispatched = dispatched
        self.reply_text = reply_text
        self.replied = replied

    @property
    def status_code(self) -> int:
        return HTTP_RESPONSES[self.outcome][0]

    @property
    def detail(self) -> str:
        return HTTP_RESPONSES[self.outcome][1]

    def __repr__(self) -> str:
        return f"GatewayResult(outcome={self.outcome.value!r}, dispatched={self.dispatched!r})"


def _header(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive lookup that also works for plain dicts."""
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, v in headers.items():
            if key.lower() == lowered:
                return v
        return ""
    return value


class InboundGateway:
    def __init__(self, config: BotConfig, automation: AutomationClient, notifier: OutboundNotifier):
        self._config = config
        self._automation = automation
        self._notifier = notifier

    def check_signature(self, body: bytes, nonce: str, signature: str) -> None:
        if not verify(body, nonce, signature, self._config.secret):
            raise SignatureMismatch()

    def pick_response(self) -> str:
        return secrets.choice(self._config.responses)

    async def handle(self, body: bytes, headers: Mapping[str, str]) -> GatewayResult:
        backend = _header(headers, BACKEND_HEADER)
        nonce = _header(headers, RANDOM_HEADER)
        signature = _header(headers, SIGNATURE_HEADER)

        try:
            self.check_signature(body, nonce, signature)
        except SignatureMismatch as e:
            logger.warning("Error validating signature from backend %r: %s", backend, e)
            return GatewayResult(Outcome.SIGNATURE_MISMATCH)

        try:
            message = decode_envelope(body)
        except EnvelopeDecodeError as e:
            logger.warning("Error invalid body: %s %s", e, e.details)
            return GatewayResult(Outcome.ENVELOPE_INVALID)

        if not message.is_chat_message:
            logger.debug("Ignoring %s event %r", message.type, message.object.name)
            return GatewayResult(Outcome.NOT_A_MESSAGE)

        try:
            rich = decode_rich_text(message.object.content)
        except RichTextDecodeError as e:
            logger.warning("Dropping message %s with unreadable content: %s", message.object.id, e.details)
            return GatewayResult(Outcome.RICH_TEXT_INVALID)

        parsed = parse_command(rich.message, self._config.marker)
        if isinstance(parsed, NoMatch):
            return GatewayResult(Outcome.NOT_A_COMMAND)

        dispatched = await self._automation.dispatch(parsed)
        reply_text = self.pick_response() if dispatched else self._config.error_response
        replied = await self._notifier.notify(backend, message.target.id, message.object.id, reply_text)
        return GatewayResult(
            Outcome.COMMAND_DISPATCHED,
            command=parsed,
            dispatched=dispatched,
            reply_text=reply_text,
            replied=replied,
        )
