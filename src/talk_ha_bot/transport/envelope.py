"""
Envelope decoding and encoding for the Talk bot API.
"""

from typing import Union

from pydantic import ValidationError

from talk_ha_bot.errors import EnvelopeDecodeError, RichTextDecodeError
from talk_ha_bot.models.message import Command, Message, Reply, RichObjectMessage


def decode_envelope(body: Union[bytes, str]) -> Message:
    """Parse the inbound request body. Raises EnvelopeDecodeError if invalid."""
    try:
        return Message.model_validate_json(body)
    except ValidationError as e:
        raise EnvelopeDecodeError(details={"errors": e.errors(include_url=False, include_input=False)}) from e


def decode_rich_text(content: str) -> RichObjectMessage:
    """Parse ``object.content`` of a chat message. Raises RichTextDecodeError if invalid."""
    try:
        return RichObjectMessage.model_validate_json(content)
    except ValidationError as e:
        raise RichTextDecodeError(details={"errors": e.errors(include_url=False, include_input=False)}) from e


def encode_reply(reply: Reply) -> bytes:
    return reply.model_dump_json(by_alias=True).encode("utf-8")


def encode_command(command: Command) -> bytes:
    return command.model_dump_json().encode("utf-8")
