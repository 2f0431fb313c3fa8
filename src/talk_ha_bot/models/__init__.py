from talk_ha_bot.models.message import (
    Command,
    Message,
    MessageActor,
    MessageObject,
    MessageTarget,
    Reply,
    RichObjectMessage,
    RichObjectParameter,
)

__all__ = [
    "Command",
    "Message",
    "MessageActor",
    "MessageObject",
    "MessageTarget",
    "Reply",
    "RichObjectMessage",
    "RichObjectParameter",
]
