"""
Talk bot wire models.

The backend posts an activity-streams style envelope; for chat messages
``object.content`` is itself a JSON document (the rich object message).
Missing or null fields decode to empty values, unknown fields are ignored.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class WireModel(BaseModel):
    """Inbound JSON object where ``null`` means the same as an absent field."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class MessageActor(WireModel):
    type: str = ""
    id: str = ""
    name: str = ""


class MessageObject(WireModel):
    type: str = ""
    id: str = ""
    name: str = ""     # "message" for chat text, anything else is a system event
    content: str = ""  # JSON-encoded RichObjectMessage when name == "message"
    media_type: str = Field(default="", alias="mediaType")


class MessageTarget(WireModel):
    type: str = ""
    id: str = ""   # room token, used in the reply URL
    name: str = ""


class Message(WireModel):
    type: str = ""
    actor: MessageActor = MessageActor()
    object: MessageObject = MessageObject()
    target: MessageTarget = MessageTarget()

    @property
    def is_chat_message(self) -> bool:
        return self.object.name == "message"


class RichObjectParameter(WireModel):
    id: str = ""
    name: str = ""
    type: str = ""


class RichObjectMessage(WireModel):
    """Decoded ``object.content``. Parameters are kept as sent, never validated."""

    message: str = ""
    parameters: Optional[dict[str, Any]] = None

    @field_validator("parameters", mode="before")
    @classmethod
    def _non_map_is_no_parameters(cls, v: Any) -> Any:
        # PHP encodes an empty map as []
        if not isinstance(v, dict):
            return None
        return v

    def typed_parameters(self) -> dict[str, RichObjectParameter]:
        """Parameters that have the usual id/name/type shape; others are skipped."""
        typed: dict[str, RichObjectParameter] = {}
        for key, value in (self.parameters or {}).items():
            try:
                typed[key] = RichObjectParameter.model_validate(value)
            except ValidationError:
                continue
        return typed


class Reply(BaseModel):
    message: str
    reply_to: str = Field(alias="replyTo")

    model_config = ConfigDict(populate_by_name=True)


class Command(BaseModel):
    """Automation call extracted from a chat line, e.g. ``@ha turn_on light1``."""

    model_config = ConfigDict(frozen=True)

    action: str
    target: str
