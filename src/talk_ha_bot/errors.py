"""
talk-ha-bot error types.

Errors raised before any side effect (body, signature, envelope) end the
request with a 400. Errors after the automation call are reported to the
chat user or only logged.
"""

from typing import Any, Optional


class BotError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigError(BotError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("config_error", message, details)


class BodyReadError(BotError):
    def __init__(self, message: str = "can't read body"):
        super().__init__("body_read_error", message)


class SignatureMismatch(BotError):
    def __init__(self, message: str = "Invalid signature"):
        super().__init__("signature_mismatch", message)


class EnvelopeDecodeError(BotError):
    def __init__(self, message: str = "Invalid body", details: Optional[dict[str, Any]] = None):
        super().__init__("envelope_decode_error", message, details)


class RichTextDecodeError(BotError):
    """Nested message content is not a rich object. Logged and dropped."""

    def __init__(self, message: str = "Invalid rich text", details: Optional[dict[str, Any]] = None):
        super().__init__("rich_text_decode_error", message, details)


class AutomationDispatchFailure(BotError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("automation_dispatch_failure", message, {"status_code": status_code})
        self.status_code = status_code


class ReplyDeliveryFailure(BotError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("reply_delivery_failure", message, {"status_code": status_code})
        self.status_code = status_code
