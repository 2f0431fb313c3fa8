"""
HMAC-SHA256 signing shared with the Talk backend.

Both directions sign ``nonce || payload`` with the bot secret and send the
lowercase hex digest next to the nonce.
"""

import hashlib
import hmac
import secrets
import string
from typing import Union

NONCE_ALPHABET = string.ascii_letters + string.digits
NONCE_LENGTH = 64


def sign(payload: Union[bytes, str], nonce: str, secret: str) -> str:
    """Hex HMAC-SHA256 of nonce + payload keyed with secret."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    mac = hmac.new(secret.encode("utf-8"), nonce.encode("utf-8") + payload, hashlib.sha256)
    return mac.hexdigest()


def verify(payload: Union[bytes, str], nonce: str, signature: str, secret: str) -> bool:
    """Constant-time check of signature against a freshly computed digest."""
    if not nonce or not signature:
        return False
    expected = sign(payload, nonce, secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.strip().lower().encode("utf-8"))


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    if length < NONCE_LENGTH:
        raise ValueError(f"nonce length must be at least {NONCE_LENGTH}, got {length}")
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))
