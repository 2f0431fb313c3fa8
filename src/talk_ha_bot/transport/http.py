"""
Outbound HTTP clients: the Home Assistant webhook and the Talk bot reply API.

Neither client retries. Failures are logged and reported as ``False``.
"""

import logging
from typing import Optional

import httpx

from talk_ha_bot.config import BotConfig, tls_verify_setting
from talk_ha_bot.errors import AutomationDispatchFailure, ReplyDeliveryFailure
from talk_ha_bot.models.message import Command, Reply
from talk_ha_bot.signature import generate_nonce, sign
from talk_ha_bot.transport.envelope import encode_command, encode_reply

USER_AGENT = "talk-ha-bot/0.1.0"
REPLY_PATH = "ocs/v2.php/apps/spreed/api/v1/bot/{room_id}/message"

logger = logging.getLogger(__name__)


def webhook_url(base_url: str, webhook_id: str) -> str:
    return f"{base_url.rstrip('/')}/api/webhook/{webhook_id}"


def reply_url(backend_url: str, room_id: str) -> str:
    """Reply endpoint on the backend named in X-Nextcloud-Talk-Backend (sent with a trailing slash)."""
    if not backend_url.endswith("/"):
        backend_url += "/"
    return backend_url + REPLY_PATH.format(room_id=room_id)


class AutomationClient:
    """Posts commands to ``{ha.url}/api/webhook/{ha.webhook_id}``."""

    def __init__(
        self,
        base_url: str,
        webhook_id: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = webhook_url(base_url, webhook_id)
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: BotConfig, client: Optional[httpx.AsyncClient] = None) -> "AutomationClient":
        if client is None:
            client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=config.ha.timeout,
                verify=tls_verify_setting(config.ha.verify_tls, config.ha.ca_bundle),
            )
        return cls(config.ha.url, config.ha.webhook_id, timeout=config.ha.timeout, client=client)

    @property
    def url(self) -> str:
        return self._url

    async def post(self, command: Command) -> None:
        """POST the command, raising AutomationDispatchFailure unless the hub answers 200."""
        try:
            resp = await self._client.post(
                self._url,
                content=encode_command(command),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise AutomationDispatchFailure(f"POST request failed: {e!r}") from e
        if resp.status_code != 200:
            raise AutomationDispatchFailure(
                f"POST request failed with status code {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

    async def dispatch(self, command: Command) -> bool:
        try:
            await self.post(command)
        except AutomationDispatchFailure as e:
            logger.warning("Webhook call for %s %s failed: %s", command.action, command.target, e)
            return False
        logger.info("Webhook call for %s %s was successful", command.action, command.target)
        return True

    async def close(self) -> None:
        await self._client.aclose()


class OutboundNotifier:
    """Sends signed replies into a Talk conversation."""

    def __init__(
        self,
        secret: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._secret = secret
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: BotConfig, client: Optional[httpx.AsyncClient] = None) -> "OutboundNotifier":
        if client is None:
            client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=config.talk.timeout,
                verify=tls_verify_setting(config.talk.verify_tls, config.talk.ca_bundle),
            )
        return cls(config.secret, timeout=config.talk.timeout, client=client)

    def signed_headers(self, text: str) -> dict[str, str]:
        """Headers for one reply. The backend checks the signature against the message text."""
        nonce = generate_nonce()
        return {
            "Content-Type": "application/json",
            "OCS-APIRequest": "true",
            "X-Nextcloud-Talk-Bot-Random": nonce,
            "X-Nextcloud-Talk-Bot-Signature": sign(text, nonce, self._secret),
        }

    async def send(self, backend_url: str, room_id: str, reply_to: str, text: str) -> None:
        body = encode_reply(Reply(message=text, reply_to=reply_to))
        url = reply_url(backend_url, room_id)
        try:
            resp = await self._client.post(url, content=body, headers=self.signed_headers(text))
        except httpx.HTTPError as e:
            raise ReplyDeliveryFailure(f"Error posting reply to {url}: {e!r}") from e
        if resp.status_code >= 400:
            raise ReplyDeliveryFailure(
                f"Reply to {url} rejected with HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

    async def notify(self, backend_url: str, room_id: str, reply_to: str, text: str) -> bool:
        """Best effort: delivery problems are logged, never raised."""
        try:
            await self.send(backend_url, room_id, reply_to, text)
        except ReplyDeliveryFailure as e:
            logger.error("%s", e)
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()
