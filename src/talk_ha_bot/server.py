"""
FastAPI application exposing ``POST /message`` to the Talk backend.

Outbound clients are created in the lifespan and shared by all requests;
the only shared state is the frozen BotConfig.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.requests import ClientDisconnect

from talk_ha_bot import __version__
from talk_ha_bot.config import BotConfig
from talk_ha_bot.errors import BodyReadError
from talk_ha_bot.gateway import GatewayResult, InboundGateway, Outcome
from talk_ha_bot.transport.http import AutomationClient, OutboundNotifier

DISCONNECT_POLL_INTERVAL_S = 0.25

logger = logging.getLogger(__name__)


async def run_until_disconnect(request: Request, work: Awaitable[Any]) -> Any:
    """Await work, cancelling it if the caller hangs up first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL_S)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning("Client disconnected, cancelling in-flight handling")
                task.cancel()
                raise ClientDisconnect()
    finally:
        if not task.done():
            task.cancel()


async def read_body(request: Request) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect as e:
        raise BodyReadError("can't read body: client disconnected") from e


def _respond(result: GatewayResult) -> PlainTextResponse:
    return PlainTextResponse(result.detail, status_code=result.status_code)


def create_app(
    config: BotConfig,
    automation: Optional[AutomationClient] = None,
    notifier: Optional[OutboundNotifier] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        automation_client = automation or AutomationClient.from_config(config)
        notifier_client = notifier or OutboundNotifier.from_config(config)
        app.state.gateway = InboundGateway(config, automation_client, notifier_client)
        logger.info("Relaying %s commands to %s", config.marker, automation_client.url)
        yield
        await automation_client.close()
        await notifier_client.close()
        logger.info("Outbound clients closed")

    app = FastAPI(
        title="Talk Home Assistant bot",
        version=__version__,
        lifespan=lifespan,
    )

    @app.post("/message", response_class=PlainTextResponse)
    async def message(request: Request) -> PlainTextResponse:
        """Webhook called by the Talk backend for every event in rooms the bot is added to."""
        try:
            body = await read_body(request)
        except BodyReadError as e:
            logger.error("Error reading body: %s", e)
            return _respond(GatewayResult(Outcome.BODY_UNREADABLE))

        gateway: InboundGateway = request.app.state.gateway
        try:
            result = await run_until_disconnect(request, gateway.handle(body, request.headers))
        except ClientDisconnect:
            return _respond(GatewayResult(Outcome.BODY_UNREADABLE))

        logger.debug("Handled message: %r", result)
        return _respond(result)

    return app
