from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from zoneworld.services.broadcaster import Broadcaster

logger = logging.getLogger("zoneworld.ws")
router = APIRouter()


class WebSocketSubscriber:
    """Adapts a Starlette WebSocket to the broadcaster's Subscriber protocol."""

    def __init__(self, ws: WebSocket):
        self.ws = ws

    @property
    def is_open(self) -> bool:
        return (
            self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.ws.send_text(data)


@router.websocket("/ws")
async def ws_world(ws: WebSocket):
    broadcaster: Broadcaster = ws.app.state.broadcaster
    await ws.accept()
    subscriber = WebSocketSubscriber(ws)
    logger.info("WS connect: %s", ws.client)
    await broadcaster.subscribe(subscriber)

    # No client->server messages are defined; reading only detects the close
    try:
        while True:
            _ = await ws.receive_text()
    except WebSocketDisconnect:
        logger.info("WS disconnect: %s", ws.client)
    except Exception:
        logger.info("WS error/disconnect: %s", ws.client)
    finally:
        await broadcaster.unsubscribe(subscriber)
