from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket

from ..server import GameServer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    server: GameServer = ws.app.state.server
    await ws.accept()
    client_id = await server.connect(ws)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await server.receive(client_id, raw)
    except Exception as e:
        logger.warning("WebSocket error for %s: %s", client_id, e)
    finally:
        await server.disconnect(client_id)
