"""Fan-out of server messages to room members."""
from __future__ import annotations

import logging
from typing import Any, Optional

from .connections import ConnectionRegistry
from .constants import ERROR
from .errors import GameError
from .room import Room

logger = logging.getLogger(__name__)


def envelope(msg_type: str, payload: Optional[dict] = None) -> dict:
    return {"type": msg_type, "payload": payload if payload is not None else {}}


class BroadcastRouter:
    """Sends envelopes over the connections the registry still considers open.

    A connection that closed but has not been unregistered yet is skipped with a
    warning; one slow or dead client never stops delivery to the others.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def _deliver(self, client_id: str, connection: Any, message: dict) -> bool:
        if connection is None or not self.registry.is_open(client_id):
            return False
        try:
            await connection.send_json(message)
        except Exception as exc:  # connection went away mid-send
            logger.warning("Failed to send %s to %s: %s", message.get("type"), client_id, exc)
            return False
        return True

    async def send(self, client_id: str, message: dict) -> bool:
        return await self._deliver(client_id, self.registry.get(client_id), message)

    async def send_error(self, client_id: str, error: GameError) -> bool:
        return await self.send(client_id, envelope(ERROR, error.to_payload()))

    async def broadcast(self, room: Room, message: dict, exclude_client_id: Optional[str] = None) -> int:
        """Send *message* to every player of *room*; returns how many got it."""
        delivered = 0
        for player in list(room.players):
            if player.client_id == exclude_client_id:
                continue
            if await self._deliver(player.client_id, player.connection, message):
                delivered += 1
        return delivered

    async def broadcast_state(self, room: Room, msg_type: str, exclude_client_id: Optional[str] = None) -> int:
        """Send the full room snapshot under *msg_type*."""
        return await self.broadcast(room, envelope(msg_type, room.snapshot()), exclude_client_id)


__all__ = ["BroadcastRouter", "envelope"]
