"""Room membership operations: create, join, leave.

These wrap the ``RoomStore`` with the messages each change produces. A client
is in at most one room, so creating or joining a room first takes the client
out of the room it was in.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .broadcast import BroadcastRouter, envelope
from .constants import JOINED_ROOM, ROOM_CREATED, UPDATE_GAME_STATE
from .errors import RoomFull, RoomNotFound
from .game_logic import RoundEngine
from .room import Client, Room
from .state import RoomStore

logger = logging.getLogger(__name__)


class Lobby:
    def __init__(self, store: RoomStore, router: BroadcastRouter, engine: RoundEngine):
        self.store = store
        self.router = router
        self.engine = engine

    async def create_room(self, client_id: str, connection: Any, player_name: str) -> Room:
        await self.remove_client(client_id)
        room = self.store.create(Client(client_id=client_id, player_name=player_name, connection=connection))
        await self.router.send(client_id, envelope(ROOM_CREATED, room.snapshot()))
        return room

    async def join_room(self, client_id: str, connection: Any, room_code: str, player_name: str) -> Room:
        room = self.store.get(room_code)
        if room is None:
            raise RoomNotFound()

        current: Optional[Room] = self.store.room_of(client_id)
        if current is room:
            await self.router.send(client_id, envelope(JOINED_ROOM, room.snapshot()))
            return room
        # Check capacity before leaving the old room so a failed join leaves the client where it was.
        if len(room.players) >= self.store.capacity:
            raise RoomFull()
        await self.remove_client(client_id)

        # Leaving may have deleted the old room but never *this* one: the client was not in it.
        self.store.join(room_code, Client(client_id=client_id, player_name=player_name, connection=connection))
        await self.router.send(client_id, envelope(JOINED_ROOM, room.snapshot()))
        await self.router.broadcast_state(room, UPDATE_GAME_STATE, exclude_client_id=client_id)
        return room

    async def remove_client(self, client_id: str) -> None:
        """Take *client_id* out of its room, if any. Idempotent."""
        room, deleted = self.store.remove_client(client_id)
        if room is None or deleted:
            return
        await self.engine.handle_departure(room, client_id)


__all__ = ["Lobby"]
