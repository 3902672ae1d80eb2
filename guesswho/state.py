"""In-memory room store.

One ``RoomStore`` instance is owned by the ``GameServer`` and handed to the
components that need it, so tests can build as many independent stores as they
like. The store also keeps the client -> room index: a client is a member of at
most one room at a time.
"""
from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Tuple

from . import constants
from .errors import RoomFull, RoomNotFound
from .room import Client, Room

logger = logging.getLogger(__name__)


class RoomStore:
    def __init__(
        self,
        capacity: int = constants.MAX_PLAYERS,
        code_length: int = constants.ROOM_CODE_LENGTH,
        rng: Optional[random.Random] = None,
    ):
        self.capacity = capacity
        self.code_length = code_length
        self._rng = rng or random.SystemRandom()
        self._rooms: Dict[str, Room] = {}
        self._client_rooms: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_code: str) -> bool:
        return room_code in self._rooms

    def generate_code(self) -> str:
        """Return a code not used by any live room."""
        while True:
            code = "".join(self._rng.choices(constants.ROOM_CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code

    # -------------------- Lookup -------------------- #

    def get(self, room_code: str) -> Optional[Room]:
        return self._rooms.get(room_code)

    def list(self) -> List[Room]:
        return list(self._rooms.values())

    def room_of(self, client_id: str) -> Optional[Room]:
        code = self._client_rooms.get(client_id)
        return self._rooms.get(code) if code else None

    # -------------------- Lifecycle -------------------- #

    def create(self, host: Client) -> Room:
        room = Room(self.generate_code(), host)
        self._rooms[room.room_code] = room
        self._client_rooms[host.client_id] = room.room_code
        logger.info("Room created: %s, host: %s", room.room_code, host.client_id)
        return room

    def join(self, room_code: str, client: Client) -> Room:
        room = self._rooms.get(room_code)
        if room is None:
            raise RoomNotFound()
        if len(room.players) >= self.capacity:
            raise RoomFull()
        room.add_player(client)
        self._client_rooms[client.client_id] = room_code
        logger.info("Client %s joined room %s (%d players)", client.client_id, room_code, len(room.players))
        return room

    def delete(self, room_code: str) -> bool:
        room = self._rooms.pop(room_code, None)
        if room is None:
            return False
        room.cancel_reading_task()
        for pid in room.player_ids():
            if self._client_rooms.get(pid) == room_code:
                del self._client_rooms[pid]
        logger.info("Room %s deleted", room_code)
        return True

    def remove_client(self, client_id: str) -> Tuple[Optional[Room], bool]:
        """Remove *client_id* from its room.

        Returns ``(room, deleted)``; ``room`` is ``None`` when the client was in
        no room. An emptied room is deleted before this returns, so no caller
        can ever see it with zero players.
        """
        room_code = self._client_rooms.pop(client_id, None)
        room = self._rooms.get(room_code) if room_code else None
        if room is None:
            return None, False
        room.remove_player(client_id)
        logger.info("Client %s left room %s (%d players)", client_id, room_code, len(room.players))
        if not room.players:
            self.delete(room_code)
            return room, True
        return room, False


__all__ = ["RoomStore"]
