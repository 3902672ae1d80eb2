"""Composition root.

``GameServer`` wires the registry, store, router, state machine, lobby and
dispatcher together and serializes all work through a single ``asyncio.Lock``:
inbound messages, disconnects and reading timeouts never interleave, across
rooms as well as within one, so every client sees broadcasts in the order the
server issued them.
"""
from __future__ import annotations

import asyncio
import random
from typing import Any, Optional, Union

from .broadcast import BroadcastRouter, envelope
from .config import Config
from .connections import ConnectionRegistry
from .constants import YOUR_CLIENT_ID
from .dispatcher import MessageDispatcher
from .game_logic import RoundEngine
from .lobby import Lobby
from .state import RoomStore


class GameServer:
    def __init__(self, config=Config, rng: Optional[random.Random] = None):
        self.config = config
        self.lock = asyncio.Lock()
        self.registry = ConnectionRegistry()
        self.store = RoomStore(capacity=config.MAX_PLAYERS, code_length=config.ROOM_CODE_LENGTH, rng=rng)
        self.router = BroadcastRouter(self.registry)
        self.engine = RoundEngine(self.store, self.router, self.lock, config=config, rng=rng)
        self.lobby = Lobby(self.store, self.router, self.engine)
        self.dispatcher = MessageDispatcher(self.store, self.registry, self.router, self.lobby, self.engine)
        self.registry.add_disconnect_listener(self.lobby.remove_client)

    async def connect(self, connection: Any) -> str:
        """Register an accepted connection and tell it its id."""
        async with self.lock:
            client_id = self.registry.register(connection)
            await self.router.send(client_id, envelope(YOUR_CLIENT_ID, {"clientId": client_id}))
        return client_id

    async def receive(self, client_id: str, raw: Union[str, bytes]) -> None:
        async with self.lock:
            await self.dispatcher.dispatch(client_id, raw)

    async def disconnect(self, client_id: str) -> None:
        async with self.lock:
            await self.registry.unregister(client_id)


__all__ = ["GameServer"]
