import json
import random
from typing import Any, Dict, List, Optional, Tuple

import pytest

from guesswho.room import Room
from guesswho.server import GameServer


class GameTestConfig:
    HOST = "127.0.0.1"
    PORT = 0
    LOG_LEVEL = "DEBUG"
    CORS_ORIGINS = ["*"]
    MAX_PLAYERS = 8
    MIN_PLAYERS = 3
    WIN_SCORE = 10
    READING_DURATION_SEC = 0.01
    ROOM_CODE_LENGTH = 6


class DummyWebSocket:
    """Minimal WebSocket stand-in that records JSON messages."""

    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.closed = False

    async def send_json(self, message: Dict[str, Any]) -> None:
        if self.closed:
            raise RuntimeError("connection is closed")
        self.sent.append(message)

    def types(self) -> List[str]:
        return [m["type"] for m in self.sent]

    def last(self, msg_type: Optional[str] = None) -> Dict[str, Any]:
        for message in reversed(self.sent):
            if msg_type is None or message["type"] == msg_type:
                return message
        raise AssertionError(f"no {msg_type} message received, got {self.types()}")

    def clear(self) -> None:
        self.sent.clear()


class ScriptedRandom(random.Random):
    """Random source whose room codes come from a fixed script."""

    def __init__(self, codes: List[str], seed: int = 0):
        super().__init__(seed)
        self._codes = list(codes)

    def choices(self, population, weights=None, *, cum_weights=None, k=1):
        if self._codes:
            return list(self._codes.pop(0))
        return super().choices(population, weights, cum_weights=cum_weights, k=k)


@pytest.fixture()
def server() -> GameServer:
    return GameServer(GameTestConfig, rng=random.Random(1234))


async def send(server: GameServer, client_id: str, msg_type: str, **payload: Any) -> None:
    await server.receive(client_id, json.dumps({"type": msg_type, "payload": payload}))


async def connect(server: GameServer) -> Tuple[str, DummyWebSocket]:
    ws = DummyWebSocket()
    client_id = await server.connect(ws)
    return client_id, ws


async def make_room(server: GameServer, size: int) -> Tuple[Room, List[Tuple[str, DummyWebSocket]]]:
    """Create a room through the message path and fill it to *size* players."""
    players = [await connect(server) for _ in range(size)]
    host_id, _host_ws = players[0]
    await send(server, host_id, "CREATE_ROOM", playerName="Host")
    room = server.store.room_of(host_id)
    assert room is not None
    for i, (client_id, _ws) in enumerate(players[1:], start=1):
        await send(server, client_id, "JOIN_ROOM", roomCode=room.room_code, playerName=f"Player{i}")
    return room, players


async def start_game(server: GameServer, size: int) -> Tuple[Room, List[Tuple[str, DummyWebSocket]]]:
    room, players = await make_room(server, size)
    await send(server, room.host_id, "START_GAME")
    return room, players


def sockets_by_id(players: List[Tuple[str, DummyWebSocket]]) -> Dict[str, DummyWebSocket]:
    return dict(players)
