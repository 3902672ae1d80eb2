from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Request

from ..constants import Phase
from ..schemas import HealthResponse, LobbySummary
from ..server import GameServer

router = APIRouter(prefix="/api", tags=["rooms"])


def _server(request: Request) -> GameServer:
    return request.app.state.server


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    return HealthResponse(rooms=len(_server(request).store))


# ---------------------------------------------------------------------------
# Lobby listing
# ---------------------------------------------------------------------------


@router.get("/rooms", response_model=List[LobbySummary])
async def list_rooms(request: Request):
    server = _server(request)
    result: List[LobbySummary] = []
    for room in server.store.list():
        if room.phase != Phase.LOBBY:
            continue
        host_player = room.get_player(room.host_id)
        result.append(
            LobbySummary(
                room_code=room.room_code,
                host_name=host_player.player_name if host_player else "Unknown",
                player_count=len(room.players),
                capacity=server.store.capacity,
                game_state=room.phase,
            )
        )
    return result


@router.get("/rooms/{code}")
async def get_room(code: str, request: Request):
    room = _server(request).store.get(code.strip().upper())
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room.snapshot()
