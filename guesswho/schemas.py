"""Pydantic data schemas for everything that crosses the wire.

Inbound messages are a tagged union: the envelope's ``type`` selects one of
the payload models below, and the dispatcher validates the payload against it
before any game logic runs. Outbound room snapshots are built from the
``*View`` models so connection handles and internal bookkeeping can never leak
to clients. All wire names are camelCase.
"""
from __future__ import annotations

import html
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import MAX_NAME_LENGTH, MAX_SOUND_LENGTH, MAX_TEXT_LENGTH, Phase


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clean_player_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("player name is empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"player name is longer than {MAX_NAME_LENGTH} characters")
    # Avoid obvious HTML/script injection.
    if "<" in name or ">" in name:
        raise ValueError("player name contains markup")
    if any(ord(ch) < 32 for ch in name):
        raise ValueError("player name contains control characters")
    return name


PlayerName = Annotated[str, AfterValidator(_clean_player_name)]


# -----------------------------
# Inbound (client -> server)
# -----------------------------

class Envelope(BaseModel):
    """Outer shape of every inbound message."""

    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class EmptyPayload(WireModel):
    """START_GAME / NEXT_ROUND carry nothing the server reads."""


class CreateRoomPayload(WireModel):
    player_name: PlayerName


class JoinRoomPayload(WireModel):
    room_code: str
    player_name: PlayerName

    @field_validator("room_code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("room code is empty")
        return code


class SubmitTextPayload(WireModel):
    text: str

    @field_validator("text")
    @classmethod
    def sanitize_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text is empty")
        if len(value) > MAX_TEXT_LENGTH:
            raise ValueError(f"text is longer than {MAX_TEXT_LENGTH} characters")
        return html.escape(value)


class VotePayload(WireModel):
    voted_player_id: str = Field(min_length=1)


class PlaySoundPayload(WireModel):
    sound: str = Field(min_length=1, max_length=MAX_SOUND_LENGTH)


# -----------------------------
# Outbound (server -> client)
# -----------------------------

class PlayerView(WireModel):
    client_id: str
    player_name: str
    score: int


class RoundView(WireModel):
    current_typer_id: Optional[str] = None
    submitted_text: str = ""
    votes: Dict[str, str] = Field(default_factory=dict)


class RoomSnapshot(WireModel):
    room_code: str
    host_id: str
    players: List[PlayerView]
    game_state: Phase
    rounds: RoundView
    # Only present once the game is over: players ranked for the winner screen.
    standings: Optional[List[PlayerView]] = None


# -----------------------------
# REST responses
# -----------------------------

class LobbySummary(WireModel):
    room_code: str
    host_name: str
    player_count: int
    capacity: int
    game_state: Phase = Phase.LOBBY


class HealthResponse(BaseModel):
    status: str = "ok"
    rooms: int = 0


__all__ = [
    # inbound
    "Envelope",
    "EmptyPayload",
    "CreateRoomPayload",
    "JoinRoomPayload",
    "SubmitTextPayload",
    "VotePayload",
    "PlaySoundPayload",
    # outbound
    "PlayerView",
    "RoundView",
    "RoomSnapshot",
    # rest
    "LobbySummary",
    "HealthResponse",
]
