from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .constants import Phase
from .schemas import PlayerView, RoomSnapshot, RoundView

# NOTE: ``Room`` only holds state. Transitions live in ``guesswho.game_logic``
# and membership lifecycle in ``guesswho.state`` / ``guesswho.lobby``.


@dataclass
class Client:
    """A player inside a room. ``connection`` is the transport handle, never serialized."""

    client_id: str
    player_name: str
    connection: Any = field(default=None, repr=False, compare=False)
    score: int = 0

    def view(self) -> PlayerView:
        return PlayerView(client_id=self.client_id, player_name=self.player_name, score=self.score)


@dataclass
class RoundState:
    current_typer_id: Optional[str] = None
    # Everyone typing once before anyone repeats; reset when the pool runs dry.
    players_who_have_typed: List[str] = field(default_factory=list)
    submitted_text: str = ""
    # voter id -> voted player id
    votes: Dict[str, str] = field(default_factory=dict)

    def clear(self) -> None:
        self.submitted_text = ""
        self.votes = {}


class Room:
    """Runtime state of one game session."""

    def __init__(self, room_code: str, host: Client):
        self.room_code = room_code
        self.host_id = host.client_id
        self.players: List[Client] = [host]
        self.phase = Phase.LOBBY
        self.round = RoundState()
        # Bumped on every new round; deferred transitions check it before firing.
        self.round_number: int = 0
        # Pending READING -> VOTING timeout, if any
        self.reading_task: Optional[asyncio.Task] = None

    # -------------------- Player management -------------------- #

    def get_player(self, client_id: str) -> Optional[Client]:
        for player in self.players:
            if player.client_id == client_id:
                return player
        return None

    def has_player(self, client_id: str) -> bool:
        return self.get_player(client_id) is not None

    def player_ids(self) -> List[str]:
        return [p.client_id for p in self.players]

    def add_player(self, client: Client) -> None:
        self.players.append(client)

    def remove_player(self, client_id: str) -> Optional[Client]:
        player = self.get_player(client_id)
        if player is None:
            return None
        self.players.remove(player)
        # Transfer host if host leaves
        if client_id == self.host_id and self.players:
            self.host_id = self.players[0].client_id
        return player

    # -------------------- Round helpers -------------------- #

    def eligible_voters(self) -> Set[str]:
        """Everyone currently in the room except the typer."""
        return {pid for pid in self.player_ids() if pid != self.round.current_typer_id}

    def all_votes_in(self) -> bool:
        eligible = self.eligible_voters()
        return bool(eligible) and eligible.issubset(self.round.votes.keys())

    def standings(self) -> List[Client]:
        """Players by score, highest first. Ties keep join order (``sorted`` is stable)."""
        return sorted(self.players, key=lambda p: p.score, reverse=True)

    def cancel_reading_task(self) -> None:
        if self.reading_task is not None and not self.reading_task.done():
            self.reading_task.cancel()
        self.reading_task = None

    # -------------------- Serialization -------------------- #

    def snapshot(self) -> dict:
        """State pushed to clients in every state-bearing message."""
        snapshot = RoomSnapshot(
            room_code=self.room_code,
            host_id=self.host_id,
            players=[p.view() for p in self.players],
            game_state=self.phase,
            rounds=RoundView(
                current_typer_id=self.round.current_typer_id,
                submitted_text=self.round.submitted_text,
                votes=dict(self.round.votes),
            ),
            standings=[p.view() for p in self.standings()] if self.phase == Phase.END else None,
        )
        data = snapshot.model_dump(mode="json", by_alias=True)
        if snapshot.standings is None:
            data.pop("standings", None)
        return data


__all__ = ["Client", "RoundState", "Room"]
