"""Round state machine.

``LOBBY -> TYPING -> READING -> VOTING -> SCORE -> TYPING -> ... -> END``

Every operation takes the ``Room`` it acts on explicitly, mutates it and pushes
the resulting snapshot through the ``BroadcastRouter``. Callers must already be
inside the server-wide lock (see ``guesswho.server``); the only code path that
takes the lock itself is the reading timeout, which re-enters from a background
task.

Actions that arrive in the wrong phase or from the wrong player are ignored
without an error: clients race the server around phase changes and a stale
click must not produce an error popup. Only host checks and the player-count
check raise.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from .broadcast import BroadcastRouter
from .config import Config
from .constants import (
    MIN_ACTIVE_PLAYERS,
    NEW_ROUND,
    ROUND_OVER,
    ROUND_PHASES,
    TEXT_SUBMITTED,
    UPDATE_GAME_STATE,
    VOTING_STARTED,
    Phase,
)
from .errors import InsufficientPlayers, NotHost
from .room import Room, RoundState
from .state import RoomStore

logger = logging.getLogger(__name__)


class RoundEngine:
    def __init__(
        self,
        store: RoomStore,
        router: BroadcastRouter,
        lock: asyncio.Lock,
        config=Config,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.router = router
        self.lock = lock
        self.config = config
        self._rng = rng or random.Random()

    # ---------------------------------------------------------------------
    # Game start & rounds
    # ---------------------------------------------------------------------

    async def start_game(self, room: Room, requester_id: str) -> None:
        if room.phase != Phase.LOBBY:
            logger.debug("Room %s: START_GAME ignored in %s", room.room_code, room.phase.value)
            return
        if requester_id != room.host_id:
            raise NotHost()
        if len(room.players) < self.config.MIN_PLAYERS:
            raise InsufficientPlayers(f"At least {self.config.MIN_PLAYERS} players are needed to start.")

        # Fresh game: scores and typer rotation start over.
        for player in room.players:
            player.score = 0
        room.round = RoundState()
        logger.info("Game started in room %s with %d players", room.room_code, len(room.players))
        await self.start_new_round(room)

    def pick_typer(self, room: Room) -> str:
        """Choose the next typer at random among players who have not typed this cycle."""
        typed = set(room.round.players_who_have_typed)
        # Recomputed from live membership so departed players never linger in the pool.
        pool = [pid for pid in room.player_ids() if pid not in typed]
        if not pool:
            room.round.players_who_have_typed = []
            pool = room.player_ids()
        typer_id = self._rng.choice(pool)
        room.round.players_who_have_typed.append(typer_id)
        return typer_id

    async def start_new_round(self, room: Room) -> None:
        room.cancel_reading_task()
        room.round.clear()
        room.round_number += 1
        room.round.current_typer_id = self.pick_typer(room)
        room.phase = Phase.TYPING
        logger.info(
            "Room %s: round %d, typer %s", room.room_code, room.round_number, room.round.current_typer_id
        )
        await self.router.broadcast_state(room, NEW_ROUND)

    async def next_round(self, room: Room, requester_id: str) -> None:
        if room.phase != Phase.SCORE:
            logger.debug("Room %s: NEXT_ROUND ignored in %s", room.room_code, room.phase.value)
            return
        if requester_id != room.host_id:
            raise NotHost()
        await self.start_new_round(room)

    # ---------------------------------------------------------------------
    # Typing & reading
    # ---------------------------------------------------------------------

    async def submit_text(self, room: Room, client_id: str, text: str) -> None:
        if room.phase != Phase.TYPING or client_id != room.round.current_typer_id:
            logger.debug("Room %s: SUBMIT_TEXT from %s ignored", room.room_code, client_id)
            return
        room.round.submitted_text = text
        room.phase = Phase.READING
        self._schedule_voting(room)
        await self.router.broadcast_state(room, TEXT_SUBMITTED)

    def _schedule_voting(self, room: Room) -> None:
        room.cancel_reading_task()
        room.reading_task = asyncio.create_task(self._reading_timeout(room, room.round_number))

    async def _reading_timeout(self, room: Room, round_number: int) -> None:
        await asyncio.sleep(self.config.READING_DURATION_SEC)
        async with self.lock:
            if room.reading_task is asyncio.current_task():
                room.reading_task = None
            await self.begin_voting(room, round_number)

    async def begin_voting(self, room: Room, round_number: Optional[int] = None) -> None:
        """Reading time is up: READING -> VOTING.

        Dropped when the room has been deleted meanwhile, or when the round it
        was scheduled for is no longer the current one.
        """
        if self.store.get(room.room_code) is not room:
            logger.debug("Room %s gone before voting could start", room.room_code)
            return
        if room.phase != Phase.READING:
            return
        if round_number is not None and round_number != room.round_number:
            return
        room.phase = Phase.VOTING
        logger.info("Room %s: voting started", room.room_code)
        await self.router.broadcast_state(room, VOTING_STARTED)

    # ---------------------------------------------------------------------
    # Voting & scoring
    # ---------------------------------------------------------------------

    async def cast_vote(self, room: Room, voter_id: str, voted_player_id: str) -> None:
        if room.phase != Phase.VOTING:
            logger.debug("Room %s: VOTE from %s ignored in %s", room.room_code, voter_id, room.phase.value)
            return
        if voter_id == room.round.current_typer_id or not room.has_player(voter_id):
            return
        if not room.has_player(voted_player_id):
            return
        # Last vote wins.
        room.round.votes[voter_id] = voted_player_id
        await self.check_votes(room)

    async def check_votes(self, room: Room) -> None:
        if room.all_votes_in():
            await self.calculate_scores(room)
        else:
            await self.router.broadcast_state(room, UPDATE_GAME_STATE)

    async def calculate_scores(self, room: Room) -> None:
        """Award a point to every voter who picked the typer."""
        if room.phase != Phase.VOTING:
            return
        typer_id = room.round.current_typer_id
        for voter_id, voted_id in room.round.votes.items():
            if voted_id != typer_id:
                continue
            voter = room.get_player(voter_id)
            if voter is not None:
                voter.score += 1

        if any(p.score >= self.config.WIN_SCORE for p in room.players):
            room.phase = Phase.END
            winner = room.standings()[0]
            logger.info("Room %s: game over, %s wins with %d", room.room_code, winner.player_name, winner.score)
        else:
            room.phase = Phase.SCORE
        await self.router.broadcast_state(room, ROUND_OVER)

    # ---------------------------------------------------------------------
    # Departures
    # ---------------------------------------------------------------------

    async def handle_departure(self, room: Room, client_id: str) -> None:
        """Re-evaluate *room* after *client_id* left it (the room is not empty)."""
        room.round.votes.pop(client_id, None)
        was_typer = room.round.current_typer_id == client_id
        in_game = room.phase in ROUND_PHASES or room.phase == Phase.SCORE

        if in_game and len(room.players) < MIN_ACTIVE_PLAYERS:
            logger.info("Room %s: not enough players left, back to lobby", room.room_code)
            self.return_to_lobby(room)
            await self.router.broadcast_state(room, UPDATE_GAME_STATE)
            return

        if was_typer:
            if room.phase in ROUND_PHASES:
                logger.info("Room %s: typer left, starting a new round", room.room_code)
                await self.start_new_round(room)
                return
            room.round.current_typer_id = None

        await self.router.broadcast_state(room, UPDATE_GAME_STATE)
        if room.phase == Phase.VOTING and room.all_votes_in():
            await self.calculate_scores(room)

    def return_to_lobby(self, room: Room) -> None:
        room.cancel_reading_task()
        room.round = RoundState()
        room.phase = Phase.LOBBY


__all__ = ["RoundEngine"]
