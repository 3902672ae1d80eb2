"""Inbound message decoding and routing.

The dispatcher knows message shapes, not game rules: it validates the envelope
and the payload for its ``type``, finds the sender's room from the server-side
membership index and hands off to ``Lobby`` or ``RoundEngine``. Any
``GameError`` raised on the way is reported to the sender only.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from .broadcast import BroadcastRouter, envelope
from .connections import ConnectionRegistry
from .constants import (
    CREATE_ROOM,
    JOIN_ROOM,
    NEXT_ROUND,
    PLAY_SOUND,
    SOUND_PLAYED,
    START_GAME,
    SUBMIT_TEXT,
    VOTE,
)
from .errors import GameError, InvalidMessage, UnknownMessageType
from .game_logic import RoundEngine
from .lobby import Lobby
from .schemas import (
    CreateRoomPayload,
    EmptyPayload,
    Envelope,
    JoinRoomPayload,
    PlaySoundPayload,
    SubmitTextPayload,
    VotePayload,
)
from .state import RoomStore

logger = logging.getLogger(__name__)

Handler = Callable[[str, BaseModel], Awaitable[None]]


class MessageDispatcher:
    def __init__(
        self,
        store: RoomStore,
        registry: ConnectionRegistry,
        router: BroadcastRouter,
        lobby: Lobby,
        engine: RoundEngine,
    ):
        self.store = store
        self.registry = registry
        self.router = router
        self.lobby = lobby
        self.engine = engine
        self.routes: Dict[str, Tuple[Type[BaseModel], Handler]] = {
            CREATE_ROOM: (CreateRoomPayload, self._create_room),
            JOIN_ROOM: (JoinRoomPayload, self._join_room),
            START_GAME: (EmptyPayload, self._start_game),
            SUBMIT_TEXT: (SubmitTextPayload, self._submit_text),
            VOTE: (VotePayload, self._vote),
            NEXT_ROUND: (EmptyPayload, self._next_round),
            PLAY_SOUND: (PlaySoundPayload, self._play_sound),
        }

    def decode(self, raw: Union[str, bytes]) -> Tuple[str, BaseModel]:
        """Return ``(type, payload model)`` or raise ``InvalidMessage`` / ``UnknownMessageType``."""
        try:
            message = Envelope.model_validate_json(raw)
        except ValidationError as exc:
            raise InvalidMessage() from exc
        route = self.routes.get(message.type)
        if route is None:
            raise UnknownMessageType()
        model, _handler = route
        try:
            payload = model.model_validate(message.payload)
        except ValidationError as exc:
            raise InvalidMessage() from exc
        return message.type, payload

    async def dispatch(self, client_id: str, raw: Union[str, bytes]) -> None:
        try:
            msg_type, payload = self.decode(raw)
            _model, handler = self.routes[msg_type]
            await handler(client_id, payload)
        except GameError as exc:
            logger.warning("Rejected message from %s: %s", client_id, exc.code)
            await self.router.send_error(client_id, exc)
        except Exception:
            logger.exception("Unhandled error while processing message from %s", client_id)

    # ---------------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------------

    async def _create_room(self, client_id: str, payload: CreateRoomPayload) -> None:
        await self.lobby.create_room(client_id, self.registry.get(client_id), payload.player_name)

    async def _join_room(self, client_id: str, payload: JoinRoomPayload) -> None:
        await self.lobby.join_room(client_id, self.registry.get(client_id), payload.room_code, payload.player_name)

    async def _start_game(self, client_id: str, payload: EmptyPayload) -> None:
        room = self.store.room_of(client_id)
        if room is not None:
            await self.engine.start_game(room, client_id)

    async def _submit_text(self, client_id: str, payload: SubmitTextPayload) -> None:
        room = self.store.room_of(client_id)
        if room is not None:
            await self.engine.submit_text(room, client_id, payload.text)

    async def _vote(self, client_id: str, payload: VotePayload) -> None:
        room = self.store.room_of(client_id)
        if room is not None:
            await self.engine.cast_vote(room, client_id, payload.voted_player_id)

    async def _next_round(self, client_id: str, payload: EmptyPayload) -> None:
        room = self.store.room_of(client_id)
        if room is not None:
            await self.engine.next_round(room, client_id)

    async def _play_sound(self, client_id: str, payload: PlaySoundPayload) -> None:
        room = self.store.room_of(client_id)
        if room is not None:
            await self.router.broadcast(room, envelope(SOUND_PLAYED, {"sound": payload.sound}), client_id)


__all__ = ["MessageDispatcher"]
