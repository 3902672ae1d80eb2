"""Recoverable game errors.

Every error here is reported to the client that caused it as an ``ERROR``
message and never closes the connection. Out-of-phase actions are *not*
errors; the state machine ignores them.
"""
from __future__ import annotations

from typing import Optional


class GameError(Exception):
    """Base class; ``code`` is sent to the client alongside ``message``."""

    message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict:
        return {"message": self.message, "code": self.code}


class RoomNotFound(GameError):
    message = "Room not found."


class RoomFull(GameError):
    message = "Room is full."


class NotHost(GameError):
    message = "Only the host can do that."


class InsufficientPlayers(GameError):
    message = "Not enough players to start."


class UnknownMessageType(GameError):
    message = "Unknown message type."


class InvalidMessage(GameError):
    message = "Invalid message format."


__all__ = [
    "GameError",
    "RoomNotFound",
    "RoomFull",
    "NotHost",
    "InsufficientPlayers",
    "UnknownMessageType",
    "InvalidMessage",
]
