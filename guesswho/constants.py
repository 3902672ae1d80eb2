from enum import Enum


class Phase(str, Enum):
    LOBBY = "LOBBY"
    TYPING = "TYPING"
    READING = "READING"
    VOTING = "VOTING"
    SCORE = "SCORE"
    END = "END"


# Phases in which a round is being played out (typer chosen, not yet scored).
ROUND_PHASES = {Phase.TYPING, Phase.READING, Phase.VOTING}

# Game limits. ``guesswho.config.Config`` reads overrides from the environment.
MAX_PLAYERS = 8
MIN_PLAYERS = 3
# Below this many players a started game cannot continue (a typer and one voter).
MIN_ACTIVE_PLAYERS = 2
WIN_SCORE = 10
READING_DURATION_SEC = 40
ROOM_CODE_LENGTH = 6
ROOM_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

MAX_NAME_LENGTH = 16
MAX_TEXT_LENGTH = 500
MAX_SOUND_LENGTH = 64

# -----------------------------
# Wire message types
# -----------------------------

# client -> server
CREATE_ROOM = "CREATE_ROOM"
JOIN_ROOM = "JOIN_ROOM"
START_GAME = "START_GAME"
SUBMIT_TEXT = "SUBMIT_TEXT"
VOTE = "VOTE"
NEXT_ROUND = "NEXT_ROUND"
PLAY_SOUND = "PLAY_SOUND"

# server -> client
ERROR = "ERROR"
YOUR_CLIENT_ID = "YOUR_CLIENT_ID"
ROOM_CREATED = "ROOM_CREATED"
JOINED_ROOM = "JOINED_ROOM"
UPDATE_GAME_STATE = "UPDATE_GAME_STATE"
NEW_ROUND = "NEW_ROUND"
TEXT_SUBMITTED = "TEXT_SUBMITTED"
VOTING_STARTED = "VOTING_STARTED"
ROUND_OVER = "ROUND_OVER"
SOUND_PLAYED = "SOUND_PLAYED"

__all__ = [
    "Phase",
    "ROUND_PHASES",
    "MAX_PLAYERS",
    "MIN_PLAYERS",
    "MIN_ACTIVE_PLAYERS",
    "WIN_SCORE",
    "READING_DURATION_SEC",
    "ROOM_CODE_LENGTH",
    "ROOM_CODE_ALPHABET",
    "MAX_NAME_LENGTH",
    "MAX_TEXT_LENGTH",
    "MAX_SOUND_LENGTH",
]
