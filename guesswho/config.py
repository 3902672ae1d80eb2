import os

from . import constants


class Config:
    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "8080"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # CORS (comma separated list, "*" allows everything)
    CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Game
    MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", str(constants.MAX_PLAYERS)))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", str(constants.MIN_PLAYERS)))
    WIN_SCORE = int(os.environ.get("WIN_SCORE", str(constants.WIN_SCORE)))
    READING_DURATION_SEC = float(os.environ.get("READING_DURATION_SEC", str(constants.READING_DURATION_SEC)))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", str(constants.ROOM_CODE_LENGTH)))
