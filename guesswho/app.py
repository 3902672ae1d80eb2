from __future__ import annotations

import random
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .routers import rooms as rooms_router
from .routers import websockets as ws_router
from .server import GameServer


def create_app(config=Config, rng: Optional[random.Random] = None) -> FastAPI:
    app = FastAPI(title="Guess Who Typed")

    # CORS_ORIGINS defaults to "*" for local development; tighten it in production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One game server (and so one room store) per application instance.
    app.state.server = GameServer(config, rng=rng)

    app.include_router(rooms_router.router)
    app.include_router(ws_router.router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
