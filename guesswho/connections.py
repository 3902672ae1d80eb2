"""Connection registry: transport handle <-> ephemeral client id."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DisconnectListener = Callable[[str], Awaitable[None]]


def new_client_id() -> str:
    return secrets.token_hex(6)


class ConnectionRegistry:
    def __init__(self) -> None:
        self._connections: Dict[str, Any] = {}
        self._listeners: List[DisconnectListener] = []

    def __len__(self) -> int:
        return len(self._connections)

    def add_disconnect_listener(self, listener: DisconnectListener) -> None:
        self._listeners.append(listener)

    def register(self, connection: Any) -> str:
        client_id = new_client_id()
        while client_id in self._connections:
            client_id = new_client_id()
        self._connections[client_id] = connection
        logger.info("Client %s connected", client_id)
        return client_id

    def get(self, client_id: str) -> Optional[Any]:
        return self._connections.get(client_id)

    def is_open(self, client_id: str) -> bool:
        return client_id in self._connections

    async def unregister(self, client_id: str) -> None:
        """Forget *client_id* and tell every listener it is gone. Safe to call twice."""
        if self._connections.pop(client_id, None) is None:
            return
        logger.info("Client %s disconnected", client_id)
        for listener in self._listeners:
            await listener(client_id)


__all__ = ["ConnectionRegistry", "new_client_id"]
