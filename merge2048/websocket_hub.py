from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Iterable

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class GameUpdatesHub:
    """Push channel from the game service to rendering clients, one room per game.

    Messages are small JSON dicts; clients re-fetch `GET /game/{id}` for full state.
    A socket that fails a send is dropped from its room.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def connect(self, game_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._rooms[game_id].add(websocket)

    async def disconnect(self, game_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            self._leave(game_id, [websocket])

    def subscriber_count(self, game_id: str) -> int:
        return len(self._rooms.get(game_id, ()))

    def _leave(self, game_id: str, sockets: Iterable[WebSocket]) -> None:
        room = self._rooms.get(game_id)
        if room is None:
            return
        room.difference_update(sockets)
        if not room:
            del self._rooms[game_id]

    async def broadcast(self, game_id: str, payload: dict[str, object]) -> int:
        """Send `payload` to every socket in the room. Returns how many received it."""

        async with self._lock:
            sockets = list(self._rooms.get(game_id, ()))

        failed: list[WebSocket] = []
        for ws in sockets:
            try:
                await ws.send_json(payload)
            except Exception:
                failed.append(ws)

        if failed:
            logger.info("dropping %d dead socket(s) for game %s", len(failed), game_id)
            async with self._lock:
                self._leave(game_id, failed)
        return len(sockets) - len(failed)

    async def game_updated(self, game_id: str, *, status: str, score: int, event_types: list[str]) -> int:
        return await self.broadcast(
            game_id,
            {"type": "game_updated", "game_id": game_id, "status": status, "score": score, "events": event_types},
        )


hub = GameUpdatesHub()
