from __future__ import annotations

from contextlib import contextmanager
from uuid import uuid4

import redis


class GameBusyError(RuntimeError):
    """Another command for the same game is still in flight."""


def lock_key(game_id: str) -> str:
    return f"merge2048:lock:{game_id}"


def _release(r: redis.Redis, key: str, token: str) -> None:
    # Only delete the key if it still holds our token; after a TTL expiry another holder may own it.
    with r.pipeline() as pipe:
        try:
            pipe.watch(key)
            if pipe.get(key) != token:
                pipe.unwatch()
                return
            pipe.multi()
            pipe.delete(key)
            pipe.execute()
        except redis.WatchError:
            pass


@contextmanager
def game_lock(*, r: redis.Redis, game_id: str, ttl_ms: int = 5_000):
    """Move-in-flight guard for one game.

    The engine keeps no queue, so commands for a game are serialized here: a command that
    arrives while another holds the lock is rejected with GameBusyError rather than queued.
    """

    key = lock_key(game_id)
    token = uuid4().hex
    if not r.set(key, token, nx=True, px=ttl_ms):
        raise GameBusyError(f"Game {game_id} is busy")
    try:
        yield token
    finally:
        _release(r, key, token)
