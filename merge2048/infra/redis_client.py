from __future__ import annotations

import os

import redis

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", DEFAULT_REDIS_URL)


def create_redis(*, url: str | None = None) -> redis.Redis:
    """Client for the lock, event streams and player progress.

    Strings in/out; a short socket timeout keeps a stalled Redis from pinning a move in flight.
    """

    return redis.Redis.from_url(
        url or get_redis_url(),
        decode_responses=True,
        socket_timeout=float(os.environ.get("MERGE2048_REDIS_TIMEOUT", "2.0")),
    )
