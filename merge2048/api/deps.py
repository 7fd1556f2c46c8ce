from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

import redis

from merge2048.config import EngineConfig, config_from_env
from merge2048.infra.redis_client import create_redis
from merge2048.session_registry import SessionRegistry, registry


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_registry() -> SessionRegistry:
    return registry


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    return config_from_env()
