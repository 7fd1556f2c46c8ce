from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import redis

from merge2048.tile_bios import TILE_BIOS

PLAYER_KEY_PREFIX = "merge2048:player:"  # + {player_id}:{field}


def _best_key(player_id: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{player_id}:best_score"


def _bios_key(player_id: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{player_id}:bios"


@dataclass(frozen=True, slots=True)
class PlayerProgress:
    player_id: str
    best_score: int
    unlocked_bios: list[int]


def _read_best(client: redis.Redis, key: str) -> int:
    raw = client.get(key)
    if not raw:
        return 0
    return int(raw)


def get_best_score(*, r: redis.Redis, player_id: str) -> int:
    return _read_best(r, _best_key(player_id))


def record_score(*, r: redis.Redis, player_id: str, score: int) -> bool:
    """Store `score` as the player's best if it beats the stored one. Returns True if stored.

    Several games of one player can finish concurrently, so the compare and the write run
    as a WATCH/MULTI transaction and are retried when the key changes in between.
    """

    key = _best_key(player_id)
    with r.pipeline() as pipe:
        while True:
            try:
                pipe.watch(key)
                if score <= _read_best(pipe, key):
                    pipe.unwatch()
                    return False
                pipe.multi()
                pipe.set(key, str(score))
                pipe.execute()
                return True
            except redis.WatchError:
                continue


def unlock_bios(*, r: redis.Redis, player_id: str, values: Iterable[int]) -> list[int]:
    """Mark tile values as seen. Returns the values unlocked for the first time."""

    newly: list[int] = []
    for value in sorted(set(values)):
        if value not in TILE_BIOS:
            continue
        if r.sadd(_bios_key(player_id), str(value)):
            newly.append(value)
    return newly


def get_progress(*, r: redis.Redis, player_id: str) -> PlayerProgress:
    unlocked = sorted(int(v) for v in r.smembers(_bios_key(player_id)))
    return PlayerProgress(
        player_id=player_id,
        best_score=get_best_score(r=r, player_id=player_id),
        unlocked_bios=unlocked,
    )
