from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import cast

import redis

from merge2048.engine.events import GameEvent


@dataclass(frozen=True, slots=True)
class EventStream:
    game_id: str

    @property
    def key(self) -> str:
        return f"merge2048:events:{self.game_id}"


def publish_events(*, r: redis.Redis, stream: EventStream, events: Sequence[GameEvent]) -> list[str]:
    """Append engine events to the game's stream for audio/haptics/achievement consumers."""

    ids: list[str] = []
    for event in events:
        stream_id = r.xadd(stream.key, event.as_fields())
        ids.append(cast(str, stream_id))
    return ids


def read_events(*, r: redis.Redis, stream: EventStream, count: int = 50) -> list[tuple[str, dict[str, str]]]:
    """Most recent `count` entries, oldest first."""

    entries = r.xrevrange(stream.key, count=count)
    return [(cast(str, mid), cast(dict[str, str], fields)) for mid, fields in reversed(entries)]
