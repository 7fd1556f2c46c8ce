from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

EventType = Literal[
    "GAME_STARTED",
    "TILE_MERGED",
    "TILE_SPAWNED",
    "MILESTONE_REACHED",
    "BIG_MERGE",
    "NEW_HIGHEST_TILE",
    "WON",
    "GAME_OVER",
    "COMBO_CHANGED",
    "COMBO_BROKEN",
    "FEVER_CHANGED",
    "UNDO",
    "BEST_SCORE",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Notification derived from a state change, for collaborators to fan out.

    `ts` is the engine clock value (seconds) the change was evaluated at.
    """

    type: EventType
    move_id: int
    payload: dict[str, Any]
    ts: float

    @staticmethod
    def at(*, ts: float, type: EventType, move_id: int, payload: dict[str, Any] | None = None) -> "GameEvent":
        return GameEvent(type=type, move_id=move_id, payload=payload or {}, ts=ts)

    def as_fields(self) -> dict[str, str]:
        """Flatten into string fields for a Redis Stream entry."""

        fields = {"type": self.type, "move_id": str(self.move_id), "ts": repr(self.ts)}
        for key, value in self.payload.items():
            if isinstance(value, bool):
                fields[key] = "1" if value else "0"
            else:
                fields[key] = str(value)
        return fields
