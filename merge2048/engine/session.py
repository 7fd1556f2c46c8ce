from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from merge2048.engine.danger import DangerLevel
from merge2048.engine.events import GameEvent
from merge2048.engine.tiles import Tile


class GameStatus(StrEnum):
    idle = "idle"
    playing = "playing"
    won = "won"
    game_over = "game_over"


@dataclass(frozen=True, slots=True)
class UndoSnapshot:
    tiles: tuple[Tile, ...]
    score: int


@dataclass(slots=True)
class GameSession:
    """Authoritative state of one game. Mutated only by GameEngine."""

    seed: int
    tiles: list[Tile] = field(default_factory=list)
    score: int = 0
    best_score: int = 0
    status: GameStatus = GameStatus.idle

    # Won is sticky; play continues after it and it survives into game over.
    has_won: bool = False

    combo_count: int = 0
    combo_deadline: float | None = None
    last_scoring_time: float | None = None
    fever_active: bool = False
    fever_multiplier: int = 1

    next_values: tuple[int, ...] = ()
    danger_level: DangerLevel = DangerLevel.safe

    undo_snapshot: UndoSnapshot | None = None
    undo_consumed: bool = False

    highest_tile: int = 0
    moves: int = 0
    next_tile_id: int = 1
    milestones_reached: set[int] = field(default_factory=set)

    def mint_tile_id(self) -> int:
        tile_id = self.next_tile_id
        self.next_tile_id += 1
        return tile_id

    @property
    def can_undo(self) -> bool:
        return self.undo_snapshot is not None and not self.undo_consumed and self.status != GameStatus.game_over


@dataclass(frozen=True, slots=True)
class MoveResult:
    """What one `apply_move` call did.

    `score_delta` is the applied (fever-adjusted) score; `raw_score_delta` is the plain merge sum.
    """

    moved: bool
    score_delta: int = 0
    raw_score_delta: int = 0
    merged_values: list[int] = field(default_factory=list)
    spawned: Tile | None = None
    events: list[GameEvent] = field(default_factory=list)
    status: GameStatus = GameStatus.playing


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of a session for rendering and collaborators."""

    seed: int
    tiles: tuple[Tile, ...]
    score: int
    best_score: int
    status: GameStatus
    has_won: bool
    danger_level: DangerLevel
    combo_count: int
    fever_active: bool
    fever_multiplier: int
    next_values: tuple[int, ...]
    can_undo: bool
    highest_tile: int
    moves: int

    @staticmethod
    def of(session: GameSession) -> "SessionSnapshot":
        return SessionSnapshot(
            seed=session.seed,
            tiles=tuple(session.tiles),
            score=session.score,
            best_score=session.best_score,
            status=session.status,
            has_won=session.has_won,
            danger_level=session.danger_level,
            combo_count=session.combo_count,
            fever_active=session.fever_active,
            fever_multiplier=session.fever_multiplier,
            next_values=session.next_values,
            can_undo=session.can_undo,
            highest_tile=session.highest_tile,
            moves=session.moves,
        )
