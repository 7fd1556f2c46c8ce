from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from merge2048.engine.danger import DangerLevel
from merge2048.engine.events import GameEvent
from merge2048.engine.grid import values_grid
from merge2048.engine.session import GameStatus, MoveResult
from merge2048.engine.tiles import Direction, Tile
from merge2048.session_registry import RegisteredGame
from merge2048.tile_bios import TileBio


class GameCreateRequest(BaseModel):
    player_id: str = Field("local", min_length=1, max_length=64)
    # Fixed seed for reproducible games; omitted => random.
    seed: int | None = Field(None, ge=1)


class MoveRequest(BaseModel):
    direction: Direction
    # Engine clock override (seconds). Omit to use the server's monotonic clock.
    now: float | None = None


class TickRequest(BaseModel):
    now: float | None = None


class TileModel(BaseModel):
    id: int
    value: int
    row: int
    col: int
    just_spawned: bool = False
    just_merged: bool = False

    @staticmethod
    def of(tile: Tile) -> "TileModel":
        return TileModel(
            id=tile.id,
            value=tile.value,
            row=tile.row,
            col=tile.col,
            just_spawned=tile.just_spawned,
            just_merged=tile.just_merged,
        )


class EventModel(BaseModel):
    type: str
    move_id: int
    payload: dict[str, Any] = Field(default_factory=dict)
    ts: float

    @staticmethod
    def of(event: GameEvent) -> "EventModel":
        return EventModel(type=event.type, move_id=event.move_id, payload=dict(event.payload), ts=event.ts)


class SessionView(BaseModel):
    game_id: UUID
    player_id: str
    created_at: datetime
    seed: int

    tiles: list[TileModel]
    # Row-major values, 0 = empty. Derived from `tiles` for convenience.
    grid: list[list[int]]

    score: int
    best_score: int
    status: GameStatus
    has_won: bool
    danger_level: DangerLevel
    combo_count: int
    fever_active: bool
    fever_multiplier: int
    next_values: list[int]
    can_undo: bool
    highest_tile: int
    moves: int

    @staticmethod
    def of(game: RegisteredGame) -> "SessionView":
        snap = game.engine.snapshot()
        return SessionView(
            game_id=game.game_id,
            player_id=game.player_id,
            created_at=game.created_at,
            seed=snap.seed,
            tiles=[TileModel.of(t) for t in snap.tiles],
            grid=values_grid(snap.tiles, size=game.engine.config.size),
            score=snap.score,
            best_score=snap.best_score,
            status=snap.status,
            has_won=snap.has_won,
            danger_level=snap.danger_level,
            combo_count=snap.combo_count,
            fever_active=snap.fever_active,
            fever_multiplier=snap.fever_multiplier,
            next_values=list(snap.next_values),
            can_undo=snap.can_undo,
            highest_tile=snap.highest_tile,
            moves=snap.moves,
        )


class MoveResultModel(BaseModel):
    moved: bool
    score_delta: int
    raw_score_delta: int
    merged_values: list[int] = Field(default_factory=list)
    spawned: TileModel | None = None
    events: list[EventModel] = Field(default_factory=list)
    status: GameStatus

    @staticmethod
    def of(result: MoveResult) -> "MoveResultModel":
        return MoveResultModel(
            moved=result.moved,
            score_delta=result.score_delta,
            raw_score_delta=result.raw_score_delta,
            merged_values=list(result.merged_values),
            spawned=TileModel.of(result.spawned) if result.spawned is not None else None,
            events=[EventModel.of(e) for e in result.events],
            status=result.status,
        )


class BioModel(BaseModel):
    value: int
    name: str
    bio: str

    @staticmethod
    def of(bio: TileBio) -> "BioModel":
        return BioModel(value=bio.value, name=bio.name, bio=bio.bio)


class MoveResponse(BaseModel):
    result: MoveResultModel
    session: SessionView
    # Bios this move unlocked for the player for the first time.
    unlocked_bios: list[BioModel] = Field(default_factory=list)


class UndoResponse(BaseModel):
    success: bool
    session: SessionView


class TickResponse(BaseModel):
    events: list[EventModel]
    session: SessionView


class GameListResponse(BaseModel):
    games: list[SessionView]


class ProgressResponse(BaseModel):
    player_id: str
    best_score: int
    unlocked_bios: list[int]


class BiosResponse(BaseModel):
    bios: list[BioModel]
