from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal
from uuid import UUID

import redis

from merge2048.engine.events import GameEvent
from merge2048.engine.session import GameStatus, MoveResult
from merge2048.lock import game_lock
from merge2048.progress_store import record_score, unlock_bios
from merge2048.session_registry import RegisteredGame, SessionRegistry
from merge2048.streams import EventStream, publish_events

logger = logging.getLogger(__name__)

CommandName = Literal["undo", "new", "tick"]


@dataclass(frozen=True, slots=True)
class CommandResult:
    game: RegisteredGame
    events: list[GameEvent]
    stream_entry_ids: list[str]
    undone: bool | None = None


def fan_out(*, r: redis.Redis, game: RegisteredGame, events: list[GameEvent], merged_values: list[int] | None = None) -> tuple[list[str], list[int]]:
    """Hand engine output to the collaborators that persist or react to it.

    - every event goes to the game's Redis Stream
    - best score is written back when beaten or when the game ends
    - merged tile values unlock their bios for the player
    """

    ids = publish_events(r=r, stream=EventStream(game_id=str(game.game_id)), events=events)

    session = game.engine.session
    if any(e.type in ("BEST_SCORE", "GAME_OVER") for e in events):
        record_score(r=r, player_id=game.player_id, score=session.score)

    unlocked: list[int] = []
    if merged_values:
        unlocked = unlock_bios(r=r, player_id=game.player_id, values=merged_values)

    return ids, unlocked


@dataclass(frozen=True, slots=True)
class MoveCommandResult:
    game: RegisteredGame
    move: MoveResult
    stream_entry_ids: list[str]
    unlocked_bios: list[int] = field(default_factory=list)


def move_command(
    *,
    r: redis.Redis,
    registry: SessionRegistry,
    game_id: UUID,
    direction: str,
    now: float | None = None,
) -> MoveCommandResult:
    """Apply one move under the per-game lock and fan its events out."""

    with game_lock(r=r, game_id=str(game_id)):
        game = registry.require(game_id)
        engine = game.engine
        result = engine.apply_move(direction, now=now)
        if not result.moved and engine.session.status == GameStatus.game_over:
            logger.info("move rejected for finished game %s", game_id)
        ids, unlocked = fan_out(r=r, game=game, events=result.events, merged_values=result.merged_values)
    return MoveCommandResult(game=game, move=result, stream_entry_ids=ids, unlocked_bios=unlocked)


def end_game(*, r: redis.Redis, registry: SessionRegistry, game_id: UUID) -> RegisteredGame:
    """Drop a game from the registry once no command for it is in flight."""

    with game_lock(r=r, game_id=str(game_id)):
        game = registry.require(game_id)
        registry.remove(game_id)
    logger.info("ended game %s for player %s", game_id, game.player_id)
    return game


def dispatch_command(
    *,
    r: redis.Redis,
    registry: SessionRegistry,
    game_id: UUID,
    command: CommandName,
    payload: dict[str, Any] | None = None,
) -> CommandResult:
    """Entry point for the HTTP routes.

    Applies a command by:
    - acquiring the per-game lock (one command in flight per game)
    - running it against the game's engine
    - fanning the resulting events out to Redis
    """

    payload = payload or {}
    now = payload.get("now")

    with game_lock(r=r, game_id=str(game_id)):
        game = registry.require(game_id)
        engine = game.engine

        if command == "undo":
            undone = engine.undo(now=now)
            ids, _ = fan_out(r=r, game=game, events=engine.last_events)
            return CommandResult(game=game, events=engine.last_events, stream_entry_ids=ids, undone=undone)

        if command == "new":
            engine.new_game(now=now)
            ids, _ = fan_out(r=r, game=game, events=engine.last_events)
            return CommandResult(game=game, events=engine.last_events, stream_entry_ids=ids)

        if command == "tick":
            events = engine.tick(now=now)
            ids, _ = fan_out(r=r, game=game, events=events)
            return CommandResult(game=game, events=events, stream_entry_ids=ids)

        raise ValueError(f"Unknown command: {command}")
