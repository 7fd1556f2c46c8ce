from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from merge2048.config import EngineConfig
from merge2048.engine.danger import DangerLevel, classify_danger
from merge2048.engine.events import GameEvent
from merge2048.engine.grid import empty_cells, has_adjacent_pair, highest_value, validate_tiles
from merge2048.engine.moves import resolve_move
from merge2048.engine.scoring import ScoreEngine
from merge2048.engine.session import GameSession, GameStatus, MoveResult, SessionSnapshot
from merge2048.engine.spawn import SpawnScheduler
from merge2048.engine.tiles import Direction
from merge2048.engine.undo import UndoManager
from merge2048.fsm import GameFSM

logger = logging.getLogger(__name__)


class GameEngine:
    """Orchestrates one game session: resolve -> score -> spawn -> classify -> terminal check.

    Synchronous and single-threaded. Callers serialize `apply_move` calls themselves; the
    engine keeps no queue and schedules no timers. Combo/fever deadlines are evaluated
    against the `now` passed in (or `clock()` when omitted).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        seed: int | None = None,
        best_score: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig()
        if seed is None:
            seed = random.SystemRandom().randint(1, 2**31 - 1)
        self.rng = random.Random(seed)
        self.session = GameSession(seed=seed, best_score=best_score)
        self.spawner = SpawnScheduler(
            rng=self.rng,
            four_probability=self.config.four_probability,
            lookahead=self.config.lookahead,
        )
        self.scores = ScoreEngine(self.config)
        self.undo_manager = UndoManager()
        self.last_events: list[GameEvent] = []
        self._clock = clock

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    def _classify(self) -> DangerLevel:
        cfg = self.config
        return classify_danger(
            len(empty_cells(self.session.tiles, size=cfg.size)),
            warning=cfg.danger_warning,
            critical=cfg.danger_critical,
            imminent=cfg.danger_imminent,
        )

    def is_game_over(self) -> bool:
        """Board full and no adjacent equal pair on either axis."""

        size = self.config.size
        tiles = self.session.tiles
        return not empty_cells(tiles, size=size) and not has_adjacent_pair(tiles, size=size)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.of(self.session)

    def new_game(self, *, now: float | None = None) -> GameSession:
        now = self._now(now)
        s = self.session

        s.tiles = []
        s.has_won = False
        s.highest_tile = 0
        s.moves = 0
        s.milestones_reached = set()
        self.scores.reset(s)
        self.undo_manager.reset(s)
        self.spawner.reset()

        fsm = GameFSM(s)
        fsm.start_game()
        fsm.sync_status_to_model()

        events = [GameEvent.at(ts=now, type="GAME_STARTED", move_id=0, payload={"seed": s.seed})]
        for _ in range(self.config.start_tiles):
            tile = self.spawner.spawn(s.tiles, size=self.config.size, mint_id=s.mint_tile_id)
            if tile is None:
                break
            s.tiles.append(tile)
            events.append(
                GameEvent.at(
                    ts=now,
                    type="TILE_SPAWNED",
                    move_id=0,
                    payload={"value": tile.value, "row": tile.row, "col": tile.col},
                )
            )

        s.next_values = self.spawner.queue
        s.highest_tile = highest_value(s.tiles)
        s.danger_level = self._classify()
        self.last_events = events

        logger.debug("new game seed=%s tiles=%s", s.seed, [(t.row, t.col, t.value) for t in s.tiles])
        return s

    def tick(self, *, now: float | None = None) -> list[GameEvent]:
        """Lapse expired combo/fever timers without making a move."""

        now = self._now(now)
        if self.session.status not in (GameStatus.playing, GameStatus.won):
            self.last_events = []
            return []
        self.last_events = self.scores.expire(self.session, now=now)
        return self.last_events

    def apply_move(self, direction: Direction | str, *, now: float | None = None) -> MoveResult:
        direction = Direction(direction)
        now = self._now(now)
        s = self.session
        cfg = self.config

        fsm = GameFSM(s)
        if not fsm.accepts_moves:
            self.last_events = []
            return MoveResult(moved=False, status=s.status)

        events = self.scores.expire(s, now=now)

        resolved = resolve_move(s.tiles, direction, size=cfg.size, mint_id=s.mint_tile_id)
        if not resolved.moved:
            self.last_events = events
            return MoveResult(moved=False, events=events, status=s.status)

        self.undo_manager.capture(s, tiles=s.tiles, score=s.score)
        s.moves += 1
        s.tiles = resolved.tiles
        validate_tiles(s.tiles, size=cfg.size)

        for tile in resolved.merged_tiles:
            events.append(
                GameEvent.at(
                    ts=now,
                    type="TILE_MERGED",
                    move_id=s.moves,
                    payload={"value": tile.value, "row": tile.row, "col": tile.col},
                )
            )

        applied, score_events = self.scores.apply(s, raw_delta=resolved.score_delta, now=now)
        events.extend(score_events)

        for value in sorted(set(resolved.merged_values)):
            if value in cfg.milestones and value not in s.milestones_reached:
                s.milestones_reached.add(value)
                events.append(GameEvent.at(ts=now, type="MILESTONE_REACHED", move_id=s.moves, payload={"value": value}))

        top_merge = max(resolved.merged_values, default=0)
        if top_merge >= cfg.big_merge_threshold:
            events.append(GameEvent.at(ts=now, type="BIG_MERGE", move_id=s.moves, payload={"value": top_merge}))

        highest = highest_value(s.tiles)
        if highest > s.highest_tile:
            s.highest_tile = highest
            events.append(GameEvent.at(ts=now, type="NEW_HIGHEST_TILE", move_id=s.moves, payload={"value": highest}))

        if not s.has_won and highest >= cfg.target_value:
            s.has_won = True
            fsm.reach_target()
            logger.debug("target %s reached on move %s", cfg.target_value, s.moves)
            events.append(GameEvent.at(ts=now, type="WON", move_id=s.moves, payload={"value": highest}))

        events.extend(self.scores.update_best(s, now=now))

        spawned = self.spawner.spawn(s.tiles, size=cfg.size, mint_id=s.mint_tile_id)
        if spawned is not None:
            s.tiles.append(spawned)
            events.append(
                GameEvent.at(
                    ts=now,
                    type="TILE_SPAWNED",
                    move_id=s.moves,
                    payload={"value": spawned.value, "row": spawned.row, "col": spawned.col},
                )
            )
        s.next_values = self.spawner.queue
        s.danger_level = self._classify()

        if self.is_game_over():
            fsm.run_out()
            logger.debug("game over after move %s score=%s", s.moves, s.score)
            events.append(
                GameEvent.at(
                    ts=now,
                    type="GAME_OVER",
                    move_id=s.moves,
                    payload={"final_score": s.score, "highest_tile": s.highest_tile},
                )
            )

        fsm.sync_status_to_model()
        self.last_events = events

        logger.debug(
            "move %s %s raw=%s applied=%s merged=%s status=%s",
            s.moves,
            direction.value,
            resolved.score_delta,
            applied,
            resolved.merged_values,
            s.status.value,
        )
        return MoveResult(
            moved=True,
            score_delta=applied,
            raw_score_delta=resolved.score_delta,
            merged_values=list(resolved.merged_values),
            spawned=spawned,
            events=events,
            status=s.status,
        )

    def undo(self, *, now: float | None = None) -> bool:
        """Rewind the last move's tiles and score. Allowed once per game."""

        now = self._now(now)
        s = self.session
        if s.status not in (GameStatus.playing, GameStatus.won):
            self.last_events = []
            return False

        if not self.undo_manager.restore(s):
            self.last_events = []
            return False

        s.danger_level = self._classify()
        self.last_events = [GameEvent.at(ts=now, type="UNDO", move_id=s.moves, payload={"score": s.score})]
        logger.debug("undo restored score=%s", s.score)
        return True
