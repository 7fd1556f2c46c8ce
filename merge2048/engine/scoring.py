from __future__ import annotations

import logging

from merge2048.config import EngineConfig
from merge2048.engine.events import GameEvent
from merge2048.engine.session import GameSession

logger = logging.getLogger(__name__)


class ScoreEngine:
    """Base score plus the combo / fever multiplier state machine.

    All timer state lives on the session; `now` is always supplied by the caller.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def reset(self, session: GameSession) -> None:
        session.score = 0
        session.combo_count = 0
        session.combo_deadline = None
        session.last_scoring_time = None
        session.fever_active = False
        session.fever_multiplier = 1

    def expire(self, session: GameSession, *, now: float) -> list[GameEvent]:
        """Lapse combo and fever timers that have run out by `now`."""

        events: list[GameEvent] = []

        if session.combo_count and session.combo_deadline is not None and now > session.combo_deadline:
            broken = session.combo_count
            session.combo_count = 0
            session.combo_deadline = None
            logger.debug("combo expired at %s (was %s)", now, broken)
            if broken >= self.config.combo_break_min:
                events.append(GameEvent.at(ts=now, type="COMBO_BROKEN", move_id=session.moves, payload={"count": broken}))
            events.append(GameEvent.at(ts=now, type="COMBO_CHANGED", move_id=session.moves, payload={"count": 0}))

        if (
            session.fever_active
            and session.last_scoring_time is not None
            and now - session.last_scoring_time > self.config.fever_timeout
        ):
            session.fever_active = False
            session.fever_multiplier = 1
            logger.debug("fever ended at %s", now)
            events.append(GameEvent.at(ts=now, type="FEVER_CHANGED", move_id=session.moves, payload={"active": False}))

        return events

    def apply(self, session: GameSession, *, raw_delta: int, now: float) -> tuple[int, list[GameEvent]]:
        """Score one successful move and advance the streak state.

        Returns the applied score. The multiplier in force before this move is used, so the
        move that triggers fever is still scored at 1x.
        """

        if raw_delta <= 0:
            return 0, []

        events: list[GameEvent] = []
        applied = raw_delta * session.fever_multiplier if session.fever_active else raw_delta
        session.score += applied

        session.combo_count += 1
        session.combo_deadline = now + self.config.combo_window
        session.last_scoring_time = now
        events.append(
            GameEvent.at(ts=now, type="COMBO_CHANGED", move_id=session.moves, payload={"count": session.combo_count})
        )

        if not session.fever_active and session.combo_count >= self.config.fever_threshold:
            session.fever_active = True
            session.fever_multiplier = self.config.fever_multiplier
            logger.debug("fever started at %s (combo=%s)", now, session.combo_count)
            events.append(GameEvent.at(ts=now, type="FEVER_CHANGED", move_id=session.moves, payload={"active": True}))

        return applied, events

    def update_best(self, session: GameSession, *, now: float) -> list[GameEvent]:
        if session.score <= session.best_score:
            return []
        session.best_score = session.score
        return [GameEvent.at(ts=now, type="BEST_SCORE", move_id=session.moves, payload={"score": session.score})]
