from __future__ import annotations

from merge2048.config import EngineConfig
from merge2048.engine.scoring import ScoreEngine
from merge2048.engine.session import GameSession


def _types(events) -> list[str]:  # type: ignore[no-untyped-def]
    return [e.type for e in events]


def test_fever_scales_sixth_scoring_move_and_lapses_after_two_seconds() -> None:
    scores = ScoreEngine(EngineConfig())
    s = GameSession(seed=1)

    applied: list[int] = []
    for i in range(6):
        now = i * 0.5
        scores.expire(s, now=now)
        got, _ = scores.apply(s, raw_delta=8, now=now)
        applied.append(got)

    # The fifth move activates fever at 1x; the sixth is doubled.
    assert applied == [8, 8, 8, 8, 8, 16]
    assert s.fever_active is True
    assert s.score == sum(applied)

    # Combo window (1.5s) has passed, fever window (2s) has not.
    events = scores.expire(s, now=2.5 + 1.9)
    assert s.combo_count == 0
    assert s.fever_active is True
    assert "FEVER_CHANGED" not in _types(events)

    events = scores.expire(s, now=2.5 + 2.1)
    assert s.fever_active is False
    assert s.fever_multiplier == 1
    assert "FEVER_CHANGED" in _types(events)


def test_combo_resets_after_window() -> None:
    scores = ScoreEngine(EngineConfig(combo_window=1.5))
    s = GameSession(seed=1)

    scores.apply(s, raw_delta=4, now=0.0)
    scores.apply(s, raw_delta=4, now=1.0)
    assert s.combo_count == 2

    assert scores.expire(s, now=2.4) == []
    assert s.combo_count == 2

    events = scores.expire(s, now=2.6)
    assert s.combo_count == 0
    assert _types(events) == ["COMBO_CHANGED"]


def test_long_combo_break_is_reported() -> None:
    scores = ScoreEngine(EngineConfig(combo_break_min=3, fever_threshold=10))
    s = GameSession(seed=1)
    for i in range(3):
        scores.apply(s, raw_delta=4, now=float(i))

    events = scores.expire(s, now=10.0)
    assert _types(events) == ["COMBO_BROKEN", "COMBO_CHANGED"]
    assert events[0].payload == {"count": 3}


def test_non_scoring_move_leaves_streak_untouched() -> None:
    scores = ScoreEngine(EngineConfig())
    s = GameSession(seed=1)
    scores.apply(s, raw_delta=4, now=0.0)

    applied, events = scores.apply(s, raw_delta=0, now=0.5)
    assert applied == 0
    assert events == []
    assert s.combo_count == 1


def test_best_score_tracks_running_score() -> None:
    scores = ScoreEngine(EngineConfig())
    s = GameSession(seed=1, best_score=10)

    scores.apply(s, raw_delta=8, now=0.0)
    assert scores.update_best(s, now=0.0) == []
    assert s.best_score == 10

    scores.apply(s, raw_delta=8, now=0.1)
    events = scores.update_best(s, now=0.1)
    assert s.best_score == 16
    assert _types(events) == ["BEST_SCORE"]
