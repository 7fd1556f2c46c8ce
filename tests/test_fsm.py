from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from merge2048.engine.session import GameSession, GameStatus
from merge2048.fsm import GameFSM


def test_lifecycle_transitions_sync_to_session() -> None:
    s = GameSession(seed=1)
    fsm = GameFSM(s)
    assert fsm.accepts_moves is False

    fsm.start_game()
    fsm.reach_target()
    fsm.sync_status_to_model()
    assert s.status == GameStatus.won
    assert fsm.accepts_moves is True

    fsm.run_out()
    fsm.sync_status_to_model()
    assert s.status == GameStatus.game_over
    assert fsm.accepts_moves is False


def test_fsm_resumes_from_session_status() -> None:
    s = GameSession(seed=1, status=GameStatus.game_over)
    fsm = GameFSM(s)
    assert fsm.current_state == fsm.game_over

    fsm.start_game()
    fsm.sync_status_to_model()
    assert s.status == GameStatus.playing


@pytest.mark.parametrize(
    ("status", "event"),
    [
        (GameStatus.idle, "reach_target"),
        (GameStatus.idle, "run_out"),
        (GameStatus.won, "reach_target"),
        (GameStatus.game_over, "run_out"),
    ],
)
def test_invalid_transitions_raise(status: GameStatus, event: str) -> None:
    fsm = GameFSM(GameSession(seed=1, status=status))
    with pytest.raises(TransitionNotAllowed):
        fsm.send(event)
