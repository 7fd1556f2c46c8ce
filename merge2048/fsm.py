from __future__ import annotations

from statemachine import State, StateMachine

from merge2048.engine.session import GameSession, GameStatus


class GameFSM(StateMachine):
    """FSM wrapper around GameSession.status.

    - lifecycle: idle -> playing -> won (sticky, play continues) -> game_over
    - game_over is reachable from playing or won; a new game restarts from any state.
    - the engine mutates the board; the FSM only guards status transitions.
    """

    idle = State(GameStatus.idle.value, value=GameStatus.idle.value, initial=True)
    playing = State(GameStatus.playing.value, value=GameStatus.playing.value)
    won = State(GameStatus.won.value, value=GameStatus.won.value)
    game_over = State(GameStatus.game_over.value, value=GameStatus.game_over.value)

    start_game = idle.to(playing) | playing.to(playing) | won.to(playing) | game_over.to(playing)
    reach_target = playing.to(won)
    run_out = playing.to(game_over) | won.to(game_over)

    def __init__(self, session: GameSession):
        self.session = session
        super().__init__(start_value=session.status.value)

    @property
    def accepts_moves(self) -> bool:
        return self.current_state in (self.playing, self.won)

    def sync_status_to_model(self) -> None:
        self.session.status = GameStatus(str(self.current_state.value))
