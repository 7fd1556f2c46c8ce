from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from merge2048.config import EngineConfig
from merge2048.engine.game import GameEngine


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True)
class RegisteredGame:
    game_id: UUID
    player_id: str
    engine: GameEngine
    created_at: datetime


class SessionRegistry:
    """In-process map of live games keyed by game_id.

    Each game owns an independent GameEngine; nothing is shared between games.
    Sessions live only as long as the process (no persistence format for game state).
    """

    def __init__(self) -> None:
        self._games: dict[UUID, RegisteredGame] = {}

    def create(
        self,
        *,
        player_id: str,
        config: EngineConfig,
        seed: int | None = None,
        best_score: int = 0,
    ) -> RegisteredGame:
        engine = GameEngine(config, seed=seed, best_score=best_score)
        engine.new_game()
        game = RegisteredGame(game_id=uuid4(), player_id=player_id, engine=engine, created_at=_now())
        self._games[game.game_id] = game
        return game

    def get(self, game_id: UUID) -> RegisteredGame | None:
        return self._games.get(game_id)

    def require(self, game_id: UUID) -> RegisteredGame:
        game = self.get(game_id)
        if game is None:
            raise ValueError("Game not found")
        return game

    def list_games(self) -> list[RegisteredGame]:
        return sorted(self._games.values(), key=lambda g: g.created_at, reverse=True)

    def remove(self, game_id: UUID) -> None:
        self._games.pop(game_id, None)


registry = SessionRegistry()
