from __future__ import annotations

import itertools
from collections.abc import Generator, Sequence

import pytest

from merge2048.engine.game import GameEngine
from merge2048.engine.grid import from_grid


def _load_board(engine: GameEngine, rows: Sequence[Sequence[int]], *, first_id: int = 10_000) -> None:
    """Replace the engine's board with a fixed layout (0 = empty).

    Loaded tiles take ids from a range the engine's own counter never reaches in a test.
    """

    engine.session.tiles = from_grid(rows, id_source=itertools.count(first_id))


@pytest.fixture()
def engine() -> GameEngine:
    """A seeded engine with a started game at t=0."""

    eng = GameEngine(seed=1234)
    eng.new_game(now=0.0)
    return eng


@pytest.fixture()
def client_and_redis():
    """FastAPI TestClient wired to fakeredis and a fresh session registry."""

    import fakeredis
    from fastapi.testclient import TestClient

    from merge2048.api.deps import get_redis, get_registry
    from merge2048.main import app
    from merge2048.session_registry import SessionRegistry

    r = fakeredis.FakeRedis(decode_responses=True)
    reg = SessionRegistry()

    def _override_redis() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override_redis
    app.dependency_overrides[get_registry] = lambda: reg
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()


@pytest.fixture()
def load_board():
    return _load_board
