from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

import redis
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from merge2048.actions import CommandName, CommandResult, dispatch_command, end_game, fan_out, move_command
from merge2048.api.deps import get_engine_config, get_redis, get_registry
from merge2048.api.models import (
    BioModel,
    BiosResponse,
    EventModel,
    GameCreateRequest,
    GameListResponse,
    MoveRequest,
    MoveResponse,
    MoveResultModel,
    ProgressResponse,
    SessionView,
    TickRequest,
    TickResponse,
    UndoResponse,
)
from merge2048.config import EngineConfig
from merge2048.engine.events import GameEvent
from merge2048.lock import GameBusyError
from merge2048.progress_store import get_best_score, get_progress
from merge2048.session_registry import RegisteredGame, SessionRegistry
from merge2048.streams import EventStream, read_events
from merge2048.tile_bios import TILE_BIOS, bio_for
from merge2048.websocket_hub import hub

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_game(registry: SessionRegistry, game_id: UUID) -> RegisteredGame:
    game = registry.get(game_id)
    if game is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return game


@contextmanager
def _command_errors(command: str, game_id: UUID) -> Iterator[None]:
    try:
        yield
    except GameBusyError as e:
        logger.warning("rejected %s for game %s: move in flight", command, game_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


def _run(
    *,
    r: redis.Redis,
    registry: SessionRegistry,
    game_id: UUID,
    command: CommandName,
    payload: dict[str, object] | None = None,
) -> CommandResult:
    _require_game(registry, game_id)
    with _command_errors(command, game_id):
        return dispatch_command(r=r, registry=registry, game_id=game_id, command=command, payload=payload)


async def _notify(game: RegisteredGame, events: list[GameEvent]) -> None:
    session = game.engine.session
    await hub.game_updated(
        str(game.game_id),
        status=session.status.value,
        score=session.score,
        event_types=[e.type for e in events],
    )


@router.websocket("/ws/game/{game_id}")
async def game_updates_ws(websocket: WebSocket, game_id: UUID) -> None:
    gid = str(game_id)
    await hub.connect(gid, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(gid, websocket)
    except Exception:
        await hub.disconnect(gid, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/game", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def create_game_route(
    payload: GameCreateRequest,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
    config: EngineConfig = Depends(get_engine_config),
) -> SessionView:
    best = get_best_score(r=r, player_id=payload.player_id)
    game = registry.create(player_id=payload.player_id, config=config, seed=payload.seed, best_score=best)
    fan_out(r=r, game=game, events=game.engine.last_events)
    logger.info("created game %s for player %s (seed=%s)", game.game_id, game.player_id, game.engine.session.seed)
    return SessionView.of(game)


@router.get("/game", response_model=GameListResponse)
async def list_games_route(registry: SessionRegistry = Depends(get_registry)) -> GameListResponse:
    return GameListResponse(games=[SessionView.of(g) for g in registry.list_games()])


@router.get("/game/{game_id}", response_model=SessionView)
async def get_game_route(game_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> SessionView:
    return SessionView.of(_require_game(registry, game_id))


@router.delete("/game/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_game_route(
    game_id: UUID,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    """Release a finished or abandoned game. Its event stream and player progress stay in Redis."""

    _require_game(registry, game_id)
    with _command_errors("end", game_id):
        end_game(r=r, registry=registry, game_id=game_id)


@router.post("/game/{game_id}/move", response_model=MoveResponse)
async def move_route(
    game_id: UUID,
    payload: MoveRequest,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> MoveResponse:
    _require_game(registry, game_id)
    with _command_errors("move", game_id):
        result = move_command(r=r, registry=registry, game_id=game_id, direction=payload.direction.value, now=payload.now)
    await _notify(result.game, result.move.events)

    unlocked = [bio for bio in (bio_for(v) for v in result.unlocked_bios) if bio is not None]
    return MoveResponse(
        result=MoveResultModel.of(result.move),
        session=SessionView.of(result.game),
        unlocked_bios=[BioModel.of(b) for b in unlocked],
    )


@router.post("/game/{game_id}/undo", response_model=UndoResponse)
async def undo_route(
    game_id: UUID,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> UndoResponse:
    result = _run(r=r, registry=registry, game_id=game_id, command="undo")
    await _notify(result.game, result.events)
    return UndoResponse(success=bool(result.undone), session=SessionView.of(result.game))


@router.post("/game/{game_id}/new", response_model=SessionView)
async def new_game_route(
    game_id: UUID,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionView:
    result = _run(r=r, registry=registry, game_id=game_id, command="new")
    await _notify(result.game, result.events)
    return SessionView.of(result.game)


@router.post("/game/{game_id}/tick", response_model=TickResponse)
async def tick_route(
    game_id: UUID,
    payload: TickRequest,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> TickResponse:
    result = _run(r=r, registry=registry, game_id=game_id, command="tick", payload={"now": payload.now})
    if result.events:
        await _notify(result.game, result.events)
    return TickResponse(events=[EventModel.of(e) for e in result.events], session=SessionView.of(result.game))


@router.get("/game/{game_id}/events")
async def game_events_route(
    game_id: UUID,
    count: int = 50,
    r: redis.Redis = Depends(get_redis),
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, object]:
    """Debug endpoint: read the game's event stream (what audio/haptics consumers see)."""

    _require_game(registry, game_id)
    if count < 1 or count > 500:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 500")

    stream = EventStream(game_id=str(game_id))
    entries = read_events(r=r, stream=stream, count=count)
    return {
        "game_id": str(game_id),
        "stream": stream.key,
        "messages": [{"id": mid, "fields": fields} for mid, fields in entries],
    }


@router.get("/players/{player_id}/progress", response_model=ProgressResponse)
async def player_progress_route(player_id: str, r: redis.Redis = Depends(get_redis)) -> ProgressResponse:
    progress = get_progress(r=r, player_id=player_id)
    return ProgressResponse(
        player_id=progress.player_id,
        best_score=progress.best_score,
        unlocked_bios=progress.unlocked_bios,
    )


@router.get("/bios", response_model=BiosResponse)
async def bios_route() -> BiosResponse:
    return BiosResponse(bios=[BioModel.of(b) for b in TILE_BIOS.values()])
