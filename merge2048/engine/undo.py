from __future__ import annotations

from collections.abc import Sequence

from merge2048.engine.session import GameSession, UndoSnapshot
from merge2048.engine.tiles import Tile


class UndoManager:
    """Single-slot rewind, usable once per game."""

    def reset(self, session: GameSession) -> None:
        session.undo_snapshot = None
        session.undo_consumed = False

    def capture(self, session: GameSession, *, tiles: Sequence[Tile], score: int) -> None:
        # Once the one undo is spent there is nothing left to capture for.
        if session.undo_consumed:
            return
        session.undo_snapshot = UndoSnapshot(tiles=tuple(tiles), score=score)

    def restore(self, session: GameSession) -> bool:
        snapshot = session.undo_snapshot
        if snapshot is None or session.undo_consumed:
            return False
        session.tiles = list(snapshot.tiles)
        session.score = snapshot.score
        session.undo_snapshot = None
        session.undo_consumed = True
        return True
