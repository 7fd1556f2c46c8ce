from __future__ import annotations

import random
from collections import deque
from collections.abc import Callable, Sequence

from merge2048.engine.grid import empty_cells
from merge2048.engine.tiles import Tile


class SpawnScheduler:
    """Weighted random tile generation with a lookahead queue.

    The queue makes upcoming spawn values visible (UI preview). A value is only consumed
    when a tile is actually placed, so the preview never drifts from the board.
    """

    def __init__(self, *, rng: random.Random, four_probability: float = 0.1, lookahead: int = 2) -> None:
        self._rng = rng
        self._four_probability = four_probability
        self._lookahead = lookahead
        self._queue: deque[int] = deque()
        self.reset()

    def reset(self) -> None:
        self._queue.clear()
        for _ in range(self._lookahead):
            self._queue.append(self.generate_value())

    def generate_value(self) -> int:
        return 4 if self._rng.random() < self._four_probability else 2

    @property
    def queue(self) -> tuple[int, ...]:
        return tuple(self._queue)

    def spawn(self, tiles: Sequence[Tile], *, size: int, mint_id: Callable[[], int]) -> Tile | None:
        """Place the next queued value on a uniformly random empty cell.

        Returns None, leaving the queue untouched, when the board is full.
        """

        cells = empty_cells(tiles, size=size)
        if not cells:
            return None

        row, col = self._rng.choice(cells)
        value = self._queue.popleft()
        self._queue.append(self.generate_value())
        return Tile(id=mint_id(), value=value, row=row, col=col, just_spawned=True)
