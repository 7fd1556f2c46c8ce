from __future__ import annotations

import itertools
from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import replace

from merge2048.engine.tiles import Cell, Tile, is_power_of_two

# A cell in a grid view holds a Tile, a bare value (0 means empty), or None.
GridCell = Tile | int | None
Grid = list[list[Tile | None]]


def validate_tiles(tiles: Iterable[Tile], *, size: int) -> None:
    """Raise ValueError if the tile set breaks a board invariant.

    These are programmer errors (a resolver or grid bug), never player-reachable states.
    """

    seen_cells: set[Cell] = set()
    seen_ids: set[int] = set()
    for t in tiles:
        if not (0 <= t.row < size and 0 <= t.col < size):
            raise ValueError(f"Tile {t.id} out of bounds at ({t.row}, {t.col})")
        if not is_power_of_two(t.value):
            raise ValueError(f"Tile {t.id} has invalid value {t.value}")
        if t.cell in seen_cells:
            raise ValueError(f"Two tiles occupy ({t.row}, {t.col})")
        if t.id in seen_ids:
            raise ValueError(f"Duplicate tile id {t.id}")
        seen_cells.add(t.cell)
        seen_ids.add(t.id)


def to_grid(tiles: Iterable[Tile], *, size: int) -> Grid:
    grid: Grid = [[None] * size for _ in range(size)]
    for t in tiles:
        if grid[t.row][t.col] is not None:
            raise ValueError(f"Two tiles occupy ({t.row}, {t.col})")
        grid[t.row][t.col] = t
    return grid


def from_grid(grid: Sequence[Sequence[GridCell]], *, id_source: Iterator[int] | None = None) -> list[Tile]:
    """Flatten a grid view back into a tile list in row-major order.

    Tile cells keep their id but take the coordinates of the cell they sit in.
    Integer cells (0 = empty) mint new tiles with ids drawn from `id_source`.
    """

    ids = id_source if id_source is not None else itertools.count(1)
    out: list[Tile] = []
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            if cell is None or cell == 0:
                continue
            if isinstance(cell, Tile):
                if (cell.row, cell.col) == (r, c):
                    out.append(cell)
                else:
                    out.append(replace(cell, row=r, col=c))
            else:
                if not is_power_of_two(int(cell)):
                    raise ValueError(f"Invalid tile value {cell} at ({r}, {c})")
                out.append(Tile(id=next(ids), value=int(cell), row=r, col=c))
    return out


def values_grid(tiles: Iterable[Tile], *, size: int) -> list[list[int]]:
    """Plain integer view of the board (0 = empty)."""

    return [[t.value if t is not None else 0 for t in row] for row in to_grid(tiles, size=size)]


def empty_cells(tiles: Iterable[Tile], *, size: int) -> list[Cell]:
    occupied = {t.cell for t in tiles}
    return [Cell(r, c) for r in range(size) for c in range(size) if (r, c) not in occupied]


def position_multiset(tiles: Iterable[Tile]) -> Counter[tuple[int, int, int]]:
    return Counter((t.row, t.col, t.value) for t in tiles)


def has_adjacent_pair(tiles: Iterable[Tile], *, size: int) -> bool:
    """True if any two horizontally or vertically adjacent tiles share a value."""

    grid = to_grid(tiles, size=size)
    for r in range(size):
        for c in range(size):
            current = grid[r][c]
            if current is None:
                continue
            right = grid[r][c + 1] if c + 1 < size else None
            below = grid[r + 1][c] if r + 1 < size else None
            if right is not None and right.value == current.value:
                return True
            if below is not None and below.value == current.value:
                return True
    return False


def highest_value(tiles: Iterable[Tile]) -> int:
    return max((t.value for t in tiles), default=0)


def total_value(tiles: Iterable[Tile]) -> int:
    return sum(t.value for t in tiles)
