from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from merge2048.engine.grid import position_multiset, to_grid
from merge2048.engine.tiles import Direction, Tile

IdMinter = Callable[[], int]


@dataclass(frozen=True, slots=True)
class LineResult:
    tiles: list[Tile]
    score: int
    merged_values: list[int]


@dataclass(frozen=True, slots=True)
class ResolvedMove:
    """Outcome of sliding the whole board in one direction, before any spawn.

    `score_delta` is the raw merge score (sum of new merged values), not fever-adjusted.
    """

    tiles: list[Tile]
    moved: bool
    score_delta: int
    merged_values: list[int] = field(default_factory=list)
    merged_tiles: list[Tile] = field(default_factory=list)


def slide_line(line: Sequence[Tile | None], *, mint_id: IdMinter) -> LineResult:
    """Compact and merge one line toward index 0.

    Each source tile merges at most once, and a freshly merged tile is never merged
    again in the same pass: [2, 2, 2, 2] -> [4, 4], never [8].
    Coordinates on the returned tiles are not meaningful yet; the caller assigns them.
    """

    packed = [t for t in line if t is not None]
    out: list[Tile] = []
    merged_values: list[int] = []
    score = 0

    i = 0
    while i < len(packed):
        current = packed[i]
        if i + 1 < len(packed) and packed[i + 1].value == current.value:
            value = current.value * 2
            out.append(Tile(id=mint_id(), value=value, row=current.row, col=current.col, just_merged=True))
            merged_values.append(value)
            score += value
            i += 2
        else:
            out.append(replace(current, just_spawned=False, just_merged=False))
            i += 1

    return LineResult(tiles=out, score=score, merged_values=merged_values)


def _line_cells(direction: Direction, index: int, *, size: int) -> list[tuple[int, int]]:
    """Board coordinates of one line, ordered so merging proceeds toward position 0."""

    if direction in (Direction.left, Direction.right):
        cells = [(index, c) for c in range(size)]
    else:
        cells = [(r, index) for r in range(size)]
    if direction in (Direction.right, Direction.down):
        cells.reverse()
    return cells


def resolve_move(tiles: Sequence[Tile], direction: Direction | str, *, size: int, mint_id: IdMinter) -> ResolvedMove:
    """Apply the slide-and-merge rule to every row or column independently.

    Validity is judged on the multiset of (row, col, value) triples rather than ids,
    since merges intentionally discard the ids of their source tiles.
    """

    direction = Direction(direction)
    grid = to_grid(tiles, size=size)

    new_tiles: list[Tile] = []
    merged_values: list[int] = []
    merged_tiles: list[Tile] = []
    score = 0

    for index in range(size):
        cells = _line_cells(direction, index, size=size)
        result = slide_line([grid[r][c] for r, c in cells], mint_id=mint_id)
        score += result.score
        merged_values.extend(result.merged_values)

        # Trailing positions stay empty; only the packed prefix is written back.
        for tile, (r, c) in zip(result.tiles, cells):
            placed = replace(tile, row=r, col=c)
            new_tiles.append(placed)
            if placed.just_merged:
                merged_tiles.append(placed)

    moved = position_multiset(new_tiles) != position_multiset(tiles)
    if not moved:
        # Nothing changed: hand back the original tiles untouched.
        return ResolvedMove(tiles=list(tiles), moved=False, score_delta=0)

    new_tiles.sort(key=lambda t: (t.row, t.col))
    return ResolvedMove(
        tiles=new_tiles,
        moved=True,
        score_delta=score,
        merged_values=merged_values,
        merged_tiles=merged_tiles,
    )
