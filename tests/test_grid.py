from __future__ import annotations

import itertools

import pytest

from merge2048.engine.grid import (
    empty_cells,
    from_grid,
    has_adjacent_pair,
    to_grid,
    validate_tiles,
    values_grid,
)
from merge2048.engine.tiles import Cell, Tile


def test_to_grid_and_from_grid_round_trip_values_and_positions() -> None:
    rows = [
        [2, 0, 0, 4],
        [0, 8, 0, 0],
        [0, 0, 0, 0],
        [16, 0, 2, 0],
    ]
    tiles = from_grid(rows, id_source=itertools.count(1))
    assert values_grid(tiles, size=4) == rows

    # Tile cells keep their id; coordinates follow the cell.
    again = from_grid(to_grid(tiles, size=4))
    assert again == tiles


def test_from_grid_moves_tile_to_its_cell() -> None:
    t = Tile(id=7, value=2, row=0, col=0)
    out = from_grid([[None, None], [None, t]])
    assert out == [Tile(id=7, value=2, row=1, col=1)]


def test_empty_cells_lists_unoccupied_in_row_major_order() -> None:
    tiles = [Tile(1, 2, 0, 0), Tile(2, 4, 1, 1)]
    assert empty_cells(tiles, size=2) == [Cell(0, 1), Cell(1, 0)]


def test_to_grid_rejects_two_tiles_in_one_cell() -> None:
    with pytest.raises(ValueError):
        to_grid([Tile(1, 2, 0, 0), Tile(2, 4, 0, 0)], size=4)


@pytest.mark.parametrize(
    "tiles",
    [
        [Tile(1, 2, 0, 0), Tile(1, 4, 0, 1)],  # duplicate id
        [Tile(1, 3, 0, 0)],  # not a power of two
        [Tile(1, 2, 4, 0)],  # out of bounds
    ],
)
def test_validate_tiles_flags_invariant_violations(tiles: list[Tile]) -> None:
    with pytest.raises(ValueError):
        validate_tiles(tiles, size=4)


def test_from_grid_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        from_grid([[6, 0], [0, 0]])


def test_has_adjacent_pair_checks_both_axes() -> None:
    horizontal = from_grid([[2, 2], [4, 8]])
    vertical = from_grid([[2, 4], [2, 8]])
    none = from_grid([[2, 4], [4, 2]])

    assert has_adjacent_pair(horizontal, size=2)
    assert has_adjacent_pair(vertical, size=2)
    assert not has_adjacent_pair(none, size=2)
