from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple


class Direction(StrEnum):
    up = "up"
    down = "down"
    left = "left"
    right = "right"


class Cell(NamedTuple):
    row: int
    col: int


@dataclass(frozen=True, slots=True)
class Tile:
    """A single numbered occupant of the board.

    Tiles are immutable: sliding produces a copy at the new coordinates with the same id,
    merging produces a brand-new tile with a freshly minted id.
    """

    id: int
    value: int
    row: int
    col: int
    just_spawned: bool = False
    just_merged: bool = False

    @property
    def cell(self) -> Cell:
        return Cell(self.row, self.col)


def is_power_of_two(value: int) -> bool:
    return value >= 2 and value & (value - 1) == 0
