from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Union

if TYPE_CHECKING:
    from .entities import Food, Segment

    Occupant = Union[Segment, Food]


class Direction(str, Enum):
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True, slots=True)
class Position:
    x: int
    y: int

    def step(self, direction: Direction) -> "Position":
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class GridOccupancy:
    """Cell -> occupant table for a width x height grid.

    Reads outside the grid return ``None`` and writes outside the grid are
    ignored, so neighbours of edge cells can be read without a separate
    bounds check.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._cells: List[List[Optional["Occupant"]]] = [[None] * height for _ in range(width)]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self._width and 0 <= position.y < self._height

    def get(self, position: Position) -> Optional["Occupant"]:
        if not self.in_bounds(position):
            return None
        return self._cells[position.x][position.y]

    def set(self, position: Position, occupant: Optional["Occupant"]) -> None:
        if self.in_bounds(position):
            self._cells[position.x][position.y] = occupant

    def copy(self) -> "GridOccupancy":
        duplicate = GridOccupancy.__new__(GridOccupancy)
        duplicate._width = self._width
        duplicate._height = self._height
        duplicate._cells = [column[:] for column in self._cells]
        return duplicate

    def clear(self) -> None:
        for column in self._cells:
            for y in range(self._height):
                column[y] = None

    def positions(self) -> Iterator[Position]:
        for x in range(self._width):
            for y in range(self._height):
                yield Position(x, y)

    def find_food(self) -> Optional[Position]:
        # Imported lazily: entities depends on this module for Position.
        from .entities import Food

        found = None
        for x, column in enumerate(self._cells):
            for y, occupant in enumerate(column):
                if isinstance(occupant, Food):
                    found = Position(x, y)
        return found

    def empty_cells(self) -> List[Position]:
        return [
            Position(x, y)
            for x, column in enumerate(self._cells)
            for y, occupant in enumerate(column)
            if occupant is None
        ]

    def occupied_count(self) -> int:
        return sum(1 for column in self._cells for occupant in column if occupant is not None)
