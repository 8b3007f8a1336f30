from __future__ import annotations

from collections import deque

import pytest

from snakesim.entities import Food, Segment
from snakesim.grid import Direction, GridOccupancy, Position
from snakesim.pathfinding import direction_between, find_path
from snakesim.perception import Perception, build_perception


def _perception(width, height, head, food, blocked=()) -> Perception:
    grid = GridOccupancy(width, height)
    grid.set(Position(*head), Segment(Position(*head)))
    for cell in blocked:
        grid.set(Position(*cell), Segment(Position(*cell)))
    food_position = None
    if food is not None:
        food_position = Position(*food)
        grid.set(food_position, Food(food_position))
    return build_perception(Position(*head), food_position, grid)


def _walk(start: Position, path) -> list[Position]:
    cells = [start]
    for direction in path:
        cells.append(cells[-1].step(direction))
    return cells


def test_food_one_cell_below_head():
    perception = _perception(5, 5, head=(2, 2), food=(2, 3))
    assert list(find_path(perception)) == [Direction.DOWN]


def test_returns_a_deque():
    perception = _perception(5, 5, head=(2, 2), food=(2, 3))
    assert isinstance(find_path(perception), deque)


def test_unique_straight_path():
    perception = _perception(5, 5, head=(0, 0), food=(4, 0))
    assert list(find_path(perception)) == [Direction.RIGHT] * 4


@pytest.mark.parametrize(
    "size,head,food",
    [
        ((5, 5), (0, 0), (4, 4)),
        ((6, 4), (5, 3), (0, 0)),
        ((7, 7), (3, 3), (6, 1)),
        ((3, 8), (1, 0), (2, 7)),
        ((10, 10), (9, 0), (0, 9)),
    ],
)
def test_path_is_shortest_and_ends_on_food(size, head, food):
    width, height = size
    perception = _perception(width, height, head=head, food=food)
    path = find_path(perception)

    manhattan = abs(head[0] - food[0]) + abs(head[1] - food[1])
    assert len(path) == manhattan
    cells = _walk(Position(*head), path)
    assert cells[-1] == Position(*food)
    for cell in cells:
        assert perception.in_bounds(cell)
    for a, b in zip(cells, cells[1:]):
        assert abs(a.x - b.x) + abs(a.y - b.y) == 1


def test_tie_break_prefers_fixed_neighbour_order():
    # Both (1,0) and (0,1) are one step from the food; reconstruction scans
    # (x+1,y), (x-1,y), (x,y+1), (x,y-1) from the food and takes (0,1) first.
    perception = _perception(3, 3, head=(0, 0), food=(1, 1))
    assert list(find_path(perception)) == [Direction.DOWN, Direction.RIGHT]


def test_tie_break_is_stable_across_calls():
    perception = _perception(6, 6, head=(1, 1), food=(4, 4))
    first = list(find_path(perception))
    for _ in range(5):
        assert list(find_path(perception)) == first


def test_path_routes_around_obstacles():
    wall = [(2, 0), (2, 1), (2, 2), (2, 3)]
    perception = _perception(5, 5, head=(0, 2), food=(4, 2), blocked=wall)
    path = find_path(perception)

    assert len(path) == 8
    cells = _walk(Position(0, 2), path)
    assert cells[-1] == Position(4, 2)
    assert Position(2, 4) in cells
    assert not any(cell.as_tuple() in wall for cell in cells)


def test_enclosed_food_yields_empty_path():
    ring = [(1, 2), (3, 2), (2, 1), (2, 3)]
    perception = _perception(5, 5, head=(0, 0), food=(2, 2), blocked=ring)
    assert list(find_path(perception)) == []


def test_enclosed_head_yields_empty_path():
    perception = _perception(4, 4, head=(0, 0), food=(3, 3), blocked=[(1, 0), (0, 1)])
    assert list(find_path(perception)) == []


def test_missing_food_yields_empty_path():
    perception = _perception(4, 4, head=(0, 0), food=None)
    assert list(find_path(perception)) == []


def test_direction_between_points_from_origin_to_target():
    current = Position(2, 2)
    assert direction_between(Position(3, 2), current) == Direction.LEFT
    assert direction_between(Position(1, 2), current) == Direction.RIGHT
    assert direction_between(Position(2, 3), current) == Direction.UP
    assert direction_between(Position(2, 1), current) == Direction.DOWN
    assert direction_between(current, current) is None
    assert direction_between(Position(0, 0), Position(1, 1)) is None


def test_perception_reports_free_directions_in_fixed_order():
    perception = _perception(3, 3, head=(0, 1), food=(2, 2), blocked=[(0, 0)])
    assert perception.free_directions == [Direction.DOWN, Direction.RIGHT]
    assert perception.neighbor(Direction.LEFT) is None
    assert isinstance(perception.neighbor(Direction.UP), Segment)
