from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from .grid import Direction, Position
from .perception import Perception

FOOD_LEVEL = -1
HEAD_LEVEL = 1
UNVISITED = 0

# BFS expansion order.
_EXPAND_OFFSETS = ((-1, 0), (1, 0), (0, 1), (0, -1))
# Reconstruction order; the first match wins when several steps are equally short.
_TRACE_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def direction_between(origin: Position, target: Position) -> Optional[Direction]:
    """Direction of a single step that leads from ``origin`` to ``target``."""
    dx = target.x - origin.x
    dy = target.y - origin.y
    if (dx, dy) == (1, 0):
        return Direction.RIGHT
    if (dx, dy) == (-1, 0):
        return Direction.LEFT
    if (dx, dy) == (0, 1):
        return Direction.DOWN
    if (dx, dy) == (0, -1):
        return Direction.UP
    return None


def find_path(perception: Perception) -> Deque[Direction]:
    """Shortest direction sequence from the head to the food.

    The food cell is traversable, every other occupied cell is a wall. An empty
    deque means the food is unknown or cannot be reached.
    """
    food = perception.food
    if food is None:
        return deque()
    levels = _level_matrix(perception, food)
    if levels is None:
        return deque()
    return _trace_back(perception, levels, food)


def _level_matrix(perception: Perception, food: Position) -> Optional[List[List[int]]]:
    occupancy = perception.occupancy
    head = perception.head
    levels = [[UNVISITED] * perception.height for _ in range(perception.width)]
    levels[food.x][food.y] = FOOD_LEVEL
    levels[head.x][head.y] = HEAD_LEVEL

    queue: Deque[Position] = deque([head])
    while queue:
        current = queue.popleft()
        level = levels[current.x][current.y]
        for dx, dy in _EXPAND_OFFSETS:
            candidate = current.offset(dx, dy)
            if not perception.in_bounds(candidate):
                continue
            candidate_level = levels[candidate.x][candidate.y]
            if candidate_level == FOOD_LEVEL:
                return levels
            if candidate_level == UNVISITED and occupancy.get(candidate) is None:
                levels[candidate.x][candidate.y] = level + 1
                queue.append(candidate)
    return None


def _smallest_level_around(perception: Perception, levels: List[List[int]], point: Position) -> int:
    smallest = None
    for dx, dy in _TRACE_OFFSETS:
        neighbor = point.offset(dx, dy)
        if not perception.in_bounds(neighbor):
            continue
        level = levels[neighbor.x][neighbor.y]
        if level > 0 and (smallest is None or level < smallest):
            smallest = level
    if smallest is None:
        raise RuntimeError(f"food at {point} was reached but has no levelled neighbour")
    return smallest


def _trace_back(perception: Perception, levels: List[List[int]], food: Position) -> Deque[Direction]:
    path: Deque[Direction] = deque()
    current = food
    wanted = _smallest_level_around(perception, levels, food)
    while levels[current.x][current.y] != HEAD_LEVEL:
        for dx, dy in _TRACE_OFFSETS:
            neighbor = current.offset(dx, dy)
            if perception.in_bounds(neighbor) and levels[neighbor.x][neighbor.y] == wanted:
                # Walking backwards: the forward step goes from neighbor to current.
                path.appendleft(direction_between(neighbor, current))
                current = neighbor
                wanted -= 1
                break
        else:
            raise RuntimeError(f"no level {wanted} cell next to {current}")
    return path
