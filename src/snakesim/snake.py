from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from .entities import Food, Segment, SegmentRole
from .grid import Direction, Position
from .pathfinding import find_path
from .perception import Perception
from .rng import DeterministicRng

MAX_SIZE = 8

# Checked in this order; the first adjacent food wins.
EAT_PRIORITY = (Direction.DOWN, Direction.UP, Direction.LEFT, Direction.RIGHT)


class ActionType(str, Enum):
    STAY = "Stay"
    MOVE = "Move"
    EAT = "Eat"
    REPRODUCE = "Reproduce"


@dataclass(frozen=True, slots=True)
class Action:
    type: ActionType
    direction: Optional[Direction] = None
    fallback: bool = False

    @classmethod
    def stay(cls) -> "Action":
        return cls(ActionType.STAY)

    @classmethod
    def reproduce(cls) -> "Action":
        return cls(ActionType.REPRODUCE)

    @classmethod
    def eat(cls, direction: Direction) -> "Action":
        return cls(ActionType.EAT, direction)

    @classmethod
    def move(cls, direction: Direction, fallback: bool = False) -> "Action":
        return cls(ActionType.MOVE, direction, fallback)


class Snake:
    """A chain of segments, head at index 0, with a cached path to the food."""

    def __init__(self, id: int = 0, max_size: int = MAX_SIZE) -> None:
        if max_size < 2 or max_size % 2:
            raise ValueError(f"max_size must be an even number >= 2, got {max_size}")
        self.id = id
        self.max_size = max_size
        self._segments: Deque[Segment] = deque()
        self.path: Optional[Deque[Direction]] = None
        self.path_stale = True

    @classmethod
    def from_positions(cls, positions: Iterable[Position], id: int = 0, max_size: int = MAX_SIZE) -> "Snake":
        snake = cls(id=id, max_size=max_size)
        for position in positions:
            snake._append(Segment(position))
        return snake

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    @property
    def positions(self) -> List[Position]:
        return [segment.position for segment in self._segments]

    @property
    def head(self) -> Segment:
        return self._segments[0]

    @property
    def tail(self) -> Segment:
        return self._segments[-1]

    @property
    def size(self) -> int:
        return len(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def invalidate_path(self) -> None:
        self.path_stale = True

    def _append(self, segment: Segment) -> None:
        segment.role = SegmentRole.BODY if self._segments else SegmentRole.HEAD
        self._segments.append(segment)

    def _prepend(self, segment: Segment) -> None:
        if self._segments:
            self._segments[0].role = SegmentRole.BODY
        segment.role = SegmentRole.HEAD
        self._segments.appendleft(segment)

    def _pop_tail(self) -> Segment:
        return self._segments.pop()

    def move(self, direction: Direction) -> None:
        target = self.head.position.step(direction)
        segment = self._pop_tail()
        segment.position = target
        self._prepend(segment)

    def eat(self, food: Food) -> Segment:
        segment = Segment(food.position)
        self._prepend(segment)
        return segment

    def reproduce(self, new_id: int) -> "Snake":
        child = Snake(id=new_id, max_size=self.max_size)
        for _ in range(self.max_size // 2):
            child._append(self._pop_tail())
        return child

    def choose_action(self, perception: Perception, rng: DeterministicRng) -> Action:
        if self.size == self.max_size:
            return Action.reproduce()
        for direction in EAT_PRIORITY:
            if perception.is_food(direction):
                return Action.eat(direction)

        free_directions = perception.free_directions
        if not free_directions:
            return Action.stay()

        if self.path is None or self.path_stale:
            self.path = find_path(perception)
            self.path_stale = False
        if self.path:
            if self.path[0] in free_directions:
                return Action.move(self.path.popleft())
            self.path = find_path(perception)
            if self.path and self.path[0] in free_directions:
                return Action.move(self.path.popleft())

        self.path_stale = True
        return Action.move(rng.choice(free_directions), fallback=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "length": self.size,
            "head": list(self.head.position.as_tuple()),
            "segments": [list(position.as_tuple()) for position in self.positions],
            "path_length": len(self.path) if self.path is not None else 0,
            "path_stale": self.path_stale,
        }

    def __repr__(self) -> str:
        return f"Snake(id={self.id}, size={self.size}, head={self.head.position})"
