from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Tuple

from .grid import Position

Color = Tuple[int, int, int]

HEAD_COLOR: Color = (0, 0, 255)
BODY_COLOR: Color = (255, 0, 0)
FOOD_COLOR: Color = (0, 255, 0)


class SegmentRole(str, Enum):
    HEAD = "Head"
    BODY = "Body"


class Shape(str, Enum):
    SQUARE = "square"
    SMALL_SQUARE = "small_square"


@dataclass(frozen=True, slots=True)
class RenderData:
    position: Position
    color: Color
    shape: Shape


class Drawable(Protocol):
    def render_data(self) -> RenderData: ...


# eq=False keeps identity hashing: two segments on the same cell are still
# different entities in the drawable set.
@dataclass(slots=True, eq=False)
class Segment:
    position: Position
    role: SegmentRole = SegmentRole.BODY

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    def render_data(self) -> RenderData:
        color = HEAD_COLOR if self.role is SegmentRole.HEAD else BODY_COLOR
        return RenderData(self.position, color, Shape.SQUARE)


@dataclass(slots=True, eq=False)
class Food:
    position: Position

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    def render_data(self) -> RenderData:
        return RenderData(self.position, FOOD_COLOR, Shape.SMALL_SQUARE)
