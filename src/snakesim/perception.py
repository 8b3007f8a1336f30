from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .entities import Food, Segment
from .grid import Direction, GridOccupancy, Position

# Order in which free directions are reported.
PERCEPTION_ORDER = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


@dataclass(slots=True)
class Perception:
    """What one snake sees for one decision. Discarded afterwards."""

    width: int
    height: int
    neighbors: Dict[Direction, Optional[Segment | Food]]
    free_directions: List[Direction]
    head: Position
    food: Optional[Position]
    occupancy: GridOccupancy

    def neighbor(self, direction: Direction) -> Optional[Segment | Food]:
        return self.neighbors.get(direction)

    def is_food(self, direction: Direction) -> bool:
        return isinstance(self.neighbors.get(direction), Food)

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height


def build_perception(head: Position, food: Optional[Position], occupancy: GridOccupancy) -> Perception:
    neighbors: Dict[Direction, Optional[Segment | Food]] = {}
    free_directions: List[Direction] = []
    for direction in PERCEPTION_ORDER:
        target = head.step(direction)
        occupant = occupancy.get(target)
        neighbors[direction] = occupant
        if occupant is None and occupancy.in_bounds(target):
            free_directions.append(direction)
    return Perception(
        width=occupancy.width,
        height=occupancy.height,
        neighbors=neighbors,
        free_directions=free_directions,
        head=head,
        food=food,
        occupancy=occupancy,
    )
