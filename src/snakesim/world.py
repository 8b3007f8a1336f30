from __future__ import annotations

import logging
from time import perf_counter
from typing import List, Optional

from .config import SimulationConfig
from .drawables import DrawableSet
from .entities import Food
from .grid import GridOccupancy, Position
from .perception import build_perception
from .rng import DeterministicRng
from .snake import Action, ActionType, Snake
from .types.metrics import TickMetrics
from .types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld

logger = logging.getLogger(__name__)

INITIAL_CHAIN = (Position(4, 1), Position(3, 1), Position(2, 1), Position(1, 1))


class World:
    """Owns the occupancy table and the snakes, and advances them one tick at a time."""

    def __init__(self, config: SimulationConfig, drawables: Optional[DrawableSet] = None, populate: bool = True):
        config.validate()
        self._config = config
        self._rng = DeterministicRng(config.seed)
        self._occupancy = GridOccupancy(config.grid_width, config.grid_height)
        self._drawables = drawables if drawables is not None else DrawableSet()
        self._agents: List[Snake] = []
        self._food: Optional[Food] = None
        self._next_id = 0
        self._tick = 0
        self._metrics: TickMetrics | None = None
        if populate:
            self.bootstrap()

    @property
    def width(self) -> int:
        return self._occupancy.width

    @property
    def height(self) -> int:
        return self._occupancy.height

    @property
    def agents(self) -> List[Snake]:
        return self._agents

    @property
    def food(self) -> Optional[Food]:
        return self._food

    @property
    def occupancy(self) -> GridOccupancy:
        return self._occupancy

    @property
    def drawables(self) -> DrawableSet:
        return self._drawables

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    @property
    def tick_count(self) -> int:
        return self._tick

    def bootstrap(self) -> None:
        self.register_agent(self.create_initial_agent())
        self.register_food(self.spawn_food())

    def reset(self) -> None:
        self._agents.clear()
        self._drawables.clear()
        self._occupancy.clear()
        self._rng.reset()
        self._food = None
        self._next_id = 0
        self._tick = 0
        self._metrics = None
        self.bootstrap()

    def create_initial_agent(self) -> Snake:
        return Snake.from_positions(INITIAL_CHAIN, id=self._allocate_id(), max_size=self._config.max_snake_size)

    def spawn_food(self, occupancy: Optional[GridOccupancy] = None) -> Food:
        table = occupancy if occupancy is not None else self._occupancy
        if not table.empty_cells():
            raise ValueError("No empty cell left to place food")
        while True:
            position = Position(self._rng.next_int(table.width), self._rng.next_int(table.height))
            if table.get(position) is None:
                return Food(position)

    def register_agent(self, snake: Snake) -> None:
        self._next_id = max(self._next_id, snake.id + 1)
        self._place(snake)
        self._agents.append(snake)
        self._drawables.add_snake(snake)

    def register_food(self, food: Food) -> None:
        self._occupancy.set(food.position, food)
        self._drawables.add(food)
        self._food = food

    def tick(self) -> TickMetrics:
        start = perf_counter()
        births = 0
        food_eaten = 0
        moves = 0
        fallback_moves = 0
        stays = 0

        for snake in list(self._agents):
            food_position = self._occupancy.find_food()
            snapshot = self._occupancy.copy()
            self._remove(snake)

            perception = build_perception(snake.head.position, food_position, snapshot)
            action = snake.choose_action(perception, self._rng)

            if action.type is ActionType.STAY:
                stays += 1
            elif action.type is ActionType.MOVE:
                snake.move(action.direction)
                moves += 1
                if action.fallback:
                    fallback_moves += 1
            elif action.type is ActionType.REPRODUCE:
                self._reproduce(snake)
                births += 1
            elif action.type is ActionType.EAT:
                if self._eat(snake, action, snapshot):
                    food_eaten += 1

            self._place(snake)

        self._tick += 1
        duration_ms = (perf_counter() - start) * 1000.0
        self._metrics = self._build_metrics(births, food_eaten, moves, fallback_moves, stays, duration_ms)
        return self._metrics

    def invalidate_paths(self) -> None:
        for snake in self._agents:
            snake.invalidate_path()

    def snapshot(self) -> Snapshot:
        food = list(self._food.position.as_tuple()) if self._food is not None else None
        return Snapshot(
            tick=self._tick,
            metrics=self._metrics,
            agents=[snake.to_dict() for snake in self._agents],
            food=food,
            world=SnapshotWorld(width=self.width, height=self.height),
            metadata=SnapshotMetadata(
                seed=self._config.seed,
                frame_rate=self._config.viewer.frame_rate,
                max_snake_size=self._config.max_snake_size,
                config_version=self._config.config_version,
            ),
        )

    def _allocate_id(self) -> int:
        agent_id = self._next_id
        self._next_id += 1
        return agent_id

    def _place(self, snake: Snake) -> None:
        for segment in snake.segments:
            self._occupancy.set(segment.position, segment)

    def _remove(self, snake: Snake) -> None:
        for segment in snake.segments:
            self._occupancy.set(segment.position, None)

    def _reproduce(self, snake: Snake) -> None:
        child = snake.reproduce(self._allocate_id())
        self.register_agent(child)
        logger.debug("Snake %d split off snake %d at %s", snake.id, child.id, child.head.position)

    def _eat(self, snake: Snake, action: Action, snapshot: GridOccupancy) -> bool:
        target = snake.head.position.step(action.direction)
        eaten = snapshot.get(target)
        if not isinstance(eaten, Food):
            return False

        self._drawables.add(snake.eat(eaten))
        self._drawables.discard(eaten)
        self._occupancy.set(eaten.position, None)
        if self._food is eaten:
            self._food = None
        logger.debug("Snake %d ate food at %s (size %d)", snake.id, eaten.position, snake.size)

        try:
            food = self.spawn_food(snapshot)
        except ValueError:
            logger.warning("No empty cell left for food after tick %d", self._tick)
        else:
            self.register_food(food)
            logger.debug("Food respawned at %s", food.position)

        self.invalidate_paths()
        return True

    def _build_metrics(
        self,
        births: int,
        food_eaten: int,
        moves: int,
        fallback_moves: int,
        stays: int,
        duration_ms: float,
    ) -> TickMetrics:
        lengths = [snake.size for snake in self._agents]
        total = sum(lengths)
        return TickMetrics(
            tick=self._tick,
            population=len(lengths),
            births=births,
            food_eaten=food_eaten,
            moves=moves,
            fallback_moves=fallback_moves,
            stays=stays,
            total_segments=total,
            average_length=total / len(lengths) if lengths else 0.0,
            min_length=min(lengths) if lengths else 0,
            max_length=max(lengths) if lengths else 0,
            tick_duration_ms=duration_ms,
        )
