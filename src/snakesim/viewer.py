from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

import pygame

from .config import SimulationConfig
from .entities import Color, RenderData, Shape
from .world import World

logger = logging.getLogger(__name__)

MIN_SPEED = 0.1
MAX_SPEED = 5.0


class GridPanel:
    """Draws grid cells onto a pygame surface."""

    def __init__(
        self,
        surface: pygame.Surface,
        grid_width: int,
        grid_height: int,
        square_size: int,
        background: Color = (255, 255, 255),
        grid_color: Color = (200, 200, 200),
    ) -> None:
        self.surface = surface
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.square_size = square_size
        self.background = background
        self.grid_color = grid_color

    @staticmethod
    def pixel_size(grid_width: int, grid_height: int, square_size: int) -> tuple[int, int]:
        return grid_width * square_size, grid_height * square_size

    def clear(self) -> None:
        self.surface.fill(self.background)

    def draw_grid(self) -> None:
        width, height = self.pixel_size(self.grid_width, self.grid_height, self.square_size)
        for x in range(self.grid_width + 1):
            px = x * self.square_size
            pygame.draw.line(self.surface, self.grid_color, (px, 0), (px, height))
        for y in range(self.grid_height + 1):
            py = y * self.square_size
            pygame.draw.line(self.surface, self.grid_color, (0, py), (width, py))

    def draw_square(self, x: int, y: int, color: Color) -> None:
        size = self.square_size
        pygame.draw.rect(self.surface, color, pygame.Rect(x * size, y * size, size, size))

    def draw_small_square(self, x: int, y: int, color: Color) -> None:
        size = self.square_size
        inset = max(1, size // 4)
        pygame.draw.rect(
            self.surface,
            color,
            pygame.Rect(x * size + inset, y * size + inset, size - 2 * inset, size - 2 * inset),
        )

    def draw_render_data(self, items: Iterable[RenderData]) -> None:
        for data in items:
            if data.shape is Shape.SMALL_SQUARE:
                self.draw_small_square(data.position.x, data.position.y, data.color)
            else:
                self.draw_square(data.position.x, data.position.y, data.color)


def redraw(panel: GridPanel, world: World, show_grid: bool = True) -> None:
    panel.clear()
    if show_grid:
        panel.draw_grid()
    panel.draw_render_data(world.drawables.render_data())


def run_viewer(config: SimulationConfig, max_ticks: Optional[int] = None) -> World:
    viewer = config.viewer
    world = World(config)
    pygame.init()
    try:
        screen = pygame.display.set_mode(GridPanel.pixel_size(world.width, world.height, viewer.square_size))
        pygame.display.set_caption("Snake Simulator")
        panel = GridPanel(
            screen,
            world.width,
            world.height,
            viewer.square_size,
            background=viewer.background,
            grid_color=viewer.grid_color,
        )
        clock = pygame.time.Clock()
        running = True
        paused = False
        speed = 1.0
        logger.info("Viewer started at %d ticks per second", viewer.frame_rate)

        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                        logger.info("Paused" if paused else "Resumed")
                    elif event.key == pygame.K_r:
                        world.reset()
                        logger.info("World reset")
                    elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                        speed = min(MAX_SPEED, speed * 2.0)
                    elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                        speed = max(MIN_SPEED, speed / 2.0)

            if not paused:
                world.tick()
                if max_ticks is not None and world.tick_count >= max_ticks:
                    running = False

            redraw(panel, world, viewer.show_grid)
            pygame.display.flip()
            clock.tick(viewer.frame_rate * speed)
    finally:
        pygame.quit()
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Snake simulation viewer")
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(name)s: %(message)s")

    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed
    run_viewer(config, max_ticks=args.ticks)


if __name__ == "__main__":
    main()
