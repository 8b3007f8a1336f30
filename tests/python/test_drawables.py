from __future__ import annotations

from snakesim.drawables import DrawableSet
from snakesim.entities import BODY_COLOR, FOOD_COLOR, HEAD_COLOR, Food, RenderData, Shape
from snakesim.grid import Position
from snakesim.snake import Snake


def _snake() -> Snake:
    return Snake.from_positions([Position(3, 1), Position(2, 1), Position(1, 1)])


def test_add_snake_registers_every_segment():
    drawables = DrawableSet()
    snake = _snake()

    drawables.add_snake(snake)

    assert len(drawables) == 3
    assert all(segment in drawables for segment in snake.segments)


def test_render_data_covers_each_drawable_once():
    drawables = DrawableSet()
    drawables.add_snake(_snake())
    food = Food(Position(5, 4))
    drawables.add(food)

    data = drawables.render_data()

    assert len(data) == 4
    assert RenderData(Position(3, 1), HEAD_COLOR, Shape.SQUARE) in data
    assert RenderData(Position(1, 1), BODY_COLOR, Shape.SQUARE) in data
    assert RenderData(Position(5, 4), FOOD_COLOR, Shape.SMALL_SQUARE) in data

    drawables.discard(food)
    assert all(item.position != food.position for item in drawables.render_data())
